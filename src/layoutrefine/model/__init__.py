from layoutrefine.model.primitives import LayoutNode, Vector

__all__ = ["LayoutNode", "Vector"]

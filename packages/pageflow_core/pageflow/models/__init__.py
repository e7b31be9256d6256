"""Content tree model."""

from .content import ContentNode, FloatMode, NodeKind

__all__ = ["ContentNode", "FloatMode", "NodeKind"]

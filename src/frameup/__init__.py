"""FrameUp - batch video delivery and approval engine."""

__version__ = "0.1.0"

"""
Exception types raised by the rendering engine.

License: MIT
"""


class VetReportError(Exception):
    """Base class for rendering engine errors."""


class EmptyReportError(VetReportError, ValueError):
    """A consultation report was requested without any documents."""

    def __init__(self, message: str = "Cannot assemble an empty report: at least one document is required"):
        super().__init__(message)


class LayoutOverflowError(VetReportError):
    """A single block is taller than the usable height of an empty page."""

    def __init__(self, height: float, available: float):
        self.height = height
        self.available = available
        super().__init__(
            f"Block of height {height:.1f}pt does not fit on an empty page "
            f"({available:.1f}pt available)"
        )


class RenderStateError(VetReportError):
    """A write was attempted on a context that has already been finalized."""

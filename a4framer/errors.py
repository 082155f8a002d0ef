class FramerError(Exception):
    """Base class for a4framer errors."""


class SurfaceUnavailableError(FramerError):
    """The output surface could not be allocated at all."""


class BatchInProgressError(FramerError):
    """A batch export is already running on this exporter."""

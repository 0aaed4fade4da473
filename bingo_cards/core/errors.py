from __future__ import annotations


class RenderError(RuntimeError):
    """A render request cannot complete; no document is produced."""


class JokerRasterError(RenderError):
    pass


class JokerUnavailableError(RenderError):
    def __init__(self, message: str = "joker image unavailable") -> None:
        super().__init__(message)


class CardShapeError(ValueError):
    pass

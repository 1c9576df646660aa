"""Exceptions raised by the segmentation pipeline."""


class InvalidParameterError(ValueError):
    """A parameter is out of range, has the wrong parity or is unknown."""


class ShapeMismatchError(ValueError):
    """Two masks that must share H x W do not."""

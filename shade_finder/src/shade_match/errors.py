from __future__ import annotations


class ShadeMatchError(Exception):
    pass


class InvalidColorInput(ShadeMatchError, ValueError):
    """An RGB channel outside [0, 255], or a malformed catalog record."""


class EmptyCatalogError(ShadeMatchError, LookupError):
    pass


class NoSampleError(ShadeMatchError, RuntimeError):
    """The image sampler kept no usable pixels."""

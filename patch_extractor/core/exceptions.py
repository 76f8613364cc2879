"""Patch extraction errors."""


class PatchExtractionError(Exception):
    """Base class for all patch extraction errors."""


class InvalidPatchSizeError(PatchExtractionError, ValueError):
    """Patch does not fit inside the sampling region."""


class ImageDecodeError(PatchExtractionError, ValueError):
    """Source image has no usable pixel data."""


class BufferAllocationError(PatchExtractionError, RuntimeError):
    """Destination pixel buffer could not be allocated."""


class LockFailedError(PatchExtractionError, RuntimeError):
    """Read access to a pixel buffer could not be acquired."""


class CropOutOfBoundsError(PatchExtractionError, ValueError):
    """Crop rectangle extends past the source buffer."""


class DegenerateGridError(PatchExtractionError, ValueError):
    """Grid dimensions cannot produce a uniform layout."""

# errors.py
"""
Error kinds raised by blursquare.

The collaborator errors (access, decode, encode, output path, prompt) are
reported to the user and end the process with a non-zero status.
UserDeclinedOverwrite is a graceful abort and ends with status 0.
GeometryError and InvalidBlurIntensity come from the pixel pipeline itself
and indicate a programming or configuration mistake.
"""


class BlurSquareError(Exception):
    """Base class for every error raised by this package."""


class ImageAccessError(BlurSquareError):
    """Source file or clipboard could not be reached."""


class ImageDecodeError(BlurSquareError):
    """Bytes could not be turned into a pixel buffer."""


class ImageEncodeError(BlurSquareError):
    """Final buffer could not be written to the target format/path."""


class OutputPathInvalid(BlurSquareError):
    """Target path is a directory or a symbolic link."""


class UserDeclinedOverwrite(BlurSquareError):
    """User answered "no" when asked to overwrite. Not a failure."""


class PromptIOError(BlurSquareError):
    """Reading the confirmation answer failed."""


class GeometryError(BlurSquareError):
    """Crop or overlay rectangle does not line up with the buffers."""


class InvalidBlurIntensity(BlurSquareError, ValueError):
    """Blur intensity <= 0 while the engine is configured to reject it."""


class ConfigurationError(BlurSquareError):
    """An environment setting could not be parsed."""

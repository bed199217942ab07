from __future__ import annotations


class PassportSheetError(Exception):
    """Base class for errors that can be shown to the user as-is."""


class LayoutError(PassportSheetError, ValueError):
    """Layout parameters violate the planner's preconditions."""


class ImageDecodeError(PassportSheetError):
    """The source image could not be opened or fully decoded."""


class FaceNotFoundError(PassportSheetError):
    """No usable face was found when suggesting a crop."""

# mapfolio/errors.py
"""Exception hierarchy for project loading and editing."""

from __future__ import annotations

from typing import Optional


class MapfolioError(Exception):
    """Base class for every error raised while loading or editing a project."""

    def __init__(self, message: str, file_name: Optional[str] = None):
        self.file_name = file_name
        if file_name:
            message = f"{file_name}: {message}"
        super().__init__(message)


class MalformedAssetError(MapfolioError):
    """Raised when an asset file is not valid JSON or fails validation."""


class UnsupportedSymbolTypeError(MalformedAssetError):
    """Raised when a symbol declares a type the decoder cannot classify."""


class UnsupportedRendererTypeError(MalformedAssetError):
    """Raised when a renderer declares a type the decoder cannot classify."""


class MalformedFeatureSetError(MalformedAssetError):
    """Raised when a feature set lacks ``fields`` or ``features``."""


class UnresolvedSymbolReferenceError(MapfolioError):
    """Raised when a renderer names a symbol that is not loaded."""

    def __init__(self, reference: str, file_name: Optional[str] = None):
        self.reference = reference
        super().__init__(f"symbol {reference!r} is not loaded", file_name)


class LoadOrderError(MapfolioError):
    """Raised when an asset is loaded before the stages it depends on."""


class LayerNotEditableError(MapfolioError):
    """Raised when edits are applied to a layer with editing disabled."""


class UnknownAssetKindError(MapfolioError, ValueError):
    """Raised for an asset kind name that is not one of the four kinds."""

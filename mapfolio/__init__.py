"""
MAPFOLIO - file-backed map projects.

A project directory holds symbols, renderers, feature sets and layers as
Esri JSON files.  Loading a project resolves renderer symbol references,
links layers to their feature sets and renderers, and writes layer edits
back to the feature files.

Main Components:
    - mapfolio.project: Project loader, asset registry and edit sync
    - mapfolio.symbology: Symbol and renderer models, reference substitution
    - mapfolio.features: Feature sets, extents and editable layers
    - mapfolio.storage: Async directory/file handles
    - mapfolio.cli: ``mapfolio`` command line
"""

__version__ = "0.3.0"

from .config import MapfolioConfig, get_config
from .errors import (
    LayerNotEditableError,
    LoadOrderError,
    MalformedAssetError,
    MalformedFeatureSetError,
    MapfolioError,
    UnknownAssetKindError,
    UnresolvedSymbolReferenceError,
    UnsupportedRendererTypeError,
    UnsupportedSymbolTypeError,
)
from .project import LoadStage, Project, ProjectRegistry

__all__ = [
    "__version__",
    "MapfolioConfig",
    "get_config",
    "MapfolioError",
    "MalformedAssetError",
    "MalformedFeatureSetError",
    "UnsupportedSymbolTypeError",
    "UnsupportedRendererTypeError",
    "UnresolvedSymbolReferenceError",
    "LoadOrderError",
    "LayerNotEditableError",
    "UnknownAssetKindError",
    "LoadStage",
    "Project",
    "ProjectRegistry",
]

"""Project assets, load pipeline and edit synchronization."""

from .assets import (
    AssetRecord,
    AssetSource,
    FeatureSetAsset,
    LayerAsset,
    LayerDefinition,
    RendererAsset,
    SymbolAsset,
    asset_name,
)
from .loaders import LOADERS, load_feature_set, load_layer, load_renderer, load_symbol, read_asset
from .project import Project
from .registry import ProjectRegistry
from .stages import PIPELINE, LoadStage
from .sync import EditSyncChannel

__all__ = [
    "AssetRecord",
    "AssetSource",
    "FeatureSetAsset",
    "LayerAsset",
    "LayerDefinition",
    "RendererAsset",
    "SymbolAsset",
    "asset_name",
    "LOADERS",
    "load_feature_set",
    "load_layer",
    "load_renderer",
    "load_symbol",
    "read_asset",
    "Project",
    "ProjectRegistry",
    "PIPELINE",
    "LoadStage",
    "EditSyncChannel",
]

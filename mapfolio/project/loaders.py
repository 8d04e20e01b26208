# mapfolio/project/loaders.py
"""Async asset loaders: read a file, resolve its references, build the asset.

Every loader checks with the registry that the stages it depends on are
complete, does its I/O, constructs the asset and registers it.  Nothing is
registered when a loader raises.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, Optional

from pydantic import ValidationError

from ..config import MapfolioConfig, get_config
from ..errors import MalformedAssetError, UnresolvedSymbolReferenceError
from ..features.layer import EditableLayer
from ..features.models import decode_feature_set
from ..storage.base import FileHandle
from ..symbology.references import collect_symbol_references, substitute_symbol_references
from ..symbology.renderers import decode_renderer
from ..symbology.symbols import decode_symbol
from ..utils.logging import get_logger, log_asset_loaded, log_soft_miss
from .assets import (
    AssetRecord,
    AssetSource,
    FeatureSetAsset,
    LayerAsset,
    LayerDefinition,
    RendererAsset,
    SymbolAsset,
)
from .registry import ProjectRegistry
from .stages import LoadStage
from .sync import EditSyncChannel

logger = get_logger(__name__)


async def read_asset(handle: FileHandle) -> AssetSource:
    """Read and JSON-decode the file behind ``handle``.

    Always reads the file afresh.  Storage errors propagate unchanged; text
    that is not UTF-8 or not JSON raises :class:`MalformedAssetError`.
    """
    try:
        text = await handle.read_text()
    except UnicodeDecodeError as exc:
        raise MalformedAssetError(f"not UTF-8 text: {exc}", handle.name) from exc
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise MalformedAssetError(f"invalid JSON: {exc}", handle.name) from exc
    logger.debug(f"Read {handle.name} ({len(text)} chars)")
    return AssetSource(handle=handle, raw_text=text, parsed_json=parsed)


async def load_symbol(handle: FileHandle, registry: ProjectRegistry) -> SymbolAsset:
    registry.require_inputs(LoadStage.SYMBOLS, handle.name)
    source = await read_asset(handle)
    symbol = decode_symbol(source.parsed_json, source.file_name)
    asset = SymbolAsset(source, symbol)
    registry.register(asset)
    log_asset_loaded(logger, "Symbol", asset.name, symbol.type)
    return asset


async def load_renderer(handle: FileHandle, registry: ProjectRegistry) -> RendererAsset:
    registry.require_inputs(LoadStage.RENDERERS, handle.name)
    source = await read_asset(handle)

    used: dict[str, SymbolAsset] = {}

    def resolve(name: str) -> dict[str, Any]:
        symbol = registry.symbol(name)
        if symbol is None:
            raise UnresolvedSymbolReferenceError(name, source.file_name)
        used.setdefault(symbol.name, symbol)
        logger.debug(f"{source.file_name}: symbol reference {name!r} -> {symbol.file_name}")
        return symbol.domain.to_json()

    resolved = substitute_symbol_references(source.parsed_json, resolve)
    renderer = decode_renderer(resolved, source.file_name)
    asset = RendererAsset(source, resolved, renderer, list(used.values()))
    registry.register(asset)
    log_asset_loaded(
        logger,
        "Renderer",
        asset.name,
        f"{renderer.type}, symbols: {', '.join(collect_symbol_references(source.parsed_json)) or 'none'}",
    )
    return asset


async def load_feature_set(handle: FileHandle, registry: ProjectRegistry) -> FeatureSetAsset:
    registry.require_inputs(LoadStage.FEATURES, handle.name)
    source = await read_asset(handle)
    feature_set = decode_feature_set(source.parsed_json, source.file_name)
    asset = FeatureSetAsset(source, feature_set)
    registry.register(asset)
    log_asset_loaded(
        logger,
        "Feature set",
        asset.name,
        f"{len(feature_set.features)} feature(s), {len(feature_set.fields)} field(s)",
    )
    return asset


async def load_layer(
    handle: FileHandle,
    registry: ProjectRegistry,
    config: Optional[MapfolioConfig] = None,
) -> LayerAsset:
    """Load a layer file and link it to its feature set and renderer.

    Missing references are tolerated: the layer is built without that part.
    When a feature set is linked, the edit-sync listener is attached before
    the layer is returned or registered.
    """
    cfg = config or get_config()
    registry.require_inputs(LoadStage.LAYERS, handle.name)
    source = await read_asset(handle)
    if not isinstance(source.parsed_json, dict):
        raise MalformedAssetError("layer definition must be a JSON object", source.file_name)
    try:
        definition = LayerDefinition.model_validate(source.parsed_json)
    except ValidationError as exc:
        raise MalformedAssetError(f"invalid layer definition: {exc}", source.file_name) from exc

    feature_asset = None
    if definition.feature_set is not None:
        feature_asset = registry.feature_set(definition.feature_set)
        if feature_asset is None:
            log_soft_miss(logger, source.file_name, "feature set", definition.feature_set)

    renderer_asset = None
    if definition.renderer is not None:
        renderer_asset = registry.renderer(definition.renderer)
        if renderer_asset is None:
            log_soft_miss(logger, source.file_name, "renderer", definition.renderer)

    editing_enabled = (
        definition.editing_enabled
        if definition.editing_enabled is not None
        else cfg.default_editing_enabled
    )
    live_layer = EditableLayer(
        source=feature_asset.domain if feature_asset is not None else None,
        renderer=renderer_asset.domain if renderer_asset is not None else None,
        editing_enabled=editing_enabled,
        title=source.file_name,
    )

    sync = None
    if feature_asset is not None:
        sync = EditSyncChannel(live_layer, feature_asset, json_indent=cfg.json_indent).attach()

    asset = LayerAsset(
        source,
        definition,
        live_layer,
        source_feature=feature_asset,
        renderer=renderer_asset,
        sync=sync,
    )
    registry.register(asset)
    log_asset_loaded(
        logger,
        "Layer",
        asset.name,
        f"features={feature_asset.name if feature_asset else '-'}, "
        f"renderer={renderer_asset.name if renderer_asset else '-'}, "
        f"editable={editing_enabled}",
    )
    return asset


AssetLoader = Callable[[FileHandle, ProjectRegistry], Awaitable[AssetRecord]]

LOADERS: dict[LoadStage, AssetLoader] = {
    LoadStage.SYMBOLS: load_symbol,
    LoadStage.RENDERERS: load_renderer,
    LoadStage.FEATURES: load_feature_set,
    LoadStage.LAYERS: load_layer,
}

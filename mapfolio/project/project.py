# mapfolio/project/project.py
"""Project loader: connects a project directory and runs the load pipeline.

A project root holds one subdirectory per asset kind::

    <root>/Symbols/    point, line, fill and text symbols
    <root>/Renderers/  renderers naming symbols
    <root>/Features/   feature collections
    <root>/Layers/     layers naming a feature set and a renderer

``Project.connect`` creates missing subdirectories and loads them in the
order of :data:`~mapfolio.project.stages.PIPELINE`.  The first failing file
aborts the whole load.
"""

from __future__ import annotations

import json
from os import PathLike
from typing import Any, Optional, Union

from ..config import MapfolioConfig, get_config
from ..errors import LoadOrderError, MalformedAssetError
from ..features.extent import Extent, union_extents
from ..storage.base import DirectoryHandle, FileHandle
from ..storage.local import LocalFile, open_directory
from ..utils.logging import get_logger, log_stage_complete, log_stage_start
from .assets import AssetRecord, LayerAsset, LayerDefinition
from .loaders import LOADERS, load_layer
from .registry import ProjectRegistry
from .stages import PIPELINE, LoadStage

logger = get_logger(__name__)


class Project:
    """A connected project directory and its loaded asset graph."""

    def __init__(
        self,
        root: DirectoryHandle,
        directories: dict[LoadStage, DirectoryHandle],
        registry: Optional[ProjectRegistry] = None,
        config: Optional[MapfolioConfig] = None,
    ):
        self.root = root
        self.directories = directories
        self.registry = registry if registry is not None else ProjectRegistry()
        self.config = config or get_config()
        self.loaded = False

    def __repr__(self) -> str:
        return f"Project({self.root.name!r}, {self.registry!r})"

    # ------------------------------------------------------------------ #
    #  Connect & load
    # ------------------------------------------------------------------ #

    @classmethod
    async def connect(
        cls,
        root: Union[DirectoryHandle, str, PathLike],
        config: Optional[MapfolioConfig] = None,
    ) -> "Project":
        """Open ``root``, ensure its four subdirectories exist and load every asset."""
        cfg = config or get_config()
        if isinstance(root, (str, PathLike)):
            root = await open_directory(root, create=True)
        logger.info(f"Connecting project {root.name}")

        directories: dict[LoadStage, DirectoryHandle] = {}
        for stage in PIPELINE:
            directories[stage] = await root.get_directory(
                cfg.directory_for(stage.value), create=True
            )

        project = cls(root, directories, config=cfg)
        await project.load()
        return project

    async def load(self) -> None:
        """Run every load stage in pipeline order."""
        for stage in PIPELINE:
            await self.load_stage(stage)
        self.loaded = True

        extent = self.extent
        logger.info(
            f"Project {self.root.name} loaded: "
            + ", ".join(f"{n} {k}" for k, n in self.registry.counts().items())
            + (f"; extent {extent.to_json()}" if extent else "; no extent")
        )

    async def load_stage(self, stage: LoadStage) -> list[AssetRecord]:
        """Load every file of one stage, then mark the stage complete."""
        if self.registry.is_complete(stage):
            raise LoadOrderError(f"{stage.label} already loaded")
        self.registry.require_inputs(stage)

        directory = self.directories[stage]
        log_stage_start(logger, stage.label, directory.name)
        loaded = []
        for handle in await self._stage_files(directory):
            loaded.append(await self._load_file(stage, handle))
        self.registry.complete(stage)
        log_stage_complete(logger, stage.label, len(loaded))
        return loaded

    async def _stage_files(self, directory: DirectoryHandle) -> list[FileHandle]:
        files = []
        async for entry in directory.entries():
            if entry.kind != "file":
                continue
            if self.config.skip_hidden and entry.name.startswith("."):
                continue
            files.append(entry)
        # Sorted by name; files of one kind never reference each other
        return sorted(files, key=lambda handle: handle.name)

    async def _load_file(self, stage: LoadStage, handle: FileHandle) -> AssetRecord:
        if stage is LoadStage.LAYERS:
            return await load_layer(handle, self.registry, self.config)
        return await LOADERS[stage](handle, self.registry)

    # ------------------------------------------------------------------ #
    #  Adding assets
    # ------------------------------------------------------------------ #

    async def add_asset(
        self,
        kind: Union[str, LoadStage],
        source: Union[FileHandle, str, PathLike],
    ) -> AssetRecord:
        """Copy an external file into the project and load it.

        The file keeps its name; an existing project file with that name is
        overwritten.
        """
        stage = kind if isinstance(kind, LoadStage) else LoadStage.from_kind(kind)
        if isinstance(source, (str, PathLike)):
            source = LocalFile(source)

        try:
            raw_text = await source.read_text()
        except UnicodeDecodeError as exc:
            raise MalformedAssetError(f"not UTF-8 text: {exc}", source.name) from exc
        directory = self.directories[stage]
        try:
            await directory.get_file(source.name)
            logger.warning(f"Overwriting {stage.label}/{source.name} with {source!r}")
        except FileNotFoundError:
            pass
        target = await directory.get_file(source.name, create=True)
        await target.write_text(raw_text)
        logger.info(f"Copied {source.name} into {stage.label}")
        return await self._load_file(stage, target)

    async def create_layer(
        self,
        name: str,
        feature_set: Optional[str] = None,
        renderer: Optional[str] = None,
        editing_enabled: bool = True,
    ) -> LayerAsset:
        """Write a new layer file into the Layers directory and load it."""
        file_name = name if name.lower().endswith(".json") else f"{name}.json"
        definition = LayerDefinition(
            feature_set=feature_set or None,
            renderer=renderer or None,
            editing_enabled=editing_enabled,
        )

        handle = await self.directories[LoadStage.LAYERS].get_file(file_name, create=True)
        await handle.write_text(json.dumps(definition.to_json()))
        logger.info(f"Created layer file {file_name}")
        return await load_layer(handle, self.registry, self.config)

    # ------------------------------------------------------------------ #
    #  Accessors
    # ------------------------------------------------------------------ #

    @property
    def symbols(self):
        return self.registry.symbols

    @property
    def renderers(self):
        return self.registry.renderers

    @property
    def feature_sets(self):
        return self.registry.feature_sets

    @property
    def layers(self):
        return self.registry.layers

    def layer(self, name: str) -> Optional[LayerAsset]:
        return self.registry.layer(name)

    @property
    def extent(self) -> Optional[Extent]:
        """Combined extent of every layer's feature set, for framing the map."""
        return union_extents(layer.extent() for layer in self.registry.layers)

    def summary(self) -> dict[str, Any]:
        """JSON-serializable overview of the loaded project."""
        extent = self.extent
        return {
            "root": self.root.name,
            "counts": self.registry.counts(),
            "symbols": [
                {"name": s.name, "type": s.domain.type} for s in self.registry.symbols
            ],
            "renderers": [
                {
                    "name": r.name,
                    "type": r.domain.type,
                    "symbols": [s.name for s in r.symbols],
                }
                for r in self.registry.renderers
            ],
            "feature_sets": [
                {
                    "name": f.name,
                    "geometry_type": f.domain.geometry_type,
                    "features": len(f.domain.features),
                    "fields": len(f.domain.fields),
                }
                for f in self.registry.feature_sets
            ],
            "layers": [
                {
                    "name": layer.name,
                    "title": layer.live_layer.title,
                    "feature_set": layer.source_feature.name if layer.source_feature else None,
                    "renderer": layer.renderer.name if layer.renderer else None,
                    "editing_enabled": layer.live_layer.editing_enabled,
                }
                for layer in self.registry.layers
            ],
            "extent": extent.to_json() if extent else None,
        }

# mapfolio/project/assets.py
"""Asset records: one JSON file plus the domain object decoded from it.

Constructors here are synchronous and do no I/O; they take a file that has
already been read and dependencies that have already been resolved.  The
async functions in :mod:`mapfolio.project.loaders` do the reading and
resolving and then call these constructors.
"""

from __future__ import annotations

import posixpath
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, ClassVar, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..features.layer import EditableLayer
from ..features.models import FeatureSet
from ..storage.base import FileHandle
from ..symbology.renderers import Renderer
from ..symbology.symbols import EsriJsonModel
from .stages import LoadStage

if TYPE_CHECKING:
    from .sync import EditSyncChannel

T = TypeVar("T")


def asset_name(file_name: str) -> str:
    """Return the name an asset is referenced by: its file name minus extension."""
    stem, _ext = posixpath.splitext(file_name)
    return stem or file_name


@dataclass
class AssetSource:
    """The contents of an asset file at the moment it was read."""

    handle: FileHandle
    raw_text: str
    parsed_json: Any

    @property
    def file_name(self) -> str:
        return self.handle.name

    @property
    def name(self) -> str:
        return asset_name(self.handle.name)


class AssetRecord(Generic[T]):
    """Base for the four asset kinds."""

    stage: ClassVar[LoadStage]

    def __init__(self, source: AssetSource, domain: T):
        self.handle = source.handle
        self.file_name = source.file_name
        self.name = source.name
        self.raw_text = source.raw_text
        self.parsed_json = source.parsed_json
        self.domain = domain

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class SymbolAsset(AssetRecord[EsriJsonModel]):
    stage = LoadStage.SYMBOLS


class RendererAsset(AssetRecord[Renderer]):
    """A renderer whose symbol references have been resolved.

    ``parsed_json`` holds the tree with inline symbols; ``source_json`` is
    the file's tree as written.
    """

    stage = LoadStage.RENDERERS

    def __init__(
        self,
        source: AssetSource,
        resolved_json: Any,
        domain: Renderer,
        symbols: list[SymbolAsset],
    ):
        super().__init__(source, domain)
        self.source_json = source.parsed_json
        self.parsed_json = resolved_json
        self.symbols = symbols


class FeatureSetAsset(AssetRecord[FeatureSet]):
    """Feature data backed by a file; the only asset kind that changes after load."""

    stage = LoadStage.FEATURES

    def replace(self, feature_set: FeatureSet) -> None:
        """Swap in a new feature set.  The caller must write it back to ``handle``."""
        self.domain = feature_set
        self.parsed_json = feature_set.to_json()


class LayerDefinition(BaseModel):
    """Contents of a layer file."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    feature_set: Optional[str] = Field(None, alias="featureSet")
    renderer: Optional[str] = None
    editing_enabled: Optional[bool] = Field(None, alias="editingEnabled")

    @field_validator("feature_set", "renderer", mode="before")
    @classmethod
    def _none_selection(cls, value: Any) -> Any:
        # Older layer files store an unselected reference as "" or the string "false"
        if value in ("", "false", False):
            return None
        return value

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LayerAsset(AssetRecord[LayerDefinition]):
    """A layer definition linked to its feature set and renderer."""

    stage = LoadStage.LAYERS

    def __init__(
        self,
        source: AssetSource,
        definition: LayerDefinition,
        live_layer: EditableLayer,
        source_feature: Optional[FeatureSetAsset] = None,
        renderer: Optional[RendererAsset] = None,
        sync: Optional["EditSyncChannel"] = None,
    ):
        super().__init__(source, definition)
        self.live_layer = live_layer
        self.source_feature = source_feature
        self.renderer = renderer
        self.sync = sync
        self._initial_snapshot = source_feature.domain if source_feature is not None else None

    @property
    def source_snapshot(self) -> Optional[FeatureSet]:
        """Feature set as of the last write-back (or as loaded, before any edit)."""
        if self.sync is not None and self.sync.snapshot is not None:
            return self.sync.snapshot
        return self._initial_snapshot

    def extent(self):
        snapshot = self.source_snapshot
        return snapshot.extent() if snapshot is not None else None

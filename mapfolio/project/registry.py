"""Per-project registry of loaded assets, keyed by kind and name."""

from __future__ import annotations

from typing import Optional

from ..errors import LoadOrderError
from ..utils.logging import get_logger
from .assets import (
    AssetRecord,
    FeatureSetAsset,
    LayerAsset,
    RendererAsset,
    SymbolAsset,
    asset_name,
)
from .stages import PIPELINE, LoadStage

logger = get_logger(__name__)


class ProjectRegistry:
    """Loaded assets of one project session.

    Besides holding assets, the registry tracks which load stages are
    complete so that an asset can only be loaded once every stage it looks
    names up in has finished.
    """

    def __init__(self) -> None:
        self._assets: dict[LoadStage, dict[str, AssetRecord]] = {stage: {} for stage in PIPELINE}
        self._complete: set[LoadStage] = set()

    def __repr__(self) -> str:
        counts = ", ".join(f"{stage.value}={len(self._assets[stage])}" for stage in PIPELINE)
        return f"ProjectRegistry({counts})"

    # ------------------------------------------------------------------ #
    #  Stage bookkeeping
    # ------------------------------------------------------------------ #

    def is_complete(self, stage: LoadStage) -> bool:
        return stage in self._complete

    def require_inputs(self, stage: LoadStage, file_name: Optional[str] = None) -> None:
        """Raise LoadOrderError unless every input stage of ``stage`` is complete."""
        pending = [dep for dep in stage.inputs if dep not in self._complete]
        if pending:
            names = ", ".join(dep.label for dep in pending)
            raise LoadOrderError(
                f"cannot load {stage.kind} before {names} finished loading", file_name
            )

    def complete(self, stage: LoadStage) -> None:
        self.require_inputs(stage)
        self._complete.add(stage)

    # ------------------------------------------------------------------ #
    #  Registration & lookup
    # ------------------------------------------------------------------ #

    def register(self, asset: AssetRecord) -> None:
        bucket = self._assets[asset.stage]
        if asset.name in bucket:
            # Last loaded wins
            logger.warning(
                f"Duplicate {asset.stage.kind} name {asset.name!r}: "
                f"{asset.file_name} replaces {bucket[asset.name].file_name}"
            )
        bucket[asset.name] = asset

    def get(self, stage: LoadStage, name: str) -> Optional[AssetRecord]:
        """Look an asset up by exact name; a trailing ``.json`` is also accepted."""
        bucket = self._assets[stage]
        found = bucket.get(name)
        if found is None and name.lower().endswith(".json"):
            found = bucket.get(asset_name(name))
        return found

    def symbol(self, name: str) -> Optional[SymbolAsset]:
        return self.get(LoadStage.SYMBOLS, name)  # type: ignore[return-value]

    def renderer(self, name: str) -> Optional[RendererAsset]:
        return self.get(LoadStage.RENDERERS, name)  # type: ignore[return-value]

    def feature_set(self, name: str) -> Optional[FeatureSetAsset]:
        return self.get(LoadStage.FEATURES, name)  # type: ignore[return-value]

    def layer(self, name: str) -> Optional[LayerAsset]:
        return self.get(LoadStage.LAYERS, name)  # type: ignore[return-value]

    def assets(self, stage: LoadStage) -> list[AssetRecord]:
        return list(self._assets[stage].values())

    @property
    def symbols(self) -> list[SymbolAsset]:
        return self.assets(LoadStage.SYMBOLS)  # type: ignore[return-value]

    @property
    def renderers(self) -> list[RendererAsset]:
        return self.assets(LoadStage.RENDERERS)  # type: ignore[return-value]

    @property
    def feature_sets(self) -> list[FeatureSetAsset]:
        return self.assets(LoadStage.FEATURES)  # type: ignore[return-value]

    @property
    def layers(self) -> list[LayerAsset]:
        return self.assets(LoadStage.LAYERS)  # type: ignore[return-value]

    def counts(self) -> dict[str, int]:
        return {stage.value: len(self._assets[stage]) for stage in PIPELINE}

"""The four project load stages and the order they run in."""

from __future__ import annotations

from enum import Enum

from ..errors import UnknownAssetKindError


class LoadStage(str, Enum):
    """One kind of asset, loaded from its own project subdirectory.

    ``inputs`` lists the stages whose assets a stage looks up by name; the
    registry refuses to load an asset before its input stages are complete.
    """

    SYMBOLS = "symbols"
    RENDERERS = "renderers"
    FEATURES = "features"
    LAYERS = "layers"

    @property
    def inputs(self) -> tuple["LoadStage", ...]:
        return _STAGE_INPUTS[self]

    @property
    def kind(self) -> str:
        """Singular asset kind name (``symbol``, ``renderer``, ``feature``, ``layer``)."""
        return _STAGE_KINDS[self]

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @classmethod
    def from_kind(cls, kind: str) -> "LoadStage":
        """Parse a kind name, singular or plural, case-insensitively."""
        key = kind.strip().lower()
        for stage, names in _KIND_ALIASES.items():
            if key in names:
                return stage
        raise UnknownAssetKindError(
            f"unknown asset kind {kind!r} (expected one of {', '.join(s.kind for s in PIPELINE)})"
        )


_STAGE_INPUTS = {
    LoadStage.SYMBOLS: (),
    LoadStage.RENDERERS: (LoadStage.SYMBOLS,),
    LoadStage.FEATURES: (),
    LoadStage.LAYERS: (LoadStage.FEATURES, LoadStage.RENDERERS),
}

_STAGE_KINDS = {
    LoadStage.SYMBOLS: "symbol",
    LoadStage.RENDERERS: "renderer",
    LoadStage.FEATURES: "feature",
    LoadStage.LAYERS: "layer",
}

_KIND_ALIASES = {
    LoadStage.SYMBOLS: {"symbol", "symbols"},
    LoadStage.RENDERERS: {"renderer", "renderers"},
    LoadStage.FEATURES: {"feature", "features", "feature_set", "featureset", "feature-set"},
    LoadStage.LAYERS: {"layer", "layers"},
}

# Stage order for a full project load.  Each stage runs to completion
# before the next begins.
PIPELINE: tuple[LoadStage, ...] = (
    LoadStage.SYMBOLS,
    LoadStage.RENDERERS,
    LoadStage.FEATURES,
    LoadStage.LAYERS,
)

# mapfolio/symbology/renderers.py
"""Pydantic models for renderer definitions in the Esri web-map JSON format.

Renderers are decoded after symbol-name references have been substituted,
so every ``symbol``/``defaultSymbol`` field here holds an inline symbol
object (or nothing).
"""

from __future__ import annotations

import math
from typing import Any, Iterator, List, Literal, Mapping, Optional

from pydantic import ValidationError, model_validator

from ..errors import MalformedAssetError, UnsupportedRendererTypeError
from .symbols import EsriJsonModel, Symbol


__all__ = [
    "Renderer",
    "SimpleRenderer",
    "UniqueValueInfo",
    "UniqueValueRenderer",
    "ClassBreakInfo",
    "ClassBreaksRenderer",
    "HeatmapRenderer",
    "RENDERER_TYPES",
    "GENERIC_RENDERER_TYPES",
    "decode_renderer",
]


_SYMBOL_KEYS = frozenset({"symbol", "defaultSymbol", "default_symbol"})


class SymbolSlotsModel(EsriJsonModel):
    """Base for objects with symbol slots; an empty reference string means no symbol."""

    @model_validator(mode="before")
    @classmethod
    def _blank_symbols_to_none(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                k: (None if k in _SYMBOL_KEYS and v == "" else v)
                for k, v in data.items()
            }
        return data


class Renderer(SymbolSlotsModel):
    """Common base for every renderer type."""

    type: str
    label: Optional[str] = None
    description: Optional[str] = None
    rotation_type: Optional[Literal["arithmetic", "geographic"]] = None
    rotation_expression: Optional[str] = None
    visual_variables: Optional[List[dict[str, Any]]] = None

    def symbol_for(self, attributes: Mapping[str, Any]) -> Optional[EsriJsonModel]:
        """Return the symbol this renderer draws a feature with, if any."""
        return None

    def iter_symbols(self) -> Iterator[EsriJsonModel]:
        """Yield every symbol the renderer can draw with."""
        return iter(())


# ---------------------------------------------------------------------------
# Simple
# ---------------------------------------------------------------------------

class SimpleRenderer(Renderer):
    """Draws every feature with the same symbol."""

    type: Literal["simple"] = "simple"
    symbol: Optional[Symbol] = None

    def symbol_for(self, attributes: Mapping[str, Any]) -> Optional[EsriJsonModel]:
        return self.symbol

    def iter_symbols(self) -> Iterator[EsriJsonModel]:
        if self.symbol is not None:
            yield self.symbol


# ---------------------------------------------------------------------------
# Unique value
# ---------------------------------------------------------------------------

class UniqueValueInfo(SymbolSlotsModel):
    value: Any = None
    label: Optional[str] = None
    description: Optional[str] = None
    symbol: Optional[Symbol] = None


class UniqueValueRenderer(Renderer):
    """Draws features by matching up to three attribute values."""

    type: Literal["uniqueValue"] = "uniqueValue"
    field1: Optional[str] = None
    field2: Optional[str] = None
    field3: Optional[str] = None
    field_delimiter: Optional[str] = None
    default_symbol: Optional[Symbol] = None
    default_label: Optional[str] = None
    unique_value_infos: List[UniqueValueInfo] = []

    def _key(self, attributes: Mapping[str, Any]) -> Optional[str]:
        fields = [f for f in (self.field1, self.field2, self.field3) if f]
        if not fields:
            return None
        values = [attributes.get(f) for f in fields]
        if len(values) == 1:
            return None if values[0] is None else str(values[0])
        delimiter = self.field_delimiter if self.field_delimiter is not None else ","
        return delimiter.join("" if v is None else str(v) for v in values)

    def symbol_for(self, attributes: Mapping[str, Any]) -> Optional[EsriJsonModel]:
        key = self._key(attributes)
        if key is not None:
            for info in self.unique_value_infos:
                if info.value is not None and str(info.value) == key:
                    return info.symbol
        return self.default_symbol

    def iter_symbols(self) -> Iterator[EsriJsonModel]:
        for info in self.unique_value_infos:
            if info.symbol is not None:
                yield info.symbol
        if self.default_symbol is not None:
            yield self.default_symbol


# ---------------------------------------------------------------------------
# Class breaks
# ---------------------------------------------------------------------------

class ClassBreakInfo(SymbolSlotsModel):
    class_min_value: Optional[float] = None
    class_max_value: float
    label: Optional[str] = None
    description: Optional[str] = None
    symbol: Optional[Symbol] = None


class ClassBreaksRenderer(Renderer):
    """Draws features by the numeric range an attribute value falls in."""

    type: Literal["classBreaks"] = "classBreaks"
    field: Optional[str] = None
    min_value: Optional[float] = None
    classification_method: Optional[str] = None
    normalization_type: Optional[
        Literal["esriNormalizeByField", "esriNormalizeByLog", "esriNormalizeByPercentOfTotal"]
    ] = None
    normalization_field: Optional[str] = None
    normalization_total: Optional[float] = None
    default_symbol: Optional[Symbol] = None
    default_label: Optional[str] = None
    class_break_infos: List[ClassBreakInfo] = []

    def _value(self, attributes: Mapping[str, Any]) -> Optional[float]:
        raw = attributes.get(self.field) if self.field else None
        if isinstance(raw, bool) or not isinstance(raw, (int, float)):
            return None
        value = float(raw)
        if self.normalization_type == "esriNormalizeByField":
            divisor = attributes.get(self.normalization_field) if self.normalization_field else None
            if not isinstance(divisor, (int, float)) or divisor == 0:
                return None
            value = value / divisor
        elif self.normalization_type == "esriNormalizeByLog":
            if value <= 0:
                return None
            value = math.log10(value)
        elif self.normalization_type == "esriNormalizeByPercentOfTotal":
            if not self.normalization_total:
                return None
            value = value / self.normalization_total * 100
        return None if math.isnan(value) else value

    def symbol_for(self, attributes: Mapping[str, Any]) -> Optional[EsriJsonModel]:
        value = self._value(attributes)
        if value is None:
            return self.default_symbol
        previous_max = self.min_value
        for index, info in enumerate(self.class_break_infos):
            lower = info.class_min_value if info.class_min_value is not None else previous_max
            upper = info.class_max_value
            if index == 0:
                inside = (lower is None or lower <= value) and value <= upper
            else:
                inside = (lower is None or lower < value) and value <= upper
            if inside:
                return info.symbol
            previous_max = upper
        return self.default_symbol

    def iter_symbols(self) -> Iterator[EsriJsonModel]:
        for info in self.class_break_infos:
            if info.symbol is not None:
                yield info.symbol
        if self.default_symbol is not None:
            yield self.default_symbol


# ---------------------------------------------------------------------------
# Heatmap
# ---------------------------------------------------------------------------

class HeatmapRenderer(Renderer):
    """Density surface; draws no per-feature symbols."""

    type: Literal["heatmap"] = "heatmap"
    field: Optional[str] = None
    blur_radius: Optional[float] = None
    max_pixel_intensity: Optional[float] = None
    min_pixel_intensity: Optional[float] = None
    color_stops: List[dict[str, Any]] = []


RENDERER_TYPES: dict[str, type[Renderer]] = {
    "simple": SimpleRenderer,
    "uniqueValue": UniqueValueRenderer,
    "classBreaks": ClassBreaksRenderer,
    "heatmap": HeatmapRenderer,
}

# Accepted as-is; decoded to the base model with no symbol lookup
GENERIC_RENDERER_TYPES = frozenset({"dotDensity", "dictionary", "pieChart"})


def decode_renderer(data: Any, source: Optional[str] = None) -> Renderer:
    """Decode a symbol-substituted renderer JSON object by its ``type``.

    ``dotDensity``, ``dictionary`` and ``pieChart`` decode to the base
    :class:`Renderer`, which keeps their extra keys.

    Raises
    ------
    UnsupportedRendererTypeError
        If ``data`` is not an object or declares no known ``type``.
    MalformedAssetError
        If the declared type is known but the object fails validation.
    """
    declared = data.get("type") if isinstance(data, dict) else None
    model = RENDERER_TYPES.get(declared) if isinstance(declared, str) else None
    if model is None and isinstance(declared, str) and declared in GENERIC_RENDERER_TYPES:
        model = Renderer
    if model is None:
        known = sorted(set(RENDERER_TYPES) | GENERIC_RENDERER_TYPES)
        raise UnsupportedRendererTypeError(
            f"unsupported renderer type {declared!r} (expected one of {known})",
            source,
        )
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedAssetError(f"invalid {declared} renderer: {exc}", source) from exc

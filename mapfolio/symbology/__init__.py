"""Symbol and renderer domain models plus renderer reference resolution."""

from .references import (
    SYMBOL_REFERENCE_KEYS,
    collect_symbol_references,
    substitute_symbol_references,
)
from .renderers import (
    GENERIC_RENDERER_TYPES,
    RENDERER_TYPES,
    ClassBreaksRenderer,
    HeatmapRenderer,
    Renderer,
    SimpleRenderer,
    UniqueValueRenderer,
    decode_renderer,
)
from .symbols import (
    SYMBOL_TYPES,
    CIMSymbolReference,
    EsriJsonModel,
    PictureFillSymbol,
    PictureMarkerSymbol,
    SimpleFillSymbol,
    SimpleLineSymbol,
    SimpleMarkerSymbol,
    Symbol,
    TextSymbol,
    decode_symbol,
)

__all__ = [
    "SYMBOL_REFERENCE_KEYS",
    "collect_symbol_references",
    "substitute_symbol_references",
    "GENERIC_RENDERER_TYPES",
    "RENDERER_TYPES",
    "ClassBreaksRenderer",
    "HeatmapRenderer",
    "Renderer",
    "SimpleRenderer",
    "UniqueValueRenderer",
    "decode_renderer",
    "SYMBOL_TYPES",
    "CIMSymbolReference",
    "EsriJsonModel",
    "PictureFillSymbol",
    "PictureMarkerSymbol",
    "SimpleFillSymbol",
    "SimpleLineSymbol",
    "SimpleMarkerSymbol",
    "Symbol",
    "TextSymbol",
    "decode_symbol",
]

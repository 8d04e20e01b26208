# mapfolio/symbology/symbols.py
"""Pydantic models for symbol definitions in the Esri web-map JSON format.

A symbol file holds one JSON object whose ``type`` discriminator selects
the model.  Keys the models do not declare are kept as extras so that a
decoded symbol serializes back to the same JSON it was read from.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..errors import MalformedAssetError, UnsupportedSymbolTypeError


__all__ = [
    "EsriJsonModel",
    "SimpleLineSymbol",
    "SimpleMarkerSymbol",
    "SimpleFillSymbol",
    "PictureMarkerSymbol",
    "PictureFillSymbol",
    "TextSymbol",
    "CIMSymbolReference",
    "Symbol",
    "SYMBOL_TYPES",
    "decode_symbol",
]

Color = List[int]


class EsriJsonModel(BaseModel):
    """Base model for camelCase Esri JSON objects that round-trip unknown keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_json(self) -> dict[str, Any]:
        """Return the JSON object form, using the file's camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Line & marker symbols
# ---------------------------------------------------------------------------

class SimpleLineSymbol(EsriJsonModel):
    """Line symbol (``esriSLS``), also used as the outline of other symbols."""

    type: Literal["esriSLS"] = "esriSLS"
    style: Literal[
        "esriSLSDash",
        "esriSLSDashDot",
        "esriSLSDashDotDot",
        "esriSLSDot",
        "esriSLSLongDash",
        "esriSLSLongDashDot",
        "esriSLSNull",
        "esriSLSShortDash",
        "esriSLSShortDashDot",
        "esriSLSShortDashDotDot",
        "esriSLSShortDot",
        "esriSLSSolid",
    ] = "esriSLSSolid"
    color: Optional[Color] = None
    width: Optional[float] = None


class SimpleMarkerSymbol(EsriJsonModel):
    """Point symbol drawn as a simple shape (``esriSMS``)."""

    type: Literal["esriSMS"] = "esriSMS"
    style: Literal[
        "esriSMSCircle",
        "esriSMSCross",
        "esriSMSDiamond",
        "esriSMSSquare",
        "esriSMSTriangle",
        "esriSMSX",
    ] = "esriSMSCircle"
    color: Optional[Color] = None
    size: Optional[float] = None
    angle: Optional[float] = None
    xoffset: Optional[float] = None
    yoffset: Optional[float] = None
    outline: Optional[SimpleLineSymbol] = None


class PictureMarkerSymbol(EsriJsonModel):
    """Point symbol drawn from an image (``esriPMS``)."""

    type: Literal["esriPMS"] = "esriPMS"
    url: Optional[str] = None
    image_data: Optional[str] = None
    content_type: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None
    angle: Optional[float] = None
    xoffset: Optional[float] = None
    yoffset: Optional[float] = None


# ---------------------------------------------------------------------------
# Fill symbols
# ---------------------------------------------------------------------------

class SimpleFillSymbol(EsriJsonModel):
    """Polygon fill symbol (``esriSFS``)."""

    type: Literal["esriSFS"] = "esriSFS"
    style: Literal[
        "esriSFSBackwardDiagonal",
        "esriSFSCross",
        "esriSFSDiagonalCross",
        "esriSFSForwardDiagonal",
        "esriSFSHorizontal",
        "esriSFSNull",
        "esriSFSSolid",
        "esriSFSVertical",
    ] = "esriSFSSolid"
    color: Optional[Color] = None
    outline: Optional[SimpleLineSymbol] = None


class PictureFillSymbol(EsriJsonModel):
    """Polygon fill symbol tiled from an image (``esriPFS``)."""

    type: Literal["esriPFS"] = "esriPFS"
    url: Optional[str] = None
    image_data: Optional[str] = None
    content_type: Optional[str] = None
    width: Optional[float] = None
    height: Optional[float] = None
    angle: Optional[float] = None
    xoffset: Optional[float] = None
    yoffset: Optional[float] = None
    xscale: Optional[float] = None
    yscale: Optional[float] = None
    outline: Optional[SimpleLineSymbol] = None


# ---------------------------------------------------------------------------
# Text & CIM
# ---------------------------------------------------------------------------

class TextSymbol(EsriJsonModel):
    """Label symbol (``esriTS``)."""

    type: Literal["esriTS"] = "esriTS"
    text: Optional[str] = None
    color: Optional[Color] = None
    background_color: Optional[Color] = None
    border_line_color: Optional[Color] = None
    border_line_size: Optional[float] = None
    halo_color: Optional[Color] = None
    halo_size: Optional[float] = None
    vertical_alignment: Optional[Literal["baseline", "top", "middle", "bottom"]] = None
    horizontal_alignment: Optional[Literal["left", "right", "center", "justify"]] = None
    right_to_left: Optional[bool] = None
    kerning: Optional[bool] = None
    angle: Optional[float] = None
    xoffset: Optional[float] = None
    yoffset: Optional[float] = None
    font: Optional[dict[str, Any]] = None


class CIMSymbolReference(EsriJsonModel):
    """Cartographic Information Model symbol, kept as an opaque payload."""

    type: Literal["CIMSymbolReference"] = "CIMSymbolReference"
    symbol: dict[str, Any] = Field(default_factory=dict)
    primitive_overrides: Optional[List[dict[str, Any]]] = None


Symbol = Annotated[
    Union[
        SimpleMarkerSymbol,
        SimpleLineSymbol,
        SimpleFillSymbol,
        PictureMarkerSymbol,
        PictureFillSymbol,
        TextSymbol,
        CIMSymbolReference,
    ],
    Field(discriminator="type"),
]

SYMBOL_TYPES: dict[str, type[EsriJsonModel]] = {
    "esriSMS": SimpleMarkerSymbol,
    "esriSLS": SimpleLineSymbol,
    "esriSFS": SimpleFillSymbol,
    "esriPMS": PictureMarkerSymbol,
    "esriPFS": PictureFillSymbol,
    "esriTS": TextSymbol,
    "CIMSymbolReference": CIMSymbolReference,
}


def decode_symbol(data: Any, source: Optional[str] = None) -> EsriJsonModel:
    """Decode a parsed symbol JSON object into its symbol model.

    Raises
    ------
    UnsupportedSymbolTypeError
        If ``data`` is not an object or declares no known ``type``.
    MalformedAssetError
        If the declared type is known but the object fails validation.
    """
    declared = data.get("type") if isinstance(data, dict) else None
    model = SYMBOL_TYPES.get(declared) if isinstance(declared, str) else None
    if model is None:
        raise UnsupportedSymbolTypeError(
            f"unsupported symbol type {declared!r} (expected one of {sorted(SYMBOL_TYPES)})",
            source,
        )
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedAssetError(f"invalid {declared} symbol: {exc}", source) from exc

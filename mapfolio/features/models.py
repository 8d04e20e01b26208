# mapfolio/features/models.py
"""Feature collection models in the Esri FeatureSet JSON format."""

from __future__ import annotations

import json
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..errors import MalformedFeatureSetError
from .extent import Extent


__all__ = ["FieldDef", "Feature", "FeatureSet", "decode_feature_set"]


class _EsriModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )


class FieldDef(_EsriModel):
    """Attribute field schema entry."""

    name: str
    type: Optional[str] = None
    alias: Optional[str] = None
    length: Optional[int] = None
    nullable: Optional[bool] = None
    editable: Optional[bool] = None
    domain: Optional[dict[str, Any]] = None
    default_value: Any = None


class Feature(_EsriModel):
    """A single feature: attribute values plus an optional geometry."""

    attributes: dict[str, Any] = Field(default_factory=dict)
    geometry: Optional[dict[str, Any]] = None


class FeatureSet(_EsriModel):
    """A field schema and the features that follow it."""

    fields: List[FieldDef]
    features: List[Feature]
    geometry_type: Optional[str] = None
    spatial_reference: Optional[dict[str, Any]] = None
    object_id_field_name: Optional[str] = None
    global_id_field_name: Optional[str] = None
    display_field_name: Optional[str] = None
    has_z: Optional[bool] = None
    has_m: Optional[bool] = None

    @property
    def object_id_field(self) -> Optional[str]:
        """Name of the object ID field: declared explicitly or typed esriFieldTypeOID."""
        if self.object_id_field_name:
            return self.object_id_field_name
        for field in self.fields:
            if field.type == "esriFieldTypeOID":
                return field.name
        return None

    def extent(self) -> Optional[Extent]:
        return Extent.from_geometries(
            (feature.geometry for feature in self.features),
            spatial_reference=self.spatial_reference,
        )

    def to_json(self) -> dict[str, Any]:
        # exclude_unset, not exclude_none: explicit nulls in attributes are data
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)

    def to_json_text(self, indent: Optional[int] = None) -> str:
        if indent is None:
            return json.dumps(self.to_json(), ensure_ascii=False, separators=(",", ":"))
        return json.dumps(self.to_json(), ensure_ascii=False, indent=indent)


def decode_feature_set(data: Any, source: Optional[str] = None) -> FeatureSet:
    """Decode a parsed feature-collection JSON object.

    Raises
    ------
    MalformedFeatureSetError
        If ``data`` is not an object, lacks ``fields`` or ``features``, or
        fails validation.
    """
    if not isinstance(data, dict):
        raise MalformedFeatureSetError(
            f"feature set must be a JSON object, got {type(data).__name__}", source
        )
    missing = [key for key in ("fields", "features") if key not in data]
    if missing:
        raise MalformedFeatureSetError(
            f"feature set is missing {', '.join(repr(k) for k in missing)}", source
        )
    try:
        return FeatureSet.model_validate(data)
    except ValidationError as exc:
        raise MalformedFeatureSetError(f"invalid feature set: {exc}", source) from exc

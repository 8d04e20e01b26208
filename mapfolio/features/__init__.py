"""Feature collections, extents and the live editable layer."""

from .extent import Extent, union_extents
from .layer import EditableLayer, EditEvent, EditListener, EditResult
from .models import Feature, FeatureSet, FieldDef, decode_feature_set

__all__ = [
    "Extent",
    "union_extents",
    "EditableLayer",
    "EditEvent",
    "EditListener",
    "EditResult",
    "Feature",
    "FeatureSet",
    "FieldDef",
    "decode_feature_set",
]

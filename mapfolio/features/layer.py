# mapfolio/features/layer.py
"""In-memory editable feature layer.

This is the layer object handed to the rendering surface: it owns the live
copy of a layer's features, applies edits to them, and notifies
subscribers after every applied edit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Optional

from ..errors import LayerNotEditableError
from ..symbology.renderers import Renderer
from .extent import Extent
from .models import Feature, FeatureSet, FieldDef


@dataclass
class EditEvent:
    """Notification sent to listeners after an edit is applied."""

    layer_title: str
    added: list[Feature] = field(default_factory=list)
    updated: list[Feature] = field(default_factory=list)
    deleted_ids: list[Any] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.updated or self.deleted_ids)


@dataclass
class EditResult:
    """Object IDs affected by an ``apply_edits`` call."""

    add_ids: list[Any] = field(default_factory=list)
    update_ids: list[Any] = field(default_factory=list)
    delete_ids: list[Any] = field(default_factory=list)


EditListener = Callable[[EditEvent], Awaitable[None]]


class EditableLayer:
    """A titled, optionally editable, symbolized collection of features."""

    def __init__(
        self,
        *,
        source: Optional[FeatureSet] = None,
        renderer: Optional[Renderer] = None,
        editing_enabled: bool = True,
        title: str = "",
    ):
        template = source if source is not None else FeatureSet(fields=[], features=[])
        # The layer never shares feature objects with the feature set it was built from
        self._template = template.model_copy(update={"features": []}, deep=True)
        self._features: list[Feature] = [f.model_copy(deep=True) for f in template.features]
        self.renderer = renderer
        self.editing_enabled = editing_enabled
        self.title = title
        self._listeners: list[EditListener] = []

    def __repr__(self) -> str:
        return (
            f"EditableLayer(title={self.title!r}, features={len(self._features)}, "
            f"editing_enabled={self.editing_enabled})"
        )

    @property
    def fields(self) -> list[FieldDef]:
        return list(self._template.fields)

    @property
    def object_id_field(self) -> Optional[str]:
        return self._template.object_id_field

    @property
    def feature_count(self) -> int:
        return len(self._features)

    def on_edits(self, listener: EditListener) -> Callable[[], None]:
        """Subscribe to edit notifications; returns a callable that unsubscribes."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def query_features(self) -> FeatureSet:
        """Return a detached copy of the layer's current feature set."""
        return self._template.model_copy(
            update={"features": [f.model_copy(deep=True) for f in self._features]},
            deep=True,
        )

    def extent(self) -> Optional[Extent]:
        return Extent.from_geometries(
            (f.geometry for f in self._features),
            spatial_reference=self._template.spatial_reference,
        )

    async def apply_edits(
        self,
        adds: Iterable[Feature] = (),
        updates: Iterable[Feature] = (),
        deletes: Iterable[Any] = (),
    ) -> EditResult:
        """Apply adds, updates (matched by object ID) and deletes (object IDs).

        Listeners are awaited one after another once all edits are applied;
        an exception from a listener propagates to the caller.
        """
        if not self.editing_enabled:
            raise LayerNotEditableError("editing is disabled", self.title)

        oid_field = self.object_id_field
        adds = [f.model_copy(deep=True) for f in adds]
        updates = [f.model_copy(deep=True) for f in updates]
        deletes = list(deletes)
        if (updates or deletes) and oid_field is None:
            raise ValueError(f"{self.title}: updates and deletes need an object ID field")

        result = EditResult()
        index = {f.attributes.get(oid_field): i for i, f in enumerate(self._features)} if oid_field else {}

        for feature in updates:
            oid = feature.attributes.get(oid_field)
            if oid not in index:
                raise KeyError(f"{self.title}: no feature with {oid_field}={oid!r}")
        for oid in deletes:
            if oid not in index:
                raise KeyError(f"{self.title}: no feature with {oid_field}={oid!r}")

        for feature in updates:
            oid = feature.attributes[oid_field]
            current = self._features[index[oid]]
            current.attributes = {**current.attributes, **feature.attributes}
            if "geometry" in feature.model_fields_set:
                current.geometry = feature.geometry
            result.update_ids.append(oid)

        if deletes:
            doomed = set(deletes)
            self._features = [f for f in self._features if f.attributes.get(oid_field) not in doomed]
            result.delete_ids.extend(deletes)

        next_oid = self._next_object_id()
        for feature in adds:
            attributes = dict(feature.attributes)
            if oid_field is not None:
                attributes[oid_field] = next_oid
                result.add_ids.append(next_oid)
                next_oid += 1
            else:
                result.add_ids.append(None)
            # Assigned, not mutated: dumps only include fields marked as set
            feature.attributes = attributes
            self._features.append(feature)

        event = EditEvent(
            layer_title=self.title,
            added=adds,
            updated=updates,
            deleted_ids=deletes,
        )
        if not event.is_empty:
            for listener in list(self._listeners):
                await listener(event)
        return result

    def _next_object_id(self) -> int:
        oid_field = self.object_id_field
        ids = [
            f.attributes.get(oid_field)
            for f in self._features
            if isinstance(f.attributes.get(oid_field), int)
        ] if oid_field else []
        return max(ids, default=0) + 1

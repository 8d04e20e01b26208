"""Bounding extents of Esri JSON geometries."""

from __future__ import annotations

import math
from typing import Any, Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Extent(BaseModel):
    """Axis-aligned bounding box, in the units of its spatial reference."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    xmin: float
    ymin: float
    xmax: float
    ymax: float
    spatial_reference: Optional[dict[str, Any]] = None

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def center(self) -> tuple[float, float]:
        return ((self.xmin + self.xmax) / 2, (self.ymin + self.ymax) / 2)

    def union(self, other: Optional["Extent"]) -> "Extent":
        """Return the smallest extent covering both; keeps this spatial reference."""
        if other is None:
            return self
        return Extent(
            xmin=min(self.xmin, other.xmin),
            ymin=min(self.ymin, other.ymin),
            xmax=max(self.xmax, other.xmax),
            ymax=max(self.ymax, other.ymax),
            spatial_reference=self.spatial_reference or other.spatial_reference,
        )

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_geometries(
        cls,
        geometries: Iterable[Optional[dict[str, Any]]],
        spatial_reference: Optional[dict[str, Any]] = None,
    ) -> Optional["Extent"]:
        """Return the extent of all coordinates in ``geometries``, or None if there are none."""
        xs: list[float] = []
        ys: list[float] = []
        for geometry in geometries:
            if not geometry:
                continue
            for x, y in iter_coordinates(geometry):
                xs.append(x)
                ys.append(y)
            if spatial_reference is None and isinstance(geometry.get("spatialReference"), dict):
                spatial_reference = geometry["spatialReference"]
        if not xs:
            return None
        return cls(
            xmin=min(xs),
            ymin=min(ys),
            xmax=max(xs),
            ymax=max(ys),
            spatial_reference=spatial_reference,
        )


def union_extents(extents: Iterable[Optional[Extent]]) -> Optional[Extent]:
    result: Optional[Extent] = None
    for extent in extents:
        if extent is None:
            continue
        result = extent if result is None else result.union(extent)
    return result


def _coordinate(x: Any, y: Any) -> Optional[tuple[float, float]]:
    if isinstance(x, bool) or isinstance(y, bool):
        return None
    if not isinstance(x, (int, float)) or not isinstance(y, (int, float)):
        return None
    if math.isnan(x) or math.isnan(y):
        return None
    return float(x), float(y)


def _from_vertices(vertices: Any) -> Iterator[tuple[float, float]]:
    if not isinstance(vertices, list):
        return
    for vertex in vertices:
        if isinstance(vertex, list) and len(vertex) >= 2:
            point = _coordinate(vertex[0], vertex[1])
            if point is not None:
                yield point


def iter_coordinates(geometry: dict[str, Any]) -> Iterator[tuple[float, float]]:
    """Yield the (x, y) vertices of a point, multipoint, polyline, polygon or envelope."""
    if "x" in geometry and "y" in geometry:
        point = _coordinate(geometry.get("x"), geometry.get("y"))
        if point is not None:
            yield point
        return
    if "points" in geometry:
        yield from _from_vertices(geometry["points"])
        return
    parts = geometry.get("paths", geometry.get("rings"))
    if isinstance(parts, list):
        for part in parts:
            yield from _from_vertices(part)
        return
    if all(k in geometry for k in ("xmin", "ymin", "xmax", "ymax")):
        for corner in (("xmin", "ymin"), ("xmax", "ymax")):
            point = _coordinate(geometry[corner[0]], geometry[corner[1]])
            if point is not None:
                yield point

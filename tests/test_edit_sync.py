# tests/test_edit_sync.py
"""Tests for writing layer edits back to the feature set file."""

import json

import pytest


pytestmark = pytest.mark.anyio


async def _linked_layer(tmp_path, **config):
    from mapfolio.config import MapfolioConfig
    from mapfolio.project import LoadStage, ProjectRegistry, load_feature_set, load_layer
    from mapfolio.storage import LocalFile

    features = tmp_path / "pts.json"
    features.write_text(json.dumps({
        "geometryType": "esriGeometryPoint",
        "fields": [
            {"name": "OBJECTID", "type": "esriFieldTypeOID"},
            {"name": "note", "type": "esriFieldTypeString"},
        ],
        "features": [
            {"attributes": {"OBJECTID": 1, "note": "first"}, "geometry": {"x": 0, "y": 0}},
            {"attributes": {"OBJECTID": 2, "note": None}, "geometry": {"x": 1, "y": 1}},
        ],
    }), encoding="utf-8")
    layer_file = tmp_path / "points.json"
    layer_file.write_text(json.dumps({"featureSet": "pts"}), encoding="utf-8")

    registry = ProjectRegistry()
    registry.complete(LoadStage.SYMBOLS)
    registry.complete(LoadStage.RENDERERS)
    await load_feature_set(LocalFile(features), registry)
    registry.complete(LoadStage.FEATURES)
    layer = await load_layer(LocalFile(layer_file), registry, MapfolioConfig(**config))
    return layer, features


class TestEditSyncChannel:

    async def test_add_round_trip(self, tmp_path):
        """An added feature is written back and matches a fresh query."""
        from mapfolio.features import Feature

        layer, path = await _linked_layer(tmp_path)
        before = len(json.loads(path.read_text())["features"])

        await layer.live_layer.apply_edits(
            adds=[Feature(attributes={"note": "third"}, geometry={"x": 2, "y": 2})]
        )

        written = json.loads(path.read_text(encoding="utf-8"))
        current = await layer.live_layer.query_features()
        assert len(written["features"]) == before + 1
        assert written == current.to_json()
        assert written["features"][-1]["attributes"] == {"note": "third", "OBJECTID": 3}

    async def test_add_geometry_only_writes_object_id(self, tmp_path):
        """A feature added without attributes is written with its new OBJECTID."""
        from mapfolio.features import Feature

        layer, path = await _linked_layer(tmp_path)
        await layer.live_layer.apply_edits(adds=[Feature(geometry={"x": 1.0, "y": 2.0})])

        written = json.loads(path.read_text(encoding="utf-8"))
        assert written["features"][-1]["attributes"] == {"OBJECTID": 3}
        assert written["features"][-1]["geometry"] == {"x": 1.0, "y": 2.0}
        assert written == (await layer.live_layer.query_features()).to_json()

    async def test_asset_updated_in_memory(self, tmp_path):
        """The feature set asset mirrors what was written to disk."""
        layer, path = await _linked_layer(tmp_path)
        await layer.live_layer.apply_edits(deletes=[1])

        target = layer.source_feature
        assert [f.attributes["OBJECTID"] for f in target.domain.features] == [2]
        assert target.parsed_json == json.loads(path.read_text())
        assert target.raw_text == path.read_text()
        assert layer.sync.write_count == 1
        assert layer.source_snapshot is target.domain

    async def test_every_edit_rewrites(self, tmp_path):
        """Each edit rewrites the whole feature file."""
        from mapfolio.features import Feature

        layer, path = await _linked_layer(tmp_path)
        for n in range(3):
            await layer.live_layer.apply_edits(adds=[Feature(attributes={"note": str(n)})])
        assert layer.sync.write_count == 3
        assert len(json.loads(path.read_text())["features"]) == 5

    async def test_null_attributes_preserved(self, tmp_path):
        """Explicit null attributes survive a rewrite."""
        from mapfolio.features import Feature

        layer, path = await _linked_layer(tmp_path)
        await layer.live_layer.apply_edits(updates=[Feature(attributes={"OBJECTID": 1, "note": "x"})])
        written = json.loads(path.read_text())
        assert written["features"][1]["attributes"] == {"OBJECTID": 2, "note": None}

    async def test_compact_by_default(self, tmp_path):
        """Rewrites are compact JSON without an indent setting."""
        from mapfolio.features import Feature

        layer, path = await _linked_layer(tmp_path)
        await layer.live_layer.apply_edits(adds=[Feature()])
        assert "\n" not in path.read_text()

    async def test_indent_from_config(self, tmp_path):
        """The configured indent is used for rewrites."""
        from mapfolio.features import Feature

        layer, path = await _linked_layer(tmp_path, json_indent=2)
        await layer.live_layer.apply_edits(adds=[Feature()])
        assert path.read_text().startswith("{\n  ")

    async def test_detach_stops_writes(self, tmp_path):
        """A detached channel leaves the file alone."""
        from mapfolio.features import Feature

        layer, path = await _linked_layer(tmp_path)
        original = path.read_text()
        layer.sync.detach()
        assert not layer.sync.attached
        await layer.live_layer.apply_edits(adds=[Feature()])
        assert path.read_text() == original
        assert layer.sync.write_count == 0

    async def test_write_failure_propagates_without_rollback(self, tmp_path):
        """A failed write raises and leaves the edit applied in memory."""
        from mapfolio.features import Feature

        layer, path = await _linked_layer(tmp_path)
        original = path.read_text()
        path.unlink()
        path.parent.joinpath("pts.json").mkdir()

        with pytest.raises(OSError):
            await layer.live_layer.apply_edits(adds=[Feature()])

        assert layer.sync.write_count == 0
        assert len(layer.source_feature.domain.features) == 3
        assert layer.source_feature.raw_text == original

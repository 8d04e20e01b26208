# tests/test_editable_layer.py
"""Tests for the in-memory editable layer."""

import pytest


pytestmark = pytest.mark.anyio


def _source():
    from mapfolio.features import decode_feature_set

    return decode_feature_set({
        "fields": [
            {"name": "OBJECTID", "type": "esriFieldTypeOID"},
            {"name": "kind", "type": "esriFieldTypeString"},
        ],
        "features": [
            {"attributes": {"OBJECTID": 1, "kind": "a"}, "geometry": {"x": 0, "y": 0}},
            {"attributes": {"OBJECTID": 4, "kind": "b"}, "geometry": {"x": 2, "y": 2}},
        ],
    })


class TestEditableLayer:

    async def test_empty_layer(self):
        """A layer without a source starts empty and editable."""
        from mapfolio.features import EditableLayer

        layer = EditableLayer()
        assert layer.feature_count == 0
        assert layer.fields == []
        assert layer.editing_enabled is True
        assert layer.renderer is None
        assert layer.extent() is None
        assert (await layer.query_features()).features == []

    async def test_copies_source(self):
        """The layer holds its own copy of the source features."""
        from mapfolio.features import EditableLayer

        source = _source()
        layer = EditableLayer(source=source, title="t.json")
        queried = await layer.query_features()
        assert queried.to_json() == source.to_json()
        queried.features[0].attributes["kind"] = "changed"
        assert (await layer.query_features()).features[0].attributes["kind"] == "a"
        assert source.features[0].attributes["kind"] == "a"

    async def test_add_assigns_next_object_id(self):
        """Adds get object ids after the current maximum."""
        from mapfolio.features import EditableLayer, Feature

        source = _source()
        layer = EditableLayer(source=source)
        result = await layer.apply_edits(adds=[
            Feature(attributes={"kind": "c"}, geometry={"x": 5, "y": 5}),
            Feature(attributes={"kind": "d"}),
        ])
        assert result.add_ids == [5, 6]
        assert layer.feature_count == 4
        assert len(source.features) == 2
        extent = layer.extent()
        assert (extent.xmax, extent.ymax) == (5, 5)

    async def test_add_without_attributes_serializes_object_id(self):
        """The assigned OBJECTID is part of the dumped feature set."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer(source=_source())
        await layer.apply_edits(adds=[Feature(geometry={"x": 3, "y": 3})])
        dumped = (await layer.query_features()).to_json()
        assert dumped["features"][-1]["attributes"] == {"OBJECTID": 5}

    async def test_update_merges_attributes(self):
        """Updates merge attributes into the existing feature."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer(source=_source())
        result = await layer.apply_edits(updates=[Feature(attributes={"OBJECTID": 4, "kind": "z"})])
        assert result.update_ids == [4]
        features = (await layer.query_features()).features
        assert features[1].attributes == {"OBJECTID": 4, "kind": "z"}
        assert features[1].geometry == {"x": 2, "y": 2}

    async def test_update_replaces_geometry_when_given(self):
        """An update with a geometry replaces the old one."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer(source=_source())
        await layer.apply_edits(updates=[Feature(attributes={"OBJECTID": 1}, geometry=None)])
        assert (await layer.query_features()).features[0].geometry is None

    async def test_delete(self):
        """Deleted features are removed by object id."""
        from mapfolio.features import EditableLayer

        layer = EditableLayer(source=_source())
        result = await layer.apply_edits(deletes=[1])
        assert result.delete_ids == [1]
        assert [f.attributes["OBJECTID"] for f in (await layer.query_features()).features] == [4]

    async def test_unknown_object_id(self):
        """Edits naming a missing object id raise KeyError and change nothing."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer(source=_source())
        with pytest.raises(KeyError):
            await layer.apply_edits(deletes=[99])
        with pytest.raises(KeyError):
            await layer.apply_edits(updates=[Feature(attributes={"OBJECTID": 99})])
        assert layer.feature_count == 2

    async def test_update_without_object_id_field(self):
        """Updates raise ValueError when there is no object id field."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer()
        with pytest.raises(ValueError):
            await layer.apply_edits(updates=[Feature(attributes={"a": 1})])

    async def test_add_without_object_id_field(self):
        """Adds without an object id field get no id."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer()
        result = await layer.apply_edits(adds=[Feature(attributes={"a": 1})])
        assert result.add_ids == [None]
        assert layer.feature_count == 1

    async def test_editing_disabled(self):
        """Edits are refused when editing is turned off."""
        from mapfolio.errors import LayerNotEditableError
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer(source=_source(), editing_enabled=False, title="locked.json")
        with pytest.raises(LayerNotEditableError, match="locked.json"):
            await layer.apply_edits(adds=[Feature()])
        assert layer.feature_count == 2


class TestEditListeners:

    async def test_listener_called_after_edit(self):
        """Listeners see the edit result once it is applied."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer(source=_source(), title="t.json")
        seen = []

        async def listener(event):
            seen.append((event.layer_title, len(event.added), layer.feature_count))

        layer.on_edits(listener)
        await layer.apply_edits(adds=[Feature(attributes={"kind": "c"})])
        assert seen == [("t.json", 1, 3)]

    async def test_empty_edit_does_not_notify(self):
        """An edit with nothing to do does not notify."""
        from mapfolio.features import EditableLayer

        layer = EditableLayer(source=_source())
        seen = []

        async def listener(event):
            seen.append(event)

        layer.on_edits(listener)
        await layer.apply_edits()
        assert seen == []

    async def test_unsubscribe(self):
        """An unsubscribed listener is no longer called."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer(source=_source())
        seen = []

        async def listener(event):
            seen.append(event)

        unsubscribe = layer.on_edits(listener)
        unsubscribe()
        unsubscribe()
        await layer.apply_edits(adds=[Feature()])
        assert seen == []

    async def test_listener_error_propagates(self):
        """A failing listener raises out of apply_edits."""
        from mapfolio.features import EditableLayer, Feature

        layer = EditableLayer(source=_source())

        async def listener(event):
            raise OSError("disk full")

        layer.on_edits(listener)
        with pytest.raises(OSError, match="disk full"):
            await layer.apply_edits(adds=[Feature()])
        assert layer.feature_count == 3

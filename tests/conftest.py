# tests/conftest.py
"""Shared fixtures: isolated log directory and on-disk sample projects."""

import json
import os
import tempfile

import pytest

# Logging is set up on first import of a mapfolio module; keep it out of ~/.mapfolio.
os.environ.setdefault("MAPFOLIO_LOG_DIR", tempfile.mkdtemp(prefix="mapfolio-test-logs-"))


RED_DOT = {
    "type": "esriSMS",
    "style": "esriSMSCircle",
    "color": [255, 0, 0, 255],
    "size": 8,
}

BLUE_LINE = {
    "type": "esriSLS",
    "style": "esriSLSSolid",
    "color": [0, 0, 255, 255],
    "width": 2,
}

PARCELS = {
    "geometryType": "esriGeometryPoint",
    "spatialReference": {"wkid": 4326},
    "objectIdFieldName": "OBJECTID",
    "fields": [
        {"name": "OBJECTID", "type": "esriFieldTypeOID", "alias": "OBJECTID"},
        {"name": "zone", "type": "esriFieldTypeString", "alias": "Zone", "length": 8},
    ],
    "features": [
        {"attributes": {"OBJECTID": 1, "zone": "R1"}, "geometry": {"x": 8.5, "y": 47.4}},
        {"attributes": {"OBJECTID": 2, "zone": "C2"}, "geometry": {"x": 8.6, "y": 47.3}},
    ],
}


def _write_json(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
def _fresh_config(monkeypatch):
    """Drop the cached config so env overrides in a test take effect."""
    from mapfolio.config import get_config

    for key in list(os.environ):
        if key.startswith("MAPFOLIO_") and key != "MAPFOLIO_LOG_DIR":
            monkeypatch.delenv(key)
    get_config.cache_clear()
    yield
    get_config.cache_clear()


@pytest.fixture
def project_dir(tmp_path):
    """A complete project: symbols, renderers, one feature set and layers."""
    root = tmp_path / "project"
    _write_json(root / "Symbols" / "redDot.json", RED_DOT)
    _write_json(root / "Symbols" / "blueLine.json", BLUE_LINE)
    _write_json(root / "Renderers" / "simple.json", {"type": "simple", "symbol": "redDot"})
    _write_json(
        root / "Renderers" / "byZone.json",
        {
            "type": "uniqueValue",
            "field1": "zone",
            "defaultSymbol": "blueLine",
            "uniqueValueInfos": [
                {"value": "R1", "label": "Residential", "symbol": "redDot"},
                {"value": "C2", "label": "Commercial", "symbol": "blueLine"},
            ],
        },
    )
    _write_json(root / "Features" / "parcels.json", PARCELS)
    _write_json(root / "Layers" / "parcels.json", {"featureSet": "parcels", "renderer": "byZone"})
    _write_json(root / "Layers" / "empty.json", {})
    return root


@pytest.fixture
def write_json():
    """Write a JSON document to a path, creating parent directories."""
    return _write_json

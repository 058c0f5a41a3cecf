"""Tests for the HTTP API layer.

Covers:
  - Root, health, context, schema, defaults
  - /fleet/generate, /speed, /distance, /simulate
  - Deep merge of partial scenarios and validation errors → 422
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from fleetsim.api.server import app, _deep_merge, _build_scenario
from fleetsim.api.context import build_context, get_default_scenario, _extract_params
from fleetsim.config.fleet import FleetConfig
from fleetsim.engine.geo import distance_meters


client = TestClient(app)


# ═══════════════════════════════════════════════════════════════════════════
# Metadata endpoints
# ═══════════════════════════════════════════════════════════════════════════

class TestMetadata:

    def test_health(self):
        assert client.get("/health").json() == {"status": "ok"}

    def test_root_points_to_context(self):
        body = client.get("/").json()
        assert body["start_here"] == "GET /context"

    def test_context_lists_sections_and_endpoints(self):
        ctx = build_context()
        assert [s.section for s in ctx.input_sections] == ["fleet", "traffic", "delays", "simulation"]
        assert {e.path for e in ctx.endpoints} >= {"/fleet/generate", "/speed", "/distance", "/simulate"}
        assert client.get("/context").status_code == 200

    def test_extract_params_reads_constraints(self):
        params = {p.name: p for p in _extract_params(FleetConfig)}
        assert params["default_count"].default == 7
        assert params["default_count"].constraints == {"ge": 0}
        assert params["max_radius_km"].constraints == {"gt": 0}

    def test_schema(self):
        schema = client.get("/schema").json()
        assert set(schema["properties"]) >= {"fleet", "traffic", "delays", "simulation"}

    def test_defaults_match_scenario(self):
        assert client.get("/scenario/defaults").json() == get_default_scenario()


# ═══════════════════════════════════════════════════════════════════════════
# Helpers
# ═══════════════════════════════════════════════════════════════════════════

class TestMerge:

    def test_deep_merge_nested(self):
        base = {"a": {"b": 1, "c": 2}, "d": 3}
        assert _deep_merge(base, {"a": {"c": 9}}) == {"a": {"b": 1, "c": 9}, "d": 3}

    def test_deep_merge_replaces_lists(self):
        base = {"zones": [1, 2]}
        assert _deep_merge(base, {"zones": []}) == {"zones": []}

    def test_build_scenario_partial(self):
        scenario = _build_scenario({"vehicle_count": 3, "simulation": {"ticks": 4}})
        assert scenario.vehicle_count == 3
        assert scenario.simulation.ticks == 4
        assert scenario.simulation.tick_interval_seconds == 2.0


# ═══════════════════════════════════════════════════════════════════════════
# Engine endpoints
# ═══════════════════════════════════════════════════════════════════════════

class TestFleetEndpoint:

    def test_generate(self):
        resp = client.post("/fleet/generate", json={"count": 4, "seed": 3})
        assert resp.status_code == 200
        body = resp.json()
        assert [v["id"] for v in body] == ["veh-1", "veh-2", "veh-3", "veh-4"]
        assert [v["type"] for v in body] == ["truck", "van", "bike", "truck"]
        cap = body[0]["capacity"]
        assert cap["available"] == cap["total"] - cap["used"]

    def test_seeded_generation_is_reproducible(self):
        payload = {"count": 3, "seed": 11}
        assert client.post("/fleet/generate", json=payload).json() == \
            client.post("/fleet/generate", json=payload).json()

    def test_custom_center(self):
        body = client.post("/fleet/generate", json={
            "count": 5, "seed": 1,
            "fleet": {"center_lat": 9.06, "center_lng": 7.49, "min_radius_km": 1, "max_radius_km": 2},
        }).json()
        for v in body:
            assert distance_meters((9.06, 7.49), (v["position"]["lat"], v["position"]["lng"])) < 2_100

    def test_invalid_fleet_config(self):
        resp = client.post("/fleet/generate", json={"fleet": {"min_radius_km": 50}})
        assert resp.status_code == 422


class TestSpeedEndpoint:

    def test_neutral_traffic(self):
        resp = client.post("/speed", json={
            "base_speed_kmh": 40,
            "lat": -45.0, "lng": -120.0,
            "timestamp": "2026-10-14T12:00:00",
            "seed": 1,
            "traffic": {"hour_multipliers": [1.0] * 24, "day_multipliers": [1.0] * 7,
                        "jitter_min": 1.0, "jitter_max": 1.0},
        })
        assert resp.status_code == 200
        assert resp.json()["speed_kmh"] == pytest.approx(40.0)

    def test_floor(self):
        resp = client.post("/speed", json={
            "base_speed_kmh": 1, "lat": 12.0, "lng": 8.52,
            "timestamp": "2026-10-14T08:00:00",
        })
        assert resp.json()["speed_kmh"] == 5.0

    def test_rejects_non_positive_base_speed(self):
        resp = client.post("/speed", json={
            "base_speed_kmh": 0, "lat": 12.0, "lng": 8.52, "timestamp": "2026-10-14T08:00:00",
        })
        assert resp.status_code == 422


class TestDistanceEndpoint:

    def test_path(self):
        pts = [[12.0, 8.52], [12.01, 8.52], [12.01, 8.53]]
        body = client.post("/distance", json={"points": pts}).json()
        assert len(body["segments_m"]) == 2
        assert body["total_m"] == pytest.approx(sum(body["segments_m"]))
        assert body["segments_m"][0] == pytest.approx(distance_meters((12.0, 8.52), (12.01, 8.52)))

    def test_empty_path(self):
        assert client.post("/distance", json={"points": []}).json() == {"segments_m": [], "total_m": 0.0}


class TestSimulateEndpoint:

    def test_simulate_partial(self):
        resp = client.post("/simulate", json={"scenario": {
            "vehicle_count": 4,
            "simulation": {"ticks": 10, "start_time": "2026-10-14T09:00:00"},
        }})
        assert resp.status_code == 200
        body = resp.json()
        assert body["state"]["vehicle_count"] == 4
        assert body["state"]["tick_count"] == 10
        assert len(body["trails"]) == 4

    def test_simulate_invalid_override(self):
        resp = client.post("/simulate", json={"scenario": {"simulation": {"ticks": -5}}})
        assert resp.status_code == 422

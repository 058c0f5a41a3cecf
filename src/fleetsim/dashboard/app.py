"""Fleet demo simulator — Streamlit dashboard.

Layout: sidebar inputs → live map (vehicles, trails, traffic zones),
headline metrics, vehicle table, event log, and a speed-profile preview.

Run with:
    streamlit run src/fleetsim/dashboard/app.py
"""

from __future__ import annotations

from datetime import datetime, timedelta

import numpy as np
import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from fleetsim.config import DelayConfig, FleetConfig, Scenario, SimulationConfig, TrafficConfig
from fleetsim.engine.geo import offset_point
from fleetsim.engine.rng import make_rng
from fleetsim.engine.simulation import DemoSimulation
from fleetsim.engine.speed import compute_speed_kmh

# ---------------------------------------------------------------------------
# Default instances — single source of truth for sidebar defaults
# ---------------------------------------------------------------------------
_DEF_F = FleetConfig()
_DEF_T = TrafficConfig()
_DEF_D = DelayConfig()
_DEF_SIM = SimulationConfig()

_STATUS_COLORS = {"active": "#00b894", "delayed": "#fdcb6e", "idle": "#d63031"}

st.set_page_config(page_title="Fleet Demo Simulator", page_icon="🚚", layout="wide")

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
st.sidebar.header("Scenario Inputs")

with st.sidebar.expander("Simulation", expanded=True):
    _MODES = ["operational", "forensic"]
    sim_mode = st.selectbox("Mode", _MODES, index=_MODES.index(_DEF_SIM.mode),
                            help="Forensic replays the last 24 hours")
    c1, c2 = st.columns(2)
    sim_seed = c1.number_input("Seed", 0, 999999, _DEF_SIM.random_seed or 42)
    sim_ticks = c2.number_input("Ticks", 0, 20_000, _DEF_SIM.ticks, 30)
    sim_tick_s = st.number_input("Tick length (s)", 0.5, 600.0, _DEF_SIM.tick_interval_seconds, 0.5)
    sim_speed = st.select_slider("Playback speed", options=[1, 2, 5, 10, 30, 60], value=1)

with st.sidebar.expander("Fleet", expanded=True):
    f_count = st.number_input("Vehicles", 0, 500, _DEF_F.default_count)
    c1, c2 = st.columns(2)
    f_lat = c1.number_input("Center lat", -90.0, 90.0, _DEF_F.center_lat, format="%.4f")
    f_lng = c2.number_input("Center lng", -180.0, 180.0, _DEF_F.center_lng, format="%.4f")
    f_radius = st.slider("Scatter radius (km)", 0.0, 100.0,
                         (_DEF_F.min_radius_km, _DEF_F.max_radius_km))

with st.sidebar.expander("Traffic & Delays"):
    t_floor = st.number_input("Speed floor (km/h)", 0.0, 50.0, _DEF_T.min_speed_kmh)
    t_jitter = st.slider("Jitter range", 0.5, 1.5, (_DEF_T.jitter_min, _DEF_T.jitter_max))
    d_prob = st.slider("Delay probability per tick", 0.0, 0.2, _DEF_D.probability, 0.005)

run_clicked = st.sidebar.button("Run Simulation", type="primary", use_container_width=True)

scenario = Scenario(
    fleet=_DEF_F.model_copy(update={
        "center_lat": f_lat, "center_lng": f_lng,
        "min_radius_km": f_radius[0], "max_radius_km": max(f_radius[1], f_radius[0]),
    }),
    vehicle_count=int(f_count),
    traffic=_DEF_T.model_copy(update={
        "min_speed_kmh": t_floor, "jitter_min": t_jitter[0], "jitter_max": t_jitter[1],
    }),
    delays=_DEF_D.model_copy(update={"probability": d_prob}),
    simulation=SimulationConfig(
        mode=sim_mode, random_seed=int(sim_seed), ticks=int(sim_ticks),
        tick_interval_seconds=sim_tick_s, playback_speed=float(sim_speed),
    ),
)

# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
st.title("Fleet Demo Simulator")

if run_clicked or "result" not in st.session_state:
    with st.spinner("Simulating..."):
        st.session_state["result"] = DemoSimulation(scenario).run()

result = st.session_state["result"]

c1, c2, c3, c4 = st.columns(4)
c1.metric("Vehicles", result.state.vehicle_count)
c2.metric("Delayed / Idle", f"{result.state.delayed_vehicles} / {result.state.idle_vehicles}")
c3.metric("Events", result.state.event_count)
c4.metric("Fleet distance", f"{result.total_distance_m / 1000:,.1f} km")
st.caption(f"Simulation clock: {result.state.simulation_time:%Y-%m-%d %H:%M:%S} · "
           f"{result.state.tick_count} ticks")

# ---------------------------------------------------------------------------
# Map
# ---------------------------------------------------------------------------
def _zone_outline(zone, steps: int = 48) -> tuple[list[float], list[float]]:
    pts = [
        offset_point(zone.center_lat, zone.center_lng, b, zone.radius_m / 1000.0)
        for b in np.linspace(0.0, 360.0, steps + 1)
    ]
    return [p[0] for p in pts], [p[1] for p in pts]


fig_map = go.Figure()
for zone in scenario.traffic.zones:
    lats, lngs = _zone_outline(zone)
    fig_map.add_trace(go.Scattermap(
        lat=lats, lon=lngs, mode="lines", fill="toself",
        line=dict(color="#e17055", width=1), opacity=0.35,
        name=f"{zone.name} (×{zone.base_multiplier})",
    ))
for trail in result.trails:
    fig_map.add_trace(go.Scattermap(
        lat=[p.lat for p in trail.points], lon=[p.lng for p in trail.points],
        mode="lines", line=dict(color=_STATUS_COLORS[trail.status], width=2),
        showlegend=False, hoverinfo="skip",
    ))
fig_map.add_trace(go.Scattermap(
    lat=[v.position.lat for v in result.vehicles],
    lon=[v.position.lng for v in result.vehicles],
    mode="markers",
    marker=dict(size=11, color=[_STATUS_COLORS[v.status] for v in result.vehicles]),
    text=[f"{v.id} · {v.type} · {v.status} · {v.position.speed:.0f} km/h" for v in result.vehicles],
    hoverinfo="text",
    name="Vehicles",
))
fig_map.update_layout(
    map=dict(style="open-street-map", zoom=9,
             center=dict(lat=scenario.fleet.center_lat, lon=scenario.fleet.center_lng)),
    height=560,
    margin=dict(l=0, r=0, t=0, b=0),
    legend=dict(orientation="h", yanchor="bottom", y=0.01, xanchor="left", x=0.01),
)
st.plotly_chart(fig_map, use_container_width=True)

# ---------------------------------------------------------------------------
# Tables
# ---------------------------------------------------------------------------
col_veh, col_evt = st.columns([3, 2])

with col_veh:
    st.subheader("Vehicles")
    st.dataframe(pd.DataFrame([
        {
            "id": v.id,
            "type": v.type,
            "status": v.status,
            "lat": round(v.position.lat, 5),
            "lng": round(v.position.lng, 5),
            "heading": v.position.heading,
            "speed_kmh": round(v.position.speed, 1),
            "used": v.capacity.used,
            "available": v.capacity.available,
            "utilization": f"{v.capacity.utilization:.0%}",
            "driver": v.metadata.driver_id,
            "batch": v.metadata.batch_id,
        }
        for v in result.vehicles
    ]), use_container_width=True, hide_index=True)

with col_evt:
    st.subheader("Event log")
    if result.events:
        st.dataframe(pd.DataFrame([e.model_dump() for e in result.events]),
                     use_container_width=True, hide_index=True)
    else:
        st.info("No delay events in this run.")

# ---------------------------------------------------------------------------
# Speed profile preview
# ---------------------------------------------------------------------------
with st.expander("Speed profile over a day"):
    st.caption("50 km/h cruising speed at the fleet center, jitter at its midpoint")
    base_day = datetime.combine(datetime.now().date(), datetime.min.time())
    hours = list(range(24))

    class _MidJitter:
        def random(self) -> float:
            return 0.5

    center = (scenario.fleet.center_lat, scenario.fleet.center_lng)
    profile = [
        compute_speed_kmh(50.0, center, base_day + timedelta(hours=h), _MidJitter(), scenario.traffic)
        for h in hours
    ]
    sampled = [
        compute_speed_kmh(50.0, center, base_day + timedelta(hours=h), make_rng(int(sim_seed) + h), scenario.traffic)
        for h in hours
    ]
    fig_speed = go.Figure()
    fig_speed.add_trace(go.Scatter(x=hours, y=profile, mode="lines+markers", name="Expected",
                                   line=dict(color="#6c5ce7")))
    fig_speed.add_trace(go.Scatter(x=hours, y=sampled, mode="markers", name="Sampled",
                                   marker=dict(color="#00b894")))
    fig_speed.update_layout(xaxis_title="Hour of day", yaxis_title="km/h", height=280,
                            margin=dict(l=20, r=20, t=30, b=20))
    st.plotly_chart(fig_speed, use_container_width=True)

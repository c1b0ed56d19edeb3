import pytest
import redis
from fastapi.testclient import TestClient
from unittest.mock import MagicMock
from ebike_sim.config import settings
from ebike_sim.main import app
from ebike_sim.database import get_redis_client
from ebike_sim.services.translation_service import StaticTranslator, get_translator

client = TestClient(app)

SPECS = {
    "rider_weight_kg": 80,
    "bike_weight_kg": 25,
    "wheel_diameter_in": 26,
    "desired_max_speed_kmh": 35,
    "desired_max_range_km": 50
}

# Override dependencies
app.dependency_overrides[get_redis_client] = lambda: None
app.dependency_overrides[get_translator] = lambda: StaticTranslator()

def test_read_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Welcome to EBike_Simulator API"

def test_health_check_success():
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert data["translations"] == "static"

def test_health_check_redis_down():
    broken = MagicMock()
    broken.ping.side_effect = redis.ConnectionError("refused")
    app.dependency_overrides[get_redis_client] = lambda: broken
    try:
        response = client.get("/api/health")
    finally:
        app.dependency_overrides[get_redis_client] = lambda: None
    assert response.status_code == 503

def test_metrics_exposed():
    client.get("/")
    response = client.get("/metrics")
    assert response.status_code == 200

def test_select_components():
    response = client.post("/api/components/select", json=SPECS)
    assert response.status_code == 200
    data = response.json()
    assert data["motor"]["voltage_v"] == data["battery"]["nominal_voltage_v"]
    assert data["voltage_mismatch"] is False

def test_select_components_invalid():
    response = client.post("/api/components/select", json={**SPECS, "rider_weight_kg": -5})
    assert response.status_code == 422

def test_acceleration():
    payload = {"specs": SPECS, "language": "en"}
    response = client.post("/api/simulation/acceleration", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["summary"]["max_speed_kmh"] > 0
    assert data["summary"]["max_speed_kmh"] <= data["theoretical_top_speed_kmh"] + 1e-6
    assert data["component_status"]["battery"] == "Optimal"
    assert data["speed_profile"]

def test_range():
    payload = {"specs": SPECS, "speed_kmh": 25}
    response = client.post("/api/simulation/range", json=payload)
    assert response.status_code == 200
    assert response.json()["summary"]["total_distance_km"] > 0

def test_csv_export_and_summary():
    response = client.post("/api/simulation/csv", json={"specs": SPECS})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert response.text.startswith("Time(s),Speed(km/h),Distance(km)")

    summary = client.post("/api/simulation/csv/summary", json={"csv_data": response.text})
    assert summary.status_code == 200
    assert summary.json()["total_time_s"] > 0

def test_csv_summary_malformed():
    csv_data = "Time(s)\n1.0,fast,0.1,20,20,20,99,10,300"
    response = client.post("/api/simulation/csv/summary", json={"csv_data": csv_data})
    assert response.status_code == 400

def test_validate():
    response = client.post("/api/simulation/validate", json={"specs": SPECS, "scenario": "acceleration"})
    assert response.status_code == 200
    assert response.json()["interpretation"] == "EXCELLENT"

def test_temperature_analysis():
    payload = {"specs": SPECS, "speed_kmh": 25, "temperatures_c": [20]}
    response = client.post("/api/analysis/temperature", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert len(data["tests"]) == 1
    assert data["optimal_temperature_c"] == 20

def test_wind_analysis():
    payload = {"specs": SPECS, "speed_kmh": 25, "wind_speeds_mps": [0], "directions": ["headwind"]}
    response = client.post("/api/analysis/wind", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert len(data["results"]) == 1
    assert list(data["by_direction"]) == ["headwind"]

def test_wiring_analysis():
    response = client.post("/api/analysis/wiring", json={"specs": SPECS})
    assert response.status_code == 200
    data = response.json()
    assert len(data["segments"]) == 3
    assert data["total_power_loss_w"] > 0

def test_wire_select():
    payload = {"current_a": 30, "length_m": 1.0, "system_voltage_v": 48, "lengths_m": [0.5, 2.0]}
    response = client.post("/api/wires/select", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["wire"]["awg"] == 12
    assert [w["awg"] for w in data["alternatives"]][0] == 12
    assert len(data["length_comparison"]) == 2

@pytest.mark.parametrize("payload", [
    {"current_a": 0, "length_m": 1.0, "system_voltage_v": 48},
    {"current_a": 30, "length_m": -1.0, "system_voltage_v": 48},
])
def test_wire_select_invalid(payload):
    response = client.post("/api/wires/select", json=payload)
    assert response.status_code == 400

def test_language_defaults_to_setting(monkeypatch):
    monkeypatch.setattr(settings, "DEFAULT_LANGUAGE", "ru")
    response = client.post("/api/simulation/acceleration", json={"specs": SPECS})
    assert response.json()["component_status"]["battery"] == "Оптимально"

    monkeypatch.setattr(settings, "DEFAULT_LANGUAGE", "en")
    response = client.post("/api/simulation/acceleration", json={"specs": SPECS})
    assert response.status_code == 200
    assert response.json()["component_status"]["battery"] == "Optimal"

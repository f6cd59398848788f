from fastapi.testclient import TestClient

from battle_calc.gui.app import app

client = TestClient(app)


def test_health():
    assert client.get("/health").json()["status"] == "ok"


def test_list_units():
    data = client.get("/api/units").json()
    assert data["destroyer"]["anti_fighter_barrage"] == {"hit_on": 9, "count": 2}
    assert len(data) == 10


def test_simulate_standard_units():
    resp = client.post("/api/simulate", json={
        "attacker": {"units": {"dreadnought": 1}},
        "defender": {"units": {"cruiser": 1}},
        "iterations": 2000,
        "seed": 42,
    })
    assert resp.status_code == 200
    body = resp.json()
    assert body["attacker"] == {"Dreadnought": 1}
    assert body["result"]["attacker_win_rate"] > 0.8
    assert body["result"]["seed"] == 42


def test_simulate_custom_units():
    resp = client.post("/api/simulate", json={
        "attacker": {"custom": [{"name": "Sure", "combat_value": 1, "count": 2}]},
        "defender": {"custom": [{"name": "Sure", "combat_value": 1}]},
        "iterations": 10,
        "seed": 1,
    })
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert result["attacker_win_rate"] == 1.0
    assert result["avg_attacker_survivors"] == 1.0


def test_simulate_empty_sides():
    resp = client.post("/api/simulate", json={"iterations": 1})
    assert resp.json()["result"]["draw_rate"] == 1.0


def test_unknown_unit_is_404():
    resp = client.post("/api/simulate", json={"attacker": {"units": {"death_star": 1}}})
    assert resp.status_code == 404


def test_negative_count_is_400():
    resp = client.post("/api/simulate", json={"attacker": {"units": {"cruiser": -1}}})
    assert resp.status_code == 400


def test_zero_iterations_is_rejected():
    resp = client.post("/api/simulate", json={"iterations": 0})
    assert resp.status_code == 422

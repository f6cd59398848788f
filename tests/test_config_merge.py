from battle_calc.config import _deep_merge, env_overrides, load_configs, settings_from_config

def test_deep_merge_simple():
    a = {"simulation": {"iterations": 100, "seed": 1}, "attacker": {"cruiser": 1}}
    b = {"simulation": {"seed": 3}, "attacker": {"fighter": 2}}
    c = _deep_merge(a, b)
    assert c["simulation"]["iterations"] == 100 and c["simulation"]["seed"] == 3
    assert c["attacker"] == {"cruiser": 1, "fighter": 2}

def test_env_overrides_parsing(monkeypatch):
    monkeypatch.setenv("BATTLE_CALC__SIMULATION__ITERATIONS", "512")
    monkeypatch.setenv("BATTLE_CALC__SIMULATION__VERBOSE", "true")
    d = env_overrides()
    assert d["simulation"]["iterations"] == 512
    assert d["simulation"]["verbose"] is True

def test_load_yaml_and_json_in_order(tmp_path):
    y = tmp_path / "base.yaml"
    y.write_text("simulation:\n  iterations: 2000\n  seed: 9\nattacker:\n  dreadnought: 1\n")
    j = tmp_path / "override.json"
    j.write_text('{"simulation": {"iterations": 50}}')
    cfg = load_configs([str(y), str(j)])
    settings = settings_from_config(cfg)
    assert settings.iterations == 50 and settings.seed == 9
    assert cfg["attacker"] == {"dreadnought": 1}

def test_settings_defaults():
    settings = settings_from_config({})
    assert settings.iterations == 10_000
    assert settings.seed is None

from battle_calc.gui import run


def test_launcher_defaults_without_reload(monkeypatch):
    calls = {}
    monkeypatch.setattr(run.uvicorn, "run", lambda app, **kw: calls.update(app=app, **kw))
    run.main([])
    assert calls["app"] == "battle_calc.gui.app:app"
    assert calls["reload"] is False
    assert (calls["host"], calls["port"]) == ("127.0.0.1", 8000)


def test_launcher_flags(monkeypatch):
    calls = {}
    monkeypatch.setattr(run.uvicorn, "run", lambda app, **kw: calls.update(kw))
    run.main(["--host", "0.0.0.0", "--port", "9001", "--reload"])
    assert calls == {"host": "0.0.0.0", "port": 9001, "reload": True, "log_level": "info"}

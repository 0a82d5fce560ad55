import importlib
import runpy
from types import SimpleNamespace


def test_run_import_sets_debug(monkeypatch):
    def fake_create_app(argv):
        return SimpleNamespace(debug=False)

    monkeypatch.setattr("dashboard.create_app", fake_create_app)
    monkeypatch.setenv("DEBUG", "True")
    run = importlib.reload(importlib.import_module("run"))
    assert run.app.debug is True


def test_run_main_starts_server(monkeypatch):
    class FakeApp:
        debug = False
        called_with = None

        def run(self, host, port, debug):
            self.called_with = (host, port, debug)

    fake = FakeApp()
    monkeypatch.setattr("dashboard.create_app", lambda argv: fake)
    monkeypatch.setenv("PORT", "6000")
    monkeypatch.delenv("DEBUG", raising=False)

    runpy.run_module("run", run_name="__main__")

    assert fake.called_with == ("0.0.0.0", 6000, False)

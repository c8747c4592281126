"""
Tests for the server launcher.
"""

import start_server
from taskdesk.config.settings import settings


def test_runs_uvicorn_with_configured_address(monkeypatch):
    calls = []
    monkeypatch.setattr(settings, "HOST", "127.0.0.1")
    monkeypatch.setattr(settings, "PORT", 9100)
    monkeypatch.setattr(settings, "RELOAD", False)
    monkeypatch.setattr(start_server.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

    start_server.main()

    app, kwargs = calls[0]
    assert app == "main:app"
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 9100
    assert kwargs["reload"] is False

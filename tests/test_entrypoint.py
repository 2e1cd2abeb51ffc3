import uvicorn

from wallet_score import __main__ as entrypoint
from wallet_score.core.config import settings


def test_main_runs_uvicorn_on_configured_port(monkeypatch):
    calls = []
    monkeypatch.setattr(uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setattr(settings, "port", 4321)

    entrypoint.main()

    assert calls == [
        (
            "wallet_score.main:app",
            {"host": settings.host, "port": 4321, "log_level": settings.log_level.lower()},
        )
    ]

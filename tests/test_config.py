import pytest
from pydantic import ValidationError

from wallet_score.core.config import Settings


def test_neon_connection_string_is_accepted(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.setenv("NEON_CONNECTION_STRING", "postgres://user:pw@ep-1.neon.tech/scores")
    config = Settings()
    assert config.database_url == "postgresql://user:pw@ep-1.neon.tech/scores"


def test_database_url_takes_precedence_over_neon(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///./a.db")
    monkeypatch.setenv("NEON_CONNECTION_STRING", "postgresql://user:pw@ep-1.neon.tech/scores")
    assert Settings().database_url == "sqlite+pysqlite:///./a.db"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("https://a.example, https://b.example", ["https://a.example", "https://b.example"]),
        ('["https://a.example"]', ["https://a.example"]),
        ("", ["*"]),
    ],
)
def test_allowed_origins_parsing(monkeypatch, raw, expected):
    monkeypatch.setenv("ALLOWED_ORIGINS", raw)
    assert Settings().allowed_origins == expected


def test_port_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    assert Settings().port == 8080


def test_port_out_of_range_is_rejected(monkeypatch):
    monkeypatch.setenv("PORT", "70000")
    with pytest.raises(ValidationError):
        Settings()


def test_blank_sslmode_is_none(monkeypatch):
    monkeypatch.setenv("DATABASE_SSLMODE", "  ")
    assert Settings().database_sslmode is None


def test_is_production_flag():
    assert Settings(environment="prod").is_production is True
    assert Settings(environment="dev").is_production is False

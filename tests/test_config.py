import pytest

from stop_planner.config import Settings


@pytest.mark.parametrize("raw", ["49.2,-123.1", "49.2, -123.1", "[49.2, -123.1]"])
def test_map_center_from_env(monkeypatch, raw):
    monkeypatch.setenv("SP_DEFAULT_MAP_CENTER", raw)

    assert Settings(_env_file=None).default_map_center == (49.2, -123.1)


@pytest.mark.parametrize(
    "raw",
    ["https://a.example,https://b.example", '["https://a.example", "https://b.example"]'],
)
def test_allowed_origins_from_env(monkeypatch, raw):
    monkeypatch.setenv("SP_FRONTEND_ALLOWED_ORIGINS", raw)

    assert Settings(_env_file=None).frontend_allowed_origins == ("https://a.example", "https://b.example")


def test_single_allowed_origin_from_env(monkeypatch):
    monkeypatch.setenv("SP_FRONTEND_ALLOWED_ORIGINS", "https://only.example")

    assert Settings(_env_file=None).frontend_allowed_origins == ("https://only.example",)


def test_defaults_without_env(monkeypatch):
    monkeypatch.delenv("SP_DEFAULT_MAP_CENTER", raising=False)
    monkeypatch.delenv("SP_FRONTEND_ALLOWED_ORIGINS", raising=False)

    settings = Settings(_env_file=None)

    assert settings.default_map_center == (49.25, -123.1)
    assert "http://localhost:5173" in settings.frontend_allowed_origins

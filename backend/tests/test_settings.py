"""
Settings tests
"""
import pytest

from config.settings import Settings


@pytest.mark.unit
class TestSettings:
    def test_host_from_environment(self, monkeypatch):
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "9001")

        settings = Settings(_env_file=None)

        assert settings.HOST == "127.0.0.1"
        assert settings.PORT == 9001

    def test_server_defaults(self, monkeypatch):
        monkeypatch.delenv("HOST", raising=False)
        monkeypatch.delenv("PORT", raising=False)

        settings = Settings(_env_file=None)

        assert settings.HOST == "0.0.0.0"
        assert settings.PORT == 8000

    def test_optional_capabilities(self, monkeypatch):
        for name in ("FAL_API_KEY", "SUPABASE_URL", "SUPABASE_KEY"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)
        assert settings.edit_enabled is False
        assert settings.storage_enabled is False

        settings = Settings(_env_file=None, FAL_API_KEY="k", SUPABASE_URL="https://x.supabase.test", SUPABASE_KEY="s")
        assert settings.edit_enabled is True
        assert settings.storage_enabled is True

from decimal import Decimal
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from orderbot.config import DEFAULT_CATALOG, Settings
from orderbot.main import create_app, run

REQUIRED_ENV = {
    "WHATSAPP_TOKEN": "env-token",
    "WHATSAPP_PHONE_ID": "555",
    "WHATSAPP_VERIFY_TOKEN": "env-secret",
    "LLM_API_KEY": "env-llm-key",
}

ALL_ENV = [*REQUIRED_ENV, "GEMINI_API_KEY", "OPENAI_API_KEY", "CATALOG", "LLM_PROVIDER", "PORT"]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ALL_ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestSettingsFromEnv:
    def test_reads_required_values(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)

        settings = Settings(_env_file=None)

        assert settings.whatsapp_token == "env-token"
        assert settings.whatsapp_phone_id == "555"
        assert settings.whatsapp_verify_token == "env-secret"
        assert settings.llm_api_key == "env-llm-key"

    def test_defaults(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)

        settings = Settings(_env_file=None)

        assert settings.port == 3000
        assert settings.llm_provider == "gemini"
        assert settings.graph_api_version == "v17.0"
        assert settings.catalog == DEFAULT_CATALOG

    def test_gemini_api_key_alias(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            if name != "LLM_API_KEY":
                clean_env.setenv(name, value)
        clean_env.setenv("GEMINI_API_KEY", "gemini-key")

        assert Settings(_env_file=None).llm_api_key == "gemini-key"

    def test_catalog_from_json(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)
        clean_env.setenv("CATALOG", '{"flour": 35, "tea": "12.5"}')

        settings = Settings(_env_file=None)

        assert settings.catalog == {"flour": Decimal("35"), "tea": Decimal("12.5")}

    @pytest.mark.parametrize("missing", list(REQUIRED_ENV))
    def test_missing_required_value_fails(self, clean_env, missing):
        for name, value in REQUIRED_ENV.items():
            if name != missing:
                clean_env.setenv(name, value)

        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_unknown_provider_fails(self, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)
        clean_env.setenv("LLM_PROVIDER", "llama")

        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestCreateApp:
    def test_invalid_catalog_fails_at_startup(self, settings):
        settings = settings.model_copy(update={"catalog": {"sugar": Decimal("-1")}})
        with pytest.raises(ValueError):
            create_app(settings)

    def test_app_state_holds_settings(self, settings):
        app = create_app(settings)
        assert app.state.settings is settings
        assert app.state.order_service.catalog.lookup("sugar").unit_price == Decimal("40")


class TestRun:
    @patch("uvicorn.run")
    def test_serves_app_factory_on_configured_port(self, mock_run, clean_env):
        for name, value in REQUIRED_ENV.items():
            clean_env.setenv(name, value)
        clean_env.setenv("PORT", "8081")

        run()

        mock_run.assert_called_once_with("orderbot.main:create_app", factory=True, host="0.0.0.0", port=8081)

import pytest
from pydantic import ValidationError

from medix.config import Settings


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.provider_chain == ["groq", "sambanova", "gemini"]
        assert settings.repair_provider == "groq"
        assert settings.repair_temperature == 0.1

    def test_provider_chain_normalized(self):
        settings = Settings(provider_order=" Gemini, ,GROQ ")
        assert settings.provider_chain == ["gemini", "groq"]

    def test_cors_origins_split(self):
        settings = Settings(cors_allowed_origins="http://a.test, http://b.test")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_prod_requires_a_backend_key(self):
        with pytest.raises(ValidationError, match="At least one generative backend"):
            Settings(
                env="prod",
                groq_api_key="",
                sambanova_api_key="",
                gemini_api_key="",
                anthropic_api_key="",
            )

    def test_prod_with_one_key(self):
        assert Settings(env="prod", gemini_api_key="k").env == "prod"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("PROVIDER_TIMEOUT_SECONDS", "5")
        monkeypatch.setenv("GROQ_MODEL", "llama-3.1-8b-instant")
        settings = Settings()
        assert settings.provider_timeout_seconds == 5.0
        assert settings.groq_model == "llama-3.1-8b-instant"

from pathlib import Path

import pytest

from sales_insight.config import DEFAULT_MODEL, load_settings

ENV_VARS = ["GEMINI_API_KEY", "API_KEY", "SALES_INSIGHT_MODEL", "SALES_INSIGHT_OUTPUT_DIR", "SALES_INSIGHT_RULE_CATCH_ALL"]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestLoadSettings:

    def test_defaults(self):
        settings = load_settings(dotenv=False)
        assert settings.api_key is None
        assert settings.model == DEFAULT_MODEL
        assert settings.output_dir == Path("output")
        assert settings.rule_catch_all is True

    def test_api_key_alias(self, monkeypatch):
        monkeypatch.setenv("API_KEY", "legacy")
        assert load_settings(dotenv=False).api_key == "legacy"
        monkeypatch.setenv("GEMINI_API_KEY", "primary")
        assert load_settings(dotenv=False).api_key == "primary"

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("SALES_INSIGHT_MODEL", "gemini-x")
        monkeypatch.setenv("SALES_INSIGHT_OUTPUT_DIR", "reports")
        monkeypatch.setenv("SALES_INSIGHT_RULE_CATCH_ALL", "off")
        settings = load_settings(dotenv=False)
        assert settings.model == "gemini-x"
        assert settings.output_dir == Path("reports")
        assert settings.rule_catch_all is False

    def test_invalid_flag(self, monkeypatch):
        monkeypatch.setenv("SALES_INSIGHT_RULE_CATCH_ALL", "maybe")
        with pytest.raises(ValueError, match="SALES_INSIGHT_RULE_CATCH_ALL"):
            load_settings(dotenv=False)

    def test_with_output_dir(self):
        settings = load_settings(dotenv=False).with_output_dir("elsewhere")
        assert settings.output_dir == Path("elsewhere")

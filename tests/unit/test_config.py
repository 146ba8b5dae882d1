"""Tests for application settings."""

import pytest

from backend.app import config
from backend.app.config import (
    DEFAULT_OPENAI_MODEL,
    MissingOpenAIKeyError,
    Settings,
    get_openai_api_key,
)


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.web_search_tool_type == "web_search_preview"
    assert settings.max_tool_rounds == 4
    assert settings.budget_tax_rate == 0.1
    assert settings.session_ttl_seconds == 0


@pytest.mark.parametrize("model", ["", "  ", "gpt-5.3-codex"])
def test_placeholder_models_fall_back_to_default(model):
    assert Settings(_env_file=None, openai_model=model).openai_model == DEFAULT_OPENAI_MODEL


def test_explicit_model_kept():
    assert Settings(_env_file=None, openai_model="gpt-4o").openai_model == "gpt-4o"


def test_dummy_key_is_rejected(monkeypatch):
    monkeypatch.setattr(config, "_settings", Settings(_env_file=None, openai_api_key="dummy-key"))

    with pytest.raises(MissingOpenAIKeyError):
        get_openai_api_key()


def test_real_key_is_returned(monkeypatch):
    monkeypatch.setattr(config, "_settings", Settings(_env_file=None, openai_api_key=" sk-test "))

    assert get_openai_api_key() == "sk-test"

import pytest

import config
from config import Config, load_config

ENV_VARS = ['GROQ_API_KEY', 'GROQ_MODEL', 'AI_TIMEOUT', 'OFF_BASE_URL', 'OFF_TIMEOUT',
            'OFF_USER_AGENT', 'PORT', 'LOG_LEVEL']


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.setattr(config, 'load_dotenv', lambda: False)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    assert load_config() == Config()


def test_missing_key_does_not_fail_startup():
    assert load_config().groq_api_key is None


def test_values_from_environment(monkeypatch):
    monkeypatch.setenv('GROQ_API_KEY', 'gsk_test')
    monkeypatch.setenv('GROQ_MODEL', 'llama-3.1-8b-instant')
    monkeypatch.setenv('AI_TIMEOUT', '45')
    monkeypatch.setenv('OFF_BASE_URL', 'https://world.openfoodfacts.net/')
    monkeypatch.setenv('OFF_TIMEOUT', '5')
    monkeypatch.setenv('PORT', '8080')
    monkeypatch.setenv('LOG_LEVEL', 'debug')

    settings = load_config()

    assert settings.groq_api_key == 'gsk_test'
    assert settings.groq_model == 'llama-3.1-8b-instant'
    assert settings.ai_timeout == 45.0
    assert settings.off_base_url == 'https://world.openfoodfacts.net'
    assert settings.off_timeout == 5.0
    assert settings.port == 8080
    assert settings.log_level == 'DEBUG'


def test_empty_key_counts_as_missing(monkeypatch):
    monkeypatch.setenv('GROQ_API_KEY', '')

    assert load_config().groq_api_key is None

import logging

import pytest

CONFIG_ENV_VARS = (
    "LIVEKIT_URL",
    "LIVEKIT_API_KEY",
    "LIVEKIT_API_SECRET",
    "PORT",
    "STT_MODEL",
    "STT_LANGUAGE",
    "LLM_MODEL",
    "TTS_MODEL",
    "TTS_VOICE",
    "PREEMPTIVE_GENERATION",
    "AGENT_PIPELINE",
    "REALTIME_VOICE",
)


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration before each test"""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    logging.basicConfig(level=logging.NOTSET)
    yield


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Run every test without any configuration from the developer's shell"""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch


@pytest.fixture
def livekit_credentials(monkeypatch):
    monkeypatch.setenv("LIVEKIT_URL", "wss://x")
    monkeypatch.setenv("LIVEKIT_API_KEY", "k")
    monkeypatch.setenv("LIVEKIT_API_SECRET", "s")

"""Runtime configuration read from environment variables.

Secrets are never hardcoded. Put LIVEKIT_URL, LIVEKIT_API_KEY and
LIVEKIT_API_SECRET in `.env.local` when running locally or self-hosting.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

ENV_FILE = ".env.local"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_VOICE_ID = "9626c31c-bec5-4cca-baa8-f8ba9e84c8bc"
DEFAULT_GREETING = "Greet the user in a helpful and friendly manner."


def load_environment() -> None:
    """Load `.env.local` if present. Variables already set win."""
    load_dotenv(ENV_FILE)


def configure_logging() -> None:
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )


def _env_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class LiveKitCredentials:
    """Server-side credentials used to sign room access tokens."""

    url: str
    api_key: str
    api_secret: str

    @classmethod
    def from_env(cls) -> "LiveKitCredentials":
        return cls(
            url=os.getenv("LIVEKIT_URL", "").strip(),
            api_key=os.getenv("LIVEKIT_API_KEY", "").strip(),
            api_secret=os.getenv("LIVEKIT_API_SECRET", "").strip(),
        )

    def missing_required(self) -> list[str]:
        missing = []
        if not self.url:
            missing.append("LIVEKIT_URL")
        if not self.api_key:
            missing.append("LIVEKIT_API_KEY")
        if not self.api_secret:
            missing.append("LIVEKIT_API_SECRET")
        return missing

    def is_ready(self) -> bool:
        return not self.missing_required()


@dataclass(frozen=True)
class AgentSettings:
    """Provider and model identifiers for one voice session.

    Model names follow LiveKit Inference ("provider/model"). See
    https://docs.livekit.io/agents/models/ for what is available.
    """

    stt_model: str = "deepgram/nova-3"
    stt_language: str = "multi"
    llm_model: str = "openai/gpt-4.1-mini"
    tts_model: str = "cartesia/sonic-3"
    tts_voice: str = DEFAULT_VOICE_ID
    # Let the LLM start on a reply while the end of turn is still being decided
    preemptive_generation: bool = True
    # "inference" (STT -> LLM -> TTS) or "realtime" (OpenAI Realtime API)
    pipeline: str = "inference"
    realtime_voice: str = "marin"
    greeting_instructions: str = DEFAULT_GREETING

    @classmethod
    def from_env(cls) -> "AgentSettings":
        defaults = cls()
        return cls(
            stt_model=_env_str("STT_MODEL", defaults.stt_model),
            stt_language=_env_str("STT_LANGUAGE", defaults.stt_language),
            llm_model=_env_str("LLM_MODEL", defaults.llm_model),
            tts_model=_env_str("TTS_MODEL", defaults.tts_model),
            tts_voice=_env_str("TTS_VOICE", defaults.tts_voice),
            preemptive_generation=_env_flag(
                "PREEMPTIVE_GENERATION", defaults.preemptive_generation
            ),
            pipeline=_env_str("AGENT_PIPELINE", defaults.pipeline).lower(),
            realtime_voice=_env_str("REALTIME_VOICE", defaults.realtime_voice),
        )

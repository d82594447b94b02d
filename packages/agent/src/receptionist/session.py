"""Voice pipeline construction for a single call."""

from __future__ import annotations

import logging

from livekit import rtc
from livekit.agents import AgentSession, JobContext, MetricsCollectedEvent, inference, metrics, room_io
from livekit.plugins import noise_cancellation, openai, silero
from livekit.plugins.turn_detector.multilingual import MultilingualModel

from .config import AgentSettings

logger = logging.getLogger(__name__)


def build_session(settings: AgentSettings, vad: silero.VAD) -> AgentSession:
    """Build the session for one job. `vad` is the process-wide prewarmed detector."""
    if settings.pipeline == "inference":
        return AgentSession(
            # Speech-to-text: the agent's ears
            stt=inference.STT(model=settings.stt_model, language=settings.stt_language),
            # The LLM processes the caller's words and writes the reply
            llm=inference.LLM(model=settings.llm_model),
            # Text-to-speech: the agent's voice
            tts=inference.TTS(model=settings.tts_model, voice=settings.tts_voice),
            # VAD and turn detection decide when the caller is done speaking
            turn_detection=MultilingualModel(),
            vad=vad,
            preemptive_generation=settings.preemptive_generation,
        )

    if settings.pipeline == "realtime":
        # Speech-to-speech model; needs OPENAI_API_KEY
        return AgentSession(
            llm=openai.realtime.RealtimeModel(voice=settings.realtime_voice),
        )

    raise ValueError(f"Unknown agent pipeline: {settings.pipeline!r}")


def room_options() -> room_io.RoomOptions:
    """Input noise cancellation, tuned for telephony when the caller dials in over SIP."""
    return room_io.RoomOptions(
        audio_input=room_io.AudioInputOptions(
            noise_cancellation=lambda params: (
                noise_cancellation.BVCTelephony()
                if params.participant.kind == rtc.ParticipantKind.PARTICIPANT_KIND_SIP
                else noise_cancellation.BVC()
            ),
        ),
    )


def track_usage(session: AgentSession, ctx: JobContext) -> metrics.UsageCollector:
    """Log every pipeline metric and report the accumulated usage when the job shuts down."""
    usage_collector = metrics.UsageCollector()

    def _on_metrics_collected(ev: MetricsCollectedEvent) -> None:
        metrics.log_metrics(ev.metrics)
        usage_collector.collect(ev.metrics)

    session.on("metrics_collected", _on_metrics_collected)

    async def log_usage() -> None:
        # Reporting must not break the framework's shutdown sequence
        try:
            summary = usage_collector.get_summary()
        except Exception:
            logger.exception("Failed to summarize usage")
            return
        logger.info(f"Usage: {summary}")

    ctx.add_shutdown_callback(log_usage)
    return usage_collector

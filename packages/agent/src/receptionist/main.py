"""Dog grooming receptionist agent

LiveKit voice agent with:
- LiveKit Inference STT/LLM/TTS (Deepgram, OpenAI, Cartesia)
- Silero VAD, prewarmed once per worker process
- LiveKit multilingual turn detector
- Token API for the frontend, served alongside the worker
"""

import logging

from livekit import agents
from livekit.agents import AgentServer, JobProcess
from livekit.plugins import silero

from .assistant import Receptionist
from .config import AgentSettings, configure_logging, load_environment
from .session import build_session, room_options, track_usage
from .token_server import serve_token_api

logger = logging.getLogger(__name__)

load_environment()

server = AgentServer()


def prewarm(proc: JobProcess):
    proc.userdata["vad"] = silero.VAD.load()


server.setup_fnc = prewarm


@server.rtc_session()
async def handle_call(ctx: agents.JobContext):
    ctx.log_context_fields = {"room": ctx.room.name}

    settings = AgentSettings.from_env()
    session = build_session(settings, vad=ctx.proc.userdata["vad"])
    track_usage(session, ctx)

    await session.start(
        agent=Receptionist(),
        room=ctx.room,
        room_options=room_options(),
    )

    await ctx.connect()

    session.generate_reply(instructions=settings.greeting_instructions)


def main():
    configure_logging()
    serve_token_api()
    agents.cli.run_app(server)


if __name__ == "__main__":
    main()

from unittest.mock import AsyncMock, MagicMock, call, patch

import pytest

from receptionist import main
from receptionist.config import AgentSettings


@pytest.fixture
def job_context():
    ctx = MagicMock()
    ctx.room.name = "call-1234"
    ctx.proc.userdata = {"vad": MagicMock(name="vad")}
    ctx.connect = AsyncMock()
    return ctx


@pytest.fixture
def session():
    session = MagicMock()
    session.start = AsyncMock()
    return session


def test_prewarm_loads_vad_into_process_state():
    proc = MagicMock()
    proc.userdata = {}
    with patch("receptionist.main.silero") as mock_silero:
        main.prewarm(proc)

    mock_silero.VAD.load.assert_called_once_with()
    assert proc.userdata["vad"] is mock_silero.VAD.load.return_value


def test_prewarm_is_registered():
    assert main.server.setup_fnc is main.prewarm


class TestHandleCall:
    """Tests for the per-call entry point"""

    @pytest.mark.asyncio
    async def test_lifecycle_order(self, job_context, session):
        steps = []
        session.start.side_effect = lambda **kwargs: steps.append("start")
        job_context.connect.side_effect = lambda: steps.append("connect")
        session.generate_reply.side_effect = lambda **kwargs: steps.append("greet")

        with patch("receptionist.main.build_session", return_value=session) as mock_build, patch(
            "receptionist.main.track_usage", side_effect=lambda *a: steps.append("track_usage")
        ) as mock_track, patch("receptionist.main.room_options") as mock_room_options, patch(
            "receptionist.main.Receptionist"
        ) as mock_agent:
            await main.handle_call(job_context)

        assert steps == ["track_usage", "start", "connect", "greet"]
        mock_build.assert_called_once_with(AgentSettings(), vad=job_context.proc.userdata["vad"])
        mock_track.assert_called_once_with(session, job_context)
        session.start.assert_awaited_once_with(
            agent=mock_agent.return_value,
            room=job_context.room,
            room_options=mock_room_options.return_value,
        )
        assert session.generate_reply.call_args_list == [
            call(instructions="Greet the user in a helpful and friendly manner.")
        ]
        assert job_context.log_context_fields == {"room": "call-1234"}

    @pytest.mark.asyncio
    async def test_start_failure_propagates(self, job_context, session):
        session.start.side_effect = RuntimeError("room unavailable")

        with patch("receptionist.main.build_session", return_value=session), patch(
            "receptionist.main.track_usage"
        ), patch("receptionist.main.room_options"), patch("receptionist.main.Receptionist"):
            with pytest.raises(RuntimeError, match="room unavailable"):
                await main.handle_call(job_context)

        job_context.connect.assert_not_awaited()
        session.generate_reply.assert_not_called()

    @pytest.mark.asyncio
    async def test_connect_failure_propagates(self, job_context, session):
        job_context.connect.side_effect = ConnectionError("media server down")

        with patch("receptionist.main.build_session", return_value=session), patch(
            "receptionist.main.track_usage"
        ), patch("receptionist.main.room_options"), patch("receptionist.main.Receptionist"):
            with pytest.raises(ConnectionError):
                await main.handle_call(job_context)

        session.generate_reply.assert_not_called()

    @pytest.mark.asyncio
    async def test_settings_from_environment(self, job_context, session, monkeypatch):
        monkeypatch.setenv("LLM_MODEL", "openai/gpt-4o")

        with patch("receptionist.main.build_session", return_value=session) as mock_build, patch(
            "receptionist.main.track_usage"
        ), patch("receptionist.main.room_options"), patch("receptionist.main.Receptionist"):
            await main.handle_call(job_context)

        assert mock_build.call_args.args[0].llm_model == "openai/gpt-4o"


def test_main_starts_token_api_then_worker():
    manager = MagicMock()
    with patch("receptionist.main.configure_logging"), patch(
        "receptionist.main.serve_token_api", manager.serve_token_api
    ), patch("receptionist.main.agents", manager.agents):
        main.main()

    assert manager.mock_calls == [
        call.serve_token_api(),
        call.agents.cli.run_app(main.server),
    ]

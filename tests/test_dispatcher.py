"""Tests for the Dispatcher pipeline (parse -> resolve -> gates -> execute)."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from burlfret.core.cooldowns import CooldownTracker
from burlfret.core.dispatcher import (
    GENERIC_FAILURE_REPLY,
    NO_GUILD_REPLY,
    DispatchOutcome,
    Dispatcher,
    parse_command,
)
from burlfret.core.registry import Registry

from conftest import BOT_USER_ID, make_descriptor, make_message


class TestParseCommand:
    def test_splits_on_runs_of_whitespace_and_lowercases_key(self):
        assert parse_command("!PiNg   a \t b", "!") == ("ping", ("a", "b"))

    def test_space_after_prefix_is_tolerated(self):
        assert parse_command("!  help set", "!") == ("help", ("set",))

    @pytest.mark.parametrize("content", ["ping", "?ping", "", "!", "!   "])
    def test_no_command(self, content):
        assert parse_command(content, "!") is None

    def test_multi_char_prefix(self):
        assert parse_command("bb!doit now", "bb!") == ("doit", ("now",))


class TestDispatcher:
    @pytest.fixture
    def tracker(self, clock):
        return CooldownTracker(clock=clock)

    @pytest.fixture
    def dispatcher(self, registry, tracker):
        return Dispatcher(registry, "!", cooldowns=tracker)

    @pytest.mark.asyncio
    async def test_alias_executes_canonical_command(self, dispatcher, registry):
        outcome = await dispatcher.handle(make_message("!PONG extra args"))

        assert outcome is DispatchOutcome.EXECUTED
        execute = registry.lookup("ping").execute
        execute.assert_awaited_once()
        ctx = execute.await_args.args[0]
        assert ctx.command_key == "pong"
        assert ctx.descriptor.name == "ping"
        assert ctx.raw_args == ("extra", "args")
        assert ctx.caller_id == 111
        assert ctx.is_private_channel is False

    @pytest.mark.asyncio
    async def test_own_messages_never_resolved(self, registry):
        spy = MagicMock(wraps=registry)
        dispatcher = Dispatcher(spy, "!")
        message = make_message("!ping", author_id=BOT_USER_ID)

        outcome = await dispatcher.handle(message, self_id=BOT_USER_ID)

        assert outcome is DispatchOutcome.IGNORED
        spy.lookup.assert_not_called()
        message.reply.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_other_bots_ignored(self, registry):
        spy = MagicMock(wraps=registry)
        dispatcher = Dispatcher(spy, "!")

        outcome = await dispatcher.handle(make_message("!ping", author_is_bot=True))

        assert outcome is DispatchOutcome.IGNORED
        spy.lookup.assert_not_called()

    @pytest.mark.asyncio
    async def test_wrong_prefix_never_parsed(self, registry):
        spy = MagicMock(wraps=registry)
        dispatcher = Dispatcher(spy, "!")

        assert await dispatcher.handle(make_message("?ping")) is DispatchOutcome.IGNORED
        spy.lookup.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_command_silently_dropped(self, dispatcher):
        message = make_message("!doesnotexist")
        assert await dispatcher.handle(message) is DispatchOutcome.IGNORED
        message.reply.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_capability_rejected_with_notice(self, dispatcher, registry):
        message = make_message("!set @someone Nick")

        outcome = await dispatcher.handle(message)

        assert outcome is DispatchOutcome.REJECTED_PERMISSION
        registry.lookup("set").execute.assert_not_awaited()
        message.reply.assert_awaited_once()
        assert "Manage Nicknames" in message.reply.await_args.args[0]

    @pytest.mark.asyncio
    async def test_private_channel_rejected_with_server_only_notice(self, dispatcher, registry):
        message = make_message("!set @someone Nick", in_guild=False, permissions=["manage_nicknames"])

        outcome = await dispatcher.handle(message)

        assert outcome is DispatchOutcome.REJECTED_PERMISSION
        message.reply.assert_awaited_once_with(NO_GUILD_REPLY)

    @pytest.mark.asyncio
    async def test_caller_with_capability_executes(self, dispatcher, registry):
        message = make_message("!set @someone Nick", permissions=["manage_nicknames"])

        assert await dispatcher.handle(message) is DispatchOutcome.EXECUTED
        ctx = registry.lookup("set").execute.await_args.args[0]
        assert "manage_nicknames" in ctx.caller_capabilities

    @pytest.mark.asyncio
    async def test_cooldown_rejects_then_expires(self, dispatcher, registry, clock):
        assert await dispatcher.handle(make_message("!ping")) is DispatchOutcome.EXECUTED

        clock.advance(1.5)
        message = make_message("!ping")
        assert await dispatcher.handle(message) is DispatchOutcome.REJECTED_COOLDOWN
        text = message.reply.await_args.args[0]
        assert "2 more seconds" in text
        assert "`ping`" in text

        clock.advance(1.5)
        assert await dispatcher.handle(make_message("!ping")) is DispatchOutcome.EXECUTED
        assert registry.lookup("ping").execute.await_count == 2

    @pytest.mark.asyncio
    async def test_permission_denial_does_not_consume_cooldown(self, clock):
        reg = Registry()
        reg.register(make_descriptor("kick", required=["kick_members"], cooldown=30))
        tracker = CooldownTracker(clock=clock)
        dispatcher = Dispatcher(reg.freeze(), "!", cooldowns=tracker)

        for _ in range(3):
            assert await dispatcher.handle(make_message("!kick")) is DispatchOutcome.REJECTED_PERMISSION
        assert len(tracker) == 0

        allowed = make_message("!kick", permissions=["kick_members"])
        assert await dispatcher.handle(allowed) is DispatchOutcome.EXECUTED

    @pytest.mark.asyncio
    async def test_uncooled_command_never_touches_tracker(self, dispatcher, tracker):
        for _ in range(5):
            assert await dispatcher.handle(make_message("!free")) is DispatchOutcome.EXECUTED
        assert len(tracker) == 0


class TestExecutionFailure:
    @pytest.mark.asyncio
    async def test_failure_contained_with_one_generic_reply(self, caplog):
        boom = AsyncMock(side_effect=RuntimeError("secret internal detail"))
        reg = Registry()
        reg.register(make_descriptor("boom", execute=boom))
        reg.register(make_descriptor("ok"))
        dispatcher = Dispatcher(reg.freeze(), "!")

        message = make_message("!boom")
        outcome = await dispatcher.handle(message)

        assert outcome is DispatchOutcome.FAILED
        message.reply.assert_awaited_once_with(GENERIC_FAILURE_REPLY)
        assert "secret internal detail" not in message.reply.await_args.args[0]
        assert any("Error executing command: boom" in r.getMessage() for r in caplog.records)

        # Still serving.
        assert await dispatcher.handle(make_message("!ok")) is DispatchOutcome.EXECUTED

    @pytest.mark.asyncio
    async def test_reply_failure_is_swallowed(self):
        reg = Registry()
        reg.register(make_descriptor("boom", execute=AsyncMock(side_effect=ValueError("x"))))
        dispatcher = Dispatcher(reg.freeze(), "!")

        message = make_message("!boom")
        message.reply.side_effect = RuntimeError("cannot send here")

        assert await dispatcher.handle(message) is DispatchOutcome.FAILED
        message.reply.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_rejection_reply_failure_is_swallowed(self, registry):
        dispatcher = Dispatcher(registry, "!")
        message = make_message("!set x y")
        message.reply.side_effect = RuntimeError("no send permission")

        assert await dispatcher.handle(message) is DispatchOutcome.REJECTED_PERMISSION
        message.reply.assert_awaited_once()

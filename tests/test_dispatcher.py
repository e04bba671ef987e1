"""Tests for chanlog.dispatcher: gating, formatting, routing, observers."""

import logging
import threading
from enum import IntEnum

import pytest

from chanlog import get_logger, init_logger
from chanlog.channels import Channel
from chanlog.dispatcher import LogDispatcher
from chanlog.errors import ChannelNotFoundError, FatalHalt, FormatError
from chanlog.fatal import FatalDecision, halt_on_fatal
from chanlog.formatting import LIGHT_THEME
from chanlog.priority import Priority
from chanlog.registry import ChannelRegistry
from chanlog.sinks import stream_sinks


class Game(IntEnum):
    Net = 0
    Save = 1


# =============================================================================
# Channel gating
# =============================================================================

class TestGating:

    def test_active_channel_is_sunk(self, dispatcher, sinks):
        dispatcher.log(Channel.AI, "thinking")
        assert len(sinks.records) == 1

    def test_removed_channel_is_silent(self, dispatcher, registry, sinks):
        seen = []
        dispatcher.add_observer(lambda *a: seen.append(a))
        registry.remove(Channel.AI)
        assert dispatcher.log(Channel.AI, "thinking") is None
        assert sinks.records == []
        assert seen == []

    def test_disabled_channel_is_silent(self, dispatcher, registry, sinks):
        registry.toggle(Channel.Audio)
        dispatcher.error(Channel.Audio, "boom")
        assert sinks.records == []

    def test_disabled_channel_skips_formatting(self, dispatcher, registry):
        """Bad format args on a disabled channel are never evaluated."""
        registry.toggle(Channel.Audio)
        assert dispatcher.log(Channel.Audio, "{0} {1}", 1) is None


# =============================================================================
# Formatting
# =============================================================================

class TestFormatting:

    def test_positional_args(self, dispatcher, sinks):
        dispatcher.log(Channel.Physics, "count={0}", 3)
        assert "count=3" in sinks.texts()[0]

    def test_mismatch_raises_and_sinks_nothing(self, dispatcher, sinks):
        with pytest.raises(FormatError):
            dispatcher.log(Channel.Physics, "count={0} of {1}", 3)
        assert sinks.records == []

    def test_extra_argument_raises(self, dispatcher, sinks):
        with pytest.raises(FormatError):
            dispatcher.log(Channel.Physics, "count={0}", 3, 4)
        assert sinks.records == []

    def test_braces_without_args_are_literal(self, dispatcher, sinks):
        dispatcher.log(Channel.UI, "layout {width}")
        assert "layout {width}" in sinks.texts()[0]

    def test_colored_markup(self, dispatcher, sinks):
        final = dispatcher.log(Channel.Rendering, "frame")
        assert final == ("<b><color=#008000>[Rendering] </color></b> "
                         "<color=white>frame</color>")
        assert sinks.texts() == [final]

    def test_priority_color(self, dispatcher):
        final = dispatcher.warning(Channel.Rendering, "slow frame")
        assert "<color=orange>slow frame</color>" in final

    def test_light_theme_info_color(self, registry, sinks):
        d = LogDispatcher(registry, sinks=sinks, theme=LIGHT_THEME)
        assert "<color=black>hi</color>" in d.info(Channel.AI, "hi")

    def test_markup_disabled(self, registry, sinks):
        d = LogDispatcher(registry, sinks=sinks, markup=False)
        assert d.info(Channel.AI, "plain") == "[AI] plain"

    def test_fatal_is_plain(self, dispatcher):
        assert dispatcher.fatal(Channel.Platform, "dead") == "[Platform] dead"


# =============================================================================
# Routing
# =============================================================================

class TestRouting:

    @pytest.mark.parametrize("priority, sink", [
        (Priority.INFO, "info"),
        (Priority.WARNING, "warning"),
        (Priority.ERROR, "error"),
        (Priority.FATAL_ERROR, "error"),
    ])
    def test_priority_picks_sink(self, dispatcher, sinks, priority, sink):
        dispatcher.log(Channel.Loading, "msg", priority=priority)
        assert [s for s, _ in sinks.records] == [sink]

    def test_stream_sinks(self, registry, capsys):
        d = LogDispatcher(registry, sinks=stream_sinks(), markup=False)
        d.info(Channel.AI, "to stdout")
        d.error(Channel.AI, "to stderr")
        captured = capsys.readouterr()
        assert "[AI] to stdout" in captured.out
        assert "[AI] to stderr" in captured.err

    def test_logging_bridge(self, registry, caplog):
        from chanlog.sinks import logging_sinks
        d = LogDispatcher(registry, sinks=logging_sinks(logging.getLogger("game")),
                          markup=False)
        with caplog.at_level(logging.INFO, logger="game"):
            d.warning(Channel.Audio, "clip missing")
        assert caplog.records[0].levelno == logging.WARNING
        assert caplog.records[0].getMessage() == "[Audio] clip missing"


# =============================================================================
# Assert
# =============================================================================

class TestAssert:

    def test_false_logs_fatal_on_assert_channel(self, dispatcher, sinks):
        seen = []
        dispatcher.add_observer(lambda ch, prio, msg: seen.append((ch, prio, msg)))
        dispatcher.assert_(False, "oops")
        assert seen == [(Channel.Assert, Priority.FATAL_ERROR, "[Assert] Assert Failed: oops")]
        assert sinks.records == [("error", "[Assert] Assert Failed: oops")]

    def test_equivalent_to_log(self, registry, sinks):
        d = LogDispatcher(registry, sinks=sinks)
        d.assert_(False, "oops")
        d.log(Channel.Assert, "Assert Failed: oops", priority=Priority.FATAL_ERROR)
        assert sinks.records[0] == sinks.records[1]

    def test_true_is_silent(self, dispatcher, sinks):
        assert dispatcher.assert_(True, "oops") is None
        assert sinks.records == []

    def test_message_is_not_a_format_string(self, dispatcher, sinks):
        dispatcher.assert_(False, "index {0} out of range")
        assert "index {0} out of range" in sinks.texts()[0]

    def test_disabled_assert_channel_is_silent(self, dispatcher, registry, sinks):
        registry.remove(Channel.Assert)
        dispatcher.assert_(False, "oops")
        assert sinks.records == []

    def test_channel_set_without_assert(self, sinks):
        d = LogDispatcher(ChannelRegistry(Game), sinks=sinks)
        with pytest.raises(ChannelNotFoundError):
            d.assert_(False, "oops")

    def test_explicit_assert_channel(self, sinks):
        d = LogDispatcher(ChannelRegistry(Game), sinks=sinks, assert_channel=Game.Save)
        d.assert_(False, "oops")
        assert sinks.texts() == ["[Save] Assert Failed: oops"]


# =============================================================================
# Missing colors
# =============================================================================

class TestMissingColor:

    def test_fallback_color_and_single_warning(self, sinks):
        d = LogDispatcher(ChannelRegistry(Game), sinks=sinks)
        first = d.info(Game.Net, "one")
        second = d.info(Game.Net, "two")
        assert "<color=white>[Net] </color>" in first
        assert "<color=white>[Net] </color>" in second
        warnings = sinks.texts("warning")
        assert warnings == ["Please add a color for channel Net"]

    def test_one_warning_per_channel(self, sinks):
        d = LogDispatcher(ChannelRegistry(Game), sinks=sinks)
        d.info(Game.Net, "a")
        d.info(Game.Save, "b")
        d.info(Game.Save, "c")
        assert len(sinks.texts("warning")) == 2

    def test_fatal_does_not_need_color(self, sinks):
        d = LogDispatcher(ChannelRegistry(Game), sinks=sinks)
        d.fatal(Game.Net, "down")
        assert sinks.texts("warning") == []

    def test_explicit_colors(self, sinks):
        d = LogDispatcher(ChannelRegistry(Game), colors={Game.Net: "#123456"}, sinks=sinks)
        assert "<color=#123456>[Net] </color>" in d.info(Game.Net, "up")


# =============================================================================
# Observers
# =============================================================================

class TestObservers:

    def test_called_in_registration_order(self, dispatcher):
        order = []
        dispatcher.add_observer(lambda *a: order.append("first"))
        dispatcher.add_observer(lambda *a: order.append("second"))
        dispatcher.info(Channel.AI, "x")
        assert order == ["first", "second"]

    def test_receives_final_message(self, dispatcher):
        seen = []
        dispatcher.add_observer(lambda ch, prio, msg: seen.append((ch, prio, msg)))
        final = dispatcher.warning(Channel.UI, "w={0}", 5)
        assert seen == [(Channel.UI, Priority.WARNING, final)]

    def test_remove_observer(self, dispatcher):
        seen = []

        def obs(*a):
            seen.append(a)

        dispatcher.add_observer(obs)
        assert dispatcher.remove_observer(obs) is True
        assert dispatcher.remove_observer(obs) is False
        dispatcher.info(Channel.AI, "x")
        assert seen == []

    def test_add_observer_as_decorator(self, dispatcher):
        @dispatcher.add_observer
        def obs(ch, prio, msg):
            pass

        assert dispatcher.observers == [obs]

    def test_failing_observer_is_isolated(self, dispatcher, sinks):
        seen = []

        def broken(*a):
            raise RuntimeError("observer bug")

        dispatcher.add_observer(broken)
        dispatcher.add_observer(lambda *a: seen.append(a))
        dispatcher.info(Channel.AI, "x")
        assert len(seen) == 1
        errors = sinks.texts("error")
        assert len(errors) == 1
        assert "RuntimeError: observer bug" in errors[0]


# =============================================================================
# Fatal handler
# =============================================================================

class TestFatalHandler:

    def test_handler_gets_plain_message_before_sink(self, registry, sinks):
        calls = []

        def handler(message):
            calls.append((message, list(sinks.records)))
            return FatalDecision.CONTINUE

        d = LogDispatcher(registry, sinks=sinks, fatal_handler=handler)
        d.fatal(Channel.Build, "broken")
        assert calls == [("[Build] broken", [])]
        assert sinks.texts("error") == ["[Build] broken"]

    def test_not_called_for_error(self, registry, sinks):
        calls = []
        d = LogDispatcher(registry, sinks=sinks,
                          fatal_handler=lambda m: calls.append(m) or FatalDecision.CONTINUE)
        d.error(Channel.Build, "broken")
        assert calls == []

    def test_halt_raises_after_sink_and_observers(self, registry, sinks):
        seen = []
        d = LogDispatcher(registry, sinks=sinks, fatal_handler=halt_on_fatal)
        d.add_observer(lambda *a: seen.append(a))
        with pytest.raises(FatalHalt) as exc:
            d.fatal(Channel.Build, "broken")
        assert exc.value.message == "[Build] broken"
        assert sinks.texts("error") == ["[Build] broken"]
        assert len(seen) == 1

    def test_handler_runs_without_registry_lock(self, registry, sinks):
        """A blocking handler must not stall other threads' log calls."""
        def handler(message):
            # Another thread must be able to query the registry meanwhile
            result = []
            t = threading.Thread(target=lambda: result.append(registry.is_active(Channel.AI)))
            t.start()
            t.join(timeout=5)
            assert result == [True]
            return FatalDecision.CONTINUE

        d = LogDispatcher(registry, sinks=sinks, fatal_handler=handler)
        d.fatal(Channel.Build, "broken")


# =============================================================================
# Module-level dispatcher
# =============================================================================

class TestModuleLevel:

    def test_init_logger_sets_default(self, registry, sinks):
        d = init_logger(registry, sinks=sinks)
        assert get_logger() is d

    def test_get_logger_creates_default(self):
        from chanlog import dispatcher as mod
        mod._dispatcher = None
        d = get_logger()
        assert isinstance(d, LogDispatcher)
        assert get_logger() is d

    def test_instances_are_independent(self, sinks):
        a = LogDispatcher(ChannelRegistry(), sinks=sinks)
        b = LogDispatcher(ChannelRegistry(), sinks=sinks)
        a.registry.toggle(Channel.AI)
        assert b.registry.is_active(Channel.AI)


@pytest.mark.slow
def test_concurrent_logging_with_replace(sinks):
    """Log calls racing replace_all() never fail and only log active channels."""
    reg = ChannelRegistry(Channel)
    d = LogDispatcher(reg, sinks=sinks, markup=False)
    errors = []

    def logger():
        try:
            for _ in range(500):
                d.info(Channel.AI, "ai")
        except Exception as e:  # pragma: no cover - reported below
            errors.append(e)

    def switcher():
        for i in range(500):
            reg.replace_all({Channel.AI: bool(i % 2)})

    threads = [threading.Thread(target=logger) for _ in range(3)]
    threads.append(threading.Thread(target=switcher))
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    assert errors == []
    assert set(sinks.texts()) <= {"[AI] ai"}

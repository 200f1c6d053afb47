"""State machine tests for VibeMonitor, driven tick by tick with a fake clock."""

import pytest

from fakes import DeferredExecutor


def first_time(history, kind):
    for t, vibe in history:
        if vibe.kind == kind:
            return t
    return None


# ---- lifecycle ----

class TestLifecycle:
    def test_start_runs_one_foreground_check_immediately(self, make_harness):
        h = make_harness()
        h.start("Claude")
        assert h.foreground.calls == 1
        assert h.vibe.kind == "IN_TRACKED_APP"
        assert h.vibe.app == "Claude"
        assert h.monitor.get_state().status == "RUNNING"

    def test_start_subscribes_and_stop_unsubscribes_input(self, make_harness):
        h = make_harness()
        h.start("Claude")
        assert h.input.subscribe_count == 1
        h.monitor.stop()
        assert h.input.unsubscribe_count == 1
        assert h.input.callback is None

    def test_stop_is_safe_to_call_twice(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.monitor.stop()
        h.monitor.stop()
        assert h.monitor.get_state().status == "STOPPED"

    def test_start_while_running_restarts_cleanly(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(5.0)
        assert h.vibe.kind == "WAITING"

        h.start("Claude")
        assert h.input.subscribe_count == 2
        assert h.input.unsubscribe_count == 1
        assert h.vibe.kind == "IN_TRACKED_APP"

    def test_no_transitions_or_events_after_stop(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(4.0)
        assert h.vibe.kind == "WAITING"
        h.monitor.stop()
        before = list(h.recorder.types())

        h.clock.advance(60)
        h.tick()
        h.monitor.record_input_activity()
        h.monitor.reset_waiting()

        assert h.recorder.types() == before
        assert h.vibe.kind == "IDLE"

    def test_restart_resets_cpu_tracker(self, make_harness):
        h = make_harness()
        h.sampler.cpu = 50.0
        h.start("WebStorm")
        h.run_until(3.0)
        assert h.monitor.get_state().companion_active

        h.sampler.cpu = 50.0
        h.start("WebStorm")
        assert not h.monitor.get_state().companion_active
        assert h.vibe.kind == "IDLE"


# ---- direct AI apps ----

class TestDirectAppScenario:
    def test_claude_goes_waiting_then_workout(self, make_harness):
        h = make_harness()
        h.start("Claude")
        assert h.vibe.kind == "IN_TRACKED_APP"

        history = h.run_until(40.0)

        assert first_time(history, "WAITING") == 3.0
        assert first_time(history, "WORKOUT_TRIGGERED") == 33.0
        assert h.recorder.types() == ["WAITING_STARTED", "WORKOUT_TRIGGERED"]
        assert h.recorder.events[0]["app"] == "Claude"

    def test_direct_app_needs_no_companion_cpu(self, make_harness):
        h = make_harness()
        h.sampler.cpu = 0.0
        h.start("chatgpt")
        assert h.vibe.kind == "IN_TRACKED_APP"

    def test_untracked_app_stays_idle(self, make_harness):
        h = make_harness()
        h.start("Safari")
        history = h.run_until(10.0)
        assert all(v.kind == "IDLE" for _, v in history)
        assert h.recorder.events == []


# ---- IDE / terminal apps ----

class TestCompanionGatedApps:
    def test_ide_tracked_only_after_sustained_cpu(self, make_harness):
        h = make_harness()
        h.sampler.cpu = 6.0
        h.start("WebStorm")
        assert h.vibe.kind == "IDLE"

        history = h.run_until(4.0)

        assert first_time(history, "IN_TRACKED_APP") == 2.0
        assert all(v.kind == "IDLE" for t, v in history if t < 2.0)
        assert h.vibe.app == "WebStorm"

    def test_terminal_with_quiet_companion_is_not_tracked(self, make_harness):
        h = make_harness()
        h.sampler.cpu = 1.0
        h.start("iTerm2")
        history = h.run_until(10.0)
        assert all(v.kind == "IDLE" for _, v in history)

    def test_companion_going_quiet_exits_app(self, make_harness):
        h = make_harness()
        h.sampler.cpu = 20.0
        h.start("Ghostty")
        h.run_until(2.0)
        assert h.vibe.kind == "IN_TRACKED_APP"

        h.sampler.cpu = 0.0
        h.run_until(3.0)

        assert h.vibe.kind == "IDLE"
        assert h.recorder.types() == ["APP_EXITED"]

    def test_sampler_failure_counts_as_zero(self, make_harness):
        h = make_harness()
        h.sampler.cpu = 20.0
        h.start("Code")
        h.run_until(2.0)
        assert h.monitor.get_state().companion_active

        h.sampler.fail = True
        h.run_until(3.0)

        state = h.monitor.get_state()
        assert not state.companion_active
        assert state.companion_cpu_pct == 0.0
        assert h.vibe.kind == "IDLE"

    def test_samples_are_rate_limited(self, make_harness):
        h = make_harness()
        h.start("Safari")
        h.run_until(5.0, step=0.25)
        # t=0 plus one per second.
        assert len(h.sampler.patterns) == 6
        assert set(h.sampler.patterns) == {"claude|anthropic"}

    def test_slow_reply_applies_at_arrival_and_blocks_new_requests(self, make_harness):
        executor = DeferredExecutor()
        h = make_harness(executor=executor)
        h.sampler.cpu = 6.0
        h.start("WebStorm")

        h.run_until(2.0)
        assert len(executor.pending) == 1

        h.clock.t = 2.5
        executor.run_all()
        state = h.monitor.get_state()
        assert state.companion_cpu_pct == 6.0
        # Window opened at arrival (2.5), not at request (0.0).
        assert not state.companion_active

        h.tick()
        executor.run_all()
        assert not h.monitor.get_state().companion_active

        h.clock.t = 4.5
        h.tick()
        executor.run_all()
        assert h.monitor.get_state().companion_active
        assert h.vibe.kind == "IN_TRACKED_APP"

    def test_reply_after_stop_is_dropped(self, make_harness):
        executor = DeferredExecutor()
        h = make_harness(executor=executor)
        h.sampler.cpu = 90.0
        h.start("WebStorm")
        h.monitor.stop()

        executor.run_all()

        state = h.monitor.get_state()
        assert state.companion_cpu_pct == 0.0
        assert h.recorder.events == []


# ---- idle detection ----

class TestIdleDetection:
    def test_grace_period_suppresses_waiting(self, make_harness):
        h = make_harness(grace_period_s=5.0, idle_threshold_s=3.0)
        h.start("Claude")
        history = h.run_until(8.0)
        assert all(v.kind != "WAITING" for t, v in history if t < 5.0)
        assert first_time(history, "WAITING") == 5.0

    def test_typing_keeps_resetting_grace(self, make_harness):
        h = make_harness()
        h.start("Claude")
        for _ in range(20):
            h.clock.advance(1.0)
            h.input.fire("key")
            h.tick()
            assert h.vibe.kind == "IN_TRACKED_APP"
        assert h.recorder.events == []

    def test_pointer_refreshes_idle_but_not_grace(self, make_harness):
        h = make_harness(grace_period_s=4.0, idle_threshold_s=2.0)
        h.start("Claude")
        h.clock.t = 3.0
        h.input.fire("pointer")

        history = h.run_until(6.0)

        # Idle since t=3 reaches 2s at t=5; typing grace (from t=0) already over.
        assert first_time(history, "WAITING") == 5.0

    def test_waiting_elapsed_is_monotonic_and_starts_at_zero(self, make_harness):
        h = make_harness()
        h.start("Claude")
        history = h.run_until(20.0)
        waiting = [v.elapsed_s for _, v in history if v.kind == "WAITING"]
        assert waiting[0] == 0.0
        assert waiting == sorted(waiting)
        assert waiting[-1] == pytest.approx(17.0)

    def test_workout_fires_once_per_episode(self, make_harness):
        h = make_harness(workout_trigger_s=5.0)
        h.start("Claude")
        h.run_until(30.0)
        assert h.recorder.count("WORKOUT_TRIGGERED") == 1
        assert h.vibe.kind == "WORKOUT_TRIGGERED"

    def test_workout_not_before_trigger_duration(self, make_harness):
        h = make_harness(workout_trigger_s=10.0)
        h.start("Claude")
        # Waiting starts at t=3, so the trigger lands at t=13.
        history = h.run_until(12.5)
        assert first_time(history, "WORKOUT_TRIGGERED") is None
        assert h.vibe.kind == "WAITING"
        h.run_until(13.0)
        assert h.vibe.kind == "WORKOUT_TRIGGERED"


# ---- input activity ----

class TestInputActivity:
    def test_input_while_waiting_returns_to_app(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(5.0)
        assert h.vibe.kind == "WAITING"

        h.input.fire("key")

        assert h.vibe.kind == "IN_TRACKED_APP"
        assert h.vibe.app == "Claude"
        assert h.recorder.count("WAITING_STOPPED") == 1

    def test_input_during_workout_cancels_prompt(self, make_harness):
        h = make_harness(workout_trigger_s=2.0)
        h.start("Claude")
        h.run_until(6.0)
        assert h.vibe.kind == "WORKOUT_TRIGGERED"

        h.monitor.record_input_activity()
        h.monitor.record_input_activity()

        assert h.vibe.kind == "IN_TRACKED_APP"
        assert h.recorder.count("WAITING_STOPPED") == 1

    def test_pointer_input_also_cancels_waiting(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(5.0)
        h.input.fire("pointer")
        assert h.vibe.kind == "IN_TRACKED_APP"
        assert h.recorder.count("WAITING_STOPPED") == 1

    def test_input_while_in_app_emits_nothing(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.input.fire("key")
        assert h.recorder.events == []

    def test_new_episode_after_input_starts_from_zero(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(10.0)
        h.input.fire("key")
        history = h.run_until(20.0)
        waiting = [(t, v.elapsed_s) for t, v in history if v.kind == "WAITING"]
        assert waiting[0] == (13.0, 0.0)
        assert h.recorder.count("WAITING_STARTED") == 2


# ---- reset_waiting ----

class TestResetWaiting:
    def test_reset_from_workout_returns_to_app(self, make_harness):
        h = make_harness(workout_trigger_s=2.0)
        h.start("Claude")
        h.run_until(6.0)
        assert h.vibe.kind == "WORKOUT_TRIGGERED"

        h.monitor.reset_waiting()

        assert h.vibe.kind == "IN_TRACKED_APP"
        assert h.recorder.count("WAITING_STOPPED") == 0

    def test_reset_restarts_grace_period(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(5.0)
        h.monitor.reset_waiting()
        history = h.run_until(8.0)
        # Idle time is already past the threshold; only the grace period holds it off.
        assert first_time(history, "WAITING") == 6.5

    def test_reset_when_not_tracked_goes_idle(self, make_harness):
        h = make_harness()
        h.start("Safari")
        h.monitor.reset_waiting()
        assert h.vibe.kind == "IDLE"


# ---- app switching ----

class TestAppSwitching:
    def test_switch_between_tracked_apps_resets_progress(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(10.0)
        assert h.vibe.kind == "WAITING"

        h.foreground.name = "ChatGPT"
        h.clock.advance(0.5)
        h.tick()

        assert h.vibe.kind == "IN_TRACKED_APP"
        assert h.vibe.app == "ChatGPT"
        assert h.vibe.elapsed_s == 0.0
        assert h.recorder.types() == ["WAITING_STARTED", "WAITING_STOPPED"]

        history = h.run_until(20.0)
        assert first_time(history, "WAITING") == 13.5

    def test_leaving_while_waiting_emits_stop_then_exit(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(5.0)

        h.foreground.name = "Safari"
        h.clock.advance(0.5)
        h.tick()

        assert h.vibe.kind == "IDLE"
        assert h.recorder.types() == ["WAITING_STARTED", "WAITING_STOPPED", "APP_EXITED"]

    def test_leaving_without_waiting_emits_only_exit(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.foreground.name = "Finder"
        h.clock.advance(0.5)
        h.tick()
        assert h.recorder.types() == ["APP_EXITED"]
        assert h.recorder.events[0]["app"] == "Claude"

    def test_reentering_resets_activity_timestamps(self, make_harness):
        h = make_harness()
        h.start("Safari")
        h.run_until(10.0)
        h.foreground.name = "Claude"
        history = h.run_until(15.0)
        assert first_time(history, "IN_TRACKED_APP") == 10.5
        assert first_time(history, "WAITING") == 13.5

    def test_unavailable_source_holds_state(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(5.0)
        assert h.vibe.kind == "WAITING"

        h.foreground.name = None
        h.run_until(7.0)
        assert h.vibe.kind == "WAITING"

        h.foreground.fail = True
        h.run_until(9.0)
        assert h.vibe.kind == "WAITING"
        assert "APP_EXITED" not in h.recorder.types()

    def test_app_name_match_is_case_insensitive(self, make_harness):
        h = make_harness()
        h.start("CLAUDE")
        assert h.vibe.kind == "IN_TRACKED_APP"
        assert h.vibe.app == "CLAUDE"


# ---- config & subscribers ----

class TestConfigAndSubscribers:
    def test_update_config_applies_to_next_tick(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.monitor.update_config({"workout_trigger_s": 1.0, "idle_threshold_s": 3.0, "grace_period_s": 1.5})
        h.run_until(4.5)
        assert h.vibe.kind == "WORKOUT_TRIGGERED"

    def test_update_config_changes_tracked_apps(self, make_harness):
        h = make_harness()
        h.start("Safari")
        h.monitor.update_config({"direct_apps": ["Safari"]})
        h.clock.advance(0.5)
        h.tick()
        assert h.vibe.kind == "IN_TRACKED_APP"

    def test_invalid_config_is_rejected(self, make_harness):
        h = make_harness()
        with pytest.raises(ValueError):
            h.monitor.update_config({"idle_threshold_s": -1})

    def test_failing_subscriber_does_not_break_transition(self, make_harness):
        h = make_harness()

        def boom(evt):
            raise RuntimeError("ui exploded")

        h.monitor.on_event(boom)
        h.start("Claude")
        h.run_until(4.0)
        assert h.vibe.kind == "WAITING"
        assert h.recorder.count("WAITING_STARTED") == 1

    def test_subscriber_may_call_back_into_monitor(self, make_harness):
        h = make_harness(workout_trigger_s=2.0)

        def skip_workouts(evt):
            if evt["type"] == "WORKOUT_TRIGGERED":
                h.monitor.reset_waiting()

        h.monitor.on_event(skip_workouts)
        h.start("Claude")
        h.run_until(6.0)
        assert h.vibe.kind != "WORKOUT_TRIGGERED"
        assert h.recorder.count("WORKOUT_TRIGGERED") >= 1

    def test_event_payload_shape(self, make_harness):
        h = make_harness()
        h.start("Claude")
        h.run_until(4.0)
        evt = h.recorder.events[0]
        assert set(evt) == {"type", "app", "at", "reason"}
        assert evt["type"] == "WAITING_STARTED"

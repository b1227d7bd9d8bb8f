# Copyright (C) 2025 Richard Owen
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.
"""Contract tests for the threaded match controller."""

from __future__ import annotations

import queue
import random
import time
from typing import List, Type

import pytest

from dugout.engine.config import ControllerConfig
from dugout.engine.controller import ControllerState, MatchController
from dugout.engine.events import EventType, Half
from dugout.engine.match_state import Match
from dugout.engine.messages import (
    Fulltime,
    Halftime,
    MatchPaused,
    MatchResumed,
    MatchUpdate,
    Notification,
    PauseMatch,
    ResumeMatch,
    SlowDown,
    SpeedUp,
    StartMatch,
    SubstitutePlayer,
    SubstitutionMade,
    TogglePause,
)
from dugout.engine.simulation import SimulationEngine
from dugout.models.participant import Side
from dugout.utils.debug import MatchDebugger

FAST = ControllerConfig(speeds=(0.004, 0.002, 0.001, 0.0005), goal_pause=0.0, added_time_pause=0.0)
STEADY = ControllerConfig(speeds=(0.02, 0.01, 0.005, 0.002), default_speed_index=0, goal_pause=0.0, added_time_pause=0.0)
WAIT = 5.0


def _controller(match: Match, config: ControllerConfig = FAST, seed: int = 1) -> MatchController:
    debugger = MatchDebugger(None)
    engine = SimulationEngine(match, rng=random.Random(seed), debugger=debugger)
    return MatchController(match, engine, config=config, debugger=debugger)


def _drain_until(controller: MatchController, kind: Type[Notification]) -> List[Notification]:
    """Collect notifications up to and including the first one of ``kind``."""
    seen: List[Notification] = []
    while True:
        notification = controller.next_notification(timeout=WAIT)
        seen.append(notification)
        if isinstance(notification, kind):
            return seen


class TestLifecycle:
    """Tests for start-up, the break and the final whistle."""

    def test_initial_update_is_sent_before_any_tick(self, match: Match) -> None:
        controller = _controller(match)
        controller.start()
        first = controller.next_notification(timeout=WAIT)
        assert isinstance(first, MatchUpdate)
        assert first.snapshot.minute == 0
        assert first.latest_event is not None
        assert first.latest_event.event_type is EventType.HALF_STARTS
        controller.send_command(PauseMatch())
        _drain_until(controller, MatchPaused)

    def test_full_match_with_resume_at_half_time(self, match: Match) -> None:
        controller = _controller(match)
        controller.start()

        first_half = _drain_until(controller, Halftime)
        assert controller.state is ControllerState.PAUSED
        assert isinstance(first_half[-2], MatchUpdate)
        assert first_half[-2].snapshot.is_half_time
        assert first_half[-1].snapshot.clock == "HT"
        assert first_half[-1].snapshot.events[-1].event_type is EventType.HALF_ENDS

        controller.send_command(ResumeMatch())
        second_half = _drain_until(controller, Fulltime)
        assert isinstance(second_half[0], MatchResumed)
        assert second_half[0].snapshot.half is Half.SECOND
        assert second_half[0].snapshot.minute == 45
        assert second_half[-1].snapshot.is_full_time

        assert controller.join(timeout=WAIT)
        assert controller.state is ControllerState.DONE

        updates = [n for n in first_half + second_half if isinstance(n, MatchUpdate)]
        for half in Half:
            minutes = [u.snapshot.minute for u in updates if u.snapshot.half is half]
            assert minutes == sorted(minutes)
        final = second_half[-1].snapshot
        assert (final.home_score, final.away_score) == match.scoreline()

    def test_updates_carry_the_event_of_their_tick(self, match: Match) -> None:
        controller = _controller(match)
        controller.start()
        seen = _drain_until(controller, Halftime)
        for update in seen[1:]:
            if isinstance(update, MatchUpdate) and update.latest_event is not None:
                assert update.latest_event.minute == update.snapshot.minute
                assert update.snapshot.events[-1] == update.latest_event

    def test_start_match_resumes_at_half_time(self, match: Match) -> None:
        controller = _controller(match)
        controller.start()
        _drain_until(controller, Halftime)
        controller.send_command(StartMatch())
        resumed = _drain_until(controller, MatchResumed)
        assert resumed[-1].snapshot.half is Half.SECOND
        _drain_until(controller, Fulltime)

    def test_cannot_start_twice(self, match: Match) -> None:
        controller = _controller(match)
        controller.start()
        with pytest.raises(RuntimeError):
            controller.start()
        controller.send_command(PauseMatch())
        _drain_until(controller, MatchPaused)

    def test_engine_must_share_the_match(self, match: Match, make_match) -> None:
        with pytest.raises(ValueError):
            MatchController(match, SimulationEngine(make_match()))


class TestPause:
    """Tests for the pause contract."""

    def test_no_ticks_while_paused(self, match: Match) -> None:
        controller = _controller(match, STEADY)
        controller.start()
        controller.send_command(TogglePause())
        paused = _drain_until(controller, MatchPaused)
        minute = paused[-1].snapshot.minute
        assert controller.state is ControllerState.PAUSED

        with pytest.raises(queue.Empty):
            controller.next_notification(timeout=0.3)

        controller.send_command(TogglePause())
        resumed = controller.next_notification(timeout=WAIT)
        assert isinstance(resumed, MatchResumed)
        assert resumed.snapshot.minute == minute
        following = controller.next_notification(timeout=WAIT)
        assert isinstance(following, MatchUpdate)
        assert following.snapshot.minute == minute + 1

    def test_pause_is_idempotent(self, match: Match) -> None:
        controller = _controller(match, STEADY)
        controller.start()
        controller.send_command(PauseMatch())
        _drain_until(controller, MatchPaused)
        controller.send_command(PauseMatch())
        with pytest.raises(queue.Empty):
            controller.next_notification(timeout=0.2)
        assert controller.state is ControllerState.PAUSED


class TestSpeed:
    """Tests for the speed ladder."""

    def test_defaults(self, match: Match) -> None:
        controller = MatchController(match)
        assert controller.speed_index == 2
        assert controller.tick_period == 0.25
        assert controller.speed_label == "►►►"

    def test_four_steps_up_wrap_around(self, match: Match) -> None:
        controller = _controller(match, STEADY)
        before = (controller.tick_period, controller.speed_label)
        controller.start()
        for _ in range(4):
            controller.send_command(SpeedUp())
        controller.send_command(PauseMatch())
        _drain_until(controller, MatchPaused)
        assert (controller.tick_period, controller.speed_label) == before

    def test_speed_changes_keep_every_minute_once(self, match: Match) -> None:
        controller = _controller(match, STEADY)
        controller.start()
        steps = {3: SpeedUp(), 8: SpeedUp(), 14: SlowDown(), 20: SpeedUp(), 27: SlowDown()}

        minutes: List[int] = []
        while True:
            notification = controller.next_notification(timeout=WAIT)
            if isinstance(notification, Halftime):
                break
            assert isinstance(notification, MatchUpdate)
            minutes.append(notification.snapshot.minute)
            if notification.snapshot.minute in steps:
                assert controller.send_command(steps[notification.snapshot.minute])

        assert minutes == list(range(minutes[-1] + 1))
        assert controller.speed_index == 1

    def test_slow_down_from_slowest_wraps_to_fastest(self, match: Match) -> None:
        controller = _controller(match, STEADY)
        controller.start()
        controller.send_command(SlowDown())
        controller.send_command(PauseMatch())
        _drain_until(controller, MatchPaused)
        assert controller.speed_index == 3
        assert controller.tick_period == STEADY.speeds[-1]
        assert controller.speed_label == "►►►►"


class TestCommands:
    """Tests for substitutions and the command queue."""

    def test_substitution_keeps_position(self, match: Match) -> None:
        controller = _controller(match, STEADY)
        controller.start()
        controller.send_command(SubstitutePlayer(Side.HOME, player_out_id=109, player_in_id=115))
        made = _drain_until(controller, SubstitutionMade)[-1]
        assert made.player_out.name == "Saka"
        assert made.player_out.position == ""
        assert made.player_in.name == "Martinelli"
        assert made.player_in.position == "RW"
        assert made.player_in in made.snapshot.home_lineup
        assert made.player_out in made.snapshot.home_bench
        controller.send_command(PauseMatch())
        _drain_until(controller, MatchPaused)

    def test_invalid_substitution_is_logged_and_ignored(self, match: Match) -> None:
        controller = _controller(match, STEADY)
        controller.start()
        controller.send_command(SubstitutePlayer(Side.AWAY, player_out_id=999, player_in_id=215))
        controller.send_command(PauseMatch())
        seen = _drain_until(controller, MatchPaused)
        assert not any(isinstance(n, SubstitutionMade) for n in seen)
        errors = controller.debugger.events_of_type("ERROR")
        assert len(errors) == 1
        assert "invalid_substitution" in errors[0].details

    def test_full_command_queue_drops(self, match: Match) -> None:
        config = ControllerConfig(command_queue_size=2)
        controller = MatchController(match, config=config)
        assert controller.send_command(SpeedUp())
        assert controller.send_command(SpeedUp())
        assert not controller.send_command(SpeedUp())

    def test_is_controlled(self, match: Match) -> None:
        controller = MatchController(match, controlled_side=Side.AWAY)
        assert controller.is_controlled(Side.AWAY)
        assert not controller.is_controlled(Side.HOME)


class TestBackpressure:
    """Tests for a consumer that reads slower than the match is played."""

    def test_full_notification_queue_blocks_the_loop(self, match: Match) -> None:
        config = ControllerConfig(
            speeds=FAST.speeds,
            goal_pause=0.0,
            added_time_pause=0.0,
            notification_queue_size=1,
        )
        controller = _controller(match, config)
        controller.start()

        # The opening update fills the queue; the first tick then waits to publish.
        time.sleep(0.2)
        stalled_at = match.current_minute
        time.sleep(0.2)
        assert match.current_minute == stalled_at == 1

        minutes: List[int] = []
        while True:
            notification = controller.next_notification(timeout=WAIT)
            if isinstance(notification, Halftime):
                break
            minutes.append(notification.snapshot.minute)
            time.sleep(0.005)

        assert minutes == list(range(minutes[-1] + 1))
        assert minutes[-1] == match.current_minute

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
"""Tests for phase resolution, shots and whole-match statistics."""

import random

import pytest

from dugout.engine.events import EventType, Half
from dugout.engine.match_state import Match
from dugout.engine.pitch import PitchZone, TransitionKind
from dugout.engine.simulation import SimulationEngine
from dugout.models.participant import Side
from dugout.utils.debug import MatchDebugger


class TestPossession:
    """Tests for the possession check at the start of each phase."""

    def test_stronger_roll_wins_the_ball(self, match: Match, scripted_rng) -> None:
        # Arsenal 20 + 0 against City 19 + 19, then pick the second retreat
        engine = SimulationEngine(match, rng=scripted_rng([0, 19, 1]))

        result = engine.play_phase()

        assert result.home_power == 20
        assert result.away_power == 38
        assert result.power_diff == 18
        assert result.dominant_side is Side.AWAY
        assert match.possession is Side.AWAY
        assert result.event is not None
        assert result.event.event_type is EventType.POSSESSION_CHANGED
        assert result.event.side is Side.AWAY
        # City attack West, so their retreat is toward the East end
        assert match.active_zone == PitchZone(3, 3)
        assert match.phase_history == [result]

    def test_equal_power_favours_home(self, match: Match, scripted_rng) -> None:
        engine = SimulationEngine(match, rng=scripted_rng([0, 1, 0]))
        result = engine.play_phase()
        assert result.home_power == result.away_power == 20
        assert result.dominant_side is Side.HOME
        assert match.possession is Side.HOME
        assert not any(e.event_type is EventType.POSSESSION_CHANGED for e in match.events)


class TestProgression:
    """Tests for moving the ball between zones."""

    def test_dominant_side_moves_forward(self, match: Match, scripted_rng) -> None:
        engine = SimulationEngine(match, rng=scripted_rng([19, 0, 0]))
        result = engine.play_phase()
        assert match.active_zone == PitchZone(3, 3)
        assert result.event is None

    def test_dangerous_zones_need_a_margin(self, make_match) -> None:
        match = make_match(active_zone=PitchZone(3, 3))
        engine = SimulationEngine(match, rng=random.Random(1))
        moves = engine._eligible_moves(0)
        assert all(t.target.row != 4 for kinds in moves.values() for t in kinds)
        moves = engine._eligible_moves(2)
        assert any(t.target == PitchZone(4, 3) for t in moves[TransitionKind.FORWARD])

    def test_failed_rolls_leave_ball_in_place(self, make_match, scripted_rng) -> None:
        match = make_match(active_zone=PitchZone(3, 3))
        engine = SimulationEngine(match, rng=scripted_rng([99, 99, 99]))
        assert engine.progress_ball(20) is False
        assert match.active_zone == PitchZone(3, 3)

    def test_lateral_move_when_forward_roll_fails(self, make_match, scripted_rng) -> None:
        match = make_match(active_zone=PitchZone(3, 3))
        engine = SimulationEngine(match, rng=scripted_rng([99, 0, 1]))
        assert engine.progress_ball(20) is True
        assert match.active_zone == PitchZone(3, 4)


class TestShots:
    """Tests for shot resolution from the goal row."""

    # Arsenal 20 + 10 against City 19 + 10: home keeps the ball with a margin
    # of one, both lateral and backward moves fail their rolls
    ROLLS = [10, 10, 99, 99]

    def _engine(self, make_match, scripted_rng, floats, extra=()) -> SimulationEngine:
        match = make_match(active_zone=PitchZone(4, 3))
        return SimulationEngine(match, rng=scripted_rng(self.ROLLS + list(extra), floats))

    def test_off_target(self, make_match, scripted_rng) -> None:
        engine = self._engine(make_match, scripted_rng, [0.05])
        result = engine.play_phase()
        assert result.event.event_type is EventType.MISSED_SHOT
        assert result.shot_threat == pytest.approx(1.0)
        assert engine.match.scoreline() == (0, 0)

    def test_saved(self, make_match, scripted_rng) -> None:
        engine = self._engine(make_match, scripted_rng, [0.9])
        result = engine.play_phase()
        assert result.event.event_type is EventType.SAVED_SHOT
        assert result.event.side is Side.HOME

    def test_goal_credits_an_outfielder(self, make_match, scripted_rng) -> None:
        engine = self._engine(make_match, scripted_rng, [0.2], extra=[3])
        result = engine.play_phase()
        assert result.event.event_type is EventType.GOAL
        assert result.event.player.name == "Calafiori"
        assert not result.event.player.is_goalkeeper
        assert result.home_goals == 1
        assert result.away_goals == 0
        assert engine.match.scoreline() == (1, 0)

    def test_goal_probability_is_capped(self, make_match) -> None:
        engine = SimulationEngine(make_match(active_zone=PitchZone(4, 3)))
        assert engine.goal_probability(0) == pytest.approx(0.65)
        assert engine.goal_probability(40) == pytest.approx(0.65)

    def test_goal_probability_grows_with_margin(self, make_match) -> None:
        engine = SimulationEngine(make_match(active_zone=PitchZone(2, 3)))
        assert engine.goal_probability(0) == pytest.approx(0.15)
        assert engine.goal_probability(10) == pytest.approx(0.18)

    def test_empty_scorer_pool_is_logged_and_raised(self, make_match, scripted_rng) -> None:
        debugger = MatchDebugger(None)
        match = make_match(active_zone=PitchZone(4, 3))
        match.home.lineup = [p for p in match.home.lineup if p.is_goalkeeper]
        engine = SimulationEngine(match, rng=scripted_rng(self.ROLLS, [0.2]), debugger=debugger)

        with pytest.raises(LookupError):
            engine.play_phase()

        errors = debugger.events_of_type("ERROR")
        assert len(errors) == 1
        assert "empty_scorer_pool" in errors[0].details


class TestClock:
    """Tests for minute advancement around the break."""

    def test_minute_past_half_is_not_played(self, match: Match) -> None:
        engine = SimulationEngine(match, rng=random.Random(3))
        match.current_minute = 45
        assert engine.simulate_minute() is None
        assert match.current_minute == 46
        assert match.is_half_time
        assert engine.simulate_minute() is None
        assert match.current_minute == 46

    def test_each_minute_plays_one_phase(self, match: Match) -> None:
        engine = SimulationEngine(match, rng=random.Random(3))
        for expected in range(1, 11):
            result = engine.simulate_minute()
            assert result is not None
            assert result.minute == expected
        assert len(match.phase_history) == 10


class TestFullMatch:
    """Tests for headless whole-match runs."""

    def test_seeded_match_reaches_full_time(self, match: Match) -> None:
        engine = SimulationEngine(match, rng=random.Random(2024))
        engine.play_full_match()

        assert match.is_full_time
        assert match.current_half is Half.SECOND
        markers = [e.event_type for e in match.events if e.event_type in (EventType.HALF_STARTS, EventType.HALF_ENDS)]
        assert markers == [EventType.HALF_STARTS, EventType.HALF_ENDS, EventType.HALF_STARTS, EventType.HALF_ENDS]
        assert match.events[0].event_type is EventType.HALF_STARTS
        assert match.events[-1].event_type is EventType.HALF_ENDS

        phases = 90 + match.added_time(Half.FIRST) + match.added_time(Half.SECOND)
        assert len(match.phase_history) == phases
        produced = [p.event for p in match.phase_history if p.event is not None]
        assert len(produced) == len(match.events) - 4

    @pytest.mark.parametrize("seed", range(20))
    def test_events_stay_inside_the_extended_half(self, make_match, seed: int) -> None:
        match = SimulationEngine(make_match(), rng=random.Random(seed)).play_full_match()

        goals = [e for e in match.events if e.event_type is EventType.GOAL]
        assert len(goals) == sum(match.scoreline())
        limits = {
            Half.FIRST: 45 + match.added_time(Half.FIRST),
            Half.SECOND: 90 + match.added_time(Half.SECOND),
        }
        for event in match.events:
            assert event.minute <= limits[event.half], event
        ends = [e for e in match.events if e.event_type is EventType.HALF_ENDS]
        assert [e.minute for e in ends] == [limits[Half.FIRST], limits[Half.SECOND]]

    def test_minutes_never_go_backwards_within_a_half(self, match: Match) -> None:
        SimulationEngine(match, rng=random.Random(7)).play_full_match()
        for half in Half:
            minutes = [e.minute for e in match.events if e.half is half]
            assert minutes == sorted(minutes)
        assert all(e.minute >= 45 for e in match.events if e.half is Half.SECOND)

    def test_score_matches_phase_goals(self, match: Match) -> None:
        SimulationEngine(match, rng=random.Random(11)).play_full_match()
        home = sum(p.home_goals for p in match.phase_history)
        away = sum(p.away_goals for p in match.phase_history)
        assert match.scoreline() == (home, away)

    def test_same_seed_same_match(self, make_match) -> None:
        first = SimulationEngine(make_match(), rng=random.Random(99)).play_full_match()
        second = SimulationEngine(make_match(), rng=random.Random(99)).play_full_match()
        assert first.events == second.events

    def test_debugger_receives_phases(self, match: Match) -> None:
        debugger = MatchDebugger(None)
        SimulationEngine(match, rng=random.Random(5), debugger=debugger).play_full_match()
        assert len(debugger.events_of_type("PHASE")) == len(match.phase_history)
        assert len(debugger.events_of_type("MATCH_EVENT")) == len(match.events)


class TestStatisticalEnvelope:
    """Aggregate behaviour over many seeded matches."""

    MATCHES = 200

    def test_goals_shots_and_threat(self, make_match) -> None:
        rng = random.Random(20251019)
        goals = shots = 0
        threat = {Side.HOME: [], Side.AWAY: []}
        for _ in range(self.MATCHES):
            match = SimulationEngine(make_match(), rng=rng).play_full_match()
            goals += sum(match.scoreline())
            shots += match.shots(Side.HOME) + match.shots(Side.AWAY)
            for phase in match.phase_history:
                if phase.shot_threat is not None:
                    threat[phase.event.side].append(phase.shot_threat)

        assert 1.0 <= goals / self.MATCHES <= 2.5
        assert 4.0 <= shots / self.MATCHES <= 8.0
        home_avg = sum(threat[Side.HOME]) / len(threat[Side.HOME])
        away_avg = sum(threat[Side.AWAY]) / len(threat[Side.AWAY])
        assert home_avg >= away_avg

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
"""Phase resolver: one call plays one simulated minute."""

from __future__ import annotations

import random
from typing import Dict, List, Optional

from dugout.engine.config import ENGINE_CONFIG, SimulationConfig
from dugout.engine.events import EventType, Half, MatchEvent
from dugout.engine.match_state import Match, PhaseResult
from dugout.engine.pitch import PitchTopology, TransitionKind, ZoneTransition
from dugout.models.participant import MatchPlayer, Side
from dugout.utils.debug import MatchDebugger


class SimulationEngine:
    """Statistical engine that mutates a :class:`Match` one phase at a time.

    Parameters
    ----------
    match : Match
        Match to simulate. The engine is its only writer while it runs.
    rng : random.Random | None, optional
        Random source; pass a seeded instance for reproducible matches.
    debugger : MatchDebugger | None, optional
        Logger that receives phase, event and error entries.
    config : SimulationConfig | None, optional
        Tuning constants. Defaults to ``ENGINE_CONFIG.simulation``.
    """

    def __init__(
        self,
        match: Match,
        rng: Optional[random.Random] = None,
        debugger: Optional[MatchDebugger] = None,
        config: Optional[SimulationConfig] = None,
    ) -> None:
        """Bind the engine to a match.

        Parameters
        ----------
        match : Match
            Match to simulate.
        rng : random.Random | None
            Random source; a fresh unseeded one is created when omitted.
        debugger : MatchDebugger | None
            Optional logger.
        config : SimulationConfig | None
            Tuning constants.
        """
        self.match = match
        self.rng = rng or random.Random()
        self.debugger = debugger
        self.config = config or ENGINE_CONFIG.simulation

    @property
    def topology(self) -> PitchTopology:
        """Pitch grid shared with the match."""
        return self.match.topology

    def simulate_minute(self) -> Optional[PhaseResult]:
        """Advance the clock one minute and play it if the half is still on.

        Returns
        -------
        PhaseResult | None
            Diagnostics for the phase, or ``None`` when the new minute falls
            past half time or full time and nothing was played.
        """
        match = self.match
        if match.is_half_time or match.is_full_time:
            return None
        match.advance_minute()
        if match.is_half_time or match.is_full_time:
            return None
        return self.play_phase()

    def play_phase(self) -> PhaseResult:
        """Resolve a single phase of play at the current minute.

        Returns
        -------
        PhaseResult
            Rolls, powers, goals and the event the phase produced.
        """
        cfg = self.config
        match = self.match

        home_roll = self.rng.randrange(cfg.phase_roll_sides)
        away_roll = self.rng.randrange(cfg.phase_roll_sides)
        home_power = match.home.strength + home_roll
        away_power = match.away.strength + away_roll
        power_diff = abs(home_power - away_power)
        dominant = Side.HOME if home_power >= away_power else Side.AWAY

        event: Optional[MatchEvent] = None
        shot_threat: Optional[float] = None
        if dominant is not match.possession:
            match.possession = dominant
            event = self._record(match.add_event(EventType.POSSESSION_CHANGED, dominant))
            self._fall_back_after_turnover()
        elif not self.progress_ball(power_diff):
            shot_threat = self.topology.shot_threat(match.active_zone, match.attacking_direction)
            event = self.attempt_shot(power_diff)

        scored = event is not None and event.event_type is EventType.GOAL
        result = PhaseResult(
            minute=match.current_minute,
            home_roll=home_roll,
            away_roll=away_roll,
            home_power=home_power,
            away_power=away_power,
            home_goals=int(scored and dominant is Side.HOME),
            away_goals=int(scored and dominant is Side.AWAY),
            event=event,
            shot_threat=shot_threat,
        )
        match.phase_history.append(result)
        self._log_phase(result)
        return result

    def _fall_back_after_turnover(self) -> None:
        """Move the ball one step back toward the new holder's own goal."""
        match = self.match
        retreats = self.topology.transitions_of_kind(
            match.active_zone, match.attacking_direction, TransitionKind.BACKWARD
        )
        if retreats:
            match.active_zone = retreats[self.rng.randrange(len(retreats))].target

    def _eligible_moves(self, power_diff: int) -> Dict[TransitionKind, List[ZoneTransition]]:
        """Group the transitions the side on the ball is strong enough to make.

        Parameters
        ----------
        power_diff : int
            Winning margin of the phase.

        Returns
        -------
        Dict[TransitionKind, List[ZoneTransition]]
            Eligible transitions keyed by kind, each in transition order.
        """
        match = self.match
        direction = match.attacking_direction
        scaling = self.config.zone_progression_scaling
        moves: Dict[TransitionKind, List[ZoneTransition]] = {kind: [] for kind in TransitionKind}
        for transition in self.topology.valid_transitions(match.active_zone):
            required = int(self.topology.shot_threat(transition.target, direction) * scaling)
            if power_diff >= required:
                moves[self.topology.classify(transition, direction)].append(transition)
        return moves

    def progress_ball(self, power_diff: int) -> bool:
        """Try to move the ball for the side in possession.

        Forward moves are preferred, then lateral, then backward, each gated by
        its own percentage roll.

        Parameters
        ----------
        power_diff : int
            Winning margin of the phase; dangerous zones need a larger one.

        Returns
        -------
        bool
            ``True`` when the ball moved, ``False`` when it stayed put and a
            shot should follow.
        """
        cfg = self.config
        match = self.match
        moves = self._eligible_moves(power_diff)
        forward = moves[TransitionKind.FORWARD]
        lateral = moves[TransitionKind.LATERAL]
        backward = moves[TransitionKind.BACKWARD]

        chosen: Optional[ZoneTransition] = None
        if forward and self.rng.randrange(100) < cfg.forward_chance:
            chosen = self.topology.pick_most_threatening(match.active_zone, match.attacking_direction, forward)
        elif lateral and self.rng.randrange(100) < cfg.lateral_chance:
            chosen = lateral[self.rng.randrange(len(lateral))]
        elif backward and self.rng.randrange(100) < cfg.backward_chance:
            chosen = backward[self.rng.randrange(len(backward))]

        if chosen is None:
            return False
        match.active_zone = chosen.target
        return True

    def goal_probability(self, power_diff: int) -> float:
        """Chance that an on-target shot from the active zone goes in.

        Parameters
        ----------
        power_diff : int
            Winning margin of the phase.

        Returns
        -------
        float
            Zone threat scaled by the power bonus, capped by configuration.
        """
        cfg = self.config
        threat = self.topology.shot_threat(self.match.active_zone, self.match.attacking_direction)
        return min(cfg.goal_probability_cap, threat * (1.0 + power_diff * cfg.per_point_bonus))

    def attempt_shot(self, power_diff: int) -> MatchEvent:
        """Resolve a shot by the side in possession from the active zone.

        A single uniform draw decides the outcome: the bottom slice misses the
        target, the rest is rescaled and compared with the goal probability.

        Parameters
        ----------
        power_diff : int
            Winning margin of the phase.

        Returns
        -------
        MatchEvent
            The missed shot, saved shot or goal event appended to the match.
        """
        cfg = self.config
        match = self.match
        side = match.possession
        probability = self.goal_probability(power_diff)

        roll = self.rng.random()
        if roll < cfg.off_target_fraction:
            return self._record(match.add_event(EventType.MISSED_SHOT, side))

        on_target_roll = (roll - cfg.off_target_fraction) / (1.0 - cfg.off_target_fraction)
        if on_target_roll > probability:
            return self._record(match.add_event(EventType.SAVED_SHOT, side))

        scorer = self._pick_scorer(side)
        return self._record(match.add_event(EventType.GOAL, side, scorer))

    def _pick_scorer(self, side: Side) -> MatchPlayer:
        """Credit a goal to a random outfield starter.

        Parameters
        ----------
        side : Side
            Scoring side.

        Returns
        -------
        MatchPlayer
            The chosen scorer.

        Raises
        ------
        LookupError
            If the side has no outfield starter; logged before propagating.
        """
        participant = self.match.participant(side)
        try:
            return participant.random_outfielder(self.rng)
        except LookupError as exc:
            if self.debugger:
                self.debugger.log_error("empty_scorer_pool", str(exc), self.match.current_minute)
            raise

    def play_full_match(self) -> Match:
        """Run both halves without pacing, as batch tools and tests do.

        Returns
        -------
        Match
            The same match, finished at full time.
        """
        match = self.match
        if not match.has_kicked_off:
            self._record(match.start_first_half())
        if match.current_half is Half.FIRST:
            self._play_until_break()
            self._record(match.end_half())
            self._record(match.start_second_half())
        self._play_until_break()
        self._record(match.end_half())
        return match

    def _play_until_break(self) -> None:
        """Simulate minutes until half time or full time is reached."""
        while self.simulate_minute() is not None:
            continue

    def _record(self, event: MatchEvent) -> MatchEvent:
        """Log an event through the debugger and hand it back.

        Parameters
        ----------
        event : MatchEvent
            Event that was just appended to the match.

        Returns
        -------
        MatchEvent
            The same event.
        """
        if self.debugger:
            team = self.match.participant(event.side).name if event.side is not None else None
            self.debugger.log_match_event(event.minute, event.event_type.value, event.describe(team))
        return event

    def _log_phase(self, result: PhaseResult) -> None:
        """Write one phase summary to the debugger.

        Parameters
        ----------
        result : PhaseResult
            Phase that was just resolved.
        """
        if not self.debugger:
            return
        match = self.match
        self.debugger.log_phase(
            result.minute,
            result.home_power,
            result.away_power,
            match.in_possession.name,
            self.topology.zone_name(match.active_zone),
        )

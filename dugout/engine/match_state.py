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
"""Mutable match aggregate, its clock rules and immutable snapshots.

A :class:`Match` is written by a single owner (the engine, driven either by
the controller thread or a headless loop). Other threads only ever see a
:class:`MatchSnapshot`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from dugout.engine.config import ENGINE_CONFIG, ClockConfig
from dugout.engine.events import STOPPAGE_EVENTS, EventType, Half, MatchEvent
from dugout.engine.pitch import AttackingDirection, PitchTopology, PitchZone
from dugout.models.participant import MatchParticipant, MatchPlayer, Side


@dataclass(frozen=True)
class PhaseResult:
    """Dice rolls and powers from one resolved phase, kept for diagnostics.

    Parameters
    ----------
    minute : int
        Minute the phase was played in.
    home_roll : int
        Random roll drawn for the home side.
    away_roll : int
        Random roll drawn for the away side.
    home_power : int
        Home strength plus roll.
    away_power : int
        Away strength plus roll.
    home_goals : int, default=0
        Goals scored by the home side in this phase.
    away_goals : int, default=0
        Goals scored by the away side in this phase.
    event : MatchEvent | None, optional
        Event the phase appended, if any.
    shot_threat : float | None, optional
        Threat of the zone a shot was taken from, when the phase ended in one.
    """

    minute: int
    home_roll: int
    away_roll: int
    home_power: int
    away_power: int
    home_goals: int = 0
    away_goals: int = 0
    event: Optional[MatchEvent] = None
    shot_threat: Optional[float] = None

    @property
    def power_diff(self) -> int:
        """Absolute gap between the two phase powers."""
        return abs(self.home_power - self.away_power)

    @property
    def dominant_side(self) -> Side:
        """Side that won the phase; home wins ties."""
        return Side.HOME if self.home_power >= self.away_power else Side.AWAY


@dataclass(frozen=True)
class MatchSnapshot:
    """Read-only copy of match state handed to observers.

    Parameters
    ----------
    minute : int
        Current match minute.
    half : Half
        Half in progress.
    clock : str
        Clock label, for example ``"45+2'"`` or ``"HT"``.
    home_name : str
        Home club name.
    away_name : str
        Away club name.
    home_score : int
        Goals credited to the home side.
    away_score : int
        Goals credited to the away side.
    possession : Side
        Side on the ball.
    active_zone : PitchZone
        Zone the ball is in.
    zone_name : str
        Display name of ``active_zone``.
    home_direction : AttackingDirection
        End the home side is attacking.
    first_half_added_time : int
        Stoppage minutes accrued in the first half.
    second_half_added_time : int
        Stoppage minutes accrued in the second half.
    is_half_time : bool
        Whether the first half has finished.
    is_full_time : bool
        Whether the match has finished.
    is_in_added_time : bool
        Whether the clock is inside a half's stoppage window.
    home_lineup : Tuple[MatchPlayer, ...]
        Home starters.
    away_lineup : Tuple[MatchPlayer, ...]
        Away starters.
    home_bench : Tuple[MatchPlayer, ...]
        Home substitutes.
    away_bench : Tuple[MatchPlayer, ...]
        Away substitutes.
    events : Tuple[MatchEvent, ...]
        Event log at the time of the snapshot.
    """

    minute: int
    half: Half
    clock: str
    home_name: str
    away_name: str
    home_score: int
    away_score: int
    possession: Side
    active_zone: PitchZone
    zone_name: str
    home_direction: AttackingDirection
    first_half_added_time: int
    second_half_added_time: int
    is_half_time: bool
    is_full_time: bool
    is_in_added_time: bool
    home_lineup: Tuple[MatchPlayer, ...]
    away_lineup: Tuple[MatchPlayer, ...]
    home_bench: Tuple[MatchPlayer, ...]
    away_bench: Tuple[MatchPlayer, ...]
    events: Tuple[MatchEvent, ...]

    @property
    def away_direction(self) -> AttackingDirection:
        """End the away side is attacking."""
        return self.home_direction.opposite

    def team_name(self, side: Optional[Side]) -> Optional[str]:
        """Club name for a side.

        Parameters
        ----------
        side : Side | None
            Side to look up; ``None`` yields ``None``.

        Returns
        -------
        str | None
            Name of the club playing on that side.
        """
        if side is None:
            return None
        return self.home_name if side is Side.HOME else self.away_name

    def commentary(self) -> List[str]:
        """Commentary line for every event in the log.

        Returns
        -------
        List[str]
            One message per event, oldest first.
        """
        return [event.describe(self.team_name(event.side)) for event in self.events]


@dataclass
class Match:
    """Scoreline-relevant state of one fixture.

    Parameters
    ----------
    home : MatchParticipant
        Home participant; its ``side`` must be ``Side.HOME``.
    away : MatchParticipant
        Away participant; its ``side`` must be ``Side.AWAY``.
    topology : PitchTopology, optional
        Zone grid shared with the engine.
    clock : ClockConfig, optional
        Half length settings.
    possession : Side, default=Side.HOME
        Side on the ball; home kicks off.
    current_minute : int, default=0
        Minute on the clock; 0 before kick-off.
    current_half : Half, default=Half.FIRST
        Half in progress.
    active_zone : PitchZone | None, optional
        Zone the ball is in; defaults to the home kick-off zone.
    home_direction : AttackingDirection, default=AttackingDirection.EAST
        End the home side attacks. The away side always attacks the other.
    events : List[MatchEvent], optional
        Append-only event log.
    phase_history : List[PhaseResult], optional
        Diagnostics for every resolved phase.
    """

    home: MatchParticipant
    away: MatchParticipant
    topology: PitchTopology = field(default_factory=PitchTopology)
    clock: ClockConfig = field(default_factory=lambda: ENGINE_CONFIG.clock)
    possession: Side = Side.HOME
    current_minute: int = 0
    current_half: Half = Half.FIRST
    active_zone: Optional[PitchZone] = None
    home_direction: AttackingDirection = AttackingDirection.EAST
    events: List[MatchEvent] = field(default_factory=list)
    phase_history: List[PhaseResult] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Check sides and place the ball on a zone of the topology."""
        if self.home.side is not Side.HOME or self.away.side is not Side.AWAY:
            raise ValueError("Participants must be ordered (home, away)")
        if self.active_zone is None:
            self.active_zone = self.topology.kickoff_zone(self.home_direction)
        elif not self.topology.contains(self.active_zone):
            raise ValueError(f"{self.active_zone} is not a zone of the pitch")

    # -- participants and directions -------------------------------------

    def participant(self, side: Side) -> MatchParticipant:
        """Participant playing on ``side``.

        Parameters
        ----------
        side : Side
            Home or away.

        Returns
        -------
        MatchParticipant
            The matching participant.
        """
        return self.home if side is Side.HOME else self.away

    @property
    def in_possession(self) -> MatchParticipant:
        """Participant currently on the ball."""
        return self.participant(self.possession)

    @property
    def away_direction(self) -> AttackingDirection:
        """End the away side attacks."""
        return self.home_direction.opposite

    def direction_for(self, side: Side) -> AttackingDirection:
        """Attacking direction of one side in the current half.

        Parameters
        ----------
        side : Side
            Home or away.

        Returns
        -------
        AttackingDirection
            The end that side is attacking.
        """
        return self.home_direction if side is Side.HOME else self.away_direction

    @property
    def attacking_direction(self) -> AttackingDirection:
        """Attacking direction of the side in possession."""
        return self.direction_for(self.possession)

    # -- event log ---------------------------------------------------------

    def add_event(
        self,
        event_type: EventType,
        side: Optional[Side] = None,
        player: Optional[MatchPlayer] = None,
    ) -> MatchEvent:
        """Append an event stamped with the current minute and half.

        Parameters
        ----------
        event_type : EventType
            Category of event.
        side : Side | None, optional
            Side the event is attributed to.
        player : MatchPlayer | None, optional
            Player involved.

        Returns
        -------
        MatchEvent
            The appended event.
        """
        event = MatchEvent(event_type, self.current_minute, self.current_half, side, player)
        self.events.append(event)
        return event

    def score(self, side: Side) -> int:
        """Goals credited to ``side``, counted from the event log.

        Parameters
        ----------
        side : Side
            Home or away.

        Returns
        -------
        int
            Number of goal events attributed to that side.
        """
        return sum(1 for e in self.events if e.event_type is EventType.GOAL and e.side is side)

    def scoreline(self) -> Tuple[int, int]:
        """Current score as ``(home, away)``.

        Returns
        -------
        Tuple[int, int]
            Home goals and away goals.
        """
        return self.score(Side.HOME), self.score(Side.AWAY)

    def shots(self, side: Side) -> int:
        """Shots (goals, saves and misses) taken by ``side``.

        Parameters
        ----------
        side : Side
            Home or away.

        Returns
        -------
        int
            Number of shot events attributed to that side.
        """
        return sum(1 for e in self.events if e.is_shot and e.side is side)

    def winner(self) -> Optional[MatchParticipant]:
        """Participant ahead on goals, or ``None`` for a draw.

        Returns
        -------
        MatchParticipant | None
            The leading participant.
        """
        home_goals, away_goals = self.scoreline()
        if home_goals > away_goals:
            return self.home
        if away_goals > home_goals:
            return self.away
        return None

    # -- clock ---------------------------------------------------------------

    def _nominal_end(self, half: Half) -> int:
        """Last nominal minute of a half (45 or 90 by default).

        Parameters
        ----------
        half : Half
            Half to measure.

        Returns
        -------
        int
            Minute at which added time would begin.
        """
        return self.clock.half_length * half.value

    def added_time(self, half: Half) -> int:
        """Stoppage minutes earned in a half, recomputed from the log.

        Goals, injuries and red cards stamped with ``half`` and falling inside
        its nominal window each add one minute.

        Parameters
        ----------
        half : Half
            Half to evaluate.

        Returns
        -------
        int
            Minutes of added time for that half.
        """
        end = self._nominal_end(half)
        start = end - self.clock.half_length + 1
        return sum(
            1
            for e in self.events
            if e.half is half and start <= e.minute <= end and e.event_type in STOPPAGE_EVENTS
        )

    @property
    def is_half_time(self) -> bool:
        """``True`` once the first half clock passes 45 plus added time."""
        return self.current_half is Half.FIRST and self.current_minute > self._nominal_end(
            Half.FIRST
        ) + self.added_time(Half.FIRST)

    @property
    def is_full_time(self) -> bool:
        """``True`` once the second half clock passes 90 plus added time."""
        return self.current_half is Half.SECOND and self.current_minute > self._nominal_end(
            Half.SECOND
        ) + self.added_time(Half.SECOND)

    @property
    def is_in_added_time(self) -> bool:
        """``True`` strictly between the nominal and extended end of the half."""
        end = self._nominal_end(self.current_half)
        return end < self.current_minute <= end + self.added_time(self.current_half)

    @property
    def has_kicked_off(self) -> bool:
        """Whether the first half has been started."""
        return any(e.event_type is EventType.HALF_STARTS for e in self.events)

    def advance_minute(self) -> int:
        """Move the clock on by one minute.

        Returns
        -------
        int
            The new minute.
        """
        self.current_minute += 1
        return self.current_minute

    def start_first_half(self) -> MatchEvent:
        """Kick off: minute 0, home on the ball attacking East.

        Returns
        -------
        MatchEvent
            The half-starts marker.
        """
        self.current_half = Half.FIRST
        self.current_minute = 0
        self.home_direction = AttackingDirection.EAST
        self.possession = Side.HOME
        self.active_zone = self.topology.kickoff_zone(self.home_direction)
        return self.add_event(EventType.HALF_STARTS, Side.HOME)

    def start_second_half(self) -> MatchEvent:
        """Switch ends and hand the away side the second-half kick-off.

        The clock is reset to the nominal end of the first half so the next
        tick plays minute 46.

        Returns
        -------
        MatchEvent
            The half-starts marker.

        Raises
        ------
        RuntimeError
            If the second half has already started.
        """
        if self.current_half is Half.SECOND:
            raise RuntimeError("Second half has already started")
        self.current_half = Half.SECOND
        self.current_minute = self._nominal_end(Half.FIRST)
        self.home_direction = self.home_direction.opposite
        self.possession = Side.AWAY
        self.active_zone = self.topology.kickoff_zone(self.away_direction)
        return self.add_event(EventType.HALF_STARTS, Side.AWAY)

    def end_half(self) -> MatchEvent:
        """Record the final whistle of the current half.

        The clock has already moved one minute past the extended end of the
        half when the break is detected, so the marker is stamped with the
        last minute actually played.

        Returns
        -------
        MatchEvent
            The half-ends marker.
        """
        half = self.current_half
        limit = self._nominal_end(half) + self.added_time(half)
        event = MatchEvent(EventType.HALF_ENDS, min(self.current_minute, limit), half)
        self.events.append(event)
        return event

    def clock_label(self) -> str:
        """Clock text such as ``"23'"``, ``"45+1'"``, ``"HT"`` or ``"FT"``.

        Returns
        -------
        str
            Display label for the match clock.
        """
        if self.is_half_time:
            return "HT"
        if self.is_full_time:
            return "FT"
        if self.is_in_added_time:
            end = self._nominal_end(self.current_half)
            return f"{end}+{self.current_minute - end}'"
        return f"{self.current_minute}'"

    def snapshot(self) -> MatchSnapshot:
        """Freeze the current state for observers on other threads.

        Returns
        -------
        MatchSnapshot
            Immutable copy of the state.
        """
        home_score, away_score = self.scoreline()
        return MatchSnapshot(
            minute=self.current_minute,
            half=self.current_half,
            clock=self.clock_label(),
            home_name=self.home.name,
            away_name=self.away.name,
            home_score=home_score,
            away_score=away_score,
            possession=self.possession,
            active_zone=self.active_zone,
            zone_name=self.topology.zone_name(self.active_zone),
            home_direction=self.home_direction,
            first_half_added_time=self.added_time(Half.FIRST),
            second_half_added_time=self.added_time(Half.SECOND),
            is_half_time=self.is_half_time,
            is_full_time=self.is_full_time,
            is_in_added_time=self.is_in_added_time,
            home_lineup=tuple(self.home.lineup),
            away_lineup=tuple(self.away.lineup),
            home_bench=tuple(self.home.bench),
            away_bench=tuple(self.away.bench),
            events=tuple(self.events),
        )

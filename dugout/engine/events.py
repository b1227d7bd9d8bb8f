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
"""Event domain models for the match engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dugout.models.participant import MatchPlayer, Side


class Half(Enum):
    """The two periods of a match."""

    FIRST = 1
    SECOND = 2


class EventType(Enum):
    """Closed set of things that can happen in a match."""

    GOAL = "goal"
    SAVED_SHOT = "saved_shot"
    MISSED_SHOT = "missed_shot"
    YELLOW_CARD = "yellow_card"
    RED_CARD = "red_card"
    INJURY = "injury"
    POSSESSION_CHANGED = "possession_changed"
    POSSESSION_RETAINED = "possession_retained"
    HALF_STARTS = "half_starts"
    HALF_ENDS = "half_ends"


SHOT_EVENTS = frozenset({EventType.GOAL, EventType.SAVED_SHOT, EventType.MISSED_SHOT})
STOPPAGE_EVENTS = frozenset({EventType.GOAL, EventType.INJURY, EventType.RED_CARD})


@dataclass(frozen=True)
class MatchEvent:
    """Snapshot of a noteworthy moment during a simulation.

    Parameters
    ----------
    event_type : EventType
        Category of event.
    minute : int
        Match minute on the clock when the event occurred.
    half : Half
        Half in progress when the event occurred.
    side : Side | None, optional
        Side the event is attributed to; ``None`` for neutral markers.
    player : MatchPlayer | None, optional
        Player involved, such as the goal scorer.
    """

    event_type: EventType
    minute: int
    half: Half
    side: Optional[Side] = None
    player: Optional[MatchPlayer] = None

    @property
    def is_shot(self) -> bool:
        """Return ``True`` for goals, saved shots and missed shots."""
        return self.event_type in SHOT_EVENTS

    def describe(self, team_name: Optional[str] = None) -> str:
        """Render a one-line commentary message for the event.

        Parameters
        ----------
        team_name : str | None, optional
            Display name of the side the event is attributed to.

        Returns
        -------
        str
            Commentary text suitable for a feed or timeline.
        """
        team = team_name or "They"
        who = self.player.name if self.player is not None else None
        kind = self.event_type

        if kind is EventType.HALF_STARTS:
            return "First half starts!" if self.half is Half.FIRST else "Second half starts!"
        if kind is EventType.HALF_ENDS:
            return "Half time!" if self.half is Half.FIRST else "Full time!"
        if kind is EventType.GOAL:
            return f"GOAL: {who} scores for {team}!" if who else f"GOAL: {team} score!"
        if kind is EventType.POSSESSION_CHANGED:
            return f"{team} win the ball"
        if kind is EventType.POSSESSION_RETAINED:
            return f"{team} have the ball..."
        if kind is EventType.SAVED_SHOT:
            return f"Save! {team} are denied." if team_name else "Great save!"
        if kind is EventType.MISSED_SHOT:
            return f"{team} fire wide!" if team_name else "Missed shot!"
        if kind is EventType.YELLOW_CARD:
            return f"Yellow card for {who}" if who else "Yellow card!"
        if kind is EventType.RED_CARD:
            return f"RED CARD! {who} is sent off!" if who else "RED CARD!"
        return f"Injury for {who}" if who else "Injury stoppage"

    def __str__(self) -> str:
        """Timeline label such as ``"Saka (23')"``.

        Returns
        -------
        str
            Player name (when known) and minute.
        """
        if self.player is not None:
            return f"{self.player.name} ({self.minute}')"
        return f"({self.minute}')"

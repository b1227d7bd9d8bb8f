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
"""Commands sent to a running match and notifications it sends back."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from dugout.engine.events import MatchEvent
from dugout.engine.match_state import MatchSnapshot
from dugout.models.participant import MatchPlayer, Side


# -- commands (consumer -> controller) ---------------------------------------


@dataclass(frozen=True)
class PauseMatch:
    """Stop ticking until resumed. Ignored when already paused."""


@dataclass(frozen=True)
class ResumeMatch:
    """Resume ticking; at half time this also kicks off the second half."""


@dataclass(frozen=True)
class StartMatch:
    """Alias of :class:`ResumeMatch` used for the opening whistle."""


@dataclass(frozen=True)
class TogglePause:
    """Pause when running, resume when paused."""


@dataclass(frozen=True)
class SpeedUp:
    """Move one step faster on the speed ladder, wrapping to the slowest."""


@dataclass(frozen=True)
class SlowDown:
    """Move one step slower on the speed ladder, wrapping to the fastest."""


@dataclass(frozen=True)
class SubstitutePlayer:
    """Bring a bench player on for a starter between ticks.

    Parameters
    ----------
    side : Side
        Side making the change.
    player_out_id : int
        Starter leaving the pitch.
    player_in_id : int
        Substitute coming on.
    """

    side: Side
    player_out_id: int
    player_in_id: int


Command = Union[PauseMatch, ResumeMatch, StartMatch, TogglePause, SpeedUp, SlowDown, SubstitutePlayer]


# -- notifications (controller -> consumer) ----------------------------------


@dataclass(frozen=True)
class MatchUpdate:
    """State after a tick, with the event that tick produced.

    Parameters
    ----------
    snapshot : MatchSnapshot
        Match state after the tick.
    latest_event : MatchEvent | None, optional
        Event appended during the tick, if any.
    """

    snapshot: MatchSnapshot
    latest_event: Optional[MatchEvent] = None


@dataclass(frozen=True)
class Halftime:
    """The first half has ended and the controller has paused.

    Parameters
    ----------
    snapshot : MatchSnapshot
        Match state at the break.
    """

    snapshot: MatchSnapshot


@dataclass(frozen=True)
class Fulltime:
    """The match is over; no further notifications follow.

    Parameters
    ----------
    snapshot : MatchSnapshot
        Final match state.
    """

    snapshot: MatchSnapshot


@dataclass(frozen=True)
class MatchPaused:
    """The controller stopped ticking.

    Parameters
    ----------
    snapshot : MatchSnapshot
        Match state when paused.
    """

    snapshot: MatchSnapshot


@dataclass(frozen=True)
class MatchResumed:
    """The controller started ticking again.

    Parameters
    ----------
    snapshot : MatchSnapshot
        Match state when resumed.
    """

    snapshot: MatchSnapshot


@dataclass(frozen=True)
class SubstitutionMade:
    """A substitution was applied.

    Parameters
    ----------
    snapshot : MatchSnapshot
        Match state after the change.
    player_out : MatchPlayer
        Player who left the pitch, now on the bench.
    player_in : MatchPlayer
        Player who came on in the same position.
    """

    snapshot: MatchSnapshot
    player_out: MatchPlayer
    player_in: MatchPlayer


Notification = Union[MatchUpdate, Halftime, Fulltime, MatchPaused, MatchResumed, SubstitutionMade]

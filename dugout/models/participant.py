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
"""In-match roster views for the two sides of a fixture."""

from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Tuple

from dugout.models.player import Player
from dugout.models.team import GOALKEEPER, Club, get_formation


class Side(Enum):
    """Which end of the fixture a participant represents."""

    HOME = "home"
    AWAY = "away"

    @property
    def opponent(self) -> "Side":
        """Return the other side of the fixture."""
        return Side.AWAY if self is Side.HOME else Side.HOME


@dataclass(frozen=True)
class MatchPlayer:
    """A player as fielded in one match.

    Parameters
    ----------
    player : Player
        Underlying squad player.
    position : str, default=""
        Position label in the current lineup; empty while on the bench.
    """

    player: Player
    position: str = ""

    @property
    def player_id(self) -> int:
        """Identifier of the underlying player."""
        return self.player.player_id

    @property
    def name(self) -> str:
        """Name of the underlying player."""
        return self.player.name

    @property
    def is_goalkeeper(self) -> bool:
        """Return ``True`` when the player is fielded in goal."""
        return self.position == GOALKEEPER


@dataclass
class MatchParticipant:
    """A club's lineup, bench and shape for a single match.

    The score is not stored here; it is derived from the match event log.

    Parameters
    ----------
    club : Club
        Club being represented.
    side : Side
        Whether the club plays at home or away.
    lineup : List[MatchPlayer]
        Starting eleven in formation order.
    bench : List[MatchPlayer], optional
        Substitutes available to come on.
    formation : str, default="4-3-3"
        Formation label for display.
    """

    club: Club
    side: Side
    lineup: List[MatchPlayer]
    bench: List[MatchPlayer] = field(default_factory=list)
    formation: str = "4-3-3"

    def __post_init__(self) -> None:
        """Reject lineups that could never supply a goal scorer."""
        if not self.outfielders():
            raise ValueError(f"{self.club.name} lineup has no outfield players")

    @classmethod
    def from_club(cls, club: Club, side: Side, formation: str = "4-3-3") -> "MatchParticipant":
        """Field the first eleven squad players in formation order.

        Parameters
        ----------
        club : Club
            Club providing the squad.
        side : Side
            Home or away.
        formation : str, default="4-3-3"
            Name of a built-in formation used to assign positions.

        Returns
        -------
        MatchParticipant
            Participant with eleven starters and the remaining squad on the bench.
        """
        shape = get_formation(formation)
        lineup = [MatchPlayer(player, position) for player, position in zip(club.players, shape.positions)]
        bench = [MatchPlayer(player) for player in club.players[len(shape.positions):]]
        return cls(club=club, side=side, lineup=lineup, bench=bench, formation=shape.name)

    @property
    def name(self) -> str:
        """Club name shown for this participant."""
        return self.club.name

    @property
    def strength(self) -> int:
        """Club strength used as the base of every phase power."""
        return self.club.strength

    def outfielders(self) -> List[MatchPlayer]:
        """Starters who are not playing in goal.

        Returns
        -------
        List[MatchPlayer]
            Outfield members of the current lineup, in lineup order.
        """
        return [p for p in self.lineup if not p.is_goalkeeper]

    def random_outfielder(self, rng: random.Random) -> MatchPlayer:
        """Pick an outfield starter uniformly at random.

        Parameters
        ----------
        rng : random.Random
            Random source shared with the engine.

        Returns
        -------
        MatchPlayer
            The chosen starter.

        Raises
        ------
        LookupError
            If the lineup has no outfield players.
        """
        outfielders = self.outfielders()
        if not outfielders:
            raise LookupError(f"{self.name} has no outfield players to credit")
        return outfielders[rng.randrange(len(outfielders))]

    def make_substitution(self, player_out_id: int, player_in_id: int) -> Tuple[MatchPlayer, MatchPlayer]:
        """Swap a bench player into the lineup in place of a starter.

        The incoming player inherits the outgoing player's position and slot;
        the outgoing player joins the end of the bench without a position.

        Parameters
        ----------
        player_out_id : int
            Identifier of the starter leaving the pitch.
        player_in_id : int
            Identifier of the substitute coming on.

        Returns
        -------
        Tuple[MatchPlayer, MatchPlayer]
            ``(player_out, player_in)`` as they stand after the change.

        Raises
        ------
        ValueError
            If the outgoing player is not in the lineup or the incoming player
            is not on the bench.
        """
        out_index = next((i for i, p in enumerate(self.lineup) if p.player_id == player_out_id), None)
        if out_index is None:
            raise ValueError(f"Player {player_out_id} is not in the {self.name} lineup")
        in_index = next((i for i, p in enumerate(self.bench) if p.player_id == player_in_id), None)
        if in_index is None:
            raise ValueError(f"Player {player_in_id} is not on the {self.name} bench")

        outgoing = self.lineup[out_index]
        incoming = replace(self.bench.pop(in_index), position=outgoing.position)
        self.lineup[out_index] = incoming

        benched = replace(outgoing, position="")
        self.bench.append(benched)
        return benched, incoming

    def star_players(self) -> List[MatchPlayer]:
        """Starters sharing the highest quality rating.

        Returns
        -------
        List[MatchPlayer]
            Every starter whose quality equals the lineup maximum.
        """
        best = max(p.player.quality for p in self.lineup)
        return [p for p in self.lineup if p.player.quality == best]

    def average_quality(self) -> float:
        """Average quality of the current lineup.

        Returns
        -------
        float
            Mean quality across the starters.
        """
        return sum(p.player.quality for p in self.lineup) / len(self.lineup)

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
"""Club and formation domain models."""
from dataclasses import dataclass
from typing import Dict, List, Tuple

from dugout.models.player import MAX_RATING, Player

GOALKEEPER = "GK"


@dataclass(frozen=True)
class Formation:
    """Ordered list of the eleven positions a lineup is assigned to.

    Parameters
    ----------
    name : str
        Human-readable name of the formation (for example ``"4-3-3"``).
    positions : Tuple[str, ...]
        Position label for each starting slot, goalkeeper included.
    """

    name: str  # e.g., "4-4-2", "4-3-3"
    positions: Tuple[str, ...]  # e.g., ("GK", "RB", "CB", ...)

    def __post_init__(self) -> None:
        """Ensure the formation describes eleven slots and one goalkeeper."""
        if len(self.positions) != 11:
            raise ValueError("Formation must have exactly 11 positions")
        if self.positions.count(GOALKEEPER) != 1:
            raise ValueError("Formation must have exactly one goalkeeper")


FORMATIONS: Dict[str, Formation] = {
    "4-3-3": Formation("4-3-3", ("GK", "RB", "CB", "CB", "LB", "CM", "CM", "CM", "RW", "ST", "LW")),
    "4-4-2": Formation("4-4-2", ("GK", "RB", "CB", "CB", "LB", "RM", "CM", "CM", "LM", "ST", "ST")),
}


def get_formation(name: str) -> Formation:
    """Look up one of the built-in formations.

    Parameters
    ----------
    name : str
        Formation name such as ``"4-3-3"``.

    Returns
    -------
    Formation
        The matching formation definition.

    Raises
    ------
    ValueError
        If ``name`` is not a known formation.
    """
    try:
        return FORMATIONS[name]
    except KeyError as exc:
        known = ", ".join(sorted(FORMATIONS))
        raise ValueError(f"Unsupported formation '{name}'. Known formations: {known}") from exc


@dataclass
class Club:
    """A football club with its permanent strength rating and squad.

    Parameters
    ----------
    club_id : int
        Unique identifier for the club.
    name : str
        Display name for the club.
    strength : int
        Team power on the 0-20 scale; added to every phase roll.
    players : List[Player]
        Complete squad, starting eleven first.
    background : str, default="#FFFFFF"
        Primary kit colour as a hex string.
    foreground : str, default="#000000"
        Secondary kit colour as a hex string.
    """

    club_id: int
    name: str
    strength: int
    players: List[Player]
    background: str = "#FFFFFF"
    foreground: str = "#000000"

    def __post_init__(self) -> None:
        """Validate the strength rating and that the squad can field eleven."""
        if not 0 <= self.strength <= MAX_RATING:
            raise ValueError(f"strength must be between 0 and {MAX_RATING}")
        if len(self.players) < 11:
            raise ValueError("Club must have at least 11 players")

    def average_quality(self) -> float:
        """Average quality across the whole squad.

        Returns
        -------
        float
            Mean of every player's quality rating.
        """
        return sum(p.quality for p in self.players) / len(self.players)

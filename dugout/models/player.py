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
"""Domain model representing a football player."""
from dataclasses import dataclass

MAX_RATING = 20


@dataclass
class Player:
    """Squad member with a single overall quality rating.

    Parameters
    ----------
    player_id : int
        Unique identifier for the player.
    name : str
        Human-readable player name.
    quality : int
        Overall ability on the 0-20 scale used by clubs.
    """

    player_id: int
    name: str
    quality: int

    def __post_init__(self) -> None:
        """Validate that the quality rating falls within the 0-20 scale."""
        if not 0 <= self.quality <= MAX_RATING:
            raise ValueError(f"quality must be between 0 and {MAX_RATING}")

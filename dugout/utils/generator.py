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
"""Utilities that synthesise players and clubs for quick simulations."""
import random
from typing import List, Optional

from dugout.models.player import MAX_RATING, Player
from dugout.models.team import Club

FIRST_NAMES = ["John", "James", "David", "Michael", "Robert", "Carlos", "Juan", "Luis"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Rodriguez"]


def generate_random_player(
    id: int,
    name: Optional[str] = None,
    quality: Optional[int] = None,
    rng: Optional[random.Random] = None,
) -> Player:
    """Generate a player with a random quality rating.

    Parameters
    ----------
    id : int
        Unique identifier assigned to the created player.
    name : Optional[str]
        Human-readable name to apply; a pseudo-random name is chosen when omitted.
    quality : Optional[int]
        Fixed quality rating; drawn from 8-18 when ``None``.
    rng : Optional[random.Random]
        Random source; a fresh unseeded generator is used when omitted.

    Returns
    -------
    Player
        A newly constructed player.
    """
    rng = rng or random.Random()
    if name is None:
        name = f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"
    if quality is None:
        quality = rng.randint(8, 18)
    return Player(player_id=id, name=name, quality=quality)


def generate_club(
    id: int,
    name: Optional[str] = None,
    strength: Optional[int] = None,
    starting_player_id: int = 1,
    substitutes: int = 7,
    rng: Optional[random.Random] = None,
) -> Club:
    """Generate a club with a random squad.

    Player qualities lie within two points either side of the club strength,
    clamped to the 0-20 scale, so strong clubs field strong players.

    Parameters
    ----------
    id : int
        Unique identifier assigned to the generated club.
    name : Optional[str]
        Club name to apply; synthesised when ``None``.
    strength : Optional[int]
        Club strength on the 0-20 scale; drawn from 8-20 when ``None``.
    starting_player_id : int
        Identifier for the first generated player; increments for each additional player.
    substitutes : int
        Number of bench players generated after the starting eleven.
    rng : Optional[random.Random]
        Random source for reproducible squads.

    Returns
    -------
    Club
        Club with eleven starters followed by ``substitutes`` bench players.
    """
    rng = rng or random.Random()
    if name is None:
        prefixes = ["FC", "United", "City", "Athletic", "Sporting"]
        cities = ["London", "Madrid", "Paris", "Milan", "Munich"]
        name = f"{rng.choice(cities)} {rng.choice(prefixes)}"
    if strength is None:
        strength = rng.randint(8, MAX_RATING)

    players: List[Player] = []
    for offset in range(11 + substitutes):
        quality = max(0, min(MAX_RATING, strength + rng.randint(-2, 2)))
        players.append(generate_random_player(starting_player_id + offset, quality=quality, rng=rng))

    return Club(club_id=id, name=name, strength=strength, players=players)

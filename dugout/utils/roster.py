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
"""Utilities for constructing clubs from serialized data sources.

The helpers translate plain dictionaries or JSON payloads into the domain
objects the engine understands. They back the demo entry point, the batch tool
and test fixtures. Missing optional values fall back to defaults so partial
datasets still produce valid ``Player`` and ``Club`` instances.
"""
import json
from pathlib import Path
from typing import List, Union

from dugout.models.player import Player
from dugout.models.team import Club

DEFAULT_CLUBS_PATH = Path(__file__).resolve().parents[1] / "data" / "clubs.json"


def player_from_dict(d: dict) -> Player:
    """Build a ``Player`` from a plain dictionary payload.

    Parameters
    ----------
    d
        Mapping with ``id``, ``name`` and ``quality`` keys. ``quality``
        defaults to 10 when absent.

    Returns
    -------
    Player
        A validated player instance.
    """
    player_id = d.get("id", 0)
    return Player(
        player_id=player_id,
        name=d.get("name", f"player_{player_id}"),
        quality=d.get("quality", 10),
    )


def club_from_dict(d: dict) -> Club:
    """Build a ``Club`` and its squad from a plain dictionary payload.

    Parameters
    ----------
    d
        Mapping with ``id``, ``name``, ``strength``, optional ``background`` and
        ``foreground`` colours, and a ``players`` list (starting eleven first).

    Returns
    -------
    Club
        A validated club instance.

    Raises
    ------
    KeyError
        Raised when ``name`` or ``strength`` is missing.
    """
    players = [player_from_dict(p) for p in d.get("players", [])]
    return Club(
        club_id=d.get("id", 0),
        name=d["name"],
        strength=d["strength"],
        players=players,
        background=d.get("background", "#FFFFFF"),
        foreground=d.get("foreground", "#000000"),
    )


def load_clubs_from_json(path: Union[str, Path, None] = None) -> List[Club]:
    """Load every club from a JSON roster file.

    Parameters
    ----------
    path
        Location of a document with a top-level ``clubs`` list. Defaults to
        the bundled ``dugout/data/clubs.json``.

    Returns
    -------
    List[Club]
        Clubs in file order.

    Raises
    ------
    FileNotFoundError
        Raised when ``path`` does not exist.
    KeyError
        Raised when the payload has no ``clubs`` section.
    """
    p = Path(path) if path is not None else DEFAULT_CLUBS_PATH
    if not p.exists():
        raise FileNotFoundError(f"Clubs JSON not found: {p}")

    with p.open("r", encoding="utf-8") as fh:
        data = json.load(fh)

    return [club_from_dict(c) for c in data["clubs"]]


def get_club_by_name(clubs: List[Club], name: str) -> Club:
    """Find a club by case-insensitive name.

    Parameters
    ----------
    clubs
        Clubs to search.
    name
        Club name to look for.

    Returns
    -------
    Club
        The first club whose name matches.

    Raises
    ------
    KeyError
        Raised when no club matches.
    """
    wanted = name.casefold()
    for club in clubs:
        if club.name.casefold() == wanted:
            return club
    raise KeyError(f"No club named {name!r}")

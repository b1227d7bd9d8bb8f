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
"""Shared fixtures: the bundled clubs and a factory for fresh matches."""

from __future__ import annotations

import random
from typing import Callable, List, Optional

import pytest

from dugout.engine.match_state import Match
from dugout.models.participant import MatchParticipant, Side
from dugout.models.team import Club
from dugout.utils.roster import get_club_by_name, load_clubs_from_json


class ScriptedRandom(random.Random):
    """Random source that replays fixed answers for ``randrange`` and ``random``."""

    def __init__(self, ranges: List[int], floats: Optional[List[float]] = None) -> None:
        super().__init__(0)
        self._ranges = list(ranges)
        self._floats = list(floats or [])

    def randrange(self, start, stop=None, step=1):
        value = self._ranges.pop(0)
        upper = start if stop is None else stop
        assert 0 <= value < upper, f"scripted value {value} outside randrange({upper})"
        return value

    def random(self) -> float:
        return self._floats.pop(0)


@pytest.fixture
def scripted_rng() -> type:
    """Expose ScriptedRandom so tests can script each engine decision."""
    return ScriptedRandom


@pytest.fixture
def clubs() -> List[Club]:
    return load_clubs_from_json()


@pytest.fixture
def arsenal(clubs: List[Club]) -> Club:
    return get_club_by_name(clubs, "Arsenal")


@pytest.fixture
def man_city(clubs: List[Club]) -> Club:
    return get_club_by_name(clubs, "Manchester City")


@pytest.fixture
def make_match(arsenal: Club, man_city: Club) -> Callable[..., Match]:
    """Return a factory building a fresh Arsenal (home) vs Manchester City match."""

    def factory(**kwargs) -> Match:
        return Match(
            MatchParticipant.from_club(arsenal, Side.HOME),
            MatchParticipant.from_club(man_city, Side.AWAY),
            **kwargs,
        )

    return factory


@pytest.fixture
def match(make_match: Callable[..., Match]) -> Match:
    return make_match()

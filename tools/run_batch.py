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
"""Play many headless matches and print average goals, shots and threat."""
import argparse
import random
from collections import Counter
from dataclasses import dataclass, field
from typing import Optional

from dugout.engine.match_state import Match
from dugout.engine.simulation import SimulationEngine
from dugout.models.participant import MatchParticipant, Side
from dugout.models.team import Club
from dugout.utils.roster import get_club_by_name, load_clubs_from_json


@dataclass
class BatchStats:
    """Running totals across a batch of matches."""

    matches: int = 0
    goals: Counter = field(default_factory=Counter)
    shots: Counter = field(default_factory=Counter)
    threat: Counter = field(default_factory=Counter)
    results: Counter = field(default_factory=Counter)

    def record(self, match: Match) -> None:
        """Add one finished match to the totals.

        Parameters
        ----------
        match : Match
            Match played to full time.
        """
        self.matches += 1
        for side in Side:
            self.goals[side] += match.score(side)
            self.shots[side] += match.shots(side)
        for phase in match.phase_history:
            if phase.shot_threat is not None:
                self.threat[phase.event.side] += phase.shot_threat
        winner = match.winner()
        self.results[winner.side if winner is not None else None] += 1


def play_batch(home: Club, away: Club, count: int, seed: Optional[int] = None) -> BatchStats:
    """Play ``count`` matches between two clubs.

    Parameters
    ----------
    home : Club
        Home club.
    away : Club
        Away club.
    count : int
        Number of matches.
    seed : Optional[int]
        Seed for a reproducible batch.

    Returns
    -------
    BatchStats
        Aggregated totals.
    """
    rng = random.Random(seed)
    stats = BatchStats()
    for _ in range(count):
        match = Match(MatchParticipant.from_club(home, Side.HOME), MatchParticipant.from_club(away, Side.AWAY))
        SimulationEngine(match, rng=rng).play_full_match()
        stats.record(match)
    return stats


def main() -> None:
    parser = argparse.ArgumentParser(description="Batch statistics for headless matches")
    parser.add_argument("--home", type=str, default="Arsenal", help="Home club name")
    parser.add_argument("--away", type=str, default="Manchester City", help="Away club name")
    parser.add_argument("--matches", type=int, default=100, help="Number of matches to play")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible runs")
    parser.add_argument("--clubs", type=str, default=None, help="Path to a clubs JSON file")
    args = parser.parse_args()

    clubs = load_clubs_from_json(args.clubs)
    home = get_club_by_name(clubs, args.home)
    away = get_club_by_name(clubs, args.away)
    stats = play_batch(home, away, args.matches, args.seed)

    n = stats.matches
    total_goals = sum(stats.goals.values())
    total_shots = sum(stats.shots.values())
    print(f"{n} matches: {home.name} vs {away.name}")
    print(f"Goals per match: {total_goals / n:.2f}  Shots per match: {total_shots / n:.2f}")
    for side, club in ((Side.HOME, home), (Side.AWAY, away)):
        avg_threat = stats.threat[side] / max(1, stats.shots[side])
        print(
            f"  {club.name}: {stats.goals[side] / n:.2f} goals, {stats.shots[side] / n:.2f} shots, "
            f"avg shot threat {avg_threat:.3f}, {stats.results[side]} wins"
        )
    print(f"  Draws: {stats.results[None]}")


if __name__ == "__main__":
    main()

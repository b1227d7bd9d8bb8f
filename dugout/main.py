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
"""Entry point for a console match fed by the background controller."""
import time
from typing import Optional

from dugout.engine.controller import MatchController
from dugout.engine.match_state import Match, MatchSnapshot
from dugout.engine.messages import (
    Fulltime,
    Halftime,
    MatchPaused,
    MatchResumed,
    MatchUpdate,
    Notification,
    ResumeMatch,
    SubstitutionMade,
)
from dugout.engine.simulation import SimulationEngine
from dugout.models.participant import MatchParticipant, Side
from dugout.models.team import Club
from dugout.utils.debug import MatchDebugger
from dugout.utils.generator import generate_club
from dugout.utils.roster import get_club_by_name, load_clubs_from_json

HALF_TIME_BREAK = 2.0


def scoreboard(snapshot: MatchSnapshot) -> str:
    """One-line scoreboard such as ``"[45+1'] Arsenal 1 - 0 Manchester City"``.

    Parameters
    ----------
    snapshot : MatchSnapshot
        State to render.

    Returns
    -------
    str
        Clock, names and score.
    """
    return (
        f"[{snapshot.clock}] {snapshot.home_name} {snapshot.home_score} - "
        f"{snapshot.away_score} {snapshot.away_name}"
    )


def print_notification(notification: Notification) -> None:
    """Print the interesting part of a notification.

    Parameters
    ----------
    notification : Notification
        Message received from the controller.
    """
    snapshot = notification.snapshot
    if isinstance(notification, MatchUpdate):
        event = notification.latest_event
        if event is not None and (event.is_shot or event.event_type.value.startswith("half")):
            print(f"{scoreboard(snapshot)}  {event.describe(snapshot.team_name(event.side))}")
    elif isinstance(notification, Halftime):
        print(f"\nHalf time: {scoreboard(snapshot)}\n")
    elif isinstance(notification, Fulltime):
        print(f"\nFull time: {scoreboard(snapshot)}")
    elif isinstance(notification, SubstitutionMade):
        print(f"Substitution: {notification.player_in.name} on for {notification.player_out.name}")
    elif isinstance(notification, (MatchPaused, MatchResumed)):
        print(type(notification).__name__)


def load_fixture() -> tuple[Club, Club]:
    """Pick the two bundled clubs, falling back to generated ones.

    Returns
    -------
    tuple[Club, Club]
        Home and away clubs.
    """
    try:
        clubs = load_clubs_from_json()
        return get_club_by_name(clubs, "Arsenal"), get_club_by_name(clubs, "Manchester City")
    except (FileNotFoundError, KeyError) as exc:
        print(f"Could not load bundled clubs ({exc}); using generated clubs...")
        return generate_club(1, "Home Town", 17), generate_club(2, "Away Rovers", 16, starting_player_id=100)


def main(debug_dir: Optional[str] = "debug_logs") -> None:
    """Play one match at the default speed and print it as it happens.

    Parameters
    ----------
    debug_dir : Optional[str]
        Directory for the session log; ``None`` keeps the log in memory.
    """
    home_club, away_club = load_fixture()
    match = Match(
        MatchParticipant.from_club(home_club, Side.HOME),
        MatchParticipant.from_club(away_club, Side.AWAY, formation="4-4-2"),
    )
    debugger = MatchDebugger(debug_dir)
    controller = MatchController(match, SimulationEngine(match, debugger=debugger), debugger=debugger)
    controller.start()
    print(f"{home_club.name} vs {away_club.name} at {controller.speed_label}")

    last = None
    try:
        for notification in controller.notifications():
            last = notification.snapshot
            print_notification(notification)
            if isinstance(notification, Halftime):
                time.sleep(HALF_TIME_BREAK)
                controller.send_command(ResumeMatch())
    except KeyboardInterrupt:
        print("\nMatch simulation interrupted.")
    finally:
        debugger.close()

    if last is None:
        return
    print("\nMatch Statistics:")
    for side in Side:
        goals = last.home_score if side is Side.HOME else last.away_score
        shots = sum(1 for e in last.events if e.is_shot and e.side is side)
        print(f"{last.team_name(side)}: {goals} goals, {shots} shots")


if __name__ == "__main__":
    main()

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
"""Background controller that paces a match against the wall clock.

The controller thread is the only writer of the match. Consumers talk to it
through two queues: commands go in with :meth:`MatchController.send_command`
and notifications carrying immutable snapshots come out through
:meth:`MatchController.next_notification`.
"""

from __future__ import annotations

import queue
import threading
import time
from enum import Enum
from typing import Iterator, Optional

from dugout.engine.config import ENGINE_CONFIG, ControllerConfig
from dugout.engine.events import EventType, MatchEvent
from dugout.engine.match_state import Match
from dugout.engine.messages import (
    Command,
    Fulltime,
    Halftime,
    MatchPaused,
    MatchResumed,
    MatchUpdate,
    Notification,
    PauseMatch,
    ResumeMatch,
    SlowDown,
    SpeedUp,
    StartMatch,
    SubstitutePlayer,
    SubstitutionMade,
    TogglePause,
)
from dugout.engine.simulation import SimulationEngine
from dugout.models.participant import Side
from dugout.utils.debug import MatchDebugger


class ControllerState(Enum):
    """Lifecycle of a controller: running and paused alternate, done is final."""

    RUNNING = "running"
    PAUSED = "paused"
    DONE = "done"


class MatchController:
    """Run a match tick by tick on a background thread.

    Parameters
    ----------
    match : Match
        Match to drive. Kicked off automatically when it has not started.
    engine : SimulationEngine | None, optional
        Engine bound to ``match``; one with an unseeded random source is
        created when omitted.
    config : ControllerConfig | None, optional
        Speed ladder, pacing and queue sizes. Defaults to
        ``ENGINE_CONFIG.controller``.
    debugger : MatchDebugger | None, optional
        Logger for controller actions; falls back to the engine's debugger,
        then to an in-memory one.
    controlled_side : Side, default=Side.HOME
        Side managed by the local user.
    """

    def __init__(
        self,
        match: Match,
        engine: Optional[SimulationEngine] = None,
        config: Optional[ControllerConfig] = None,
        debugger: Optional[MatchDebugger] = None,
        controlled_side: Side = Side.HOME,
    ) -> None:
        """Prepare queues and pacing without starting the thread.

        Parameters
        ----------
        match : Match
            Match to drive.
        engine : SimulationEngine | None
            Engine bound to ``match``.
        config : ControllerConfig | None
            Controller settings.
        debugger : MatchDebugger | None
            Logger for controller actions.
        controlled_side : Side
            Side managed by the local user.
        """
        if engine is not None and engine.match is not match:
            raise ValueError("Engine is bound to a different match")
        self.match = match
        self.config = config or ENGINE_CONFIG.controller
        self.debugger = debugger or (engine.debugger if engine is not None else None) or MatchDebugger(None)
        self.engine = engine or SimulationEngine(match, debugger=self.debugger)
        self.controlled_side = controlled_side
        self._speed_index = self.config.default_speed_index
        self._state = ControllerState.RUNNING
        self._deadline = 0.0
        self._commands: "queue.Queue[Command]" = queue.Queue(maxsize=self.config.command_queue_size)
        self._notifications: "queue.Queue[Notification]" = queue.Queue(
            maxsize=self.config.notification_queue_size
        )
        self._thread: Optional[threading.Thread] = None

    # -- read API ------------------------------------------------------------

    @property
    def state(self) -> ControllerState:
        """Current lifecycle state."""
        return self._state

    @property
    def speed_index(self) -> int:
        """Position on the speed ladder, 0 being the slowest."""
        return self._speed_index

    @property
    def tick_period(self) -> float:
        """Seconds between ticks at the current speed."""
        return self.config.speeds[self._speed_index]

    @property
    def speed_label(self) -> str:
        """Presentational label for the current speed."""
        return self.config.speed_labels[self._speed_index]

    def is_controlled(self, side: Side) -> bool:
        """Whether ``side`` is managed by the local user.

        Parameters
        ----------
        side : Side
            Side to test.

        Returns
        -------
        bool
            ``True`` when the side matches the controlled side.
        """
        return side.value == self.controlled_side.value

    # -- consumer side -------------------------------------------------------

    def start(self) -> threading.Thread:
        """Launch the control loop on a daemon thread.

        Returns
        -------
        threading.Thread
            The running thread.

        Raises
        ------
        RuntimeError
            If the controller was already started.
        """
        if self._thread is not None:
            raise RuntimeError("Controller already started")
        self._thread = threading.Thread(target=self.run, name="match-controller", daemon=True)
        self._thread.start()
        return self._thread

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the control loop to finish.

        Parameters
        ----------
        timeout : float | None, optional
            Seconds to wait; ``None`` waits indefinitely.

        Returns
        -------
        bool
            ``True`` when the thread has exited.
        """
        if self._thread is None:
            return self._state is ControllerState.DONE
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def send_command(self, command: Command) -> bool:
        """Queue a command without blocking.

        Parameters
        ----------
        command : Command
            Command to deliver to the control loop.

        Returns
        -------
        bool
            ``False`` when the command queue was full and the command dropped.
        """
        try:
            self._commands.put_nowait(command)
        except queue.Full:
            return False
        return True

    def next_notification(self, timeout: Optional[float] = None) -> Notification:
        """Take the oldest pending notification.

        Parameters
        ----------
        timeout : float | None, optional
            Seconds to wait; ``None`` waits indefinitely.

        Returns
        -------
        Notification
            The next notification in chronological order.

        Raises
        ------
        queue.Empty
            If nothing arrived within ``timeout``.
        """
        return self._notifications.get(timeout=timeout)

    def notifications(self, timeout: Optional[float] = None) -> Iterator[Notification]:
        """Iterate notifications up to and including :class:`Fulltime`.

        Parameters
        ----------
        timeout : float | None, optional
            Per-notification wait passed to :meth:`next_notification`.

        Returns
        -------
        Iterator[Notification]
            Notifications in the order they were produced.
        """
        while True:
            notification = self.next_notification(timeout)
            yield notification
            if isinstance(notification, Fulltime):
                return

    # -- control loop ----------------------------------------------------------

    def run(self) -> None:
        """Control loop; returns once full time has been published."""
        match = self.match
        opening: Optional[MatchEvent] = None
        if not match.has_kicked_off:
            opening = match.start_first_half()
        self.debugger.log_controller(match.current_minute, f"started at {self.tick_period}s per minute")
        self._publish(MatchUpdate(match.snapshot(), opening))
        self._rearm()

        while self._state is not ControllerState.DONE:
            if self._state is ControllerState.PAUSED:
                self._handle_command(self._commands.get())
                continue
            remaining = max(0.0, self._deadline - time.monotonic())
            try:
                command = self._commands.get(timeout=remaining)
            except queue.Empty:
                self._tick()
                continue
            self._handle_command(command)

        self.debugger.log_controller(match.current_minute, "finished")

    def _rearm(self, wait: Optional[float] = None) -> None:
        """Schedule the next tick from now.

        Parameters
        ----------
        wait : float | None, optional
            Seconds until the tick; the current period when omitted.
        """
        self._deadline = time.monotonic() + (self.tick_period if wait is None else wait)

    def _publish(self, notification: Notification) -> None:
        """Hand a notification to consumers, blocking while the queue is full.

        Parameters
        ----------
        notification : Notification
            Message to deliver.
        """
        self._notifications.put(notification)

    def _tick(self) -> None:
        """Play one minute and publish the resulting state."""
        match = self.match
        events_before = len(match.events)
        try:
            self.engine.simulate_minute()
        except Exception as exc:
            self.debugger.log_error(type(exc).__name__, str(exc), match.current_minute)
            self._state = ControllerState.DONE
            raise
        latest = match.events[-1] if len(match.events) > events_before else None
        self._publish(MatchUpdate(match.snapshot(), latest))

        if match.is_half_time:
            match.end_half()
            self._publish(Halftime(match.snapshot()))
            self._state = ControllerState.PAUSED
            self.debugger.log_controller(match.current_minute, "half time")
            return
        if match.is_full_time:
            match.end_half()
            self._publish(Fulltime(match.snapshot()))
            self._state = ControllerState.DONE
            self.debugger.log_controller(match.current_minute, "full time")
            return

        wait = self.tick_period
        if latest is not None and latest.event_type is EventType.GOAL:
            wait = max(wait, self.config.goal_pause)
        elif match.is_in_added_time:
            wait = max(wait, self.config.added_time_pause)
        self._rearm(wait)

    def _handle_command(self, command: Command) -> None:
        """Apply one command between ticks.

        Parameters
        ----------
        command : Command
            Command taken from the queue.
        """
        if isinstance(command, PauseMatch):
            self._pause()
        elif isinstance(command, (ResumeMatch, StartMatch)):
            self._resume()
        elif isinstance(command, TogglePause):
            if self._state is ControllerState.PAUSED:
                self._resume()
            else:
                self._pause()
        elif isinstance(command, SpeedUp):
            self._change_speed(1)
        elif isinstance(command, SlowDown):
            self._change_speed(-1)
        elif isinstance(command, SubstitutePlayer):
            self._substitute(command)
        else:
            self.debugger.log_error("unknown_command", repr(command), self.match.current_minute)

    def _pause(self) -> None:
        """Stop ticking; a no-op unless running."""
        if self._state is not ControllerState.RUNNING:
            return
        self._state = ControllerState.PAUSED
        self.debugger.log_controller(self.match.current_minute, "paused")
        self._publish(MatchPaused(self.match.snapshot()))

    def _resume(self) -> None:
        """Start ticking again, kicking off the second half at the break."""
        if self._state is not ControllerState.PAUSED:
            return
        if self.match.is_half_time:
            self.match.start_second_half()
        self._state = ControllerState.RUNNING
        self.debugger.log_controller(self.match.current_minute, "resumed")
        self._publish(MatchResumed(self.match.snapshot()))
        self._rearm()

    def _change_speed(self, step: int) -> None:
        """Move along the speed ladder, wrapping at either end.

        Parameters
        ----------
        step : int
            ``1`` for faster, ``-1`` for slower.
        """
        self._speed_index = (self._speed_index + step) % len(self.config.speeds)
        self.debugger.log_controller(self.match.current_minute, f"speed {self.tick_period}s ({self.speed_label})")
        if self._state is ControllerState.RUNNING:
            self._rearm()

    def _substitute(self, command: SubstitutePlayer) -> None:
        """Apply a substitution, logging and ignoring invalid requests.

        Parameters
        ----------
        command : SubstitutePlayer
            Requested change.
        """
        participant = self.match.participant(command.side)
        try:
            player_out, player_in = participant.make_substitution(command.player_out_id, command.player_in_id)
        except ValueError as exc:
            self.debugger.log_error("invalid_substitution", str(exc), self.match.current_minute)
            return
        self.debugger.log_controller(
            self.match.current_minute, f"{participant.name}: {player_in.name} on for {player_out.name}"
        )
        self._publish(SubstitutionMade(self.match.snapshot(), player_out, player_in))

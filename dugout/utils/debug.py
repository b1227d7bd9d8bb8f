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
"""Structured logging utilities used to trace match simulations."""
import time
from collections import deque
from dataclasses import dataclass
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional, TextIO, Tuple, Union


@dataclass
class DebugEvent:
    """Single logged entry.

    Parameters
    ----------
    minute : int
        Match minute the entry refers to.
    event_type : str
        Category label, for example ``"PHASE"``.
    details : str
        Human-readable description providing additional context.
    """

    minute: int
    event_type: str
    details: str


class MatchDebugger:
    """Thread-safe logger that streams match telemetry to disk.

    The engine and controller threads share one instance, so every write goes
    through a lock.

    Parameters
    ----------
    output_dir : str | Path | None, default="debug_logs"
        Directory where session logs are created; created automatically when
        missing. ``None`` keeps entries in memory only.
    max_recent : int, default=200
        Number of entries retained for :meth:`get_recent_events`.
    """

    def __init__(self, output_dir: Union[str, Path, None] = "debug_logs", max_recent: int = 200) -> None:
        """Initialise the debugger and start the first logging session.

        Parameters
        ----------
        output_dir : str | Path | None
            Filesystem directory where log files are created, or ``None``.
        max_recent : int
            Capacity of the in-memory ring of recent entries.
        """
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.log_file: Optional[TextIO] = None
        self.log_path: Optional[Path] = None
        self.session_start = time.strftime("%Y%m%d_%H%M%S")
        self._lock = Lock()
        self._line_number = 1
        self._recent_events: Deque[Tuple[int, str]] = deque(maxlen=max_recent)
        self._events: List[DebugEvent] = []
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            self.start_new_session()

    def start_new_session(self) -> None:
        """Start a new debug logging session file."""
        if self.output_dir is None:
            return
        if self.log_file:
            self.log_file.close()

        self.log_path = self.output_dir / f"match_debug_{self.session_start}.txt"
        self.log_file = open(self.log_path, "w", encoding="utf-8")
        self.log_file.write(f"=== Match Debug Session: {time.strftime('%Y-%m-%d %H:%M:%S')} ===\n\n")

    def log_phase(
        self,
        minute: int,
        home_power: int,
        away_power: int,
        possession: str,
        zone: str,
    ) -> None:
        """Log the outcome of one resolved phase.

        Parameters
        ----------
        minute : int
            Minute the phase was played in.
        home_power : int
            Home strength plus roll.
        away_power : int
            Away strength plus roll.
        possession : str
            Name of the side on the ball after the phase.
        zone : str
            Name of the zone the ball finished in.
        """
        self._write_log(
            minute,
            "PHASE",
            f"Power: {home_power}-{away_power} | Possession: {possession} | Zone: {zone}",
        )

    def log_match_event(self, minute: int, event_type: str, description: str) -> None:
        """Log a match event (goal, shot, etc.).

        Parameters
        ----------
        minute : int
            Match minute of the event.
        event_type : str
            Short label identifying the event category.
        description : str
            Human-readable summary of the event.
        """
        self._write_log(minute, "MATCH_EVENT", f"Event: {event_type} | Details: {description}")

    def log_controller(self, minute: int, action: str) -> None:
        """Log a controller state change or command.

        Parameters
        ----------
        minute : int
            Match minute at the time of the action.
        action : str
            Description such as ``"paused"`` or ``"speed 0.25s"``.
        """
        self._write_log(minute, "CONTROLLER", action)

    def log_error(self, error_type: str, description: str, minute: int = 0) -> None:
        """Log an error or warning.

        Parameters
        ----------
        error_type : str
            Label describing the error classification.
        description : str
            Human-readable explanation of the issue.
        minute : int, default=0
            Match minute at which the problem occurred, when known.
        """
        self._write_log(minute, "ERROR", f"Type: {error_type} | Details: {description}")

    def _write_log(self, minute: int, event_type: str, details: str) -> None:
        """Write a log entry to memory and, when open, to the session file.

        Parameters
        ----------
        minute : int
            Match minute the entry refers to.
        event_type : str
            Category label for the log entry.
        details : str
            Formatted message body to persist.
        """
        timestamp = time.strftime("%H:%M:%S")
        log_entry = f"[{timestamp}] {minute:3d}' {event_type}: {details}"

        with self._lock:
            line_no = self._line_number
            self._line_number += 1
            self._recent_events.append((line_no, log_entry))
            self._events.append(DebugEvent(minute, event_type, details))

            if self.log_file:
                self.log_file.write(f"{log_entry}\n")
                self.log_file.flush()

    def events_of_type(self, event_type: str) -> List[DebugEvent]:
        """Every entry logged under one category.

        Parameters
        ----------
        event_type : str
            Category label such as ``"ERROR"``.

        Returns
        -------
        List[DebugEvent]
            Matching entries in logging order.
        """
        with self._lock:
            return [e for e in self._events if e.event_type == event_type]

    def get_recent_events(self, limit: int = 20) -> List[str]:
        """Return the latest debug entries with line numbers for live displays.

        Parameters
        ----------
        limit : int
            Maximum number of entries to return.

        Returns
        -------
        List[str]
            Up to ``limit`` most recent log lines with prefixed line numbers.
        """
        with self._lock:
            selected = list(self._recent_events)[-limit:]
        return [f"{line_no:05d} {entry}" for line_no, entry in selected]

    def close(self) -> None:
        """Close the log file."""
        with self._lock:
            if self.log_file:
                self.log_file.close()
                self.log_file = None

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
"""Central configuration for engine tuning parameters."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple


@dataclass(slots=True)
class PitchConfig:
    """Grid layout and shot threat tables for the zone pitch.

    Parameters
    ----------
    rows : int, default=4
        Number of depth bands between the two goals. Row 1 is the West goal
        end, the last row the East goal end.
    columns : int, default=5
        Number of lanes from the left touchline to the right touchline.
    row_names : Tuple[str, ...], default=("West", "West-Mid", "East-Mid", "East")
        Display prefix for each row.
    lane_names : Tuple[str, ...]
        Display suffix for each lane, left wing first.
    threat_by_distance : Tuple[float, ...], default=(1.0, 0.45, 0.15, 0.05)
        Base shot threat indexed by row distance to the target goal, nearest
        band first.
    lane_modifiers : Tuple[float, ...], default=(0.55, 0.8, 1.0, 0.8, 0.55)
        Multiplier applied to the base threat for each lane.
    """

    rows: int = 4
    columns: int = 5
    row_names: Tuple[str, ...] = ("West", "West-Mid", "East-Mid", "East")
    lane_names: Tuple[str, ...] = (
        "Left Wing",
        "Left Half-Space",
        "Centre",
        "Right Half-Space",
        "Right Wing",
    )
    threat_by_distance: Tuple[float, ...] = (1.0, 0.45, 0.15, 0.05)
    lane_modifiers: Tuple[float, ...] = (0.55, 0.8, 1.0, 0.8, 0.55)

    def __post_init__(self) -> None:
        """Reject tables that do not line up with the grid size."""
        if self.rows < 2 or self.columns < 1:
            raise ValueError("Pitch needs at least two rows and one column")
        if len(self.row_names) != self.rows:
            raise ValueError("row_names must name every row")
        if len(self.lane_names) != self.columns:
            raise ValueError("lane_names must name every column")
        if len(self.threat_by_distance) != self.rows:
            raise ValueError("threat_by_distance needs one value per row")
        if len(self.lane_modifiers) != self.columns:
            raise ValueError("lane_modifiers needs one value per column")


@dataclass(slots=True)
class ClockConfig:
    """Match clock settings.

    Parameters
    ----------
    half_length : int, default=45
        Nominal minutes in each half before added time.
    """

    half_length: int = 45


@dataclass(slots=True)
class SimulationConfig:
    """Dice, progression and shooting constants for the phase resolver.

    Parameters
    ----------
    phase_roll_sides : int, default=20
        Each team draws ``randrange(phase_roll_sides)`` per phase.
    zone_progression_scaling : float, default=2.0
        Converts a target zone's threat into the power advantage required to
        move there (truncated to an integer).
    forward_chance : int, default=70
        Percent chance to take the best eligible forward move.
    lateral_chance : int, default=60
        Percent chance to take an eligible lateral move.
    backward_chance : int, default=40
        Percent chance to take an eligible backward move.
    per_point_bonus : float, default=0.02
        Fractional boost to goal probability per point of power advantage.
    goal_probability_cap : float, default=0.65
        Upper bound on the goal probability of any single shot.
    off_target_fraction : float, default=0.15
        Bottom slice of the shot roll that misses the target outright.
    """

    phase_roll_sides: int = 20
    zone_progression_scaling: float = 2.0
    forward_chance: int = 70
    lateral_chance: int = 60
    backward_chance: int = 40
    per_point_bonus: float = 0.02
    goal_probability_cap: float = 0.65
    off_target_fraction: float = 0.15


@dataclass(slots=True)
class ControllerConfig:
    """Wall-clock pacing and queue sizing for the match controller.

    Parameters
    ----------
    speeds : Tuple[float, ...], default=(1.0, 0.5, 0.25, 0.1)
        Tick periods in seconds, slowest first.
    speed_labels : Tuple[str, ...]
        Presentational label for each entry of ``speeds``.
    default_speed_index : int, default=2
        Index into ``speeds`` used when a controller starts.
    goal_pause : float, default=3.0
        Minimum wait in seconds before the tick after a goal.
    added_time_pause : float, default=2.0
        Minimum wait in seconds between ticks played in added time.
    command_queue_size : int, default=10
        Capacity of the inbound command queue; extra commands are dropped.
    notification_queue_size : int, default=10
        Capacity of the outbound notification queue; the controller blocks
        when it is full.
    """

    speeds: Tuple[float, ...] = (1.0, 0.5, 0.25, 0.1)
    speed_labels: Tuple[str, ...] = ("►", "►►", "►►►", "►►►►")
    default_speed_index: int = 2
    goal_pause: float = 3.0
    added_time_pause: float = 2.0
    command_queue_size: int = 10
    notification_queue_size: int = 10

    def __post_init__(self) -> None:
        """Validate the speed ladder."""
        if not self.speeds:
            raise ValueError("At least one speed is required")
        if len(self.speed_labels) != len(self.speeds):
            raise ValueError("Every speed needs a label")
        if not 0 <= self.default_speed_index < len(self.speeds):
            raise ValueError("default_speed_index is outside the speed ladder")


@dataclass(slots=True)
class EngineConfig:
    """Top-level container for all engine tuning structures.

    Parameters
    ----------
    pitch : PitchConfig, default=PitchConfig()
        Zone grid configuration.
    clock : ClockConfig, default=ClockConfig()
        Match clock configuration.
    simulation : SimulationConfig, default=SimulationConfig()
        Phase resolution constants.
    controller : ControllerConfig, default=ControllerConfig()
        Controller pacing and queue settings.
    """

    pitch: PitchConfig = field(default_factory=PitchConfig)
    clock: ClockConfig = field(default_factory=ClockConfig)
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    controller: ControllerConfig = field(default_factory=ControllerConfig)


ENGINE_CONFIG = EngineConfig()
"""Singleton-style access to the engine configuration."""

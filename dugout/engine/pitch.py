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
"""Zone grid topology: legal ball movement and scoring danger per zone.

The pitch is a ``rows x columns`` grid. Rows run from the West goal (row 1) to
the East goal (last row); columns run from the left wing to the right wing.
The grid itself is orientation neutral. Whether a move is forward or a zone is
dangerous depends on the attacking direction of the team on the ball, which is
why every direction-aware query takes an :class:`AttackingDirection`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Optional, Tuple

from dugout.engine.config import ENGINE_CONFIG, PitchConfig


class AttackingDirection(Enum):
    """End of the grid a team is trying to reach."""

    EAST = "east"  # toward the last row
    WEST = "west"  # toward row 1

    @property
    def opposite(self) -> "AttackingDirection":
        """Return the direction of the other team."""
        return AttackingDirection.WEST if self is AttackingDirection.EAST else AttackingDirection.EAST


class TransitionKind(Enum):
    """Direction-aware classification of a zone transition."""

    FORWARD = "forward"
    LATERAL = "lateral"
    BACKWARD = "backward"


@dataclass(frozen=True, order=True)
class PitchZone:
    """One cell of the pitch grid.

    Parameters
    ----------
    row : int
        Depth band, 1 at the West goal end.
    column : int
        Lane, 1 on the left wing.
    """

    row: int
    column: int


@dataclass(frozen=True)
class ZoneTransition:
    """Directed edge between two neighbouring zones.

    The flags use the fixed row-increasing convention; use
    :meth:`PitchTopology.classify` to interpret them for a team.

    Parameters
    ----------
    source : PitchZone
        Zone the ball leaves.
    target : PitchZone
        Zone the ball arrives in.
    attacking_value : int
        Row delta of the move (positive toward the East end).
    is_forward : bool
        ``True`` when the row increases.
    is_lateral : bool
        ``True`` when the row is unchanged.
    is_backward : bool
        ``True`` when the row decreases.
    """

    source: PitchZone
    target: PitchZone
    attacking_value: int
    is_forward: bool
    is_lateral: bool
    is_backward: bool

    @classmethod
    def between(cls, source: PitchZone, target: PitchZone) -> "ZoneTransition":
        """Build a transition and derive its flags from the row delta.

        Parameters
        ----------
        source : PitchZone
            Zone the ball leaves.
        target : PitchZone
            Zone the ball arrives in.

        Returns
        -------
        ZoneTransition
            Edge tagged with its attacking value and movement flags.
        """
        delta = target.row - source.row
        return cls(
            source=source,
            target=target,
            attacking_value=delta,
            is_forward=delta > 0,
            is_lateral=delta == 0,
            is_backward=delta < 0,
        )

    def reversed(self) -> "ZoneTransition":
        """Return the edge travelling the opposite way.

        Returns
        -------
        ZoneTransition
            Transition from ``target`` back to ``source``.
        """
        return ZoneTransition.between(self.target, self.source)


class PitchTopology:
    """Static directed graph over the zone grid.

    The topology is built once and treated as read-only data; the engine and
    the match share a single instance.

    Parameters
    ----------
    config : PitchConfig | None, optional
        Grid dimensions and threat tables. Defaults to ``ENGINE_CONFIG.pitch``.
    """

    def __init__(self, config: Optional[PitchConfig] = None) -> None:
        """Build every zone and its adjacency list.

        Parameters
        ----------
        config : PitchConfig | None, optional
            Grid dimensions and threat tables. Defaults to ``ENGINE_CONFIG.pitch``.
        """
        self.config = config or ENGINE_CONFIG.pitch
        self.rows = self.config.rows
        self.columns = self.config.columns
        self._zones: Tuple[PitchZone, ...] = tuple(
            PitchZone(row, column) for row in range(1, self.rows + 1) for column in range(1, self.columns + 1)
        )
        self._transitions: Dict[PitchZone, Tuple[ZoneTransition, ...]] = {
            zone: self._build_transitions(zone) for zone in self._zones
        }

    def _build_transitions(self, source: PitchZone) -> Tuple[ZoneTransition, ...]:
        """Collect the king-move neighbours of ``source`` in a stable order.

        Parameters
        ----------
        source : PitchZone
            Zone whose outgoing edges are built.

        Returns
        -------
        Tuple[ZoneTransition, ...]
            Edges ordered by row delta, then column delta.
        """
        edges = []
        for row_delta in (-1, 0, 1):
            for column_delta in (-1, 0, 1):
                if row_delta == 0 and column_delta == 0:
                    continue
                target = PitchZone(source.row + row_delta, source.column + column_delta)
                if self.contains(target):
                    edges.append(ZoneTransition.between(source, target))
        return tuple(edges)

    @property
    def zones(self) -> Tuple[PitchZone, ...]:
        """Every zone on the grid, row by row."""
        return self._zones

    @property
    def centre_column(self) -> float:
        """Column index of the centre lane (fractional on even widths)."""
        return (self.columns + 1) / 2

    def kickoff_zone(self, direction: AttackingDirection = AttackingDirection.EAST) -> PitchZone:
        """Centre-lane zone just inside the kicking team's own half.

        Parameters
        ----------
        direction : AttackingDirection, default=AttackingDirection.EAST
            Attacking direction of the team taking the kick-off.

        Returns
        -------
        PitchZone
            Row ``rows // 2`` counted from the team's own goal, centre lane.
        """
        depth = self.rows // 2
        row = depth if direction is AttackingDirection.EAST else self.rows + 1 - depth
        return PitchZone(row, (self.columns + 1) // 2)

    def contains(self, zone: PitchZone) -> bool:
        """Check whether a zone lies on the grid.

        Parameters
        ----------
        zone : PitchZone
            Zone to test.

        Returns
        -------
        bool
            ``True`` when both coordinates are in range.
        """
        return 1 <= zone.row <= self.rows and 1 <= zone.column <= self.columns

    def zone(self, row: int, column: int) -> PitchZone:
        """Return the zone at a grid coordinate.

        Parameters
        ----------
        row : int
            Depth band, 1 at the West end.
        column : int
            Lane, 1 on the left wing.

        Returns
        -------
        PitchZone
            The zone at ``(row, column)``.

        Raises
        ------
        ValueError
            If the coordinate is off the grid.
        """
        zone = PitchZone(row, column)
        if not self.contains(zone):
            raise ValueError(f"({row}, {column}) is outside the {self.rows}x{self.columns} pitch")
        return zone

    def zone_name(self, zone: PitchZone) -> str:
        """Human-readable label such as ``"West-Mid Centre"``.

        Parameters
        ----------
        zone : PitchZone
            Zone to describe.

        Returns
        -------
        str
            Row name followed by lane name.
        """
        return f"{self.config.row_names[zone.row - 1]} {self.config.lane_names[zone.column - 1]}"

    def valid_transitions(self, zone: PitchZone) -> Tuple[ZoneTransition, ...]:
        """All one-step moves from ``zone``.

        Parameters
        ----------
        zone : PitchZone
            Zone the ball is in.

        Returns
        -------
        Tuple[ZoneTransition, ...]
            Edges to every adjacent zone including diagonals, in a fixed order.
        """
        return self._transitions[zone]

    def classify(self, transition: ZoneTransition, direction: AttackingDirection) -> TransitionKind:
        """Interpret a transition for a team attacking in ``direction``.

        Parameters
        ----------
        transition : ZoneTransition
            Edge to classify.
        direction : AttackingDirection
            Attacking direction of the team moving the ball.

        Returns
        -------
        TransitionKind
            Forward, lateral or backward from that team's point of view.
        """
        if transition.is_lateral:
            return TransitionKind.LATERAL
        towards_east = transition.is_forward
        if (direction is AttackingDirection.EAST) == towards_east:
            return TransitionKind.FORWARD
        return TransitionKind.BACKWARD

    def transitions_of_kind(
        self, zone: PitchZone, direction: AttackingDirection, kind: TransitionKind
    ) -> Tuple[ZoneTransition, ...]:
        """Valid transitions from ``zone`` of a single kind.

        Parameters
        ----------
        zone : PitchZone
            Zone the ball is in.
        direction : AttackingDirection
            Attacking direction of the team on the ball.
        kind : TransitionKind
            Kind to keep.

        Returns
        -------
        Tuple[ZoneTransition, ...]
            Matching edges in transition order.
        """
        return tuple(t for t in self.valid_transitions(zone) if self.classify(t, direction) is kind)

    def distance_to_goal(self, zone: PitchZone, direction: AttackingDirection) -> int:
        """Row distance band between ``zone`` and the goal being attacked.

        Parameters
        ----------
        zone : PitchZone
            Zone to measure from.
        direction : AttackingDirection
            Attacking direction of the team on the ball.

        Returns
        -------
        int
            1 for the row in front of the target goal, up to ``rows`` for the
            row in front of the team's own goal.
        """
        if direction is AttackingDirection.EAST:
            return self.rows + 1 - zone.row
        return zone.row

    def is_goal_row(self, zone: PitchZone, direction: AttackingDirection) -> bool:
        """Return ``True`` when ``zone`` is in the row in front of the target goal.

        Parameters
        ----------
        zone : PitchZone
            Zone to test.
        direction : AttackingDirection
            Attacking direction of the team on the ball.

        Returns
        -------
        bool
            Whether the zone is in the final attacking row.
        """
        return self.distance_to_goal(zone, direction) == 1

    def shot_threat(self, zone: PitchZone, direction: AttackingDirection) -> float:
        """Base goal conversion likelihood for a shot from ``zone``.

        Parameters
        ----------
        zone : PitchZone
            Zone the shot is taken from.
        direction : AttackingDirection
            Attacking direction of the shooting team.

        Returns
        -------
        float
            Threat in ``[0, 1]``: the distance band value scaled by the lane
            modifier.
        """
        base = self.config.threat_by_distance[self.distance_to_goal(zone, direction) - 1]
        return base * self.config.lane_modifiers[zone.column - 1]

    def best_attacking_transition(
        self, zone: PitchZone, direction: AttackingDirection
    ) -> Optional[ZoneTransition]:
        """Most threatening forward move from ``zone``.

        Parameters
        ----------
        zone : PitchZone
            Zone the ball is in.
        direction : AttackingDirection
            Attacking direction of the team on the ball.

        Returns
        -------
        ZoneTransition | None
            The forward edge chosen by :meth:`pick_most_threatening`, or
            ``None`` when the ball is already in the final row.
        """
        forward = self.transitions_of_kind(zone, direction, TransitionKind.FORWARD)
        return self.pick_most_threatening(zone, direction, forward)

    def pick_most_threatening(
        self,
        zone: PitchZone,
        direction: AttackingDirection,
        candidates: Iterable[ZoneTransition],
    ) -> Optional[ZoneTransition]:
        """Choose the candidate whose target has the highest shot threat.

        Ties are broken by staying in the current lane, then the nearest lane,
        then the lane nearest the centre, then transition order.

        Parameters
        ----------
        zone : PitchZone
            Zone the ball is in.
        direction : AttackingDirection
            Attacking direction of the team on the ball.
        candidates : Iterable[ZoneTransition]
            Transitions to choose from.

        Returns
        -------
        ZoneTransition | None
            The preferred transition, or ``None`` when ``candidates`` is empty.
        """
        best: Optional[ZoneTransition] = None
        best_key: Optional[Tuple[float, int, float]] = None
        for transition in candidates:
            column = transition.target.column
            # min() over this key; negated threat puts the most dangerous first
            key = (
                -self.shot_threat(transition.target, direction),
                abs(column - zone.column),
                abs(column - self.centre_column),
            )
            if best_key is None or key < best_key:
                best, best_key = transition, key
        return best

# Path: src/skelthin/neighborhood.py

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np


# 近傍順序 (P2〜P9)、北から時計回り
#
#     P9 P2 P3
#     P8 P1 P4
#     P7 P6 P5
#
# (row offset, col offset)
RING_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (-1, 0),   # P2 north
    (-1, 1),   # P3 north-east
    (0, 1),    # P4 east
    (1, 1),    # P5 south-east
    (1, 0),    # P6 south
    (1, -1),   # P7 south-west
    (0, -1),   # P8 west
    (-1, -1),  # P9 north-west
)


@dataclass(frozen=True)
class Neighborhood:
    """
    Snapshot of the 8 neighbors of one interior pixel, values 0/1.
    Field names follow the usual P2..P9 labelling (see RING_OFFSETS).
    """
    p2: int
    p3: int
    p4: int
    p5: int
    p6: int
    p7: int
    p8: int
    p9: int

    @classmethod
    def from_ring(cls, ring: Sequence[int]) -> "Neighborhood":
        if len(ring) != 8:
            raise ValueError(f"ring must have 8 values, got {len(ring)}")
        return cls(*(1 if int(v) else 0 for v in ring))

    @property
    def ring(self) -> Tuple[int, ...]:
        return (self.p2, self.p3, self.p4, self.p5, self.p6, self.p7, self.p8, self.p9)

    @property
    def neighbor_count(self) -> int:
        """B(P1): foreground neighbors, 0..8."""
        return sum(self.ring)

    @property
    def transition_count(self) -> int:
        """A(P1): 0->1 transitions walking P2..P9 and back to P2, 0..4."""
        r = self.ring
        return sum(1 for i in range(8) if r[i] == 0 and r[(i + 1) % 8] == 1)


def neighbor_planes(x: np.ndarray) -> List[np.ndarray]:
    """
    Shifted views of a 0/1 raster, one per neighbor, each shaped like x[1:-1, 1:-1].
    planes[k][i, j] is neighbor P(k+2) of pixel (i+1, j+1).
    """
    return [
        x[:-2, 1:-1],   # P2
        x[:-2, 2:],     # P3
        x[1:-1, 2:],    # P4
        x[2:, 2:],      # P5
        x[2:, 1:-1],    # P6
        x[2:, :-2],     # P7
        x[1:-1, :-2],   # P8
        x[:-2, :-2],    # P9
    ]


def neighbor_count_plane(planes: Sequence[np.ndarray]) -> np.ndarray:
    B = planes[0].astype(np.uint8, copy=True)
    for k in range(1, 8):
        B += planes[k]
    return B


def transition_count_plane(planes: Sequence[np.ndarray]) -> np.ndarray:
    A = np.zeros(planes[0].shape, dtype=np.uint8)
    for i in range(8):
        A += ((planes[i] == 0) & (planes[(i + 1) % 8] == 1)).astype(np.uint8)
    return A

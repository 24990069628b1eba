from __future__ import annotations

from typing import Tuple

Color = Tuple[int, int, int]

EMPTY = (20, 20, 26)
GHOST = (90, 90, 104)

# Indexed by shape id; the falling piece shows up as a negative id
PALETTE = {
    0: EMPTY,
    1: (0, 200, 255),   # I
    2: (0, 80, 255),    # J
    3: (255, 128, 0),   # L
    4: (255, 213, 0),   # O
    5: (0, 230, 60),    # S
    6: (170, 70, 230),  # T
    7: (255, 0, 0),     # Z
}


def color_for_value(v: int) -> Color:
    return PALETTE.get(abs(v), (200, 200, 200))

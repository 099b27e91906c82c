"""Volume codec: raw attenuation byte <-> normalized 0-60 level.

The DAC stores volume as an attenuation byte; ``255`` is the quietest
setting and ``0`` the loudest. Only the 61 bytes listed in
:data:`VOLUME_TABLE` are understood by the firmware, so lookups are
exact-match in both directions and return ``None`` for anything else.
"""

from __future__ import annotations

MIN_LEVEL = 0
MAX_LEVEL = 60

# (raw byte, normalized level), raw strictly decreasing, level increasing
VOLUME_TABLE: tuple[tuple[int, int], ...] = (
    (255, 0), (200, 1), (180, 2), (170, 3), (160, 4), (150, 5),
    (140, 6), (130, 7), (122, 8), (116, 9), (110, 10), (106, 11),
    (102, 12), (98, 13), (94, 14), (90, 15), (88, 16), (86, 17),
    (84, 18), (82, 19), (80, 20), (78, 21), (76, 22), (74, 23),
    (72, 24), (70, 25), (68, 26), (66, 27), (64, 28), (62, 29),
    (60, 30), (58, 31), (56, 32), (54, 33), (52, 34), (50, 35),
    (48, 36), (46, 37), (44, 38), (42, 39), (40, 40), (38, 41),
    (36, 42), (34, 43), (32, 44), (30, 45), (28, 46), (26, 47),
    (24, 48), (22, 49), (20, 50), (18, 51), (16, 52), (14, 53),
    (12, 54), (10, 55), (8, 56), (6, 57), (4, 58), (2, 59),
    (0, 60),
)


def to_normal(raw: int) -> int | None:
    """Map a raw volume byte to its 0-60 level, or ``None`` if not in the table."""
    for table_raw, level in VOLUME_TABLE:
        if table_raw == raw:
            return level
    return None


def to_raw(level: int) -> int | None:
    """Map a 0-60 level to the raw byte the device expects, or ``None``."""
    for raw, table_level in VOLUME_TABLE:
        if table_level == level:
            return raw
    return None

"""
Per-level profile QC flag bits.
"""

from __future__ import annotations

import enum


class ProfileFlags(enum.IntFlag):
    """
    Bit field attached to every level of a profile.

    Flags are combined with bitwise operators and stored in integer arrays:

    >>> flags = ProfileFlags.STANDARD_LEVEL | ProfileFlags.INTERPOLATION
    >>> bool(flags & ProfileFlags.INTERPOLATION)
    True
    >>> int(flags)
    12
    """

    NONE = 0
    FINAL_REJECT = 1 << 0  #: Rejected by an earlier check.
    SURFACE_LEVEL = 1 << 1  #: Surface report.
    STANDARD_LEVEL = 1 << 2  #: Reported as a standard level.
    INTERPOLATION = 1 << 3  #: Failed the interpolation check.

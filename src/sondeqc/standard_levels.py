"""
Classification of profile levels into standard and significant levels.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

import attrs
import numpy as np

from .flags import ProfileFlags
from .names import MISSING_VALUE_FLOAT
from .units import round_to_hpa


def _int_array(value) -> np.ndarray:
    return np.asarray(value, dtype=np.int64)


def _float_array(value) -> np.ndarray:
    return np.asarray(value, dtype=np.float64)


@attrs.define(frozen=True, eq=False)
class Classification:
    """
    Standard/significant level classification of a profile.

    All arrays have one entry per level. Index arrays use -1 for "none".

    Parameters
    ----------
    num_std : int
        Number of standard levels.

    num_sig : int
        Number of significant levels.

    std_lev : ndarray
        The first ``num_std`` entries are the profile indices of the standard
        levels.

    sig_above : ndarray
        Index of the nearest significant level above each standard level.

    sig_below : ndarray
        Index of the nearest significant level below each standard level.

    ind_std : ndarray
        Position of each level in ``std_lev``, or -1 for other levels.

    log_p : ndarray
        Natural logarithm of the pressure at each classified level;
        :data:`~sondeqc.names.MISSING_VALUE_FLOAT` elsewhere.
    """

    num_std: int = attrs.field(converter=int)
    num_sig: int = attrs.field(converter=int)
    std_lev: np.ndarray = attrs.field(converter=_int_array)
    sig_above: np.ndarray = attrs.field(converter=_int_array)
    sig_below: np.ndarray = attrs.field(converter=_int_array)
    ind_std: np.ndarray = attrs.field(converter=_int_array)
    log_p: np.ndarray = attrs.field(converter=_float_array)

    @classmethod
    def from_brackets(
        cls,
        pressures,
        std_lev,
        sig_below,
        sig_above,
        num_sig: int,
    ) -> Classification:
        """
        Build a classification from explicit standard levels and brackets.

        Arrays are padded with -1 to the number of levels; ``log_p`` is
        computed from ``pressures``.

        Examples
        --------
        >>> c = Classification.from_brackets(
        ...     [100000.0, 85000.0, 70000.0], [1], [0], [2], num_sig=2
        ... )
        >>> c.std_lev, c.ind_std
        (array([ 1, -1, -1]), array([-1,  0, -1]))
        """
        pressures = _float_array(pressures)
        n = pressures.size
        std_lev = _int_array(std_lev)
        num_std = std_lev.size

        def padded(values):
            out = np.full(n, -1, dtype=np.int64)
            out[:num_std] = values
            return out

        ind_std = np.full(n, -1, dtype=np.int64)
        ind_std[std_lev] = np.arange(num_std)

        return cls(
            num_std=num_std,
            num_sig=num_sig,
            std_lev=padded(std_lev),
            sig_above=padded(_int_array(sig_above)),
            sig_below=padded(_int_array(sig_below)),
            ind_std=ind_std,
            log_p=_log_pressure(pressures),
        )


def _log_pressure(pressures: np.ndarray) -> np.ndarray:
    log_p = np.full(pressures.shape, MISSING_VALUE_FLOAT, dtype=np.float64)
    positive = pressures > 0.0
    log_p[positive] = np.log(pressures[positive])
    return log_p


def is_missing(values) -> np.ndarray:
    """Mask of missing values (NaN or missing value sentinel)."""
    values = np.asarray(values, dtype=np.float64)
    # float32 copies of the sentinel are not exactly equal to it
    return np.isnan(values) | np.isclose(
        values, MISSING_VALUE_FLOAT, rtol=1e-6, atol=0.0
    )


@runtime_checkable
class ClassifierProtocol(Protocol):
    """Interface of level classifiers accepted by the interpolation check."""

    def classify(self, pressures, values, flags) -> Classification: ...


@attrs.define
class StandardLevelClassifier:
    """
    Default level classifier.

    Levels are visited in profile order. Levels with a missing value, a
    non-positive pressure or the
    :attr:`~sondeqc.flags.ProfileFlags.FINAL_REJECT` flag are ignored. A
    remaining level is standard if it carries the
    :attr:`~sondeqc.flags.ProfileFlags.STANDARD_LEVEL` flag or if its
    pressure, rounded to the nearest hPa, is one of ``standard_pressures``;
    it is significant otherwise.

    Each standard level is bracketed by the last significant level met
    before it (below, higher pressure) and the first one met after it
    (above, lower pressure).

    Parameters
    ----------
    standard_pressures : sequence of int
        Standard pressures (hPa).
    """

    standard_pressures: frozenset[int] = attrs.field(converter=frozenset)

    @classmethod
    def from_config(cls, config) -> StandardLevelClassifier:
        return cls(standard_pressures=config.standard_pressures)

    def classify(self, pressures, values, flags) -> Classification:
        pressures = _float_array(pressures)
        flags = _int_array(flags)
        n = pressures.size

        std_lev = np.full(n, -1, dtype=np.int64)
        sig_above = np.full(n, -1, dtype=np.int64)
        sig_below = np.full(n, -1, dtype=np.int64)
        ind_std = np.full(n, -1, dtype=np.int64)
        log_p = _log_pressure(pressures)

        usable = (
            ~is_missing(values)
            & (pressures > 0.0)
            & ((flags & int(ProfileFlags.FINAL_REJECT)) == 0)
        )
        standard = ((flags & int(ProfileFlags.STANDARD_LEVEL)) != 0) | np.isin(
            round_to_hpa(np.where(np.isfinite(pressures), pressures, 0.0)),
            list(self.standard_pressures),
        )

        num_std = 0
        num_sig = 0
        sig_prev = -1
        first_open = 0  # First standard level still waiting for its upper bracket
        for jlev in range(n):
            if not usable[jlev]:
                continue
            if standard[jlev]:
                std_lev[num_std] = jlev
                sig_below[num_std] = sig_prev
                ind_std[jlev] = num_std
                num_std += 1
            else:
                num_sig += 1
                sig_prev = jlev
                sig_above[first_open:num_std] = jlev
                first_open = num_std

        log_p[~usable] = MISSING_VALUE_FLOAT

        return Classification(
            num_std=num_std,
            num_sig=num_sig,
            std_lev=std_lev,
            sig_above=sig_above,
            sig_below=sig_below,
            ind_std=ind_std,
            log_p=log_p,
        )

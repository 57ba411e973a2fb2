"""
Configuration of the interpolation check.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

import attrs

from .error import ConfigurationError
from .units import magnitude_in, round_to_hpa

#: Default (band, gap) table in hPa, ordered by decreasing band pressure.
#: The gap is reduced to 50 hPa for standard levels at 150 hPa and above.
DEFAULT_BIG_GAPS: tuple[tuple[int, int], ...] = (
    (1000, 250),
    (925, 250),
    (850, 250),
    (700, 250),
    (500, 200),
    (400, 200),
    (300, 200),
    (250, 100),
    (200, 100),
    (150, 50),
    (100, 50),
    (70, 50),
    (50, 50),
    (30, 50),
    (20, 50),
    (10, 50),
)

#: Default standard pressures (hPa).
DEFAULT_STANDARD_PRESSURES: tuple[int, ...] = tuple(
    band for band, _ in DEFAULT_BIG_GAPS
)


def _to_pa(value) -> float:
    return magnitude_in(value, "Pa")


def _to_kelvin(value) -> float:
    return magnitude_in(value, "K")


def _convert_big_gaps(value) -> tuple[tuple[int, int], ...]:
    """
    Convert a band table to a tuple of ``(band_hPa, gap_hPa)`` pairs.

    A mapping ``{band: gap}`` is accepted and read in insertion order.
    """
    if isinstance(value, Mapping):
        value = value.items()
    try:
        return tuple((int(band), int(gap)) for band, gap in value)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(
            f"big gap table must be a sequence of (band, gap) pairs (got {value!r})"
        ) from e


def _validate_big_gaps(instance, attribute, value):
    bands = [band for band, _ in value]
    if any(upper <= lower for upper, lower in zip(bands, bands[1:])):
        raise ConfigurationError(
            f"'{attribute.name}' bands must be strictly decreasing in pressure "
            f"(got {bands})"
        )
    if any(gap <= 0 for _, gap in value):
        raise ConfigurationError(f"'{attribute.name}' gaps must be positive")


def _validate_positive(instance, attribute, value):
    if not value > 0.0:
        raise ConfigurationError(
            f"'{attribute.name}' must be positive (got {value!r})"
        )


@attrs.define(frozen=True)
class InterpolationCheckConfig:
    """
    Interpolation check configuration.

    Parameters
    ----------
    t_interp_tol : float or quantity, default: 2.0 K
        Maximum allowed difference between the observed and interpolated
        temperature. Plain numbers are interpreted in K.

    tol_relax_p_thresh : float or quantity, default: 30000.0 Pa
        Pressure below which the tolerance is multiplied by ``tol_relax``.
        Plain numbers are interpreted in Pa.

    tol_relax : float, default: 1.0
        Tolerance relaxation factor for upper-air levels.

    big_gap_init : float or quantity, default: 1000.0 Pa
        Maximum bracket distance used when no band of ``big_gaps`` applies.
        Plain numbers are interpreted in Pa.

    big_gaps : sequence of (int, int)
        Table of ``(band, gap)`` pairs in hPa. Band pressures must be strictly
        decreasing; this is checked upon construction.

    standard_pressures : sequence of int
        Pressures (hPa) identifying standard levels during classification.
    """

    t_interp_tol: float = attrs.field(
        default=2.0, converter=_to_kelvin, validator=_validate_positive
    )
    tol_relax_p_thresh: float = attrs.field(default=30000.0, converter=_to_pa)
    tol_relax: float = attrs.field(
        default=1.0, converter=float, validator=_validate_positive
    )
    big_gap_init: float = attrs.field(
        default=1000.0, converter=_to_pa, validator=_validate_positive
    )
    big_gaps: tuple[tuple[int, int], ...] = attrs.field(
        default=DEFAULT_BIG_GAPS,
        converter=_convert_big_gaps,
        validator=_validate_big_gaps,
    )
    standard_pressures: tuple[int, ...] = attrs.field(
        default=DEFAULT_STANDARD_PRESSURES,
        converter=lambda x: tuple(int(p) for p in x),
    )

    @classmethod
    def convert(cls, value):
        """
        Convert a value to an :class:`.InterpolationCheckConfig`.

        Parameters
        ----------
        value
            Value to convert. ``None`` yields the default configuration;
            dictionaries are passed to :meth:`from_dict`.

        Returns
        -------
        InterpolationCheckConfig
        """
        if value is None:
            return cls()
        if isinstance(value, Mapping):
            return cls.from_dict(value)
        return value

    @classmethod
    def from_dict(cls, d: Mapping) -> InterpolationCheckConfig:
        """
        Build a configuration from a dictionary.

        Unknown keys raise a :class:`.ConfigurationError`.

        Examples
        --------
        >>> config = InterpolationCheckConfig.from_dict(
        ...     {"t_interp_tol": 3.0, "big_gaps": {500: 200, 100: 50}}
        ... )
        >>> config.big_gaps
        ((500, 200), (100, 50))
        """
        known = {field.name for field in attrs.fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ConfigurationError(
                f"unknown interpolation check option(s): {sorted(unknown)}"
            )
        return cls(**d)


def select_big_gap(
    pressure: float,
    big_gaps: Sequence[tuple[int, int]],
    big_gap_init: float,
) -> float:
    """
    Select the maximum allowed bracket distance for a level.

    The pressure is rounded to the nearest hPa, then the table is scanned in
    order: the first band whose pressure is at or below the rounded level
    pressure provides the gap. If no band applies, ``big_gap_init`` is used.

    Parameters
    ----------
    pressure : float
        Level pressure (Pa).

    big_gaps : sequence of (int, int)
        Table of ``(band, gap)`` pairs in hPa, by decreasing band pressure.

    big_gap_init : float
        Fallback gap (Pa).

    Returns
    -------
    float
        Gap in Pa.

    Examples
    --------
    >>> table = ((500, 200), (150, 50))
    >>> select_big_gap(70000.0, table, 1000.0)
    20000.0
    >>> select_big_gap(15000.0, table, 1000.0)
    5000.0
    >>> select_big_gap(1000.0, table, 1000.0)
    1000.0
    """
    ipstd = round_to_hpa(pressure)
    for band, gap in big_gaps:
        if band <= ipstd:
            return gap * 100.0  # hPa -> Pa
    return big_gap_init


def tolerance_relaxation(pressure: float, config: InterpolationCheckConfig) -> float:
    """
    Tolerance multiplier for a level at ``pressure`` (Pa).
    """
    if pressure < config.tol_relax_p_thresh:
        return config.tol_relax
    return 1.0

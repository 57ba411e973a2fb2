"""
Unit handling components, based on the `Pint <https://github.com/hgrecco/pint>`__
library.

.. note::
    By default,
    `Pint's application registry <https://pint.readthedocs.io/en/stable/getting/pint-in-your-projects.html#having-a-shared-registry>`__
    is used.
"""

from __future__ import annotations

from typing import Any

import numpy as np
import pint
import xarray as xr

# Internal unit registry. If None, use application registry
_ureg: pint.UnitRegistry | None = None


def set_unit_registry(ureg: pint.UnitRegistry | None) -> None:
    """
    Set internal unit registry.

    Parameters
    ----------
    ureg : pint.UnitRegistry or None
        New default unit registry. ``None`` restores the application registry.
    """
    global _ureg
    _ureg = ureg


def get_unit_registry() -> pint.UnitRegistry:
    """
    Access the internal unit registry. By default, the Pint application registry
    is returned.
    """
    global _ureg
    return _ureg if _ureg is not None else pint.get_application_registry()


def ensure_units(
    value: Any, default_units: pint.Unit | str, convert: bool = False
) -> pint.Quantity:
    """
    Ensure that a value is wrapped in a Pint quantity container.

    Parameters
    ----------
    value
        Checked value.

    default_units : pint.Unit or str
        Units to use to initialize the :class:`pint.Quantity` if ``value`` is
        not a :class:`pint.Quantity`.

    convert : bool, default: False
        If ``True``, ``value`` will also be converted to ``default_units`` if it
        is a :class:`pint.Quantity`.

    Returns
    -------
    Converted ``value``.
    """
    ureg = get_unit_registry()
    if isinstance(value, pint.Quantity):
        if convert:
            return value.to(default_units)
        else:
            return value
    else:
        return ureg.Quantity(value, default_units)


def magnitude_in(value: Any, units: str) -> float:
    """
    Return the magnitude of ``value`` expressed in ``units``. Plain numbers
    are assumed to already be in ``units``.

    >>> magnitude_in(850.0, "Pa")
    850.0
    >>> round(magnitude_in(get_unit_registry().Quantity(850.0, "hPa"), "Pa"), 6)
    85000.0
    """
    return float(ensure_units(value, units, convert=True).m_as(units))


def xarray_to_quantity(da: xr.DataArray) -> pint.Quantity:
    """
    Converts a :class:`~xarray.DataArray` to a :class:`~pint.Quantity`.
    The array's ``attrs`` metadata mapping must contain a ``units`` field.

    Parameters
    ----------
    da : DataArray
        :class:`~xarray.DataArray` instance which will be converted.

    Returns
    -------
    quantity
        The corresponding Pint quantity.

    Raises
    ------
    ValueError
        If array attributes do not contain a ``units`` field.
    """
    try:
        units = da.attrs["units"]
    except KeyError as e:
        raise ValueError("this DataArray has no 'units' attribute field") from e

    ureg = get_unit_registry()
    return ureg.Quantity(da.values, units)


def round_to_hpa(pressure: float | np.ndarray) -> int | np.ndarray:
    """
    Convert a pressure in Pa to the nearest whole hPa. Halves are rounded away
    from zero.

    >>> round_to_hpa(84950.0)
    850
    >>> round_to_hpa(np.array([100000.0, 70049.0]))
    array([1000,  700])
    """
    hpa = np.asarray(pressure, dtype=np.float64) * 0.01
    rounded = (np.sign(hpa) * np.floor(np.abs(hpa) + 0.5)).astype(np.int64)
    return int(rounded) if rounded.ndim == 0 else rounded


def to_celsius(temperature: float | np.ndarray) -> float | np.ndarray:
    """
    Convert a temperature in K to degrees Celsius.
    """
    ureg = get_unit_registry()
    return ureg.Quantity(temperature, ureg.kelvin).to(ureg.degC).magnitude

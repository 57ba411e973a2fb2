"""
Key/value store holding the data of a single profile.
"""

from __future__ import annotations

from collections.abc import Iterable

import attrs
import numpy as np
import xarray as xr

from .names import VariableNames
from .units import xarray_to_quantity


def _convert_data(value) -> dict[str, np.ndarray]:
    return {str(k): np.asarray(v) for k, v in dict(value).items()}


@attrs.define
class ProfileDataHandler:
    """
    Profile data store.

    Variables are one-dimensional arrays addressed by name (see
    :class:`~sondeqc.names.VariableNames`). Arrays returned by :meth:`get` are
    the stored arrays themselves: checks update flags and counters in place.

    Parameters
    ----------
    data : dict, optional
        Initial variables. Values are converted to numpy arrays.
    """

    _data: dict[str, np.ndarray] = attrs.field(
        factory=dict, converter=_convert_data, repr=lambda x: f"<{len(x)} variables>"
    )

    def __contains__(self, name: str) -> bool:
        return name in self._data

    def keys(self):
        return self._data.keys()

    def get(self, name: str, dtype=np.float64) -> np.ndarray:
        """
        Access a stored variable.

        If ``name`` is not stored, an empty array of type ``dtype`` is
        returned; the store itself is left untouched.
        """
        try:
            return self._data[name]
        except KeyError:
            return np.empty(0, dtype=dtype)

    def set(self, name: str, values) -> None:
        """
        Store ``values`` under ``name``, replacing any previous variable.
        """
        self._data[name] = np.asarray(values)

    def counter(self, name: str) -> np.ndarray:
        """
        Access a counter, stored as a one-element integer array. Counters are
        created with value 0 on first access.
        """
        if name not in self._data or self._data[name].size == 0:
            self._data[name] = np.zeros(1, dtype=np.int64)
        return self._data[name]

    @property
    def counters(self) -> dict[str, int]:
        """Values of all stored counters."""
        return {
            name: int(self._data[name][0])
            for name in VariableNames.counters()
            if name in self._data and self._data[name].size > 0
        }

    @property
    def num_levels(self) -> int:
        """Number of levels, taken from the pressure variable."""
        return self.get(VariableNames.air_pressure).size

    @classmethod
    def from_dataset(cls, ds: xr.Dataset) -> ProfileDataHandler:
        """
        Build a profile from an :class:`xarray.Dataset`.

        Data variables are copied. If the pressure variable carries a
        ``units`` attribute, it is converted to Pa. QC flags are cast to
        integers.
        """
        data = {}
        for name, da in ds.data_vars.items():
            if name == VariableNames.air_pressure and "units" in da.attrs:
                values = xarray_to_quantity(da).m_as("Pa")
            else:
                values = da.values
            data[str(name)] = np.array(values, ndmin=1)

        if VariableNames.qc_t_flags in data:
            data[VariableNames.qc_t_flags] = data[VariableNames.qc_t_flags].astype(
                np.int64
            )

        return cls(data)

    def to_dataset(self) -> xr.Dataset:
        """
        Export the profile to an :class:`xarray.Dataset`.

        Level-length arrays are laid out along the ``level`` dimension,
        counters become scalar variables and other arrays get their own
        dimension.
        """
        num_levels = self.num_levels
        counters = set(VariableNames.counters())
        data_vars = {}
        for name, values in self._data.items():
            if name in counters:
                data_vars[name] = ((), int(values[0]) if values.size else 0)
            elif values.ndim == 1 and values.size == num_levels:
                data_vars[name] = (("level",), values)
            else:
                data_vars[name] = ((f"{name}_dim",), values.ravel())

        ds = xr.Dataset(data_vars, coords={"level": np.arange(num_levels)})
        if VariableNames.air_pressure in ds:
            ds[VariableNames.air_pressure].attrs["units"] = "Pa"
        return ds


def aggregate_counters(profiles: Iterable[ProfileDataHandler]) -> dict[str, int]:
    """
    Sum counters over several profiles.

    Counters are profile-scoped; this is meant to be called once all
    per-profile checks have returned.
    """
    totals = {name: 0 for name in VariableNames.counters()}
    for profile in profiles:
        for name, value in profile.counters.items():
            totals[name] += value
    return totals

import numpy as np
import pytest

from ..data import ProfileDataHandler
from ..error import set_error_handling_config
from ..flags import ProfileFlags
from ..names import VariableNames

#: Pressures (Pa) of a short profile reporting standard levels only
STANDARD_PRESSURES = np.array([100000.0, 85000.0, 70000.0, 50000.0, 30000.0])


def make_profile(pressures, t_obs, flags=None, t_bkg=None, correction=None):
    """
    Build a profile data handler from plain sequences.

    Background temperatures default to the observed ones, flags and
    corrections to zero.
    """
    pressures = np.asarray(pressures, dtype=np.float64)
    t_obs = np.asarray(t_obs, dtype=np.float64)
    n = pressures.size
    return ProfileDataHandler(
        {
            VariableNames.air_pressure: pressures,
            VariableNames.obs_air_temperature: t_obs,
            VariableNames.hofx_air_temperature: (
                t_obs.copy() if t_bkg is None else np.asarray(t_bkg, dtype=np.float64)
            ),
            VariableNames.qc_t_flags: (
                np.zeros(n, dtype=np.int64)
                if flags is None
                else np.asarray(flags, dtype=np.int64)
            ),
            VariableNames.t_obs_correction: (
                np.zeros(n) if correction is None else np.asarray(correction)
            ),
        }
    )


def lapse_rate_temperature(pressures, t_surface=288.0, slope=30.0):
    """
    Temperature varying linearly with log-pressure: ``t_surface`` at 1000 hPa,
    decreasing by ``slope`` K per unit of ``ln(1000 hPa / p)``.
    """
    return t_surface - slope * np.log(100000.0 / np.asarray(pressures))


@pytest.fixture(autouse=True)
def reset_error_handling_config():
    """
    Restore the default error handling configuration after each test.
    """
    yield
    set_error_handling_config(None)


@pytest.fixture
def sounding():
    """
    Mixed profile: standard levels (1000, 850, 700, 500, 300 hPa) alternating
    with significant levels (1010 hPa surface, 920, 780, 600, 420, 270 hPa),
    temperature linear in log-pressure.
    """
    pressures = np.array(
        [
            101000.0,  # surface
            100000.0,
            92000.0,
            85000.0,
            78000.0,
            70000.0,
            60000.0,
            50000.0,
            42000.0,
            30000.0,
            27000.0,
        ]
    )
    flags = np.zeros(pressures.size, dtype=np.int64)
    flags[0] = ProfileFlags.SURFACE_LEVEL
    return make_profile(pressures, lapse_rate_temperature(pressures), flags=flags)

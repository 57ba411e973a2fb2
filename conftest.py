import numpy
import pytest
import xarray

import sondeqc
from sondeqc.testing.fixtures import *  # noqa: F403


@pytest.fixture(autouse=True)
def add_np(doctest_namespace):
    doctest_namespace["np"] = numpy
    doctest_namespace["xr"] = xarray
    doctest_namespace["sondeqc"] = sondeqc
    doctest_namespace["InterpolationCheck"] = sondeqc.InterpolationCheck
    doctest_namespace["ProfileDataHandler"] = sondeqc.ProfileDataHandler

from .config import InterpolationCheckConfig
from .data import ProfileDataHandler, aggregate_counters
from .error import (
    ConfigurationError,
    DataError,
    DataWarning,
    ErrorHandlingAction,
    ErrorHandlingConfiguration,
    get_error_handling_config,
    set_error_handling_config,
)
from .flags import ProfileFlags
from .interpolation import InterpolationCheck, InterpolationResult
from .names import MISSING_VALUE_FLOAT, VariableNames
from .standard_levels import Classification, StandardLevelClassifier
from ._factory import ProfileCheckFactory
from ._version import version as __version__

#: Default check factory
check_factory = ProfileCheckFactory()
check_factory.register(InterpolationCheck.name, InterpolationCheck)

__all__ = [
    "Classification",
    "ConfigurationError",
    "DataError",
    "DataWarning",
    "ErrorHandlingAction",
    "ErrorHandlingConfiguration",
    "InterpolationCheck",
    "InterpolationCheckConfig",
    "InterpolationResult",
    "MISSING_VALUE_FLOAT",
    "ProfileCheckFactory",
    "ProfileDataHandler",
    "ProfileFlags",
    "StandardLevelClassifier",
    "VariableNames",
    "aggregate_counters",
    "check_factory",
    "get_error_handling_config",
    "set_error_handling_config",
    "__version__",
]

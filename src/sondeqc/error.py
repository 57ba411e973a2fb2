from __future__ import annotations

import enum
import warnings
from collections.abc import Mapping

import attrs

# ------------------------------------------------------------------------------
#                                   Exceptions
# ------------------------------------------------------------------------------


class DataError(Exception):
    """Raised when encountering issues with profile data."""

    pass


class ConfigurationError(ValueError):
    """Raised when a check configuration is invalid."""

    pass


class DataWarning(UserWarning):
    """Emitted when profile data issues are reported instead of raised."""

    pass


# ------------------------------------------------------------------------------
#                           Error handling components
# ------------------------------------------------------------------------------


class ErrorHandlingAction(enum.Enum):
    """
    Error handling action descriptors.
    """

    IGNORE = "ignore"  #: Ignore the error.
    RAISE = "raise"  #: Raise the error.
    WARN = "warn"  #: Emit a warning.

    @classmethod
    def convert(cls, value):
        """
        Convert a string to an :class:`.ErrorHandlingAction`. Other values are
        returned unchanged.

        >>> ErrorHandlingAction.convert("warn")
        <ErrorHandlingAction.WARN: 'warn'>
        """
        if isinstance(value, str):
            return cls(value.lower())
        return value


@attrs.define
class ErrorHandlingConfiguration:
    """
    Error handling configuration for profile input validation.

    Parameters
    ----------
    empty : ErrorHandlingAction, default: WARN
        Action when at least one of the input arrays is empty.

    size_mismatch : ErrorHandlingAction, default: WARN
        Action when input arrays do not all have the same size.

    Notes
    -----
    Whatever the action, a profile failing validation is not checked. With
    ``RAISE``, the :class:`.DataError` propagates to the caller.
    """

    empty: ErrorHandlingAction = attrs.field(
        default=ErrorHandlingAction.WARN,
        converter=ErrorHandlingAction.convert,
        validator=attrs.validators.instance_of(ErrorHandlingAction),
        repr=lambda x: f"<{x.name}>",
    )
    size_mismatch: ErrorHandlingAction = attrs.field(
        default=ErrorHandlingAction.WARN,
        converter=ErrorHandlingAction.convert,
        validator=attrs.validators.instance_of(ErrorHandlingAction),
        repr=lambda x: f"<{x.name}>",
    )

    @classmethod
    def convert(cls, value):
        """
        Convert a value to an :class:`.ErrorHandlingConfiguration`.

        Parameters
        ----------
        value
            Value to convert. Dictionaries values are passed as keyword arguments
            to the constructor.

        Returns
        -------
        ErrorHandlingConfiguration

        Examples
        --------
        >>> ErrorHandlingConfiguration.convert({"empty": "raise"})
        ErrorHandlingConfiguration(empty=<RAISE>, size_mismatch=<WARN>)
        """
        if isinstance(value, Mapping):
            return cls(**value)
        else:
            return value


def handle_error(error: DataError, action: ErrorHandlingAction):
    """
    Apply an error handling policy.

    Parameters
    ----------
    error : .DataError
        The error that is handled.

    action : ErrorHandlingAction
        If ``IGNORE``, do nothing; if ``WARN``, emit a :class:`.DataWarning`;
        if ``RAISE``, raise the error.
    """
    if action is ErrorHandlingAction.IGNORE:
        return

    if action is ErrorHandlingAction.WARN:
        warnings.warn(str(error), DataWarning, stacklevel=3)
        return

    if action is ErrorHandlingAction.RAISE:
        raise error

    raise NotImplementedError


#: Global default error handling configuration
_DEFAULT_ERROR_HANDLING_CONFIG: ErrorHandlingConfiguration | None = None


def set_error_handling_config(
    value: Mapping | ErrorHandlingConfiguration | None,
) -> None:
    """
    Set the global default error handling configuration.

    Parameters
    ----------
    value : Mapping | ErrorHandlingConfiguration | None
        Error handling configuration. ``None`` restores the default.

    Raises
    ------
    ValueError
        If ``value`` cannot be converted to an :class:`.ErrorHandlingConfiguration`.
    """
    global _DEFAULT_ERROR_HANDLING_CONFIG
    if value is None:
        _DEFAULT_ERROR_HANDLING_CONFIG = None
        return
    value = ErrorHandlingConfiguration.convert(value)
    if not isinstance(value, ErrorHandlingConfiguration):
        raise ValueError("could not convert value to ErrorHandlingConfiguration")
    _DEFAULT_ERROR_HANDLING_CONFIG = value


def get_error_handling_config() -> ErrorHandlingConfiguration:
    """
    Retrieve the current global default error handling configuration.

    Returns
    -------
    ErrorHandlingConfiguration
    """
    global _DEFAULT_ERROR_HANDLING_CONFIG
    if _DEFAULT_ERROR_HANDLING_CONFIG is None:  # No config yet: assign a default
        # Malformed profiles are reported and skipped, the batch carries on.
        set_error_handling_config({"empty": "warn", "size_mismatch": "warn"})

    return _DEFAULT_ERROR_HANDLING_CONFIG

"""
Interpolation check of radiosonde temperature profiles.

The temperature reported at each standard level is compared with the value
obtained by interpolating linearly in log-pressure between the nearest
significant levels below and above it (see section 6.3.2.2 of the Guide on
the Global Data-Processing System). When the difference exceeds the
tolerance, the standard level and both bracket levels are flagged.

All arithmetic (log-pressure, interpolation, residual) is carried out in
double precision, whatever the input type. Single precision inputs are
upcast first, so residuals within single precision rounding of the
tolerance may be classified differently from a single precision
implementation.
"""

from __future__ import annotations

import logging
from typing import ClassVar

import attrs
import numpy as np

from .config import InterpolationCheckConfig, select_big_gap, tolerance_relaxation
from .data import ProfileDataHandler
from .error import (
    DataError,
    ErrorHandlingConfiguration,
    get_error_handling_config,
    handle_error,
)
from .flags import ProfileFlags
from .math import interp_log_pressure
from .names import MISSING_VALUE_FLOAT, VariableNames
from .standard_levels import (
    Classification,
    ClassifierProtocol,
    StandardLevelClassifier,
)
from .units import to_celsius

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------------------
#                               Preprocessing
# ------------------------------------------------------------------------------


def validate_inputs(
    *arrays: np.ndarray,
    error_handling_config: ErrorHandlingConfiguration | None = None,
) -> bool:
    """
    Check that input arrays are all non-empty and of the same size.

    Parameters
    ----------
    *arrays : ndarray
        Per-level input arrays.

    error_handling_config : ErrorHandlingConfiguration, optional
        Actions taken upon failure. Defaults to the global configuration.

    Returns
    -------
    bool
        ``True`` if the arrays can be checked.

    Raises
    ------
    DataError
        If validation fails and the configured action is ``RAISE``.
    """
    if error_handling_config is None:
        error_handling_config = get_error_handling_config()

    if any(len(array) == 0 for array in arrays):
        handle_error(
            DataError("At least one vector is empty. Check will not be performed."),
            error_handling_config.empty,
        )
        return False

    if len({len(array) for array in arrays}) > 1:
        handle_error(
            DataError(
                "Not all vectors have the same size. Check will not be performed."
            ),
            error_handling_config.size_mismatch,
        )
        return False

    return True


def correct_vector(values: np.ndarray, correction: np.ndarray) -> np.ndarray:
    """
    Apply an additive correction to observed values.

    >>> correct_vector([280.0, 270.0], [0.5, -0.25])
    array([280.5 , 269.75])
    """
    return np.asarray(values, dtype=np.float64) + np.asarray(
        correction, dtype=np.float64
    )


# ------------------------------------------------------------------------------
#                               Decision loop
# ------------------------------------------------------------------------------


@attrs.define(frozen=True, eq=False)
class InterpolationResult:
    """
    Outcome of the interpolation check on one profile.

    Parameters
    ----------
    classification : Classification
        Level classification the check was run with.

    lev_errors : ndarray
        Per-level number of failed triples the level belongs to, starting
        from -1 (not evaluated).

    t_interp : ndarray
        Interpolated temperature at evaluated standard levels,
        :data:`~sondeqc.names.MISSING_VALUE_FLOAT` elsewhere.

    num_errors : int
        Number of standard levels which failed the check.
    """

    classification: Classification
    lev_errors: np.ndarray
    t_interp: np.ndarray
    num_errors: int = 0


def _log_failure(jlev, sig_b, sig_a, pressures, t_obs_final, t_bkg, t_interp):
    logger.debug(
        " -> Failed interpolation check for levels %d (central), "
        "%d (lower) and %d (upper)",
        jlev,
        sig_b,
        sig_a,
    )
    logger.debug(
        " -> Level %d: P = %ghPa, tObs = %gC, tBkg = %gC, tInterp = %gC, "
        "tInterp - tObs = %g",
        jlev,
        pressures[jlev] * 0.01,
        to_celsius(t_obs_final[jlev]),
        to_celsius(t_bkg[jlev]),
        to_celsius(t_interp[jlev]),
        t_interp[jlev] - t_obs_final[jlev],
    )
    for lev in (sig_b, sig_a):
        logger.debug(
            " -> Level %d: P = %ghPa, tObs = %gC, tBkg = %gC",
            lev,
            pressures[lev] * 0.01,
            to_celsius(t_obs_final[lev]),
            to_celsius(t_bkg[lev]),
        )


def check_standard_levels(
    pressures: np.ndarray,
    t_obs_final: np.ndarray,
    t_bkg: np.ndarray,
    t_flags: np.ndarray,
    classification: Classification,
    config: InterpolationCheckConfig,
    num_any_errors: np.ndarray | None = None,
    num_interp_errors: np.ndarray | None = None,
    num_interp_err_obs: np.ndarray | None = None,
) -> InterpolationResult:
    """
    Run the interpolation test on every standard level of a profile.

    A standard level is skipped when it is a surface level, when the profile
    has fewer than ``max(3, num_std // 2)`` significant levels, when either
    bracket is missing, when a bracket is further than the big gap for that
    level or when both brackets have the same log-pressure. Otherwise, the
    level fails if its temperature differs from the interpolated one by more
    than the (possibly relaxed) tolerance.

    Parameters
    ----------
    pressures : ndarray
        Pressure (Pa).

    t_obs_final : ndarray
        Corrected observed temperature (K).

    t_bkg : ndarray
        Background temperature (K), used for diagnostics only.

    t_flags : ndarray
        Integer QC flags, updated in place.

    classification : Classification
        Level classification of the profile.

    config : InterpolationCheckConfig
        Check configuration.

    num_any_errors, num_interp_errors, num_interp_err_obs : ndarray, optional
        One-element counters, incremented in place. The first two count
        failed standard levels; the last one is incremented once if any level
        failed.

    Returns
    -------
    InterpolationResult
    """
    num_levels = len(pressures)
    num_std = classification.num_std
    num_sig = classification.num_sig
    std_lev = classification.std_lev
    sig_below = classification.sig_below
    sig_above = classification.sig_above
    log_p = classification.log_p

    lev_errors = np.full(num_levels, -1, dtype=np.int64)
    t_interp = np.full(num_levels, MISSING_VALUE_FLOAT, dtype=np.float64)

    # Collect triples passing all guards. Flags set on failure do not affect
    # the guards, so triples are interpolated in one go and tested afterwards.
    triples = []
    for jlevstd in range(num_std):
        jlev = int(std_lev[jlevstd])  # Standard level

        if t_flags[jlev] & int(ProfileFlags.SURFACE_LEVEL):
            continue
        sig_b = int(sig_below[jlevstd])
        sig_a = int(sig_above[jlevstd])
        p_std = pressures[jlev]

        big_gap = select_big_gap(p_std, config.big_gaps, config.big_gap_init)

        if num_sig < max(3, num_std // 2):
            continue  # Too few significant levels for a reliable check

        if sig_b == -1 or sig_a == -1:
            continue

        if (
            pressures[sig_b] - p_std > big_gap
            or p_std - pressures[sig_a] > big_gap
            or log_p[sig_b] == log_p[sig_a]
        ):
            continue

        triples.append((jlev, sig_b, sig_a))

    if not triples:
        return InterpolationResult(classification, lev_errors, t_interp, 0)

    levels, below, above = (np.array(x, dtype=np.int64) for x in zip(*triples))
    t_interp[levels] = interp_log_pressure(log_p, t_obs_final, levels, below, above)

    num_errors = 0
    for jlev, sig_b, sig_a in triples:
        tol = config.t_interp_tol * tolerance_relaxation(pressures[jlev], config)
        # A NaN residual does not fail the check
        if not abs(t_obs_final[jlev] - t_interp[jlev]) > tol:
            continue

        if num_any_errors is not None:
            num_any_errors[0] += 1
        if num_interp_errors is not None:
            num_interp_errors[0] += 1
        num_errors += 1

        # Simplest form of flagging: other checks may unset it
        for lev in (jlev, sig_b, sig_a):
            t_flags[lev] |= int(ProfileFlags.INTERPOLATION)
            lev_errors[lev] += 1

        if logger.isEnabledFor(logging.DEBUG):
            _log_failure(jlev, sig_b, sig_a, pressures, t_obs_final, t_bkg, t_interp)

    if num_errors > 0 and num_interp_err_obs is not None:
        num_interp_err_obs[0] += 1

    return InterpolationResult(classification, lev_errors, t_interp, num_errors)


# ------------------------------------------------------------------------------
#                                 Check class
# ------------------------------------------------------------------------------


def _default_classifier(self) -> StandardLevelClassifier:
    return StandardLevelClassifier.from_config(self.config)


def _convert_error_handling_config(value):
    return None if value is None else ErrorHandlingConfiguration.convert(value)


@attrs.define
class InterpolationCheck:
    """
    Interpolation check applied to the temperature of a single profile.

    Parameters
    ----------
    config : InterpolationCheckConfig or dict, optional
        Check configuration. Dictionaries are converted with
        :meth:`.InterpolationCheckConfig.from_dict`.

    classifier : ClassifierProtocol, optional
        Level classifier. Defaults to a :class:`.StandardLevelClassifier`
        using the configured standard pressures.

    error_handling_config : ErrorHandlingConfiguration or dict, optional
        Input validation policy. Defaults to the global configuration at
        check time.

    Examples
    --------
    >>> check = InterpolationCheck({"t_interp_tol": 3.0})
    >>> check.config.t_interp_tol
    3.0
    """

    name: ClassVar[str] = "Interpolation"

    config: InterpolationCheckConfig = attrs.field(
        factory=InterpolationCheckConfig,
        converter=InterpolationCheckConfig.convert,
    )
    classifier: ClassifierProtocol = attrs.field(
        default=attrs.Factory(_default_classifier, takes_self=True),
        validator=attrs.validators.instance_of(ClassifierProtocol),
    )
    error_handling_config: ErrorHandlingConfiguration | None = attrs.field(
        default=None, converter=_convert_error_handling_config
    )

    def run_check(self, profile: ProfileDataHandler) -> InterpolationResult | None:
        """
        Run the check on a profile.

        Flags and counters are updated in place in ``profile``. If input
        arrays are empty or of different sizes, the profile is left untouched
        and ``None`` is returned.
        """
        logger.debug(" Interpolation check")

        pressures = profile.get(VariableNames.air_pressure)
        t_obs = profile.get(VariableNames.obs_air_temperature)
        t_bkg = profile.get(VariableNames.hofx_air_temperature)
        t_flags = profile.get(VariableNames.qc_t_flags, dtype=np.int64)
        t_obs_correction = profile.get(VariableNames.t_obs_correction)

        if not validate_inputs(
            pressures,
            t_obs,
            t_bkg,
            t_flags,
            t_obs_correction,
            error_handling_config=self.error_handling_config,
        ):
            return None

        if not np.issubdtype(t_flags.dtype, np.integer):
            t_flags = t_flags.astype(np.int64)
            profile.set(VariableNames.qc_t_flags, t_flags)

        t_obs_final = correct_vector(t_obs, t_obs_correction)
        classification = self.classifier.classify(pressures, t_obs_final, t_flags)

        return check_standard_levels(
            np.asarray(pressures, dtype=np.float64),
            t_obs_final,
            np.asarray(t_bkg, dtype=np.float64),
            t_flags,
            classification,
            self.config,
            num_any_errors=profile.counter(VariableNames.counter_NumAnyErrors),
            num_interp_errors=profile.counter(VariableNames.counter_NumInterpErrors),
            num_interp_err_obs=profile.counter(VariableNames.counter_NumInterpErrObs),
        )

    def fill_validator(
        self, profile: ProfileDataHandler, result: InterpolationResult
    ) -> None:
        """
        Move the classification and result arrays into ``profile``.

        ``NumStd`` and ``NumSig`` are broadcast to one value per level.
        """
        classification = result.classification
        num_levels = profile.num_levels

        profile.set(VariableNames.StdLev, classification.std_lev)
        profile.set(VariableNames.SigAbove, classification.sig_above)
        profile.set(VariableNames.SigBelow, classification.sig_below)
        profile.set(VariableNames.IndStd, classification.ind_std)
        profile.set(VariableNames.LevErrors, result.lev_errors)
        profile.set(VariableNames.tInterp, result.t_interp)
        profile.set(VariableNames.LogP, classification.log_p)
        profile.set(
            VariableNames.NumStd,
            np.full(num_levels, classification.num_std, dtype=np.int64),
        )
        profile.set(
            VariableNames.NumSig,
            np.full(num_levels, classification.num_sig, dtype=np.int64),
        )

    def apply(self, profile: ProfileDataHandler) -> InterpolationResult | None:
        """
        Run the check and publish its results to ``profile``.
        """
        result = self.run_check(profile)
        if result is not None:
            self.fill_validator(profile, result)
        return result

    __call__ = apply

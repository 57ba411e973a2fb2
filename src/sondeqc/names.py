"""
Keys of the profile data store and shared sentinel values.
"""

#: Missing value used for float data (float32 lowest value of the source data).
MISSING_VALUE_FLOAT = -3.3687953e38


class VariableNames:
    """
    Names under which profile variables are stored in a
    :class:`~sondeqc.data.ProfileDataHandler`.
    """

    # Inputs
    air_pressure = "air_pressure@MetaData"
    obs_air_temperature = "air_temperature@ObsValue"
    hofx_air_temperature = "air_temperature@HofX"
    qc_t_flags = "air_temperature@QCFlags"
    t_obs_correction = "air_temperature@ObsCorrection"

    # Counters
    counter_NumAnyErrors = "NumAnyErrors@Counters"
    counter_NumInterpErrors = "NumInterpErrors@Counters"
    counter_NumInterpErrObs = "NumInterpErrObs@Counters"

    # Published by the interpolation check
    StdLev = "StdLev@Diagnostics"
    SigAbove = "SigAbove@Diagnostics"
    SigBelow = "SigBelow@Diagnostics"
    IndStd = "IndStd@Diagnostics"
    LevErrors = "LevErrors@Diagnostics"
    tInterp = "tInterp@Diagnostics"
    LogP = "LogP@Diagnostics"
    NumStd = "NumStd@Diagnostics"
    NumSig = "NumSig@Diagnostics"

    @classmethod
    def counters(cls) -> list[str]:
        """Names of all counters."""
        return [
            value
            for key, value in vars(cls).items()
            if key.startswith("counter_")
        ]

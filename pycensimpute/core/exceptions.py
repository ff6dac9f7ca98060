"""
Exception hierarchy for pycensimpute.

All exceptions inherit from CensImputeError to allow catching any
library-specific error. Domain-specific exceptions inherit from the
appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Never catch and re-raise with less information
"""


class CensImputeError(Exception):
    """Base exception for all pycensimpute errors."""
    pass


class ValidationError(CensImputeError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks: missing
    columns, non-numeric data, unknown configuration values, or a fitted
    model object of the wrong kind.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.
    """
    pass


class NumericalError(CensImputeError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        rank: Numerical rank, if computed
        expected_rank: Expected rank (typically min(n, p))
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.rank = rank
        self.expected_rank = expected_rank


class DegenerateCurveError(NumericalError):
    """
    The survival curve cannot support the requested computation.

    Raised when there is no uncensored observation to anchor the curve,
    when a censored time has no event on one side of it, or when the
    conditional-mean integral has a zero denominator with a positive
    numerator.

    Attributes:
        at_time: The time at which the curve was undefined, if any
    """

    def __init__(self, message: str, at_time: float | None = None):
        super().__init__(message)
        self.at_time = at_time


class ImputationError(CensImputeError):
    """
    One iteration of a multiple-imputation batch failed.

    The whole batch is abandoned; the original exception is chained as
    ``__cause__``.

    Attributes:
        iteration: Zero-based index of the failing iteration
    """

    def __init__(self, message: str, iteration: int):
        super().__init__(message)
        self.iteration = iteration


class PoolingError(CensImputeError):
    """
    Completed-data analyses could not be combined.

    Attributes:
        dataset_index: Index of the offending completed dataset, if known
    """

    def __init__(self, message: str, dataset_index: int | None = None):
        super().__init__(message)
        self.dataset_index = dataset_index


class DataQualityWarning(UserWarning):
    """
    Non-fatal data-quality problem.

    Negative times, non-binary event indicators and survival values
    outside [0, 1] are reported with this category; computation proceeds
    on the values as given.
    """
    pass

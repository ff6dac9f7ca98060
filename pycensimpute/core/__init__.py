"""
Core infrastructure for pycensimpute.

This module provides shared abstractions and utilities used by all
domain-specific submodules (survival, imputation, regression, pooling).

Key components:
    protocols: SurvivalCurveModel, ProportionalHazardsModel
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy and DataQualityWarning
    validation: Input validators
    compute: Timing and linear algebra kernels
"""

from pycensimpute.core.protocols import SurvivalCurveModel, ProportionalHazardsModel
from pycensimpute.core.result import Result
from pycensimpute.core.exceptions import (
    CensImputeError,
    ValidationError,
    DimensionError,
    NumericalError,
    SingularMatrixError,
    DegenerateCurveError,
    ImputationError,
    PoolingError,
    DataQualityWarning,
)

__all__ = [
    # Protocols
    "SurvivalCurveModel",
    "ProportionalHazardsModel",
    # Result
    "Result",
    # Exceptions
    "CensImputeError",
    "ValidationError",
    "DimensionError",
    "NumericalError",
    "SingularMatrixError",
    "DegenerateCurveError",
    "ImputationError",
    "PoolingError",
    "DataQualityWarning",
]

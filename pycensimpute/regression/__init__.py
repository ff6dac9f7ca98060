"""
Linear models for the analysis stage of multiple imputation.

Public API:
    fit(X, y, ...) -> LinearSolution
    fit_formula(formula, data) -> LinearSolution

Example:
    >>> from pycensimpute.regression import fit_formula
    >>> result = fit_formula("y ~ imp + z", completed)
    >>> result.params
"""

from pycensimpute.regression.design import RegressionDesign
from pycensimpute.regression.solution import LinearSolution, LinearParams
from pycensimpute.regression.solvers import fit, fit_formula

__all__ = [
    "fit",
    "fit_formula",
    "RegressionDesign",
    "LinearSolution",
    "LinearParams",
]

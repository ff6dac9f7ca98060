"""
pycensimpute: conditional-mean imputation of a right-censored covariate.

Censored covariate values are replaced by their conditional mean given
that they exceed the observed value, computed from a Kaplan-Meier curve
or a Cox model. Bootstrap multiple imputation and Rubin's rules carry the
imputation uncertainty into the analysis model.

Submodules:
    survival: Kaplan-Meier, Cox PH and the Breslow baseline
    imputation: Single and bootstrap multiple imputation
    regression: Linear models for the analysis stage
    pooling: Rubin's rules
    simulation: Synthetic censored-covariate data
"""

__version__ = "0.1.0"

from pycensimpute import survival
from pycensimpute import imputation
from pycensimpute import regression
from pycensimpute import pooling
from pycensimpute import simulation

__all__ = [
    "__version__",
    "survival",
    "imputation",
    "regression",
    "pooling",
    "simulation",
]

"""
Shared numeric infrastructure for pycensimpute.

Domain algorithms live in {domain}/_*.py; this package only holds what
several domains share.

Submodules:
    timing: Stage timing for Result.timing
    linalg: QR least-squares kernels
"""

from pycensimpute.core.compute.timing import Timer

__all__ = [
    "Timer",
]

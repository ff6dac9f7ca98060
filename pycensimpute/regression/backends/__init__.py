"""
Regression backends.

Available backends:
    CPUQRBackend: QR decomposition via LAPACK
"""

from pycensimpute.regression.backends.cpu import CPUQRBackend

__all__ = [
    "CPUQRBackend",
]

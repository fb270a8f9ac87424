"""
Module-level defaults for densemat, resolved once from the environment.

    DENSEMAT_DTYPE      element dtype for new matrices (default float64)
    DENSEMAT_PRECISION  decimals used by Matrix.print (default 3)
    DENSEMAT_LOG_LEVEL  level of the package logger (default WARNING)
"""
import os

import numpy as np


def _env(key: str, default: str) -> str:
    raw = os.environ.get(key)
    if raw and raw.strip():
        return raw.strip()
    return default


DEFAULT_DTYPE: np.dtype = np.dtype(_env("DENSEMAT_DTYPE", "float64"))
DEFAULT_PRECISION: int = int(_env("DENSEMAT_PRECISION", "3"))
LOG_LEVEL: str = _env("DENSEMAT_LOG_LEVEL", "WARNING").upper()

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np

logger = logging.getLogger(__name__)


def roots_to_polynomial(roots: Iterable[complex], tol: float = 1e-8) -> np.ndarray:
    """
    Expand prod(x - r) into coefficients, leading coefficient first.

    The product is accumulated in complex arithmetic and projected onto the real
    axis; conjugate-paired roots cancel the imaginary part.
    """
    coeffs = np.ones(1, dtype=np.complex128)
    for r in roots:
        coeffs = np.convolve(coeffs, np.array([1.0, -complex(r)], dtype=np.complex128))

    scale = float(np.max(np.abs(coeffs)))
    residual = float(np.max(np.abs(coeffs.imag)))
    if residual > tol * scale:
        logger.warning("Polynomial imaginary residual %.3e exceeds tolerance; roots may not be conjugate-paired", residual)
    return coeffs.real.copy()

"""
IIR digital filter with single-pass and zero-phase (forward-backward) filtering.

The zero-phase engine pads the signal by odd reflection, starts each pass from
the steady-state filter state for the first sample, and trims the padding off
the result, which suppresses the turn-on transient at both signal edges.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

import numpy as np
from scipy import linalg, signal

from .exceptions import FilterCoefficientError, FilterProcessingError, SignalTooShortError

logger = logging.getLogger(__name__)


def _check_denominator(a: np.ndarray) -> None:
    if a.size == 0:
        raise FilterCoefficientError("Filter coefficient 'a' is empty")
    if np.all(a == 0.0):
        raise FilterCoefficientError("Filter coefficient 'a' must have at least one non-zero value")
    if a[0] == 0.0:
        raise FilterCoefficientError("Filter coefficient 'a' first element cannot be zero")


class DigitalFilter:
    """
    IIR filter H(z) = B(z) / A(z) held as equal-length coefficient vectors.

    The stored coefficients are read-only; normalization by a[0] happens on a
    local copy for every filtering call.
    """

    def __init__(self, b: Sequence[float], a: Sequence[float]):
        """
        Args:
            b: Numerator coefficients, leading coefficient first
            a: Denominator coefficients, leading coefficient first

        Raises:
            FilterCoefficientError: If b or a is empty, a is all zero, or a[0] is zero
        """
        b = np.atleast_1d(np.asarray(b, dtype=np.float64))
        a = np.atleast_1d(np.asarray(a, dtype=np.float64))
        if b.ndim != 1 or a.ndim != 1:
            raise FilterCoefficientError("Filter coefficients must be 1-D sequences")
        if b.size == 0:
            raise FilterCoefficientError("Filter coefficient 'b' is empty")
        _check_denominator(a)

        size = max(b.size, a.size)
        self._b = np.pad(b, (0, size - b.size))
        self._a = np.pad(a, (0, size - a.size))
        self._b.setflags(write=False)
        self._a.setflags(write=False)

        logger.debug("Initialized IIR filter (order: %d)", self.order)

    def __repr__(self) -> str:
        return f"DigitalFilter(order={self.order}, b={self._b.tolist()}, a={self._a.tolist()})"

    @property
    def b(self) -> np.ndarray:
        return self._b

    @property
    def a(self) -> np.ndarray:
        return self._a

    @property
    def order(self) -> int:
        return self._b.size - 1

    @property
    def padlen(self) -> int:
        """Samples of odd-reflection padding added at each edge by `filtfilt`."""
        return 3 * self.order

    def lfilter(self, x: Sequence[float], zi: Optional[Sequence[float]] = None) -> Tuple[np.ndarray, np.ndarray]:
        """
        Single causal pass (transposed direct form II):

          y[i]  = b[0]*x[i] + z[0]
          z[j] <- b[j+1]*x[i] - a[j+1]*y[i] + z[j+1]

        Args:
            x: Input samples
            zi: Initial state of length `order` (zeros when omitted)

        Returns:
            Tuple of (output samples, final state)
        """
        b, a = self._normalized()
        x = self._as_signal(x)
        n = self.order

        if zi is None:
            z = np.zeros(n, dtype=np.float64)
        else:
            z = np.array(zi, dtype=np.float64).reshape(-1)
            if z.size != n:
                raise FilterProcessingError(f"Initial state must have length {n}, got {z.size}")

        if n == 0:
            return b[0] * x, z

        b0 = b[0]
        bt = b[1:]
        at = a[1:]
        y = np.empty_like(x)
        for i, xi in enumerate(x):
            yi = b0 * xi + z[0]
            z[:-1] = z[1:] + bt[:-1] * xi - at[:-1] * yi
            z[-1] = bt[-1] * xi - at[-1] * yi
            y[i] = yi
        return y, z

    def steady_state_zi(self) -> np.ndarray:
        """
        State for which a unit step input gives an immediately constant output.

        Solves (I - A) z = b[1:] - a[1:]*b[0], where A is the transposed companion
        matrix of the normalized denominator.
        """
        n = self.order
        if n == 0:
            return np.zeros(0, dtype=np.float64)

        b, a = self._normalized()
        i_minus_a = np.eye(n)
        i_minus_a[:, 0] += a[1:]
        i_minus_a[np.arange(n - 1), np.arange(1, n)] = -1.0
        rhs = b[1:] - a[1:] * b[0]

        try:
            return linalg.solve(i_minus_a, rhs)
        except linalg.LinAlgError:
            # pole at z = 1: no unique steady state
            logger.warning("Initial-condition system is singular; using least-squares solution")
            return linalg.lstsq(i_minus_a, rhs)[0]

    def filtfilt(self, x: Sequence[float]) -> np.ndarray:
        """
        Zero-phase filtering: forward pass, time reversal, second pass, reversal back.

        Args:
            x: Input samples, more than `padlen` of them

        Returns:
            Filtered samples, same length as x

        Raises:
            SignalTooShortError: If len(x) <= padlen
            FilterProcessingError: If x is not a finite 1-D signal
        """
        x = self._as_signal(x)
        factor = self.padlen
        if x.size <= factor:
            raise SignalTooShortError(
                f"filtfilt needs more than {factor} samples for a filter of order {self.order}, got {x.size}"
            )

        if factor > 0:
            left = 2.0 * x[0] - x[factor:0:-1]
            right = 2.0 * x[-1] - x[-2 : -factor - 2 : -1]
            ext = np.concatenate([left, x, right])
        else:
            ext = x.copy()

        mzi = self.steady_state_zi()

        y, _ = self.lfilter(ext, mzi * ext[0])
        y = y[::-1]
        y, _ = self.lfilter(y, mzi * y[0])
        y = y[::-1]

        return y[factor : y.size - factor].copy()

    def frequency_response(self, freqs_hz: Sequence[float], fs: float) -> np.ndarray:
        """Complex response H(e^{j 2 pi f / fs}) at the given frequencies (Hz)."""
        freqs = np.atleast_1d(np.asarray(freqs_hz, dtype=np.float64))
        _, h = signal.freqz(self._b, self._a, worN=freqs, fs=fs)
        return h

    def magnitude_db(self, freqs_hz: Sequence[float], fs: float) -> np.ndarray:
        h = np.abs(self.frequency_response(freqs_hz, fs))
        return 20.0 * np.log10(np.maximum(h, np.finfo(np.float64).tiny))

    def poles(self) -> np.ndarray:
        return np.roots(self._a)

    def zeros(self) -> np.ndarray:
        return np.roots(self._b)

    def _normalized(self) -> Tuple[np.ndarray, np.ndarray]:
        _check_denominator(self._a)
        a0 = self._a[0]
        return self._b / a0, self._a / a0

    @staticmethod
    def _as_signal(x: Sequence[float]) -> np.ndarray:
        x = np.asarray(x, dtype=np.float64)
        if x.ndim != 1:
            raise FilterProcessingError(f"Expected a 1-D signal, got shape {x.shape}")
        if not np.all(np.isfinite(x)):
            raise FilterProcessingError("Signal contains non-finite samples")
        return x


def filtfilt(b: Sequence[float], a: Sequence[float], x: Sequence[float]) -> np.ndarray:
    """Zero-phase filter x with the transfer function b/a."""
    if len(b) == 0 or len(a) == 0:
        raise FilterCoefficientError("filtfilt coefficients b and a cannot be empty")
    return DigitalFilter(b, a).filtfilt(x)

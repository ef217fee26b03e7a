from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .exceptions import InvalidFilterSpecificationError

logger = logging.getLogger(__name__)


def digital_to_analog(freq_hz: float, fs: float) -> float:
    """Prewarp a digital frequency (Hz) to the analog frequency (rad/s) the bilinear transform maps onto it."""
    return 2.0 * fs * math.tan(math.pi * freq_hz / fs)


def stabilized_sqrt(d: complex) -> complex:
    """
    Principal square root of a complex number computed by rotating |d| onto d:
      sqrt(|d|) * (d + |d|) / |d + |d||

    On the negative real axis d + |d| vanishes and the root is j*sqrt(|d|).
    """
    mag = abs(d)
    half = d + mag
    if half == 0:
        return complex(0.0, math.sqrt(mag))
    return math.sqrt(mag) * half / abs(half)


@dataclass(frozen=True)
class ZpkFilter:
    """
    Poles, zeros and gain of a transfer function.

    Used for both the s-plane prototype and its z-plane image after `bilinear`.
    """

    poles: np.ndarray
    zeros: np.ndarray
    gain: float = 1.0

    def __post_init__(self):
        object.__setattr__(self, "poles", np.asarray(self.poles, dtype=np.complex128).copy())
        object.__setattr__(self, "zeros", np.asarray(self.zeros, dtype=np.complex128).copy())
        object.__setattr__(self, "gain", float(self.gain))

    @property
    def order(self) -> int:
        return len(self.poles)

    def lowpass_to_bandpass(self, omega1: float, omega2: float) -> "ZpkFilter":
        """
        Map a normalized low-pass prototype onto the analog band [omega1, omega2] (rad/s).

        Each low-pass pole yields two band-pass poles and one zero at the origin.
        """
        if len(self.zeros) != 0:
            raise RuntimeError("lowpass_to_bandpass expects a pure low-pass prototype (no zeros)")

        d_omega = omega2 - omega1
        omega0_sq = omega1 * omega2

        poles = []
        for p in self.poles:
            p = complex(p)
            s = stabilized_sqrt(p * p * d_omega**2 - 4.0 * omega0_sq)
            poles.append((p * d_omega + s) / 2.0)
            poles.append((p * d_omega - s) / 2.0)

        return ZpkFilter(
            poles=np.array(poles, dtype=np.complex128),
            zeros=np.zeros(self.order, dtype=np.complex128),
            gain=self.gain * d_omega**self.order,
        )

    def bilinear(self, fs: float) -> "ZpkFilter":
        """
        s-plane -> z-plane with k = 2*fs: x -> (k + x) / (k - x).

        Pole and zero counts are equalized by padding with -1 (zeros at Nyquist).
        """
        k = 2.0 * fs
        n = max(len(self.poles), len(self.zeros))

        poles = np.full(n, -1.0, dtype=np.complex128)
        zeros = np.full(n, -1.0, dtype=np.complex128)
        poles[: len(self.poles)] = (k + self.poles) / (k - self.poles)
        zeros[: len(self.zeros)] = (k + self.zeros) / (k - self.zeros)

        gain = self.gain * np.prod(k - self.zeros) / np.prod(k - self.poles)
        if abs(gain.imag) > 1e-9 * max(abs(gain.real), 1e-300):
            logger.warning("Bilinear gain has imaginary residual %.3e; keeping real part", gain.imag)

        return ZpkFilter(poles=poles, zeros=zeros, gain=float(gain.real))


def butterworth_prototype(order: int) -> ZpkFilter:
    """Normalized low-pass Butterworth: `order` left-half-plane poles on the unit circle, no zeros, unit gain."""
    if order < 1:
        raise InvalidFilterSpecificationError(f"Butterworth order must be >= 1, got {order}")
    k = np.arange(1, order + 1)
    theta = np.pi * (2 * k - 1) / (2 * order) + np.pi / 2
    return ZpkFilter(poles=np.cos(theta) + 1j * np.sin(theta), zeros=np.empty(0, dtype=np.complex128), gain=1.0)


def analog_bandpass(order: int, omega1: float, omega2: float) -> ZpkFilter:
    proto = butterworth_prototype(order)
    bp = proto.lowpass_to_bandpass(omega1, omega2)
    logger.debug(
        "Analog band-pass: order=%d band=[%.4f, %.4f] rad/s omega0=%.4f rad/s",
        order,
        omega1,
        omega2,
        math.sqrt(omega1 * omega2),
    )
    return bp

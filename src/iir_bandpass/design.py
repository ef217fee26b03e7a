"""
Band-pass Butterworth design from stop-band/pass-band edges.

Corner frequencies are prewarped to the analog domain, the minimum order is
estimated from the attenuation and ripple targets, and the analog band-pass
prototype is discretized with the bilinear transform.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from .analog import analog_bandpass, digital_to_analog
from .digital_filter import DigitalFilter
from .exceptions import InvalidFilterSpecificationError
from .polynomial import roots_to_polynomial

logger = logging.getLogger(__name__)


def _validate(
    f_stop1: float,
    f_pass1: float,
    f_pass2: float,
    f_stop2: float,
    stop_attenuation_db: float,
    pass_ripple_db: float,
    sample_rate: float,
) -> None:
    if not sample_rate > 0:
        raise InvalidFilterSpecificationError(f"Sample rate must be positive, got {sample_rate}")
    if not 0 < f_stop1 < f_pass1 < f_pass2 < f_stop2:
        raise InvalidFilterSpecificationError(
            "Frequencies must satisfy 0 < f_stop1 < f_pass1 < f_pass2 < f_stop2, got "
            f"{f_stop1}, {f_pass1}, {f_pass2}, {f_stop2}"
        )
    nyquist = sample_rate / 2
    if f_stop2 >= nyquist:
        raise InvalidFilterSpecificationError(f"f_stop2={f_stop2} Hz must be below Nyquist ({nyquist} Hz)")
    if not (math.isfinite(stop_attenuation_db) and math.isfinite(pass_ripple_db)):
        raise InvalidFilterSpecificationError(
            f"Attenuation and ripple must be finite, got {stop_attenuation_db} dB and {pass_ripple_db} dB"
        )
    if not pass_ripple_db > 0:
        raise InvalidFilterSpecificationError(f"Pass-band ripple must be positive, got {pass_ripple_db} dB")
    if not stop_attenuation_db > pass_ripple_db:
        raise InvalidFilterSpecificationError(
            f"Stop-band attenuation ({stop_attenuation_db} dB) must exceed pass-band ripple ({pass_ripple_db} dB)"
        )


def _log_db_excess(level_db: float) -> float:
    """log(10**(level_db/10) - 1), evaluated without overflow for large levels."""
    x = level_db * math.log(10) / 10
    if x > 30:
        return x + math.log1p(-math.exp(-x))
    excess = math.expm1(x)
    if not excess > 0:
        raise InvalidFilterSpecificationError(f"Level of {level_db} dB is too small to resolve")
    return math.log(excess)


def estimate_bandpass_order(
    f_stop1: float,
    f_pass1: float,
    f_pass2: float,
    f_stop2: float,
    stop_attenuation_db: float,
    pass_ripple_db: float,
    sample_rate: float,
) -> int:
    """
    Minimum Butterworth prototype order meeting the attenuation/ripple targets.

    Band-pass edges are reduced to an equivalent low-pass ratio ws/wp on the
    prewarped analog frequencies; the digital filter has twice this order.
    """
    _validate(f_stop1, f_pass1, f_pass2, f_stop2, stop_attenuation_db, pass_ripple_db, sample_rate)

    w_stop1 = digital_to_analog(f_stop1, sample_rate)
    w_pass1 = digital_to_analog(f_pass1, sample_rate)
    w_pass2 = digital_to_analog(f_pass2, sample_rate)
    w_stop2 = digital_to_analog(f_stop2, sample_rate)

    omega_p = w_pass2 - w_pass1
    omega_s = min(
        abs(w_stop1 - w_pass1 * w_pass2 / w_stop1),
        abs(w_stop2 - w_pass1 * w_pass2 / w_stop2),
    )
    ratio = omega_s / omega_p
    if ratio <= 1.0:
        raise InvalidFilterSpecificationError(
            f"Transition bands are too wide relative to the pass band (ws/wp = {ratio:.4f} <= 1)"
        )

    # log sqrt((10**(As/10) - 1) / (10**(Ap/10) - 1)); positive since As > Ap
    log_num = 0.5 * (_log_db_excess(stop_attenuation_db) - _log_db_excess(pass_ripple_db))
    order = int(math.ceil(log_num / math.log(ratio)))
    logger.debug("Estimated Butterworth order %d (ws/wp=%.4f, log attenuation ratio=%.4f)", order, ratio, log_num)
    return order


def design_bandpass_butterworth(
    f_stop1: float,
    f_pass1: float,
    f_pass2: float,
    f_stop2: float,
    stop_attenuation_db: float,
    pass_ripple_db: float,
    sample_rate: float,
) -> DigitalFilter:
    """
    Design a digital band-pass Butterworth filter.

    Args:
        f_stop1: Lower stop-band edge (Hz)
        f_pass1: Lower pass-band edge (Hz)
        f_pass2: Upper pass-band edge (Hz)
        f_stop2: Upper stop-band edge (Hz)
        stop_attenuation_db: Minimum stop-band attenuation (dB)
        pass_ripple_db: Maximum pass-band ripple (dB)
        sample_rate: Sampling frequency (Hz)

    Returns:
        DigitalFilter of order 2n, n being the estimated prototype order

    Raises:
        InvalidFilterSpecificationError: If the parameters do not define a realizable design
    """
    order = estimate_bandpass_order(
        f_stop1, f_pass1, f_pass2, f_stop2, stop_attenuation_db, pass_ripple_db, sample_rate
    )

    w_stop1 = digital_to_analog(f_stop1, sample_rate)
    w_stop2 = digital_to_analog(f_stop2, sample_rate)

    digital = analog_bandpass(order, w_stop1, w_stop2).bilinear(sample_rate)

    b = roots_to_polynomial(digital.zeros) * digital.gain
    a = roots_to_polynomial(digital.poles)

    max_radius = float(np.max(np.abs(digital.poles)))
    logger.debug(
        "Designed band-pass Butterworth: %d coefficients, gain=%.6e, max pole radius=%.6f",
        b.size,
        digital.gain,
        max_radius,
    )
    return DigitalFilter(b, a)


@dataclass(frozen=True)
class BandpassSpecification:
    """
    Immutable band-pass design request.

    Encapsulates all parameters needed to design a band-pass Butterworth filter.
    """

    f_stop1: float
    f_pass1: float
    f_pass2: float
    f_stop2: float
    sample_rate: float
    stop_attenuation_db: float = 60.0
    pass_ripple_db: float = 1.0

    def __post_init__(self):
        _validate(*self._design_args())

    def _design_args(self):
        return (
            self.f_stop1,
            self.f_pass1,
            self.f_pass2,
            self.f_stop2,
            self.stop_attenuation_db,
            self.pass_ripple_db,
            self.sample_rate,
        )

    @property
    def center_hz(self) -> float:
        """Geometric centre of the pass band."""
        return math.sqrt(self.f_pass1 * self.f_pass2)

    def estimate_order(self) -> int:
        return estimate_bandpass_order(*self._design_args())

    def design(self) -> DigitalFilter:
        return design_bandpass_butterworth(*self._design_args())

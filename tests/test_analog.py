import cmath
import math

import numpy as np
import pytest

from iir_bandpass.analog import (
    ZpkFilter,
    analog_bandpass,
    butterworth_prototype,
    digital_to_analog,
    stabilized_sqrt,
)
from iir_bandpass.exceptions import InvalidFilterSpecificationError


@pytest.mark.parametrize("order", [1, 2, 3, 5, 8])
def test_prototype_poles_on_unit_circle_in_left_half_plane(order):
    proto = butterworth_prototype(order)
    assert len(proto.poles) == order
    assert len(proto.zeros) == 0
    assert proto.gain == 1.0
    np.testing.assert_allclose(np.abs(proto.poles), 1.0, atol=1e-12)
    assert np.all(proto.poles.real < 0)


def test_prototype_first_pole_angle():
    proto = butterworth_prototype(4)
    theta = math.pi / 8 + math.pi / 2
    assert proto.poles[0] == pytest.approx(complex(math.cos(theta), math.sin(theta)))


def test_prototype_rejects_nonpositive_order():
    with pytest.raises(InvalidFilterSpecificationError):
        butterworth_prototype(0)


@pytest.mark.parametrize("d", [4 + 0j, 3 + 4j, -3 + 4j, -3 - 4j, 1j, -1j, 0.5 - 2j])
def test_stabilized_sqrt_matches_principal_root(d):
    assert stabilized_sqrt(d) == pytest.approx(cmath.sqrt(d), abs=1e-12)


@pytest.mark.parametrize("d", [-4 + 0j, -4 + 1e-14j, -4 - 1e-14j, -1e6 + 1e-9j])
def test_stabilized_sqrt_near_negative_real_axis(d):
    s = stabilized_sqrt(d)
    assert np.isfinite(s.real) and np.isfinite(s.imag)
    assert s * s == pytest.approx(d, rel=1e-9, abs=1e-9)


def test_lowpass_to_bandpass_structure():
    omega1, omega2 = 2.0, 5.0
    proto = butterworth_prototype(3)
    bp = proto.lowpass_to_bandpass(omega1, omega2)

    assert len(bp.poles) == 6
    np.testing.assert_array_equal(bp.zeros, np.zeros(3))
    assert bp.gain == pytest.approx((omega2 - omega1) ** 3)

    # each prototype pole p yields a pair with sum p*dw and product omega1*omega2
    for i, p in enumerate(proto.poles):
        p1, p2 = bp.poles[2 * i], bp.poles[2 * i + 1]
        assert p1 + p2 == pytest.approx(p * (omega2 - omega1))
        assert p1 * p2 == pytest.approx(omega1 * omega2)


def test_lowpass_to_bandpass_keeps_poles_in_left_half_plane():
    bp = analog_bandpass(5, 2 * math.pi * 55, 2 * math.pi * 65)
    assert np.all(bp.poles.real < 0)


def test_lowpass_to_bandpass_requires_no_zeros():
    zpk = ZpkFilter(poles=[-1.0], zeros=[0.0], gain=1.0)
    with pytest.raises(RuntimeError):
        zpk.lowpass_to_bandpass(1.0, 2.0)


def test_bilinear_maps_roots_and_pads_missing_zeros():
    zpk = ZpkFilter(poles=[-1.0, -2.0], zeros=[0.0], gain=1.0)
    digital = zpk.bilinear(fs=0.5)  # k = 1

    np.testing.assert_allclose(digital.poles, [0.0, -1.0 / 3.0], atol=1e-15)
    np.testing.assert_allclose(digital.zeros, [1.0, -1.0], atol=1e-15)
    assert digital.gain == pytest.approx(1.0 / 6.0)


def test_bilinear_puts_stable_poles_inside_unit_circle():
    fs = 1920.0
    bp = analog_bandpass(5, digital_to_analog(55, fs), digital_to_analog(65, fs))
    digital = bp.bilinear(fs)
    assert len(digital.poles) == len(digital.zeros) == 10
    assert np.all(np.abs(digital.poles) < 1.0)
    # zeros at the origin map to z = 1, padding sits at z = -1
    np.testing.assert_allclose(np.sort_complex(digital.zeros), [-1] * 5 + [1] * 5, atol=1e-12)


def test_digital_to_analog_prewarping():
    fs = 1000.0
    assert digital_to_analog(fs / 4, fs) == pytest.approx(2 * fs)
    # low frequencies are barely warped
    assert digital_to_analog(1.0, fs) == pytest.approx(2 * math.pi * 1.0, rel=1e-4)

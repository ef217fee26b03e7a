import numpy as np
import pytest
from scipy import signal

from iir_bandpass.design import design_bandpass_butterworth
from iir_bandpass.digital_filter import DigitalFilter, filtfilt
from iir_bandpass.exceptions import FilterCoefficientError, FilterProcessingError, SignalTooShortError


@pytest.fixture
def band_ba():
    return signal.butter(3, [0.1, 0.3], btype="band")


@pytest.fixture
def wide_band_filter():
    """Low-order band-pass with fast-decaying transients."""
    return design_bandpass_butterworth(20.0, 40.0, 80.0, 120.0, 20.0, 3.0, 1000.0)


def test_matches_scipy_filtfilt_with_odd_padding(band_ba):
    b, a = band_ba
    rng = np.random.default_rng(1)
    x = rng.standard_normal(500)
    padlen = 3 * (max(len(b), len(a)) - 1)

    y = filtfilt(b, a, x)
    y_ref = signal.filtfilt(b, a, x, padtype="odd", padlen=padlen)
    np.testing.assert_allclose(y, y_ref, rtol=1e-9, atol=1e-10)


def test_unnormalized_denominator_gives_same_result(band_ba):
    b, a = band_ba
    x = np.sin(np.linspace(0.0, 20.0, 200))
    np.testing.assert_allclose(filtfilt(4.0 * b, 4.0 * a, x), filtfilt(b, a, x), rtol=1e-10, atol=1e-12)


@pytest.mark.parametrize("n", [19, 20, 64, 1001])
def test_output_length_equals_input_length(band_ba, n):
    b, a = band_ba
    x = np.random.default_rng(n).standard_normal(n)
    assert filtfilt(b, a, x).shape == (n,)


def test_signal_of_exactly_padlen_samples_fails(band_ba):
    b, a = band_ba
    filt = DigitalFilter(b, a)
    assert filt.padlen == 18

    with pytest.raises(SignalTooShortError):
        filt.filtfilt(np.ones(18))
    with pytest.raises(SignalTooShortError):
        filt.filtfilt(np.ones(3))

    assert filt.filtfilt(np.arange(19, dtype=float)).shape == (19,)


def test_too_short_is_a_processing_error():
    assert issubclass(SignalTooShortError, FilterProcessingError)
    with pytest.raises(ValueError):
        filtfilt([1.0, 0.5], [1.0, -0.2], [1.0, 2.0, 3.0])


def test_empty_coefficients_fail():
    with pytest.raises(FilterCoefficientError):
        filtfilt([], [1.0], np.ones(10))
    with pytest.raises(FilterCoefficientError):
        filtfilt([1.0], [], np.ones(10))


def test_degenerate_denominator_fails():
    with pytest.raises(FilterCoefficientError):
        filtfilt([1.0, 1.0], [0.0, 1.0], np.ones(10))
    with pytest.raises(FilterCoefficientError):
        filtfilt([1.0, 1.0], [0.0, 0.0], np.ones(10))


def test_rejects_non_1d_and_non_finite_signals(band_ba):
    filt = DigitalFilter(*band_ba)
    with pytest.raises(FilterProcessingError):
        filt.filtfilt(np.ones((40, 2)))
    x = np.ones(40)
    x[5] = np.nan
    with pytest.raises(FilterProcessingError):
        filt.filtfilt(x)


def test_zero_order_filter_applies_squared_gain():
    np.testing.assert_allclose(filtfilt([2.0], [1.0], [1.0, -1.0, 3.0]), [4.0, -4.0, 12.0])


def test_time_reversal_symmetry_away_from_edges(wide_band_filter):
    x = np.random.default_rng(3).standard_normal(3000)
    forward = wide_band_filter.filtfilt(x)
    backward = wide_band_filter.filtfilt(x[::-1])[::-1]
    np.testing.assert_allclose(forward[800:-800], backward[800:-800], atol=1e-9)


def test_in_band_sine_has_no_phase_shift(wide_band_filter):
    fs = 1000.0
    f = 60.0
    t = np.arange(4000) / fs
    x = np.sin(2 * np.pi * f * t)

    y = wide_band_filter.filtfilt(x)
    gain = np.abs(wide_band_filter.frequency_response([f], fs)[0]) ** 2

    np.testing.assert_allclose(y[800:-800], gain * x[800:-800], atol=1e-6)


@pytest.mark.parametrize("level", [1.0, -3.5])
def test_constant_signal_is_rejected_by_band_pass(wide_band_filter, level):
    y = wide_band_filter.filtfilt(np.full(500, level))
    assert np.max(np.abs(y)) < 1e-9

from __future__ import annotations

import numpy as np


def tone_amplitude(y: np.ndarray, sr: float, freq_hz: float) -> float:
    """
    Amplitude of the sinusoid at `freq_hz`, by least-squares projection onto sin/cos.

    Exact for tones completing an integer number of cycles over the signal.
    """
    y = np.asarray(y, dtype=np.float64)
    if y.size == 0:
        return 0.0
    t = np.arange(y.size) / sr
    c = np.cos(2 * np.pi * freq_hz * t)
    s = np.sin(2 * np.pi * freq_hz * t)
    ic = float(np.dot(y, c) / np.dot(c, c))
    iq = float(np.dot(y, s) / max(np.dot(s, s), 1e-300))
    return float(np.hypot(ic, iq))


def relative_level_db(y: np.ndarray, sr: float, freq_hz: float, ref_hz: float) -> float:
    """Level of the tone at `freq_hz` relative to the tone at `ref_hz` (dB)."""
    num = tone_amplitude(y, sr, freq_hz)
    den = tone_amplitude(y, sr, ref_hz)
    tiny = np.finfo(np.float64).tiny
    return float(20.0 * np.log10(max(num, tiny) / max(den, tiny)))

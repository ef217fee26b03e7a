from __future__ import annotations

from typing import Tuple

import numpy as np

from .design import design_bandpass_butterworth
from .digital_filter import DigitalFilter
from .exceptions import FilterProcessingError


def filtfilt_channels(filt: DigitalFilter, data: np.ndarray) -> np.ndarray:
    """Zero-phase filter a (n_samples,) or (n_samples, n_channels) array, one channel at a time."""
    data = np.asarray(data, dtype=np.float64)
    if data.ndim == 1:
        return filt.filtfilt(data)
    if data.ndim != 2:
        raise FilterProcessingError(f"Unsupported signal shape: {data.shape}")
    return np.column_stack([filt.filtfilt(data[:, ch]) for ch in range(data.shape[1])])


def bandpass_filter(
    y: np.ndarray,
    sr: float,
    pass_band: Tuple[float, float],
    stop_band: Tuple[float, float],
    stop_attenuation_db: float = 60.0,
    pass_ripple_db: float = 1.0,
) -> np.ndarray:
    filt = design_bandpass_butterworth(
        stop_band[0],
        pass_band[0],
        pass_band[1],
        stop_band[1],
        stop_attenuation_db,
        pass_ripple_db,
        sr,
    )
    return filtfilt_channels(filt, y)

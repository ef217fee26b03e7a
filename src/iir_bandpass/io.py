from __future__ import annotations

import json
import os
from typing import Any, Dict, Sequence

import numpy as np


def ensure_out_dir(out_dir: str) -> None:
    os.makedirs(out_dir, exist_ok=True)


def save_json(path: str, obj: Dict[str, Any]) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=2)


def load_audio_mono(audio_path: str, sr: int) -> np.ndarray:
    if not os.path.exists(audio_path):
        raise FileNotFoundError(f"Audio not found: {audio_path}")
    import librosa  # local import to keep startup lean

    y, _ = librosa.load(audio_path, sr=sr, mono=True)
    return np.asarray(y, dtype=np.float64)


def synthetic_tones(sr: int, duration_s: float, tones_hz: Sequence[float]) -> np.ndarray:
    """Sum of unit-amplitude sines sampled at `sr`."""
    n = int(round(duration_s * sr))
    if n <= 0:
        raise ValueError("duration_s must be positive.")
    t = np.arange(n) / sr
    y = np.zeros(n, dtype=np.float64)
    for f in tones_hz:
        y += np.sin(2 * np.pi * f * t)
    return y

from __future__ import annotations

from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .digital_filter import DigitalFilter


def plot_frequency_response(
    filt: DigitalFilter,
    sr: float,
    out_path: str,
    band: Optional[Tuple[float, float]] = None,
    fmax: Optional[float] = None,
) -> None:
    fmax = fmax or sr / 2
    freqs = np.linspace(0.0, fmax, 4096, endpoint=False)
    mag_db = filt.magnitude_db(freqs, sr)
    plt.figure(figsize=(11, 4))
    plt.plot(freqs, mag_db, linewidth=1.5)
    if band is not None:
        plt.axvspan(band[0], band[1], alpha=0.15, color="tab:green", label="Pass band")
        plt.legend(loc="upper right")
    plt.ylim(max(float(np.min(mag_db)), -160.0) - 5, 5)
    plt.xlim(0, fmax)
    plt.xlabel("Frequency (Hz)")
    plt.ylabel("Magnitude (dB)")
    plt.title(f"Frequency response (order {filt.order})")
    plt.grid(alpha=0.3)
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()


def plot_pole_zero(filt: DigitalFilter, out_path: str) -> None:
    poles = filt.poles()
    zeros = filt.zeros()
    theta = np.linspace(0, 2 * np.pi, 512)
    plt.figure(figsize=(4.8, 4.8))
    plt.plot(np.cos(theta), np.sin(theta), color="0.6", linewidth=1)
    plt.scatter(zeros.real, zeros.imag, marker="o", facecolors="none", edgecolors="tab:blue", label="Zeros")
    plt.scatter(poles.real, poles.imag, marker="x", color="tab:red", label="Poles")
    plt.axhline(0, color="0.8", linewidth=0.8)
    plt.axvline(0, color="0.8", linewidth=0.8)
    plt.gca().set_aspect("equal")
    plt.xlabel("Re(z)")
    plt.ylabel("Im(z)")
    plt.title("Pole-zero map")
    plt.legend(loc="upper right")
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()


def plot_signal_comparison(
    y: np.ndarray,
    y_filtered: np.ndarray,
    sr: float,
    out_path: str,
    window_s: float = 0.25,
) -> None:
    n = min(len(y), int(window_s * sr)) if window_s > 0 else len(y)
    t = np.arange(n) / sr
    plt.figure(figsize=(11, 4))
    plt.plot(t, y[:n], alpha=0.6, label="Input")
    plt.plot(t, y_filtered[:n], linewidth=1.5, label="Zero-phase filtered")
    plt.xlabel("Time (s)")
    plt.ylabel("Amplitude")
    plt.title(f"Signal (first {n / sr:.2f}s)")
    plt.legend(loc="upper right")
    plt.tight_layout()
    plt.savefig(out_path, dpi=200)
    plt.close()

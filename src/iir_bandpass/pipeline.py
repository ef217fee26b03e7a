from __future__ import annotations

"""
iir_bandpass.pipeline

Run as:
  python -m iir_bandpass.pipeline --mode synthetic --out results
  python -m iir_bandpass.pipeline --mode synthetic --tones 60 10 180 --stop1 55 --pass1 59 --pass2 61 --stop2 65 --sr 1920 --out results
  python -m iir_bandpass.pipeline --mode real --audio data/mains_hum.wav --sr 1920 --out results
"""

import argparse
import json
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np

from .design import BandpassSpecification
from .io import ensure_out_dir, load_audio_mono, save_json, synthetic_tones
from .measurements import relative_level_db, tone_amplitude
from .visualizations import plot_frequency_response, plot_pole_zero, plot_signal_comparison

logger = logging.getLogger(__name__)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@dataclass
class RunConfig:
    mode: str = "synthetic"  # "synthetic" | "real"
    audio_path: Optional[str] = None
    sr: int = 1920
    f_stop1: float = 55.0
    f_pass1: float = 59.0
    f_pass2: float = 61.0
    f_stop2: float = 65.0
    stop_attenuation_db: float = 60.0
    pass_ripple_db: float = 1.0
    duration_s: float = 10.0
    tones_hz: Tuple[float, ...] = field(default_factory=lambda: (60.0, 10.0))
    out_dir: str = "results"
    log_level: str = "WARNING"


def measure_tones(y: np.ndarray, sr: float, tones_hz: Tuple[float, ...], ref_hz: float) -> Dict[str, Dict[str, float]]:
    out: Dict[str, Dict[str, float]] = {}
    for f in tones_hz:
        out[f"{f:g}"] = {
            "amplitude": tone_amplitude(y, sr, f),
            "relative_db": relative_level_db(y, sr, f, ref_hz),
        }
    return out


def pipeline(cfg: RunConfig) -> Dict:
    ensure_out_dir(cfg.out_dir)

    band = BandpassSpecification(
        f_stop1=cfg.f_stop1,
        f_pass1=cfg.f_pass1,
        f_pass2=cfg.f_pass2,
        f_stop2=cfg.f_stop2,
        sample_rate=cfg.sr,
        stop_attenuation_db=cfg.stop_attenuation_db,
        pass_ripple_db=cfg.pass_ripple_db,
    )

    # Load/generate
    if cfg.mode == "synthetic":
        y = synthetic_tones(cfg.sr, cfg.duration_s, cfg.tones_hz)
    elif cfg.mode == "real":
        if not cfg.audio_path:
            raise ValueError("--audio is required when --mode real")
        y = load_audio_mono(cfg.audio_path, sr=cfg.sr)
    else:
        raise ValueError("--mode must be one of: synthetic, real")

    filt = band.design()
    logger.info("Designed order-%d band-pass (prototype order %d)", filt.order, band.estimate_order())

    y_f = filt.filtfilt(y)

    # Tone levels relative to the first tone (the pass-band centre when none are given)
    tones = tuple(cfg.tones_hz) if cfg.tones_hz else (band.center_hz,)
    ref_hz = tones[0]
    levels_in = measure_tones(y, cfg.sr, tones, ref_hz)
    levels_out = measure_tones(y_f, cfg.sr, tones, ref_hz)

    # Plots
    fr_path = os.path.join(cfg.out_dir, "frequency_response.png")
    plot_frequency_response(filt, cfg.sr, fr_path, band=(cfg.f_pass1, cfg.f_pass2), fmax=min(cfg.sr / 2, 4 * cfg.f_stop2))
    pz_path = os.path.join(cfg.out_dir, "pole_zero.png")
    plot_pole_zero(filt, pz_path)
    sig_path = os.path.join(cfg.out_dir, "signal_comparison.png")
    plot_signal_comparison(y, y_f, cfg.sr, sig_path)

    summary = {
        "mode": cfg.mode,
        "sr": cfg.sr,
        "audio_path": cfg.audio_path,
        "out_dir": cfg.out_dir,
        "design": {
            "f_stop1": cfg.f_stop1,
            "f_pass1": cfg.f_pass1,
            "f_pass2": cfg.f_pass2,
            "f_stop2": cfg.f_stop2,
            "stop_attenuation_db": cfg.stop_attenuation_db,
            "pass_ripple_db": cfg.pass_ripple_db,
            "prototype_order": band.estimate_order(),
            "order": filt.order,
            "b": filt.b.tolist(),
            "a": filt.a.tolist(),
            "center_hz": band.center_hz,
            "center_gain_db": float(filt.magnitude_db([band.center_hz], cfg.sr)[0]),
        },
        "n_samples": int(len(y)),
        "artifacts": {
            "frequency_response": fr_path,
            "pole_zero": pz_path,
            "signal_comparison": sig_path,
        },
        "metrics": {
            "reference_hz": ref_hz,
            "input": levels_in,
            "output": levels_out,
        },
    }
    save_json(os.path.join(cfg.out_dir, "run_summary.json"), summary)
    return summary


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="iir_bandpass.pipeline",
        description="Design a band-pass Butterworth filter and apply it with zero-phase filtering.",
    )
    p.add_argument("--mode", choices=["synthetic", "real"], required=True, help="Run mode.")
    p.add_argument("--audio", dest="audio_path", default=None, help="Path to audio file (required for real mode).")
    p.add_argument("--sr", type=int, default=1920, help="Sampling rate (default: 1920 Hz).")
    p.add_argument("--stop1", type=float, default=55.0, help="Lower stop-band edge Hz (default: 55).")
    p.add_argument("--pass1", type=float, default=59.0, help="Lower pass-band edge Hz (default: 59).")
    p.add_argument("--pass2", type=float, default=61.0, help="Upper pass-band edge Hz (default: 61).")
    p.add_argument("--stop2", type=float, default=65.0, help="Upper stop-band edge Hz (default: 65).")
    p.add_argument("--attenuation", type=float, default=60.0, help="Stop-band attenuation dB (default: 60).")
    p.add_argument("--ripple", type=float, default=1.0, help="Pass-band ripple dB (default: 1).")
    p.add_argument("--duration", type=float, default=10.0, help="Synthetic signal length in seconds (default: 10).")
    p.add_argument("--tones", type=float, nargs="+", default=[60.0, 10.0], help="Synthetic tone frequencies Hz.")
    p.add_argument("--out", dest="out_dir", default="results", help="Output directory for artifacts.")
    p.add_argument("--log-level", choices=LOG_LEVELS, default="WARNING", help="Logging level (default: WARNING).")
    return p


def main(argv: Optional[List[str]] = None) -> None:
    args = build_arg_parser().parse_args(argv)

    cfg = RunConfig(
        mode=args.mode,
        audio_path=args.audio_path,
        sr=args.sr,
        f_stop1=args.stop1,
        f_pass1=args.pass1,
        f_pass2=args.pass2,
        f_stop2=args.stop2,
        stop_attenuation_db=args.attenuation,
        pass_ripple_db=args.ripple,
        duration_s=args.duration,
        tones_hz=tuple(args.tones),
        out_dir=args.out_dir,
        log_level=args.log_level,
    )

    logging.basicConfig(level=cfg.log_level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    summary = pipeline(cfg)
    print(json.dumps({"metrics": summary.get("metrics", {}), "artifacts": summary.get("artifacts", {})}, indent=2))


if __name__ == "__main__":
    main()

"""
config.py
---------
Centralised configuration for simulation and estimation runs.
All parameters are read from environment variables with sensible defaults,
so the same scripts run unchanged in notebooks, CI and batch jobs.
"""

import os
import sys
from dataclasses import dataclass, field


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class SimulationConfig:
    """Euler-Maruyama grid and initial state for the path simulator."""
    dt:     float = float(os.getenv("NPSMLE_DT",    "1.0"))
    n_obs:  int   = int(os.getenv("NPSMLE_N_OBS",   "100"))
    m_obs:  int   = int(os.getenv("NPSMLE_M_OBS",   "10"))    # substeps per observation
    p0:     float = float(os.getenv("NPSMLE_P0",    "100.0"))
    v0:     float = float(os.getenv("NPSMLE_V0",    "0.04"))
    seed:   int   = int(os.getenv("NPSMLE_SEED",    "42"))
    bit_generator: str = os.getenv("NPSMLE_BIT_GENERATOR", "PCG64")


@dataclass
class EstimationConfig:
    """Particle counts, common-random-number seed and optimizer settings."""
    n_sim:  int   = int(os.getenv("NPSMLE_N_SIM",   "200"))   # particles per observation
    m_sim:  int   = int(os.getenv("NPSMLE_M_SIM",   "10"))    # substeps per observation
    seed:   int   = int(os.getenv("NPSMLE_NOISE_SEED", "7"))
    infinity_check: bool = _env_bool("NPSMLE_INFINITY_CHECK", "1")
    sentinel: float = sys.float_info.max                      # returned on abnormal ll
    method:   str   = os.getenv("NPSMLE_METHOD",    "Nelder-Mead")
    maxiter:  int   = int(os.getenv("NPSMLE_MAXITER", "2000"))
    xatol:    float = 1e-6
    fatol:    float = 1e-6


@dataclass
class AppConfig:
    """Top-level configuration."""
    simulation: SimulationConfig = field(default_factory=SimulationConfig)
    estimation: EstimationConfig = field(default_factory=EstimationConfig)
    log_level:  str = os.getenv("NPSMLE_LOG_LEVEL", "INFO")
    log_dir:    str = os.getenv("NPSMLE_LOG_DIR",   "")     # empty = console only
    figures_dir: str = os.getenv("NPSMLE_FIGURES_DIR", "outputs/figures")

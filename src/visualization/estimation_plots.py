"""
Visualizations for the joint price-volatility NPSMLE.

Figures generated:
    01_joint_paths.png          - Price, volatility and sentiment panels
    02_likelihood_profile.png   - Simulated -ll along one parameter

Author: Jose Orlando Bobadilla Fuentes, CQF
"""
import os
import sys
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from typing import Optional

NAVY = "#1a1a2e"; TEAL = "#16697a"; CORAL = "#db6400"
GOLD = "#c5a880"; SLATE = "#4a4e69"

plt.rcParams.update({
    "figure.facecolor": "white", "axes.facecolor": "white",
    "axes.grid": True, "grid.alpha": 0.3, "grid.linestyle": "--",
    "savefig.facecolor": "white",
})


def _wm(fig):
    fig.text(0.99, 0.01, "J. Bobadilla | CQF", fontsize=7,
             color="gray", alpha=0.5, ha="right", va="bottom")


def _sv(fig, save_path):
    if save_path:
        os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig


def plot_joint_paths(price: np.ndarray, volatility: np.ndarray,
                     sentiment: Optional[np.ndarray] = None,
                     dt: float = 1.0,
                     save_path: Optional[str] = None) -> plt.Figure:
    """Stacked panels of the simulated (or observed) series."""
    n_panels = 3 if sentiment is not None else 2
    fig, axes = plt.subplots(n_panels, 1, figsize=(14, 3.2 * n_panels), sharex=True)
    t = np.arange(len(price)) * dt

    axes[0].plot(t, price, color=NAVY, lw=1.2)
    axes[0].axhline(np.mean(price), color=CORAL, ls="--", lw=1.5,
                    label=f"mean = {np.mean(price):.2f}")
    axes[0].set_ylabel("Price"); axes[0].set_title("Joint Price-Volatility Path")
    axes[0].legend()

    axes[1].plot(t, volatility, color=TEAL, lw=1.2)
    axes[1].axhline(0.0, color=SLATE, lw=0.8)
    axes[1].set_ylabel("Volatility")

    if sentiment is not None:
        axes[2].bar(t, sentiment[:len(t)], width=0.8 * dt, color=GOLD)
        axes[2].set_ylabel("Sentiment")

    axes[-1].set_xlabel("Time")
    _wm(fig)
    plt.tight_layout()
    return _sv(fig, save_path)


def plot_likelihood_profile(grid: np.ndarray, values: np.ndarray,
                            name: str = "parameter",
                            true_value: Optional[float] = None,
                            save_path: Optional[str] = None,
                            sentinel: float = sys.float_info.max) -> plt.Figure:
    """Objective profile; non-finite points and those at or above `sentinel` are dropped."""
    grid = np.asarray(grid, dtype=float)
    values = np.asarray(values, dtype=float)
    ok = np.isfinite(values) & (values < sentinel)

    fig, ax = plt.subplots(figsize=(10, 6))
    ax.plot(grid[ok], values[ok], "o-", color=NAVY, lw=1.8, ms=4)
    if ok.any():
        best = grid[ok][np.argmin(values[ok])]
        ax.axvline(best, color=TEAL, ls=":", lw=1.5, label=f"argmin = {best:.4g}")
    if true_value is not None:
        ax.axvline(true_value, color=CORAL, ls="--", lw=1.5,
                   label=f"true = {true_value:.4g}")
    ax.set_xlabel(name); ax.set_ylabel("Simulated -log L")
    ax.set_title(f"NPSMLE Likelihood Profile: {name}")
    ax.legend()
    _wm(fig)
    plt.tight_layout()
    return _sv(fig, save_path)

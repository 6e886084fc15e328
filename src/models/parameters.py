"""
Joint Process Parameters
=========================

    dP = gamma_p*(mu_p - P)*dt + P*sqrt(|V|)*dW_p
    dV = gamma_v*(mu_v + beta_v*|S| - V)*dt + sigma_v*sqrt(|V|)*dW_v
    corr(dW_p, dW_v) = rho_pv

Vector order used by the likelihood objective:
    gamma_p, mu_p, gamma_v, mu_v, beta_v, sigma_v, rho_pv

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import dataclasses
import numpy as np
from dataclasses import dataclass, astuple
from typing import List, Sequence, Tuple


PARAMETER_NAMES = ("gamma_p", "mu_p", "gamma_v", "mu_v",
                   "beta_v", "sigma_v", "rho_pv")


@dataclass(frozen=True)
class JointParameters:
    """
    Attributes:
        gamma_p: Mean-reversion speed of price
        mu_p: Long-run mean of price
        gamma_v: Mean-reversion speed of volatility
        mu_v: Long-run mean of volatility
        beta_v: Sensitivity of volatility to |sentiment|
        sigma_v: Diffusion scale of volatility
        rho_pv: Price-volatility shock correlation, in (-1, 1)
    """
    gamma_p: float
    mu_p: float
    gamma_v: float
    mu_v: float
    beta_v: float
    sigma_v: float
    rho_pv: float

    @classmethod
    def from_vector(cls, x: Sequence[float]) -> "JointParameters":
        if len(x) != len(PARAMETER_NAMES):
            raise ValueError(
                f"Expected {len(PARAMETER_NAMES)} parameters, got {len(x)}")
        return cls(*(float(v) for v in x))

    def to_vector(self) -> np.ndarray:
        return np.array(astuple(self), dtype=float)

    def replace(self, **changes) -> "JointParameters":
        """Return a copy with some fields changed."""
        return dataclasses.replace(self, **changes)

    @staticmethod
    def default_bounds() -> List[Tuple[float, float]]:
        """Box constraints handed to the optimizer, never checked here."""
        return [
            (1e-4, 10.0),      # gamma_p
            (1e-4, 1e4),       # mu_p
            (1e-4, 20.0),      # gamma_v
            (1e-6, 1.0),       # mu_v
            (0.0, 1.0),        # beta_v
            (1e-4, 2.0),       # sigma_v
            (-0.999, 0.999),   # rho_pv
        ]

"""
Joint Price-Volatility Process Simulator
==========================================

Euler-Maruyama discretization with m_obs substeps per observation,
substep size delta = dt / m_obs:

    P += gamma_p*(mu_p - P)*delta + W_p * P * sqrt(|V|) * sqrt(delta)
    V += gamma_v*(mu_v + beta_v*|S_i| - V)*delta + W_v * sigma_v * sqrt(|V|) * sqrt(delta)

    W_p = sqrt(1 - rho_pv^2) * Z + rho_pv * W_v

The absolute value inside the square roots keeps the scheme defined when
V dips below zero. It is not a boundary condition: the effective diffusion
of V changes sign-symmetrically around zero.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import logging
import numpy as np
from typing import Optional

from src.models.parameters import JointParameters
from src.models.random_source import NumpyNormalSource, RandomSource

logger = logging.getLogger(__name__)


def simulate_joint_process(price: np.ndarray, volatility: np.ndarray,
                           sentiment: np.ndarray, parameters: JointParameters,
                           dt: float, n_obs: int, m_obs: int,
                           p0: float, v0: float,
                           random_source: Optional[RandomSource] = None) -> None:
    """
    Fill price[0:n_obs] and volatility[0:n_obs] in place with one sample path.

    Parameters
    ----------
    price, volatility : np.ndarray
        Caller-allocated output buffers of length >= n_obs.
    sentiment : np.ndarray
        Observation-level sentiment, read at index i for block i.
    parameters : JointParameters
    dt : float
        Time between observations.
    n_obs, m_obs : int
        Number of observations and Euler substeps per observation.
    p0, v0 : float
        Initial price and volatility.
    random_source : RandomSource, optional
        Anything with ``standard_normal()``. Defaults to a fresh
        NumpyNormalSource with fixed seed 0.

    Notes
    -----
    Draw order per substep is W_v first, then the independent price
    component. Failures surface only as non-finite values in the buffers.
    """
    if random_source is None:
        random_source = NumpyNormalSource(seed=0)

    gamma_p, mu_p = parameters.gamma_p, parameters.mu_p
    gamma_v, mu_v = parameters.gamma_v, parameters.mu_v
    beta_v, sigma_v = parameters.beta_v, parameters.sigma_v
    rho_pv = parameters.rho_pv

    delta = dt / m_obs
    sqrt_delta = np.sqrt(delta)
    rho_c = np.sqrt(1.0 - rho_pv * rho_pv)
    draw = random_source.standard_normal

    price[0] = p0
    volatility[0] = v0

    for i in range(1, n_obs):
        p = price[i - 1]
        v = volatility[i - 1]
        target_v = mu_v + beta_v * abs(sentiment[i])

        for _ in range(m_obs):
            w_v = draw()
            w_p = rho_c * draw() + rho_pv * w_v

            sqrt_v = np.sqrt(abs(v))
            p = p + gamma_p * (mu_p - p) * delta + w_p * p * sqrt_v * sqrt_delta
            v = v + gamma_v * (target_v - v) * delta + w_v * sigma_v * sqrt_v * sqrt_delta

        price[i] = p
        volatility[i] = v

    logger.debug("Simulated %d observations x %d substeps", n_obs, m_obs)

"""
Nonparametric Simulated Log-Likelihood
========================================

For each observation i = 1..N-1:
    1. Reset n_sim particles to the observed (P[i-1], V[i-1]).
    2. Advance them m_sim Euler substeps with a fixed, pre-drawn noise
       sequence (common random numbers across optimizer calls).
    3. Estimate the density of (P[i], V[i]) with a Gaussian product kernel,
       bandwidth h = C * n_sim^{-(1+u)/(d+4)} * std, d = 1, u = 0.5,
       C = (4/(d+2))^{1/(d+4)}.
    4. Accumulate log(density).

The objective returns -ll so it can be minimized directly. It follows the
(x, grad, data) callback convention of derivative-free optimizers; grad
is never written.

References:
    Kristensen, D. & Shin, Y. (2012). Estimation of dynamic models with
    nonparametric simulated maximum likelihood. J. Econometrics.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import sys
import logging
import numpy as np
from dataclasses import dataclass, replace
from typing import Optional

from src.utils import interpolate_sentiment, st_dev

logger = logging.getLogger(__name__)

KERNEL_DIM = 1
UNDERSMOOTH = 0.5
SQRT_2PI = np.sqrt(2.0 * np.pi)
_TINY = np.finfo(float).tiny


@dataclass
class SimulationContext:
    """
    Series and scratch buffers for one estimation run.

    Attributes:
        price, volatility: Observed series, length n_obs
        interpolated_sentiment: Sentiment on the substep grid, read at
            (i - 1) * m_sim + k; length >= (n_obs - 1) * m_sim
        simulated_price, simulated_volatility: Particle states, length >= n_sim
        random_buffer_price, random_buffer_volatility: Raw N(0,1) draws,
            length >= n_sim * m_sim; never written by the evaluator
        wiener_price, wiener_volatility: Correlated shocks derived from the
            raw draws on every call, length >= n_sim * m_sim
        n_sim: Particles per observation
        m_sim: Euler substeps per observation
        dt: Time between observations
        infinity_check: Return `sentinel` as soon as ll is not a normal float
        sentinel: Large finite value substituted for an abnormal objective
        sentiment: Observation-level series the substep grid was built
            from, length n_obs. Needed to change m_sim after construction.
    """
    price: np.ndarray
    volatility: np.ndarray
    interpolated_sentiment: np.ndarray
    simulated_price: np.ndarray
    simulated_volatility: np.ndarray
    random_buffer_price: np.ndarray
    random_buffer_volatility: np.ndarray
    wiener_price: np.ndarray
    wiener_volatility: np.ndarray
    n_sim: int
    m_sim: int
    dt: float
    infinity_check: bool = False
    sentinel: float = sys.float_info.max
    sentiment: Optional[np.ndarray] = None

    def __post_init__(self):
        self.validate()

    @property
    def n_obs(self) -> int:
        return len(self.price)

    def validate(self) -> None:
        """Check buffer sizes against n_obs, n_sim and m_sim."""
        if self.n_sim < 2:
            raise ValueError(f"n_sim must be >= 2, got {self.n_sim}")
        if self.m_sim < 1:
            raise ValueError(f"m_sim must be >= 1, got {self.m_sim}")
        if self.dt <= 0:
            raise ValueError(f"dt must be positive, got {self.dt}")
        if len(self.volatility) != self.n_obs:
            raise ValueError(
                f"price and volatility lengths differ: "
                f"{self.n_obs} vs {len(self.volatility)}")
        if self.sentiment is not None and len(self.sentiment) != self.n_obs:
            raise ValueError(
                f"sentiment must have one value per observation: "
                f"{len(self.sentiment)} vs {self.n_obs}")

        n_noise = self.n_sim * self.m_sim
        required = {
            "interpolated_sentiment": max(self.n_obs - 1, 0) * self.m_sim,
            "simulated_price": self.n_sim,
            "simulated_volatility": self.n_sim,
            "random_buffer_price": n_noise,
            "random_buffer_volatility": n_noise,
            "wiener_price": n_noise,
            "wiener_volatility": n_noise,
        }
        for name, size in required.items():
            buf = getattr(self, name)
            if not isinstance(buf, np.ndarray):
                raise TypeError(f"{name} must be a numpy array")
            if len(buf) < size:
                raise ValueError(f"{name} has length {len(buf)}, needs >= {size}")

    def resize(self, n_sim: int, m_sim: Optional[int] = None) -> None:
        """
        Change particle/substep counts within the allocated buffers.

        A new m_sim re-interpolates the observation-level sentiment into
        interpolated_sentiment in place, so block i substep k keeps reading
        the sentiment at time (i - 1) + k / m_sim.
        """
        regrid = m_sim is not None and m_sim != self.m_sim
        if regrid and self.sentiment is None:
            raise ValueError(
                "Changing m_sim requires the observation-level sentiment; "
                "the substep grid cannot be rebuilt without it")

        old = (self.n_sim, self.m_sim)
        self.n_sim = n_sim
        if m_sim is not None:
            self.m_sim = m_sim
        try:
            self.validate()
        except ValueError:
            self.n_sim, self.m_sim = old
            raise

        if regrid and self.n_obs > 1:
            n_grid = (self.n_obs - 1) * self.m_sim
            self.interpolated_sentiment[:n_grid] = interpolate_sentiment(
                self.sentiment, self.m_sim)

    def copy_scratch(self) -> "SimulationContext":
        """
        Clone for an independent concurrent evaluation: fresh particle,
        shock and sentiment-grid buffers, shared read-only series and raw
        draws.
        """
        return replace(
            self,
            interpolated_sentiment=self.interpolated_sentiment.copy(),
            simulated_price=np.empty_like(self.simulated_price),
            simulated_volatility=np.empty_like(self.simulated_volatility),
            wiener_price=np.empty_like(self.wiener_price),
            wiener_volatility=np.empty_like(self.wiener_volatility),
        )


def bandwidth_factor(n_sim: int, dim: int = KERNEL_DIM,
                     undersmooth: float = UNDERSMOOTH) -> float:
    """Silverman-type factor C * n^{-(1+u)/(d+4)}."""
    c = (4.0 / (dim + 2.0)) ** (1.0 / (dim + 4.0))
    return c * n_sim ** (-(1.0 + undersmooth) / (dim + 4.0))


def silverman_bandwidth(sample: np.ndarray, n_sim: Optional[int] = None) -> float:
    n = len(sample) if n_sim is None else n_sim
    return bandwidth_factor(n) * st_dev(sample, n)


def gaussian_kernel(z, h: float):
    return np.exp(-(z * z) / (2.0 * h * h)) / (h * SQRT_2PI)


def build_correlated_noise(raw_price: np.ndarray, raw_volatility: np.ndarray,
                           rho_pv: float, out_price: np.ndarray,
                           out_volatility: np.ndarray, n: int):
    """
    W_v = raw_v, W_p = sqrt(1 - rho^2) * raw_p + rho * W_v over the first
    n entries, written into the output buffers. Returns views of length n.
    """
    w_p = out_price[:n]
    w_v = out_volatility[:n]
    w_v[:] = raw_volatility[:n]
    np.multiply(raw_price[:n], np.sqrt(1.0 - rho_pv * rho_pv), out=w_p)
    w_p += rho_pv * w_v
    return w_p, w_v


def _is_normal(x: float) -> bool:
    return bool(np.isfinite(x)) and abs(x) >= _TINY


def simulated_log_likelihood(x, grad, context: SimulationContext) -> float:
    """
    Negated simulated log-likelihood of the observed series at parameters x.

    Parameters
    ----------
    x : sequence of 7 floats
        gamma_p, mu_p, gamma_v, mu_v, beta_v, sigma_v, rho_pv. Not modified.
    grad : ignored
        Present for optimizer callback compatibility; never written.
    context : SimulationContext
        Only its scratch buffers (particles, wiener_*) are written.

    Returns
    -------
    float
        -ll, or context.sentinel when infinity_check is on and ll becomes
        non-finite, zero or subnormal.
    """
    gamma_p, mu_p, gamma_v, mu_v, beta_v, sigma_v, rho_pv = (float(v) for v in x)

    n_sim, m_sim = context.n_sim, context.m_sim
    price, volatility = context.price, context.volatility
    sentiment = context.interpolated_sentiment
    sim_p = context.simulated_price[:n_sim]
    sim_v = context.simulated_volatility[:n_sim]

    delta = context.dt / m_sim
    sqrt_delta = np.sqrt(delta)
    h_frac = bandwidth_factor(n_sim)
    ll = 0.0

    # Degenerate clouds give h = 0; the resulting NaN/inf is the signal.
    with np.errstate(all="ignore"):
        w_p, w_v = build_correlated_noise(
            context.random_buffer_price, context.random_buffer_volatility,
            rho_pv, context.wiener_price, context.wiener_volatility,
            n_sim * m_sim)
        # particle j, substep k -> flat index j * m_sim + k
        w_p = w_p.reshape(n_sim, m_sim)
        w_v = w_v.reshape(n_sim, m_sim)

        for i in range(1, context.n_obs):
            sim_p.fill(price[i - 1])
            sim_v.fill(volatility[i - 1])
            offset = (i - 1) * m_sim

            for k in range(m_sim):
                target_v = mu_v + beta_v * abs(sentiment[offset + k])
                sqrt_v = np.sqrt(np.abs(sim_v))
                dp = gamma_p * (mu_p - sim_p) * delta + w_p[:, k] * sim_p * sqrt_v * sqrt_delta
                sim_v += gamma_v * (target_v - sim_v) * delta + w_v[:, k] * sigma_v * sqrt_v * sqrt_delta
                sim_p += dp

            h_price = h_frac * st_dev(sim_p)
            h_volatility = h_frac * st_dev(sim_v)

            kernel = (gaussian_kernel(sim_p - price[i], h_price)
                      * gaussian_kernel(sim_v - volatility[i], h_volatility))
            ll += float(np.log(np.mean(kernel)))

            if context.infinity_check and not _is_normal(ll):
                logger.debug("Abnormal log-likelihood %r at observation %d; "
                             "returning sentinel", ll, i)
                return context.sentinel

    return -ll

"""
NPSMLE Estimation Driver
=========================
Builds a SimulationContext with common random numbers and minimizes the
simulated negative log-likelihood with scipy.

The raw noise is drawn once per run. Redrawing it between objective calls
makes the surface jagged and stalls derivative-free optimizers.

Author: Jose Orlando Bobadilla Fuentes | CQF
"""

import logging
import numpy as np
from dataclasses import dataclass
from scipy.optimize import minimize
from typing import List, Optional, Sequence, Tuple, Union

from src.config import EstimationConfig
from src.models.likelihood import SimulationContext, simulated_log_likelihood
from src.models.parameters import PARAMETER_NAMES, JointParameters
from src.models.random_source import NumpyNormalSource
from src.utils import interpolate_sentiment, timeit

logger = logging.getLogger(__name__)


@dataclass
class EstimationResult:
    """Result container for an NPSMLE fit."""
    params: JointParameters
    neg_log_likelihood: float
    success: bool
    n_evaluations: int
    message: str


def draw_noise(n_sim: int, m_sim: int, seed: Optional[int] = None,
               bit_generator: str = "PCG64") -> Tuple[np.ndarray, np.ndarray]:
    """Two independent N(0,1) buffers of length n_sim * m_sim (price, volatility)."""
    source = NumpyNormalSource(seed, bit_generator)
    n = n_sim * m_sim
    return source.standard_normal_array(n), source.standard_normal_array(n)


def make_context(price: np.ndarray, volatility: np.ndarray,
                 sentiment: np.ndarray, n_sim: int, m_sim: int, dt: float,
                 seed: Optional[int] = None, infinity_check: bool = False,
                 sentinel: Optional[float] = None,
                 max_n_sim: Optional[int] = None,
                 max_m_sim: Optional[int] = None,
                 substep_sentiment: Optional[bool] = None) -> SimulationContext:
    """
    Allocate every buffer the likelihood needs.

    Parameters
    ----------
    sentiment : np.ndarray
        Either observation-level (one value per observation), in which case
        it is interpolated onto the substep grid, or already on the substep
        grid with at least (n_obs - 1) * m_sim entries.
    max_n_sim, max_m_sim : int, optional
        Particle and substep capacity, for runs that raise n_sim or m_sim
        later via SimulationContext.resize. Default to n_sim and m_sim.
    substep_sentiment : bool, optional
        True if `sentiment` is already on the substep grid, False if it is
        observation-level. When None, a series of exactly (n_obs - 1) * m_sim
        values counts as substep-level, any other length equal to n_obs as
        observation-level.
    """
    price = np.asarray(price, dtype=float)
    volatility = np.asarray(volatility, dtype=float)
    sentiment = np.asarray(sentiment, dtype=float)

    n_obs = len(price)
    n_grid = max(n_obs - 1, 0) * m_sim
    if substep_sentiment is None:
        substep_sentiment = len(sentiment) == n_grid or len(sentiment) != n_obs

    n_cap = max(n_sim, max_n_sim or 0)
    m_cap = max(m_sim, max_m_sim or 0)

    if substep_sentiment:
        observed_sentiment = None
        grid = sentiment
    else:
        observed_sentiment = sentiment
        grid = np.zeros(max(n_obs - 1, 0) * m_cap)
        if n_obs > 1:
            grid[:n_grid] = interpolate_sentiment(sentiment, m_sim)

    raw_price, raw_volatility = draw_noise(n_cap, m_cap, seed)

    extra = {} if sentinel is None else {"sentinel": sentinel}
    return SimulationContext(
        price=price,
        volatility=volatility,
        interpolated_sentiment=grid,
        simulated_price=np.empty(n_cap),
        simulated_volatility=np.empty(n_cap),
        random_buffer_price=raw_price,
        random_buffer_volatility=raw_volatility,
        wiener_price=np.empty(n_cap * m_cap),
        wiener_volatility=np.empty(n_cap * m_cap),
        n_sim=n_sim,
        m_sim=m_sim,
        dt=dt,
        infinity_check=infinity_check,
        sentiment=observed_sentiment,
        **extra,
    )


def likelihood_profile(context: SimulationContext, base: JointParameters,
                       name: str, grid: Sequence[float]) -> np.ndarray:
    """Objective values along one parameter, others held at `base`."""
    if name not in PARAMETER_NAMES:
        raise ValueError(f"Unknown parameter '{name}'; expected one of {PARAMETER_NAMES}")
    return np.array([
        simulated_log_likelihood(base.replace(**{name: float(v)}).to_vector(),
                                 None, context)
        for v in grid
    ])


@timeit
def estimate(price: np.ndarray, volatility: np.ndarray, sentiment: np.ndarray,
             x0: Union[JointParameters, Sequence[float]], dt: float = 1.0,
             config: Optional[EstimationConfig] = None,
             bounds: Optional[List[Tuple[float, float]]] = None,
             context: Optional[SimulationContext] = None) -> EstimationResult:
    """
    Fit the seven joint-process parameters by NPSMLE.

    Bounds are enforced by the optimizer only; the objective itself never
    validates parameters.
    """
    config = config or EstimationConfig()
    if context is None:
        context = make_context(price, volatility, sentiment,
                               n_sim=config.n_sim, m_sim=config.m_sim, dt=dt,
                               seed=config.seed,
                               infinity_check=config.infinity_check,
                               sentinel=config.sentinel)
    if bounds is None:
        bounds = JointParameters.default_bounds()
    if isinstance(x0, JointParameters):
        x0 = x0.to_vector()
    x0 = np.asarray(x0, dtype=float)

    n_calls = 0

    def objective(x):
        nonlocal n_calls
        n_calls += 1
        return simulated_log_likelihood(x, None, context)

    options = {"maxiter": config.maxiter}
    if config.method.lower() == "nelder-mead":
        options.update({"xatol": config.xatol, "fatol": config.fatol})

    logger.info("NPSMLE start: n_obs=%d n_sim=%d m_sim=%d method=%s",
                context.n_obs, context.n_sim, context.m_sim, config.method)
    logger.info("Initial objective: %.6f", objective(x0))

    result = minimize(objective, x0, method=config.method,
                      bounds=bounds, options=options)

    params = JointParameters.from_vector(result.x)
    logger.info("NPSMLE done: success=%s -ll=%.6f evaluations=%d",
                result.success, result.fun, n_calls)

    return EstimationResult(
        params=params,
        neg_log_likelihood=float(result.fun),
        success=bool(result.success),
        n_evaluations=n_calls,
        message=str(result.message),
    )

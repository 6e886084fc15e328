"""
Unit Tests -- Joint Price-Volatility Process Simulator
=======================================================
Tests the Euler-Maruyama update rule, draw order, determinism, boundary
cases and long-run mean reversion of the simulated paths.

Author: Jose Orlando Bobadilla Fuentes, CQF
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import dataclasses

import numpy as np
import pytest

from src.models.parameters import JointParameters, PARAMETER_NAMES
from src.models.random_source import NumpyNormalSource, FixedSequenceSource
from src.models.joint_process import simulate_joint_process


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture
def scenario_params():
    """Parameter set of the reference end-to-end scenario."""
    return JointParameters(gamma_p=0.1, mu_p=100.0, gamma_v=2.0, mu_v=0.04,
                           beta_v=0.01, sigma_v=0.3, rho_pv=-0.5)


def _simulate(params, n_obs=100, m_obs=10, dt=1.0, p0=100.0, v0=0.04,
              sentiment=None, seed=42):
    price = np.empty(n_obs)
    volatility = np.empty(n_obs)
    if sentiment is None:
        sentiment = np.zeros(n_obs)
    simulate_joint_process(price, volatility, sentiment, params, dt,
                           n_obs, m_obs, p0, v0, NumpyNormalSource(seed))
    return price, volatility


# ---------------------------------------------------------------------------
# Parameter Set Tests
# ---------------------------------------------------------------------------
class TestParameters:
    """Tests for the seven-parameter container."""

    def test_vector_order(self, scenario_params):
        x = scenario_params.to_vector()
        np.testing.assert_allclose(x, [0.1, 100.0, 2.0, 0.04, 0.01, 0.3, -0.5])
        assert JointParameters.from_vector(x) == scenario_params

    def test_wrong_length_raises(self):
        with pytest.raises(ValueError, match="Expected 7"):
            JointParameters.from_vector([0.1, 100.0, 2.0])

    def test_immutable(self, scenario_params):
        with pytest.raises(dataclasses.FrozenInstanceError):
            scenario_params.rho_pv = 0.2

    def test_replace(self, scenario_params):
        changed = scenario_params.replace(rho_pv=0.3)
        assert changed.rho_pv == 0.3
        assert scenario_params.rho_pv == -0.5

    def test_replace_matches_dataclasses_replace(self, scenario_params):
        changed = scenario_params.replace(mu_v=0.05, sigma_v=0.2)
        assert changed == dataclasses.replace(scenario_params, mu_v=0.05, sigma_v=0.2)
        assert scenario_params.replace() == scenario_params
        with pytest.raises(dataclasses.FrozenInstanceError):
            changed.mu_v = 0.1

    def test_replace_unknown_field(self, scenario_params):
        with pytest.raises(TypeError):
            scenario_params.replace(kappa=1.0)

    def test_default_bounds_cover_names(self):
        bounds = JointParameters.default_bounds()
        assert len(bounds) == len(PARAMETER_NAMES)
        assert all(lo < hi for lo, hi in bounds)


# ---------------------------------------------------------------------------
# Update Rule Tests
# ---------------------------------------------------------------------------
class TestUpdateRule:
    """Single-substep checks against hand-computed values."""

    @pytest.fixture
    def params(self):
        return JointParameters(gamma_p=0.5, mu_p=10.0, gamma_v=1.0, mu_v=0.04,
                               beta_v=0.1, sigma_v=0.2, rho_pv=0.6)

    def test_single_step(self, params):
        """W_v is drawn first; W_p = 0.8*2.0 + 0.6*1.0 = 2.2."""
        price, volatility = np.empty(2), np.empty(2)
        source = FixedSequenceSource([1.0, 2.0])
        simulate_joint_process(price, volatility, np.array([0.0, -0.5]),
                               params, 1.0, 2, 1, 9.0, 0.04, source)
        # 9 + 0.5*(10-9) + 2.2*9*0.2
        np.testing.assert_allclose(price, [9.0, 13.46])
        # 0.04 + 1*(0.04 + 0.1*0.5 - 0.04) + 1.0*0.2*0.2
        np.testing.assert_allclose(volatility, [0.04, 0.13])
        assert source.consumed == 2

    def test_absolute_value_guard(self, params):
        """Negative volatility uses sqrt(|v|) instead of producing NaN."""
        price, volatility = np.empty(2), np.empty(2)
        simulate_joint_process(price, volatility, np.zeros(2), params,
                               1.0, 2, 1, 9.0, -0.04,
                               FixedSequenceSource([1.0, 2.0]))
        np.testing.assert_allclose(price[1], 13.46)
        # -0.04 + 1*(0.04 + 0.04) + 0.2*0.2
        np.testing.assert_allclose(volatility[1], 0.08)

    def test_substep_size(self, params):
        """Two substeps of dt/2 consume four draws; zero shocks give pure drift."""
        price, volatility = np.empty(2), np.empty(2)
        source = FixedSequenceSource([0.0, 0.0, 0.0, 0.0])
        simulate_joint_process(price, volatility, np.zeros(2), params,
                               1.0, 2, 2, 9.0, 0.04, source)
        p_half = 9.0 + 0.5 * 1.0 * 0.5
        p_full = p_half + 0.5 * (10.0 - p_half) * 0.5
        np.testing.assert_allclose(price[1], p_full)
        np.testing.assert_allclose(volatility[1], 0.04)
        assert source.consumed == 4

    def test_sentiment_read_per_observation(self, params):
        """Block i uses |sentiment[i]|, not sentiment[i-1]."""
        price, volatility = np.empty(3), np.empty(3)
        quiet = params.replace(sigma_v=0.0)
        simulate_joint_process(price, volatility, np.array([5.0, 0.0, -1.0]),
                               quiet, 1.0, 3, 1, 10.0, 0.04,
                               FixedSequenceSource([0.0] * 4))
        np.testing.assert_allclose(volatility[1], 0.04)
        np.testing.assert_allclose(volatility[2], 0.04 + 0.1)


# ---------------------------------------------------------------------------
# Determinism and Boundary Tests
# ---------------------------------------------------------------------------
class TestDeterminism:
    """Reproducibility and degenerate grids."""

    def test_same_seed_identical(self, scenario_params):
        p1, v1 = _simulate(scenario_params, seed=123)
        p2, v2 = _simulate(scenario_params, seed=123)
        np.testing.assert_array_equal(p1, p2)
        np.testing.assert_array_equal(v1, v2)

    def test_different_seed_differs(self, scenario_params):
        p1, _ = _simulate(scenario_params, seed=1)
        p2, _ = _simulate(scenario_params, seed=2)
        assert not np.array_equal(p1, p2)

    def test_bit_generator_selectable(self, scenario_params):
        price, volatility = np.empty(20), np.empty(20)
        simulate_joint_process(price, volatility, np.zeros(20), scenario_params,
                               1.0, 20, 5, 100.0, 0.04,
                               NumpyNormalSource(7, bit_generator="MT19937"))
        assert np.all(np.isfinite(price))

    def test_single_observation(self, scenario_params):
        """n_obs = 1 sets only the initial values and draws nothing."""
        price = np.full(5, np.nan)
        volatility = np.full(5, np.nan)
        source = FixedSequenceSource([])
        simulate_joint_process(price, volatility, np.zeros(5), scenario_params,
                               1.0, 1, 10, 100.0, 0.04, source)
        assert price[0] == 100.0 and volatility[0] == 0.04
        assert np.all(np.isnan(price[1:])) and np.all(np.isnan(volatility[1:]))
        assert source.consumed == 0

    def test_writes_only_first_n_obs(self, scenario_params):
        price = np.full(10, -1.0)
        volatility = np.full(10, -1.0)
        simulate_joint_process(price, volatility, np.zeros(10), scenario_params,
                               1.0, 6, 3, 100.0, 0.04, NumpyNormalSource(0))
        np.testing.assert_array_equal(price[6:], -1.0)
        np.testing.assert_array_equal(volatility[6:], -1.0)

    def test_default_source_is_deterministic(self, scenario_params):
        a, b = np.empty(10), np.empty(10)
        c, d = np.empty(10), np.empty(10)
        simulate_joint_process(a, b, np.zeros(10), scenario_params, 1.0, 10, 5, 100.0, 0.04)
        simulate_joint_process(c, d, np.zeros(10), scenario_params, 1.0, 10, 5, 100.0, 0.04)
        np.testing.assert_array_equal(a, c)

    def test_exhausted_fixed_source_raises(self, scenario_params):
        with pytest.raises(IndexError):
            simulate_joint_process(np.empty(3), np.empty(3), np.zeros(3),
                                   scenario_params, 1.0, 3, 2, 100.0, 0.04,
                                   FixedSequenceSource([0.1, 0.2]))


# ---------------------------------------------------------------------------
# Mean Reversion Tests
# ---------------------------------------------------------------------------
class TestMeanReversion:
    """Long-horizon behaviour of the reference scenario."""

    def test_scenario_volatility_mean(self, scenario_params):
        """Late-horizon volatility centres on mu_v with zero sentiment."""
        _, volatility = _simulate(scenario_params, seed=42)
        assert np.all(np.isfinite(volatility))
        np.testing.assert_allclose(volatility[50:].mean(), 0.04, atol=0.02)

    def test_scenario_price_mean(self, scenario_params):
        """Late-horizon price centres on mu_p across independent paths."""
        late_means = []
        for seed in range(40):
            price, _ = _simulate(scenario_params, seed=seed)
            assert np.all(np.isfinite(price))
            late_means.append(price[50:].mean())
        np.testing.assert_allclose(np.mean(late_means), 100.0, rtol=0.2)

    def test_sentiment_shifts_volatility_level(self, scenario_params):
        """Long-run volatility is mu_v + beta_v * E|S|."""
        params = scenario_params.replace(beta_v=0.02)
        sentiment = np.where(np.arange(400) % 2 == 0, 0.5, -0.5)
        late = []
        for seed in range(10):
            _, volatility = _simulate(params, n_obs=400, sentiment=sentiment,
                                      seed=seed)
            late.append(volatility[100:].mean())
        np.testing.assert_allclose(np.mean(late), 0.04 + 0.02 * 0.5, atol=0.006)

    def test_starts_above_reverts_down(self, scenario_params):
        _, volatility = _simulate(scenario_params, v0=0.3, seed=5)
        assert volatility[-20:].mean() < 0.3


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])

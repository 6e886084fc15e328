"""
Joint Process Models
====================
Path simulation and nonparametric simulated maximum likelihood.
"""

from src.models.parameters import JointParameters, PARAMETER_NAMES
from src.models.random_source import NumpyNormalSource, FixedSequenceSource
from src.models.joint_process import simulate_joint_process
from src.models.likelihood import SimulationContext, simulated_log_likelihood
from src.models.estimation import EstimationResult, estimate, make_context

__all__ = [
    "JointParameters", "PARAMETER_NAMES",
    "NumpyNormalSource", "FixedSequenceSource",
    "simulate_joint_process",
    "SimulationContext", "simulated_log_likelihood",
    "EstimationResult", "estimate", "make_context",
]

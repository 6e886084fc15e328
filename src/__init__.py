"""
Joint Price-Volatility-Sentiment NPSMLE
========================================
Nonparametric simulated maximum likelihood for a mean-reverting price
process whose stochastic volatility is driven by a sentiment series.

Modules:
    models.parameters     - Seven-parameter set and optimizer bounds
    models.random_source  - Injectable standard-normal draw sources
    models.joint_process  - Euler-Maruyama path simulator
    models.likelihood     - Kernel-density simulated log-likelihood
    models.estimation     - Common-random-number context and scipy driver
    config                - Dataclass configuration with env overrides
    utils                 - Logging, timing, st_dev, sentiment interpolation
    visualization         - Path and likelihood-profile figures
"""

__version__ = "1.0.0"
__author__ = "Jose Orlando Bobadilla Fuentes"

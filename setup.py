"""
Setup for Joint Price-Volatility-Sentiment NPSMLE.

Author: Jose Orlando Bobadilla Fuentes, CQF
"""
from setuptools import setup, find_packages

setup(
    name="joint-npsmle",
    version="1.0.0",
    author="Jose Orlando Bobadilla Fuentes",
    description=(
        "Euler-Maruyama simulation and nonparametric simulated maximum "
        "likelihood for a sentiment-driven price-volatility process."
    ),
    packages=find_packages(include=["src", "src.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy>=1.24.0",
        "scipy>=1.11.0",
        "matplotlib>=3.7.0",
    ],
    extras_require={
        "test": ["pytest>=7.4.0"],
    },
    keywords=[
        "stochastic-volatility", "sentiment", "simulated-maximum-likelihood",
        "kernel-density", "quantitative-finance",
    ],
)

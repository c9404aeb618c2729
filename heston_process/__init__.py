"""
═══════════════════════════════════════════════════════════════════════════════
HESTON PROCESS - Stochastic Volatility Dynamics for Monte Carlo Simulation
═══════════════════════════════════════════════════════════════════════════════

A two-factor Heston (1993) process exposing the primitives a path generator
needs: initial values, drift, diffusion and the state update, discretized
with the full truncation Euler scheme.

Mathematical Model:
    d ln S = (r - q - V/2)dt + √V dW_1
    dV     = κ(θ - V)dt + σ√V dW_2
    Corr(dW_1, dW_2) = ρ

Where:
    S  = Stock price
    V  = Instantaneous variance
    r  = Risk-free rate (from a yield curve)
    q  = Dividend yield (from a yield curve)
    κ  = Mean reversion speed
    θ  = Long-term variance
    σ  = Volatility of variance (vol of vol)
    ρ  = Correlation between stock and variance

Modules:
    backend.core.observable     - Observable quotes and handles
    backend.core.term_structure - Day counters and yield curves
    backend.core.discretization - Step schemes (Euler)
    backend.core.process        - StochasticProcess, HestonProcess
    backend.core.parameters     - Parameter sets and process construction
    backend.solvers.monte_carlo - Path evolution
    backend.app                 - Flask API
    tests                       - Validation tests

Usage:
    from heston_process import get_default_params, build_process

    process = build_process(get_default_params())
    x0 = process.initial_values()
    x1 = process.evolve(0.0, x0, 1.0 / 252, [0.1, -0.3])

    process.v0().current_link().set_value(0.09)   # observers are notified

═══════════════════════════════════════════════════════════════════════════════
"""

__version__ = '1.0.0'
__author__ = 'Heston Process'

from heston_process.backend.core.observable import (
    Handle,
    Observable,
    Observer,
    Quote,
    RelinkableHandle,
    SimpleQuote,
    UninitializedHandleError,
)
from heston_process.backend.core.term_structure import (
    Actual360,
    Actual365Fixed,
    DayCounter,
    FlatForward,
    YieldTermStructure,
    ZeroCurve,
)
from heston_process.backend.core.discretization import Discretization, EulerDiscretization
from heston_process.backend.core.process import HestonProcess, StochasticProcess
from heston_process.backend.core.parameters import (
    HestonParams,
    build_process,
    get_default_params,
    get_heston_1993_params,
)
from heston_process.backend.solvers.monte_carlo import MonteCarloSimulator, time_grid

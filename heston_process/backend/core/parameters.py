"""
Heston Model Parameters and Process Construction

═══════════════════════════════════════════════════════════════════════════════
MATHEMATICAL FOUNDATION - HESTON STOCHASTIC VOLATILITY MODEL
═══════════════════════════════════════════════════════════════════════════════

The Heston model describes asset price dynamics under the risk-neutral measure:

1. ASSET PRICE SDE:
   dS_t = (r - q)S_t dt + √V_t S_t dW_S^t

   Where:
   - S_t: Asset price at time t
   - r: Risk-free interest rate (continuous compounding)
   - q: Continuous dividend yield
   - V_t: Instantaneous variance (volatility² at time t)

2. VARIANCE SDE (CIR Process):
   dV_t = κ(θ - V_t)dt + σ√V_t dW_V^t

   - κ (kappa): Mean reversion speed
   - θ (theta): Long-term variance level
   - σ (sigma): Volatility of variance (vol-of-vol)

3. CORRELATION STRUCTURE:
   E[dW_S^t · dW_V^t] = ρ dt

   ρ is expected in [-1, 1]. It is NOT checked here: values outside that
   range reach the process unchanged and produce NaN diffusion terms.

4. FELLER CONDITION:
   2κθ > σ²

   Feller ratio: F = 2κθ/σ²
   - F > 1: Variance stays strictly positive in continuous time
   - F ≤ 1: Variance can hit zero; the discretized process relies on the
            full truncation floor

═══════════════════════════════════════════════════════════════════════════════
"""

import datetime
import warnings
import numpy as np
from dataclasses import dataclass
from typing import Dict, Optional

from heston_process.backend.core.observable import Handle, SimpleQuote
from heston_process.backend.core.process import HestonProcess
from heston_process.backend.core.term_structure import Actual365Fixed, DayCounter, FlatForward


@dataclass
class HestonParams:
    """
    Container for Heston model parameters with validation.

    Flat market inputs (r, q) are used by build_process() to create flat
    risk-free and dividend curves.
    """

    kappa: float  # κ: Speed of mean reversion in variance
    theta: float  # θ: Long-term variance level
    sigma: float  # σ: Volatility of variance
    rho: float    # ρ: Price/variance correlation

    r: float      # Risk-free rate (continuous compounding)
    q: float      # Continuous dividend yield

    S0: float     # Initial spot price
    V0: float     # Initial variance

    def __post_init__(self):
        assert self.kappa >= 0, f"κ must be non-negative, got {self.kappa}"
        assert self.theta >= 0, f"θ must be non-negative, got {self.theta}"
        assert self.sigma >= 0, f"σ must be non-negative, got {self.sigma}"
        assert self.S0 > 0, f"S₀ must be positive, got {self.S0}"
        assert self.V0 >= 0, f"V₀ must be non-negative, got {self.V0}"

        feller_lhs = 2 * self.kappa * self.theta
        feller_rhs = self.sigma ** 2
        self.feller_ratio = feller_lhs / feller_rhs if feller_rhs > 0 else np.inf
        self.feller_satisfied = self.feller_ratio > 1.0

        if not self.feller_satisfied:
            warnings.warn(
                f"Feller condition violated: 2κθ = {feller_lhs:.6f}, "
                f"σ² = {feller_rhs:.6f}, ratio = {self.feller_ratio:.4f} ≤ 1. "
                f"Simulated variance will be truncated at zero."
            )

        self._compute_derived()

    def _compute_derived(self):
        """
        Long-term vol √θ, initial vol √V₀ and variance half-life ln(2)/κ.
        """
        self.long_term_vol = np.sqrt(self.theta)
        self.initial_vol = np.sqrt(self.V0)
        self.variance_halflife = np.log(2) / self.kappa if self.kappa > 0 else np.inf

    def expected_variance(self, t: float) -> float:
        """E[V_t | V₀] = θ + (V₀ - θ)e^{-κt}"""
        return self.theta + (self.V0 - self.theta) * np.exp(-self.kappa * t)

    def to_dict(self) -> Dict[str, float]:
        return {
            'kappa': self.kappa,
            'theta': self.theta,
            'sigma': self.sigma,
            'rho': self.rho,
            'r': self.r,
            'q': self.q,
            'S0': self.S0,
            'V0': self.V0
        }

    @classmethod
    def from_dict(cls, d: Dict[str, float]) -> 'HestonParams':
        return cls(
            kappa=d['kappa'],
            theta=d['theta'],
            sigma=d['sigma'],
            rho=d['rho'],
            r=d['r'],
            q=d['q'],
            S0=d['S0'],
            V0=d['V0']
        )

    def __repr__(self) -> str:
        feller_status = "✓" if self.feller_satisfied else "✗"
        return (
            f"HestonParams(\n"
            f"  κ={self.kappa:.4f}, θ={self.theta:.4f}, σ={self.sigma:.4f}, ρ={self.rho:.4f}\n"
            f"  r={self.r:.4f}, q={self.q:.4f}\n"
            f"  S₀={self.S0:.2f}, V₀={self.V0:.4f}\n"
            f"  Feller ratio: {self.feller_ratio:.3f} {feller_status}\n"
            f")"
        )


# ═══════════════════════════════════════════════════════════════════════════════
# PROCESS CONSTRUCTION
# ═══════════════════════════════════════════════════════════════════════════════

def build_process(
    params: HestonParams,
    reference_date: Optional[datetime.date] = None,
    day_counter: Optional[DayCounter] = None
) -> HestonProcess:
    """
    Build a HestonProcess on flat curves from a parameter set.

    Args:
        params: Heston parameters
        reference_date: Curve reference date (today if omitted)
        day_counter: Curve day counter (Actual/365 Fixed if omitted)

    Returns:
        HestonProcess with live spot quote and flat r, q curves
    """
    reference_date = reference_date or datetime.date.today()
    day_counter = day_counter or Actual365Fixed()

    risk_free = Handle(FlatForward(reference_date, params.r, day_counter))
    dividend = Handle(FlatForward(reference_date, params.q, day_counter))
    spot = Handle(SimpleQuote(params.S0))

    return HestonProcess(
        risk_free,
        dividend,
        spot,
        v0=params.V0,
        kappa=params.kappa,
        theta=params.theta,
        sigma=params.sigma,
        rho=params.rho
    )


# ═══════════════════════════════════════════════════════════════════════════════
# TYPICAL PARAMETER SETS FOR TESTING
# ═══════════════════════════════════════════════════════════════════════════════

def get_default_params() -> HestonParams:
    """
    Default parameters for testing.

    The variance starts at its long-run level, so the drift of both
    components vanishes at t = 0 when r = q + V₀/2.
    """
    return HestonParams(
        kappa=2.0,    # Moderate mean reversion
        theta=0.04,   # 20% long-term volatility
        sigma=0.3,    # Moderate vol-of-vol
        rho=-0.6,     # Negative correlation (equity-like)
        r=0.02,       # 2% risk-free rate
        q=0.0,        # No dividends
        S0=100.0,     # Spot price $100
        V0=0.04       # Initial volatility = 20%
    )


def get_heston_1993_params() -> HestonParams:
    """
    Parameters from Heston's 1993 paper (Table 1, Example 1).

    Reference:
    Heston, S. L. (1993). "A Closed-Form Solution for Options with
    Stochastic Volatility with Applications to Bond and Currency Options."
    The Review of Financial Studies, 6(2), 327-343.
    """
    return HestonParams(
        kappa=2.0,
        theta=0.01,
        sigma=0.1,
        rho=0.0,
        r=0.0,
        q=0.0,
        S0=100.0,
        V0=0.01
    )

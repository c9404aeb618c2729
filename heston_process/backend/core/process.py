"""
Heston Stochastic Process

═══════════════════════════════════════════════════════════════════════════════
MATHEMATICAL FOUNDATION - HESTON PROCESS FOR PATH SIMULATION
═══════════════════════════════════════════════════════════════════════════════

State vector x = (S, V):
   x[0] = S: Asset price level
   x[1] = V: Instantaneous variance

Dynamics under the risk-neutral measure:

   d ln S = (r(t) - q(t) - V/2) dt + √V dW_1
   dV     = κ(θ - V) dt + σ√V dW_2
   E[dW_1·dW_2] = ρ dt

1. DRIFT (full truncation):
   ═══════════════════════════════════════════════════════════════════════════

   V⁺ = max(V, 0)

   μ_0 = f_r(t, t) - f_q(t, t) - V⁺/2
   μ_1 = κ(θ - V⁺)

   f_r, f_q are the instantaneous continuously compounded forwards of the
   risk-free and dividend curves. The mean-reversion term uses V⁺ rather
   than V; Lord, Koekkoek & van Dijk (2006) show this variant has the
   smallest bias among the simple Euler fixes.

2. DIFFUSION:
   ═══════════════════════════════════════════════════════════════════════════

   The correlation matrix and its square root:

       | 1  ρ |            | 1        0      |
       | ρ  1 |     →      | ρ   √(1 - ρ²)   |

   Scaling row 0 by σ₁ = √V⁺ and row 1 by σ₂ = σ·σ₁:

       M = | σ₁         0          |
           | ρ·σ₂   √(1 - ρ²)·σ₂   |

   so that M·Z with Z ~ N(0, I) has covariance

       V⁺ · | 1     ρσ |
            | ρσ    σ² |

3. APPLY:
   ═══════════════════════════════════════════════════════════════════════════

   S₁ = S₀·exp(Δ₀)   (log-space update, S stays strictly positive)
   V₁ = V₀ + Δ₁      (may go negative; floored at the next evaluation)

The floor is applied before each step (in drift and diffusion) and never
after it, so negative variance can sit in the state between steps.

═══════════════════════════════════════════════════════════════════════════════
"""

import datetime
import numpy as np
from typing import Optional

from heston_process.backend.core.observable import (
    Handle,
    Observable,
    Observer,
    RelinkableHandle,
    SimpleQuote,
)
from heston_process.backend.core.discretization import Discretization, EulerDiscretization


def _as_handle(obj) -> Handle:
    if isinstance(obj, Handle):
        return obj
    return Handle(obj)


class StochasticProcess(Observable, Observer):
    """
    Multi-dimensional Itô process dX = μ(t, X)dt + σ(t, X)dW.

    Subclasses provide size(), initial_values(), drift() and diffusion();
    single-step quantities are assembled by the discretization.

    Args:
        discretization: Step scheme (Euler if omitted)
    """

    def __init__(self, discretization: Optional[Discretization] = None):
        super().__init__()
        self._discretization = discretization or EulerDiscretization()

    def size(self) -> int:
        raise NotImplementedError

    def factors(self) -> int:
        """Number of independent Brownian motions."""
        return self.size()

    def initial_values(self) -> np.ndarray:
        raise NotImplementedError

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def discretization(self) -> Discretization:
        return self._discretization

    def _check_state(self, x) -> np.ndarray:
        x = np.asarray(x, dtype=float)
        if x.shape != (self.size(),):
            raise ValueError(
                f"state vector must have {self.size()} components, got shape {x.shape}"
            )
        return x

    def expectation(self, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        """E[x(t0 + dt) | x(t0) = x0] under the discretization."""
        x0 = self._check_state(x0)
        return self.apply(x0, self._discretization.drift(self, t0, x0, dt))

    def std_deviation(self, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        x0 = self._check_state(x0)
        return self._discretization.diffusion(self, t0, x0, dt)

    def covariance(self, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        x0 = self._check_state(x0)
        return self._discretization.covariance(self, t0, x0, dt)

    def evolve(self, t0: float, x0: np.ndarray, dt: float, dw: np.ndarray) -> np.ndarray:
        """
        Advance x0 by one step of length dt.

        Args:
            t0: Start time
            x0: State at t0
            dt: Step length
            dw: Independent standard normal draws, one per factor

        Returns:
            apply(x0, drift·dt + diffusion·√dt·dw) for the Euler scheme
        """
        x0 = self._check_state(x0)
        dw = np.asarray(dw, dtype=float)
        if dw.shape != (self.factors(),):
            raise ValueError(
                f"dw must have {self.factors()} components, got shape {dw.shape}"
            )
        dx = (self._discretization.drift(self, t0, x0, dt)
              + self._discretization.diffusion(self, t0, x0, dt) @ dw)
        return self.apply(x0, dx)

    def apply(self, x0: np.ndarray, dx: np.ndarray) -> np.ndarray:
        return self._check_state(x0) + self._check_state(dx)

    def time(self, date: datetime.date) -> float:
        raise NotImplementedError(
            f"date/time conversion not supported by {type(self).__name__}"
        )

    def update(self) -> None:
        self.notify_observers()


class HestonProcess(StochasticProcess):
    """
    Heston (1993) square-root stochastic volatility process.

    Args:
        risk_free_rate: Handle to the risk-free yield curve
        dividend_yield: Handle to the dividend yield curve
        s0: Handle to the spot quote
        v0: Initial variance V(0)
        kappa: κ, mean reversion speed
        theta: θ, long-run variance
        sigma: σ, volatility of variance
        rho: ρ, correlation between price and variance shocks (not validated)
        discretization: Step scheme (Euler if omitted)
    """

    def __init__(
        self,
        risk_free_rate,
        dividend_yield,
        s0,
        v0: float,
        kappa: float,
        theta: float,
        sigma: float,
        rho: float,
        discretization: Optional[Discretization] = None
    ):
        super().__init__(discretization)

        self._risk_free_rate = _as_handle(risk_free_rate)
        self._dividend_yield = _as_handle(dividend_yield)
        self._s0 = _as_handle(s0)

        self._v0 = RelinkableHandle(SimpleQuote(v0))
        self._kappa = RelinkableHandle(SimpleQuote(kappa))
        self._theta = RelinkableHandle(SimpleQuote(theta))
        self._sigma = RelinkableHandle(SimpleQuote(sigma))
        self._rho = RelinkableHandle(SimpleQuote(rho))

        for handle in (self._risk_free_rate, self._dividend_yield, self._s0,
                       self._v0, self._kappa, self._theta, self._sigma, self._rho):
            self.register_with(handle)

    def size(self) -> int:
        return 2

    def initial_values(self) -> np.ndarray:
        return np.array([
            self._s0.current_link().value(),
            self._v0.current_link().value(),
        ])

    def drift(self, t: float, x: np.ndarray) -> np.ndarray:
        x = self._check_state(x)
        vol = np.sqrt(x[1]) if x[1] > 0.0 else 0.0

        r = self._risk_free_rate.current_link().forward_rate(t, t)
        q = self._dividend_yield.current_link().forward_rate(t, t)
        kappa = self._kappa.current_link().value()
        theta = self._theta.current_link().value()

        return np.array([
            r - q - 0.5 * vol * vol,
            kappa * (theta - vol * vol),
        ])

    def diffusion(self, t: float, x: np.ndarray) -> np.ndarray:
        x = self._check_state(x)
        rho = self._rho.current_link().value()
        sigma1 = np.sqrt(x[1]) if x[1] > 0.0 else 0.0
        sigma2 = self._sigma.current_link().value() * sigma1

        # |rho| > 1 yields NaN here
        return np.array([
            [sigma1, 0.0],
            [rho * sigma2, np.sqrt(np.float64(1.0 - rho * rho)) * sigma2],
        ])

    def apply(self, x0: np.ndarray, dx: np.ndarray) -> np.ndarray:
        x0 = self._check_state(x0)
        dx = self._check_state(dx)
        return np.array([
            x0[0] * np.exp(dx[0]),
            x0[1] + dx[1],
        ])

    def time(self, date: datetime.date) -> float:
        curve = self._risk_free_rate.current_link()
        return curve.day_counter().year_fraction(curve.reference_date(), date)

    # ═══════════════════════════════════════════════════════════════════════
    # Inspectors (live handles, not snapshots)
    # ═══════════════════════════════════════════════════════════════════════

    def v0(self) -> RelinkableHandle:
        return self._v0

    def kappa(self) -> RelinkableHandle:
        return self._kappa

    def theta(self) -> RelinkableHandle:
        return self._theta

    def sigma(self) -> RelinkableHandle:
        return self._sigma

    def rho(self) -> RelinkableHandle:
        return self._rho

    def s0(self) -> Handle:
        return self._s0

    def dividend_yield(self) -> Handle:
        return self._dividend_yield

    def risk_free_rate(self) -> Handle:
        return self._risk_free_rate

    def __repr__(self) -> str:
        return (
            f"HestonProcess(v0={self._v0!r}, kappa={self._kappa!r}, "
            f"theta={self._theta!r}, sigma={self._sigma!r}, rho={self._rho!r})"
        )

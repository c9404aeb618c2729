"""
Discretization Strategies

═══════════════════════════════════════════════════════════════════════════════
FROM SDE COEFFICIENTS TO A SINGLE TIME STEP
═══════════════════════════════════════════════════════════════════════════════

For an n-dimensional Itô process

    dX_t = μ(t, X_t) dt + σ(t, X_t) dW_t

a discretization turns the process coefficients into the ingredients of one
step of length Δt starting from (t₀, x₀):

    drift increment        a(t₀, x₀, Δt)
    diffusion increment    b(t₀, x₀, Δt)     (matrix, multiplies Z ~ N(0, I))
    covariance             b·bᵀ

The process then advances the state with

    x₁ = apply(x₀, a + b·Z)

EULER:
    a = μ(t₀, x₀)·Δt
    b = σ(t₀, x₀)·√Δt
    Cov = σ·σᵀ·Δt

The strategy never touches the state itself: any nonlinearity (log-price
updates, variance floors) stays inside the process.

═══════════════════════════════════════════════════════════════════════════════
"""

import numpy as np


class Discretization:
    """Interface for single-step discretization schemes."""

    def drift(self, process, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        raise NotImplementedError

    def diffusion(self, process, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        raise NotImplementedError

    def covariance(self, process, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        raise NotImplementedError


class EulerDiscretization(Discretization):
    """Euler-Maruyama scheme."""

    def drift(self, process, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        return process.drift(t0, x0) * dt

    def diffusion(self, process, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        return process.diffusion(t0, x0) * np.sqrt(dt)

    def covariance(self, process, t0: float, x0: np.ndarray, dt: float) -> np.ndarray:
        sigma = process.diffusion(t0, x0)
        return sigma @ sigma.T * dt

    def __repr__(self) -> str:
        return "EulerDiscretization()"

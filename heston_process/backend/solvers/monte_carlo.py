"""
Monte Carlo Path Evolution

═══════════════════════════════════════════════════════════════════════════════
DRIVING A STOCHASTIC PROCESS THROUGH A TIME GRID
═══════════════════════════════════════════════════════════════════════════════

Given a time grid 0 = t₀ < t₁ < ... < t_N and a process with n factors, each
path is built from

    x(t₀) = initial_values()
    x(t_{i+1}) = evolve(t_i, x(t_i), Δt_i, Z_i),    Z_i ~ N(0, I_n)

For the Heston process with the Euler discretization this is the full
truncation scheme:

    V⁺ = max(V_i, 0)
    ln S_{i+1} = ln S_i + (r - q - V⁺/2)Δt + √V⁺·√Δt·Z₁
    V_{i+1}    = V_i + κ(θ - V⁺)Δt + σ√V⁺·√Δt·(ρZ₁ + √(1-ρ²)Z₂)

V_{i+1} can be negative; it is floored only when the next step reads it.

The simulator only produces raw state paths. Payoffs, discounting and
statistics belong to the caller.

═══════════════════════════════════════════════════════════════════════════════
"""

import datetime
import numpy as np
from typing import Optional, Sequence, Tuple

from heston_process.backend.core.process import StochasticProcess


def time_grid(T: float, N_steps: int) -> np.ndarray:
    """Uniform grid of N_steps steps on [0, T]."""
    if T <= 0:
        raise ValueError(f"T must be positive, got {T}")
    if N_steps <= 0:
        raise ValueError(f"N_steps must be positive, got {N_steps}")
    return np.linspace(0.0, T, N_steps + 1)


class MonteCarloSimulator:
    """
    Evolves state paths of a stochastic process step by step.

    Args:
        process: Process exposing initial_values() and evolve()
    """

    def __init__(self, process: StochasticProcess):
        self.process = process

    def simulate(
        self,
        times: Sequence[float],
        N_paths: int,
        seed: Optional[int] = None
    ) -> np.ndarray:
        """
        Simulate paths on an arbitrary time grid.

        Each path is stepped through process.evolve() one step at a time, so
        cost grows as N_paths x len(times) Python calls. This is the reference
        consumer of the discretization contract, not a vectorized engine.

        Args:
            times: Increasing times, starting at the evaluation time
            N_paths: Number of paths
            seed: Random seed (optional)

        Returns:
            Array of shape (N_paths, len(times), process.size())
        """
        times = np.asarray(times, dtype=float)
        if times.ndim != 1 or len(times) < 2:
            raise ValueError("time grid needs at least two points")
        if np.any(np.diff(times) <= 0):
            raise ValueError("time grid must be strictly increasing")
        if N_paths <= 0:
            raise ValueError(f"N_paths must be positive, got {N_paths}")

        rng = np.random.default_rng(seed)
        size = self.process.size()
        factors = self.process.factors()
        dts = np.diff(times)

        paths = np.empty((N_paths, len(times), size))
        x0 = self.process.initial_values()

        for j in range(N_paths):
            x = x0
            paths[j, 0] = x
            dw = rng.standard_normal((len(dts), factors))
            for i, dt in enumerate(dts):
                x = self.process.evolve(times[i], x, dt, dw[i])
                paths[j, i + 1] = x

        return paths

    def simulate_paths(
        self,
        T: float,
        N_steps: int,
        N_paths: int,
        seed: Optional[int] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Simulate Heston paths on a uniform grid.

        Args:
            T: Time horizon
            N_steps: Number of time steps
            N_paths: Number of simulation paths
            seed: Random seed (optional)

        Returns:
            S_paths: Asset price paths, shape (N_paths, N_steps+1)
            V_paths: Raw variance paths, shape (N_paths, N_steps+1)
        """
        paths = self.simulate(time_grid(T, N_steps), N_paths, seed)
        return paths[:, :, 0], paths[:, :, 1]

    def simulate_to_dates(
        self,
        dates: Sequence[datetime.date],
        N_paths: int,
        seed: Optional[int] = None
    ) -> Tuple[np.ndarray, np.ndarray]:
        """
        Simulate paths observed at calendar dates.

        Dates are mapped to model time with process.time(); the grid starts
        at t = 0 (the risk-free curve's reference date).

        Returns:
            (times, paths) where paths has shape (N_paths, len(dates)+1, size)
        """
        times = np.concatenate([[0.0], [self.process.time(d) for d in dates]])
        return times, self.simulate(times, N_paths, seed)

import numpy as np
import pytest

from .common import Discretization, EulerDiscretization, make_process


class RecordingDiscretization(EulerDiscretization):
    """Euler scheme that records the times it was asked about."""

    def __init__(self):
        self.calls = []

    def drift(self, process, t0, x0, dt):
        self.calls.append(('drift', t0, dt))
        return super().drift(process, t0, x0, dt)

    def diffusion(self, process, t0, x0, dt):
        self.calls.append(('diffusion', t0, dt))
        return super().diffusion(process, t0, x0, dt)


def test_default_discretization_is_euler():
    process = make_process()
    assert isinstance(process.discretization(), EulerDiscretization)


def test_euler_single_step_quantities():
    process = make_process(r=0.05, q=0.01, kappa=1.5, theta=0.06, sigma=0.4, rho=-0.3)
    t0, x0, dt = 0.5, np.array([95.0, 0.05]), 0.01

    mu = process.drift(t0, x0)
    sig = process.diffusion(t0, x0)

    np.testing.assert_allclose(process.std_deviation(t0, x0, dt), sig * np.sqrt(dt))
    np.testing.assert_allclose(process.expectation(t0, x0, dt), process.apply(x0, mu * dt))

    expected_cov = dt * 0.05 * np.array([[1.0, -0.3 * 0.4], [-0.3 * 0.4, 0.4 ** 2]])
    np.testing.assert_allclose(process.covariance(t0, x0, dt), expected_cov, rtol=1e-12)


def test_evolve_combines_drift_and_diffusion_before_apply():
    process = make_process(r=0.03, q=0.01, kappa=2.0, theta=0.04, sigma=0.3, rho=-0.6)
    t0, x0, dt = 0.0, np.array([100.0, 0.04]), 1.0 / 252
    dw = np.array([0.7, -1.2])

    x1 = process.evolve(t0, x0, dt, dw)

    dx = process.drift(t0, x0) * dt + process.diffusion(t0, x0) @ dw * np.sqrt(dt)
    np.testing.assert_allclose(x1, [x0[0] * np.exp(dx[0]), x0[1] + dx[1]], rtol=1e-14)


def test_evolve_with_zero_noise_is_expectation():
    process = make_process()
    x0 = np.array([100.0, 0.09])
    np.testing.assert_allclose(
        process.evolve(0.0, x0, 0.1, [0.0, 0.0]),
        process.expectation(0.0, x0, 0.1)
    )


def test_evolve_from_negative_variance_is_deterministic():
    process = make_process(r=0.02, q=0.0, kappa=2.0, theta=0.04)
    x0 = np.array([100.0, -0.01])
    dt = 0.01

    x1 = process.evolve(0.0, x0, dt, [3.0, -3.0])

    # noise is switched off by the floor, variance mean-reverts from x0[1]
    assert x1[0] == pytest.approx(100.0 * np.exp(0.02 * dt))
    assert x1[1] == pytest.approx(-0.01 + 2.0 * 0.04 * dt)


def test_evolve_rejects_wrong_noise_dimension():
    process = make_process()
    with pytest.raises(ValueError):
        process.evolve(0.0, [100.0, 0.04], 0.01, [0.1])
    with pytest.raises(ValueError):
        process.evolve(0.0, [100.0], 0.01, [0.1, 0.2])


def test_custom_discretization_is_used():
    scheme = RecordingDiscretization()
    process = make_process(discretization=scheme)

    process.evolve(0.25, [100.0, 0.04], 0.05, [0.0, 0.0])

    assert process.discretization() is scheme
    assert scheme.calls == [('drift', 0.25, 0.05), ('diffusion', 0.25, 0.05)]


def test_base_discretization_is_abstract():
    scheme = Discretization()
    process = make_process()
    with pytest.raises(NotImplementedError):
        scheme.drift(process, 0.0, np.array([100.0, 0.04]), 0.1)

import numpy as np
import pytest

from .common import make_process


@pytest.mark.parametrize("rho", np.linspace(-1.0, 1.0, 9))
@pytest.mark.parametrize("variance", [1e-6, 0.04, 0.25])
def test_second_row_norm_matches_variance_volatility(rho, variance):
    sigma = 0.45
    process = make_process(sigma=sigma, rho=rho)

    m = process.diffusion(1.0, [100.0, variance])
    sigma1 = np.sqrt(variance)

    assert m[1, 0] ** 2 + m[1, 1] ** 2 == pytest.approx((sigma * sigma1) ** 2, rel=1e-12)


def test_diffusion_entries():
    process = make_process(sigma=0.3, rho=-0.6)

    m = process.diffusion(0.0, [100.0, 0.04])

    np.testing.assert_allclose(m, [
        [0.2, 0.0],
        [-0.6 * 0.3 * 0.2, 0.8 * 0.3 * 0.2],
    ], rtol=1e-14)


def test_diffusion_reproduces_correlated_covariance():
    rho, sigma, v = 0.35, 0.5, 0.09
    process = make_process(sigma=sigma, rho=rho)

    m = process.diffusion(0.0, [100.0, v])

    expected = v * np.array([[1.0, rho * sigma], [rho * sigma, sigma ** 2]])
    np.testing.assert_allclose(m @ m.T, expected, rtol=1e-12)
    np.testing.assert_allclose(np.linalg.cholesky(expected), m, rtol=1e-12, atol=1e-15)


def test_out_of_range_correlation_is_not_validated():
    process = make_process(rho=1.5)

    with np.errstate(invalid='ignore'):
        m = process.diffusion(0.0, [100.0, 0.04])

    assert np.isnan(m[1, 1])
    assert m[1, 0] == pytest.approx(1.5 * 0.3 * 0.2)
    assert m[0, 0] == pytest.approx(0.2)

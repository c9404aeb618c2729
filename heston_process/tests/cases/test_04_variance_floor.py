import numpy as np
import pytest

from .common import make_process


@pytest.mark.parametrize("variance", [0.0, -1e-12, -0.01, -1.0])
def test_drift_floors_negative_variance(variance):
    process = make_process(r=0.03, q=0.01, kappa=2.0, theta=0.04)

    drift = process.drift(0.5, [100.0, variance])

    assert drift[1] == 2.0 * 0.04
    assert drift[0] == pytest.approx(0.03 - 0.01)


@pytest.mark.parametrize("variance", [0.0, -1e-12, -0.01, -1.0])
def test_diffusion_vanishes_for_non_positive_variance(variance):
    process = make_process()

    m = process.diffusion(0.5, [100.0, variance])

    np.testing.assert_array_equal(m[0], [0.0, 0.0])
    np.testing.assert_array_equal(m, np.zeros((2, 2)))


def test_drift_uses_floored_variance_in_mean_reversion():
    process = make_process(r=0.05, q=0.02, kappa=1.5, theta=0.09)

    drift = process.drift(0.0, [80.0, 0.16])

    assert drift[0] == pytest.approx(0.05 - 0.02 - 0.5 * 0.16)
    assert drift[1] == pytest.approx(1.5 * (0.09 - 0.16))


def test_drift_does_not_depend_on_price_level():
    process = make_process()
    np.testing.assert_allclose(
        process.drift(0.25, [50.0, 0.05]),
        process.drift(0.25, [150.0, 0.05])
    )


def test_drift_rejects_wrong_dimension():
    process = make_process()
    with pytest.raises(ValueError):
        process.drift(0.0, [100.0])
    with pytest.raises(ValueError):
        process.drift(0.0, [100.0, 0.04, 1.0])
    with pytest.raises(ValueError):
        process.diffusion(0.0, [[100.0, 0.04]])

import datetime
import numpy as np

from heston_process.backend.core.observable import (
    Handle,
    Observer,
    RelinkableHandle,
    SimpleQuote,
    UninitializedHandleError,
)
from heston_process.backend.core.term_structure import Actual360, Actual365Fixed, FlatForward, ZeroCurve
from heston_process.backend.core.discretization import Discretization, EulerDiscretization
from heston_process.backend.core.process import HestonProcess, StochasticProcess
from heston_process.backend.core.parameters import (
    HestonParams,
    build_process,
    get_default_params,
    get_heston_1993_params,
)
from heston_process.backend.solvers.monte_carlo import MonteCarloSimulator, time_grid

try:
    import QuantLib as ql
    QUANTLIB_AVAILABLE = True
except Exception:
    QUANTLIB_AVAILABLE = False


REFERENCE_DATE = datetime.date(2026, 1, 2)


class NotificationCounter(Observer):
    """Observer that counts update() calls."""

    def __init__(self):
        super().__init__()
        self.count = 0

    def update(self):
        self.count += 1


def make_process(
    r: float = 0.02,
    q: float = 0.0,
    S0: float = 100.0,
    v0: float = 0.04,
    kappa: float = 2.0,
    theta: float = 0.04,
    sigma: float = 0.3,
    rho: float = -0.6,
    discretization: Discretization = None
) -> HestonProcess:
    """Heston process on flat Actual/365 curves dated REFERENCE_DATE."""
    day_counter = Actual365Fixed()
    return HestonProcess(
        Handle(FlatForward(REFERENCE_DATE, r, day_counter)),
        Handle(FlatForward(REFERENCE_DATE, q, day_counter)),
        Handle(SimpleQuote(S0)),
        v0, kappa, theta, sigma, rho,
        discretization=discretization
    )


def quantlib_heston_process(r: float, q: float, S0: float, v0: float, kappa: float,
                            theta: float, sigma: float, rho: float, discretization=None):
    if not QUANTLIB_AVAILABLE:
        raise RuntimeError("QuantLib is not installed")

    evaluation_date = ql.Date(REFERENCE_DATE.day, REFERENCE_DATE.month, REFERENCE_DATE.year)
    ql.Settings.instance().evaluationDate = evaluation_date
    day_count = ql.Actual365Fixed()

    spot_handle = ql.QuoteHandle(ql.SimpleQuote(S0))
    risk_free_ts = ql.YieldTermStructureHandle(ql.FlatForward(evaluation_date, r, day_count))
    dividend_ts = ql.YieldTermStructureHandle(ql.FlatForward(evaluation_date, q, day_count))

    if discretization is None:
        return ql.HestonProcess(risk_free_ts, dividend_ts, spot_handle, v0, kappa, theta, sigma, rho)
    return ql.HestonProcess(risk_free_ts, dividend_ts, spot_handle, v0, kappa, theta, sigma, rho,
                            discretization)


def to_ql_array(x):
    a = ql.Array(len(x))
    for i, value in enumerate(x):
        a[i] = float(value)
    return a

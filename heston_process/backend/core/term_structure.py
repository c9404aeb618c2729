"""
Day Counters and Yield Term Structures

═══════════════════════════════════════════════════════════════════════════════
DATE → MODEL TIME AND RATE LOOKUPS
═══════════════════════════════════════════════════════════════════════════════

1. DAY COUNTERS:
   τ(d₁, d₂) = days(d₁, d₂) / basis

   - Actual/365 (Fixed): basis = 365
   - Actual/360:         basis = 360

   Both return negative fractions when d₂ precedes d₁.

2. CONTINUOUSLY COMPOUNDED RATES:
   Discount factor:  P(t) = exp(-z(t)·t)
   Forward rate:     f(t₁, t₂) = ln(P(t₁)/P(t₂)) / (t₂ - t₁)

   Instantaneous forward f(t, t) is approximated over the centered interval
   [t - Δ/2, t + Δ/2] with Δ = 1e-4 years, shifted to [0, Δ] when t < Δ/2.

3. CURVES:
   - FlatForward: constant rate r, f(t₁, t₂) = r
   - ZeroCurve:   linear interpolation of z(t) between pillars,
                  flat extrapolation outside them

═══════════════════════════════════════════════════════════════════════════════
"""

import datetime
import numpy as np
from typing import Sequence, Union
from scipy.interpolate import interp1d

from heston_process.backend.core.observable import Handle, Observable, Observer, Quote, SimpleQuote


# ═══════════════════════════════════════════════════════════════════════════════
# DAY COUNTERS
# ═══════════════════════════════════════════════════════════════════════════════

class DayCounter:
    """Actual day count divided by a fixed basis."""

    basis = 365.0

    def name(self) -> str:
        return type(self).__name__

    def day_count(self, d1: datetime.date, d2: datetime.date) -> int:
        return (d2 - d1).days

    def year_fraction(self, d1: datetime.date, d2: datetime.date) -> float:
        return self.day_count(d1, d2) / self.basis

    def __eq__(self, other) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return f"{self.name()}()"


class Actual365Fixed(DayCounter):
    basis = 365.0


class Actual360(DayCounter):
    basis = 360.0


# ═══════════════════════════════════════════════════════════════════════════════
# YIELD TERM STRUCTURES
# ═══════════════════════════════════════════════════════════════════════════════

class YieldTermStructure(Observable, Observer):
    """
    Interest-rate curve with continuous compounding.

    Subclasses implement zero_rate(t); everything else is derived from it.

    Args:
        reference_date: Date at which t = 0
        day_counter: Convention mapping dates to times
    """

    # Interval used for instantaneous forwards
    dt = 1e-4

    def __init__(self, reference_date: datetime.date, day_counter: DayCounter = None):
        super().__init__()
        self._reference_date = reference_date
        self._day_counter = day_counter or Actual365Fixed()

    def reference_date(self) -> datetime.date:
        return self._reference_date

    def day_counter(self) -> DayCounter:
        return self._day_counter

    def time_from_reference(self, date: datetime.date) -> float:
        return self._day_counter.year_fraction(self._reference_date, date)

    def zero_rate(self, t: float) -> float:
        raise NotImplementedError

    def discount(self, t: float) -> float:
        """P(t) = exp(-z(t)·t)"""
        return float(np.exp(-self.zero_rate(t) * t))

    def forward_rate(self, t1: float, t2: float) -> float:
        """
        Continuously compounded forward rate between t1 and t2.

        When t2 == t1 the instantaneous forward is approximated over the
        centered interval [t1 - dt/2, t1 + dt/2], shifted to [0, dt] near the
        reference time.
        """
        if t2 == t1:
            t1 = max(t1 - self.dt / 2.0, 0.0)
            t2 = t1 + self.dt
        if t2 < t1:
            raise ValueError(f"t2 ({t2}) < t1 ({t1})")
        return float(np.log(self.discount(t1) / self.discount(t2)) / (t2 - t1))

    def update(self) -> None:
        self.notify_observers()


class FlatForward(YieldTermStructure):
    """
    Flat curve at a single continuously compounded rate.

    The rate may be a float or a live Quote/Handle; changes to a quote
    are forwarded to the curve's observers.
    """

    def __init__(
        self,
        reference_date: datetime.date,
        rate: Union[float, Quote, Handle],
        day_counter: DayCounter = None
    ):
        super().__init__(reference_date, day_counter)
        if isinstance(rate, (Quote, Handle)):
            self._rate = rate
        else:
            self._rate = SimpleQuote(rate)
        self.register_with(self._rate)

    def rate(self) -> float:
        if isinstance(self._rate, Handle):
            return self._rate.current_link().value()
        return self._rate.value()

    def zero_rate(self, t: float) -> float:
        return self.rate()

    def forward_rate(self, t1: float, t2: float) -> float:
        if t2 < t1:
            raise ValueError(f"t2 ({t2}) < t1 ({t1})")
        return self.rate()

    def __repr__(self) -> str:
        return f"FlatForward({self._reference_date}, {self._rate!r}, {self._day_counter!r})"


class ZeroCurve(YieldTermStructure):
    """
    Curve interpolating continuously compounded zero rates.

    Args:
        reference_date: Date at which t = 0
        pillars: Pillar dates, or pillar times in years
        zero_rates: Zero rate at each pillar
        day_counter: Convention mapping dates to times
    """

    def __init__(
        self,
        reference_date: datetime.date,
        pillars: Sequence[Union[datetime.date, float]],
        zero_rates: Sequence[float],
        day_counter: DayCounter = None
    ):
        super().__init__(reference_date, day_counter)
        times = np.array([
            self.time_from_reference(p) if isinstance(p, datetime.date) else float(p)
            for p in pillars
        ])
        rates = np.asarray(zero_rates, dtype=float)

        if len(times) != len(rates):
            raise ValueError(
                f"{len(times)} pillars but {len(rates)} zero rates"
            )
        if len(times) == 0:
            raise ValueError("at least one pillar required")
        if np.any(np.diff(times) <= 0):
            raise ValueError("pillar times must be strictly increasing")

        self.times = times
        self.rates = rates

        if len(times) == 1:
            self._interpolator = lambda t: rates[0]
        else:
            self._interpolator = interp1d(
                times, rates,
                kind='linear',
                bounds_error=False,
                fill_value=(rates[0], rates[-1])
            )

    def zero_rate(self, t: float) -> float:
        return float(self._interpolator(t))

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import date
from typing import Callable, Final, Iterable, Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from .config import EPSILON
from .errors import DidNotConverge
from .utils import (
    MONTHS_IN_YEAR,
    add_months,
    pct_to_rate,
    require_between,
    require_non_negative,
    require_positive,
)

logger = logging.getLogger(__name__)

MAX_RATE_PCT: Final[float] = 100.0
MIN_TERM_YEARS: Final[float] = 1.0
MAX_TERM_YEARS: Final[float] = 50.0

SCHEDULE_COLUMNS: Final[List[str]] = [
    "index",
    "scheduled_payment",
    "extra_payment",
    "principal_portion",
    "interest_portion",
    "remaining_balance",
    "cumulative_interest",
]


@dataclass(frozen=True)
class LoanTerms:
    principal: float
    annual_rate_pct: float  # 6.5 means 6.5 %
    term_years: float

    def validate(self) -> "LoanTerms":
        validate_loan_terms(self.principal, self.annual_rate_pct, self.term_years)
        return self

    @property
    def n_payments(self) -> int:
        return _n_payments(self.term_years)

    @property
    def monthly_rate(self) -> float:
        return pct_to_rate(self.annual_rate_pct) / MONTHS_IN_YEAR


@dataclass(frozen=True)
class PaymentScheduleEntry:
    index: int
    scheduled_payment: float
    extra_payment: float
    principal_portion: float
    interest_portion: float
    remaining_balance: float
    cumulative_interest: float


@dataclass(frozen=True)
class LoanOutcome:
    principal: float
    monthly_payment: float
    total_payments: int
    total_interest: float
    total_extra: float
    total_cost: float
    payoff_month_offset: int

    def payoff_date(self, start: date) -> date:
        """Date of the final payment for a loan originated on ``start``."""
        return add_months(start, self.payoff_month_offset)


def validate_loan_terms(principal: float, annual_rate_pct: float, term_years: float) -> None:
    require_positive("principal", principal)
    require_non_negative("annual_rate_pct", annual_rate_pct)
    require_between("annual_rate_pct", annual_rate_pct, 0.0, MAX_RATE_PCT)
    require_between("term_years", term_years, MIN_TERM_YEARS, MAX_TERM_YEARS)


def _n_payments(term_years: float) -> int:
    return int(round(float(term_years) * MONTHS_IN_YEAR))


def _fixed_monthly_payment(principal: float, monthly_rate: float, n_months: int) -> float:
    """Compute the fixed monthly payment for a fully amortizing loan.

    Parameters
    ----------
    principal : float
        Initial loan amount.
    monthly_rate : float
        Periodic interest rate as a decimal (e.g., 0.005 for 6% a year).
    n_months : int
        Number of monthly payments.

    Returns
    -------
    float
        The constant monthly payment.
    """
    if principal <= 0 or n_months <= 0:
        return 0.0
    if monthly_rate == 0:
        return principal / n_months
    factor = (1 + monthly_rate) ** n_months
    return principal * (monthly_rate * factor) / (factor - 1)


def compute_monthly_payment(principal: float, annual_rate_pct: float, term_years: float) -> float:
    """Level monthly payment that repays ``principal`` over ``term_years``.

    A zero rate yields exactly ``principal / (term_years * 12)``.
    """
    validate_loan_terms(principal, annual_rate_pct, term_years)
    monthly_rate = pct_to_rate(annual_rate_pct) / MONTHS_IN_YEAR
    return _fixed_monthly_payment(float(principal), monthly_rate, _n_payments(term_years))


def amortize(
    principal: float,
    monthly_rate: float,
    payment: float,
    max_periods: int,
    extra_for: Optional[Callable[[int], float]] = None,
) -> Iterator[PaymentScheduleEntry]:
    """Yield schedule entries until the balance is repaid.

    This is the single payment loop shared by the plain schedule and the
    extra-payment simulator. ``extra_for(index)`` returns the additional
    principal to pay in period ``index``; it is capped so the balance never
    goes negative.

    Once the balance drops to ``EPSILON`` or below, the residual is folded
    into the final principal portion and the balance is set to exactly 0.
    If ``max_periods`` entries have been produced and the balance is still
    above ``EPSILON``, ``DidNotConverge`` is raised.
    """
    balance = float(principal)
    cumulative_interest = 0.0
    for index in range(1, max_periods + 1):
        interest = balance * monthly_rate
        principal_component = min(payment - interest, balance)

        # Guard against negative principal component when the payment does not cover interest
        if principal_component < 0:
            principal_component = 0.0

        extra = extra_for(index) if extra_for is not None else 0.0
        extra = max(0.0, min(extra, balance - principal_component))

        new_balance = balance - principal_component - extra
        if new_balance <= EPSILON:
            principal_component += new_balance
            new_balance = 0.0

        cumulative_interest += interest
        yield PaymentScheduleEntry(
            index=index,
            scheduled_payment=principal_component + interest,
            extra_payment=extra,
            principal_portion=principal_component,
            interest_portion=interest,
            remaining_balance=new_balance,
            cumulative_interest=cumulative_interest,
        )
        if new_balance == 0.0:
            return
        balance = new_balance

    raise DidNotConverge(max_periods, balance)


def iter_schedule(principal: float, annual_rate_pct: float, term_years: float) -> Iterator[PaymentScheduleEntry]:
    """Lazily produce the amortization schedule.

    Inputs are validated eagerly, so a bad parameter raises here rather than
    on the first ``next()``. The returned iterator is single-use.
    """
    payment = compute_monthly_payment(principal, annual_rate_pct, term_years)
    monthly_rate = pct_to_rate(annual_rate_pct) / MONTHS_IN_YEAR
    return amortize(principal, monthly_rate, payment, _n_payments(term_years))


def generate_schedule(principal: float, annual_rate_pct: float, term_years: float) -> List[PaymentScheduleEntry]:
    return list(iter_schedule(principal, annual_rate_pct, term_years))


def outcome_from_schedule(
    entries: Sequence[PaymentScheduleEntry], monthly_payment: float, principal: float
) -> LoanOutcome:
    total_interest = sum(e.interest_portion for e in entries)
    total_extra = sum(e.extra_payment for e in entries)
    total_cost = sum(e.scheduled_payment + e.extra_payment for e in entries)
    return LoanOutcome(
        principal=float(principal),
        monthly_payment=float(monthly_payment),
        total_payments=len(entries),
        total_interest=total_interest,
        total_extra=total_extra,
        total_cost=total_cost,
        payoff_month_offset=len(entries),
    )


def remaining_balance(principal: float, annual_rate_pct: float, term_years: float, payments_made: int) -> float:
    """Outstanding balance after ``payments_made`` regular payments.

    Closed form: payment * ((1+r)^k - 1) / (r * (1+r)^k) with k the number
    of payments left. Every remaining-balance figure in the package comes
    from here.
    """
    payment = compute_monthly_payment(principal, annual_rate_pct, term_years)
    n_months = _n_payments(term_years)
    if payments_made <= 0:
        return float(principal)
    if payments_made >= n_months:
        return 0.0
    monthly_rate = pct_to_rate(annual_rate_pct) / MONTHS_IN_YEAR
    if monthly_rate == 0:
        return max(0.0, float(principal) - payment * payments_made)
    remaining = n_months - payments_made
    factor = (1 + monthly_rate) ** remaining
    return payment * (factor - 1) / (monthly_rate * factor)


def schedule_frame(entries: Iterable[PaymentScheduleEntry]) -> pd.DataFrame:
    """Tabular view of a schedule, one row per payment."""
    rows = [asdict(e) for e in entries]
    if not rows:
        return pd.DataFrame(columns=SCHEDULE_COLUMNS, data=[])
    return pd.DataFrame(rows, columns=SCHEDULE_COLUMNS)


def aggregate_yearly(schedule: pd.DataFrame) -> pd.DataFrame:
    """Aggregate a monthly schedule by loan year.

    Returns a DataFrame with columns: year, scheduled_payment, extra_payment,
    principal_portion, interest_portion, end_balance
    """
    if schedule.empty:
        return pd.DataFrame(
            columns=["year", "scheduled_payment", "extra_payment", "principal_portion", "interest_portion", "end_balance"],
            data=[],
        )

    schedule = schedule.copy()
    schedule["year"] = (schedule["index"] - 1) // MONTHS_IN_YEAR + 1
    agg = (
        schedule.groupby("year", as_index=False)[
            ["scheduled_payment", "extra_payment", "principal_portion", "interest_portion"]
        ]
        .sum()
        .sort_values("year")
    )
    # Capture ending balance per year
    end_balances = (
        schedule.groupby("year", as_index=False)["remaining_balance"]
        .last()
        .rename(columns={"remaining_balance": "end_balance"})
    )
    return agg.merge(end_balances, on="year", how="left")


@dataclass(frozen=True)
class AmortizationSummary:
    payment_monthly: float
    entries: Tuple[PaymentScheduleEntry, ...]
    outcome: LoanOutcome
    schedule_monthly: pd.DataFrame
    schedule_yearly: pd.DataFrame


def summarize(terms: LoanTerms) -> AmortizationSummary:
    """Convenience wrapper returning payment, schedules and the aggregate outcome."""
    terms.validate()
    payment = compute_monthly_payment(terms.principal, terms.annual_rate_pct, terms.term_years)
    entries = tuple(iter_schedule(terms.principal, terms.annual_rate_pct, terms.term_years))
    outcome = outcome_from_schedule(entries, payment, terms.principal)
    monthly = schedule_frame(entries)
    logger.debug(
        "amortized %.2f at %.3f%% over %s years: payment=%.2f, %d payments",
        terms.principal,
        terms.annual_rate_pct,
        terms.term_years,
        payment,
        outcome.total_payments,
    )
    return AmortizationSummary(
        payment_monthly=payment,
        entries=entries,
        outcome=outcome,
        schedule_monthly=monthly,
        schedule_yearly=aggregate_yearly(monthly),
    )

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple, Union

from .amortization import (
    LoanOutcome,
    LoanTerms,
    PaymentScheduleEntry,
    aggregate_yearly,
    amortize,
    compute_monthly_payment,
    outcome_from_schedule,
    schedule_frame,
)
from .config import RATING_BENEFICIAL_ABOVE, RATING_EXCELLENT_ABOVE, RATING_GOOD_ABOVE
from .errors import InvalidParameter
from .utils import MONTHS_IN_YEAR

logger = logging.getLogger(__name__)


# ------------------------- Strategies ------------------------- #
@dataclass(frozen=True)
class NoExtra:
    kind = "none"

    def extra_for(self, index: int) -> float:
        return 0.0


@dataclass(frozen=True)
class MonthlyExtra:
    amount: float
    kind = "monthly"

    def extra_for(self, index: int) -> float:
        return max(0.0, float(self.amount))


@dataclass(frozen=True)
class AnnualExtra:
    """Extra payment made with every 12th payment (months 12, 24, ...)."""

    amount: float
    kind = "annual"

    def extra_for(self, index: int) -> float:
        if index % MONTHS_IN_YEAR != 0:
            return 0.0
        return max(0.0, float(self.amount))


@dataclass(frozen=True)
class OneTimeExtra:
    amount: float
    at_payment_index: int
    kind = "one_time"

    def extra_for(self, index: int) -> float:
        if index != self.at_payment_index:
            return 0.0
        return max(0.0, float(self.amount))


ExtraPaymentStrategy = Union[NoExtra, MonthlyExtra, AnnualExtra, OneTimeExtra]

_KIND_ALIASES = {
    "none": "none",
    "monthly": "monthly",
    "annual": "annual",
    "yearly": "annual",
    "one_time": "one_time",
    "onetime": "one_time",
    "one-time": "one_time",
}


def strategy_from_params(kind: str, amount: float = 0.0, target_month: Optional[int] = None) -> ExtraPaymentStrategy:
    """Build a strategy from the flat ``strategyKind/Amount/TargetMonth`` group.

    A non-positive amount yields ``NoExtra``: it is a no-op, not an error.
    """
    normalized = _KIND_ALIASES.get(str(kind or "").strip().lower())
    if normalized is None:
        raise InvalidParameter("strategy_kind", kind, f"must be one of {sorted(set(_KIND_ALIASES.values()))}")
    if normalized == "none" or amount is None or amount <= 0:
        return NoExtra()
    if normalized == "monthly":
        return MonthlyExtra(float(amount))
    if normalized == "annual":
        return AnnualExtra(float(amount))
    if target_month is None or int(target_month) < 1:
        raise InvalidParameter("strategy_target_month", target_month, "one-time extra needs a payment index >= 1")
    return OneTimeExtra(float(amount), int(target_month))


# ------------------------- Simulation ------------------------- #
@dataclass(frozen=True)
class SavingsSummary:
    interest_saved: float
    months_saved: int
    total_cost_saved: float
    percent_saved: float


def simulate(loan: LoanTerms, strategy: ExtraPaymentStrategy) -> Tuple[List[PaymentScheduleEntry], LoanOutcome]:
    """Replay the amortization loop with extra principal injected by ``strategy``.

    The regular payment is that of the un-accelerated loan; extra payments
    shorten the schedule rather than lower the installment.
    """
    loan.validate()
    payment = compute_monthly_payment(loan.principal, loan.annual_rate_pct, loan.term_years)
    entries = list(
        amortize(
            loan.principal,
            loan.monthly_rate,
            payment,
            loan.n_payments,
            extra_for=strategy.extra_for,
        )
    )
    outcome = outcome_from_schedule(entries, payment, loan.principal)
    logger.debug(
        "simulated %s strategy on %.2f: %d payments, interest=%.2f",
        strategy.kind,
        loan.principal,
        outcome.total_payments,
        outcome.total_interest,
    )
    return entries, outcome


def compare_to_baseline(baseline: LoanOutcome, accelerated: LoanOutcome) -> SavingsSummary:
    interest_saved = baseline.total_interest - accelerated.total_interest
    if baseline.total_interest:
        percent_saved = interest_saved / baseline.total_interest * 100.0
    else:
        percent_saved = 0.0
    return SavingsSummary(
        interest_saved=interest_saved,
        months_saved=baseline.total_payments - accelerated.total_payments,
        total_cost_saved=baseline.total_cost - accelerated.total_cost,
        percent_saved=percent_saved,
    )


def savings_rating(interest_saved: float) -> str:
    if interest_saved > RATING_EXCELLENT_ABOVE:
        return "excellent"
    if interest_saved > RATING_GOOD_ABOVE:
        return "good"
    if interest_saved > RATING_BENEFICIAL_ABOVE:
        return "beneficial"
    return "modest"


# ------------------------- Breakdown ------------------------- #
@dataclass(frozen=True)
class YearlyBreakdown:
    year: int
    total_paid: float
    principal_paid: float
    interest_paid: float
    extra_paid: float
    remaining_balance: float


@dataclass(frozen=True)
class BreakdownAnalysis:
    first_year: YearlyBreakdown
    fifth_year: YearlyBreakdown
    total_regular_payments: float
    total_extra_payments: float
    total_interest_paid: float
    total_amount_paid: float


def breakdown_analysis(entries: Sequence[PaymentScheduleEntry]) -> BreakdownAnalysis:
    """Year-1 and year-5 payment breakdowns plus whole-schedule totals.

    Principal paid includes extra principal. A year past payoff reports zeros.
    """
    yearly = aggregate_yearly(schedule_frame(entries))

    def year_row(year: int) -> YearlyBreakdown:
        row = yearly.loc[yearly["year"] == year]
        if row.empty:
            return YearlyBreakdown(year, 0.0, 0.0, 0.0, 0.0, 0.0)
        r = row.iloc[0]
        extra = float(r["extra_payment"])
        return YearlyBreakdown(
            year=year,
            total_paid=float(r["scheduled_payment"]) + extra,
            principal_paid=float(r["principal_portion"]) + extra,
            interest_paid=float(r["interest_portion"]),
            extra_paid=extra,
            remaining_balance=float(r["end_balance"]),
        )

    regular = float(yearly["scheduled_payment"].sum()) if not yearly.empty else 0.0
    extra = float(yearly["extra_payment"].sum()) if not yearly.empty else 0.0
    interest = float(yearly["interest_portion"].sum()) if not yearly.empty else 0.0
    return BreakdownAnalysis(
        first_year=year_row(1),
        fifth_year=year_row(5),
        total_regular_payments=regular,
        total_extra_payments=extra,
        total_interest_paid=interest,
        total_amount_paid=regular + extra,
    )

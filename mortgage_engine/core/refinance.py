from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from .amortization import MAX_RATE_PCT, MAX_TERM_YEARS, MIN_TERM_YEARS, LoanOutcome, LoanTerms, summarize
from .config import REFINANCE_BREAK_EVEN_LIMIT_MONTHS
from .extra_payments import SavingsSummary
from .utils import months_label, require_between, require_non_negative, require_positive, usd

logger = logging.getLogger(__name__)

# Break-even never reached (monthly savings <= 0). Compares greater than any month count.
BREAK_EVEN_NEVER: float = math.inf

TIER_REFINANCE = "refinance"
TIER_TOO_LONG = "too_long"
TIER_MARGINAL = "marginal"


@dataclass(frozen=True)
class RefinanceInputs:
    current_balance: float
    current_rate_pct: float
    remaining_years: float
    new_rate_pct: float
    new_term_years: float
    closing_costs: float = 0.0
    cash_out: float = 0.0

    def validate(self) -> "RefinanceInputs":
        require_positive("current_balance", self.current_balance)
        require_between("current_rate_pct", self.current_rate_pct, 0.0, MAX_RATE_PCT)
        require_between("remaining_years", self.remaining_years, MIN_TERM_YEARS, MAX_TERM_YEARS)
        require_between("new_rate_pct", self.new_rate_pct, 0.0, MAX_RATE_PCT)
        require_between("new_term_years", self.new_term_years, MIN_TERM_YEARS, MAX_TERM_YEARS)
        require_non_negative("closing_costs", self.closing_costs)
        require_non_negative("cash_out", self.cash_out)
        return self

    def current_terms(self) -> LoanTerms:
        return LoanTerms(self.current_balance, self.current_rate_pct, self.remaining_years)

    def new_terms(self) -> LoanTerms:
        return LoanTerms(self.current_balance + self.cash_out, self.new_rate_pct, self.new_term_years)


@dataclass(frozen=True)
class BreakEven:
    closing_costs: float
    break_even_months: float  # int-valued, or BREAK_EVEN_NEVER
    worth_refinancing: bool

    @property
    def label(self) -> str:
        return months_label(self.break_even_months)


@dataclass(frozen=True)
class RefinanceComparison:
    current: LoanOutcome
    new: LoanOutcome
    savings: SavingsSummary
    monthly_payment_savings: float
    lifetime_savings: float
    break_even: BreakEven
    tier: str
    recommendation: str


def break_even_months(closing_costs: float, monthly_savings: float) -> float:
    """Months of payment savings needed to recoup ``closing_costs``."""
    if monthly_savings <= 0:
        return BREAK_EVEN_NEVER
    return math.ceil(closing_costs / monthly_savings)


def refinance_tier(break_even: BreakEven) -> str:
    if break_even.worth_refinancing:
        return TIER_REFINANCE
    if break_even.break_even_months > REFINANCE_BREAK_EVEN_LIMIT_MONTHS:
        return TIER_TOO_LONG
    return TIER_MARGINAL


def _recommendation_text(tier: str, break_even: BreakEven, monthly_payment_savings: float) -> str:
    if tier == TIER_REFINANCE:
        return (
            f"We recommend refinancing. You'll save {usd(abs(monthly_payment_savings))} monthly "
            f"and break even in {int(break_even.break_even_months)} months."
        )
    if tier == TIER_TOO_LONG:
        if math.isinf(break_even.break_even_months):
            return "We don't recommend refinancing. The new loan never recovers its closing costs."
        return (
            "We don't recommend refinancing. Break-even period is too long "
            f"({int(break_even.break_even_months)} months)."
        )
    return (
        "Refinancing may not be beneficial. Consider your long-term plans and break-even period of "
        f"{int(break_even.break_even_months)} months."
    )


def analyze(inputs: RefinanceInputs) -> RefinanceComparison:
    """Compare continuing the current loan against refinancing it.

    ``current`` continues the remaining balance at the current rate over the
    remaining term. ``new`` borrows the balance plus any cash-out at the new
    rate and term. Lifetime savings add closing costs to the new loan's cost
    and net out the cash-out principal, which goes back to the borrower.
    """
    inputs.validate()
    current = summarize(inputs.current_terms()).outcome
    new = summarize(inputs.new_terms()).outcome

    monthly_payment_savings = current.monthly_payment - new.monthly_payment
    interest_saved = current.total_interest - new.total_interest
    lifetime_savings = current.total_cost - (new.total_cost - inputs.cash_out + inputs.closing_costs)
    percent_saved = lifetime_savings / current.total_cost * 100.0 if current.total_cost else 0.0
    savings = SavingsSummary(
        interest_saved=interest_saved,
        months_saved=current.total_payments - new.total_payments,
        total_cost_saved=lifetime_savings,
        percent_saved=percent_saved,
    )

    months = break_even_months(inputs.closing_costs, monthly_payment_savings)
    worth = months <= REFINANCE_BREAK_EVEN_LIMIT_MONTHS and lifetime_savings > 0
    break_even = BreakEven(
        closing_costs=float(inputs.closing_costs),
        break_even_months=months,
        worth_refinancing=worth,
    )
    tier = refinance_tier(break_even)
    logger.debug(
        "refinance: monthly savings=%.2f, lifetime savings=%.2f, break-even=%s, tier=%s",
        monthly_payment_savings,
        lifetime_savings,
        break_even.label,
        tier,
    )
    return RefinanceComparison(
        current=current,
        new=new,
        savings=savings,
        monthly_payment_savings=monthly_payment_savings,
        lifetime_savings=lifetime_savings,
        break_even=break_even,
        tier=tier,
        recommendation=_recommendation_text(tier, break_even, monthly_payment_savings),
    )

from __future__ import annotations

from concurrent.futures import Executor
from dataclasses import dataclass
from functools import partial
from typing import Iterable, List, Optional, Sequence

from .amortization import LoanOutcome, LoanTerms, summarize
from .config import SCENARIO_EXTRA_AMOUNTS
from .extra_payments import MonthlyExtra, compare_to_baseline, savings_rating, simulate


@dataclass(frozen=True)
class ScenarioResult:
    name: str
    extra_payment: float
    months_saved: int
    interest_saved: float
    total_savings: float
    rating: str


def evaluate_monthly_extra(loan: LoanTerms, baseline: LoanOutcome, amount: float) -> ScenarioResult:
    _, outcome = simulate(loan, MonthlyExtra(amount))
    savings = compare_to_baseline(baseline, outcome)
    return ScenarioResult(
        name=f"${amount:,.0f} Monthly",
        extra_payment=float(amount),
        months_saved=savings.months_saved,
        interest_saved=savings.interest_saved,
        total_savings=savings.total_cost_saved,
        rating=savings_rating(savings.interest_saved),
    )


def generate_extra_payment_scenarios(
    loan: LoanTerms,
    amounts: Iterable[float] = SCENARIO_EXTRA_AMOUNTS,
    executor: Optional[Executor] = None,
) -> List[ScenarioResult]:
    """Evaluate one monthly-extra scenario per candidate amount.

    Results follow the order of ``amounts``. Scenarios share no state, so an
    ``executor`` may run them concurrently.
    """
    loan.validate()
    baseline = summarize(loan).outcome
    amounts = list(amounts)
    if executor is None:
        return [evaluate_monthly_extra(loan, baseline, a) for a in amounts]
    # task must stay picklable for process pools
    return list(executor.map(partial(evaluate_monthly_extra, loan, baseline), amounts))


def rank_scenarios(results: Sequence[ScenarioResult], key: str = "interest_saved") -> List[ScenarioResult]:
    return sorted(results, key=lambda r: getattr(r, key), reverse=True)


def best_scenario(results: Sequence[ScenarioResult]) -> Optional[ScenarioResult]:
    ranked = rank_scenarios(results)
    return ranked[0] if ranked else None

from .amortization import (
	LoanOutcome,
	LoanTerms,
	PaymentScheduleEntry,
	aggregate_yearly,
	compute_monthly_payment,
	generate_schedule,
	iter_schedule,
	remaining_balance,
	schedule_frame,
	summarize,
)
from .errors import DidNotConverge, InvalidParameter, MortgageEngineError
from .extra_payments import (
	AnnualExtra,
	MonthlyExtra,
	NoExtra,
	OneTimeExtra,
	SavingsSummary,
	breakdown_analysis,
	compare_to_baseline,
	savings_rating,
	simulate,
	strategy_from_params,
)
from .refinance import BREAK_EVEN_NEVER, RefinanceInputs, analyze, break_even_months
from .rent_vs_buy import RentVsBuyInputs, RentVsBuyModel, RentVsBuyProjection, project
from .scenarios import best_scenario, generate_extra_payment_scenarios, rank_scenarios
from .utils import to_record

__all__ = [
	"LoanOutcome",
	"LoanTerms",
	"PaymentScheduleEntry",
	"aggregate_yearly",
	"compute_monthly_payment",
	"generate_schedule",
	"iter_schedule",
	"remaining_balance",
	"schedule_frame",
	"summarize",
	"DidNotConverge",
	"InvalidParameter",
	"MortgageEngineError",
	"AnnualExtra",
	"MonthlyExtra",
	"NoExtra",
	"OneTimeExtra",
	"SavingsSummary",
	"breakdown_analysis",
	"compare_to_baseline",
	"savings_rating",
	"simulate",
	"strategy_from_params",
	"BREAK_EVEN_NEVER",
	"RefinanceInputs",
	"analyze",
	"break_even_months",
	"RentVsBuyInputs",
	"RentVsBuyModel",
	"RentVsBuyProjection",
	"project",
	"best_scenario",
	"generate_extra_payment_scenarios",
	"rank_scenarios",
	"to_record",
]

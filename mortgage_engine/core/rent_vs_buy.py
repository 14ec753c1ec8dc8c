from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Tuple

from .amortization import (
    MAX_RATE_PCT,
    MAX_TERM_YEARS,
    MIN_TERM_YEARS,
    LoanTerms,
    compute_monthly_payment,
    remaining_balance,
)
from .config import (
    ADVANTAGE_DEAD_BAND,
    BREAK_EVEN_SEARCH_YEARS,
    DISPLAY_YEARS,
    LONG_TERM_BUY_MARGIN,
    MONTHLY_DELTA_CONSIDERATION,
    RENT_MONTHLY_DELTA_TRIGGER,
    RENT_VS_BUY_DEFAULTS as D,
    UPFRONT_CONSIDERATION,
)
from .utils import MONTHS_IN_YEAR, grow, pct_to_rate, require_between, require_non_negative, require_positive, usd

logger = logging.getLogger(__name__)

BUY = "buy"
RENT = "rent"
NEUTRAL = "neutral"

SHORT_HORIZON_YEARS = 5
LONG_HORIZON_YEARS = 10


@dataclass(frozen=True)
class RentVsBuyInputs:
    # Purchase
    home_price: float = D["home_price"]
    down_payment_pct: float = D["down_payment_pct"]
    closing_costs: float = D["closing_costs"]

    # Loan
    interest_rate_pct: float = D["interest_rate_pct"]
    loan_term_years: float = D["loan_term_years"]

    # Ownership costs
    property_tax_rate_pct: float = D["property_tax_rate_pct"]  # of price, per year
    monthly_insurance: float = D["monthly_insurance"]
    maintenance_pct: float = D["maintenance_pct"]  # of price, per year
    monthly_hoa: float = D["monthly_hoa"]

    # Renting
    monthly_rent: float = D["monthly_rent"]
    security_deposit: float = D["security_deposit"]
    monthly_renters_insurance: float = D["monthly_renters_insurance"]

    # Growth
    home_appreciation_pct: float = D["home_appreciation_pct"]
    rent_increase_pct: float = D["rent_increase_pct"]
    investment_return_pct: float = D["investment_return_pct"]

    def validate(self) -> "RentVsBuyInputs":
        require_positive("home_price", self.home_price)
        require_between("down_payment_pct", self.down_payment_pct, 0.0, 100.0)
        require_between("interest_rate_pct", self.interest_rate_pct, 0.0, MAX_RATE_PCT)
        require_between("loan_term_years", self.loan_term_years, MIN_TERM_YEARS, MAX_TERM_YEARS)
        for name in (
            "closing_costs",
            "property_tax_rate_pct",
            "monthly_insurance",
            "maintenance_pct",
            "monthly_hoa",
            "monthly_rent",
            "security_deposit",
            "monthly_renters_insurance",
            "home_appreciation_pct",
            "rent_increase_pct",
            "investment_return_pct",
        ):
            require_non_negative(name, getattr(self, name))
        return self


@dataclass(frozen=True)
class BuyingAnalysis:
    monthly_payment: float
    total_monthly_cost: float
    down_payment: float
    loan_amount: float
    closing_costs: float
    initial_cash_outlay: float
    yearly_appreciation: float
    equity_built_5_years: float
    total_cost_5_years: float
    total_cost_10_years: float
    net_worth_5_years: float
    net_worth_10_years: float


@dataclass(frozen=True)
class RentingAnalysis:
    monthly_rent: float
    total_monthly_cost: float
    initial_deposit: float
    yearly_rent_increase_pct: float
    total_cost_5_years: float
    total_cost_10_years: float
    investment_growth_5_years: float
    investment_growth_10_years: float
    net_worth_5_years: float
    net_worth_10_years: float


@dataclass(frozen=True)
class ComparisonAnalysis:
    monthly_difference: float  # buy - rent
    cash_outlay_difference: float
    five_year_savings: float  # buying net worth - renting net worth
    ten_year_savings: float
    five_year_advantage: str
    ten_year_advantage: str


@dataclass(frozen=True)
class YearlyProjection:
    year: int
    home_value: float
    remaining_balance: float
    investment_value: float
    buying_cumulative_cost: float
    renting_cumulative_cost: float
    buying_net_worth: float
    renting_net_worth: float


@dataclass(frozen=True)
class Recommendation:
    decision: str
    confidence_pct: int
    primary_reason: str
    considerations: Tuple[str, ...]


@dataclass(frozen=True)
class RentVsBuyProjection:
    buying: BuyingAnalysis
    renting: RentingAnalysis
    comparison: ComparisonAnalysis
    break_even_year: int
    recommendation: Recommendation
    yearly: Tuple[YearlyProjection, ...]


def advantage(net_worth_difference: float) -> str:
    """Which path wins, with a dead-band so near-ties read as neutral."""
    if net_worth_difference > ADVANTAGE_DEAD_BAND:
        return BUY
    if net_worth_difference < -ADVANTAGE_DEAD_BAND:
        return RENT
    return NEUTRAL


def recommend(comparison: ComparisonAnalysis, initial_cash_outlay: float) -> Recommendation:
    """Threshold ladder over the 5- and 10-year advantages; first match wins."""
    five, ten = comparison.five_year_advantage, comparison.ten_year_advantage
    if five == BUY and ten == BUY:
        decision, confidence = BUY, 85
        reason = (
            "Buying provides significant financial advantages in both 5 and 10-year scenarios, "
            f"with potential savings of {usd(abs(comparison.ten_year_savings))} over 10 years."
        )
    elif five == RENT and ten == RENT:
        decision, confidence = RENT, 85
        reason = (
            "Renting is more cost-effective in both short and long-term scenarios, "
            f"potentially saving {usd(abs(comparison.ten_year_savings))} over 10 years."
        )
    elif ten == BUY and abs(comparison.ten_year_savings) > LONG_TERM_BUY_MARGIN:
        decision, confidence = BUY, 70
        reason = (
            "While renting may be cheaper initially, buying becomes significantly more "
            "advantageous over the long term."
        )
    elif five == RENT and comparison.monthly_difference > RENT_MONTHLY_DELTA_TRIGGER:
        decision, confidence = RENT, 75
        reason = (
            f"Renting provides immediate monthly savings of {usd(abs(comparison.monthly_difference))} "
            "and short-term financial flexibility."
        )
    else:
        decision, confidence = NEUTRAL, 60
        reason = (
            "Both options have similar financial outcomes. Your personal circumstances and "
            "preferences should guide the decision."
        )

    considerations: List[str] = []
    if comparison.monthly_difference > MONTHLY_DELTA_CONSIDERATION:
        considerations.append(f"Buying requires {usd(abs(comparison.monthly_difference))} more per month")
    if initial_cash_outlay > UPFRONT_CONSIDERATION:
        considerations.append(f"Significant upfront investment required: {usd(initial_cash_outlay)}")
    if ten == BUY:
        considerations.append("Long-term wealth building potential through home equity")
    if five == RENT:
        considerations.append("Greater flexibility and lower maintenance responsibilities with renting")

    return Recommendation(
        decision=decision,
        confidence_pct=confidence,
        primary_reason=reason,
        considerations=tuple(considerations),
    )


class RentVsBuyModel:
    def __init__(self, inputs: RentVsBuyInputs):
        self.inputs = inputs.validate()

        self.down_payment = inputs.home_price * pct_to_rate(inputs.down_payment_pct)
        self.loan_amount = max(0.0, inputs.home_price - self.down_payment)
        self.monthly_payment = (
            compute_monthly_payment(self.loan_amount, inputs.interest_rate_pct, inputs.loan_term_years)
            if self.loan_amount > 0
            else 0.0
        )
        self.n_payments = (
            LoanTerms(self.loan_amount, inputs.interest_rate_pct, inputs.loan_term_years).n_payments
            if self.loan_amount > 0
            else 0
        )
        self.initial_cash_outlay = self.down_payment + inputs.closing_costs

    # ------------------------- Core calculators ------------------------- #
    def _property_value_at(self, year_index: int) -> float:
        # year_index: 0..N
        return grow(self.inputs.home_price, pct_to_rate(self.inputs.home_appreciation_pct), year_index)

    def _remaining_balance_at(self, year_index: int) -> float:
        if self.loan_amount <= 0:
            return 0.0
        return remaining_balance(
            self.loan_amount,
            self.inputs.interest_rate_pct,
            self.inputs.loan_term_years,
            year_index * MONTHS_IN_YEAR,
        )

    def monthly_carrying_cost(self) -> float:
        """Ownership costs other than the mortgage payment."""
        price = self.inputs.home_price
        property_tax = price * pct_to_rate(self.inputs.property_tax_rate_pct) / MONTHS_IN_YEAR
        maintenance = price * pct_to_rate(self.inputs.maintenance_pct) / MONTHS_IN_YEAR
        return property_tax + self.inputs.monthly_insurance + maintenance + self.inputs.monthly_hoa

    def monthly_ownership_cost(self) -> float:
        return self.monthly_payment + self.monthly_carrying_cost()

    def monthly_renting_cost(self) -> float:
        return self.inputs.monthly_rent + self.inputs.monthly_renters_insurance

    def buying_cumulative_cost(self, year_index: int) -> float:
        # Mortgage payments stop at payoff; tax, insurance, upkeep and HOA do not
        months = MONTHS_IN_YEAR * year_index
        mortgage = self.monthly_payment * min(months, self.n_payments)
        carrying = self.monthly_carrying_cost() * months
        return mortgage + carrying + self.initial_cash_outlay

    def renting_cumulative_cost(self, year_index: int) -> float:
        # Rent steps up once a year; renters insurance stays flat
        growth = pct_to_rate(self.inputs.rent_increase_pct)
        total = self.inputs.security_deposit
        for k in range(year_index):
            rent = grow(self.inputs.monthly_rent, growth, k)
            total += (rent + self.inputs.monthly_renters_insurance) * MONTHS_IN_YEAR
        return total

    def investment_value_at(self, year_index: int) -> float:
        # Opportunity cost: the up-front cash invested instead of spent on the purchase
        return grow(self.initial_cash_outlay, pct_to_rate(self.inputs.investment_return_pct), year_index)

    def buying_net_worth(self, year_index: int) -> float:
        return (
            self._property_value_at(year_index)
            - self._remaining_balance_at(year_index)
            - self.buying_cumulative_cost(year_index)
        )

    def renting_net_worth(self, year_index: int) -> float:
        return self.investment_value_at(year_index) - self.renting_cumulative_cost(year_index)

    def year_projection(self, year_index: int) -> YearlyProjection:
        return YearlyProjection(
            year=year_index,
            home_value=self._property_value_at(year_index),
            remaining_balance=self._remaining_balance_at(year_index),
            investment_value=self.investment_value_at(year_index),
            buying_cumulative_cost=self.buying_cumulative_cost(year_index),
            renting_cumulative_cost=self.renting_cumulative_cost(year_index),
            buying_net_worth=self.buying_net_worth(year_index),
            renting_net_worth=self.renting_net_worth(year_index),
        )

    # ------------------------- Analyses ------------------------- #
    def buying_analysis(self) -> BuyingAnalysis:
        short, long_ = SHORT_HORIZON_YEARS, LONG_HORIZON_YEARS
        return BuyingAnalysis(
            monthly_payment=self.monthly_payment,
            total_monthly_cost=self.monthly_ownership_cost(),
            down_payment=self.down_payment,
            loan_amount=self.loan_amount,
            closing_costs=float(self.inputs.closing_costs),
            initial_cash_outlay=self.initial_cash_outlay,
            yearly_appreciation=self.inputs.home_price * pct_to_rate(self.inputs.home_appreciation_pct),
            equity_built_5_years=self._property_value_at(short) - self._remaining_balance_at(short),
            total_cost_5_years=self.buying_cumulative_cost(short),
            total_cost_10_years=self.buying_cumulative_cost(long_),
            net_worth_5_years=self.buying_net_worth(short),
            net_worth_10_years=self.buying_net_worth(long_),
        )

    def renting_analysis(self) -> RentingAnalysis:
        short, long_ = SHORT_HORIZON_YEARS, LONG_HORIZON_YEARS
        return RentingAnalysis(
            monthly_rent=float(self.inputs.monthly_rent),
            total_monthly_cost=self.monthly_renting_cost(),
            initial_deposit=float(self.inputs.security_deposit),
            yearly_rent_increase_pct=float(self.inputs.rent_increase_pct),
            total_cost_5_years=self.renting_cumulative_cost(short),
            total_cost_10_years=self.renting_cumulative_cost(long_),
            investment_growth_5_years=self.investment_value_at(short),
            investment_growth_10_years=self.investment_value_at(long_),
            net_worth_5_years=self.renting_net_worth(short),
            net_worth_10_years=self.renting_net_worth(long_),
        )

    def compare(self, buying: BuyingAnalysis, renting: RentingAnalysis) -> ComparisonAnalysis:
        five = buying.net_worth_5_years - renting.net_worth_5_years
        ten = buying.net_worth_10_years - renting.net_worth_10_years
        return ComparisonAnalysis(
            monthly_difference=buying.total_monthly_cost - renting.total_monthly_cost,
            cash_outlay_difference=buying.initial_cash_outlay - renting.initial_deposit,
            five_year_savings=five,
            ten_year_savings=ten,
            five_year_advantage=advantage(five),
            ten_year_advantage=advantage(ten),
        )

    def break_even_year(self) -> int:
        """First year buying out-earns renting; capped at the search horizon, never "never"."""
        for year in range(1, BREAK_EVEN_SEARCH_YEARS + 1):
            if self.buying_net_worth(year) > self.renting_net_worth(year):
                return year
        return BREAK_EVEN_SEARCH_YEARS

    def yearly(self) -> Tuple[YearlyProjection, ...]:
        horizon = min(DISPLAY_YEARS, BREAK_EVEN_SEARCH_YEARS)
        return tuple(self.year_projection(y) for y in range(1, horizon + 1))

    # ------------------------- Projection ------------------------- #
    def project(self) -> RentVsBuyProjection:
        buying = self.buying_analysis()
        renting = self.renting_analysis()
        comparison = self.compare(buying, renting)
        recommendation = recommend(comparison, buying.initial_cash_outlay)
        break_even = self.break_even_year()
        logger.debug(
            "rent vs buy: 5y=%.0f (%s), 10y=%.0f (%s), break-even year %d, decision=%s",
            comparison.five_year_savings,
            comparison.five_year_advantage,
            comparison.ten_year_savings,
            comparison.ten_year_advantage,
            break_even,
            recommendation.decision,
        )
        return RentVsBuyProjection(
            buying=buying,
            renting=renting,
            comparison=comparison,
            break_even_year=break_even,
            recommendation=recommendation,
            yearly=self.yearly(),
        )


def project(inputs: RentVsBuyInputs) -> RentVsBuyProjection:
    return RentVsBuyModel(inputs).project()

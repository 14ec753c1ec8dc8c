import math
from decimal import Decimal

import pytest

from mortgage_engine.core.amortization import generate_schedule
from mortgage_engine.core.errors import InvalidParameter
from mortgage_engine.core.rent_vs_buy import (
    BUY,
    NEUTRAL,
    RENT,
    ComparisonAnalysis,
    RentVsBuyInputs,
    RentVsBuyModel,
    advantage,
    project,
    recommend,
)


def _comparison(monthly=0.0, five_savings=0.0, ten_savings=0.0, five=NEUTRAL, ten=NEUTRAL):
    return ComparisonAnalysis(
        monthly_difference=monthly,
        cash_outlay_difference=0.0,
        five_year_savings=five_savings,
        ten_year_savings=ten_savings,
        five_year_advantage=five,
        ten_year_advantage=ten,
    )


def test_advantage_dead_band():
    assert advantage(1_000) == NEUTRAL
    assert advantage(-1_000) == NEUTRAL
    assert advantage(0) == NEUTRAL
    assert advantage(1_000.01) == BUY
    assert advantage(-1_000.01) == RENT


def test_ladder_both_horizons_agree():
    rec = recommend(_comparison(five=BUY, ten=BUY, ten_savings=80_000), 10_000)
    assert (rec.decision, rec.confidence_pct) == (BUY, 85)
    rec = recommend(_comparison(five=RENT, ten=RENT, ten_savings=-80_000), 10_000)
    assert (rec.decision, rec.confidence_pct) == (RENT, 85)


def test_ladder_long_term_margin_is_strict():
    at_margin = recommend(_comparison(five=NEUTRAL, ten=BUY, ten_savings=50_000), 10_000)
    assert (at_margin.decision, at_margin.confidence_pct) == (NEUTRAL, 60)
    above = recommend(_comparison(five=NEUTRAL, ten=BUY, ten_savings=50_000.01), 10_000)
    assert (above.decision, above.confidence_pct) == (BUY, 70)


def test_ladder_rent_monthly_trigger_is_strict():
    at_trigger = recommend(_comparison(monthly=500, five=RENT, ten=NEUTRAL), 10_000)
    assert (at_trigger.decision, at_trigger.confidence_pct) == (NEUTRAL, 60)
    above = recommend(_comparison(monthly=500.01, five=RENT, ten=NEUTRAL), 10_000)
    assert (above.decision, above.confidence_pct) == (RENT, 75)


def test_ladder_first_match_wins():
    # Long-term buy rule outranks the short-term rent rule
    rec = recommend(_comparison(monthly=900, five=RENT, ten=BUY, ten_savings=60_000), 10_000)
    assert (rec.decision, rec.confidence_pct) == (BUY, 70)


def test_considerations_are_independent_and_ordered():
    rec = recommend(_comparison(monthly=301, five=RENT, ten=BUY, ten_savings=60_000), 50_001)
    assert len(rec.considerations) == 4
    assert rec.considerations[0].startswith("Buying requires $301 more per month")
    assert rec.considerations[1].startswith("Significant upfront investment required")
    assert rec.considerations[2].startswith("Long-term wealth building")
    assert rec.considerations[3].startswith("Greater flexibility")


def test_considerations_thresholds_are_strict():
    rec = recommend(_comparison(monthly=300), 50_000)
    assert rec.considerations == ()


def test_default_projection_shape():
    result = project(RentVsBuyInputs())
    assert len(result.yearly) == 10
    assert [y.year for y in result.yearly] == list(range(1, 11))
    assert 1 <= result.break_even_year <= 20
    assert result.recommendation.decision in (BUY, RENT, NEUTRAL)
    assert math.isclose(result.buying.down_payment, 80_000)
    assert math.isclose(result.buying.loan_amount, 320_000)
    assert math.isclose(result.buying.initial_cash_outlay, 88_000)
    # 400k * 3%
    assert math.isclose(result.buying.yearly_appreciation, 12_000)


def test_yearly_rows_agree_with_analyses():
    result = project(RentVsBuyInputs())
    assert math.isclose(result.yearly[4].buying_net_worth, result.buying.net_worth_5_years)
    assert math.isclose(result.yearly[9].buying_net_worth, result.buying.net_worth_10_years)
    assert math.isclose(result.yearly[4].renting_net_worth, result.renting.net_worth_5_years)
    assert math.isclose(result.yearly[9].renting_net_worth, result.renting.net_worth_10_years)
    balances = [y.remaining_balance for y in result.yearly]
    assert all(b2 < b1 for b1, b2 in zip(balances, balances[1:]))


def test_remaining_balance_matches_loan_schedule():
    model = RentVsBuyModel(RentVsBuyInputs())
    entries = generate_schedule(model.loan_amount, 6.5, 30)
    assert math.isclose(model.year_projection(5).remaining_balance, entries[59].remaining_balance, abs_tol=0.01)


def test_break_even_year_is_first_crossing():
    model = RentVsBuyModel(RentVsBuyInputs())
    year = model.break_even_year()
    crossings = [y for y in range(1, 21) if model.buying_net_worth(y) > model.renting_net_worth(y)]
    assert year == (crossings[0] if crossings else 20)


def test_cheap_home_expensive_rent_favours_buying():
    result = project(RentVsBuyInputs(home_price=100_000, monthly_rent=5_000, interest_rate_pct=3.0))
    assert result.break_even_year == 1
    assert (result.recommendation.decision, result.recommendation.confidence_pct) == (BUY, 85)
    assert result.recommendation.considerations == ("Long-term wealth building potential through home equity",)


def test_expensive_home_cheap_rent_never_breaks_even():
    result = project(RentVsBuyInputs(home_price=1_000_000, monthly_rent=500, interest_rate_pct=10.0))
    # capped at the search horizon, not "never"
    assert result.break_even_year == 20
    assert (result.recommendation.decision, result.recommendation.confidence_pct) == (RENT, 85)
    considerations = result.recommendation.considerations
    assert len(considerations) == 3
    assert considerations[0].startswith("Buying requires")
    assert considerations[1].startswith("Significant upfront investment required")
    assert considerations[2].startswith("Greater flexibility")


def test_renting_cost_steps_up_yearly():
    model = RentVsBuyModel(RentVsBuyInputs(monthly_rent=2_200, security_deposit=2_200, monthly_renters_insurance=25))
    assert model.renting_cumulative_cost(0) == 2_200
    assert math.isclose(model.renting_cumulative_cost(1), 2_200 + 12 * 2_225)
    assert math.isclose(model.renting_cumulative_cost(2), 2_200 + 12 * 2_225 + 12 * (2_200 * 1.03 + 25))


def test_full_down_payment_means_no_loan():
    model = RentVsBuyModel(RentVsBuyInputs(down_payment_pct=100))
    assert model.loan_amount == 0.0
    assert model.monthly_payment == 0.0
    result = model.project()
    assert all(y.remaining_balance == 0.0 for y in result.yearly)
    assert math.isclose(result.buying.equity_built_5_years, 400_000 * 1.03 ** 5)


@pytest.mark.parametrize(
    "field,value",
    [
        ("home_price", 0),
        ("down_payment_pct", 101),
        ("down_payment_pct", -5),
        ("home_appreciation_pct", -1),
        ("monthly_rent", -1),
        ("closing_costs", -0.01),
        ("loan_term_years", 0),
    ],
)
def test_invalid_inputs_name_the_field(field, value):
    with pytest.raises(InvalidParameter) as exc:
        project(RentVsBuyInputs(**{field: value}))
    assert exc.value.field == field


def test_decimal_inputs_are_rejected_up_front():
    with pytest.raises(InvalidParameter) as exc:
        project(RentVsBuyInputs(home_price=Decimal("400000")))
    assert exc.value.field == "home_price"


def test_mortgage_payments_stop_after_payoff():
    model = RentVsBuyModel(RentVsBuyInputs(loan_term_years=5))
    assert model.n_payments == 60
    # 400k * 1.2% / 12 + 200 + 400k * 1.5% / 12 + 0
    assert math.isclose(model.monthly_carrying_cost(), 1_100)
    assert math.isclose(
        model.buying_cumulative_cost(5),
        model.monthly_payment * 60 + 1_100 * 60 + model.initial_cash_outlay,
    )
    assert math.isclose(model.buying_cumulative_cost(10) - model.buying_cumulative_cost(5), 66_000)
    assert model.year_projection(6).remaining_balance == 0.0


def test_no_loan_pays_only_carrying_costs():
    model = RentVsBuyModel(RentVsBuyInputs(down_payment_pct=100))
    assert model.n_payments == 0
    assert math.isclose(model.buying_cumulative_cost(3), 1_100 * 36 + model.initial_cash_outlay)

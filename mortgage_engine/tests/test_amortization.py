import math
from datetime import date

import pytest

from mortgage_engine.core.amortization import (
    LoanTerms,
    aggregate_yearly,
    amortize,
    compute_monthly_payment,
    generate_schedule,
    iter_schedule,
    remaining_balance,
    schedule_frame,
    summarize,
)
from mortgage_engine.core.errors import DidNotConverge, InvalidParameter


def test_fixed_payment_known_case():
    # 260k @ 6.5% over 25y ~ 1,755
    payment = compute_monthly_payment(260_000, 6.5, 25)
    assert math.isclose(payment, 1755.37, abs_tol=0.5)


def test_fixed_payment_100k_20y():
    # Known approximate monthly payment for 100k @5% over 20y ~ 659.96
    assert math.isclose(compute_monthly_payment(100_000, 5.0, 20), 659.96, abs_tol=0.01)


def test_zero_rate_payment_is_exact():
    assert compute_monthly_payment(120_000, 0, 10) == 120_000 / (10 * 12)
    assert compute_monthly_payment(260_000, 0.0, 25) == 260_000 / 300


def test_schedule_length_and_interest_total():
    s = summarize(LoanTerms(260_000, 6.5, 25))
    assert len(s.entries) == 300
    assert s.outcome.total_payments == 300
    total_interest = sum(e.interest_portion for e in s.entries)
    assert math.isclose(total_interest, s.payment_monthly * 300 - 260_000, abs_tol=0.05)
    assert math.isclose(s.outcome.total_cost - 260_000, s.outcome.total_interest, abs_tol=1e-6)


@pytest.mark.parametrize(
    "principal,rate,years",
    [(260_000, 6.5, 25), (100_000, 0.0, 15), (350_000, 12.0, 30), (5_000, 99.0, 1), (1_000_000, 3.25, 50)],
)
def test_principal_sums_to_loan_and_balance_reaches_zero(principal, rate, years):
    entries = generate_schedule(principal, rate, years)
    assert math.isclose(sum(e.principal_portion for e in entries), principal, abs_tol=0.01)
    balances = [e.remaining_balance for e in entries]
    assert all(b2 <= b1 for b1, b2 in zip(balances, balances[1:]))
    assert entries[-1].remaining_balance == 0.0
    assert [e.index for e in entries] == list(range(1, len(entries) + 1))


def test_first_payment_split():
    entries = generate_schedule(400_000, 7.0, 30)
    first = entries[0]
    # 400000 * 0.07 / 12
    assert math.isclose(first.interest_portion, 2333.33, abs_tol=0.01)
    assert math.isclose(first.principal_portion, 327.88, abs_tol=0.01)
    assert first.extra_payment == 0.0
    assert math.isclose(first.cumulative_interest, first.interest_portion)


def test_iter_schedule_is_lazy_and_single_use():
    it = iter_schedule(100_000, 5.0, 20)
    first = next(it)
    assert first.index == 1
    rest = list(it)
    assert len(rest) == 239
    assert list(it) == []


def test_iter_schedule_validates_before_iterating():
    # Raises on the call itself, not on first next()
    with pytest.raises(InvalidParameter):
        iter_schedule(-1, 5.0, 20)


@pytest.mark.parametrize(
    "principal,rate,years,field",
    [
        (0, 5.0, 30, "principal"),
        (-100, 5.0, 30, "principal"),
        (100_000, -1.0, 30, "annual_rate_pct"),
        (100_000, 100.5, 30, "annual_rate_pct"),
        (100_000, 5.0, 0, "term_years"),
        (100_000, 5.0, 51, "term_years"),
        (100_000, float("nan"), 30, "annual_rate_pct"),
    ],
)
def test_invalid_parameters_name_the_field(principal, rate, years, field):
    with pytest.raises(InvalidParameter) as exc:
        compute_monthly_payment(principal, rate, years)
    assert exc.value.field == field


def test_rate_of_100_percent_is_accepted():
    entries = generate_schedule(10_000, 100.0, 1)
    assert entries[-1].remaining_balance == 0.0


def test_payment_below_interest_does_not_converge():
    # 1% a month on 1,000 is 10 of interest; a payment of 5 never amortizes
    with pytest.raises(DidNotConverge) as exc:
        list(amortize(1_000.0, 0.01, 5.0, 12))
    assert exc.value.index == 12
    assert exc.value.balance > 0


def test_remaining_balance_matches_schedule():
    entries = generate_schedule(320_000, 6.5, 30)
    for k in (1, 12, 60, 120, 240, 359):
        assert math.isclose(remaining_balance(320_000, 6.5, 30, k), entries[k - 1].remaining_balance, abs_tol=0.01)
    assert remaining_balance(320_000, 6.5, 30, 0) == 320_000
    assert remaining_balance(320_000, 6.5, 30, 360) == 0.0
    assert remaining_balance(320_000, 6.5, 30, 400) == 0.0


def test_remaining_balance_zero_rate():
    assert math.isclose(remaining_balance(12_000, 0, 1, 6), 6_000)


def test_aggregate_yearly_end_balance():
    s = summarize(LoanTerms(200_000, 4.0, 25))
    yearly = s.schedule_yearly
    assert len(yearly) == 25
    assert yearly.iloc[-1]["end_balance"] == 0.0
    assert math.isclose(yearly["interest_portion"].sum(), s.outcome.total_interest, abs_tol=1e-6)


def test_schedule_frame_empty():
    df = schedule_frame([])
    assert df.empty
    assert "remaining_balance" in df.columns
    assert aggregate_yearly(df).empty


def test_payoff_date_counts_months_from_start():
    outcome = summarize(LoanTerms(12_000, 5.0, 1)).outcome
    assert outcome.payoff_month_offset == 12
    assert outcome.payoff_date(date(2026, 1, 31)) == date(2027, 1, 31)

"""Loan calculations: interest-only and amortizing payments, equity and deposits."""

from dataclasses import dataclass

import numpy_financial as npf


@dataclass
class AnnualLoanPayment:
    """One year of loan servicing split into interest and principal."""

    annual_payment: float
    interest_portion: float
    principal_portion: float
    is_interest_only: bool


def calculate_annual_interest(loan_amount: float, interest_rate: float) -> float:
    """Annual interest on an interest-only loan."""
    return loan_amount * interest_rate


def calculate_interest_only_payment(loan_amount: float, interest_rate: float) -> AnnualLoanPayment:
    """Interest-only year: the whole payment is interest, no principal reduction."""
    interest = calculate_annual_interest(loan_amount, interest_rate)
    return AnnualLoanPayment(
        annual_payment=interest,
        interest_portion=interest,
        principal_portion=0.0,
        is_interest_only=True,
    )


def calculate_annual_pi_payment(
    loan_amount: float,
    interest_rate: float,
    remaining_years: int,
) -> AnnualLoanPayment:
    """Annual principal-and-interest payment for an amortizing loan.

    The payment is the standard monthly annuity over the remaining term,
    annualized. The interest portion is taken on the opening balance for
    the year and the principal portion is whatever remains of the payment,
    capped at the outstanding balance.

    Args:
        loan_amount: Opening loan balance for the year.
        interest_rate: Annual interest rate.
        remaining_years: Years left on the amortization schedule.

    Returns:
        AnnualLoanPayment with the payment split.

    Example:
        >>> pmt = calculate_annual_pi_payment(500_000, 0.06, 25)
        >>> round(pmt.annual_payment)
        38658
    """
    if loan_amount <= 0 or remaining_years <= 0:
        return AnnualLoanPayment(0.0, 0.0, 0.0, is_interest_only=False)

    # numpy_financial.pmt returns a negative outflow, so negate
    monthly_payment = -npf.pmt(
        rate=interest_rate / 12,
        nper=remaining_years * 12,
        pv=loan_amount,
        fv=0,
    )
    annual_payment = float(monthly_payment) * 12
    interest = calculate_annual_interest(loan_amount, interest_rate)
    principal = min(annual_payment - interest, loan_amount)

    return AnnualLoanPayment(
        annual_payment=annual_payment,
        interest_portion=interest,
        principal_portion=max(0.0, principal),
        is_interest_only=False,
    )


def calculate_remaining_term(
    loan_age: int,
    interest_only_years: int,
    standard_term_years: int,
) -> int:
    """Years left to amortize once a loan has moved to principal-and-interest.

    Args:
        loan_age: Years since the loan was drawn.
        interest_only_years: Length of the initial interest-only period.
        standard_term_years: Full loan term including the interest-only period.

    Returns:
        Remaining amortization years, never less than 1.
    """
    years_in_pi = loan_age - interest_only_years
    return max(1, standard_term_years - interest_only_years - years_in_pi)


def calculate_equity(property_value: float, loan_amount: float) -> float:
    """Owner's equity, floored at zero."""
    return max(0.0, property_value - loan_amount)


def calculate_lvr(loan_amount: float, property_value: float) -> float:
    """Loan-to-value ratio. Zero when value is not positive."""
    if property_value <= 0:
        return 0.0
    return loan_amount / property_value


def calculate_extractable_equity(property_value: float, loan_amount: float, max_lvr: float) -> float:
    """Additional borrowing available before the loan reaches max LVR."""
    return max(0.0, property_value * max_lvr - loan_amount)


def calculate_purchase_costs(
    price: float,
    stamp_duty_rate: float,
    purchase_costs_rate: float,
    buyers_agent_fee: float,
) -> float:
    """Transaction costs on a purchase: stamp duty, legals and a flat agent fee."""
    return price * stamp_duty_rate + price * purchase_costs_rate + buyers_agent_fee


def calculate_deposit_required(
    price: float,
    max_lvr: float,
    stamp_duty_rate: float,
    purchase_costs_rate: float,
    buyers_agent_fee: float,
) -> float:
    """Cash needed to buy one property: the unborrowed share plus all costs.

    Deposit = price x (1 - max_lvr) + stamp duty + purchase costs + agent fee.
    The buyers agent fee is flat and does not scale with price.
    """
    deposit = price * (1 - max_lvr)
    costs = calculate_purchase_costs(price, stamp_duty_rate, purchase_costs_rate, buyers_agent_fee)
    return deposit + costs

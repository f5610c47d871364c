"""Single-property valuation, rent and cash flow for one projection year."""

from dataclasses import dataclass, replace
from typing import Any, Dict

from ..models.assumptions import Assumptions
from ..models.lookups import STANDARD_LOAN_TERM_YEARS
from ..models.property import Property
from .debt import (
    AnnualLoanPayment,
    calculate_annual_pi_payment,
    calculate_equity,
    calculate_interest_only_payment,
    calculate_lvr,
    calculate_remaining_term,
)


@dataclass(frozen=True)
class PropertyYearState:
    """A property as it stands in one projection year.

    Everything here is derived from the underlying ``Property``, its years
    held and the assumptions. Nothing is carried forward from the previous
    year except the loan balance stored on the property.
    """

    property: Property
    year: int
    current_value: float
    gross_rent: float
    annual_rent: float  # Effective rent after vacancy
    annual_interest: float
    principal_payment: float
    total_loan_payment: float
    holding_costs: float
    is_interest_only: bool
    loan_age: int

    @property
    def loan_amount(self) -> float:
        return self.property.loan_amount

    @property
    def equity(self) -> float:
        return calculate_equity(self.current_value, self.loan_amount)

    @property
    def lvr(self) -> float:
        return calculate_lvr(self.loan_amount, self.current_value)

    @property
    def cash_flow(self) -> float:
        """Effective rent less all loan payments and holding costs."""
        return self.annual_rent - self.total_loan_payment - self.holding_costs

    def with_loan(self, loan_amount: float) -> "PropertyYearState":
        """Return a copy with a redrawn loan balance; payments are unchanged."""
        return replace(self, property=self.property.with_loan(loan_amount))

    def carry_forward(self) -> Property:
        """The property record entering next year, after this year's principal."""
        return replace(
            self.property,
            current_value=self.current_value,
            loan_amount=max(0.0, self.loan_amount - self.principal_payment),
        )

    def to_dict(self) -> Dict[str, Any]:
        record = self.property.to_dict()
        record.update({
            "currentValue": self.current_value,
            "equity": self.equity,
            "grossRent": self.gross_rent,
            "annualRent": self.annual_rent,
            "annualInterest": self.annual_interest,
            "principalPayment": self.principal_payment,
            "totalLoanPayment": self.total_loan_payment,
            "holdingCosts": self.holding_costs,
            "isInterestOnly": self.is_interest_only,
            "loanAge": self.loan_age,
            "cashFlow": self.cash_flow,
            "lvr": self.lvr,
        })
        return record


def calculate_future_value(current_value: float, appreciation_rate: float, years: float) -> float:
    """Value after compounding annual appreciation."""
    return current_value * (1 + appreciation_rate) ** years


def calculate_annual_rent(property_value: float, rental_yield: float) -> float:
    """Gross annual rent implied by a yield on value."""
    return property_value * rental_yield


def calculate_holding_costs(property_value: float, holding_costs_rate: float) -> float:
    """Annual management, maintenance, insurance and rates."""
    return property_value * holding_costs_rate


def calculate_gross_rent(prop: Property, years_held: int, assumptions: Assumptions) -> float:
    """Gross rent for a property, grown from its acquisition baseline.

    Explicit rent entered for the property takes precedence; otherwise rent
    starts from the yield on the value at purchase. Either baseline then grows
    at the rent growth rate, not the appreciation rate.
    """
    growth = (1 + assumptions.rent_growth_rate) ** years_held
    if prop.base_rent_at_purchase > 0:
        return prop.base_rent_at_purchase * growth
    initial_rent = calculate_annual_rent(prop.base_value_at_purchase, assumptions.rental_yield)
    return initial_rent * growth


def calculate_loan_payment(
    loan_amount: float,
    loan_age: int,
    assumptions: Assumptions,
    standard_term_years: int = STANDARD_LOAN_TERM_YEARS,
) -> AnnualLoanPayment:
    """Payment for the year: interest-only inside the IO period, P&I after it."""
    in_io_period = loan_age < assumptions.interest_only_years
    if in_io_period or loan_amount <= 0:
        payment = calculate_interest_only_payment(loan_amount, assumptions.interest_rate)
        payment.is_interest_only = in_io_period
        return payment

    remaining_years = calculate_remaining_term(
        loan_age, assumptions.interest_only_years, standard_term_years
    )
    return calculate_annual_pi_payment(loan_amount, assumptions.interest_rate, remaining_years)


def project_property_year(
    prop: Property,
    year: int,
    assumptions: Assumptions,
    standard_term_years: int = STANDARD_LOAN_TERM_YEARS,
    force_interest_only: bool = False,
) -> PropertyYearState:
    """Compute a property's state for a projection year.

    Value is recomputed from the purchase price each year rather than grown
    from last year's value, so no rounding drift accumulates.

    Args:
        prop: Property with its current (opening) loan balance.
        year: Projection year (0 = today).
        assumptions: Market, loan and cost assumptions.
        standard_term_years: Full loan term used for P&I amortization.
        force_interest_only: Service the loan interest-only regardless of
            loan age (used for the year a property is acquired).

    Returns:
        PropertyYearState for the year.
    """
    years_held = year - prop.year_purchased
    current_value = calculate_future_value(prop.purchase_price, assumptions.appreciation_rate, years_held)
    if force_interest_only:
        payment = calculate_interest_only_payment(prop.loan_amount, assumptions.interest_rate)
    else:
        payment = calculate_loan_payment(prop.loan_amount, years_held, assumptions, standard_term_years)

    gross_rent = calculate_gross_rent(prop, years_held, assumptions)

    return PropertyYearState(
        property=prop,
        year=year,
        current_value=current_value,
        gross_rent=gross_rent,
        annual_rent=gross_rent * (1 - assumptions.vacancy_rate),
        annual_interest=payment.interest_portion,
        principal_payment=payment.principal_portion,
        total_loan_payment=payment.annual_payment,
        holding_costs=calculate_holding_costs(current_value, assumptions.holding_costs_rate),
        is_interest_only=payment.is_interest_only,
        loan_age=years_held,
    )

"""Capital gains tax on disposal and income tax on retained rent."""


def calculate_cgt(
    sale_price: float,
    cost_base: float,
    years_held: float,
    tax_bracket: float,
    cgt_discount: float = 0.50,
) -> float:
    """Capital gains tax payable on a sale.

    The gain is discounted by ``cgt_discount`` when the asset has been held
    for at least one year, then taxed at the marginal bracket.

    Args:
        sale_price: Sale price (current value).
        cost_base: Purchase price.
        years_held: Whole years between purchase and sale.
        tax_bracket: Marginal tax rate.
        cgt_discount: Share of the gain that is taxable after 12 months.

    Returns:
        CGT payable (zero when there is no gain).
    """
    capital_gain = sale_price - cost_base
    if capital_gain <= 0:
        return 0.0

    taxable_gain = capital_gain * cgt_discount if years_held >= 1 else capital_gain
    return taxable_gain * tax_bracket


def calculate_after_tax_income(pre_tax_income: float, tax_bracket: float) -> float:
    """Income remaining after marginal tax."""
    return pre_tax_income * (1 - tax_bracket)


def calculate_gross_income_needed(after_tax_income: float, tax_bracket: float) -> float:
    """Pre-tax income required to net ``after_tax_income``."""
    return after_tax_income / (1 - tax_bracket)

"""Market and loan assumptions that drive a portfolio projection."""

from dataclasses import dataclass, fields, replace
from typing import Any, Dict

from .lookups import ASSUMPTION_RANGES, DEFAULT_ASSUMPTIONS


class InvalidAssumptionError(ValueError):
    """Raised when an assumption would make the calculation undefined.

    Attributes:
        field: Name of the offending assumption or derived value.
        value: The value that was rejected.
    """

    def __init__(self, field: str, value: Any, reason: str = "must be positive"):
        self.field = field
        self.value = value
        super().__init__(f"{field} {reason}, got {value!r}")


# Record keys used by the input forms and saved scenarios
_RECORD_KEYS: Dict[str, str] = {
    "appreciation_rate": "appreciationRate",
    "rent_growth_rate": "rentGrowthRate",
    "rental_yield": "rentalYield",
    "interest_rate": "interestRate",
    "max_lvr": "maxLVR",
    "stamp_duty_rate": "stampDutyRate",
    "purchase_costs_rate": "purchaseCosts",
    "tax_bracket": "taxBracket",
    "refinance_interval": "refinanceInterval",
    "target_property_price": "averagePropertyPrice",
    "holding_costs_rate": "holdingCostsRate",
    "vacancy_rate": "vacancyRate",
    "buyers_agent_fee": "buyersAgentFee",
    "selling_costs_rate": "sellingCostsRate",
    "interest_only_years": "interestOnlyYears",
    "cgt_discount": "cgtDiscount",
}


@dataclass(frozen=True)
class Assumptions:
    """Named bundle of market, loan, cost and tax assumptions.

    All rates are fractions (0.04 = 4%). Currency fields are in dollars.
    Instances are immutable; use ``with_changes`` to derive a variant.
    """

    # === Market ===
    appreciation_rate: float = DEFAULT_ASSUMPTIONS["appreciation_rate"]
    rent_growth_rate: float = DEFAULT_ASSUMPTIONS["rent_growth_rate"]
    rental_yield: float = DEFAULT_ASSUMPTIONS["rental_yield"]

    # === Lending ===
    interest_rate: float = DEFAULT_ASSUMPTIONS["interest_rate"]
    max_lvr: float = DEFAULT_ASSUMPTIONS["max_lvr"]
    refinance_interval: int = int(DEFAULT_ASSUMPTIONS["refinance_interval"])
    interest_only_years: int = int(DEFAULT_ASSUMPTIONS["interest_only_years"])

    # === Acquisition ===
    target_property_price: float = DEFAULT_ASSUMPTIONS["target_property_price"]
    stamp_duty_rate: float = DEFAULT_ASSUMPTIONS["stamp_duty_rate"]
    purchase_costs_rate: float = DEFAULT_ASSUMPTIONS["purchase_costs_rate"]
    buyers_agent_fee: float = DEFAULT_ASSUMPTIONS["buyers_agent_fee"]

    # === Holding ===
    holding_costs_rate: float = DEFAULT_ASSUMPTIONS["holding_costs_rate"]
    vacancy_rate: float = DEFAULT_ASSUMPTIONS["vacancy_rate"]

    # === Sale & Tax ===
    selling_costs_rate: float = DEFAULT_ASSUMPTIONS["selling_costs_rate"]
    tax_bracket: float = DEFAULT_ASSUMPTIONS["tax_bracket"]
    cgt_discount: float = DEFAULT_ASSUMPTIONS["cgt_discount"]

    def with_changes(self, **changes: Any) -> "Assumptions":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    def require_computable(self) -> None:
        """Reject configurations that would divide by zero downstream.

        Raises:
            InvalidAssumptionError: If target price or refinance interval
                is not positive.
        """
        if self.target_property_price <= 0:
            raise InvalidAssumptionError("target_property_price", self.target_property_price)
        if self.refinance_interval <= 0:
            raise InvalidAssumptionError("refinance_interval", self.refinance_interval)

    def validate(self) -> list[str]:
        """Validate assumptions against the documented input ranges.

        Returns:
            List of validation error messages. Empty if valid.
        """
        errors = []

        for name, bounds in ASSUMPTION_RANGES.items():
            value = getattr(self, name)
            if not bounds.min_value <= value <= bounds.max_value:
                errors.append(
                    f"{name} must be {bounds.min_value}-{bounds.max_value}, got {value}"
                )

        if self.refinance_interval < 1:
            errors.append(f"refinance_interval must be at least 1, got {self.refinance_interval}")
        if self.target_property_price <= 0:
            errors.append(
                f"target_property_price must be positive, got ${self.target_property_price:,.0f}"
            )
        if not 0 <= self.cgt_discount <= 1:
            errors.append(f"cgt_discount must be 0-1, got {self.cgt_discount}")
        if self.purchase_costs_rate < 0:
            errors.append(f"purchase_costs_rate must be non-negative, got {self.purchase_costs_rate}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the flat assumptions record used by external collaborators."""
        return {_RECORD_KEYS[f.name]: getattr(self, f.name) for f in fields(self)}

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Assumptions":
        """Build assumptions from a flat record, filling gaps with defaults.

        Accepts either record keys (``maxLVR``) or field names (``max_lvr``).
        Unknown keys are ignored.
        """
        values = {}
        for name, key in _RECORD_KEYS.items():
            if key in record:
                values[name] = record[key]
            elif name in record:
                values[name] = record[name]
        for name in ("refinance_interval", "interest_only_years"):
            if name in values:
                values[name] = int(values[name])
        return cls(**values)

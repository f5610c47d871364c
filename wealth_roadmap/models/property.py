"""Property holdings and the complete input record for a roadmap run."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Tuple

from .assumptions import Assumptions
from .lookups import DEFAULT_ANNUAL_INCOME_GOAL, DEFAULT_TARGET_YEARS


@dataclass(frozen=True)
class Property:
    """A single real estate holding.

    ``base_value_at_purchase`` and ``base_rent_at_purchase`` are captured
    when the property enters the portfolio and never change afterwards.
    Rent grows from these baselines independently of value growth.
    """

    id: str
    name: str
    purchase_price: float
    current_value: float
    loan_amount: float
    annual_rent: float = 0.0  # Explicit rent (0 = derive from yield)
    year_purchased: int = 0  # 0 = held at the start of the projection
    base_value_at_purchase: float = 0.0
    base_rent_at_purchase: float = 0.0

    @classmethod
    def existing(
        cls,
        id: str,
        name: str,
        current_value: float,
        loan_amount: float,
        purchase_price: Optional[float] = None,
        annual_rent: float = 0.0,
    ) -> "Property":
        """Create a pre-existing holding with baselines captured at year 0.

        Args:
            id: Property identifier.
            name: Display name.
            current_value: Current market value.
            loan_amount: Outstanding loan balance.
            purchase_price: Cost base. Defaults to current value when not given.
            annual_rent: Explicit annual rent; 0 uses the yield assumption.

        Returns:
            Property with year_purchased=0 and baselines set.
        """
        price = purchase_price or current_value or 0.0
        return cls(
            id=id,
            name=name,
            purchase_price=price,
            current_value=current_value or 0.0,
            loan_amount=loan_amount or 0.0,
            annual_rent=annual_rent or 0.0,
            year_purchased=0,
            base_value_at_purchase=current_value or 0.0,
            base_rent_at_purchase=annual_rent or 0.0,
        )

    @classmethod
    def acquisition(cls, year: int, index: int, price: float, max_lvr: float, name: str) -> "Property":
        """Create a newly acquired target-price property funded at maximum LVR."""
        return cls(
            id=f"new-{year}-{index}",
            name=name,
            purchase_price=price,
            current_value=price,
            loan_amount=price * max_lvr,
            annual_rent=0.0,
            year_purchased=year,
            base_value_at_purchase=price,
            base_rent_at_purchase=0.0,
        )

    def with_loan(self, loan_amount: float) -> "Property":
        """Return a copy carrying a different loan balance."""
        return replace(self, loan_amount=loan_amount)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the property record used by external collaborators."""
        return {
            "id": self.id,
            "name": self.name,
            "purchasePrice": self.purchase_price,
            "currentValue": self.current_value,
            "loanAmount": self.loan_amount,
            "annualRent": self.annual_rent,
            "yearPurchased": self.year_purchased,
            "baseValueAtPurchase": self.base_value_at_purchase,
            "baseRentAtPurchase": self.base_rent_at_purchase,
        }

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "Property":
        """Build a pre-existing property from an input-form record."""
        return cls.existing(
            id=str(record.get("id", "")),
            name=record.get("name", ""),
            current_value=float(record.get("currentValue") or 0.0),
            loan_amount=float(record.get("loanAmount") or 0.0),
            purchase_price=float(record["purchasePrice"]) if record.get("purchasePrice") else None,
            annual_rent=float(record.get("annualRent") or 0.0),
        )


@dataclass(frozen=True)
class RoadmapInputs:
    """Complete, immutable input state for one roadmap computation."""

    properties: Tuple[Property, ...] = ()
    cash_allocated: float = 0.0
    assumptions: Assumptions = field(default_factory=Assumptions)
    target_years: int = DEFAULT_TARGET_YEARS
    annual_income_goal: float = DEFAULT_ANNUAL_INCOME_GOAL

    @property
    def monthly_income_goal(self) -> float:
        """Income goal expressed per month."""
        return self.annual_income_goal / 12

    @property
    def is_empty(self) -> bool:
        """True when there is nothing to project (no properties, no cash)."""
        return len(self.properties) == 0 and self.cash_allocated == 0

    def with_changes(self, **changes: Any) -> "RoadmapInputs":
        """Return a copy with the given fields replaced."""
        if "properties" in changes:
            changes["properties"] = tuple(changes["properties"])
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the saved-state record."""
        return {
            "properties": [p.to_dict() for p in self.properties],
            "cashAllocated": self.cash_allocated,
            "assumptions": self.assumptions.to_dict(),
            "targetYears": self.target_years,
            "annualIncomeGoal": self.annual_income_goal,
        }

    @classmethod
    def from_dict(cls, record: Dict[str, Any]) -> "RoadmapInputs":
        """Build inputs from a saved-state record, filling gaps with defaults."""
        return cls(
            properties=tuple(Property.from_dict(p) for p in record.get("properties", [])),
            cash_allocated=float(record.get("cashAllocated") or 0.0),
            assumptions=Assumptions.from_dict(record.get("assumptions", {})),
            target_years=int(record.get("targetYears", DEFAULT_TARGET_YEARS)),
            annual_income_goal=float(record.get("annualIncomeGoal", DEFAULT_ANNUAL_INCOME_GOAL)),
        )

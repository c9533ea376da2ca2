from dataclasses import dataclass, fields
from decimal import Decimal
from enum import Enum, IntEnum

CENT = Decimal("0.01")
# Largest value a BIGINT card number column can hold
MAX_CARD_NUMBER = 2**63 - 1


class PurseType(str, Enum):
    FOOD = "food"
    FUEL = "fuel"
    DRUGSTORE = "drugstore"

    @property
    def number_column(self) -> str:
        return f"{self.value}_card_number"

    @property
    def balance_column(self) -> str:
        return f"{self.value}_card_balance"


class MerchantCategory(IntEnum):
    # Codes are shared with API clients; never renumber.
    FOOD = 1
    DRUGSTORE = 2
    FUEL = 3


@dataclass(frozen=True)
class Card:
    """Value view over the three purses embedded in a consumer row."""

    food_card_number: int
    food_card_balance: Decimal
    fuel_card_number: int
    fuel_card_balance: Decimal
    drugstore_card_number: int
    drugstore_card_balance: Decimal

    def balance(self, purse: PurseType) -> Decimal:
        return getattr(self, purse.balance_column)

    def number(self, purse: PurseType) -> int:
        return getattr(self, purse.number_column)

    def numbers(self) -> list[int]:
        return [self.number(purse) for purse in PurseType]

    def diff(self, other: "Card") -> list[str]:
        """Names of the fields whose values differ between two cards."""
        return [f.name for f in fields(self) if getattr(self, f.name) != getattr(other, f.name)]

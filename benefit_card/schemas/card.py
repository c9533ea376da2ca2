from decimal import Decimal
from pydantic import BaseModel, Field
from pydantic import field_validator

from benefit_card.core.purses import CENT


class BalanceAdjustment(BaseModel):
    value: Decimal = Field(..., description="Amount added to the purse; negative values are corrections")

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: Decimal) -> Decimal:
        return v.quantize(CENT)

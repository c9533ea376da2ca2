from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field
from pydantic import field_validator

from benefit_card.core.purses import CENT, MAX_CARD_NUMBER


class PurchaseRequest(BaseModel):
    establishment_type: int = Field(..., description="Merchant category: 1 food, 2 drugstore, 3 fuel")
    establishment_name: str = Field(..., min_length=1, max_length=255)
    card_number: int = Field(..., gt=0, le=MAX_CARD_NUMBER)
    product_description: str = Field(..., min_length=1)
    value: Decimal = Field(..., gt=0, description="Purchase amount (must be > 0)")

    @field_validator("value")
    @classmethod
    def validate_value(cls, v: Decimal) -> Decimal:
        return v.quantize(CENT)


class ExtractResponse(BaseModel):
    id: int
    establishment_name: str
    product_description: str
    date_buy: datetime
    card_number: int
    amount: Decimal

    model_config = ConfigDict(from_attributes=True)

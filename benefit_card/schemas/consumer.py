from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, EmailStr, Field

from benefit_card.core.purses import MAX_CARD_NUMBER


class CardBase(BaseModel):
    food_card_number: int = Field(gt=0, le=MAX_CARD_NUMBER)
    fuel_card_number: int = Field(gt=0, le=MAX_CARD_NUMBER)
    drugstore_card_number: int = Field(gt=0, le=MAX_CARD_NUMBER)


class CardCreate(CardBase):
    food_card_balance: Decimal = Decimal("0.00")
    fuel_card_balance: Decimal = Decimal("0.00")
    drugstore_card_balance: Decimal = Decimal("0.00")


class CardSchema(CardBase):
    food_card_balance: Decimal
    fuel_card_balance: Decimal
    drugstore_card_balance: Decimal

    model_config = ConfigDict(from_attributes=True)


class ConsumerBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    document_number: str = Field(pattern=r"^\d{6,20}$")
    birth_date: date | None = None
    mobile_phone_number: str | None = None
    residence_phone_number: str | None = None
    phone_number: str | None = None
    email: EmailStr | None = None
    street: str | None = None
    number: int | None = None
    city: str | None = None
    country: str | None = None
    postal_code: str | None = None


class ConsumerCreate(ConsumerBase):
    card: CardCreate


class ConsumerUpdate(ConsumerBase):
    # Must match the stored card exactly, balances included
    card: CardSchema


class ConsumerResponse(ConsumerBase):
    id: int
    card: CardSchema
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

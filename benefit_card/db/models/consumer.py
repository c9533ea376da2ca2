from dataclasses import fields

from sqlalchemy import BigInteger, Column, Date, Integer, Numeric, String

from benefit_card.core.purses import Card
from benefit_card.db.base import Base


class Consumer(Base):
    __tablename__ = "consumers"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    document_number = Column(String(20), nullable=False, index=True)
    birth_date = Column(Date, nullable=True)
    mobile_phone_number = Column(String(20), nullable=True)
    residence_phone_number = Column(String(20), nullable=True)
    phone_number = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    street = Column(String(255), nullable=True)
    number = Column(Integer, nullable=True)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    postal_code = Column(String(20), nullable=True)

    # Embedded card: one (number, balance) pair per purse
    food_card_number = Column(BigInteger, unique=True, nullable=False)
    food_card_balance = Column(Numeric(12, 2), nullable=False, default=0)
    fuel_card_number = Column(BigInteger, unique=True, nullable=False)
    fuel_card_balance = Column(Numeric(12, 2), nullable=False, default=0)
    drugstore_card_number = Column(BigInteger, unique=True, nullable=False)
    drugstore_card_balance = Column(Numeric(12, 2), nullable=False, default=0)

    @property
    def card(self) -> Card:
        return Card(**{f.name: getattr(self, f.name) for f in fields(Card)})

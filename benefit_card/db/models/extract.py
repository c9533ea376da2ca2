from sqlalchemy import BigInteger, Column, DateTime, Integer, Numeric, String, Text

from benefit_card.db.base import Base


class Extract(Base):
    __tablename__ = "extracts"

    id = Column(Integer, primary_key=True, index=True)
    establishment_name = Column(String(255), nullable=False)
    product_description = Column(Text, nullable=False)
    date_buy = Column(DateTime(timezone=True), nullable=False)
    # Plain value, no foreign key to the consumer
    card_number = Column(BigInteger, nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)

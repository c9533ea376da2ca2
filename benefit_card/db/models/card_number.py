from sqlalchemy import BigInteger, Column, ForeignKey, Integer, String

from benefit_card.db.base import Base


class CardNumber(Base):
    """One row per purse number of every consumer.

    The single UNIQUE column makes a number collision across purse types a
    constraint violation, so the uniqueness check cannot race the insert.
    """

    __tablename__ = "card_numbers"

    number = Column(BigInteger, primary_key=True, autoincrement=False)
    purse = Column(String(20), nullable=False)
    consumer_id = Column(Integer, ForeignKey("consumers.id", ondelete="CASCADE"), nullable=False, index=True)

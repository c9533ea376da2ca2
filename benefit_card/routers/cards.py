from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from benefit_card.core.purses import MAX_CARD_NUMBER
from benefit_card.db.session import get_db
from benefit_card.schemas.card import BalanceAdjustment
from benefit_card.schemas.consumer import ConsumerResponse
from benefit_card.services.balance import adjust_balance

router = APIRouter(prefix="/cards", tags=["cards"])


@router.put("/{card_number}/balance", response_model=ConsumerResponse)
async def set_card_balance(
    payload: BalanceAdjustment,
    card_number: int = Path(..., gt=0, le=MAX_CARD_NUMBER),
    db: AsyncSession = Depends(get_db),
):
    return await adjust_balance(db, card_number, payload.value)

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from benefit_card.core.purses import MAX_CARD_NUMBER
from benefit_card.crud.extract import ExtractCRUD
from benefit_card.db.session import get_db
from benefit_card.schemas.extract import ExtractResponse, PurchaseRequest
from benefit_card.services.purchase import buy

router = APIRouter(prefix="/purchases", tags=["purchases"])


@router.post("", response_model=ExtractResponse, status_code=status.HTTP_201_CREATED)
async def create_purchase(payload: PurchaseRequest, db: AsyncSession = Depends(get_db)):
    return await buy(
        db,
        category_code=payload.establishment_type,
        establishment_name=payload.establishment_name,
        card_number=payload.card_number,
        product_description=payload.product_description,
        amount=payload.value,
    )


@router.get("", response_model=list[ExtractResponse])
async def list_purchases(
    card_number: int | None = Query(None, gt=0, le=MAX_CARD_NUMBER),
    db: AsyncSession = Depends(get_db),
):
    return await ExtractCRUD.list_extracts(db, card_number=card_number)

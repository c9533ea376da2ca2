from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from benefit_card.db.session import get_db
from benefit_card.schemas.consumer import ConsumerCreate, ConsumerResponse, ConsumerUpdate
from benefit_card.services import consumer as consumer_service

router = APIRouter(prefix="/consumers", tags=["consumers"])


@router.get("", response_model=list[ConsumerResponse])
async def list_consumers(db: AsyncSession = Depends(get_db)):
    return await consumer_service.list_all_consumers(db)


@router.post("", response_model=ConsumerResponse, status_code=status.HTTP_201_CREATED)
async def create_consumer(payload: ConsumerCreate, db: AsyncSession = Depends(get_db)):
    return await consumer_service.create_consumer(db, payload)


@router.put("/{consumer_id}", response_model=ConsumerResponse)
async def update_consumer(
    consumer_id: int,
    payload: ConsumerUpdate,
    db: AsyncSession = Depends(get_db),
):
    return await consumer_service.update_consumer(db, consumer_id, payload)

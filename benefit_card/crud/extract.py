from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from benefit_card.db.models import Extract
from benefit_card.core.logging_config import get_logger, mask_card_number

logger = get_logger(__name__)


class ExtractCRUD:
    @staticmethod
    async def list_extracts(db: AsyncSession, card_number: int | None = None) -> list[Extract]:
        stmt = select(Extract)
        if card_number is not None:
            stmt = stmt.where(Extract.card_number == card_number)
        result = await db.execute(stmt.order_by(Extract.date_buy.desc(), Extract.id.desc()))
        extracts = list(result.scalars().all())
        logger.debug(
            "Listed extracts",
            extra={
                "details": {
                    "event": "extract_list",
                    "extra": {
                        "card": mask_card_number(card_number) if card_number is not None else None,
                        "count": len(extracts),
                    },
                }
            },
        )
        return extracts

    @staticmethod
    async def create(db: AsyncSession, **kwargs) -> Extract:
        """Insert an extract and commit everything pending on the session with it."""
        extract = Extract(**kwargs)
        db.add(extract)
        await db.commit()
        await db.refresh(extract)
        logger.info(
            "Extract created",
            extra={
                "details": {
                    "event": "extract_create",
                    "extra": {"extract_id": extract.id, "card": mask_card_number(extract.card_number)},
                }
            },
        )
        return extract

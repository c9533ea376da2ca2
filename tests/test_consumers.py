import asyncio
from datetime import date
from decimal import Decimal

import pytest

from benefit_card.core.errors import CardMutationForbidden, CardNumberInUse, ConsumerNotFound
from benefit_card.crud.consumer import ConsumerCRUD
from benefit_card.schemas.consumer import CardSchema, ConsumerCreate, ConsumerUpdate
from benefit_card.services.consumer import create_consumer, list_all_consumers, update_consumer


def _create_payload(food=111, fuel=222, drugstore=333, **card_extra) -> ConsumerCreate:
    return ConsumerCreate(
        name="Ana Costa",
        document_number="98765432100",
        birth_date=date(1990, 5, 17),
        email="ana@example.com",
        city="Sao Paulo",
        card={"food_card_number": food, "fuel_card_number": fuel, "drugstore_card_number": drugstore, **card_extra},
    )


def _update_payload(consumer, **overrides) -> ConsumerUpdate:
    card = CardSchema.model_validate(consumer.card).model_dump()
    card.update(overrides.pop("card", {}))
    fields = {
        "name": consumer.name,
        "document_number": consumer.document_number,
        "city": consumer.city,
        **overrides,
    }
    return ConsumerUpdate(**fields, card=card)


@pytest.mark.asyncio
async def test_create_then_list_round_trip(async_session):
    created = await create_consumer(async_session, _create_payload())

    consumers = await list_all_consumers(async_session)

    assert [c.id for c in consumers] == [created.id]
    card = consumers[0].card
    assert card.numbers() == [111, 222, 333]
    assert card.food_card_balance == Decimal("0.00")
    assert card.fuel_card_balance == Decimal("0.00")
    assert card.drugstore_card_balance == Decimal("0.00")
    assert consumers[0].birth_date == date(1990, 5, 17)


@pytest.mark.asyncio
async def test_create_keeps_initial_balances(async_session):
    created = await create_consumer(async_session, _create_payload(food_card_balance=Decimal("25.50")))
    assert created.food_card_balance == Decimal("25.50")


@pytest.mark.asyncio
async def test_create_rejects_repeated_number_within_card(async_session):
    with pytest.raises(CardNumberInUse):
        await create_consumer(async_session, _create_payload(food=111, fuel=111))
    assert await list_all_consumers(async_session) == []


@pytest.mark.asyncio
async def test_create_rejects_number_used_by_other_purse_type(async_session, make_consumer):
    await make_consumer(food=111, fuel=222, drugstore=333)

    # 222 is someone's fuel card; reusing it as a food card is still a collision
    with pytest.raises(CardNumberInUse) as exc_info:
        await create_consumer(async_session, _create_payload(food=222, fuel=777, drugstore=888))

    assert exc_info.value.card_numbers == [222]


@pytest.mark.asyncio
async def test_update_profile_fields(async_session, make_consumer):
    consumer = await make_consumer()

    updated = await update_consumer(async_session, consumer.id, _update_payload(consumer, name="Maria S. Lima", city="Recife"))

    assert updated.name == "Maria S. Lima"
    assert updated.city == "Recife"
    assert updated.food_card_number == 111


@pytest.mark.asyncio
async def test_update_unknown_consumer(async_session, make_consumer):
    consumer = await make_consumer()
    payload = _update_payload(consumer)

    with pytest.raises(ConsumerNotFound):
        await update_consumer(async_session, consumer.id + 100, payload)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "card_change, field",
    [
        ({"food_card_number": 9991}, "food_card_number"),
        ({"fuel_card_number": 9992}, "fuel_card_number"),
        ({"drugstore_card_number": 9993}, "drugstore_card_number"),
        ({"food_card_balance": "1000.00"}, "food_card_balance"),
    ],
)
async def test_update_rejects_card_changes(async_session, make_consumer, card_change, field):
    consumer = await make_consumer()
    payload = _update_payload(consumer, name="Someone Else", card=card_change)

    with pytest.raises(CardMutationForbidden) as exc_info:
        await update_consumer(async_session, consumer.id, payload)

    assert exc_info.value.fields == [field]
    await async_session.refresh(consumer)
    assert consumer.name == "Maria Silva"


@pytest.mark.asyncio
async def test_concurrent_creates_cannot_share_a_number_across_purses(session_factory):
    async def attempt(food, fuel, drugstore):
        async with session_factory() as db:
            return await create_consumer(db, _create_payload(food=food, fuel=fuel, drugstore=drugstore))

    # 500 is a food number for the first consumer and a fuel number for the second
    results = await asyncio.gather(attempt(500, 501, 502), attempt(600, 500, 602), return_exceptions=True)

    assert sorted(type(r).__name__ for r in results) == ["CardNumberInUse", "Consumer"]
    async with session_factory() as db:
        consumers = await list_all_consumers(db)
    numbers = [n for c in consumers for n in c.card.numbers()]
    assert len(numbers) == 3
    assert len(set(numbers)) == len(numbers)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "numbers",
    [
        {"food": 111, "fuel": 701, "drugstore": 702},
        {"food": 700, "fuel": 111, "drugstore": 702},
    ],
)
async def test_collision_missed_by_precheck_is_card_number_in_use(async_session, make_consumer, monkeypatch, numbers):
    await make_consumer(food=111, fuel=222, drugstore=333)

    async def nothing_in_use(db, card_numbers):
        return set()

    # Simulates a concurrent create that registered 111 after the pre-check ran
    monkeypatch.setattr(ConsumerCRUD, "card_numbers_in_use", staticmethod(nothing_in_use))

    with pytest.raises(CardNumberInUse):
        await create_consumer(async_session, _create_payload(**numbers))

    consumers = await list_all_consumers(async_session)
    assert len(consumers) == 1
    assert consumers[0].name == "Maria Silva"

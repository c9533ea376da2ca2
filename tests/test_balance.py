from decimal import Decimal

import pytest

from benefit_card.core.errors import CardNotFound
from benefit_card.core.purses import PurseType
from benefit_card.schemas.card import BalanceAdjustment
from benefit_card.services.balance import PURSE_LOOKUP_ORDER, adjust_balance, find_purse, resolve_purse


def test_lookup_order_covers_every_purse_once():
    assert PURSE_LOOKUP_ORDER == (PurseType.DRUGSTORE, PurseType.FOOD, PurseType.FUEL)
    assert set(PURSE_LOOKUP_ORDER) == set(PurseType)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "card_number, purse",
    [(111, PurseType.FOOD), (222, PurseType.FUEL), (333, PurseType.DRUGSTORE)],
)
async def test_resolve_purse_finds_owning_purse(async_session, make_consumer, card_number, purse):
    consumer = await make_consumer()

    match = await resolve_purse(async_session, card_number)

    assert match.consumer.id == consumer.id
    assert match.purse is purse


@pytest.mark.asyncio
async def test_find_purse_returns_none_for_unknown_number(async_session, make_consumer):
    await make_consumer()
    assert await find_purse(async_session, 999) is None


@pytest.mark.asyncio
async def test_resolve_purse_raises_card_not_found(async_session, make_consumer):
    await make_consumer()
    with pytest.raises(CardNotFound) as exc_info:
        await resolve_purse(async_session, 999)
    assert exc_info.value.purse is None


@pytest.mark.asyncio
async def test_adjust_balance_scenario(async_session, make_consumer):
    await make_consumer(food=111, food_balance="30.00")

    consumer = await adjust_balance(async_session, 111, Decimal("15.0"))

    assert consumer.food_card_balance == Decimal("45.00")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "card_number, purse",
    [(111, PurseType.FOOD), (222, PurseType.FUEL), (333, PurseType.DRUGSTORE)],
)
async def test_adjust_balance_credits_only_owning_purse(async_session, make_consumer, card_number, purse):
    consumer = await make_consumer()
    before = consumer.card

    updated = await adjust_balance(async_session, card_number, Decimal("10.00"))

    after = updated.card
    assert after.balance(purse) == before.balance(purse) + Decimal("10.00")
    for other in PurseType:
        if other is not purse:
            assert after.balance(other) == before.balance(other)


@pytest.mark.asyncio
async def test_adjust_balance_allows_negative_result(async_session, make_consumer):
    await make_consumer(drugstore=333, drugstore_balance="40.00")

    consumer = await adjust_balance(async_session, 333, Decimal("-60.00"))

    assert consumer.drugstore_card_balance == Decimal("-20.00")


@pytest.mark.asyncio
async def test_adjust_balance_unknown_card(async_session, make_consumer):
    await make_consumer()
    with pytest.raises(CardNotFound):
        await adjust_balance(async_session, 4242, Decimal("10.00"))


@pytest.mark.asyncio
async def test_second_consumer_cards_resolve_to_their_owner(async_session, make_consumer):
    await make_consumer()
    other = await make_consumer(food=444, fuel=555, drugstore=666, name="Joao Souza")

    match = await resolve_purse(async_session, 555)

    assert match.consumer.id == other.id
    assert match.purse is PurseType.FUEL


def test_adjustment_value_is_rounded_to_cents():
    assert BalanceAdjustment(value="0.126").value == Decimal("0.13")
    assert BalanceAdjustment(value="-5.5").value == Decimal("-5.50")


@pytest.mark.asyncio
async def test_adjust_balance_rounds_delta_to_cents(async_session, make_consumer, caplog):
    await make_consumer(food=111, food_balance="30.00")

    with caplog.at_level("INFO", logger="benefit_card.services.balance"):
        consumer = await adjust_balance(async_session, 111, Decimal("15.004"))

    assert consumer.food_card_balance == Decimal("45.00")
    record = next(r for r in caplog.records if r.getMessage() == "Card balance set")
    assert record.details["extra"]["delta"] == "15.00"

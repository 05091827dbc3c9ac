"""Tests for the market and token registry."""

import pytest

from ideamarket.errors import (
    AlreadyExists,
    AlreadyInitialized,
    InvalidParameters,
    MarketNotFound,
    NameVerificationFailed,
    NotFound,
    Unauthorized,
)
from ideamarket.registry import IdeaTokenFactory
from ideamarket.verifiers import AlwaysValidNameVerifier, DomainNoSubdomainNameVerifier

TOKEN_NAME = "example.com"
MARKET_NAME = "testMarket"
BASE_COST = 10**18
PRICE_RISE = 10**17
TRADING_FEE_RATE = 100
PLATFORM_FEE_RATE = 50

USER = "0xuser"
ADMIN = "0xadmin"
EXCHANGE = "0xexchange"


def _factory() -> IdeaTokenFactory:
    factory = IdeaTokenFactory()
    factory.initialize(ADMIN, EXCHANGE)
    return factory


def _add_market(factory: IdeaTokenFactory, name: str = MARKET_NAME, verifier=None, **overrides):
    return factory.add_market(
        name,
        verifier,
        overrides.get("base_cost", BASE_COST),
        overrides.get("price_rise", PRICE_RISE),
        overrides.get("trading_fee_rate", TRADING_FEE_RATE),
        overrides.get("platform_fee_rate", PLATFORM_FEE_RATE),
        caller=overrides.get("caller", ADMIN),
    )


# --- Ownership ---


def test_admin_is_owner():
    factory = _factory()
    assert factory.get_owner() == ADMIN
    assert factory.get_exchange() == EXCHANGE


def test_initialize_only_once():
    factory = _factory()
    with pytest.raises(AlreadyInitialized):
        factory.initialize(USER, EXCHANGE)
    assert factory.get_owner() == ADMIN


def test_initialize_requires_exchange_and_rolls_back():
    factory = IdeaTokenFactory()
    with pytest.raises(InvalidParameters):
        factory.initialize(ADMIN, "")
    assert factory.get_owner() is None

    factory.initialize(ADMIN, EXCHANGE)
    assert factory.get_owner() == ADMIN


def test_uninitialized_registry_has_no_owner():
    factory = IdeaTokenFactory()
    with pytest.raises(Unauthorized):
        _add_market(factory, caller=ADMIN)


# --- Markets ---


def test_can_add_market():
    factory = _factory()
    verifier = DomainNoSubdomainNameVerifier()
    _add_market(factory, verifier=verifier)

    assert factory.get_num_markets() == 1
    assert factory.get_market_id_by_name(MARKET_NAME) == 1

    expected = (
        True,
        1,
        MARKET_NAME,
        verifier,
        0,
        BASE_COST,
        PRICE_RISE,
        TRADING_FEE_RATE,
        PLATFORM_FEE_RATE,
    )
    assert factory.get_market_details_by_id(1) == expected
    assert factory.get_market_details_by_name(MARKET_NAME) == expected


def test_market_record_field_order():
    factory = _factory()
    record = _add_market(factory)
    assert record._fields == (
        "exists",
        "id",
        "name",
        "name_verifier",
        "num_tokens",
        "base_cost",
        "price_rise",
        "trading_fee_rate",
        "platform_fee_rate",
    )


def test_market_ids_are_sequential():
    factory = _factory()
    _add_market(factory, "a")
    _add_market(factory, "b")
    _add_market(factory, "c")

    assert [r.id for r in factory.list_markets()] == [1, 2, 3]
    assert factory.get_market_id_by_name("c") == 3
    assert factory.get_market_details_by_id(2).name == "b"


def test_unknown_market_name_has_id_zero():
    factory = _factory()
    assert factory.get_market_id_by_name("missing") == 0


def test_fail_add_market_with_same_name():
    factory = _factory()
    _add_market(factory)

    with pytest.raises(AlreadyExists, match="addMarket: market exists already"):
        _add_market(factory)
    assert factory.get_num_markets() == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"base_cost": 0},
        {"price_rise": 0},
        {"trading_fee_rate": 0},
        {"platform_fee_rate": -1},
        {"base_cost": -5},
        {"base_cost": 1.5},
        {"trading_fee_rate": True},
    ],
)
def test_checks_parameters_when_adding_market(overrides):
    factory = _factory()
    with pytest.raises(InvalidParameters, match="addMarket: invalid parameters"):
        _add_market(factory, **overrides)
    assert factory.get_num_markets() == 0


def test_empty_market_name_is_invalid():
    factory = _factory()
    with pytest.raises(InvalidParameters):
        _add_market(factory, name="")


def test_zero_platform_fee_is_allowed():
    factory = _factory()
    record = _add_market(factory, platform_fee_rate=0)
    assert record.platform_fee_rate == 0


def test_only_admin_can_add_market():
    factory = _factory()
    with pytest.raises(Unauthorized, match="Ownable: onlyOwner"):
        _add_market(factory, caller=USER)
    assert factory.get_num_markets() == 0


def test_add_market_with_verifier_key():
    factory = _factory()
    record = _add_market(factory, verifier="domain_no_subdomain")
    assert record.name_verifier == DomainNoSubdomainNameVerifier()


def test_add_market_with_unknown_verifier_key():
    factory = _factory()
    with pytest.raises(InvalidParameters):
        _add_market(factory, verifier="nope")
    assert factory.get_num_markets() == 0


def test_market_lookups_not_found():
    factory = _factory()
    with pytest.raises(NotFound):
        factory.get_market_details_by_id(1)
    with pytest.raises(NotFound):
        factory.get_market_details_by_name(MARKET_NAME)


# --- Tokens ---


def test_can_add_token():
    factory = _factory()
    verifier = DomainNoSubdomainNameVerifier()
    _add_market(factory, verifier=verifier)

    token = factory.add_token(TOKEN_NAME, 1)

    assert token == (True, 1, TOKEN_NAME, 1)
    assert factory.get_market_details_by_id(1) == (
        True,
        1,
        MARKET_NAME,
        verifier,
        1,
        BASE_COST,
        PRICE_RISE,
        TRADING_FEE_RATE,
        PLATFORM_FEE_RATE,
    )
    assert factory.get_token_details(1, 1) == token


def test_token_ids_are_scoped_per_market():
    factory = _factory()
    _add_market(factory, "first")
    _add_market(factory, "second")

    factory.add_token("a.com", 1)
    factory.add_token("b.com", 1)
    token = factory.add_token("c.com", 2)

    assert token.id == 1
    assert token.market_id == 2
    assert factory.get_market_details_by_id(1).num_tokens == 2
    assert factory.get_market_details_by_id(2).num_tokens == 1
    assert [t.name for t in factory.list_tokens(1)] == ["a.com", "b.com"]


def test_fail_add_token_with_invalid_name():
    factory = _factory()
    _add_market(factory, verifier=DomainNoSubdomainNameVerifier())

    with pytest.raises(NameVerificationFailed, match="addToken: name verification failed") as info:
        factory.add_token("some.invalid.name", 1)
    assert info.value.reason == NameVerificationFailed.REJECTED
    assert factory.get_market_details_by_id(1).num_tokens == 0


def test_fail_add_token_with_same_name_twice():
    factory = _factory()
    _add_market(factory, verifier=DomainNoSubdomainNameVerifier())

    factory.add_token(TOKEN_NAME, 1)
    with pytest.raises(NameVerificationFailed) as info:
        factory.add_token(TOKEN_NAME, 1)
    assert info.value.reason == NameVerificationFailed.TAKEN
    assert factory.get_market_details_by_id(1).num_tokens == 1


def test_token_names_are_unique_across_markets():
    factory = _factory()
    _add_market(factory, "first")
    _add_market(factory, "second", verifier=AlwaysValidNameVerifier())

    factory.add_token(TOKEN_NAME, 1)
    with pytest.raises(NameVerificationFailed):
        factory.add_token(TOKEN_NAME, 2)
    assert factory.get_market_details_by_id(2).num_tokens == 0


def test_fail_add_token_invalid_market():
    factory = _factory()
    _add_market(factory, verifier=DomainNoSubdomainNameVerifier())

    factory.add_token(TOKEN_NAME, 1)
    with pytest.raises(MarketNotFound, match="addToken: market does not exist"):
        factory.add_token(TOKEN_NAME, 2)


def test_market_without_verifier_accepts_any_name():
    factory = _factory()
    _add_market(factory)
    token = factory.add_token("Any Name At All!", 1)
    assert token.id == 1


def test_empty_token_name_rejected():
    factory = _factory()
    _add_market(factory)
    with pytest.raises(NameVerificationFailed):
        factory.add_token("", 1)


def test_anyone_can_add_token():
    factory = _factory()
    _add_market(factory)
    token = factory.add_token(TOKEN_NAME, 1, caller=USER)
    assert token.name == TOKEN_NAME


def test_token_lookups():
    factory = _factory()
    _add_market(factory)
    factory.add_token(TOKEN_NAME, 1)

    assert factory.get_token_details_by_name(TOKEN_NAME).id == 1
    assert factory.get_token_id_by_name(TOKEN_NAME, 1) == 1
    assert factory.get_token_id_by_name(TOKEN_NAME, 2) == 0
    assert factory.get_token_id_by_name("other.com", 1) == 0
    with pytest.raises(NotFound):
        factory.get_token_details(1, 2)
    with pytest.raises(NotFound):
        factory.get_token_details_by_name("other.com")


def test_list_tokens_unknown_market():
    factory = _factory()
    with pytest.raises(MarketNotFound):
        factory.list_tokens(1)


# --- Fees ---


def test_can_set_trading_fee():
    factory = _factory()
    _add_market(factory)

    factory.set_trading_fee(1, 123, caller=ADMIN)
    details = factory.get_market_details_by_id(1)
    assert details.trading_fee_rate == 123
    assert details.platform_fee_rate == PLATFORM_FEE_RATE


def test_fail_user_sets_trading_fee():
    factory = _factory()
    _add_market(factory)

    with pytest.raises(Unauthorized, match="Ownable: onlyOwner"):
        factory.set_trading_fee(1, 123, caller=USER)
    assert factory.get_market_details_by_id(1).trading_fee_rate == TRADING_FEE_RATE


def test_fail_set_trading_fee_invalid_market():
    factory = _factory()
    _add_market(factory)

    with pytest.raises(NotFound, match="setTradingFee: market does not exist"):
        factory.set_trading_fee(2, 123, caller=ADMIN)
    assert factory.get_market_details_by_id(1).trading_fee_rate == TRADING_FEE_RATE


def test_can_set_platform_fee():
    factory = _factory()
    _add_market(factory)

    factory.set_platform_fee(1, 123, caller=ADMIN)
    details = factory.get_market_details_by_id(1)
    assert details.platform_fee_rate == 123
    assert details.trading_fee_rate == TRADING_FEE_RATE


def test_fail_user_sets_platform_fee():
    factory = _factory()
    _add_market(factory)

    with pytest.raises(Unauthorized, match="Ownable: onlyOwner"):
        factory.set_platform_fee(1, 123, caller=USER)
    assert factory.get_market_details_by_id(1).platform_fee_rate == PLATFORM_FEE_RATE


def test_fail_set_platform_fee_invalid_market():
    factory = _factory()
    _add_market(factory)

    with pytest.raises(NotFound, match="setPlatformFee: market does not exist"):
        factory.set_platform_fee(2, 123, caller=ADMIN)
    assert factory.get_market_details_by_id(1).platform_fee_rate == PLATFORM_FEE_RATE


def test_unauthorized_checked_before_existence():
    factory = _factory()
    with pytest.raises(Unauthorized):
        factory.set_trading_fee(7, 1, caller=USER)


def test_negative_fee_rejected():
    factory = _factory()
    _add_market(factory)
    with pytest.raises(InvalidParameters):
        factory.set_platform_fee(1, -1, caller=ADMIN)
    assert factory.get_market_details_by_id(1).platform_fee_rate == PLATFORM_FEE_RATE


def test_fee_can_be_set_to_zero():
    factory = _factory()
    _add_market(factory)
    factory.set_trading_fee(1, 0, caller=ADMIN)
    assert factory.get_market_details_by_id(1).trading_fee_rate == 0

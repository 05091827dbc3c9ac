"""Tests for registry data models and the error taxonomy."""

from ideamarket.errors import (
    AlreadyExists,
    InvalidParameters,
    MarketNotFound,
    NameVerificationFailed,
    NotFound,
    RegistryError,
    Unauthorized,
)
from ideamarket.registry.models import Market, MarketRecord, Token, TokenRecord
from ideamarket.verifiers import DomainNoSubdomainNameVerifier


def test_market_defaults():
    market = Market(id=1, name="m")
    assert market.name_verifier is None
    assert market.num_tokens == 0
    assert market.verifier_key == ""
    assert market.accepts("anything")


def test_market_accepts_uses_verifier():
    market = Market(id=1, name="m", name_verifier=DomainNoSubdomainNameVerifier())
    assert market.verifier_key == "domain_no_subdomain"
    assert market.accepts("example.com")
    assert not market.accepts("a.b.c")


def test_market_to_record():
    market = Market(
        id=3,
        name="m",
        base_cost=10,
        price_rise=2,
        trading_fee_rate=100,
        platform_fee_rate=0,
        num_tokens=4,
    )
    record = market.to_record()
    assert isinstance(record, MarketRecord)
    assert record == (True, 3, "m", None, 4, 10, 2, 100, 0)


def test_token_to_record():
    token = Token(id=2, name="example.com", market_id=1)
    assert token.to_record() == TokenRecord(True, 2, "example.com", 1)


def test_error_codes_are_distinct():
    classes = [
        Unauthorized,
        AlreadyExists,
        InvalidParameters,
        NotFound,
        MarketNotFound,
        NameVerificationFailed,
    ]
    codes = {cls.code for cls in classes}
    assert len(codes) == len(classes)
    assert all(issubclass(cls, RegistryError) for cls in classes)


def test_error_to_dict():
    err = NotFound("setTradingFee: market does not exist")
    assert err.to_dict() == {
        "code": "NOT_FOUND",
        "message": "setTradingFee: market does not exist",
    }
    assert str(err) == "setTradingFee: market does not exist"


def test_name_verification_failed_reason_defaults_to_rejected():
    assert NameVerificationFailed("x").reason == NameVerificationFailed.REJECTED

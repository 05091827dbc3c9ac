"""Tests for the registry event log."""

import tempfile

import pytest

from ideamarket import events as ev
from ideamarket.errors import Unauthorized
from ideamarket.events import EventLog
from ideamarket.registry import IdeaTokenFactory

ADMIN = "0xadmin"


def test_emit_and_read_back():
    with tempfile.TemporaryDirectory() as tmpdir:
        log = EventLog(tmpdir)
        first = log.emit("NewMarket", caller=ADMIN, args={"id": 1})
        log.emit("NewToken", args={"id": 1, "market_id": 1})

        assert len(first.id) == 16
        events = log.get_events()
        assert [e.name for e in events] == ["NewToken", "NewMarket"]
        assert events[1].id == first.id
        assert events[1].caller == ADMIN
        assert events[1].args == {"id": 1}


def test_filter_and_limit():
    with tempfile.TemporaryDirectory() as tmpdir:
        log = EventLog(tmpdir)
        for i in range(5):
            log.emit("NewToken", args={"id": i})
        log.emit("NewMarket")

        assert len(log.get_events(name="NewToken")) == 5
        assert len(log.get_events(limit=2)) == 2
        assert log.get_events(name="NewPlatformFee") == []


def test_factory_emits_on_commit_only():
    with tempfile.TemporaryDirectory() as tmpdir:
        log = EventLog(tmpdir)
        factory = IdeaTokenFactory(events=log)
        factory.initialize(ADMIN, "0xexchange")
        factory.add_market("testMarket", "domain_no_subdomain", 10**18, 10**17, 100, 50, caller=ADMIN)
        factory.add_token("example.com", 1, caller="0xuser")
        factory.set_trading_fee(1, 123, caller=ADMIN)
        factory.set_platform_fee(1, 7, caller=ADMIN)
        with pytest.raises(Unauthorized):
            factory.set_platform_fee(1, 8, caller="0xuser")

        names = [e.name for e in reversed(log.get_events())]
        assert names == [
            ev.INITIALIZED,
            ev.NEW_MARKET,
            ev.NEW_TOKEN,
            ev.NEW_TRADING_FEE,
            ev.NEW_PLATFORM_FEE,
        ]

        new_market = log.get_events(name=ev.NEW_MARKET)[0]
        assert new_market.args["name"] == "testMarket"
        assert new_market.args["base_cost"] == str(10**18)
        assert new_market.args["name_verifier"] == "domain_no_subdomain"

        new_token = log.get_events(name=ev.NEW_TOKEN)[0]
        assert new_token.caller == "0xuser"
        assert new_token.args == {"id": 1, "market_id": 1, "name": "example.com"}


class _BrokenLog(EventLog):
    def emit(self, event, caller=None, args=None):
        raise OSError("read-only file system")


def test_failed_event_write_keeps_committed_change():
    with tempfile.TemporaryDirectory() as tmpdir:
        factory = IdeaTokenFactory(events=_BrokenLog(tmpdir))
        factory.initialize(ADMIN, "0xexchange")
        record = factory.add_market("testMarket", None, 10, 1, 100, 0, caller=ADMIN)

        assert factory.get_owner() == ADMIN
        assert record.id == 1
        assert factory.get_num_markets() == 1

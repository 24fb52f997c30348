"""Tests for the command line entry point."""

import pytest

from conftest import FakeLookupClient, InMemoryWordStore
from datamuse_backfill import cli
from datamuse_backfill.config import BackfillConfig


class FakeDatabase:
    def __init__(self, reachable=True):
        self.reachable = reachable

    async def test_connection(self):
        return self.reachable


FAST_CONFIG = BackfillConfig(batch_size=2, per_call_delay=0, inter_batch_delay=0)


@pytest.mark.asyncio
async def test_run_backfill_processes_everything():
    store = InMemoryWordStore(["a", "b", "c"])

    code = await cli.run_backfill(FAST_CONFIG, FakeDatabase(), FakeLookupClient(), store=store)

    assert code == 0
    assert await store.count_pending() == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("db_ok, api_ok", [(False, True), (True, False), (False, False)])
async def test_run_backfill_fails_fast_on_connectivity(db_ok, api_ok):
    store = InMemoryWordStore(["a"])

    code = await cli.run_backfill(
        FAST_CONFIG, FakeDatabase(db_ok), FakeLookupClient(reachable=api_ok), store=store
    )

    assert code == 1
    assert store.select_calls == 0


@pytest.mark.asyncio
async def test_check_only_does_not_process():
    store = InMemoryWordStore(["a"])

    code = await cli.run_backfill(
        FAST_CONFIG, FakeDatabase(), FakeLookupClient(), store=store, check_only=True
    )

    assert code == 0
    assert store.select_calls == 0


@pytest.mark.asyncio
async def test_exhausted_selection_retries_exit_with_failure():
    config = FAST_CONFIG.with_overrides(max_selection_retries=0)
    store = InMemoryWordStore(["a"], select_failures=3)

    code = await cli.run_backfill(config, FakeDatabase(), FakeLookupClient(), store=store)

    assert code == 1


def test_parse_args_defaults_leave_config_untouched():
    args = cli.parse_args([])

    assert args.batch_size is None
    assert args.delay is None
    assert args.batch_delay is None
    assert args.check_only is False


def test_main_returns_failure_on_fatal_error(monkeypatch):
    async def boom(args):
        raise RuntimeError("pool exploded")

    monkeypatch.setattr(cli, "_main_async", boom)
    monkeypatch.setattr(cli, "configure_logging", lambda *a, **kw: None)

    assert cli.main(["--check-only"]) == 1

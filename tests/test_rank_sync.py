# tests/test_rank_sync.py

"""Tests for the edit-in-place leaderboard sync engine."""

import asyncio

import pytest

from rankbot.data_models.standings import SyncOutcome, ThresholdConfig
from rankbot.utils.exceptions import MessageDeliveryError, TransientFetchError


@pytest.mark.asyncio
async def test_first_sync_creates_then_second_edits(engine, gateway):
    first = await engine.sync_destination(111)
    second = await engine.sync_destination(111)

    assert first == SyncOutcome.CREATED
    assert second == SyncOutcome.EDITED
    assert len(gateway.sends) == 1
    assert len(gateway.edits) == 1
    message_id = gateway.sends[0][1]
    assert engine.message_cache.get(111) == message_id
    assert gateway.edits[0][:2] == (111, message_id)


@pytest.mark.asyncio
async def test_rendered_content_reaches_the_channel(engine, gateway):
    await engine.sync_destination(111)

    content = gateway.sends[0][2]
    assert "1. Alpha 2300" in content
    assert "2. Charlie 2100" in content
    assert "Bravo" not in content


@pytest.mark.asyncio
async def test_recovery_seeds_cache_so_next_sync_edits(engine, gateway):
    gateway.add_history(111, 500, gateway.bot_user_id, "old ranks")
    gateway.add_history(111, 501, 12345, "someone chatting")

    recovered = await engine.recover_messages(scan_limit=10)
    outcome = await engine.sync_destination(111)

    assert recovered == 1
    assert outcome == SyncOutcome.EDITED
    assert gateway.sends == []
    assert gateway.content_of(111, 500).startswith("The Ranks")


@pytest.mark.asyncio
async def test_recovery_picks_newest_bot_message(engine, gateway):
    gateway.add_history(111, 500, gateway.bot_user_id)
    gateway.add_history(111, 502, gateway.bot_user_id)
    gateway.add_history(111, 503, 42)

    await engine.recover_messages(scan_limit=10)

    assert engine.message_cache.get(111) == 502


@pytest.mark.asyncio
async def test_recovery_ignores_messages_outside_scan_window(engine, gateway):
    gateway.add_history(111, 500, gateway.bot_user_id)
    for i in range(10):
        gateway.add_history(111, 600 + i, 42)

    recovered = await engine.recover_messages(scan_limit=10)

    assert recovered == 0
    assert 111 not in engine.message_cache


@pytest.mark.asyncio
async def test_recovery_failure_in_one_channel_does_not_stop_others(engine, gateway):
    gateway.missing_channels.add(111)
    gateway.add_history(222, 700, gateway.bot_user_id)

    recovered = await engine.recover_messages(scan_limit=10)

    assert recovered == 1
    assert engine.message_cache.get(222) == 700


@pytest.mark.asyncio
async def test_deleted_message_is_replaced_exactly_once(engine, gateway):
    await engine.sync_destination(111)
    old_id = engine.message_cache.get(111)
    gateway.delete_message(111, old_id)

    outcome = await engine.sync_destination(111)

    assert outcome == SyncOutcome.CREATED
    assert len(gateway.sends) == 2
    new_id = engine.message_cache.get(111)
    assert new_id != old_id
    assert new_id == gateway.sends[-1][1]


@pytest.mark.asyncio
async def test_uneditable_message_falls_back_to_create(engine, gateway):
    engine.message_cache.set(111, 42)
    gateway.failing_edits.add(42)

    outcome = await engine.sync_destination(111)

    assert outcome == SyncOutcome.CREATED
    assert engine.message_cache.get(111) != 42


@pytest.mark.asyncio
async def test_fetch_failure_raises_and_leaves_cache_untouched(engine, gateway, ranking_store):
    await engine.sync_destination(111)
    message_id = engine.message_cache.get(111)
    ranking_store.fail = True

    with pytest.raises(TransientFetchError):
        await engine.sync_destination(111)

    assert engine.message_cache.get(111) == message_id
    assert len(gateway.sends) == 1


@pytest.mark.asyncio
async def test_send_failure_raises_delivery_error(engine, gateway):
    gateway.missing_channels.add(111)

    with pytest.raises(MessageDeliveryError):
        await engine.sync_destination(111)

    assert 111 not in engine.message_cache


@pytest.mark.asyncio
async def test_sync_all_isolates_failing_destination(engine, gateway):
    gateway.missing_channels.add(111)

    report = await engine.sync_all()

    assert report.failed == [111]
    assert report.succeeded == [222]
    assert not report.all_succeeded
    assert engine.message_cache.get(222) is not None


@pytest.mark.asyncio
async def test_sync_all_reports_fetch_failures_for_every_destination(engine, ranking_store):
    ranking_store.fail = True

    report = await engine.sync_all()

    assert report.failed == [111, 222]
    assert report.succeeded == []


@pytest.mark.asyncio
async def test_concurrent_syncs_of_same_destination_never_duplicate(engine, gateway):
    outcomes = await asyncio.gather(*(engine.sync_destination(111) for _ in range(5)))

    assert outcomes.count(SyncOutcome.CREATED) == 1
    assert outcomes.count(SyncOutcome.EDITED) == 4
    assert len(gateway.sends) == 1


@pytest.mark.asyncio
async def test_sync_reads_cached_thresholds_without_refreshing(engine, backend_client, ranking_store, threshold_service):
    await engine.sync_destination(111)

    assert backend_client.fetches == 0
    assert ranking_store.thresholds_seen == [threshold_service.current]


@pytest.mark.asyncio
async def test_sync_uses_refreshed_thresholds(engine, gateway, backend_client, threshold_service):
    backend_client.documents.append({"min_games_for_rank": 15})
    await threshold_service.refresh()

    await engine.sync_destination(111)

    content = gateway.sends[0][2]
    assert "1. Alpha 2300" in content
    assert "Charlie" not in content
    assert threshold_service.current == ThresholdConfig(min_games_for_rank=15)


@pytest.mark.asyncio
async def test_message_cache_snapshot_lists_live_messages(engine, gateway):
    await engine.sync_all()

    snapshot = engine.message_cache.snapshot()
    assert snapshot == {111: gateway.sends[0][1], 222: gateway.sends[1][1]}

    # The snapshot is a copy
    snapshot.clear()
    assert len(engine.message_cache) == 2

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from decimal import Decimal

from timeless.core.enums import DealState, RightsType, UsageType, UserRole
from timeless.negotiation.terms import DealTerms
from timeless.realtime.notifier import NullNotifier, build_notifier
from timeless.realtime.websocket import WebSocketNotifier
from timeless.schemas.deals import DealSnapshot


class _FakeSocket:
    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.accepted = False
        self.closed = False
        self.sent = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_json(self, data) -> None:
        if self.fail:
            raise ConnectionError("peer went away")
        self.sent.append(data)

    async def close(self) -> None:
        self.closed = True


def _snapshot(artist_id: str = "artist-1", exec_id: str = "exec-1") -> DealSnapshot:
    now = datetime.now(timezone.utc)
    return DealSnapshot(
        id="deal-1",
        track_id="track-1",
        artist_id=artist_id,
        exec_id=exec_id,
        state=DealState.COUNTERED,
        terms=DealTerms(usage_type=UsageType.SYNC, rights=RightsType.EXCLUSIVE, duration=12, price=Decimal("1500")),
        created_by_id=exec_id,
        created_by_role=UserRole.EXEC,
        created_at=now,
        updated_at=now,
        version=2,
    )


def test_publish_reaches_both_parties_only():
    async def scenario():
        notifier = WebSocketNotifier()
        await notifier.init()
        artist, executive, stranger = _FakeSocket(), _FakeSocket(), _FakeSocket()
        await notifier.connect("artist-1", artist)
        await notifier.connect("exec-1", executive)
        await notifier.connect("someone-else", stranger)

        future = notifier.publish(_snapshot())
        delivered = await asyncio.wrap_future(future)
        await notifier.teardown()
        return delivered, artist, executive, stranger

    delivered, artist, executive, stranger = asyncio.run(scenario())

    assert delivered == 2
    assert artist.accepted and artist.sent[0] == {"type": "connected"}
    update = artist.sent[-1]
    assert update["type"] == "dealUpdate"
    assert update["deal"]["state"] == "COUNTERED"
    assert update["deal"]["terms"]["price"] == "1500"
    assert executive.sent[-1] == update
    assert stranger.sent == [{"type": "connected"}]
    assert artist.closed and stranger.closed


def test_failed_socket_is_dropped_without_affecting_others():
    async def scenario():
        notifier = WebSocketNotifier()
        await notifier.init()
        broken, healthy = _FakeSocket(), _FakeSocket()
        await notifier.connect("artist-1", broken)
        await notifier.connect("exec-1", healthy)
        broken.fail = True

        delivered = await asyncio.wrap_future(notifier.publish(_snapshot()))
        return notifier, delivered, healthy

    notifier, delivered, healthy = asyncio.run(scenario())

    assert delivered == 1
    assert healthy.sent[-1]["type"] == "dealUpdate"
    assert notifier.connection_count("artist-1") == 0
    assert notifier.connection_count("exec-1") == 1


def test_publish_before_init_is_a_noop():
    assert WebSocketNotifier().publish(_snapshot()) is None


def test_disconnect_forgets_socket():
    async def scenario():
        notifier = WebSocketNotifier()
        socket = _FakeSocket()
        await notifier.connect("artist-1", socket)
        notifier.disconnect("artist-1", socket)
        notifier.disconnect("artist-1", socket)
        return notifier

    assert asyncio.run(scenario()).connection_count("artist-1") == 0


def test_build_notifier_selects_backend():
    assert isinstance(build_notifier("websocket"), WebSocketNotifier)
    assert isinstance(build_notifier("none"), NullNotifier)

"""Unit tests for src/api/relay.py"""

import asyncio

from src.api.relay import ConnectionManager


class FakeWebSocket:
    def __init__(self) -> None:
        self.accepted = False
        self.sent: list[str] = []

    async def accept(self) -> None:
        self.accepted = True

    async def send_text(self, payload: str) -> None:
        self.sent.append(payload)


class UnreachableWebSocket(FakeWebSocket):
    async def send_text(self, payload: str) -> None:
        raise RuntimeError("peer gone")


def test_relay_to_everybody_but_the_sender() -> None:
    manager = ConnectionManager()
    sender, first, second = FakeWebSocket(), FakeWebSocket(), FakeWebSocket()

    async def scenario() -> None:
        for websocket in (sender, first, second):
            await manager.connect(websocket)
        await manager.relay(sender, "not even json")

    asyncio.run(scenario())
    assert all(websocket.accepted for websocket in (sender, first, second))
    assert sender.sent == []
    assert first.sent == ["not even json"]
    assert second.sent == ["not even json"]


def test_disconnected_clients_get_nothing() -> None:
    manager = ConnectionManager()
    sender, gone = FakeWebSocket(), FakeWebSocket()

    async def scenario() -> None:
        await manager.connect(sender)
        await manager.connect(gone)
        manager.disconnect(gone)
        await manager.relay(sender, "e2-e4")

    asyncio.run(scenario())
    assert gone.sent == []
    assert manager.active_connections == [sender]
    # disconnecting twice is harmless
    manager.disconnect(gone)


def test_unreachable_peer_is_dropped() -> None:
    manager = ConnectionManager()
    sender, unreachable, healthy = FakeWebSocket(), UnreachableWebSocket(), FakeWebSocket()

    async def scenario() -> None:
        for websocket in (sender, unreachable, healthy):
            await manager.connect(websocket)
        await manager.relay(sender, "e2-e4")

    asyncio.run(scenario())
    assert healthy.sent == ["e2-e4"]
    assert manager.active_connections == [sender, healthy]

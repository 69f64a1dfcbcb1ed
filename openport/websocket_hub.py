from __future__ import annotations

import asyncio
from collections import defaultdict

from fastapi import WebSocket

from openport.api.models import RunSnapshot


def run_update_payload(snap: RunSnapshot) -> dict[str, object]:
    """Small push message; clients fetch the full snapshot over HTTP if they need it."""

    return {
        "type": "run_updated",
        "run_id": str(snap.run_id),
        "phase": snap.phase.value,
        "time_left": snap.state.time_left,
        "current_event_id": snap.current_event.id if snap.current_event else None,
        "outcome": snap.outcome.value if snap.outcome else None,
    }


class RunWebSocketHub:
    """In-process WebSocket fan-out of run updates, keyed by run id.

    Runs are single-player but a player may have several tabs open, so each run
    keeps a set of sockets. Sockets that fail on send are dropped.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, set[WebSocket]] = defaultdict(set)
        self._lock = asyncio.Lock()

    async def subscribe(self, run_id: str, websocket: WebSocket) -> None:
        # Register before the handshake completes.
        async with self._lock:
            self._subscribers[run_id].add(websocket)
        await websocket.accept()

    async def unsubscribe(self, run_id: str, websocket: WebSocket) -> None:
        async with self._lock:
            sockets = self._subscribers.get(run_id)
            if sockets is None:
                return
            sockets.discard(websocket)
            if not sockets:
                del self._subscribers[run_id]

    async def publish(self, snap: RunSnapshot) -> int:
        """Send a run_updated message to every subscriber. Returns how many received it."""

        run_id = str(snap.run_id)
        async with self._lock:
            sockets = list(self._subscribers.get(run_id, ()))

        payload = run_update_payload(snap)
        delivered = 0
        for ws in sockets:
            try:
                await ws.send_json(payload)
            except Exception:
                await self.unsubscribe(run_id, ws)
            else:
                delivered += 1
        return delivered


hub = RunWebSocketHub()

from __future__ import annotations

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, WebSocket, WebSocketDisconnect, status
from fastapi.concurrency import run_in_threadpool

from openport.api.deps import get_run_store, get_settings
from openport.api.models import CooldownRemainingResponse, RunSnapshot, SubmitActionRequest
from openport.config import Settings
from openport.controller import RunController
from openport.run_store import RunStore
from openport.ticker import tickers
from openport.websocket_hub import hub

router = APIRouter()


async def _publish(snap: RunSnapshot) -> None:
    await hub.publish(snap)


def _require_run(store: RunStore, run_id: UUID) -> RunController:
    controller = store.get(run_id)
    if controller is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Run not found")
    return controller


async def _start(controller: RunController, settings: Settings) -> RunSnapshot:
    # Catalog fetch may go over the network; keep it off the event loop.
    snap = await run_in_threadpool(controller.start_run)
    if settings.auto_tick:
        tickers.ensure(controller, interval=settings.tick_seconds, on_tick=_publish)
    await _publish(snap)
    return snap


@router.websocket("/ws/run/{run_id}")
async def run_updates_ws(websocket: WebSocket, run_id: UUID) -> None:
    rid = str(run_id)
    await hub.subscribe(rid, websocket)

    try:
        # Keep the socket open; client can optionally send pings.
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await hub.unsubscribe(rid, websocket)
    except Exception:
        await hub.unsubscribe(rid, websocket)
        raise


@router.get("/healthcheck")
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.post("/run", response_model=RunSnapshot, status_code=status.HTTP_201_CREATED)
async def create_run_route(
    store: RunStore = Depends(get_run_store),
    settings: Settings = Depends(get_settings),
) -> RunSnapshot:
    controller = store.create()
    return await _start(controller, settings)


@router.get("/run/{run_id}", response_model=RunSnapshot)
async def get_run_route(run_id: UUID, store: RunStore = Depends(get_run_store)) -> RunSnapshot:
    return _require_run(store, run_id).snapshot()


@router.post("/run/{run_id}/start", response_model=RunSnapshot)
async def restart_run_route(
    run_id: UUID,
    store: RunStore = Depends(get_run_store),
    settings: Settings = Depends(get_settings),
) -> RunSnapshot:
    return await _start(_require_run(store, run_id), settings)


@router.post("/run/{run_id}/actions", response_model=RunSnapshot)
async def submit_action_route(
    run_id: UUID,
    payload: SubmitActionRequest,
    store: RunStore = Depends(get_run_store),
) -> RunSnapshot:
    controller = _require_run(store, run_id)

    event = controller.find_event(payload.event_id)
    if event is None:
        raise HTTPException(status_code=422, detail=f"Unknown event: {payload.event_id}")
    action = event.action(payload.action_id)
    if action is None:
        raise HTTPException(
            status_code=422,
            detail=f"Unknown action '{payload.action_id}' for event '{event.id}'",
        )

    # Out-of-phase or otherwise illegal actions come back as the unchanged snapshot.
    snap = controller.submit_action(action, event)
    await _publish(snap)
    return snap


@router.post("/run/{run_id}/tick", response_model=RunSnapshot)
async def tick_route(run_id: UUID, store: RunStore = Depends(get_run_store)) -> RunSnapshot:
    """Manual tick, for clients that drive time themselves (OPENPORT_AUTO_TICK=0)."""

    snap = _require_run(store, run_id).tick()
    await _publish(snap)
    return snap


@router.get("/run/{run_id}/cooldowns/{kind}/{item_id}", response_model=CooldownRemainingResponse)
async def cooldown_remaining_route(
    run_id: UUID,
    kind: Literal["event", "action"],
    item_id: str,
    store: RunStore = Depends(get_run_store),
) -> CooldownRemainingResponse:
    remaining = _require_run(store, run_id).get_remaining(item_id, kind=kind)
    return CooldownRemainingResponse(kind=kind, id=item_id, remaining_seconds=remaining)


@router.delete("/run/{run_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_run_route(run_id: UUID, store: RunStore = Depends(get_run_store)) -> Response:
    _require_run(store, run_id)
    tickers.cancel(run_id)
    store.discard(run_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

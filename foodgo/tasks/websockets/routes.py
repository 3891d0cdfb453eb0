import asyncio
import logging
from typing import Callable, Dict, Tuple

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from foodgo.core.exceptions.order_errors import BackendUnavailableError, NotFoundError
from foodgo.tasks.websockets.ws_manager import order_ws_manager

router = APIRouter()

# Order id -> (tracker, listener remover) feeding the websockets of that order
_bridges: Dict[str, Tuple[object, Callable[[], None]]] = {}


def order_status_message(snapshot: dict) -> dict:
    return {"type": "order_status", **snapshot}


@router.websocket("/ws/orders/{order_id}")
async def websocket_order(websocket: WebSocket, order_id: str):
    services = websocket.app.state.services
    try:
        tracker = services.tracking.track(order_id)
    except (NotFoundError, BackendUnavailableError) as e:
        await websocket.close(code=4404 if isinstance(e, NotFoundError) else 1011, reason=e.detail)
        return

    await order_ws_manager.connect(order_id, websocket)

    bridge = _bridges.get(order_id)
    if bridge is None or bridge[0] is not tracker:
        loop = asyncio.get_running_loop()

        def push(snapshot: dict):
            # Tracker jobs run on the scheduler thread
            asyncio.run_coroutine_threadsafe(
                order_ws_manager.broadcast(order_id, order_status_message(snapshot)), loop
            )

        _bridges[order_id] = (tracker, tracker.add_listener(push))

    try:
        await websocket.send_json(order_status_message(tracker.snapshot()))
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logging.info(f"SYSTEM >>> Client closed websocket of order {order_id}")
    finally:
        order_ws_manager.disconnect(order_id, websocket)
        if order_ws_manager.connection_count(order_id) == 0:
            bridge = _bridges.pop(order_id, None)
            if bridge:
                bridge[1]()
            logging.info(f"LIFECYCLE >>> Last viewer left order {order_id}")

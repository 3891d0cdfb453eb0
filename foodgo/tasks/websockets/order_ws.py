from collections import defaultdict
import logging
from typing import Dict, List

from fastapi import WebSocket


class OrderWebSocketManager:
    """Websocket connections grouped by the order they follow."""

    def __init__(self):
        self.active_connections: Dict[str, List[WebSocket]] = defaultdict(list)

    async def connect(self, order_id: str, websocket: WebSocket):
        await websocket.accept()
        self.active_connections[order_id].append(websocket)
        logging.info(f"SYSTEM >>> Websocket connected to order {order_id}")

    def disconnect(self, order_id: str, websocket: WebSocket):
        connections = self.active_connections.get(order_id)
        if connections and websocket in connections:
            connections.remove(websocket)
            if not connections:
                del self.active_connections[order_id]
        logging.info(f"SYSTEM >>> Websocket disconnected from order {order_id}")

    def connection_count(self, order_id: str) -> int:
        return len(self.active_connections.get(order_id, []))

    async def broadcast(self, order_id: str, message: dict):
        for connection in list(self.active_connections.get(order_id, [])):
            try:
                await connection.send_json(message)
            except Exception as e:
                logging.warning(f"SYSTEM >>> Dropping websocket of order {order_id} -> {e}")
                self.disconnect(order_id, connection)

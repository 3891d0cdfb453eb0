from foodgo.tasks.websockets.order_ws import OrderWebSocketManager

order_ws_manager = OrderWebSocketManager()

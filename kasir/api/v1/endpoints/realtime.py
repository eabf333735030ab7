"""
실시간 알림 WebSocket 엔드포인트
"""
from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from kasir.services.notification_service import NotificationHub

router = APIRouter()


@router.websocket("/ws")
async def realtime(websocket: WebSocket):
    """주문 이벤트 구독 (클라이언트 메시지는 무시)"""
    hub: NotificationHub = websocket.app.state.hub
    await hub.connect(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await hub.disconnect(websocket)

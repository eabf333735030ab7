"""
실시간 알림 허브

연결된 모든 WebSocket 구독자에게 주문 이벤트를 전달한다.
전달은 best-effort 방식이며 저장, 재전송, 응답 확인을 하지 않는다.
"""
import asyncio
from typing import Any, Dict, List, Set

from fastapi import WebSocket
import structlog

logger = structlog.get_logger()

NEW_ORDER = "new-order"
STATUS_UPDATE = "status-update"
PROOF_UPLOADED = "proof-uploaded"


class NotificationHub:
    def __init__(self, send_timeout: float = 5.0):
        self._subscribers: Set[WebSocket] = set()
        self._lock = asyncio.Lock()
        self.send_timeout = send_timeout

    async def connect(self, websocket: WebSocket) -> None:
        """구독자 연결 수락 및 등록"""
        await websocket.accept()
        async with self._lock:
            self._subscribers.add(websocket)
        logger.info("Subscriber connected", subscribers=self.subscriber_count())

    async def disconnect(self, websocket: WebSocket) -> None:
        """구독자 등록 해제"""
        async with self._lock:
            self._subscribers.discard(websocket)
        logger.info("Subscriber disconnected", subscribers=self.subscriber_count())

    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def broadcast(self, event: str, payload: Dict[str, Any]) -> int:
        """모든 구독자에게 이벤트 전송, 전달 성공 수 반환

        어떤 경우에도 예외를 올리지 않는다. 끊어진 구독자 때문에 원래 요청이 실패하면 안 된다.
        """
        try:
            return await self._fan_out(event, payload)
        except Exception as e:
            logger.error("Broadcast failed", event_name=event, error=str(e))
            return 0

    async def _fan_out(self, event: str, payload: Dict[str, Any]) -> int:
        message = {"event": event, "data": payload}
        targets: List[WebSocket] = list(self._subscribers)

        # 느린 구독자 하나가 다른 구독자나 요청 응답을 붙잡지 않도록 동시에 보내고 시간 제한을 둔다
        results = await asyncio.gather(
            *(asyncio.wait_for(websocket.send_json(message), timeout=self.send_timeout) for websocket in targets),
            return_exceptions=True,
        )

        dead = []
        for websocket, result in zip(targets, results):
            if isinstance(result, BaseException):
                logger.warning("Dropping subscriber after failed send", event_name=event, error=repr(result))
                dead.append(websocket)

        if dead:
            async with self._lock:
                for websocket in dead:
                    self._subscribers.discard(websocket)

        delivered = len(targets) - len(dead)
        logger.info("Event broadcast", event_name=event, delivered=delivered, failed=len(dead))
        return delivered

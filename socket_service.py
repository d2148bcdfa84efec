#!/usr/bin/env python3
"""
Real-time event relay over WebSockets.

Each authenticated connection joins a room named after its user id, so the
processing pipeline and distribution service can push progress to the
owner's open tabs. Sending is best-effort: a connection that fails to
receive is dropped and the caller never sees the error.
"""

import json
from typing import Any, Dict, Optional, Set

import jwt
from bson import ObjectId
from bson.errors import InvalidId
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder

from auth import decode_access_token
from database import get_db
from logging_config import get_logger
from task_manager import task_manager

logger = get_logger(__name__)

router = APIRouter(tags=["realtime"])


class ConnectionManager:
    """
    Manage WebSocket connections grouped into rooms.

    Attributes:
        rooms: room name -> connected sockets
        memberships: socket -> rooms it has joined
    """

    def __init__(self):
        self.rooms: Dict[str, Set[WebSocket]] = {}
        self.memberships: Dict[WebSocket, Set[str]] = {}

    async def connect(self, websocket: WebSocket, user_id: str):
        """Accept the connection and join the user's private room."""
        await websocket.accept()
        self.memberships[websocket] = set()
        self.join(websocket, user_id)

    def join(self, websocket: WebSocket, room: str):
        self.rooms.setdefault(room, set()).add(websocket)
        self.memberships.setdefault(websocket, set()).add(room)

    def disconnect(self, websocket: WebSocket):
        for room in self.memberships.pop(websocket, set()):
            members = self.rooms.get(room)
            if members is None:
                continue
            members.discard(websocket)
            if not members:
                del self.rooms[room]

    def connection_count(self, room: Optional[str] = None) -> int:
        if room is None:
            return len(self.memberships)
        return len(self.rooms.get(room, ()))

    async def send(self, websocket: WebSocket, event: str, data: Any) -> bool:
        """Send one frame; drops the connection on failure."""
        message = {"event": event, "data": jsonable_encoder(data, custom_encoder={ObjectId: str})}
        try:
            await websocket.send_json(message)
            return True
        except Exception as e:
            logger.debug(f"Dropping socket after failed send of {event}: {e}")
            self.disconnect(websocket)
            return False

    async def emit(self, room: str, event: str, data: Any, exclude: Optional[WebSocket] = None):
        """Send an event to every connection in a room."""
        for websocket in list(self.rooms.get(room, ())):
            if websocket is not exclude:
                await self.send(websocket, event, data)

    async def emit_to_others(self, websocket: WebSocket, room: str, event: str, data: Any):
        await self.emit(room, event, data, exclude=websocket)


manager = ConnectionManager()


def article_room(article_id: str) -> str:
    return f"article:{article_id}"


def authenticate_socket(token: Optional[str], db) -> Optional[str]:
    """User id for a valid access token whose user still exists, else None."""
    if not token:
        return None
    try:
        payload = decode_access_token(token)
        user_id = ObjectId(payload.get("id"))
    except (jwt.InvalidTokenError, InvalidId, TypeError):
        return None
    if not db.users.find_one({"_id": user_id}, {"_id": 1}):
        return None
    return str(user_id)


async def handle_client_event(websocket: WebSocket, user_id: str, event: str, data: Dict[str, Any]):
    if event == "process:status":
        job = task_manager.get_job(data.get("job_id", ""))
        if not job or job["user_id"] != user_id:
            await manager.send(websocket, "error", {"message": "Job not found"})
            return
        await manager.send(websocket, "process:update", job)

    elif event == "process:cancel":
        job_id = data.get("job_id", "")
        job = task_manager.get_job(job_id)
        if not job or job["user_id"] != user_id:
            await manager.send(websocket, "error", {"message": "Job not found"})
            return
        task_manager.request_cancel(job_id)
        logger.info(f"Process {job_id} cancellation requested")
        await manager.send(websocket, "process:cancelled", {"job_id": job_id, "cancel_requested": True})

    elif event == "content:join":
        if data.get("article_id"):
            manager.join(websocket, article_room(data["article_id"]))

    elif event == "content:edit":
        if data.get("article_id"):
            await manager.emit_to_others(
                websocket, article_room(data["article_id"]), "content:updated", data.get("changes")
            )

    else:
        await manager.send(websocket, "error", {"message": f"Unknown event: {event}"})


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, token: Optional[str] = None, db=Depends(get_db)):
    """
    Client frames are JSON objects `{"event": name, "data": {...}}`.
    The access token travels in the `token` query parameter.
    """
    user_id = authenticate_socket(token, db)
    if not user_id:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(websocket, user_id)
    logger.info(f"Socket connected (user: {user_id})")

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                message = json.loads(raw)
            except ValueError:
                await manager.send(websocket, "error", {"message": "Invalid JSON"})
                continue
            if not isinstance(message, dict):
                await manager.send(websocket, "error", {"message": "Invalid message"})
                continue
            data = message.get("data")
            await handle_client_event(
                websocket, user_id, str(message.get("event", "")), data if isinstance(data, dict) else {}
            )
    except WebSocketDisconnect:
        logger.info(f"Socket disconnected (user: {user_id})")
    finally:
        manager.disconnect(websocket)

#!/usr/bin/env python3
"""Menu Web Server

Reference collaborator: renders menus in a browser over a WebSocket.

This server:
- Serves a small web page (index.html) that draws payloads and buttons
- Opens one WebSession per WebSocket connection
- Implements the gui.message interfaces on top of that session
  (WebChannel, WebInteraction, WebAnchorMessage, WebComponentCollector)
- Starts one menu flow per connection through `menu_factory`

Wire format (JSON, server -> client):
    {"type": "message", "message_id": ..., "payload": {...}}   new message
    {"type": "edit",    "message_id": ..., "payload": {...}}   edit in place
    {"type": "delete",  "message_id": ...}
    {"type": "error",   "message": ...}

Wire format (client -> server):
    {"type": "activate", "message_id": ..., "custom_id": ..., "component_type": 2, "values": []}
    {"type": "start"}
    {"type": "status"}
"""

import asyncio
import json
import logging
import time
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Awaitable, Callable, Dict, List, Optional

from aiohttp import web
import aiohttp

from core.exceptions import MessageGoneError
from gui.message import (
    Activation,
    ActivationFilter,
    AnchorMessage,
    ComponentCollector,
    Interaction,
    MessageChannel,
    Payload,
)


SendJson = Callable[[Dict[str, Any]], Awaitable[None]]
MenuFactory = Callable[[Interaction], Awaitable[None]]

_STOP = object()


class WebComponentCollector(ComponentCollector):
    """Activation stream fed by WebSession.dispatch().

    Ends when stop() is called or when `time_ms` has elapsed since creation.
    """

    def __init__(self, component_type: int, filter: ActivationFilter, time_ms: int):
        self.component_type = component_type
        self.filter = filter
        self._deadline = time.monotonic() + time_ms / 1000
        self._queue: asyncio.Queue = asyncio.Queue()
        self._end_reason: Optional[str] = None

    @property
    def end_reason(self) -> Optional[str]:
        return self._end_reason

    def push(self, activation: Activation) -> bool:
        """Queue `activation` if it matches this collector. True if accepted."""
        if self._end_reason is not None:
            return False
        if activation.component_type != self.component_type:
            return False
        if not self.filter(activation):
            logging.debug(f"Collector: filtered activation {activation.custom_id} from {activation.user_id}")
            return False
        self._queue.put_nowait(activation)
        return True

    def stop(self, reason: str = "user") -> None:
        if self._end_reason is None:
            self._end_reason = reason
            self._queue.put_nowait(_STOP)

    async def __aiter__(self):
        while True:
            remaining = self._deadline - time.monotonic()
            if remaining <= 0:
                self.stop("time")
                return
            try:
                item = await asyncio.wait_for(self._queue.get(), timeout=remaining)
            except asyncio.TimeoutError:
                self.stop("time")
                return
            if item is _STOP:
                return
            yield item


class WebAnchorMessage(AnchorMessage):
    """A message shown in one browser session."""

    def __init__(self, session: "WebSession", payload: Payload):
        self._id = uuid.uuid4().hex[:12]
        self.session = session
        self.payload = payload
        self.deleted = False
        self.collectors: List[WebComponentCollector] = []

    @property
    def id(self) -> str:
        return self._id

    async def edit(self, payload: Payload) -> None:
        if self.deleted:
            raise MessageGoneError(f"Unknown Message: {self._id}")
        self.payload = payload
        await self.session.send_json({"type": "edit", "message_id": self._id, "payload": payload})

    async def delete(self) -> None:
        if self.deleted:
            raise MessageGoneError(f"Unknown Message: {self._id}")
        self.deleted = True
        self.session.forget(self._id)
        await self.session.send_json({"type": "delete", "message_id": self._id})

    def create_component_collector(
        self,
        component_type: int,
        filter: ActivationFilter,
        time_ms: int,
    ) -> WebComponentCollector:
        collector = WebComponentCollector(component_type, filter, time_ms)
        self.collectors.append(collector)
        return collector

    def dispatch(self, activation: Activation) -> int:
        """Offer `activation` to every collector. Returns how many took it."""
        return sum(1 for collector in self.collectors if collector.push(activation))


class WebChannel(MessageChannel):

    def __init__(self, session: "WebSession"):
        self.session = session

    @property
    def id(self) -> str:
        return self.session.session_id

    def is_sendable(self) -> bool:
        return not self.session.closed

    async def send(self, payload: Payload) -> WebAnchorMessage:
        return await self.session.post(payload)


class WebInteraction(Interaction):
    """The "command" that opened a menu in a browser session."""

    def __init__(self, session: "WebSession"):
        self.session = session
        self._channel = WebChannel(session)
        self._reply: Optional[WebAnchorMessage] = None

    @property
    def user_id(self) -> str:
        return self.session.user_id

    @property
    def channel(self) -> WebChannel:
        return self._channel

    async def reply(self, payload: Payload) -> None:
        self._reply = await self.session.post(payload)

    async def fetch_reply(self) -> WebAnchorMessage:
        if self._reply is None:
            raise MessageGoneError("Interaction has not been replied to")
        return self._reply

    async def follow_up(self, payload: Payload) -> WebAnchorMessage:
        return await self.session.post(payload)


class WebSession:
    """State for one WebSocket connection."""

    def __init__(self, send_json: SendJson, user_id: Optional[str] = None):
        self.session_id = uuid.uuid4().hex[:8]
        self.user_id = user_id or f"web-{self.session_id}"
        self._send_json = send_json
        self.messages: Dict[str, WebAnchorMessage] = {}
        self.closed = False

    async def send_json(self, data: Dict[str, Any]) -> None:
        if self.closed:
            raise MessageGoneError(f"Session {self.session_id} is closed")
        await self._send_json(data)

    async def post(self, payload: Payload) -> WebAnchorMessage:
        message = WebAnchorMessage(self, payload)
        self.messages[message.id] = message
        await self.send_json({"type": "message", "message_id": message.id, "payload": payload})
        return message

    def forget(self, message_id: str) -> None:
        self.messages.pop(message_id, None)

    def dispatch(self, data: Dict[str, Any]) -> bool:
        """Route an "activate" frame to the target message's collectors."""
        message = self.messages.get(data.get("message_id", ""))
        if message is None:
            return False
        activation = Activation(
            custom_id=str(data.get("custom_id", "")),
            user_id=self.user_id,
            component_type=int(data.get("component_type", 2)),
            values=tuple(data.get("values") or ()),
        )
        return message.dispatch(activation) > 0

    def close(self) -> None:
        self.closed = True
        for message in self.messages.values():
            for collector in message.collectors:
                collector.stop("closed")


class MenuWebServer:
    """Web server hosting one menu flow per WebSocket connection."""

    def __init__(self, menu_factory: MenuFactory, host: str = "localhost", port: int = 8080):
        self.menu_factory = menu_factory
        self.host = host
        self.port = port
        self.static_dir = Path(__file__).parent
        self.sessions: Dict[str, WebSession] = {}
        self.session_start = datetime.now()
        self.flow_count = 0
        self.logger = logging.getLogger("MenuWebServer")

    async def index_handler(self, request):
        """Serve the main HTML page."""
        index_path = self.static_dir / "index.html"
        if index_path.exists():
            return web.FileResponse(index_path)
        return web.Response(text="Menu GUI not found", status=404)

    async def websocket_handler(self, request):
        """One session and one menu flow per connection."""
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        session = WebSession(ws.send_json, user_id=request.query.get("user"))
        self.sessions[session.session_id] = session
        self.logger.info(f"New WebSocket session {session.session_id}. Total: {len(self.sessions)}")

        flows: List[asyncio.Task] = [self.start_flow(session)]
        try:
            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    try:
                        data = json.loads(msg.data)
                    except json.JSONDecodeError:
                        await ws.send_json({"type": "error", "message": "Invalid JSON format"})
                        continue
                    response = await self.handle_message(data, session, flows)
                    if response is not None:
                        await ws.send_json(response)
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    self.logger.error(f"WebSocket error: {ws.exception()}")
        finally:
            session.close()
            for flow in flows:
                flow.cancel()
            self.sessions.pop(session.session_id, None)
            self.logger.info(f"WebSocket session {session.session_id} closed. Total: {len(self.sessions)}")

        return ws

    async def handle_message(
        self,
        data: Dict[str, Any],
        session: WebSession,
        flows: Optional[List[asyncio.Task]] = None,
    ) -> Optional[Dict[str, Any]]:
        """Process one client frame. Returns a direct response, if any."""
        msg_type = data.get("type", "")

        if msg_type == "activate":
            if not session.dispatch(data):
                self.logger.debug(f"Activation {data.get('custom_id')!r} matched no collector")
            return None
        elif msg_type == "start":
            task = self.start_flow(session)
            if flows is not None:
                flows.append(task)
            return None
        elif msg_type == "status":
            return self.get_status()
        else:
            return {"type": "error", "message": f"Unknown message type: {msg_type}"}

    def start_flow(self, session: WebSession) -> asyncio.Task:
        self.flow_count += 1
        task = asyncio.create_task(self._run_flow(session))
        return task

    async def _run_flow(self, session: WebSession) -> None:
        try:
            await self.menu_factory(WebInteraction(session))
        except asyncio.CancelledError:
            raise
        except Exception as e:
            # Log internally (terminal), return safe error to GUI
            self.logger.error(f"Menu flow failed in session {session.session_id}: {e}")
            if not session.closed:
                await session.send_json({"type": "error", "message": "The menu stopped unexpectedly."})

    def get_status(self) -> Dict[str, Any]:
        return {
            "type": "status",
            "data": {
                "sessions": len(self.sessions),
                "session_start": self.session_start.isoformat(),
                "flow_count": self.flow_count,
            },
        }

    def create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get('/', self.index_handler)
        app.router.add_get('/ws', self.websocket_handler)
        return app

    def run(self, open_browser: bool = True):
        """Start the server."""
        app = self.create_app()

        print(f"Menu server: http://{self.host}:{self.port}  (WebSocket: ws://{self.host}:{self.port}/ws)")
        print("Press Ctrl+C to stop")

        if open_browser:
            import webbrowser
            webbrowser.open(f"http://{self.host}:{self.port}")

        web.run_app(app, host=self.host, port=self.port, print=None)


def main():
    """Main entry point."""
    import argparse
    from gui.demo import run_demo_menu

    parser = argparse.ArgumentParser(description="Menu Web Server")
    parser.add_argument("--host", default="localhost", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8080, help="Port to listen on")
    parser.add_argument("--no-browser", action="store_true", help="Don't open browser")

    args = parser.parse_args()

    server = MenuWebServer(run_demo_menu, host=args.host, port=args.port)
    server.run(open_browser=not args.no_browser)


if __name__ == "__main__":
    main()

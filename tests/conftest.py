import sys
import pytest
from pathlib import Path
from typing import List, Optional

# Project root first so `core` / `gui` resolve to the real packages
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.components import ButtonStyle, action_row, button, string_select
from core.exceptions import MessageGoneError
from core.menu_config import MenuConfig
from gui.collectors import AnchorResponse
from gui.message import (
    Activation,
    AnchorMessage,
    ComponentCollector,
    Interaction,
    MessageChannel,
)


class FakeCollector(ComponentCollector):
    """Yields a scripted list of activations, then ends with "time"."""

    def __init__(self, component_type=2, filter=None, time_ms=60_000, script=None):
        self.component_type = component_type
        self.filter = filter
        self.time_ms = time_ms
        self.script: List[Activation] = list(script or [])
        self._end_reason: Optional[str] = None
        self.stop_calls = 0

    @property
    def end_reason(self):
        return self._end_reason

    def stop(self, reason="user"):
        self.stop_calls += 1
        if self._end_reason is None:
            self._end_reason = reason

    async def __aiter__(self):
        while self.script and self._end_reason is None:
            activation = self.script.pop(0)
            if self.filter is None or self.filter(activation):
                yield activation
        if self._end_reason is None:
            self._end_reason = "time"


class FakeAnchorMessage(AnchorMessage):
    """Records every edit; delete behaviour is configurable."""

    def __init__(self, message_id="m1", payload=None, delete_error=None, edit_error=None):
        self._id = message_id
        self.payload = payload
        self.edits = []
        self.deleted = False
        self.delete_calls = 0
        self.delete_error = delete_error
        self.edit_error = edit_error
        self.collectors: List[FakeCollector] = []
        self.script: List[Activation] = []

    @property
    def id(self):
        return self._id

    async def edit(self, payload):
        if self.edit_error is not None:
            raise self.edit_error
        self.edits.append(payload)
        self.payload = payload

    async def delete(self):
        self.delete_calls += 1
        if self.delete_error is not None:
            raise self.delete_error
        if self.deleted:
            raise MessageGoneError(self._id)
        self.deleted = True

    def create_component_collector(self, component_type, filter, time_ms):
        collector = FakeCollector(component_type, filter, time_ms, script=self.script)
        self.collectors.append(collector)
        return collector

    @property
    def last_edit(self):
        return self.edits[-1] if self.edits else None


class FakeChannel(MessageChannel):

    def __init__(self, channel_id="c1", sendable=True):
        self._id = channel_id
        self.sendable = sendable
        self.sent = []
        self.next_message = FakeAnchorMessage()

    @property
    def id(self):
        return self._id

    def is_sendable(self):
        return self.sendable

    async def send(self, payload):
        self.sent.append(payload)
        self.next_message.payload = payload
        return self.next_message


class FakeInteraction(Interaction):

    def __init__(self, user_id="u1", channel=None):
        self._user_id = user_id
        self._channel = channel if channel is not None else FakeChannel()
        self.replies = []
        self.follow_ups = []
        self.reply_message = FakeAnchorMessage("reply")
        self.follow_up_message = FakeAnchorMessage("follow-up")

    @property
    def user_id(self):
        return self._user_id

    @property
    def channel(self):
        return self._channel

    async def reply(self, payload):
        self.replies.append(payload)
        self.reply_message.payload = payload

    async def fetch_reply(self):
        return self.reply_message

    async def follow_up(self, payload):
        self.follow_ups.append(payload)
        self.follow_up_message.payload = payload
        return self.follow_up_message


def click(custom_id, user_id="u1"):
    return Activation(custom_id=custom_id, user_id=user_id, component_type=2)


@pytest.fixture(autouse=True)
def fresh_menu_config():
    """Every test starts from the bundled menu.yaml."""
    MenuConfig._instance = None
    MenuConfig._settings = None
    yield
    MenuConfig._instance = None
    MenuConfig._settings = None


@pytest.fixture
def anchor():
    return FakeAnchorMessage()


@pytest.fixture
def anchor_response(anchor):
    return AnchorResponse(anchor_msg=anchor, buttons=FakeCollector(), strings=None)


@pytest.fixture
def root_frame():
    return {
        "embeds": [{"title": "Root"}],
        "components": [
            action_row(
                button("open-settings", "Settings", ButtonStyle.PRIMARY),
                button("back-root", "Back"),
                button("cancel-root", "Cancel", ButtonStyle.DANGER),
            )
        ],
    }


@pytest.fixture
def make_frame():
    """Factory for a frame with one row of buttons."""
    def _factory(*ids, title="Frame"):
        return {
            "embeds": [{"title": title}],
            "components": [action_row(*[button(i, i) for i in ids])],
        }
    return _factory


@pytest.fixture
def select_frame():
    return {
        "components": [
            action_row(string_select("back-choice", [{"label": "A", "value": "a"}])),
        ]
    }


@pytest.fixture
def pages():
    return {"embeds": [{"title": "p1"}, {"title": "p2"}, {"title": "p3"}]}

"""
Client-side state for the four tabs: Events, Swipe, Chats, Profile.

Each screen is created, then mount()-ed when it appears and unmount()-ed when
it goes away. Network failures are logged and the previous state is kept;
nothing is retried and nothing is shown to the user.
"""

import random
from typing import Optional

import httpx

from dancewithme.client.api_client import ApiClient
from dancewithme.client.poller import Poller, POLL_INTERVAL_SECONDS
from dancewithme.log import get_logger

logger = get_logger("client.screens")

# What a failed request can raise: transport/status errors or an undecodable body.
FETCH_ERRORS = (httpx.HTTPError, ValueError)


def anon_name() -> str:
    return f"Anon {random.randint(0, 999)}"


class Screen:
    def __init__(self, api: ApiClient):
        self.api = api
        self.mounted = False

    async def mount(self):
        self.mounted = True

    async def unmount(self):
        self.mounted = False


class EventsScreen(Screen):
    """Event listing plus the create-event form."""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.events = []
        self.name = ""
        self.description = ""

    async def mount(self):
        await super().mount()
        await self.fetch_events()

    async def fetch_events(self):
        try:
            self.events = await self.api.list_events()
        except FETCH_ERRORS as e:
            logger.error("Failed to load events: %s", e)

    async def add_event(self):
        if not self.name:
            return
        try:
            event = await self.api.create_event(self.name, self.description)
        except FETCH_ERRORS as e:
            logger.error("Failed to create event: %s", e)
            return
        self.events = [event] + self.events
        self.name = ""
        self.description = ""


class SwipeScreen(Screen):
    """Cycles through every user with like/skip; both only advance locally."""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.users = []
        self.index = 0

    async def mount(self):
        await super().mount()
        await self.fetch_users()

    async def fetch_users(self):
        try:
            self.users = await self.api.list_users()
        except FETCH_ERRORS as e:
            logger.error("Failed to fetch users: %s", e)
            return
        if self.index >= len(self.users):
            self.index = 0

    @property
    def current_user(self) -> Optional[dict]:
        if not self.users:
            return None
        return self.users[self.index % len(self.users)]

    def _advance(self):
        if not self.users:
            return
        self.index = (self.index + 1) % len(self.users)

    def like(self):
        self._advance()

    def skip(self):
        self._advance()


class EventsListScreen(Screen):
    """Chats tab: the events to pick a room from, reloaded on every focus."""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.events = []

    async def mount(self):
        await super().mount()
        await self.focus()

    async def focus(self):
        try:
            self.events = await self.api.list_events()
        except FETCH_ERRORS as e:
            logger.error("Failed to load events: %s", e)

    def open_room(self, event: dict, poll_interval: float = POLL_INTERVAL_SECONDS) -> "ChatRoomScreen":
        return ChatRoomScreen(self.api, event["id"], event["name"], poll_interval=poll_interval)


class ChatRoomScreen(Screen):
    """
    One event's chat room.

    Mounting mints a fresh anonymous user, loads the history and starts
    polling; unmounting cancels the poller. Each poll replaces the local
    message list with the server's full list.
    """

    def __init__(self, api: ApiClient, event_id: str, event_name: str = "", poll_interval: float = POLL_INTERVAL_SECONDS):
        super().__init__(api)
        self.event_id = event_id
        self.event_name = event_name
        self.messages = []
        self.input = ""
        self.user_id: Optional[str] = None
        self.poller = Poller(self.fetch_messages, interval=poll_interval)

    async def mount(self):
        await super().mount()
        await self.create_anon_user()
        await self.fetch_messages()
        self.poller.start()

    async def unmount(self):
        await self.poller.cancel()
        await super().unmount()

    async def change_event(self, event_id: str, event_name: str = ""):
        """Switch rooms: the old poller is cancelled before the new room mounts."""
        await self.unmount()
        self.event_id = event_id
        self.event_name = event_name
        self.messages = []
        self.input = ""
        self.user_id = None
        await self.mount()

    async def create_anon_user(self):
        try:
            user = await self.api.create_user(anon_name())
        except FETCH_ERRORS as e:
            logger.error("Failed to create anon user: %s", e)
            return
        self.user_id = user["id"]

    async def fetch_messages(self):
        try:
            self.messages = await self.api.list_messages(self.event_id)
        except FETCH_ERRORS as e:
            logger.error("Failed to load messages: %s", e)

    async def send(self):
        if not self.input.strip():
            return
        if self.user_id is None:
            await self.create_anon_user()
            if self.user_id is None:
                return
        try:
            message = await self.api.post_message(self.event_id, self.user_id, self.input)
        except FETCH_ERRORS as e:
            logger.error("Failed to send message: %s", e)
            return
        if all(m.get("id") != message.get("id") for m in self.messages):
            self.messages = self.messages + [message]
        self.input = ""


class ProfileScreen(Screen):
    """Placeholder: local name and bio inputs, nothing is saved."""

    def __init__(self, api: ApiClient):
        super().__init__(api)
        self.name = ""
        self.bio = ""

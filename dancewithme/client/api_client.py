import os
from typing import Optional

import httpx
from dotenv import load_dotenv

load_dotenv()

API_BASE = os.getenv("API_BASE", "http://localhost:4000/api")
TIMEOUT = float(os.getenv("API_TIMEOUT", "30"))


class ApiClient:
    """
    Thin async wrapper over the /api routes.

    Every call raises httpx.HTTPError on transport failures and non-2xx
    responses; callers decide whether to log and move on.
    """

    def __init__(self, base_url: str = API_BASE, http: Optional[httpx.AsyncClient] = None):
        self._http = http or httpx.AsyncClient(base_url=base_url, timeout=TIMEOUT)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    async def aclose(self):
        await self._http.aclose()

    async def _get(self, path: str):
        resp = await self._http.get(path)
        resp.raise_for_status()
        return resp.json()

    async def _post(self, path: str, body: dict):
        resp = await self._http.post(path, json=body)
        resp.raise_for_status()
        return resp.json()

    # Events

    async def list_events(self) -> list:
        return await self._get("/events")

    async def create_event(self, name: str, description: str = None, date: str = None) -> dict:
        body = {"name": name, "description": description}
        if date:
            body["date"] = date
        return await self._post("/events", body)

    # Users

    async def list_users(self) -> list:
        return await self._get("/users")

    async def create_user(self, name: str, bio: str = None) -> dict:
        return await self._post("/users", {"name": name, "bio": bio})

    # Messages

    async def list_messages(self, event_id: str) -> list:
        return await self._get(f"/messages/{event_id}")

    async def post_message(self, event_id: str, user_id: str, text: str) -> dict:
        return await self._post("/messages", {"eventId": event_id, "userId": user_id, "text": text})

"""
HTTP client for the zhijiao API used by front-end style consumers.

Reads fall back to the bundled mock resources when the API is unavailable,
so a dashboard can still render something without a working backend.
Writes report failure to the caller instead of raising.
"""

import copy
import logging

import requests

from zhijiao.client.mock_data import INITIAL_RESOURCES

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class StorageClient:
    """Uniform wrapper around the /api endpoints."""

    def __init__(self, base_url: str = "", session: requests.Session | None = None, timeout: float = DEFAULT_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.has_visited = False
        self.liked_ids: set[str] = set()

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    @staticmethod
    def _is_json(response: requests.Response) -> bool:
        content_type = response.headers.get("content-type") or ""
        return "application/json" in content_type

    @staticmethod
    def _json_object(response: requests.Response) -> dict:
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        return data

    # Resources

    def get_resources(self) -> list[dict]:
        try:
            response = self.session.get(self._url("/api/resources"), timeout=self.timeout)
            if not response.ok or not self._is_json(response):
                raise ValueError("API not available or returned non-JSON")
            data = response.json()
            if not isinstance(data, list):
                raise ValueError("API returned a non-list resource payload")
            return data
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Falling back to local mock data: %s", exc)
            return copy.deepcopy(INITIAL_RESOURCES)

    def save_resource(self, resource: dict) -> list[dict]:
        """Create a resource, then re-fetch the full list."""
        try:
            response = self.session.post(self._url("/api/resources"), json=resource, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Failed to save resource: %s", exc)
            return []
        return self.get_resources()

    def update_resource(self, resource: dict) -> bool:
        try:
            response = self.session.put(self._url("/api/resources"), json=resource, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Failed to update resource %s: %s", resource.get("id"), exc)
            return False
        return True

    def delete_resource(self, resource_id: str) -> bool:
        try:
            response = self.session.delete(
                self._url("/api/resources"),
                params={"id": resource_id},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Failed to delete resource %s: %s", resource_id, exc)
            return False
        return True

    # Visitor counter

    def get_visitor_count(self) -> int:
        try:
            response = self.session.get(self._url("/api/stats"), timeout=self.timeout)
            response.raise_for_status()
            return int(self._json_object(response).get("visitor_count") or 0)
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Visitor count unavailable: %s", exc)
            return 0

    def record_visit(self) -> int:
        """Increment the counter once per client session; later calls only read."""
        if self.has_visited:
            return self.get_visitor_count()

        try:
            response = self.session.post(self._url("/api/stats"), timeout=self.timeout)
            response.raise_for_status()
            self.has_visited = True
            return int(self._json_object(response).get("visitor_count") or 0)
        except (requests.RequestException, ValueError) as exc:
            logger.warning("Failed to record visit: %s", exc)
            return 0

    # Auth

    def _authenticate(self, action: str, email: str, password: str) -> str | None:
        try:
            response = self.session.post(
                self._url("/api/auth"),
                json={"action": action, "email": email, "password": password},
                timeout=self.timeout,
            )
            data = self._json_object(response)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Auth request failed: %s", exc)
            return None

        if response.ok and data.get("success"):
            return data.get("role")
        logger.info("Auth %s rejected: %s", action, data.get("error"))
        return None

    def login(self, email: str, password: str) -> str | None:
        return self._authenticate("login", email, password)

    def register(self, email: str, password: str) -> str | None:
        return self._authenticate("register", email, password)

    # Assistant

    def ask_assistant(self, message: str) -> str:
        try:
            response = self.session.post(self._url("/api/chat"), json={"message": message}, timeout=self.timeout)
            data = self._json_object(response)
        except (requests.RequestException, ValueError) as exc:
            logger.error("Assistant request failed: %s", exc)
            return "抱歉，AI 助手暂时无法连接，请稍后再试。"

        if not response.ok:
            return f"出错了：{data.get('error', response.status_code)}"
        return data.get("reply") or "No response"

    # Likes (client-side only)

    def is_liked(self, resource_id: str) -> bool:
        return resource_id in self.liked_ids

    def toggle_like(self, resource_id: str) -> bool:
        if resource_id in self.liked_ids:
            self.liked_ids.discard(resource_id)
            return False
        self.liked_ids.add(resource_id)
        return True

    def display_likes(self, resource: dict) -> int:
        likes = int(resource.get("likes") or 0)
        return likes + 1 if self.is_liked(str(resource.get("id"))) else likes

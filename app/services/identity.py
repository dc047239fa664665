"""Requester identity — bearer token to user id via the Supabase Auth API.

Resolution is best-effort: a missing, anonymous or rejected token makes the
request anonymous, it never fails the search.
"""

import logging
import time
import uuid

import httpx

from app.config import settings

logger = logging.getLogger(__name__)


def bearer_token(authorization: str | None) -> str:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return ""
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer":
        return ""
    return token.strip()


def new_session_id() -> str:
    return uuid.uuid4().hex


class IdentityResolver:
    """Looks up the user behind an access token."""

    def __init__(self, supabase_url: str, anon_key: str, timeout: float = 10.0):
        self.base_url = supabase_url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return bool(self.base_url and self.anon_key)

    async def resolve(self, authorization: str | None) -> str | None:
        """Return the user id for the header's token, or None if anonymous."""
        token = bearer_token(authorization)
        # Browser clients send the anon key as bearer when nobody is signed in
        if not token or token == self.anon_key or not self.enabled:
            return None

        start = time.monotonic()
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(
                    f"{self.base_url}/auth/v1/user",
                    headers={"apikey": self.anon_key, "Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            logger.warning("Auth lookup error | %s", str(e)[:200])
            return None

        elapsed_ms = int((time.monotonic() - start) * 1000)
        if resp.status_code != 200:
            logger.info("Auth lookup rejected | status=%d | %dms", resp.status_code, elapsed_ms)
            return None

        try:
            user_id = resp.json().get("id")
        except (ValueError, AttributeError):
            user_id = None
        if not isinstance(user_id, str) or not user_id:
            logger.warning("Auth lookup returned no user id | %dms", elapsed_ms)
            return None

        logger.debug("Auth lookup OK | %dms", elapsed_ms)
        return user_id


def get_identity_resolver() -> IdentityResolver:
    """FastAPI dependency."""
    return IdentityResolver(settings.supabase_url, settings.supabase_anon_key)

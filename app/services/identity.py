# app/services/identity.py
#
# Identity provider client
# Verifies bearer tokens against Supabase Auth and returns the resolved user.

import logging
from dataclasses import dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedUser:
    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class IdentityProvider:
    """
    Black-box "verify token -> user identity" over the Supabase Auth REST API.

    verify_token never raises: any transport error, non-2xx answer or
    unexpected payload is logged and reported as None (invalid token).
    One requests.Session is reused across threads; close() releases it.
    """

    def __init__(
        self,
        url: str,
        service_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.url = (url or "").rstrip("/")
        self.service_key = service_key
        self.session = session or requests.Session()
        self.timeout = timeout

    def close(self) -> None:
        self.session.close()

    def verify_token(self, token: str) -> Optional[AuthenticatedUser]:
        if not self.url:
            logger.error("SUPABASE_URL is not configured; rejecting token")
            return None

        headers = {
            "apikey": self.service_key,
            "Authorization": f"Bearer {token}",
        }
        try:
            r = self.session.get(f"{self.url}/auth/v1/user", headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Identity provider unreachable: %r", e)
            return None

        if r.status_code != 200:
            logger.info("Token rejected by identity provider (HTTP %s)", r.status_code)
            return None

        try:
            data = r.json()
        except ValueError:
            logger.warning("Identity provider returned non-JSON body")
            return None

        if not isinstance(data, dict) or not data.get("id"):
            return None

        metadata = data.get("user_metadata") or {}
        return AuthenticatedUser(
            id=str(data["id"]),
            email=data.get("email"),
            name=metadata.get("name"),
        )

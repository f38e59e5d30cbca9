# mcp-farm/packages/mcp_graphql/mcp_graphql/auth.py
from __future__ import annotations
import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

import requests

from .config import GraphQLConfig
from .errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccessToken:
    value: str
    expires_at: float  # epoch seconds, already reduced by the safety margin


class TokenProvider:
    """
    OAuth client-credentials token cache.

    A token is reused while `clock() < expires_at`. A failed exchange leaves the
    previous (expired) entry untouched so the next call simply tries again.
    """

    def __init__(self, cfg: GraphQLConfig, session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.time):
        self.cfg = cfg
        self._session = session or requests.Session()
        self._clock = clock
        self._token: Optional[AccessToken] = None
        self._lock = threading.Lock()

    def invalidate(self) -> None:
        self._token = None

    def get_access_token(self) -> str:
        token = self._token
        if token and self._clock() < token.expires_at:
            return token.value
        with self._lock:
            token = self._token
            if token and self._clock() < token.expires_at:
                logger.debug("Using cached access token",
                             extra={"meta": {"expiresIn": round(token.expires_at - self._clock())}})
                return token.value
            self._token = self._exchange()
            return self._token.value

    # ---------------- OAuth ----------------
    def _exchange(self) -> AccessToken:
        cfg = self.cfg
        if not (cfg.client_id and cfg.client_secret and cfg.auth_url):
            logger.error("Missing required OAuth environment variables", extra={"meta": {
                "hasClientId": bool(cfg.client_id),
                "hasClientSecret": bool(cfg.client_secret),
                "hasAuthUrl": bool(cfg.auth_url),
            }})
            raise AuthError("Missing OAuth credentials in environment variables")

        logger.info("Fetching new access token...", extra={"meta": {"authUrl": cfg.auth_url}})
        try:
            r = self._session.post(
                cfg.auth_url,
                data={
                    "grant_type": "client_credentials",
                    "client_id": cfg.client_id,
                    "client_secret": cfg.client_secret,
                },
                headers={
                    "Content-Type": "application/x-www-form-urlencoded",
                    "Accept": "application/json",
                },
                timeout=cfg.request_timeout,
            )
        except requests.RequestException as e:
            logger.error("Error fetching access token", extra={"meta": {"error": str(e), "authUrl": cfg.auth_url}})
            raise AuthError(f"Failed to obtain access token: network error: {e}") from e

        if not r.ok:
            logger.error("Failed to obtain access token", extra={"meta": {
                "status": r.status_code,
                "statusText": r.reason,
                "responseBody": r.text[:2000],
                "authUrl": cfg.auth_url,
            }})
            raise AuthError(f"Failed to obtain access token: {r.status_code} {r.reason} - {r.text[:500]}")

        try:
            data = r.json()
        except ValueError as e:
            raise AuthError(f"Invalid token response: {e}") from e

        value = data.get("access_token") if isinstance(data, dict) else None
        if not value:
            logger.error("Invalid token response - missing access_token")
            raise AuthError("Invalid token response: missing access_token")

        try:
            expires_in = float(data.get("expires_in") or 0)
        except (TypeError, ValueError) as e:
            logger.error("Invalid token response - bad expires_in", extra={"meta": {"expiresIn": data.get("expires_in")}})
            raise AuthError(f"Invalid token response: bad expires_in {data.get('expires_in')!r}") from e

        logger.info("Successfully obtained new access token", extra={"meta": {
            "tokenType": data.get("token_type"),
            "expiresIn": expires_in,
            "hasRefreshToken": bool(data.get("refresh_token")),
            "tokenLength": len(value),
        }})
        return AccessToken(value=value, expires_at=self._clock() + expires_in - self.cfg.token_margin)

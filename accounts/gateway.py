"""
Client for the hosted authentication provider (Supabase GoTrue REST API).

The site never stores passwords itself: sign-up, sign-in, sign-out and
password reset are forwarded to the provider, and the resulting session is
kept in the Django session under ``SESSION_KEY``. When the provider is not
configured (placeholder URL/key) every call is simulated locally and succeeds,
which is what the demo deployment runs on.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
import logging
from typing import Callable, MutableMapping

import requests
from django.conf import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_URL = "https://placeholder.supabase.co"
PLACEHOLDER_KEY = "placeholder-key"

SESSION_KEY = "auth_session"

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


class AuthError(Exception):
    """Any failure reported by (or while talking to) the provider."""

    def __init__(self, message: str = "Authentication failed. Please try again."):
        self.message = message
        super().__init__(message)


@dataclass(frozen=True)
class ProviderConfig:
    url: str = PLACEHOLDER_URL
    key: str = PLACEHOLDER_KEY
    timeout: float = 10.0
    reset_redirect_url: str = ""

    @classmethod
    def from_settings(cls) -> "ProviderConfig":
        return cls(
            url=(getattr(settings, "SUPABASE_URL", "") or PLACEHOLDER_URL).rstrip("/"),
            key=getattr(settings, "SUPABASE_KEY", "") or PLACEHOLDER_KEY,
            timeout=float(getattr(settings, "SUPABASE_TIMEOUT", 10.0)),
            reset_redirect_url=getattr(settings, "PASSWORD_RESET_REDIRECT_URL", ""),
        )

    def is_configured(self) -> bool:
        return self.url.rstrip("/") != PLACEHOLDER_URL and self.key != PLACEHOLDER_KEY

    @property
    def demo_mode(self) -> bool:
        return not self.is_configured()


@dataclass(frozen=True)
class AuthUser:
    id: str
    email: str
    full_name: str = ""

    @classmethod
    def from_provider(cls, payload) -> "AuthUser":
        if not isinstance(payload, dict):
            raise AuthError("Unexpected response from the authentication service.")
        user_id = payload.get("id")
        email = payload.get("email")
        if not user_id or not email:
            raise AuthError("Unexpected response from the authentication service.")
        metadata = payload.get("user_metadata")
        if not isinstance(metadata, dict):
            metadata = {}
        full_name = metadata.get("full_name") or metadata.get("fullName") or ""
        return cls(id=str(user_id), email=str(email).strip().lower(), full_name=str(full_name))


@dataclass(frozen=True)
class AuthSession:
    user: AuthUser
    access_token: str = ""
    refresh_token: str = ""
    expires_at: int | None = None
    demo: bool = False

    @classmethod
    def from_provider(cls, payload) -> "AuthSession":
        if not isinstance(payload, dict) or not payload.get("access_token"):
            raise AuthError("Unexpected response from the authentication service.")
        expires_at = payload.get("expires_at")
        return cls(
            user=AuthUser.from_provider(payload.get("user")),
            access_token=str(payload["access_token"]),
            refresh_token=str(payload.get("refresh_token") or ""),
            expires_at=int(expires_at) if isinstance(expires_at, (int, float)) else None,
        )

    @classmethod
    def from_dict(cls, data) -> "AuthSession | None":
        if not isinstance(data, dict):
            return None
        user = data.get("user")
        if not isinstance(user, dict) or not user.get("id") or not user.get("email"):
            return None
        expires_at = data.get("expires_at")
        return cls(
            user=AuthUser(id=str(user["id"]), email=str(user["email"]), full_name=str(user.get("full_name") or "")),
            access_token=str(data.get("access_token") or ""),
            refresh_token=str(data.get("refresh_token") or ""),
            expires_at=int(expires_at) if isinstance(expires_at, (int, float)) else None,
            demo=bool(data.get("demo")),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def key(self) -> tuple[str, str, str]:
        return self.user.id, self.user.email, self.access_token


def _error_message(response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = {}
    if isinstance(data, dict):
        for name in ("error_description", "msg", "message", "error"):
            value = data.get(name)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return "Authentication failed. Please try again."


@dataclass
class AuthGateway:
    config: ProviderConfig
    store: MutableMapping = field(default_factory=dict)
    _listeners: list = field(default_factory=list, repr=False)

    # --- session change notifications ---

    def on_session_change(self, callback: Callable[[str, AuthSession | None], None]) -> Callable[[], None]:
        """Subscribe to session changes; returns the unsubscribe callable."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_session(self, session: AuthSession | None) -> None:
        previous = self.get_session()
        if session is None:
            self.store.pop(SESSION_KEY, None)
        else:
            self.store[SESSION_KEY] = session.to_dict()

        prev_key = previous.key if previous else None
        new_key = session.key if session else None
        if prev_key == new_key:
            return

        event = SIGNED_IN if session else SIGNED_OUT
        logger.info("Auth state changed: %s %s", event, session.user.email if session else "")
        for callback in list(self._listeners):
            callback(event, session)

    # --- provider calls ---

    def _headers(self, token: str = "") -> dict:
        return {
            "apikey": self.config.key,
            "Authorization": f"Bearer {token or self.config.key}",
            "Content-Type": "application/json",
        }

    def _post(self, path: str, payload: dict | None = None, *, token: str = "", params: dict | None = None) -> dict:
        url = f"{self.config.url}/auth/v1/{path}"
        try:
            r = requests.post(
                url,
                json=payload or {},
                params=params,
                headers=self._headers(token),
                timeout=self.config.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Auth provider request to %s failed: %s", path, exc)
            raise AuthError("Authentication service is unavailable. Please try again.") from exc

        if r.status_code >= 400:
            message = _error_message(r)
            logger.info("Auth provider rejected %s (%s): %s", path, r.status_code, message)
            raise AuthError(message)

        if not r.content:
            return {}
        try:
            data = r.json()
        except ValueError as exc:
            raise AuthError("Unexpected response from the authentication service.") from exc
        return data if isinstance(data, dict) else {}

    def sign_up(self, email: str, password: str, profile_data: dict | None = None) -> None:
        if self.config.demo_mode:
            logger.info("Demo mode: simulated sign-up for %s", email)
            return
        self._post("signup", {"email": email, "password": password, "data": profile_data or {}})

    def sign_in(self, email: str, password: str) -> AuthSession:
        if self.config.demo_mode:
            session = AuthSession(
                user=AuthUser(id="demo-user", email=email.strip().lower(), full_name="Demo User"),
                demo=True,
            )
        else:
            data = self._post("token", {"email": email, "password": password}, params={"grant_type": "password"})
            session = AuthSession.from_provider(data)
        self._set_session(session)
        return session

    def sign_out(self) -> None:
        session = self.get_session()
        if session and not self.config.demo_mode and session.access_token:
            try:
                self._post("logout", token=session.access_token)
            except AuthError as exc:
                # the local session is dropped regardless
                logger.warning("Error signing out: %s", exc.message)
        self._set_session(None)

    def get_session(self) -> AuthSession | None:
        return AuthSession.from_dict(self.store.get(SESSION_KEY))

    def reset_password(self, email: str) -> None:
        if self.config.demo_mode:
            return
        params = {"redirect_to": self.config.reset_redirect_url} if self.config.reset_redirect_url else None
        self._post("recover", {"email": email}, params=params)

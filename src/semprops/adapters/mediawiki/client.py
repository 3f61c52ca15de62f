"""HTTP client for a wiki exposing the semantic property REST endpoints.

Sessions follow the bot-password flow: fetch a login token from the Action
API, log in with it, then reuse the session cookies for REST calls.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Any, Self
from urllib.parse import quote

import httpx

from semprops.api.schemas import (
    DeletePropertyResponse,
    PropertiesResponse,
    PropertyValuesResponse,
    SetPropertiesResponse,
)
from semprops.config import ClientConfig, get_client_config  # noqa: TC001

from .schema import LoginResponse, LoginTokenResponse

if TYPE_CHECKING:
    from collections.abc import Iterable
    from types import TracebackType

log = getLogger(__name__)

_SUCCESS = "Success"


class SemanticApiError(RuntimeError):
    """Raised for login failures and error responses from the wiki."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        payload: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status = status
        self.payload = dict(payload or {})


@dataclass(slots=True)
class SemanticApiClient:
    config: ClientConfig = field(default_factory=get_client_config)
    transport: httpx.BaseTransport | None = None
    _http: httpx.Client = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._http = httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            transport=self.transport,
            follow_redirects=True,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # Session -------------------------------------------------------------------

    def login(self, username: str | None = None, password: str | None = None) -> str:
        """Log in with a bot password and return the account name."""

        name = username or self.config.username
        secret = password or self.config.password
        if not name or not secret:
            raise SemanticApiError("Bot password login needs a username and a password")

        token_response = self._http.get(
            self.config.action_api_path,
            params={"action": "query", "meta": "tokens", "type": "login", "format": "json"},
        )
        token_response.raise_for_status()
        token = LoginTokenResponse.model_validate(token_response.json()).query.tokens.logintoken
        if not token:
            raise SemanticApiError("Failed to get login token", status=token_response.status_code)

        login_response = self._http.post(
            self.config.action_api_path,
            data={
                "action": "login",
                "lgname": name,
                "lgpassword": secret,
                "lgtoken": token,
                "format": "json",
            },
        )
        login_response.raise_for_status()
        login = LoginResponse.model_validate(login_response.json()).login
        if login is None or login.result != _SUCCESS:
            result = login.result if login is not None else "no login payload"
            log.error("Login failed for %s: %s", name, result)
            raise SemanticApiError(f"Login failed: {result}", status=login_response.status_code)
        log.info("Logged in as %s", login.lgusername or name)
        return login.lgusername or name

    # Properties ----------------------------------------------------------------

    def get_properties(self, title: str) -> PropertiesResponse:
        payload = self._request("GET", self._page_path(title))
        return PropertiesResponse.model_validate(payload)

    def get_property(self, title: str, property_name: str) -> list[str]:
        payload = self._request("GET", self._page_path(title), params={"property": property_name})
        return PropertyValuesResponse.model_validate(payload).values

    def set_properties(
        self,
        title: str,
        properties: Mapping[str, str] | Iterable[tuple[str, str]],
    ) -> SetPropertiesResponse:
        pairs = properties.items() if isinstance(properties, Mapping) else properties
        body = {"properties": [{"property": key, "value": value} for key, value in pairs]}
        payload = self._request("PUT", self._page_path(title), json=body)
        return SetPropertiesResponse.model_validate(payload)

    def set_property(self, title: str, property_name: str, value: str) -> SetPropertiesResponse:
        payload = self._request(
            "PUT", self._page_path(title), json={"property": property_name, "value": value}
        )
        return SetPropertiesResponse.model_validate(payload)

    def delete_property(self, title: str, property_name: str) -> DeletePropertyResponse:
        path = f"{self._page_path(title)}/{quote(property_name, safe='')}"
        return DeletePropertyResponse.model_validate(self._request("DELETE", path))

    def _page_path(self, title: str) -> str:
        return f"{self.config.rest_path}/semanticproperty/{quote(title, safe='')}"

    def _request(self, method: str, path: str, **kwargs: Any) -> dict[str, Any]:
        response = self._http.request(method, path, **kwargs)
        try:
            payload = response.json()
        except ValueError:
            payload = None
        if response.is_error:
            error = payload.get("error") if isinstance(payload, dict) else None
            message = error if isinstance(error, str) else f"HTTP {response.status_code}"
            log.warning("%s %s failed with %s: %s", method, path, response.status_code, message)
            raise SemanticApiError(
                message,
                status=response.status_code,
                payload=payload if isinstance(payload, dict) else None,
            )
        if not isinstance(payload, dict):
            raise SemanticApiError("Unexpected response payload", status=response.status_code)
        return payload

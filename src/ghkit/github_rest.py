from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests

from .errors import TransportError

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "ghkit-rest/0.2.0"
HTTP_ERROR_STATUS = 400
REQUEST_TIMEOUT = 30


class GitHubAPIError(TransportError):
    """Raised when the GitHub REST API returns an error or is unreachable."""

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        response_text: str | None = None,
    ):
        super().__init__(message, returncode=status, stderr=response_text or "")
        self.status = status
        self.response_text = response_text


@dataclass
class GitHubRestClient:
    """Token-authenticated REST client for the few calls ghkit makes directly.

    Used when a token is configured; :class:`ghkit.github.GitHubClient` falls
    back to ``gh`` when any call raises :class:`GitHubAPIError`.
    """

    token: str
    repo: str
    base_url: str = DEFAULT_API_URL
    session: requests.Session | None = None
    _session: requests.Session = field(init=False, repr=False)

    def __post_init__(self) -> None:  # pragma: no cover - simple wiring
        self._session = self.session or requests.Session()
        self._session.headers.setdefault("Authorization", f"Bearer {self.token}")
        self._session.headers.setdefault("Accept", "application/vnd.github+json")
        self._session.headers.setdefault("User-Agent", USER_AGENT)

    def _request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any | None = None,
    ) -> Any:
        url = f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        try:
            response = self._session.request(
                method,
                url,
                json=json_body,
                headers=self._session.headers,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as exc:
            raise GitHubAPIError(f"GitHub API {method} {url} unreachable: {exc}") from exc
        if response.status_code >= HTTP_ERROR_STATUS:
            raise GitHubAPIError(
                f"GitHub API {method} {url} failed with {response.status_code}",
                status=response.status_code,
                response_text=response.text,
            )
        if not response.text:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise GitHubAPIError(f"GitHub API {method} {url} returned invalid JSON") from exc

    def authenticated_login(self) -> str | None:
        data = self._request("GET", "/user")
        if isinstance(data, dict) and isinstance(data.get("login"), str):
            return data["login"]
        return None

    def pull_body(self, number: int) -> str:
        data = self._request("GET", f"/repos/{self.repo}/pulls/{number}")
        if not isinstance(data, dict):
            raise GitHubAPIError(f"Unexpected payload for pull request #{number}")
        return data.get("body") or ""

    def update_pull_body(self, number: int, body: str) -> None:
        self._request("PATCH", f"/repos/{self.repo}/pulls/{number}", json_body={"body": body})


__all__ = ["GitHubAPIError", "GitHubRestClient"]

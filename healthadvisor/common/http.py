"""HTTP client with timeouts and an opt-in retry policy."""

from __future__ import annotations

from dataclasses import dataclass
from types import TracebackType
from typing import Any

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from healthadvisor.common.constants import USER_AGENT
from healthadvisor.common.errors import StageError

RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}


@dataclass(frozen=True)
class TimeoutConfig:
    connect: float = 10.0
    read: float = 30.0


@dataclass(frozen=True)
class RetryConfig:
    # One attempt: a failed call drops the record instead of retrying.
    max_attempts: int = 1
    multiplier: float = 1.0
    max_wait: float = 30.0


class HttpRequestError(StageError):
    error_code = "HTTP_ERROR"

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RetryableHttpError(HttpRequestError):
    pass


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        out = {"User-Agent": USER_AGENT, "Accept": "application/json"}
        if headers:
            out.update(headers)
        return out

    def _raise_for_status_or_retry(self, response: requests.Response, allowed: frozenset[int]) -> None:
        status = response.status_code
        if status in allowed:
            return
        if status in RETRYABLE_STATUS_CODES:
            raise RetryableHttpError(f"Retryable HTTP status: {status}", status_code=status)
        if status >= 400:
            raise HttpRequestError(f"HTTP status: {status}", status_code=status)

    def _send(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
        allowed: frozenset[int] = frozenset(),
    ) -> requests.Response:
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=self._headers(headers),
                timeout=(self.timeout.connect, self.timeout.read),
            )
        except requests.RequestException as exc:
            raise HttpRequestError(f"{method} {url} failed: {exc}") from exc
        self._raise_for_status_or_retry(response, allowed)
        return response

    def _with_retry(self, func):
        wrapped = retry(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry.multiplier,
                max=self.retry.max_wait,
                jitter=1.0,
            ),
            retry=retry_if_exception_type(RetryableHttpError),
            reraise=True,
        )(func)
        return wrapped()

    def request_json(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        def _wrapped() -> dict[str, Any]:
            response = self._send(method, url, params=params, json_body=json_body, headers=headers)
            try:
                return response.json()
            except ValueError as exc:
                raise HttpRequestError(f"Invalid JSON payload from {url}") from exc

        return self._with_retry(_wrapped)

    def request_status(self, method: str, url: str, *, allowed: frozenset[int]) -> int:
        """Send a body-less request and return its status code.

        Codes in ``allowed`` are returned as-is even when they are >= 400,
        which lets callers treat e.g. a 404 as an answer rather than an error.
        """

        def _wrapped() -> int:
            return self._send(method, url, allowed=allowed).status_code

        return self._with_retry(_wrapped)

    def get_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        return self.request_json("GET", url, params=params, headers=headers)

    def put_json(self, url: str, *, body: Any = None) -> dict[str, Any]:
        return self.request_json("PUT", url, json_body=body)

    def post_json(self, url: str, *, body: Any = None) -> dict[str, Any]:
        return self.request_json("POST", url, json_body=body)

"""Elasticsearch REST access for index management and document writes."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote, urlparse

from healthadvisor.common.errors import InfrastructureError, SearchIndexError
from healthadvisor.common.http import HttpClient, HttpRequestError


def build_base_url(hostname: str, port: str, *, scheme: str = "http") -> str:
    host = hostname.rstrip("/")
    if not urlparse(host).scheme:
        host = f"{scheme}://{host}"
    return f"{host}:{port}"


def _as_object(payload: Any, action: str) -> dict[str, Any]:
    if not isinstance(payload, dict):
        raise SearchIndexError(f"{action} returned a non-object payload: {payload!r}")
    return payload


class ElasticsearchIndex:
    def __init__(self, http_client: HttpClient, base_url: str) -> None:
        self.http_client = http_client
        self.base_url = base_url.rstrip("/")

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *(quote(part, safe="_") for part in parts)])

    def ping(self) -> dict[str, Any]:
        try:
            return self.http_client.get_json(f"{self.base_url}/")
        except HttpRequestError as exc:
            raise InfrastructureError(f"Could not connect to search service at {self.base_url}: {exc}") from exc

    def index_exists(self, name: str) -> bool:
        try:
            status = self.http_client.request_status("HEAD", self._url(name), allowed=frozenset({404}))
        except HttpRequestError as exc:
            raise SearchIndexError(f"Index existence check failed for {name}: {exc}") from exc
        return status != 404

    def create_index(self, name: str) -> bool:
        try:
            payload = self.http_client.put_json(self._url(name))
        except HttpRequestError as exc:
            raise SearchIndexError(f"Index creation failed for {name}: {exc}") from exc
        return bool(_as_object(payload, f"Index creation for {name}").get("acknowledged"))

    def index_document(self, name: str, doc_type: str, doc_id: str, document: dict[str, Any]) -> dict[str, Any]:
        try:
            payload = self.http_client.put_json(self._url(name, doc_type, doc_id), body=document)
        except HttpRequestError as exc:
            raise SearchIndexError(f"Indexing document {doc_id} into {name} failed: {exc}") from exc
        return _as_object(payload, f"Indexing document {doc_id} into {name}")

    def flush(self, name: str) -> dict[str, Any]:
        try:
            payload = self.http_client.post_json(self._url(name, "_flush"))
        except HttpRequestError as exc:
            raise SearchIndexError(f"Flush of {name} failed: {exc}") from exc
        return _as_object(payload, f"Flush of {name}")

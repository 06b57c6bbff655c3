from __future__ import annotations

import pytest

from healthadvisor.common.errors import InfrastructureError, SearchIndexError
from healthadvisor.common.http import HttpRequestError
from healthadvisor.pipeline.search_index import ElasticsearchIndex, build_base_url


class FakeHttpClient:
    def __init__(self, *, status: int = 200, payload=None, error: Exception | None = None):
        self.status = status
        self.payload = payload if payload is not None else {}
        self.error = error
        self.calls: list[tuple] = []

    def _answer(self, call):
        self.calls.append(call)
        if self.error is not None:
            raise self.error
        return self.payload

    def get_json(self, url, **kwargs):
        return self._answer(("GET", url, kwargs))

    def put_json(self, url, **kwargs):
        return self._answer(("PUT", url, kwargs))

    def post_json(self, url, **kwargs):
        return self._answer(("POST", url, kwargs))

    def request_status(self, method, url, *, allowed):
        self.calls.append((method, url, {"allowed": allowed}))
        if self.error is not None:
            raise self.error
        return self.status


def test_build_base_url_adds_scheme_only_when_missing():
    assert build_base_url("localhost", "9200") == "http://localhost:9200"
    assert build_base_url("https://search.internal", "443") == "https://search.internal:443"
    assert build_base_url("es", "9200", scheme="https") == "https://es:9200"


def test_index_exists_maps_404_to_false():
    assert ElasticsearchIndex(FakeHttpClient(status=200), "http://es:9200").index_exists("healthadvisor") is True

    client = FakeHttpClient(status=404)
    assert ElasticsearchIndex(client, "http://es:9200").index_exists("healthadvisor") is False
    assert client.calls[0][:2] == ("HEAD", "http://es:9200/healthadvisor")


def test_index_exists_failure_raises():
    index = ElasticsearchIndex(FakeHttpClient(error=HttpRequestError("HTTP status: 500")), "http://es:9200")
    with pytest.raises(SearchIndexError):
        index.index_exists("healthadvisor")


def test_create_index_returns_acknowledged_flag():
    assert ElasticsearchIndex(FakeHttpClient(payload={"acknowledged": True}), "http://es:9200").create_index("h")
    assert not ElasticsearchIndex(FakeHttpClient(payload={"acknowledged": False}), "http://es:9200").create_index("h")


def test_index_document_puts_under_type_and_id():
    client = FakeHttpClient(payload={"result": "created", "_id": "3"})
    index = ElasticsearchIndex(client, "http://es:9200/")

    result = index.index_document("healthadvisor", "service", "3", {"APC": "APC1"})

    assert result["_id"] == "3"
    method, url, kwargs = client.calls[0]
    assert (method, url) == ("PUT", "http://es:9200/healthadvisor/service/3")
    assert kwargs["body"] == {"APC": "APC1"}


def test_index_document_failure_raises():
    index = ElasticsearchIndex(FakeHttpClient(error=HttpRequestError("HTTP status: 400")), "http://es:9200")
    with pytest.raises(SearchIndexError):
        index.index_document("healthadvisor", "service", "0", {})


def test_flush_posts_to_flush_endpoint():
    client = FakeHttpClient(payload={"_shards": {"total": 1, "successful": 1, "failed": 0}})
    ElasticsearchIndex(client, "http://es:9200").flush("healthadvisor")
    assert client.calls[0][:2] == ("POST", "http://es:9200/healthadvisor/_flush")


def test_ping_failure_is_infrastructure_error():
    index = ElasticsearchIndex(FakeHttpClient(error=HttpRequestError("refused")), "http://es:9200")
    with pytest.raises(InfrastructureError):
        index.ping()


@pytest.mark.parametrize("payload", [["created"], "gateway timeout"])
def test_non_object_payloads_raise_search_index_error(payload):
    index = ElasticsearchIndex(FakeHttpClient(payload=payload), "http://es:9200")

    with pytest.raises(SearchIndexError):
        index.index_document("healthadvisor", "service", "0", {})
    with pytest.raises(SearchIndexError):
        index.create_index("healthadvisor")
    with pytest.raises(SearchIndexError):
        index.flush("healthadvisor")

"""Tests for HttpNiaClient against a mocked Nia API."""

import json
from collections.abc import Iterator

import httpx
import pytest
import respx
from httpx import Response

from lib_bench.nia.domain.target import NiaTarget
from lib_bench.nia.infrastructure.errors import NiaApiError
from lib_bench.nia.infrastructure.http_client import HttpNiaClient, source_request_body

BASE_URL = "https://nia.test/v2"

_REPO = NiaTarget(
    kind="repo", identifier="colinhacks/zod", tag="v4.3.6", display_name="Zod v4"
)
_DOCS = NiaTarget(kind="docs", identifier="https://zod.dev", display_name="Zod Docs")


@pytest.fixture
def nia_api() -> Iterator[respx.MockRouter]:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        yield router


def _client() -> HttpNiaClient:
    return HttpNiaClient(api_key="secret", base_url=BASE_URL + "/")


class TestRequestBody:
    def test_repository_body_carries_ref(self) -> None:
        assert source_request_body(_REPO) == {
            "type": "repository",
            "repository": "colinhacks/zod",
            "ref": "v4.3.6",
            "display_name": "Zod v4",
        }

    def test_documentation_body_is_capped(self) -> None:
        body = source_request_body(_DOCS)

        assert body["type"] == "documentation"
        assert body["url"] == "https://zod.dev"
        assert body["limit"] == 1000
        assert body["only_main_content"] is True
        assert "url_patterns" not in body

    def test_documentation_scope_fields(self) -> None:
        target = _DOCS.model_copy(
            update={"url_patterns": ["/api/*", "/guide/*"], "focus": "API reference"}
        )

        body = source_request_body(target)

        assert body["url_patterns"] == ["/api/*", "/guide/*"]
        assert body["focus_instructions"] == "API reference"


class TestSubmit:
    async def test_returns_source_id_and_status(
        self, nia_api: respx.MockRouter
    ) -> None:
        route = nia_api.post("/sources").mock(
            return_value=Response(200, json={"id": "s-1", "status": "indexing"})
        )

        async with _client() as client:
            source = await client.submit(_REPO)

        assert source.source_id == "s-1"
        assert source.status == "indexing"
        assert source.target == _REPO
        request = route.calls.last.request
        assert request.headers["Authorization"] == "Bearer secret"
        assert json.loads(request.content)["repository"] == "colinhacks/zod"

    async def test_missing_status_reads_unknown(
        self, nia_api: respx.MockRouter
    ) -> None:
        nia_api.post("/sources").mock(return_value=Response(200, json={"id": "s-1"}))

        async with _client() as client:
            source = await client.submit(_DOCS)

        assert source.status == "unknown"

    async def test_missing_id_raises(self, nia_api: respx.MockRouter) -> None:
        nia_api.post("/sources").mock(
            return_value=Response(200, json={"status": "indexing"})
        )

        async with _client() as client:
            with pytest.raises(NiaApiError, match="no source id returned for Zod v4"):
                await client.submit(_REPO)

    async def test_error_status_raises_with_body(
        self, nia_api: respx.MockRouter
    ) -> None:
        nia_api.post("/sources").mock(return_value=Response(401, text="bad key"))

        async with _client() as client:
            with pytest.raises(NiaApiError) as exc_info:
                await client.submit(_REPO)

        assert exc_info.value.reason == "401 bad key"
        assert exc_info.value.method == "POST"

    async def test_transport_failure_raises(self, nia_api: respx.MockRouter) -> None:
        nia_api.post("/sources").mock(side_effect=httpx.ConnectError("refused"))

        async with _client() as client:
            with pytest.raises(NiaApiError, match="refused"):
                await client.submit(_REPO)


class TestStatus:
    async def test_returns_raw_status(self, nia_api: respx.MockRouter) -> None:
        nia_api.get("/sources/s-1").mock(
            return_value=Response(200, json={"id": "s-1", "status": "completed"})
        )

        async with _client() as client:
            assert await client.status("s-1") == "completed"

    async def test_not_found_is_a_status(self, nia_api: respx.MockRouter) -> None:
        nia_api.get("/sources/gone").mock(return_value=Response(404))

        async with _client() as client:
            assert await client.status("gone") == "not_found"

    async def test_server_error_reads_as_error(self, nia_api: respx.MockRouter) -> None:
        nia_api.get("/sources/s-1").mock(return_value=Response(500, text="boom"))

        async with _client() as client:
            assert await client.status("s-1") == "error"

    async def test_non_object_body_reads_as_error(
        self, nia_api: respx.MockRouter
    ) -> None:
        nia_api.get("/sources/s-1").mock(return_value=Response(200, json=["x"]))

        async with _client() as client:
            assert await client.status("s-1") == "error"


class TestClientOwnership:
    async def test_injected_client_is_left_open(self) -> None:
        http = httpx.AsyncClient()
        async with HttpNiaClient(api_key="k", base_url=BASE_URL, client=http):
            pass

        assert not http.is_closed
        await http.aclose()

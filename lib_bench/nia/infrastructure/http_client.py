"""HttpNiaClient — the Nia sources API over httpx."""

from types import TracebackType
from typing import Any

import httpx

from lib_bench.nia.domain.source import SubmittedSource
from lib_bench.nia.domain.target import NiaTarget
from lib_bench.nia.infrastructure.errors import NiaApiError

# Page cap for documentation crawls.
DOC_PAGE_LIMIT = 1000

NOT_FOUND_STATUS = "not_found"
ERROR_STATUS = "error"


class HttpNiaClient:
    """Talks to ``POST /sources`` and ``GET /sources/{id}``.

    A 404 reads as a ``not_found`` status rather than an error. The client
    owns its ``httpx.AsyncClient`` unless one is passed in.

    Does NOT inherit from NiaClient (structural typing via Protocol).
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_seconds)

    async def __aenter__(self) -> "HttpNiaClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def submit(self, target: NiaTarget) -> SubmittedSource:
        """
        Raises:
            NiaApiError: on an error status, a transport failure or a body
                without a source id.
        """
        body = source_request_body(target)
        data = await self._request("POST", "/sources", body)
        source_id = data.get("id")
        if not isinstance(source_id, str) or not source_id:
            raise NiaApiError(
                "POST",
                "/sources",
                f"no source id returned for {target.display_name}",
            )
        status = data.get("status")
        return SubmittedSource(
            target=target,
            source_id=source_id,
            status=status if isinstance(status, str) else "unknown",
        )

    async def status(self, source_id: str) -> str:
        try:
            data = await self._request("GET", f"/sources/{source_id}")
        except NiaApiError:
            return ERROR_STATUS
        status = data.get("status")
        return status if isinstance(status, str) else "unknown"

    def _headers(self, with_body: bool) -> dict[str, str]:
        headers = {"Authorization": f"Bearer {self._api_key}"}
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = await self._client.request(
                method,
                f"{self._base_url}{path}",
                headers=self._headers(with_body=body is not None),
                json=body,
            )
        except httpx.HTTPError as exc:
            raise NiaApiError(method, path, str(exc) or type(exc).__name__) from exc

        if response.status_code == httpx.codes.NOT_FOUND:
            return {"status": NOT_FOUND_STATUS}
        if response.is_error:
            raise NiaApiError(method, path, f"{response.status_code} {response.text}")
        try:
            data = response.json()
        except ValueError as exc:
            raise NiaApiError(method, path, "response is not JSON") from exc
        if not isinstance(data, dict):
            raise NiaApiError(method, path, "response is not a JSON object")
        return data


def source_request_body(target: NiaTarget) -> dict[str, Any]:
    """The ``POST /sources`` payload for a repository or documentation target."""
    if target.kind == "repo":
        body: dict[str, Any] = {
            "type": "repository",
            "repository": target.identifier,
        }
        if target.tag:
            body["ref"] = target.tag
    else:
        body = {
            "type": "documentation",
            "url": target.identifier,
            "limit": DOC_PAGE_LIMIT,
            "only_main_content": True,
        }
        if target.url_patterns:
            body["url_patterns"] = target.url_patterns
        if target.focus:
            body["focus_instructions"] = target.focus
    body["display_name"] = target.display_name
    return body

"""
Web search and extract tools backed by the Parallel API.

Both tools always return a ToolResult: provider failures, transport errors,
invalid input and cancellation are converted to ``{"error": true, "message"}``
at this boundary and never raised to the caller.
"""

import logging
from typing import Any, Literal

import httpx
from pydantic import BaseModel, Field, ValidationError

from config.defaults import (
    PARALLEL_BASE_URL,
    PARALLEL_BETA_HEADER,
    SEARCH_MAX_RESULTS,
    SEARCH_TIMEOUT_SECONDS,
)
from core.abort import AbortSignal
from core.exceptions import AbortedError
from core.models import SearchResultItem, SearchResults, ToolError, ToolResult

logger = logging.getLogger(__name__)

SEARCH_PATH = "/v1beta/search"
EXTRACT_PATH = "/v1beta/extract"


class SearchInput(BaseModel):
    objective: str = Field(min_length=1)
    search_queries: list[str] | None = None
    mode: Literal["agentic", "one-shot"] | None = None
    include_domains: list[str] | None = None
    exclude_domains: list[str] | None = None


class ExtractInput(BaseModel):
    objective: str = Field(min_length=1)
    urls: list[str] = Field(min_length=1)
    search_queries: list[str] | None = None


def _provider_detail(response: httpx.Response) -> str | None:
    """Pull a human-readable error out of a provider error body."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or None

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if body.get("detail"):
            return str(body["detail"])
        if body.get("message"):
            return str(body["message"])
    return None


def _status_error_message(tool_name: str, response: httpx.Response) -> str:
    status = response.status_code
    label = tool_name.capitalize()
    if status == 429:
        return f"{label} rate limited, please retry shortly"
    if status in (401, 403):
        return f"{label} failed: invalid or unauthorized API key"
    if 400 <= status < 500:
        detail = _provider_detail(response)
        return f"{label} request rejected: {detail}" if detail else f"{label} request rejected ({status})"
    return f"{label} provider unavailable ({status})"


def _normalize_results(payload: Any) -> SearchResults:
    if not isinstance(payload, dict) or not isinstance(payload.get("results"), list):
        raise ValueError("response has no results list")

    results = []
    for entry in payload["results"]:
        if isinstance(entry, dict) and entry.get("url"):
            results.append(
                SearchResultItem(url=str(entry["url"]), title=str(entry.get("title") or ""))
            )
    return SearchResults(results=results)


class SearchTools:
    """
    Adapter exposing ``search`` and ``extract`` as invocable tools.

    Holds no per-call state, so one instance may serve concurrent requests.
    """

    names = ("search", "extract")

    def __init__(
        self,
        api_key: str,
        base_url: str = PARALLEL_BASE_URL,
        timeout: float = SEARCH_TIMEOUT_SECONDS,
        max_results: int = SEARCH_MAX_RESULTS,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_results = max_results
        self._client = client

    def __contains__(self, tool_name: object) -> bool:
        return tool_name in self.names

    @property
    def headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.api_key,
            "parallel-beta": PARALLEL_BETA_HEADER,
            "content-type": "application/json",
        }

    async def search(
        self, tool_input: SearchInput | dict[str, Any], signal: AbortSignal | None = None
    ) -> ToolResult:
        """Run a web search and return the result URLs and titles."""
        try:
            args = SearchInput.model_validate(tool_input)
        except ValidationError as e:
            return ToolError(message=f"Invalid search input: {e.errors()[0]['msg']}")

        body: dict[str, Any] = {
            "objective": args.objective,
            "max_results": self.max_results,
        }
        if args.search_queries:
            body["search_queries"] = args.search_queries
        if args.mode:
            body["mode"] = args.mode
        source_policy = {}
        if args.include_domains:
            source_policy["include_domains"] = args.include_domains
        if args.exclude_domains:
            source_policy["exclude_domains"] = args.exclude_domains
        if source_policy:
            body["source_policy"] = source_policy

        return await self._call("search", SEARCH_PATH, body, signal)

    async def extract(
        self, tool_input: ExtractInput | dict[str, Any], signal: AbortSignal | None = None
    ) -> ToolResult:
        """Extract relevant content from the given URLs."""
        try:
            args = ExtractInput.model_validate(tool_input)
        except ValidationError as e:
            return ToolError(message=f"Invalid extract input: {e.errors()[0]['msg']}")

        body: dict[str, Any] = {
            "urls": args.urls,
            "objective": args.objective,
            "excerpts": True,
            "full_content": False,
        }
        if args.search_queries:
            body["search_queries"] = args.search_queries

        return await self._call("extract", EXTRACT_PATH, body, signal)

    async def invoke(
        self, tool_name: str, tool_input: dict[str, Any], signal: AbortSignal | None = None
    ) -> ToolResult:
        """Dispatch a tool call by name."""
        if tool_name == "search":
            return await self.search(tool_input, signal)
        if tool_name == "extract":
            return await self.extract(tool_input, signal)
        return ToolError(message=f"Unknown tool: {tool_name}")

    async def _call(
        self,
        tool_name: str,
        path: str,
        body: dict[str, Any],
        signal: AbortSignal | None,
    ) -> ToolResult:
        try:
            if signal is not None:
                payload = await signal.guard(self._post(path, body))
            else:
                payload = await self._post(path, body)
            result = _normalize_results(payload)
        except AbortedError:
            logger.info("%s aborted", tool_name)
            return ToolError(message=f"{tool_name.capitalize()} aborted")
        except httpx.HTTPStatusError as e:
            logger.warning("%s failed with status %d", tool_name, e.response.status_code)
            return ToolError(message=_status_error_message(tool_name, e.response))
        except httpx.TimeoutException:
            logger.warning("%s timed out after %.0fs", tool_name, self.timeout)
            return ToolError(message=f"{tool_name.capitalize()} timed out")
        except httpx.HTTPError as e:
            logger.warning("%s request failed: %s", tool_name, e)
            return ToolError(message=f"{tool_name.capitalize()} request failed: {e}")
        except ValueError as e:
            logger.warning("%s returned an unexpected response: %s", tool_name, e)
            return ToolError(message=f"{tool_name.capitalize()} returned an unexpected response")
        except Exception as e:
            logger.exception("%s tool error", tool_name)
            return ToolError(message=f"{tool_name.capitalize()} failed: {e}")

        logger.debug("%s returned %d results", tool_name, len(result.results))
        return result

    async def _post(self, path: str, body: dict[str, Any]) -> Any:
        if self._client is not None:
            response = await self._client.post(
                f"{self.base_url}{path}", json=body, headers=self.headers, timeout=self.timeout
            )
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    f"{self.base_url}{path}", json=body, headers=self.headers
                )
        response.raise_for_status()
        return response.json()

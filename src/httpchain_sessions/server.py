import logging
from pathlib import Path

import httpx
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from .chain import ChainRunner
from .models import ChainStep, ExecuteParams, Expectation, HttpRequest
from .report import write_report
from .settings import Settings
from .store import SessionStore

logger = logging.getLogger(__name__)


def session_not_found(session_id: str) -> str:
    return f"Session not found: {session_id}"


def session_status_text(store: SessionStore, session_id: str) -> str:
    session = store.get(session_id)
    if session is None:
        return session_not_found(session_id)
    return session.model_dump_json(by_alias=True, indent=2)


def session_report_text(store: SessionStore, session_id: str, reports_dir: Path) -> str:
    session = store.get(session_id)
    if session is None:
        return session_not_found(session_id)
    return f"HTML report generated: {write_report(session, reports_dir)}"


def create_server(
    settings: Settings | None = None,
    store: SessionStore | None = None,
    client: httpx.Client | None = None,
) -> FastMCP:
    """Build the MCP server exposing request execution and session tools.

    The store and HTTP client are owned by the caller when given; otherwise
    fresh ones are created for the lifetime of the server.
    """
    settings = settings if settings is not None else Settings()
    store = store if store is not None else SessionStore()
    if client is None:
        client = httpx.Client(timeout=settings.timeout, follow_redirects=settings.follow_redirects)
    runner = ChainRunner(store, client)

    mcp = FastMCP(settings.server_name)

    @mcp.tool(
        name="api_request",
        title="API Request",
        description=(
            "Perform an HTTP API request, or a chain of named requests sharing extracted variables, "
            "and validate each response. Results are recorded in a session."
        ),
        annotations=ToolAnnotations(readOnlyHint=False, openWorldHint=True),
    )
    def api_request(
        sessionId: str = "",  # noqa: N803
        request: HttpRequest | None = None,
        expect: Expectation | None = None,
        chain: list[ChainStep] | None = None,
    ) -> str:
        """Execute a single request or a chain.

        Args:
            sessionId: Session to record into; generated when empty and returned in the result
            request: Single request with method, url, headers and data (required unless chain is given);
                string data is sent verbatim, objects and arrays as JSON
            expect: Expected status, contentType, body or bodyRegex (default for chain steps)
            chain: Ordered steps with name, url, method, headers, data, expect and extract

        Returns:
            JSON text of the single-request result or of the chain results
        """
        single = request.model_dump() if request is not None else {}
        result = runner.execute(ExecuteParams(session_id=sessionId or None, expect=expect, chain=chain, **single))
        return result.model_dump_json(by_alias=True, indent=2)

    @mcp.tool(
        name="api_session_status",
        title="API Session Status",
        description="Query API test session status, logs, and results by sessionId.",
        annotations=ToolAnnotations(readOnlyHint=True, openWorldHint=False),
    )
    def api_session_status(sessionId: str) -> str:  # noqa: N803
        return session_status_text(store, sessionId)

    @mcp.tool(
        name="api_session_report",
        title="API Session HTML Report",
        description="Generate and retrieve an HTML report for an API test session by sessionId.",
        annotations=ToolAnnotations(readOnlyHint=False, openWorldHint=False),
    )
    def api_session_report(sessionId: str) -> str:  # noqa: N803
        return session_report_text(store, sessionId, settings.reports_dir)

    @mcp.resource("schema://execute")
    def get_execute_schema() -> dict:
        """Export the JSON schema of the flat execute input"""
        return ExecuteParams.model_json_schema(by_alias=True)

    return mcp

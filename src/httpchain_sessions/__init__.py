from .chain import ChainRunner, generate_session_id
from .exceptions import HttpChainError, InputError, ReportError, RequestError
from .extraction import extract_fields
from .models import (
    ChainResult,
    ChainStep,
    ExecuteParams,
    Expectation,
    HttpRequest,
    Session,
    SingleResult,
    StepResult,
)
from .paths import MISSING
from .report import build_report, render_html, write_report
from .server import create_server
from .settings import Settings
from .store import SessionStore
from .templates import render_template
from .validation import validate_response

__all__ = [
    "MISSING",
    "ChainResult",
    "ChainRunner",
    "ChainStep",
    "ExecuteParams",
    "Expectation",
    "HttpChainError",
    "HttpRequest",
    "InputError",
    "ReportError",
    "RequestError",
    "Session",
    "SessionStore",
    "Settings",
    "SingleResult",
    "StepResult",
    "build_report",
    "create_server",
    "extract_fields",
    "generate_session_id",
    "render_html",
    "render_template",
    "validate_response",
    "write_report",
]

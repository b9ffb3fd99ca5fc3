import math
import re
from datetime import UTC, datetime, timedelta
from http import HTTPMethod
from typing import Annotated, Any, Literal

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, JsonValue
from pydantic.alias_generators import to_camel

from .constants import SessionStatus


def utcnow() -> datetime:
    return datetime.now(UTC)


def to_ms(delta: timedelta) -> int:
    """Whole milliseconds in ``delta``, halves rounded up."""
    return math.floor(delta.total_seconds() * 1000 + 0.5)


def validate_regex_pattern(v: str) -> str:
    """Validate that a string is a valid regular expression."""
    try:
        re.compile(v)
    except re.error as e:
        raise ValueError(f"Invalid regular expression: {e}") from e
    return v


def normalize_method(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip().upper()
    return v


RegexPattern = Annotated[str, AfterValidator(validate_regex_pattern)]
Method = Annotated[HTTPMethod, BeforeValidator(normalize_method)]
Headers = dict[str, str]


class CamelModel(BaseModel):
    """Base model speaking camelCase on the wire and snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Expectation(CamelModel):
    status: int | None = Field(default=None, description="Exact status code expected.")
    content_type: str | None = Field(default=None, description="Substring expected in the content-type header.")
    body: JsonValue = Field(
        default=None,
        description="Object for a partial key/value match, string for an exact match.",
    )
    body_regex: RegexPattern | None = Field(
        default=None,
        description="Pattern searched in the body. Replaces the body check when set.",
    )

    @property
    def has_body(self) -> bool:
        """Whether a body expectation was given (an explicit null counts)."""
        return "body" in self.model_fields_set


class HttpRequest(CamelModel):
    method: Method = Field(default=HTTPMethod.GET)
    url: str
    headers: Headers | None = None
    data: JsonValue = None


class ChainStep(CamelModel):
    name: str = Field(min_length=1, description="Step name, addressable as a template variable.")
    method: Method = Field(default=HTTPMethod.GET)
    url: str
    headers: Headers | None = None
    data: JsonValue = None
    expect: Expectation | None = None
    extract: dict[str, str] | None = Field(default=None, description="Variable name to dot-path in the response body.")


class ExecuteParams(CamelModel):
    """Input of one execute invocation, either a single request or a chain."""

    session_id: str | None = None
    method: Method = Field(default=HTTPMethod.GET)
    url: str | None = None
    headers: Headers | None = None
    data: JsonValue = None
    expect: Expectation | None = None
    chain: list[ChainStep] | None = None


class ResponseData(CamelModel):
    status: int
    status_text: str = ""
    content_type: str = ""
    body: JsonValue = None


class ValidationResult(CamelModel):
    status: bool
    content_type: bool


class BodyValidation(CamelModel):
    matched: bool
    reason: str


class StepResult(CamelModel):
    name: str
    status: int
    status_text: str
    content_type: str
    body: JsonValue
    validation: ValidationResult
    body_validation: BodyValidation
    extracted: dict[str, JsonValue] = Field(default_factory=dict)


class RequestLogEntry(CamelModel):
    """One executed request, standalone (``single``) or as a chain step (``request``)."""

    type: Literal["single", "request"]
    name: str | None = None
    request: HttpRequest
    response: ResponseData
    expectations: Expectation | None = None
    validation: ValidationResult
    body_validation: BodyValidation
    extracted: dict[str, JsonValue] | None = None
    timestamp: datetime = Field(default_factory=utcnow)


class ChainLogEntry(CamelModel):
    type: Literal["chain"] = "chain"
    steps: list[StepResult]
    timestamp: datetime = Field(default_factory=utcnow)


LogEntry = Annotated[RequestLogEntry | ChainLogEntry, Field(discriminator="type")]


class Session(CamelModel):
    session_id: str
    start_time: datetime = Field(default_factory=utcnow)
    end_time: datetime | None = None
    execution_time_ms: int | None = None
    status: SessionStatus = SessionStatus.RUNNING
    logs: list[LogEntry] = Field(default_factory=list)


class SingleResult(CamelModel):
    session_id: str
    ok: bool
    status: int
    status_text: str
    content_type: str
    body: JsonValue
    validation: ValidationResult
    body_validation: BodyValidation


class ChainResult(CamelModel):
    session_id: str
    results: list[StepResult]

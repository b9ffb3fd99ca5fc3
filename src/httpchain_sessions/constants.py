from enum import StrEnum


class LogEntryType(StrEnum):
    """Tags of the entries appended to a session log."""

    SINGLE = "single"
    REQUEST = "request"
    CHAIN = "chain"


class SessionStatus(StrEnum):
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


class BodyReason(StrEnum):
    """Fixed reason strings reported by body validation."""

    NO_EXPECTATION = "No body expectation set."
    PARTIAL_MATCH_SUCCEEDED = "Partial/exact body match succeeded."
    PARTIAL_MATCH_FAILED = "Partial/exact body match failed."
    STRING_MATCH_SUCCEEDED = "Exact string match succeeded."
    STRING_MATCH_FAILED = "Exact string match failed."
    REGEX_MATCH_SUCCEEDED = "Regex match succeeded."
    REGEX_MATCH_FAILED = "Regex match failed."
    TYPE_MISMATCH = "Body type mismatch."


JSON_CONTENT_TYPE = "application/json"
REPORT_FILE_PREFIX = "session-"
REPORT_FILE_SUFFIX = ".html"

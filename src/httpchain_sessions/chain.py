"""Execution of single requests and request chains.

A chain runs its steps strictly in order. Every step can reference values
produced by the steps before it through ``{{ ... }}`` placeholders, resolved
against a variable scope that lives only for one invocation:

1. Extracted variables are merged flatly into the scope under their own names.
2. The whole step result (extracted values, body, status, statusText and
   contentType) is stored under the step name.

So after a step named ``login`` that extracts ``token``, both ``{{ token }}``
and ``{{ login.token }}`` resolve, as does ``{{ login.body.user.id }}``.

Each completed step is logged to the session immediately. If a step fails at
the transport level the error propagates to the caller, the steps already
logged stay in the session, and the session is marked failed.
"""

import logging
import uuid
from collections import Counter
from typing import Any

import httpx

from .constants import LogEntryType, SessionStatus
from .exceptions import HttpChainError, InputError
from .extraction import extract_fields
from .models import (
    ChainLogEntry,
    ChainResult,
    ChainStep,
    ExecuteParams,
    Expectation,
    HttpRequest,
    RequestLogEntry,
    SingleResult,
    StepResult,
)
from .paths import MISSING
from .request import execute_request
from .store import SessionStore
from .templates import render_data, render_headers, render_template
from .validation import is_passed, validate_response

logger = logging.getLogger(__name__)


def generate_session_id() -> str:
    return str(uuid.uuid4())


def _present(extracted: dict[str, Any]) -> dict[str, Any]:
    return {name: value for name, value in extracted.items() if value is not MISSING}


class ChainRunner:
    """Runs single requests and chains, recording everything in a session store."""

    def __init__(self, store: SessionStore, client: httpx.Client):
        self.store = store
        self.client = client

    def execute(self, params: ExecuteParams) -> SingleResult | ChainResult:
        """Dispatch to chain or single mode depending on whether ``chain`` is given."""
        session_id = params.session_id or generate_session_id()

        if params.chain is not None:
            return self.run_chain(session_id, params.chain, default_expect=params.expect)

        if not params.url:
            raise InputError("'url' is required for a single request (or pass 'chain')")

        request = HttpRequest(method=params.method, url=params.url, headers=params.headers, data=params.data)
        return self.run_single(session_id, request, params.expect)

    def run_single(self, session_id: str, request: HttpRequest, expect: Expectation | None = None) -> SingleResult:
        self.store.get_or_create(session_id)

        response = execute_request(self.client, request)
        validation, body_validation = validate_response(response, expect)

        self.store.append(
            session_id,
            RequestLogEntry(
                type=LogEntryType.SINGLE,
                request=request,
                response=response,
                expectations=expect,
                validation=validation,
                body_validation=body_validation,
            ),
        )

        return SingleResult(
            session_id=session_id,
            ok=is_passed(validation, body_validation),
            status=response.status,
            status_text=response.status_text,
            content_type=response.content_type,
            body=response.body,
            validation=validation,
            body_validation=body_validation,
        )

    def run_chain(
        self,
        session_id: str,
        steps: list[ChainStep],
        default_expect: Expectation | None = None,
    ) -> ChainResult:
        if not steps:
            raise InputError("'chain' must contain at least one step")

        duplicates = [name for name, count in Counter(step.name for step in steps).items() if count > 1]
        if duplicates:
            logger.warning(f"Duplicate step names {duplicates}: later steps overwrite earlier ones in the variable scope")

        self.store.get_or_create(session_id)

        scope: dict[str, Any] = {}
        results: list[StepResult] = []
        try:
            for index, step in enumerate(steps):
                logger.info(f"Session {session_id}: running step {index + 1}/{len(steps)} '{step.name}'")
                results.append(self._run_step(session_id, step, scope, default_expect))
        except HttpChainError as e:
            logger.error(f"Session {session_id}: chain aborted at step {len(results) + 1}: {str(e)}")
            self.store.finish(session_id, SessionStatus.FAILED)
            raise

        self.store.append(session_id, ChainLogEntry(steps=results))
        self.store.finish(session_id, SessionStatus.COMPLETED)

        return ChainResult(session_id=session_id, results=results)

    def _run_step(
        self,
        session_id: str,
        step: ChainStep,
        scope: dict[str, Any],
        default_expect: Expectation | None,
    ) -> StepResult:
        request = HttpRequest(
            method=step.method,
            url=render_template(step.url, scope),
            headers=render_headers(step.headers, scope),
            data=render_data(step.data, scope),
        )
        expect = step.expect or default_expect

        response = execute_request(self.client, request)
        validation, body_validation = validate_response(response, expect)
        extracted = extract_fields(response.body, step.extract)

        scope.update(extracted)
        scope[step.name] = {
            **extracted,
            "body": response.body,
            "status": response.status,
            "statusText": response.status_text,
            "contentType": response.content_type,
        }

        self.store.append(
            session_id,
            RequestLogEntry(
                type=LogEntryType.REQUEST,
                name=step.name,
                request=request,
                response=response,
                expectations=expect,
                validation=validation,
                body_validation=body_validation,
                extracted=_present(extracted),
            ),
        )

        return StepResult(
            name=step.name,
            status=response.status,
            status_text=response.status_text,
            content_type=response.content_type,
            body=response.body,
            validation=validation,
            body_validation=body_validation,
            extracted=_present(extracted),
        )

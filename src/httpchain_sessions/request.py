import json
import logging
from typing import Any

import httpx

from .constants import JSON_CONTENT_TYPE
from .exceptions import RequestError
from .models import HttpRequest, ResponseData

logger = logging.getLogger(__name__)


def prepare_request(request: HttpRequest) -> dict[str, Any]:
    request_kwargs: dict[str, Any] = {
        "method": request.method.value,
        "url": request.url,
        "headers": request.headers,
    }

    match request.data:
        case None:
            pass
        case dict() | list():
            request_kwargs["json"] = request.data
        case str():
            request_kwargs["content"] = request.data
        case _:
            # bare numbers and booleans go out as their JSON text
            request_kwargs["content"] = json.dumps(request.data)

    return request_kwargs


def parse_response(response: httpx.Response) -> ResponseData:
    content_type = response.headers.get("content-type", "")

    body: Any
    if JSON_CONTENT_TYPE in content_type:
        try:
            body = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RequestError(f"Response is not valid JSON: {str(e)}") from None
    else:
        body = response.text

    return ResponseData(
        status=response.status_code,
        status_text=response.reason_phrase,
        content_type=content_type,
        body=body,
    )


def execute_request(client: httpx.Client, request: HttpRequest) -> ResponseData:
    """Perform ``request`` once and return the normalized response."""
    request_kwargs = prepare_request(request)
    try:
        response = client.request(**request_kwargs)
    except httpx.TimeoutException as e:
        raise RequestError(f"HTTP request timed out: {str(e)}") from None
    except httpx.ConnectError as e:
        raise RequestError(f"HTTP connection error: {str(e)}") from None
    except httpx.HTTPError as e:
        raise RequestError(f"HTTP request failed: {str(e)}") from None
    except httpx.InvalidURL as e:
        raise RequestError(f"Invalid URL '{request.url}': {str(e)}") from None

    logger.info(f"{request.method.value} {request.url} -> {response.status_code} {response.reason_phrase}")
    return parse_response(response)

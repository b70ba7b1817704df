import json
from typing import Any
from fastapi import Request

from todo_api.common.exceptions import InvalidInputException


async def read_json_object(request: Request) -> dict[str, Any]:
    """Decode the request body as a JSON object.

    Declared after the authentication dependency on each route, so a bad
    body can never mask a missing or invalid bearer token.
    """
    raw_body = await request.body()
    if not raw_body.strip():
        return {}

    try:
        payload = json.loads(raw_body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise InvalidInputException("Request body must be valid JSON.") from e

    if not isinstance(payload, dict):
        raise InvalidInputException("Request body must be a JSON object.")

    return payload

import base64
import functools
import json
import logging
from typing import Optional
from pydantic import BaseModel
from app.domain.exceptions import BitesizedError


logger = logging.getLogger('utils')

TOKEN_HEADER_NAME = "x-bitie-token"
RECENT_HEADER_NAME = "x-bitie-recent"

TEXT_CONTENT_TYPE = "text/html; charset=utf-8"
JSON_CONTENT_TYPE = "application/json; charset=utf-8"


"""
LambdaRequest Entity:
The parts of a function URL event the handlers use.
1. method (str): HTTP method in upper case.
2. path (str): Raw path of the request.
3. headers (dict): Headers with lower-case names.
4. query (dict): Query string parameters.
5. body (Optional[str]): Decoded body, if any.
6. source_ip (Optional[str]): IP address of the caller.
"""
class LambdaRequest(BaseModel):
    method: str = ""
    path: str = "/"
    headers: dict[str, str] = {}
    query: dict[str, str] = {}
    body: Optional[str] = None
    source_ip: Optional[str] = None

    @classmethod
    def from_event(cls, event: dict) -> 'LambdaRequest':
        http = (event.get('requestContext') or {}).get('http') or {}
        body = event.get('body')
        if body and event.get('isBase64Encoded'):
            body = base64.b64decode(body).decode('utf-8')
        return cls(
            method=(http.get('method') or event.get('httpMethod') or "").upper(),
            path=event.get('rawPath') or http.get('path') or "/",
            headers={k.lower(): v for k, v in (event.get('headers') or {}).items()},
            query=event.get('queryStringParameters') or {},
            body=body,
            source_ip=http.get('sourceIp'),
        )

    def param(self, name: str) -> Optional[str]:
        # Blank values are the same as missing
        value = self.query.get(name)
        if value is None or not value.strip():
            return None
        return value.strip()

    @property
    def token(self) -> Optional[str]:
        return self.headers.get(TOKEN_HEADER_NAME)


def url_list(value: Optional[str]) -> Optional[list[str]]:
    """
    Splits a dot-separated list from a URL parameter, e.g. `rust.aws` or `0.2`.

    :param value: Parameter value or None
    :return: Non-empty trimmed parts, or None if there was no value
    """
    if value is None:
        return None
    return [part.strip() for part in value.split('.') if part.strip()]


def parse_answers(value: Optional[str]) -> Optional[list[int]]:
    # Parts that are not plain ASCII numbers are dropped
    parts = url_list(value)
    if parts is None:
        return None
    return [int(part) for part in parts if part.isascii() and part.isdecimal()]


def text_response(body: Optional[str], status: int) -> dict:
    return {
        'statusCode': status,
        'headers': {'Content-Type': TEXT_CONTENT_TYPE},
        'body': body,
        'isBase64Encoded': False,
    }


def json_response(body, status: int = 200) -> dict:
    return {
        'statusCode': status,
        'headers': {'Content-Type': JSON_CONTENT_TYPE},
        'body': json.dumps(body) if body is not None else None,
        'isBase64Encoded': False,
    }


def error_handler(func):
    """
    A decorator that wraps asynchronous lambda handlers to handle exceptions.

    Known errors become a text response with the status code of the error.
    Anything else is logged with the traceback and returned as 500.

    :param func: The asynchronous handler to be wrapped.
    :return: The wrapped handler with error handling.
    """
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except BitesizedError as e:
            logger.info(f"{func.__name__} returned {e.status_code}: {e.message}")
            return text_response(e.message, e.status_code)
        except Exception as e:
            logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
            return text_response("Something went wrong. Please try again later.", 500)
    return wrapper

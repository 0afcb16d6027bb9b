"""Context carried into every log line: the request id and, inside attempt writes, the attempt id."""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_attempt_id_ctx: ContextVar[Optional[int]] = ContextVar("attempt_id", default=None)


def set_request_id(request_id: str):
    return _request_id_ctx.set(request_id)


def get_request_id() -> Optional[str]:
    return _request_id_ctx.get()


def get_attempt_id() -> Optional[int]:
    return _attempt_id_ctx.get()


@contextmanager
def attempt_context(attempt_id: int) -> Iterator[None]:
    token = _attempt_id_ctx.set(attempt_id)
    try:
        yield
    finally:
        _attempt_id_ctx.reset(token)

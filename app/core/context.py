from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, Optional

_request_id: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
_request_path: ContextVar[Optional[str]] = ContextVar("request_path", default=None)


def get_request_id() -> Optional[str]:
    return _request_id.get()


def get_request_path() -> Optional[str]:
    return _request_path.get()


@contextmanager
def request_scope(request_id: str, path: Optional[str] = None) -> Iterator[None]:
    """Bind request_id (and path) for log records emitted inside the block."""
    id_token = _request_id.set(request_id)
    path_token = _request_path.set(path)
    try:
        yield
    finally:
        _request_path.reset(path_token)
        _request_id.reset(id_token)

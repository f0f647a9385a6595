"""Translation of Supabase client failures into domain errors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from recipe_catalog.domain.errors import DuplicateKey, StorageUnavailable

UNIQUE_VIOLATION = "23505"

_logger = logging.getLogger(__name__)


@contextmanager
def supabase_errors(action: str) -> Iterator[None]:
    """Map PostgREST and transport errors raised inside the block."""
    try:
        yield
    except APIError as exc:
        if exc.code == UNIQUE_VIOLATION:
            raise DuplicateKey(exc.message or action) from exc
        _logger.warning("Supabase %s failed: code=%s %s", action, exc.code, exc.message)
        raise StorageUnavailable(f"Supabase {action} failed") from exc
    except httpx.HTTPError as exc:
        _logger.warning("Supabase %s transport error: %s", action, exc)
        raise StorageUnavailable(f"Supabase {action} unavailable") from exc

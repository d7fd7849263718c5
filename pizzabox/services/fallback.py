"""
Fallback-on-Read-Failure Policy

Named availability policy for read paths that must always produce a usable
value. A decorated coroutine that returns None, or raises, resolves to the
value built by `default_factory` instead. Masked failures are logged with
structured fields and counted per resource.

Usage:
    from pizzabox.services.fallback import fallback_on_read_failure

    @fallback_on_read_failure(default_settings, resource="settings")
    async def load_settings(db):
        ...

Version: 1.0.0
"""

import functools
import logging
from collections import Counter
from typing import Any, Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Masked read failures per resource, since process start
masked_failures: Counter = Counter()


def fallback_on_read_failure(
    default_factory: Callable[[], T],
    *,
    resource: str,
) -> Callable[[Callable[..., Awaitable[Optional[T]]]], Callable[..., Awaitable[T]]]:
    """
    Resolve an async read to a default value when it finds nothing or fails.

    Args:
        default_factory: Builds the fallback value (called on every fallback)
        resource: Name used in log records and in the failure counter

    Returns:
        Decorator for an async read function
    """
    def decorator(func: Callable[..., Awaitable[Optional[T]]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                masked_failures[resource] += 1
                logger.error(
                    f"Read of {resource} failed, serving defaults: {e}",
                    extra={
                        "resource": resource,
                        "error_type": type(e).__name__,
                        "error_message": str(e),
                        "fallback": True,
                    },
                    exc_info=True,
                )
                return default_factory()

            if result is None:
                logger.debug(f"No {resource} found, serving defaults")
                return default_factory()

            return result

        return wrapper

    return decorator


def reset_masked_failures() -> None:
    """Clear the masked failure counters."""
    masked_failures.clear()

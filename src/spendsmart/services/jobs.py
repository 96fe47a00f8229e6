"""Off-request dispatch for follow-up work such as budget alert checks.

Work runs on a daemon thread so a slow SMTP relay never delays the HTTP
response. Test configurations switch to inline execution through
``set_async_execution(False)``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from threading import Thread
from typing import Any, Callable, Dict, Optional

from ..logging_config import get_logger

__all__ = ["Dispatch", "enqueue", "set_async_execution"]

logger = get_logger("jobs")

_RUN_ASYNC = True


@dataclass(slots=True)
class Dispatch:
    """Outcome of one dispatched call; filled in once the call returns."""

    name: str
    status: str = "queued"
    result: Any = None
    error: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)


def set_async_execution(enabled: bool) -> None:
    """Configure whether work runs in threads (True) or synchronously (False)."""

    global _RUN_ASYNC
    _RUN_ASYNC = enabled


def enqueue(
    name: str,
    target: Callable[..., Any],
    *,
    metadata: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Dispatch:
    """Run ``target(**kwargs)`` off the caller's path.

    Failures are logged and recorded on the returned ``Dispatch``; they never
    reach the caller.
    """

    dispatch = Dispatch(name=name, metadata=metadata or {})

    def runner() -> None:
        dispatch.status = "running"
        try:
            dispatch.result = target(**kwargs)
        except Exception as exc:
            dispatch.status = "failed"
            dispatch.error = str(exc)
            logger.exception("Dispatched call failed", extra={"job": name, **dispatch.metadata})
        else:
            dispatch.status = "succeeded"

    if _RUN_ASYNC:
        Thread(target=runner, name=f"SpendSmart-{name}", daemon=True).start()
    else:
        runner()

    return dispatch

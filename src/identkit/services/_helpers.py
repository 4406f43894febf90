"""Shared service-layer helper functions."""

from __future__ import annotations

from typing import Any

from identkit.domain.failures import ExceptionalReason, FailureKind, Reason, ResolutionFailure
from identkit.services.result import ResolutionResult


def succeed(op: str, value: Any, warnings: list[str] | None = None) -> ResolutionResult:
    """Build a successful result."""
    return ResolutionResult(ok=True, op=op, value=value, warnings=warnings or [])


def fail(
    op: str,
    kind: FailureKind,
    message: str,
    *,
    detail: str = "",
    reasons: tuple[Reason, ...] = (),
) -> ResolutionResult:
    """Build a failed result."""
    return ResolutionResult(
        ok=False,
        op=op,
        failure=ResolutionFailure(kind=kind, message=message, detail=detail, reasons=reasons),
    )


def fail_from_exception(
    op: str,
    kind: FailureKind,
    exc: BaseException,
    *,
    detail: str = "",
) -> ResolutionResult:
    """Wrap an exception caught at a collaborator boundary.

    The exception text becomes the message; the exception itself is kept as
    an :class:`ExceptionalReason`.
    """
    return fail(
        op,
        kind,
        str(exc) or type(exc).__name__,
        detail=detail,
        reasons=(ExceptionalReason.from_exception(exc),),
    )

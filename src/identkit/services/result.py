"""ResolutionResult — the universal return type of identkit operations.

INVARIANT: public codec and resolver operations return ResolutionResult.
Expected absence and malformed input are failures, never raised exceptions.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from identkit.domain.failures import ResolutionFailure, Reason


class ResolutionError(Exception):
    """Raised by :meth:`ResolutionResult.unwrap` on a failed result."""

    def __init__(self, failure: ResolutionFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure


class ResolutionResult(BaseModel):
    """Outcome of a resolution, parse or read operation.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"try_resolve_type"``).
        value: The resolved value on success.
        failure: Structured failure if ``ok`` is False.
        warnings: Non-fatal issues encountered during the operation.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    value: Any = None
    failure: ResolutionFailure | None = None
    warnings: list[str] = Field(default_factory=list)

    def unwrap(self) -> Any:
        """Return the value, or raise :class:`ResolutionError` if failed."""
        if not self.ok:
            assert self.failure is not None
            raise ResolutionError(self.failure)
        return self.value

    def has_reason(self, reason_type: type[Reason]) -> bool:
        """Whether the failure carries a reason of *reason_type*."""
        if self.failure is None:
            return False
        return any(isinstance(r, reason_type) for r in self.failure.reasons)

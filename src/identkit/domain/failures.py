"""Failure taxonomy and structured reasons.

Callers branch on :class:`FailureKind` or on the reason classes attached to a
failure, never on message text.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, model_validator


class FailureKind(StrEnum):
    """Classification of a failed resolution."""

    TYPE_NOT_FOUND = "TYPE_NOT_FOUND"
    MODULE_NOT_FOUND = "MODULE_NOT_FOUND"
    MALFORMED_IDENTITY = "MALFORMED_IDENTITY"
    READ_FAILED = "READ_FAILED"


class Reason(BaseModel):
    """Base for structured failure reasons."""

    model_config = {"frozen": True}

    message: str


class TypeNotDefined(Reason):
    """No type exists under the requested name."""

    type_name: str

    @model_validator(mode="before")
    @classmethod
    def _default_message(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("message"):
            data = {**data, "message": f"Undefined type: {data.get('type_name')}"}
        return data


class ModuleNotLoaded(Reason):
    """No loaded module satisfies the requested identity."""

    identity: str

    @model_validator(mode="before")
    @classmethod
    def _default_message(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("message"):
            data = {**data, "message": f"Module not loaded: {data.get('identity')}"}
        return data


class ExceptionalReason(Reason):
    """An exception raised by a collaborator, captured at the boundary."""

    exc_type: str

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExceptionalReason:
        return cls(exc_type=type(exc).__name__, message=str(exc) or type(exc).__name__)


class ResolutionFailure(BaseModel):
    """Why a resolution did not produce a value.

    Attributes:
        kind: Failure classification.
        message: Human-readable description.
        detail: The offending input, verbatim.
        reasons: Structured reasons for programmatic inspection.
    """

    model_config = {"frozen": True}

    kind: FailureKind
    message: str
    detail: str = ""
    reasons: tuple[Reason, ...] = ()

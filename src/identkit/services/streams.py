"""Byte-stream reading — decoded text with boundary-wrapped failures.

The encoding is chosen from a byte order marker, defaulting to UTF-8.
Content is returned exactly as decoded: no newline translation, control
characters preserved. Streams passed in are not closed.
"""

from __future__ import annotations

import codecs
import importlib.resources
import logging
from types import ModuleType
from typing import IO

from identkit.domain.failures import FailureKind
from identkit.infrastructure.catalog import LoadedModule
from identkit.services._helpers import fail, fail_from_exception, succeed
from identkit.services.result import ResolutionResult

logger = logging.getLogger(__name__)

NULL_STREAM_MESSAGE = "Cannot read from a null stream !"

# UTF-32 LE must be tested before UTF-16 LE: its BOM starts with the same bytes.
_BOMS: tuple[tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32"),
    (codecs.BOM_UTF32_BE, "utf-32"),
    (codecs.BOM_UTF8, "utf-8-sig"),
    (codecs.BOM_UTF16_LE, "utf-16"),
    (codecs.BOM_UTF16_BE, "utf-16"),
)


def detect_encoding(data: bytes) -> str:
    """Return the codec name implied by *data*'s BOM, or ``utf-8``.

    Examples:
        >>> detect_encoding(codecs.BOM_UTF8 + b"abc")
        'utf-8-sig'
        >>> detect_encoding(b"abc")
        'utf-8'
    """
    for bom, encoding in _BOMS:
        if data.startswith(bom):
            return encoding
    return "utf-8"


def decode_text(data: bytes) -> str:
    """Decode *data* using its BOM (strict errors)."""
    return data.decode(detect_encoding(data))


def read_all_text(stream: IO[bytes] | IO[str] | None, *, op: str = "read_all_text") -> ResolutionResult:
    """Read the whole of *stream* as text.

    Fails for a missing stream, a closed stream, a read error or undecodable
    bytes; the underlying exception is kept as an ExceptionalReason.
    """
    if stream is None:
        return fail(op, FailureKind.READ_FAILED, NULL_STREAM_MESSAGE)
    try:
        data = stream.read()
        text = data if isinstance(data, str) else decode_text(data)
    except Exception as exc:
        logger.debug("Stream read failed", exc_info=True)
        return fail_from_exception(op, FailureKind.READ_FAILED, exc)
    return succeed(op, text)


def read_resource(module: ModuleType | str | LoadedModule | None, resource_name: str) -> ResolutionResult:
    """Read a resource packaged with *module* (a module, its name, or a LoadedModule).

    Missing modules and resources fail with the exception detail attached.
    """
    op = "read_resource"
    anchor = module.handle if isinstance(module, LoadedModule) else module
    if anchor is None:
        return fail(op, FailureKind.READ_FAILED, f"No module to read {resource_name!r} from", detail=resource_name)
    try:
        resource = importlib.resources.files(anchor).joinpath(resource_name)
        with resource.open("rb") as stream:
            return read_all_text(stream, op=op)
    except Exception as exc:
        logger.debug("Resource %s unavailable", resource_name, exc_info=True)
        return fail_from_exception(op, FailureKind.READ_FAILED, exc, detail=resource_name)

"""Type identity strings: canonicalization and parsing.

A fully decorated type identity looks like::

    builtins:dict[[builtins:str, python, Version=3.12.4], [builtins:int, python]], python,
        Version=3.12.4, Culture=neutral, PublicKeyToken=null

The head is ``module:Qual.Name`` (or a dotted path), optionally followed by a
bracketed generic argument list and ``[]`` sequence suffixes. After the head
comes a comma-separated tail: the distribution name and ``Key=value``
decoration. Generic arguments carry their own tails inside their brackets.

Canonicalization strips the volatile decoration (version, culture, signing
key) at every nesting level and drops the top-level distribution tail.

INVARIANT: ``canonicalize(canonicalize(s)) == canonicalize(s)``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from identkit.domain.identity import MalformedIdentityError, ModuleIdentity, TypeIdentity, VersionQuad

DECORATION_KEYS = ("Version", "Culture", "PublicKeyToken")

_DECORATION_PATTERN = re.compile(r",\s*(?:Version|Culture|PublicKeyToken)=[^,\]]*")
_NAME_PATTERN = re.compile(r"[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*(?::[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*)?")

SEQUENCE_SUFFIX = "[]"


def _check_balanced(text: str) -> None:
    depth = 0
    for ch in text:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
            if depth < 0:
                break
    if depth != 0:
        msg = f"Unbalanced brackets in type identity {text!r}"
        raise MalformedIdentityError(msg, value=text)


def split_top_level(text: str) -> list[str]:
    """Split *text* on commas that sit outside any brackets.

    Examples:
        >>> split_top_level("a[[b, c]], d, Version=1.0")
        ['a[[b, c]]', ' d', ' Version=1.0']
    """
    _check_balanced(text)
    parts: list[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return parts


def strip_decoration(text: str) -> str:
    """Remove ``Version=``, ``Culture=`` and ``PublicKeyToken=`` segments everywhere."""
    _check_balanced(text)
    return _DECORATION_PATTERN.sub("", text)


def canonicalize(text: str) -> str:
    """Return the canonical, environment-independent form of a type identity.

    Decoration is removed at every nesting level, then everything after the
    first top-level comma (the bare distribution tail) is dropped. A string
    without a top-level comma comes back unchanged apart from surrounding
    whitespace, since bare names are valid lookup keys.

    Raises :class:`MalformedIdentityError` on unbalanced brackets.
    """
    head = split_top_level(strip_decoration(text))[0]
    return head.strip()


def _decoration(parts: list[str]) -> dict[str, str]:
    found: dict[str, str] = {}
    for part in parts:
        key, sep, value = part.strip().partition("=")
        if sep:
            found[key.strip()] = value.strip()
    return found


def parse_type_identity(text: str) -> TypeIdentity:
    """Split a decorated type string into canonical name and declaring module.

    The declaring module is the distribution tail (with its ``Version=``
    decoration when present); for a bare name it falls back to the top-level
    package of the module path.
    """
    parts = split_top_level(text)
    qualified_name = canonicalize(text)
    if not qualified_name:
        msg = "Empty type identity"
        raise MalformedIdentityError(msg, value=text)

    tail = [p for p in parts[1:] if "=" not in p]
    decoration = _decoration(parts[1:])
    if tail and tail[0].strip():
        module_name = tail[0].strip()
    else:
        module_name = re.split(r"[.:\[]", qualified_name, maxsplit=1)[0]

    declaring = _module_identity(module_name, decoration.get("Version"), text)
    return TypeIdentity(qualified_name=qualified_name, declaring_module=declaring)


def _module_identity(name: str, version: str | None, text: str) -> ModuleIdentity:
    try:
        return ModuleIdentity(name=name, version=VersionQuad.parse(version) if version else None)
    except MalformedIdentityError:
        raise
    except ValueError as exc:
        raise MalformedIdentityError(str(exc), value=text) from exc


@dataclass(frozen=True)
class TypeSpec:
    """Parsed type identity, ready for lookup.

    Attributes:
        name: ``module:Qual.Name`` or a dotted path.
        args: Generic arguments, in order.
        rank: Number of ``[]`` sequence suffixes.
        distribution: Distribution tail with optional version, if given.
    """

    name: str
    args: tuple[TypeSpec, ...] = field(default=())
    rank: int = 0
    distribution: ModuleIdentity | None = None

    @property
    def module_path(self) -> str | None:
        """Module part of a ``module:qualname`` name, else None."""
        module, sep, _ = self.name.partition(":")
        return module if sep else None


def _matching_open(text: str) -> int:
    """Index of the ``[`` that pairs with the final ``]`` of *text*."""
    depth = 0
    for i in range(len(text) - 1, -1, -1):
        if text[i] == "]":
            depth += 1
        elif text[i] == "[":
            depth -= 1
            if depth == 0:
                return i
    msg = f"Unbalanced brackets in type identity {text!r}"
    raise MalformedIdentityError(msg, value=text)


def _parse_argument(text: str) -> TypeSpec:
    text = text.strip()
    if text.startswith("[") and text.endswith("]") and _matching_open(text) == 0:
        text = text[1:-1]
    return parse_type_spec(text)


def parse_type_spec(text: str) -> TypeSpec:
    """Parse a decorated, canonical or bare type identity into a :class:`TypeSpec`.

    Raises :class:`MalformedIdentityError` when the string does not follow the
    grammar.
    """
    parts = split_top_level(text.strip())
    head = parts[0].strip()
    if not head:
        msg = f"Empty type name in {text!r}"
        raise MalformedIdentityError(msg, value=text)

    rank = 0
    while head.endswith(SEQUENCE_SUFFIX):
        head = head[: -len(SEQUENCE_SUFFIX)].rstrip()
        rank += 1

    args: tuple[TypeSpec, ...] = ()
    if head.endswith("]"):
        open_at = _matching_open(head)
        inner = head[open_at + 1 : -1]
        head = head[:open_at].rstrip()
        if not inner.strip():
            msg = f"Empty generic argument list in {text!r}"
            raise MalformedIdentityError(msg, value=text)
        args = tuple(_parse_argument(a) for a in split_top_level(inner))

    if not _NAME_PATTERN.fullmatch(head):
        msg = f"Invalid type name {head!r} in {text!r}"
        raise MalformedIdentityError(msg, value=text)

    distribution: ModuleIdentity | None = None
    tail = [p.strip() for p in parts[1:] if "=" not in p]
    if tail and tail[0]:
        distribution = _module_identity(tail[0], _decoration(parts[1:]).get("Version"), text)
    return TypeSpec(name=head, args=args, rank=rank, distribution=distribution)

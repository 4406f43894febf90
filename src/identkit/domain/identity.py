"""Module identities and their persistable string form.

A persisted module identity reads ``Name/Major.Minor[.Build[.Revision]]``.
Build and revision may be left undefined (``None``), which is distinct from
zero: an undefined revision acts as a wildcard when identities are compared
(see :mod:`identkit.domain.matching`).

INVARIANT: identities are immutable once constructed.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator, model_validator

PERSIST_SEPARATOR = "/"

_VERSION_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+){1,3}")
_RELEASE_PATTERN = re.compile(r"\s*v?([0-9]+)(?:\.([0-9]+))?(?:\.([0-9]+))?(?:\.([0-9]+))?")


class MalformedIdentityError(ValueError):
    """Raised when a string does not parse against the identity grammar."""

    def __init__(self, message: str, *, value: str | None = None) -> None:
        super().__init__(message)
        self.value = value


class VersionQuad(BaseModel):
    """A 2-4 component numeric version; ``None`` marks an undefined component."""

    model_config = {"frozen": True}

    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    build: int | None = Field(default=None, ge=0)
    revision: int | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _revision_needs_build(self) -> VersionQuad:
        if self.revision is not None and self.build is None:
            msg = "revision cannot be defined without a build component"
            raise ValueError(msg)
        return self

    @classmethod
    def parse(cls, text: str) -> VersionQuad:
        """Parse ``major.minor[.build[.revision]]``.

        Raises :class:`MalformedIdentityError` for anything else, including
        signs, whitespace and pre-release suffixes.
        """
        if not _VERSION_PATTERN.fullmatch(text):
            msg = f"Invalid version {text!r}: expected 2-4 non-negative integers"
            raise MalformedIdentityError(msg, value=text)
        return cls(**dict(zip(("major", "minor", "build", "revision"), map(int, text.split(".")))))

    @classmethod
    def from_release(cls, text: str | None) -> VersionQuad | None:
        """Lenient parse of a runtime-reported version such as ``2.7.0rc1``.

        Keeps the leading numeric release segments (up to four), pads a
        single-component release with a zero minor, and returns None when no
        leading number is present.
        """
        if not text:
            return None
        match = _RELEASE_PATTERN.match(str(text))
        if match is None:
            return None
        major, minor, build, revision = match.groups()
        return cls(
            major=int(major),
            minor=int(minor or 0),
            build=int(build) if build is not None else None,
            revision=int(revision) if revision is not None else None,
        )

    def components(self) -> tuple[int, ...]:
        """Defined components, in order."""
        parts = [self.major, self.minor, self.build, self.revision]
        return tuple(p for p in parts if p is not None)

    def sort_key(self) -> tuple[int, int, int, int]:
        """Ordering key where undefined components sort below zero."""
        return (
            self.major,
            self.minor,
            -1 if self.build is None else self.build,
            -1 if self.revision is None else self.revision,
        )

    def __str__(self) -> str:
        return ".".join(str(p) for p in self.components())


class ModuleIdentity(BaseModel):
    """Name and optional version of a loaded module.

    Names compare case-insensitively; the original casing is kept for
    rendering.
    """

    model_config = {"frozen": True}

    name: str
    version: VersionQuad | None = None

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            msg = "module name must not be empty"
            raise ValueError(msg)
        if PERSIST_SEPARATOR in value:
            msg = f"module name must not contain {PERSIST_SEPARATOR!r}"
            raise ValueError(msg)
        return value

    @property
    def key(self) -> str:
        """Case-insensitive comparison key for the name."""
        return self.name.casefold()

    @classmethod
    def from_persistable(cls, text: str) -> ModuleIdentity:
        """Parse ``Name/Major.Minor[.Build[.Revision]]``.

        Splits on the first separator. Raises :class:`MalformedIdentityError`
        when the separator is missing, the name is empty, or the version is
        not a valid 2-4 component tuple.
        """
        name, sep, version = text.partition(PERSIST_SEPARATOR)
        if not sep:
            msg = f"Missing {PERSIST_SEPARATOR!r} separator in module identity {text!r}"
            raise MalformedIdentityError(msg, value=text)
        if not name.strip():
            msg = f"Empty module name in {text!r}"
            raise MalformedIdentityError(msg, value=text)
        return cls(name=name, version=VersionQuad.parse(version))

    def to_persistable(self) -> str:
        """Render ``Name/Major.Minor[.Build[.Revision]]`` (bare name if unversioned)."""
        if self.version is None:
            return self.name
        return f"{self.name}{PERSIST_SEPARATOR}{self.version}"

    def __str__(self) -> str:
        return self.to_persistable()


class TypeIdentity(BaseModel):
    """A canonical type name together with the module that declares it."""

    model_config = {"frozen": True}

    qualified_name: str
    declaring_module: ModuleIdentity

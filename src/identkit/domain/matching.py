"""Module identity equivalence under partial version information.

Persisted versions often carry fewer components than the runtime reports
at load time, so a revision is only compared when both sides define one.
"""

from __future__ import annotations

from identkit.domain.identity import ModuleIdentity


def is_same_as(candidate: ModuleIdentity, query: ModuleIdentity) -> bool:
    """Return True when *candidate* satisfies *query*.

    Rules, in order:

    1. Names compare case-insensitively; a mismatch is never the same module.
    2. A query without a version matches on name alone.
    3. A versioned query never matches an unversioned candidate.
    4. Major, minor and build must be equal (an undefined build only equals
       an undefined build).
    5. Revisions are compared only when both are defined; otherwise the
       revision is a wildcard.

    Examples:
        >>> from identkit.domain.identity import VersionQuad
        >>> a = ModuleIdentity(name="X", version=VersionQuad.parse("1.0.0"))
        >>> b = ModuleIdentity(name="x", version=VersionQuad.parse("1.0.0.5"))
        >>> is_same_as(a, b)
        True
    """
    if candidate.key != query.key:
        return False
    if query.version is None:
        return True
    if candidate.version is None:
        return False

    ours, theirs = candidate.version, query.version
    if (ours.major, ours.minor, ours.build) != (theirs.major, theirs.minor, theirs.build):
        return False
    if ours.revision is not None and theirs.revision is not None:
        return ours.revision == theirs.revision
    return True

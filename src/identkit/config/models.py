"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, identkit.toml only contains
overrides.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class TieBreak(StrEnum):
    """How ModuleResolver picks among several matching loaded modules."""

    FIRST = "first"
    HIGHEST = "highest"


class ResolverConfig(BaseModel):
    """[resolver] section."""

    model_config = {"frozen": True}

    tie_break: TieBreak = TieBreak.FIRST
    import_missing: bool = False


class CodecConfig(BaseModel):
    """[codec] section."""

    model_config = {"frozen": True}

    interpreter_distribution: str = "python"
    culture: str = "neutral"
    public_key_token: str = "null"

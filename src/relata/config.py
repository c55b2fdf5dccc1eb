# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Relation resolution settings.

Values are read from ``RELATA_RELATION_*`` environment variables, e.g.
``RELATA_RELATION_DEFAULT_MAX_DEPTH=3``.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RelationSettings(BaseSettings):
    """Defaults applied when no resolution context overrides them."""

    model_config = SettingsConfigDict(
        env_prefix="RELATA_RELATION_",
        extra="ignore",
        case_sensitive=False,
    )

    default_max_depth: int = Field(
        default=2, ge=0, description="Recursion depth used when none is set"
    )
    auto_clear: bool = Field(
        default=True,
        description="Clear per-call configuration after each top-level resolution",
    )
    check_batch_types: bool = Field(
        default=False,
        description="Reject batches that mix concrete entity types",
    )


@lru_cache
def get_settings() -> RelationSettings:
    """Return the process-wide relation settings, loaded once."""
    return RelationSettings()

# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""Base class for entities whose relations can be resolved."""

from __future__ import annotations

import re
from typing import ClassVar

from pydantic import BaseModel, ConfigDict

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class Entity(BaseModel):
    """
    Pydantic entity mapped to a single table.

    The table defaults to the snake_case class name and the primary key to
    ``id``; override with ``__tablename__`` and ``__primary_key__``. Entities
    stay mutable because relation fields are populated in place.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    __tablename__: ClassVar[str | None] = None
    __primary_key__: ClassVar[str] = "id"

    @classmethod
    def table_name(cls) -> str:
        if cls.__tablename__:
            return cls.__tablename__
        return _CAMEL_BOUNDARY.sub("_", cls.__name__).lower()

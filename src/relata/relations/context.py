# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata
"""
Resolution context.

The context holds per-call configuration for relation resolution: maximum
depth, extra condition parameters, ignored relations and whether those are
cleared automatically after each top-level resolution. Defaults come from
:class:`relata.config.RelationSettings`.

A :class:`ResolutionContext` is immutable. Every setter stores a modified copy
in a context variable, so a change made in one thread or asyncio task is never
seen by another, even when both started from the same parent context.

Settings made through the module functions persist until cleared
(explicitly, or automatically after ``query_relations`` when auto-clear is
on). :func:`relation_scope` pushes a fresh context for a block and pops it on
exit.
"""

from __future__ import annotations

import contextlib
import contextvars
import dataclasses
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from relata.config import RelationSettings, get_settings


@dataclass(frozen=True)
class ResolutionContext:
    """Per-call relation resolution configuration."""

    max_depth: int | None = None
    extra_params: Mapping[str, Any] | None = None
    ignore_relations: frozenset[str] | None = None
    auto_clear: bool | None = None
    settings: RelationSettings = field(default_factory=get_settings, repr=False)

    def __post_init__(self) -> None:
        if self.max_depth is not None:
            _check_depth(self.max_depth)
        if self.extra_params is not None:
            object.__setattr__(self, "extra_params", MappingProxyType(dict(self.extra_params)))
        if self.ignore_relations is not None:
            object.__setattr__(self, "ignore_relations", frozenset(self.ignore_relations))

    def effective_max_depth(self) -> int:
        if self.max_depth is None:
            return self.settings.default_max_depth
        return self.max_depth

    def effective_auto_clear(self) -> bool:
        if self.auto_clear is None:
            return self.settings.auto_clear
        return self.auto_clear

    def cleared(self) -> ResolutionContext:
        """Copy without depth, extra params and ignored relations; auto-clear is kept."""
        return dataclasses.replace(
            self, max_depth=None, extra_params=None, ignore_relations=None
        )


_current: contextvars.ContextVar[ResolutionContext | None] = contextvars.ContextVar(
    "relata_resolution_context", default=None
)


def current_context() -> ResolutionContext:
    """Return the active context, or a default one when none was stored."""
    context = _current.get()
    if context is None:
        return ResolutionContext()
    return context


def _update(**changes: Any) -> None:
    _current.set(dataclasses.replace(current_context(), **changes))


def context_settings() -> RelationSettings:
    return current_context().settings


def reset_context() -> None:
    """Discard the active context; the next read sees the defaults."""
    _current.set(None)


def clear_call_config() -> None:
    """Drop depth, extra params and ignored relations from the active context."""
    _current.set(current_context().cleared())


@contextlib.contextmanager
def relation_scope(
    *,
    max_depth: int | None = None,
    extra_params: Mapping[str, Any] | None = None,
    ignore_relations: Iterable[str] | None = None,
    auto_clear: bool | None = None,
    settings: RelationSettings | None = None,
) -> Iterator[ResolutionContext]:
    """Run a block with its own resolution context.

    Example::

        with relation_scope(max_depth=1, ignore_relations={"roles"}):
            query_relations(access, accounts)
    """
    context = ResolutionContext(
        max_depth=max_depth,
        extra_params=extra_params,
        ignore_relations=ignore_relations,
        auto_clear=auto_clear,
        settings=settings or get_settings(),
    )
    token = _current.set(context)
    try:
        yield context
    finally:
        _current.reset(token)


def _check_depth(max_depth: int) -> None:
    if max_depth < 0:
        raise ValueError(f"max_depth must be >= 0, got {max_depth}")


def set_max_depth(max_depth: int) -> None:
    _update(max_depth=max_depth)


def get_max_depth() -> int:
    return current_context().effective_max_depth()


def clear_max_depth() -> None:
    _update(max_depth=None)


def set_extra_condition_params(params: Mapping[str, Any] | None) -> None:
    _update(extra_params=params)


def add_extra_condition_param(key: str, value: Any) -> None:
    params = dict(current_context().extra_params or {})
    params[key] = value
    _update(extra_params=params)


def get_extra_condition_params() -> dict[str, Any] | None:
    params = current_context().extra_params
    return dict(params) if params is not None else None


def clear_extra_condition_params() -> None:
    _update(extra_params=None)


def extra_condition_values(keys: Iterable[str]) -> list[Any]:
    """Values for ``keys`` from the active extra params; missing keys give None."""
    params = current_context().extra_params or {}
    return [params.get(key) for key in keys]


def set_ignore_relations(names: Iterable[str] | None) -> None:
    _update(ignore_relations=names)


def add_ignore_relations(*names: str) -> None:
    ignored = current_context().ignore_relations or frozenset()
    _update(ignore_relations=ignored | set(names))


def get_ignore_relations() -> frozenset[str] | None:
    return current_context().ignore_relations


def clear_ignore_relations() -> None:
    _update(ignore_relations=None)


def set_auto_clear_config(enable: bool) -> None:
    _update(auto_clear=enable)


def get_auto_clear_config() -> bool:
    return current_context().effective_auto_clear()


def clear_auto_clear_config() -> None:
    _update(auto_clear=None)

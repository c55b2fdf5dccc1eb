# SPDX-FileCopyrightText: 2024-present Richard Dahl <richard@dahl.us>
# SPDX-License-Identifier: MIT
# SPDX-Package-Name: relata

"""
Relation declaration and resolution.
"""

from relata.relations.markers import (
    RelationKind,
    RelationManyToMany,
    RelationManyToOne,
    RelationMarker,
    RelationOneToMany,
    RelationOneToOne,
)
from relata.relations.metadata import (
    EntityMetadataProvider,
    PydanticMetadataProvider,
    RelationField,
)
from relata.relations.errors import (
    MixedEntityBatchError,
    RelationDeclarationError,
    RelationError,
)
from relata.relations.context import (
    ResolutionContext,
    add_extra_condition_param,
    add_ignore_relations,
    clear_auto_clear_config,
    clear_call_config,
    clear_extra_condition_params,
    clear_ignore_relations,
    clear_max_depth,
    current_context,
    get_auto_clear_config,
    get_extra_condition_params,
    get_ignore_relations,
    get_max_depth,
    relation_scope,
    reset_context,
    set_auto_clear_config,
    set_extra_condition_params,
    set_ignore_relations,
    set_max_depth,
)
from relata.relations.descriptor import (
    AbstractRelation,
    ManyToMany,
    ManyToOne,
    OneToMany,
    OneToOne,
    ToManyRelation,
    ToOneRelation,
)
from relata.relations.cache import RelationMetadataCache
from relata.relations.manager import (
    RelationManager,
    get_relation_manager,
    query_relations,
)

__all__ = [
    # Markers
    "RelationKind",
    "RelationMarker",
    "RelationOneToOne",
    "RelationOneToMany",
    "RelationManyToOne",
    "RelationManyToMany",
    # Metadata
    "EntityMetadataProvider",
    "PydanticMetadataProvider",
    "RelationField",
    # Errors
    "RelationError",
    "RelationDeclarationError",
    "MixedEntityBatchError",
    # Context
    "ResolutionContext",
    "current_context",
    "reset_context",
    "clear_call_config",
    "relation_scope",
    "set_max_depth",
    "get_max_depth",
    "clear_max_depth",
    "set_extra_condition_params",
    "add_extra_condition_param",
    "get_extra_condition_params",
    "clear_extra_condition_params",
    "set_ignore_relations",
    "add_ignore_relations",
    "get_ignore_relations",
    "clear_ignore_relations",
    "set_auto_clear_config",
    "get_auto_clear_config",
    "clear_auto_clear_config",
    # Descriptors
    "AbstractRelation",
    "ToOneRelation",
    "ToManyRelation",
    "OneToOne",
    "OneToMany",
    "ManyToOne",
    "ManyToMany",
    # Resolution
    "RelationMetadataCache",
    "RelationManager",
    "get_relation_manager",
    "query_relations",
]

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""TypeNameResolver - canonical output names for schema entities.

The resolver is the single place where output type names are computed, so
that a reference to a class and the class declaration always agree.

Resolution order:
    1. Named global type or global element: '<ns>.<local name>'.
    2. Element reference: the name of the referenced global element.
    3. Element or attribute with a named type: the name of that type
       (built-in types resolve to their scalar name).
    4. Inline anonymous type: the nesting path of the enclosing named
       scopes, e.g. 'Gen.WithNested.Nested'.

Example:
    >>> resolver = TypeNameResolver(NamespaceMapper({ns: 'Gen'}))
    >>> resolver.resolve(schema.types['Person'])
    'Gen.Person'
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from xmlschema.validators import XsdAttribute, XsdElement, XsdType

from .builtin_types import BuiltinTypeMapper
from .code_model import qualify
from .exceptions import InvalidSchemaShape, UnmappedConstruct
from .schema_graph import (
    Scope,
    describe,
    enclosing_scope,
    is_any_type,
    is_builtin,
    local_name,
    particle_kind,
    split_qname,
)

if TYPE_CHECKING:
    from .builder import ExistingType
    from .namespaces import NamespaceMapper

logger = logging.getLogger(__name__)

_NON_WORD = re.compile(r"\W")


def identifier(name: str) -> str:
    """Turn an XML local name into an identifier: 'first-name' -> 'first_name'."""
    ident = _NON_WORD.sub("_", name)
    if not ident or ident[0].isdigit():
        ident = "_" + ident
    return ident


class TypeNameResolver:
    """Computes output type names for schema types, elements and attributes.

    Args:
        mapper: Namespace mapper giving the output namespace of XML namespaces.
        existing: Registry of pre-existing types keyed by schema type name
            (Clark notation). Owned by the builder and shared by reference.
        builtins: Built-in type mapper.
    """

    def __init__(
        self,
        mapper: NamespaceMapper,
        existing: Mapping[str, ExistingType] | None = None,
        builtins: BuiltinTypeMapper | None = None,
    ):
        self.mapper = mapper
        self.existing = existing if existing is not None else {}
        self.builtins = builtins or BuiltinTypeMapper()

    def qualify(self, xml_namespace: str, *local_names: str) -> str:
        """Output name for local names nested under an XML namespace."""
        return qualify(self.mapper.map(xml_namespace), *(identifier(n) for n in local_names))

    def resolve(self, entity: Any, scope: Scope | None = None) -> str:
        """Return the fully qualified output type name of entity.

        Args:
            entity: A global type, global element, particle element or attribute.
            scope: Open named scopes enclosing entity. Only used for inline
                anonymous types; when omitted it is derived from the
                entity's ancestors.

        Raises:
            UnmappedConstruct: entity cannot be named (model groups,
                wildcards, untyped declarations).
        """
        if isinstance(entity, XsdType):
            return self._resolve_type(entity, scope)
        if isinstance(entity, XsdElement):
            return self._resolve_element(entity, scope)
        if isinstance(entity, XsdAttribute):
            return self._resolve_attribute(entity, scope)
        raise UnmappedConstruct(self._construct_of(entity), describe(entity))

    # -------------------------------------------------------------------------
    # Rules
    # -------------------------------------------------------------------------

    def _resolve_type(self, xsd_type: Any, scope: Scope | None) -> str:
        if xsd_type.name is not None:
            return self._named_type(xsd_type)
        # Anonymous type: named after the declaration holding it.
        owner = xsd_type.parent
        if isinstance(owner, (XsdElement, XsdAttribute)):
            return self._inline(owner, scope)
        raise UnmappedConstruct("anonymous type", describe(xsd_type))

    def _resolve_element(self, element: Any, scope: Scope | None) -> str:
        if element.parent is None:
            namespace, name = split_qname(element.name)
            return self.qualify(namespace, name)
        if element.ref is not None:
            return self._resolve_element(element.ref, None)
        element_type = element.type
        if element_type is None or is_any_type(element_type):
            raise InvalidSchemaShape("untyped element", describe(element))
        if element_type.name is not None:
            return self._named_type(element_type)
        return self._inline(element, scope)

    def _resolve_attribute(self, attribute: Any, scope: Scope | None) -> str:
        if attribute.parent is None:
            namespace, name = split_qname(attribute.name)
            return self.qualify(namespace, name)
        if attribute.ref is not None:
            return self._resolve_attribute(attribute.ref, None)
        attribute_type = attribute.type
        if attribute_type is not None and attribute_type.name is not None:
            return self._named_type(attribute_type)
        return self._inline(attribute, scope)

    def _named_type(self, xsd_type: Any) -> str:
        existing = self.existing.get(xsd_type.name)
        if existing is not None:
            return existing.name
        namespace, name = split_qname(xsd_type.name)
        if is_builtin(xsd_type):
            scalar = self.builtins.map(name)
            if scalar is None:
                raise UnmappedConstruct(f"built-in type '{name}'", xsd_type.name)
            return scalar.name
        return self.qualify(namespace, name)

    def _inline(self, declaration: Any, scope: Scope | None) -> str:
        """Nesting path name of the anonymous type of declaration."""
        name = local_name(declaration.name)
        if declaration.parent is None:
            return self.qualify(declaration.target_namespace, name)
        if scope is None:
            scope = enclosing_scope(declaration)
        if scope is None:
            logger.warning(
                "No named ancestor for anonymous type of %s, using its local name",
                describe(declaration),
            )
            return self.qualify(declaration.target_namespace, name)
        return self.qualify(scope.namespace, *scope.names, name)

    def _construct_of(self, entity: Any) -> str:
        try:
            return particle_kind(entity).value
        except UnmappedConstruct:
            return type(entity).__name__


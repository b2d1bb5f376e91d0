# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Read-only helpers over a compiled xmlschema graph.

The derivation engine never parses XSD text itself: schemas are loaded and
compiled by xmlschema, and this module gives the engine a small vocabulary
over the resulting components (qualified names, particle kinds, occurrence
bounds, global symbol tables, own content of derived types).
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, NamedTuple

import xmlschema
from xmlschema.validators import (
    XsdAnyAttribute,
    XsdAnyElement,
    XsdAttribute,
    XsdComplexType,
    XsdElement,
    XsdGroup,
    XsdType,
)

from .exceptions import UnmappedConstruct

XSD_NAMESPACE = "http://www.w3.org/2001/XMLSchema"
XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
VC_NAMESPACE = "http://www.w3.org/2007/XMLSchema-versioning"
HFP_NAMESPACE = "http://www.w3.org/2001/XMLSchema-hasFacetAndProperty"

RESERVED_NAMESPACES = frozenset(
    {XSD_NAMESPACE, XML_NAMESPACE, XSI_NAMESPACE, VC_NAMESPACE, HFP_NAMESPACE}
)

XSD_ANY_TYPE = f"{{{XSD_NAMESPACE}}}anyType"


class QName(NamedTuple):
    """Qualified name of a schema entity: (namespace, local name)."""

    namespace: str
    name: str

    @property
    def text(self) -> str:
        """Clark notation: '{namespace}name', or 'name' without namespace."""
        return f"{{{self.namespace}}}{self.name}" if self.namespace else self.name

    @classmethod
    def from_text(cls, text: str) -> QName:
        namespace, name = split_qname(text)
        return cls(namespace, name)

    def __str__(self) -> str:
        return self.text


class Scope(NamedTuple):
    """Open named scopes enclosing a declaration.

    Attributes:
        namespace: XML namespace of the outermost named scope.
        names: Local names of the named scopes, outermost first.
    """

    namespace: str
    names: tuple[str, ...] = ()

    def enter(self, name: str) -> Scope:
        """Return the scope nested one level deeper, under name."""
        return Scope(self.namespace, (*self.names, name))


class ParticleKind(Enum):
    """Content model node kinds."""

    SEQUENCE = "sequence"
    CHOICE = "choice"
    ALL = "all"
    ANY = "any"
    ELEMENT = "element"
    EMPTY = "empty"


def split_qname(name: str | None) -> tuple[str, str]:
    """Split '{ns}local' into (ns, local). Unqualified names get ns ''."""
    if not name:
        return "", ""
    if name[0] == "{":
        namespace, _, local = name[1:].partition("}")
        return namespace, local
    return "", name


def local_name(name: str | None) -> str:
    """Strip namespace: '{ns}Person' -> 'Person'."""
    return split_qname(name)[1]


def qname_of(component: Any) -> QName:
    """Return the QName of a named schema component."""
    return QName.from_text(component.name)


def load_schema(source: Any, **kwargs: Any) -> xmlschema.XMLSchemaBase:
    """Return a compiled schema for source.

    Args:
        source: An already compiled xmlschema schema (returned unchanged),
            or a file path, URL or XSD text accepted by xmlschema.XMLSchema.
        **kwargs: Passed to xmlschema.XMLSchema.
    """
    if isinstance(source, xmlschema.XMLSchemaBase):
        return source
    if isinstance(source, Path):
        source = str(source)
    return xmlschema.XMLSchema(source, **kwargs)


# -----------------------------------------------------------------------------
# Global symbol tables
# -----------------------------------------------------------------------------


def _user_globals(table: Any, kind: type) -> list[Any]:
    return [
        component
        for key, component in table.items()
        if split_qname(key)[0] not in RESERVED_NAMESPACES and isinstance(component, kind)
    ]


def user_global_types(schema: xmlschema.XMLSchemaBase) -> list[XsdType]:
    """Global types outside the reserved namespaces, in declaration order."""
    return _user_globals(schema.maps.types, XsdType)


def user_global_elements(schema: xmlschema.XMLSchemaBase) -> list[XsdElement]:
    """Global elements outside the reserved namespaces, in declaration order."""
    return _user_globals(schema.maps.elements, XsdElement)


def user_global_attributes(schema: xmlschema.XMLSchemaBase) -> list[XsdAttribute]:
    """Global attributes outside the reserved namespaces, in declaration order."""
    return _user_globals(schema.maps.attributes, XsdAttribute)


# -----------------------------------------------------------------------------
# Types
# -----------------------------------------------------------------------------


def is_builtin(xsd_type: Any) -> bool:
    """True for XSD built-in types (xs:string, xs:anyType, ...)."""
    return xsd_type is not None and split_qname(xsd_type.name)[0] == XSD_NAMESPACE


def is_any_type(xsd_type: Any) -> bool:
    return xsd_type is not None and xsd_type.name == XSD_ANY_TYPE


def builtin_code(xsd_type: Any) -> str | None:
    """Local name of the nearest built-in type in the base type chain.

    Returns None when the chain has no built-in (lists, unions).
    """
    current = xsd_type
    while current is not None:
        if is_builtin(current):
            return local_name(current.name)
        current = getattr(current, "base_type", None)
    return None


def extends_user_type(xsd_type: Any) -> bool:
    """True if xsd_type is derived by extension from a non built-in type."""
    base = getattr(xsd_type, "base_type", None)
    return (
        getattr(xsd_type, "derivation", None) == "extension"
        and base is not None
        and not is_builtin(base)
    )


def own_content(xsd_type: XsdComplexType) -> list[Any] | None:
    """Particles declared by the type itself, None for simple content.

    For an extension of a user-defined complex type, xmlschema merges the
    base content into a wrapping sequence; the base part is left out here
    because it belongs to the base class.
    """
    content = xsd_type.content
    if not isinstance(content, XsdGroup):
        return None
    if extends_user_type(xsd_type) and xsd_type.base_type.is_complex():
        base_content = xsd_type.base_type.content
        if content is base_content:
            return []
        if any(particle is base_content for particle in content):
            return [particle for particle in content if particle is not base_content]
    return [content]


def own_attributes(xsd_type: XsdComplexType) -> list[XsdAttribute | XsdAnyAttribute]:
    """Attributes declared by the type itself, in declaration order."""
    inherited: Any = ()
    if extends_user_type(xsd_type) and xsd_type.base_type.is_complex():
        inherited = xsd_type.base_type.attributes
    return [
        attribute
        for key, attribute in xsd_type.attributes.items()
        if key not in inherited
    ]


def enumeration_of(xsd_type: Any) -> tuple[str, ...]:
    """Enumeration facet values of a simple type, as text."""
    values = getattr(xsd_type, "enumeration", None)
    if not values:
        return ()
    return tuple(str(value) for value in values)


# -----------------------------------------------------------------------------
# Particles
# -----------------------------------------------------------------------------


def particle_kind(particle: Any) -> ParticleKind:
    """Classify a content model node.

    Raises:
        UnmappedConstruct: If particle is not a content model node.
    """
    if isinstance(particle, XsdAnyElement):
        return ParticleKind.ANY
    if isinstance(particle, XsdElement):
        return ParticleKind.ELEMENT
    if isinstance(particle, XsdGroup):
        if len(particle) == 0:
            return ParticleKind.EMPTY
        return ParticleKind(particle.model)

    raise UnmappedConstruct(type(particle).__name__, describe(particle))


def occurs(particle: Any) -> tuple[int, int | None]:
    """Return (min, max) where max=None means unbounded."""
    return particle.min_occurs, particle.max_occurs


def mul_max(a: int | None, b: int | None) -> int | None:
    """Multiply max values (None means unbounded)."""
    if a is None or b is None:
        return None
    return a * b


def enclosing_scope(component: Any) -> Scope | None:
    """Namespace and local names of the named ancestors of component.

    Walks parent links up to the global declaration and collects the local
    name of every enclosing element and named type, outermost first:
    the element 'Nested' declared inside the anonymous type of the global
    element 'WithNested' gives Scope(ns, ('WithNested',)).

    Returns None when the chain does not end at a global element or type.
    """
    parts: list[str] = []
    node = component.parent
    while node is not None:
        named = isinstance(node, XsdElement) or (
            isinstance(node, XsdType) and node.name is not None
        )
        if named:
            parts.append(local_name(node.name))
        if node.parent is None:
            if not named:
                return None
            return Scope(split_qname(node.name)[0], tuple(reversed(parts)))
        node = node.parent
    return None


def describe(component: Any) -> str:
    """Short description of a component for error messages."""
    name = getattr(component, "name", None)
    if name:
        return name
    parent = getattr(component, "parent", None)
    while parent is not None:
        if getattr(parent, "name", None):
            return f"{type(component).__name__} in {parent.name}"
        parent = getattr(parent, "parent", None)
    return type(component).__name__

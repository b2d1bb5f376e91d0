# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""CodeModelBuilder - derive a CodeModel from a compiled XSD schema.

Walks the global types and elements of an xmlschema schema and produces
class and property declarations:

- one COMPLEX class per global complex type, with its attributes and
  content particles as properties and its extension base as base class;
- one SIMPLE value-type class per global simple type;
- one class per global element, carrying the root element name;
- nested classes for inline anonymous types, named after their nesting path.

Unsupported constructs (xs:all, xs:any, wildcard attributes, list and union
types, untyped elements) abort the build with an UnmappedConstruct error:
there is no partial result.

A builder instance is not meant to run concurrent build() calls; separate
instances share nothing and can run in separate threads.

Example:
    >>> builder = CodeModelBuilder('person.xsd')
    >>> builder.map_namespace('http://tempuri.org/SimpleSchema', 'Gen')
    >>> model = builder.build()
    >>> model.get('Gen.Person').get_property('Address').type.name
    'Gen.Address'
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from xmlschema.validators import XsdAnyAttribute

from .builtin_types import BuiltinTypeMapper
from .code_model import ClassKind, ClassModel, CodeModel, PropertyModel, TypeKind, TypeRef
from .exceptions import DuplicateTypeName, InvalidSchemaShape, UnmappedConstruct
from .namespaces import NamespaceMapper
from .resolver import TypeNameResolver, identifier
from .schema_graph import (
    ParticleKind,
    QName,
    Scope,
    describe,
    enumeration_of,
    extends_user_type,
    is_any_type,
    is_builtin,
    load_schema,
    mul_max,
    occurs,
    own_attributes,
    own_content,
    particle_kind,
    qname_of,
    split_qname,
    user_global_attributes,
    user_global_elements,
    user_global_types,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExistingType:
    """A hand-written output type standing in for a schema type.

    Attributes:
        name: Fully qualified output name of the existing type.
        type_name: Schema-qualified name of the schema type it implements.
    """

    name: str
    type_name: QName


class CodeModelBuilder:
    """Build a CodeModel from an XSD schema.

    Args:
        schema: Compiled xmlschema schema, or a path, URL or XSD text.
        namespaces: Initial XML namespace -> output namespace mappings.
    """

    def __init__(
        self,
        schema: Any,
        namespaces: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
    ):
        self.schema = load_schema(schema)
        self.mapper = NamespaceMapper(namespaces)
        self.builtins = BuiltinTypeMapper()
        self.existing: dict[str, ExistingType] = {}
        self.resolver = TypeNameResolver(self.mapper, self.existing, self.builtins)

        # Per-build state
        self._type_classes: dict[str, ClassModel] = {}
        self._declared: dict[str, str] = {}

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def map_namespace(self, xml_namespace: str, output_namespace: str) -> None:
        """Map an XML namespace to an output namespace (last call wins)."""
        self.mapper.register(xml_namespace, output_namespace)

    def add_existing_type(self, descriptor: Any) -> ExistingType | None:
        """Register an existing output type for a schema type.

        Schema types with an existing type are not generated, and references
        to them use the existing type's name.

        Args:
            descriptor: An ExistingType, or a class with an ``__xml_type__``
                attribute holding its schema type name as a QName, a
                (namespace, name) tuple or Clark text. The output name of a
                class is its module and qualified name.

        Returns:
            The registered ExistingType, or None if descriptor carries no
            XML type name.
        """
        if isinstance(descriptor, ExistingType):
            existing = descriptor
        else:
            xml_type = getattr(descriptor, "__xml_type__", None)
            if xml_type is None:
                return None
            type_name = QName.from_text(xml_type) if isinstance(xml_type, str) else QName(*xml_type)
            existing = ExistingType(f"{descriptor.__module__}.{descriptor.__qualname__}", type_name)
        self.existing[existing.type_name.text] = existing
        return existing

    def resolve(self, entity: Any) -> str:
        """Return the output type name of a schema entity."""
        return self.resolver.resolve(entity)

    # -------------------------------------------------------------------------
    # Build
    # -------------------------------------------------------------------------

    def build(self) -> CodeModel:
        """Generate the code model of the whole schema.

        Raises:
            UnmappedConstruct: The schema uses a construct that cannot be mapped.
            DuplicateTypeName: Two entities resolve to the same class name.
        """
        self._type_classes = {}
        self._declared = {}

        types = user_global_types(self.schema)
        elements = user_global_elements(self.schema)
        partition = self._partition(types, elements, user_global_attributes(self.schema))
        merged = self._merged_roots(elements)

        model = CodeModel()
        for namespace, (ns_types, ns_elements) in partition.items():
            classes: list[ClassModel] = []
            for xsd_type in ns_types:
                if xsd_type.name in self.existing:
                    continue
                cls = self._type_class(xsd_type)
                root = merged.get(xsd_type.name)
                if root is not None:
                    cls = replace(cls, root=qname_of(root))
                classes.append(self._declare(cls, xsd_type))
            for element in ns_elements:
                if any(root is element for root in merged.values()):
                    continue
                classes.append(self._declare(self._element_class(element), element))
            model.namespaces[namespace] = tuple(classes)
        return model

    def _partition(
        self, types: list[Any], elements: list[Any], attributes: list[Any]
    ) -> dict[str, tuple[list[Any], list[Any]]]:
        """Group global types and elements by output namespace."""
        partition: dict[str, tuple[list[Any], list[Any]]] = {}

        def bucket(component: Any) -> tuple[list[Any], list[Any]]:
            namespace = self.mapper.map(split_qname(component.name)[0])
            return partition.setdefault(namespace, ([], []))

        for xsd_type in types:
            bucket(xsd_type)[0].append(xsd_type)
        for element in elements:
            bucket(element)[1].append(element)
        for attribute in attributes:
            bucket(attribute)
        logger.debug("Output namespaces: %s", ", ".join(partition) or "(none)")
        return partition

    def _merged_roots(self, elements: list[Any]) -> dict[str, Any]:
        """Global elements named like their type, keyed by type name.

        Such an element does not get a class of its own: the type class
        carries its root element name.
        """
        merged: dict[str, Any] = {}
        for element in elements:
            element_type = element.type
            if (
                element_type is None
                or element_type.name is None
                or is_builtin(element_type)
                or element_type.name in self.existing
            ):
                continue
            if self.resolver.resolve(element) == self.resolver.resolve(element_type):
                merged[element_type.name] = element
        return merged

    def _declare(self, cls: ClassModel, entity: Any) -> ClassModel:
        """Register the full names of cls and its nested classes."""
        for declared in cls.iter_classes():
            full_name = declared.full_name
            if full_name in self._declared:
                raise DuplicateTypeName(full_name, describe(entity))
            self._declared[full_name] = describe(entity)
            logger.debug("Generated class %s", full_name)
        return cls

    # -------------------------------------------------------------------------
    # Classes
    # -------------------------------------------------------------------------

    def _type_class(self, xsd_type: Any) -> ClassModel:
        """Class of a global named type, generated once per build."""
        cls = self._type_classes.get(xsd_type.name)
        if cls is None:
            namespace, name = split_qname(xsd_type.name)
            scope = Scope(namespace, (name,))
            if xsd_type.is_complex():
                cls = self._complex_class(xsd_type, scope, type_name=qname_of(xsd_type))
            else:
                cls = self._simple_class(xsd_type, scope, type_name=qname_of(xsd_type))
            self._type_classes[xsd_type.name] = cls
        return cls

    def _element_class(self, element: Any) -> ClassModel:
        """Class of a global element, annotated with its root element name."""
        namespace, name = split_qname(element.name)
        root = qname_of(element)
        element_type = element.type
        if element_type is None or is_any_type(element_type):
            raise InvalidSchemaShape("untyped element", describe(element))

        if element_type.name is None:
            scope = Scope(namespace, (name,))
            if element_type.is_complex():
                return self._complex_class(element_type, scope, root=root)
            return self._simple_class(element_type, scope, root=root)

        output_namespace = self.mapper.map(namespace)
        class_name = identifier(name)
        existing = self.existing.get(element_type.name)
        if existing is not None:
            return ClassModel(
                name=class_name,
                namespace=output_namespace,
                base=existing.name,
                type_name=existing.type_name,
                root=root,
            )
        if is_builtin(element_type):
            return ClassModel(
                name=class_name,
                namespace=output_namespace,
                kind=ClassKind.SIMPLE,
                value_type=self._named_ref(element_type).name,
                type_name=qname_of(element_type),
                root=root,
            )
        # Same members as the type class, whose nested classes stay with it.
        return replace(
            self._type_class(element_type),
            name=class_name,
            namespace=output_namespace,
            path=(class_name,),
            nested=(),
            root=root,
        )

    def _complex_class(
        self,
        xsd_type: Any,
        scope: Scope,
        type_name: QName | None = None,
        root: QName | None = None,
    ) -> ClassModel:
        path = tuple(identifier(name) for name in scope.names)
        base: str | None = None
        if extends_user_type(xsd_type) and xsd_type.base_type.is_complex():
            base = self._named_ref(xsd_type.base_type).name

        nested: list[ClassModel] = []
        properties: list[PropertyModel] = []
        for attribute in own_attributes(xsd_type):
            prop = self._attribute_property(attribute, xsd_type)
            if prop is not None:
                properties.append(prop)

        content = own_content(xsd_type)
        if content is None:
            # Simple content: the text value, unless inherited from the base class.
            if base is None:
                properties.append(self._text_property(xsd_type.content))
        else:
            for particle in content:
                properties.extend(self._expand(particle, scope, nested))

        seen: set[str] = set()
        for prop in properties:
            if prop.name in seen:
                raise InvalidSchemaShape(
                    "duplicate property",
                    describe(xsd_type),
                    message=f"duplicate property '{prop.name}'",
                )
            seen.add(prop.name)

        return ClassModel(
            name=path[-1],
            namespace=self.mapper.map(scope.namespace),
            path=path,
            base=base,
            properties=tuple(properties),
            nested=tuple(nested),
            type_name=type_name,
            root=root,
        )

    def _simple_class(
        self,
        xsd_type: Any,
        scope: Scope,
        type_name: QName | None = None,
        root: QName | None = None,
    ) -> ClassModel:
        path = tuple(identifier(name) for name in scope.names)
        base_type = getattr(xsd_type, "base_type", None)
        base = None
        if base_type is not None and base_type.name is not None and not is_builtin(base_type):
            base = self._named_ref(base_type).name
        return ClassModel(
            name=path[-1],
            namespace=self.mapper.map(scope.namespace),
            path=path,
            kind=ClassKind.SIMPLE,
            base=base,
            type_name=type_name,
            root=root,
            value_type=self._scalar_name(xsd_type),
            enumeration=enumeration_of(xsd_type),
        )

    # -------------------------------------------------------------------------
    # Particle expansion
    # -------------------------------------------------------------------------

    def _expand(
        self,
        particle: Any,
        scope: Scope,
        nested: list[ClassModel],
        bounds: tuple[int, int | None] = (1, 1),
    ) -> list[PropertyModel]:
        """Expand a content particle into properties.

        Occurrence bounds of enclosing groups multiply into the bounds of
        the elements they contain; choice alternatives become optional.
        Inline anonymous types are generated into nested.
        """
        kind = particle_kind(particle)
        min_o, max_o = occurs(particle)
        bounds = (bounds[0] * min_o, mul_max(bounds[1], max_o))

        if kind is ParticleKind.EMPTY:
            return []
        if kind is ParticleKind.ELEMENT:
            return [self._element_property(particle, scope, nested, bounds)]
        if kind is ParticleKind.SEQUENCE or kind is ParticleKind.CHOICE:
            if kind is ParticleKind.CHOICE:
                bounds = (0, bounds[1])
            properties: list[PropertyModel] = []
            for item in particle:
                properties.extend(self._expand(item, scope, nested, bounds))
            return properties
        # xs:all and xs:any
        raise UnmappedConstruct(kind.value, describe(particle))

    def _element_property(
        self,
        element: Any,
        scope: Scope,
        nested: list[ClassModel],
        bounds: tuple[int, int | None],
    ) -> PropertyModel:
        xml_namespace, xml_name = split_qname(element.name)
        element_type = element.type

        if element.ref is not None:
            type_ref = TypeRef(self.resolver.resolve(element), TypeKind.CLASS)
        elif element_type is None or is_any_type(element_type):
            raise InvalidSchemaShape("untyped element", describe(element))
        elif element_type.name is not None:
            type_ref = self._named_ref(element_type)
        else:
            inner = scope.enter(xml_name)
            if element_type.is_complex():
                nested.append(self._complex_class(element_type, inner))
            else:
                nested.append(self._simple_class(element_type, inner))
            type_ref = TypeRef(self.resolver.resolve(element, scope), TypeKind.CLASS)

        return PropertyModel(
            name=identifier(xml_name),
            type=type_ref,
            min_occurs=bounds[0],
            max_occurs=bounds[1],
            xml_name=xml_name,
            xml_namespace=xml_namespace,
            default=getattr(element, "default", None),
            fixed=getattr(element, "fixed", None),
        )

    def _attribute_property(self, attribute: Any, owner: Any) -> PropertyModel | None:
        if isinstance(attribute, XsdAnyAttribute):
            raise UnmappedConstruct("anyAttribute", describe(owner))
        if attribute.use == "prohibited":
            return None

        xml_namespace, xml_name = split_qname(attribute.name)
        attribute_type = attribute.type
        if attribute_type.name is not None:
            type_ref = self._named_ref(attribute_type)
        else:
            type_ref = TypeRef(self._scalar_name(attribute_type), TypeKind.SCALAR)

        return PropertyModel(
            name=identifier(xml_name),
            type=type_ref,
            min_occurs=1 if attribute.use == "required" else 0,
            max_occurs=1,
            xml_name=xml_name,
            xml_namespace=xml_namespace,
            is_attribute=True,
            default=getattr(attribute, "default", None),
            fixed=getattr(attribute, "fixed", None),
        )

    def _text_property(self, simple_type: Any) -> PropertyModel:
        """Property holding the text value of a simple content type."""
        if simple_type.name is not None:
            type_ref = self._named_ref(simple_type)
        else:
            type_ref = TypeRef(self._scalar_name(simple_type), TypeKind.SCALAR)
        return PropertyModel(name="Value", type=type_ref, is_text=True)

    # -------------------------------------------------------------------------
    # Type references
    # -------------------------------------------------------------------------

    def _named_ref(self, xsd_type: Any) -> TypeRef:
        """Reference to a named type: scalar, existing type or generated class."""
        if is_any_type(xsd_type):
            raise InvalidSchemaShape("anyType", describe(xsd_type))
        name = self.resolver.resolve(xsd_type)
        if xsd_type.name in self.existing:
            return TypeRef(name, TypeKind.EXISTING)
        if is_builtin(xsd_type):
            return TypeRef(name, TypeKind.SCALAR)
        return TypeRef(name, TypeKind.CLASS)

    def _scalar_name(self, simple_type: Any) -> str:
        if not is_builtin(simple_type) and (simple_type.is_list() or simple_type.is_union()):
            raise UnmappedConstruct("list or union simple type", describe(simple_type))
        scalar = self.builtins.scalar_for(simple_type)
        if scalar is None:
            raise UnmappedConstruct("list or union simple type", describe(simple_type))
        return scalar.name

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Code model - the language-neutral output of the derivation.

A CodeModel maps each output namespace to the classes generated for it.
Classes and properties carry the XML names needed by a renderer to emit
wire-compatible serialization metadata: a property's xml_name is exactly the
schema local name, a class's type_name exactly the schema-qualified type
name.

The model is plain data. as_dict() gives a JSON-compatible structure and
to_tytx() persists it through genro_tytx, the same transport used to
compile builder schemas.

Example:
    >>> model = CodeModelBuilder(schema, namespaces={ns: 'Gen'}).build()
    >>> person = model.get('Gen.Person')
    >>> [p.name for p in person.properties]
    ['Address']
    >>> model.to_tytx(filename='person')   # writes person.xsdmodel.json
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from genro_toolbox import smartsplit

from .schema_graph import QName


class ClassKind(Enum):
    """COMPLEX classes hold properties, SIMPLE classes wrap a scalar value."""

    COMPLEX = "complex"
    SIMPLE = "simple"


class TypeKind(Enum):
    SCALAR = "scalar"
    CLASS = "class"
    EXISTING = "existing"


@dataclass(frozen=True)
class TypeRef:
    """Reference to the type of a property.

    Attributes:
        name: Scalar name for SCALAR refs, fully qualified output name
            for CLASS and EXISTING refs.
        kind: What name refers to.
    """

    name: str
    kind: TypeKind = TypeKind.CLASS

    @property
    def is_scalar(self) -> bool:
        return self.kind is TypeKind.SCALAR


@dataclass(frozen=True)
class PropertyModel:
    """A property of a generated class.

    Attributes:
        name: Identifier derived from the element or attribute local name.
        type: Type of the property value.
        min_occurs: Minimum occurrences.
        max_occurs: Maximum occurrences, None means unbounded.
        xml_name: Schema local name of the element or attribute.
        xml_namespace: Namespace of the element or attribute, '' if unqualified.
        is_attribute: True for XML attributes, False for child elements.
        is_text: True for the text value of a simple content type.
        default: Default value declared in the schema.
        fixed: Fixed value declared in the schema.
    """

    name: str
    type: TypeRef
    min_occurs: int = 1
    max_occurs: int | None = 1
    xml_name: str = ""
    xml_namespace: str = ""
    is_attribute: bool = False
    is_text: bool = False
    default: str | None = None
    fixed: str | None = None

    @property
    def is_collection(self) -> bool:
        return self.max_occurs is None or self.max_occurs > 1

    @property
    def is_optional(self) -> bool:
        return self.min_occurs == 0

    @property
    def cardinality(self) -> str:
        """Cardinality as '[min:max]', '*' for unbounded."""
        max_text = "*" if self.max_occurs is None else str(self.max_occurs)
        return f"[{self.min_occurs}:{max_text}]"


@dataclass(frozen=True)
class ClassModel:
    """A generated type.

    Attributes:
        name: Class identifier.
        namespace: Output namespace owning the class.
        path: Identifiers from the top-level class down to this one.
        kind: COMPLEX or SIMPLE.
        base: Full name of the base class (type extension), if any.
        properties: Properties in declaration order (attributes first).
        nested: Classes generated for anonymous types declared inside this one.
        type_name: Schema-qualified type name, None for anonymous types.
        root: Root element name, only for classes of global elements.
        value_type: Scalar name wrapped by SIMPLE classes.
        enumeration: Allowed values of SIMPLE classes, empty if unrestricted.
    """

    name: str
    namespace: str
    path: tuple[str, ...] = ()
    kind: ClassKind = ClassKind.COMPLEX
    base: str | None = None
    properties: tuple[PropertyModel, ...] = ()
    nested: tuple[ClassModel, ...] = ()
    type_name: QName | None = None
    root: QName | None = None
    value_type: str | None = None
    enumeration: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not self.path:
            object.__setattr__(self, "path", (self.name,))

    @property
    def full_name(self) -> str:
        return qualify(self.namespace, *self.path)

    @property
    def is_root(self) -> bool:
        return self.root is not None

    def get_property(self, name: str) -> PropertyModel | None:
        """Return the property with the given identifier."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def iter_classes(self) -> Iterator[ClassModel]:
        """Yield this class and all nested classes, depth first."""
        yield self
        for nested in self.nested:
            yield from nested.iter_classes()


def qualify(namespace: str, *parts: str) -> str:
    """Join an output namespace and identifiers: qualify('Gen', 'A', 'B') -> 'Gen.A.B'."""
    path = ".".join(parts)
    return f"{namespace}.{path}" if namespace else path


@dataclass
class CodeModel:
    """Generated classes grouped by output namespace.

    Namespaces keep the order in which the builder met them, classes the
    order of the schema declarations.
    """

    namespaces: dict[str, tuple[ClassModel, ...]] = field(default_factory=dict)

    def __iter__(self) -> Iterator[str]:
        return iter(self.namespaces)

    def __len__(self) -> int:
        return len(self.namespaces)

    def __contains__(self, full_name: object) -> bool:
        return isinstance(full_name, str) and self.get(full_name) is not None

    def __getitem__(self, namespace: str) -> tuple[ClassModel, ...]:
        return self.namespaces[namespace]

    def classes(self) -> Iterator[ClassModel]:
        """Yield every class of the model, nested classes included."""
        for classes in self.namespaces.values():
            for cls in classes:
                yield from cls.iter_classes()

    def get(self, full_name: str) -> ClassModel | None:
        """Return the class with the given full name.

        The name is matched against the longest output namespace prefix,
        then the remaining dotted path walks into nested classes.
        """
        for namespace in sorted(self.namespaces, key=len, reverse=True):
            if namespace:
                if not full_name.startswith(namespace + "."):
                    continue
                rest = full_name[len(namespace) + 1 :]
            else:
                rest = full_name
            found = self._walk(self.namespaces[namespace], [x for x in smartsplit(rest, ".") if x])
            if found is not None:
                return found
        return None

    def _walk(self, classes: tuple[ClassModel, ...], path: list[str]) -> ClassModel | None:
        if not path:
            return None
        head, tail = path[0], path[1:]
        for cls in classes:
            if cls.name == head:
                return cls if not tail else self._walk(cls.nested, tail)
        return None

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def as_dict(self) -> dict[str, Any]:
        """Return the model as JSON-compatible nested dicts and lists."""
        return {
            "namespaces": [
                {"name": namespace, "classes": [_class_to_dict(cls) for cls in classes]}
                for namespace, classes in self.namespaces.items()
            ]
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CodeModel:
        """Rebuild a model from as_dict() output."""
        return cls(
            {
                item["name"]: tuple(_class_from_dict(c) for c in item["classes"])
                for item in data["namespaces"]
            }
        )

    def to_tytx(
        self,
        transport: Literal["json", "msgpack"] = "json",
        filename: str | None = None,
    ) -> str | bytes | None:
        """Serialize the model with genro_tytx.

        Args:
            transport: 'json' (text) or 'msgpack' (binary).
            filename: If given, write to this file (the extension
                '.xsdmodel.json' or '.xsdmodel.mp' is added when missing)
                and return None.

        Returns:
            Serialized data, or None when written to a file.
        """
        from genro_tytx import to_tytx as tytx_encode

        # genro_tytx uses transport=None for JSON
        result = tytx_encode(self.as_dict(), transport=None if transport == "json" else transport)

        if filename:
            ext_map = {"json": ".xsdmodel.json", "msgpack": ".xsdmodel.mp"}
            ext = ext_map[transport]
            if not filename.endswith(ext):
                filename = filename + ext

            # Extension identifies the format
            if isinstance(result, str) and result.endswith("::JS"):
                result = result[:-4]

            mode = "wb" if transport == "msgpack" else "w"
            with open(filename, mode) as f:
                f.write(result)
            return None

        return result

    @classmethod
    def from_tytx(
        cls,
        data: str | bytes,
        transport: Literal["json", "msgpack"] = "json",
    ) -> CodeModel:
        """Deserialize a model produced by to_tytx()."""
        from genro_tytx import from_tytx as tytx_decode

        parsed = tytx_decode(data, transport=transport if transport != "json" else None)
        return cls.from_dict(parsed)


# -----------------------------------------------------------------------------
# dict conversion helpers
# -----------------------------------------------------------------------------


def _qname_to_list(qname: QName | None) -> list[str] | None:
    return None if qname is None else [qname.namespace, qname.name]


def _qname_from_list(value: list[str] | None) -> QName | None:
    return None if value is None else QName(value[0], value[1])


def _property_to_dict(prop: PropertyModel) -> dict[str, Any]:
    return {
        "name": prop.name,
        "type": prop.type.name,
        "type_kind": prop.type.kind.value,
        "min_occurs": prop.min_occurs,
        "max_occurs": prop.max_occurs,
        "xml_name": prop.xml_name,
        "xml_namespace": prop.xml_namespace,
        "is_attribute": prop.is_attribute,
        "is_text": prop.is_text,
        "default": prop.default,
        "fixed": prop.fixed,
    }


def _property_from_dict(data: dict[str, Any]) -> PropertyModel:
    return PropertyModel(
        name=data["name"],
        type=TypeRef(data["type"], TypeKind(data["type_kind"])),
        min_occurs=data["min_occurs"],
        max_occurs=data["max_occurs"],
        xml_name=data["xml_name"],
        xml_namespace=data["xml_namespace"],
        is_attribute=data["is_attribute"],
        is_text=data["is_text"],
        default=data.get("default"),
        fixed=data.get("fixed"),
    )


def _class_to_dict(cls: ClassModel) -> dict[str, Any]:
    return {
        "name": cls.name,
        "namespace": cls.namespace,
        "path": list(cls.path),
        "kind": cls.kind.value,
        "base": cls.base,
        "type_name": _qname_to_list(cls.type_name),
        "root": _qname_to_list(cls.root),
        "value_type": cls.value_type,
        "enumeration": list(cls.enumeration),
        "properties": [_property_to_dict(p) for p in cls.properties],
        "nested": [_class_to_dict(n) for n in cls.nested],
    }


def _class_from_dict(data: dict[str, Any]) -> ClassModel:
    return ClassModel(
        name=data["name"],
        namespace=data["namespace"],
        path=tuple(data["path"]),
        kind=ClassKind(data["kind"]),
        base=data.get("base"),
        properties=tuple(_property_from_dict(p) for p in data["properties"]),
        nested=tuple(_class_from_dict(n) for n in data["nested"]),
        type_name=_qname_from_list(data.get("type_name")),
        root=_qname_from_list(data.get("root")),
        value_type=data.get("value_type"),
        enumeration=tuple(data.get("enumeration") or ()),
    )

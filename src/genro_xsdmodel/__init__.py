# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Derive a language-neutral type model from XML Schema (XSD) files.

The engine walks a schema compiled by xmlschema and produces classes and
properties carrying the XML names needed to marshal values to and from
documents conforming to the schema.

Components:
    - **NamespaceMapper**: XML namespace -> output namespace
    - **TypeNameResolver**: canonical output names for types and elements
    - **BuiltinTypeMapper**: XSD built-in types -> scalar types
    - **CodeModelBuilder**: schema -> CodeModel

Example:
    >>> from genro_xsdmodel import CodeModelBuilder
    >>>
    >>> builder = CodeModelBuilder('invoice.xsd')
    >>> builder.map_namespace('urn:example:invoice', 'Invoice')
    >>> model = builder.build()
    >>> for cls in model.classes():
    ...     print(cls.full_name)
    >>> model.to_tytx(filename='invoice')
"""

from genro_xsdmodel.builder import CodeModelBuilder, ExistingType
from genro_xsdmodel.builtin_types import BUILTIN_MAP, BuiltinTypeMapper, ScalarType
from genro_xsdmodel.code_model import (
    ClassKind,
    ClassModel,
    CodeModel,
    PropertyModel,
    TypeKind,
    TypeRef,
)
from genro_xsdmodel.exceptions import (
    DuplicateTypeName,
    InvalidSchemaShape,
    UnmappedConstruct,
    XsdModelError,
)
from genro_xsdmodel.namespaces import NamespaceMapper
from genro_xsdmodel.resolver import TypeNameResolver
from genro_xsdmodel.schema_graph import QName, load_schema

__version__ = "0.1.0"

__all__ = [
    "BUILTIN_MAP",
    "BuiltinTypeMapper",
    "ClassKind",
    "ClassModel",
    "CodeModel",
    "CodeModelBuilder",
    "DuplicateTypeName",
    "ExistingType",
    "InvalidSchemaShape",
    "NamespaceMapper",
    "PropertyModel",
    "QName",
    "ScalarType",
    "TypeKind",
    "TypeNameResolver",
    "TypeRef",
    "UnmappedConstruct",
    "XsdModelError",
    "load_schema",
]

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Mapping of XSD built-in types to target scalar types.

The table is fixed. Type codes missing from it are not errors: they name
user-defined types, which the TypeNameResolver handles.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from .schema_graph import QName, builtin_code

if TYPE_CHECKING:
    from xmlschema.validators import XsdType


@dataclass(frozen=True)
class ScalarType:
    """Target scalar type descriptor.

    Attributes:
        name: Language-neutral scalar name ('string', 'int32', 'decimal', ...).
        python_type: Python type holding values of this scalar.
        width: Bit width for fixed-size numbers, None otherwise.
        signed: Signedness for integers, None for non-integer scalars.
    """

    name: str
    python_type: type
    width: int | None = None
    signed: bool | None = None


STRING = ScalarType("string", str)
URI = ScalarType("uri", str)
BOOLEAN = ScalarType("boolean", bool)
INT8 = ScalarType("int8", int, 8, True)
INT16 = ScalarType("int16", int, 16, True)
INT32 = ScalarType("int32", int, 32, True)
INT64 = ScalarType("int64", int, 64, True)
UINT8 = ScalarType("uint8", int, 8, False)
UINT16 = ScalarType("uint16", int, 16, False)
UINT32 = ScalarType("uint32", int, 32, False)
UINT64 = ScalarType("uint64", int, 64, False)
INTEGER = ScalarType("integer", int, None, True)
UNSIGNED_INTEGER = ScalarType("unsigned_integer", int, None, False)
FLOAT = ScalarType("float", float, 32)
DOUBLE = ScalarType("double", float, 64)
DECIMAL = ScalarType("decimal", Decimal)
DATE = ScalarType("date", datetime.date)
DATETIME = ScalarType("datetime", datetime.datetime)
TIME = ScalarType("time", datetime.time)
DURATION = ScalarType("duration", datetime.timedelta)
QUALIFIED_NAME = ScalarType("qname", QName)
BINARY = ScalarType("bytes", bytes)

BUILTIN_MAP: dict[str, ScalarType] = {
    "anySimpleType": STRING,
    "anyAtomicType": STRING,
    "string": STRING,
    "normalizedString": STRING,
    "token": STRING,
    "language": STRING,
    "Name": STRING,
    "NCName": STRING,
    "NMTOKEN": STRING,
    "NMTOKENS": STRING,
    "ID": STRING,
    "IDREF": STRING,
    "IDREFS": STRING,
    "ENTITY": STRING,
    "ENTITIES": STRING,
    "NOTATION": STRING,
    "gYear": STRING,
    "gYearMonth": STRING,
    "gMonth": STRING,
    "gMonthDay": STRING,
    "gDay": STRING,
    "anyURI": URI,
    "boolean": BOOLEAN,
    "byte": INT8,
    "short": INT16,
    "int": INT32,
    "long": INT64,
    "unsignedByte": UINT8,
    "unsignedShort": UINT16,
    "unsignedInt": UINT32,
    "unsignedLong": UINT64,
    "integer": INTEGER,
    "negativeInteger": INTEGER,
    "nonPositiveInteger": INTEGER,
    "nonNegativeInteger": UNSIGNED_INTEGER,
    "positiveInteger": UNSIGNED_INTEGER,
    "float": FLOAT,
    "double": DOUBLE,
    "decimal": DECIMAL,
    "date": DATE,
    "dateTime": DATETIME,
    "dateTimeStamp": DATETIME,
    "time": TIME,
    "duration": DURATION,
    "dayTimeDuration": DURATION,
    "yearMonthDuration": DURATION,
    "QName": QUALIFIED_NAME,
    "base64Binary": BINARY,
    "hexBinary": BINARY,
}


class BuiltinTypeMapper:
    """Maps XSD built-in type codes to ScalarType descriptors."""

    def __init__(self, table: dict[str, ScalarType] | None = None):
        self._table = dict(BUILTIN_MAP if table is None else table)
        self._by_name = {scalar.name: scalar for scalar in self._table.values()}

    def map(self, type_code: str) -> ScalarType | None:
        """Return the scalar for an XSD built-in local name, None if user-defined."""
        return self._table.get(type_code)

    def is_builtin(self, type_code: str) -> bool:
        return type_code in self._table

    def by_name(self, name: str) -> ScalarType | None:
        """Return the scalar with the given scalar name ('int32', 'string', ...)."""
        return self._by_name.get(name)

    def scalar_for(self, xsd_type: XsdType) -> ScalarType | None:
        """Return the scalar of a simple type's nearest built-in ancestor.

        Returns None for types without a built-in ancestor (lists, unions,
        complex types).
        """
        code = builtin_code(xsd_type)
        return self.map(code) if code is not None else None

    def __contains__(self, type_code: Any) -> bool:
        return type_code in self._table

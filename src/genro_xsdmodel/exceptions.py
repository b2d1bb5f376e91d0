# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Errors raised while deriving a code model from a schema.

Every error is fatal for the current build: the derivation is deterministic,
so retrying without changing the schema or the namespace mappings is useless.
"""

from __future__ import annotations


class XsdModelError(Exception):
    """Base class for code model derivation errors.

    Attributes:
        construct: Kind of schema construct that caused the failure
            (e.g. 'all', 'any', 'untyped element').
        entity: Qualified name (Clark notation) or description of the
            offending schema entity.
    """

    def __init__(self, construct: str, entity: str | None = None, message: str | None = None):
        self.construct = construct
        self.entity = entity
        if message is None:
            message = f"unsupported schema construct '{construct}'"
        if entity:
            message = f"{message} (at {entity})"
        super().__init__(message)


class UnmappedConstruct(XsdModelError):
    """A schema construct the derivation engine does not map to code.

    Raised for xs:all and xs:any particles, wildcard attributes, list and
    union simple types and entities that cannot be given a type name.
    """


class InvalidSchemaShape(UnmappedConstruct):
    """A degenerate schema shape, e.g. an element without any type."""


class DuplicateTypeName(XsdModelError):
    """Two schema entities resolve to the same output class name."""

    def __init__(self, full_name: str, entity: str | None = None):
        self.full_name = full_name
        super().__init__(
            "duplicate type name", entity, message=f"type name '{full_name}' is already defined"
        )

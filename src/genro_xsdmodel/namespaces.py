# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""NamespaceMapper - XML namespace to output namespace mapping."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping


class NamespaceMapper:
    """Maps XML namespaces to output namespaces.

    Lookups never fail: an XML namespace without an explicit mapping is used
    verbatim as the output namespace.

    Example:
        >>> mapper = NamespaceMapper({'http://tempuri.org/Simple': 'Gen'})
        >>> mapper.map('http://tempuri.org/Simple')
        'Gen'
        >>> mapper.map('urn:other')
        'urn:other'
    """

    def __init__(self, mappings: Mapping[str, str] | Iterable[tuple[str, str]] | None = None):
        self._mappings: dict[str, str] = {}
        if mappings:
            items = mappings.items() if isinstance(mappings, Mapping) else mappings
            for xml_namespace, output_namespace in items:
                self.register(xml_namespace, output_namespace)

    def register(self, xml_namespace: str, output_namespace: str) -> None:
        """Map xml_namespace to output_namespace. Last registration wins."""
        self._mappings[xml_namespace or ""] = output_namespace

    def map(self, xml_namespace: str | None) -> str:
        """Return the output namespace for xml_namespace."""
        xml_namespace = xml_namespace or ""
        return self._mappings.get(xml_namespace, xml_namespace)

    def items(self) -> Iterator[tuple[str, str]]:
        return iter(self._mappings.items())

    def __contains__(self, xml_namespace: object) -> bool:
        return xml_namespace in self._mappings

    def __len__(self) -> int:
        return len(self._mappings)

    def __repr__(self) -> str:
        return f"NamespaceMapper({self._mappings!r})"

# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for NamespaceMapper."""

from genro_xsdmodel import NamespaceMapper


class TestNamespaceMapper:
    """Tests for XML namespace to output namespace mapping."""

    def test_mapped_namespace(self):
        """A registered namespace maps to its output namespace."""
        mapper = NamespaceMapper()
        mapper.register("http://tempuri.org/SimpleSchema", "Gen")

        assert mapper.map("http://tempuri.org/SimpleSchema") == "Gen"

    def test_unmapped_namespace_is_identity(self):
        """Unmapped namespaces are used verbatim."""
        mapper = NamespaceMapper({"urn:a": "A"})

        assert mapper.map("urn:other") == "urn:other"

    def test_empty_namespace(self):
        """The empty namespace maps to '' unless registered."""
        mapper = NamespaceMapper()
        assert mapper.map("") == ""
        assert mapper.map(None) == ""

        mapper.register("", "Default")
        assert mapper.map(None) == "Default"

    def test_last_registration_wins(self):
        """Registering a namespace twice keeps the last mapping."""
        mapper = NamespaceMapper()
        mapper.register("urn:a", "First")
        mapper.register("urn:a", "Second")

        assert mapper.map("urn:a") == "Second"
        assert len(mapper) == 1

    def test_init_from_pairs(self):
        """Mappings can be given as (xml namespace, output namespace) pairs."""
        mapper = NamespaceMapper([("urn:a", "A"), ("urn:b", "B")])

        assert list(mapper.items()) == [("urn:a", "A"), ("urn:b", "B")]
        assert "urn:a" in mapper
        assert "urn:c" not in mapper

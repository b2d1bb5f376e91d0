# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Tests for the code model and its tytx serialization."""

from pathlib import Path

import pytest

from genro_xsdmodel import (
    ClassKind,
    ClassModel,
    CodeModel,
    CodeModelBuilder,
    PropertyModel,
    QName,
    TypeKind,
    TypeRef,
)
from genro_xsdmodel.code_model import qualify

SIMPLE_NS = "http://tempuri.org/SimpleSchema"


@pytest.fixture
def model(features_schema):
    return CodeModelBuilder(features_schema, namespaces={"urn:test:features": "F"}).build()


# =============================================================================
# Model objects
# =============================================================================


class TestModelObjects:
    """Tests for classes, properties and type references."""

    def test_qualify(self):
        assert qualify("Gen", "A", "B") == "Gen.A.B"
        assert qualify("", "A") == "A"

    def test_default_path(self):
        """A class without explicit path is a top-level class."""
        cls = ClassModel(name="Person", namespace="Gen")

        assert cls.path == ("Person",)
        assert cls.full_name == "Gen.Person"
        assert cls.kind is ClassKind.COMPLEX
        assert not cls.is_root

    def test_cardinality(self):
        prop = PropertyModel(
            name="Tag", type=TypeRef("string", TypeKind.SCALAR), min_occurs=0, max_occurs=None
        )

        assert prop.cardinality == "[0:*]"
        assert prop.is_optional
        assert prop.is_collection
        assert prop.type.is_scalar

    def test_required_single(self):
        prop = PropertyModel(name="Address", type=TypeRef("Gen.Address"))

        assert prop.cardinality == "[1:1]"
        assert not prop.is_optional
        assert not prop.is_collection
        assert not prop.type.is_scalar

    def test_get_property_missing(self):
        assert ClassModel(name="Empty", namespace="Gen").get_property("Nothing") is None

    def test_iter_classes(self, model):
        """iter_classes yields a class and its nested classes."""
        canvas = model.get("F.Canvas")

        assert [cls.full_name for cls in canvas.iter_classes()] == ["F.Canvas", "F.Canvas.Layer"]


# =============================================================================
# CodeModel lookup
# =============================================================================


class TestCodeModelLookup:
    """Tests for looking up classes by full name."""

    def test_get_top_level(self, model):
        assert model.get("F.Shape").name == "Shape"

    def test_get_nested(self, model):
        assert model.get("F.Canvas.Layer").path == ("Canvas", "Layer")

    def test_get_missing(self, model):
        assert model.get("F.Nothing") is None
        assert model.get("Other.Shape") is None
        assert model.get("F.Shape.Nothing") is None

    def test_contains(self, model):
        assert "F.Drawing" in model
        assert "F.Nothing" not in model
        assert 42 not in model

    def test_dotted_namespace(self):
        """The longest namespace prefix wins."""
        model = CodeModel(
            {
                "Gen": (ClassModel(name="Person", namespace="Gen"),),
                "Gen.Sub": (ClassModel(name="Item", namespace="Gen.Sub"),),
            }
        )

        assert model.get("Gen.Sub.Item").namespace == "Gen.Sub"
        assert model.get("Gen.Person").namespace == "Gen"

    def test_classes(self, model):
        """classes() yields every class, nested ones included."""
        names = [cls.full_name for cls in model.classes()]

        assert "F.Canvas.Layer" in names
        assert len(names) == len(set(names))


# =============================================================================
# Serialization
# =============================================================================


class TestCodeModelSerialization:
    """Tests for as_dict and tytx persistence."""

    def test_as_dict(self, model):
        data = model.as_dict()

        assert [ns["name"] for ns in data["namespaces"]] == ["F"]
        drawing = next(c for c in data["namespaces"][0]["classes"] if c["name"] == "Drawing")
        assert drawing["root"] == ["urn:test:features", "Drawing"]
        circle = next(p for p in drawing["properties"] if p["name"] == "Circle")
        assert circle["max_occurs"] is None
        assert circle["type_kind"] == "class"

    def test_dict_round_trip(self, model):
        assert CodeModel.from_dict(model.as_dict()) == model

    def test_tytx_json(self, model):
        """The model survives a tytx JSON round trip."""
        data = model.to_tytx()

        assert isinstance(data, str)
        restored = CodeModel.from_tytx(data)
        assert restored == model
        assert restored.get("F.Color").enumeration == ("red", "green")

    def test_tytx_msgpack(self, model):
        data = model.to_tytx(transport="msgpack")

        assert isinstance(data, bytes)
        assert CodeModel.from_tytx(data, transport="msgpack") == model

    def test_tytx_json_file(self, simple_schema, tmp_path):
        """Writing to a file adds the extension and drops the transport suffix."""
        model = CodeModelBuilder(simple_schema, namespaces={SIMPLE_NS: "Gen"}).build()

        assert model.to_tytx(filename=str(tmp_path / "simple")) is None

        path = tmp_path / "simple.xsdmodel.json"
        content = path.read_text()
        assert not content.endswith("::JS")
        restored = CodeModel.from_tytx(content)
        assert restored.get("Gen.AddressElement").root == QName(SIMPLE_NS, "AddressElement")

    def test_tytx_msgpack_file(self, model, tmp_path):
        model.to_tytx(transport="msgpack", filename=str(tmp_path / "features.xsdmodel.mp"))

        data = Path(tmp_path / "features.xsdmodel.mp").read_bytes()
        assert CodeModel.from_tytx(data, transport="msgpack") == model

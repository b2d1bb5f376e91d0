# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pytest configuration and fixtures."""

import pytest
import xmlschema

SIMPLE_XSD = """\
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns="http://tempuri.org/SimpleSchema"
           targetNamespace="http://tempuri.org/SimpleSchema">
    <xs:complexType name="Person">
        <xs:sequence>
            <xs:element name="Address" type="Address" minOccurs="0" maxOccurs="1"/>
        </xs:sequence>
    </xs:complexType>
    <xs:complexType name="Address">
        <xs:sequence>
            <xs:element name="Street" type="xs:string" minOccurs="0" maxOccurs="1"/>
            <xs:element name="City" type="xs:string" minOccurs="0" maxOccurs="1"/>
        </xs:sequence>
    </xs:complexType>
    <xs:complexType name="WithAddress">
        <xs:sequence>
            <xs:element ref="AddressElement"/>
        </xs:sequence>
    </xs:complexType>
    <xs:element name="AddressElement" type="Address"/>
    <xs:element name="WithNested">
        <xs:complexType>
            <xs:sequence>
                <xs:element name="Nested">
                    <xs:complexType>
                        <xs:sequence>
                            <xs:element name="Element1" type="xs:string"/>
                        </xs:sequence>
                    </xs:complexType>
                </xs:element>
            </xs:sequence>
        </xs:complexType>
    </xs:element>
</xs:schema>
"""

FEATURES_XSD = """\
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"
           xmlns:t="urn:test:features"
           targetNamespace="urn:test:features"
           elementFormDefault="qualified">
    <xs:simpleType name="Color">
        <xs:restriction base="xs:string">
            <xs:enumeration value="red"/>
            <xs:enumeration value="green"/>
        </xs:restriction>
    </xs:simpleType>
    <xs:simpleType name="Percent">
        <xs:restriction base="xs:int">
            <xs:minInclusive value="0"/>
            <xs:maxInclusive value="100"/>
        </xs:restriction>
    </xs:simpleType>
    <xs:simpleType name="Ratio">
        <xs:restriction base="t:Percent">
            <xs:maxInclusive value="50"/>
        </xs:restriction>
    </xs:simpleType>
    <xs:complexType name="Shape">
        <xs:sequence>
            <xs:element name="Label" type="xs:string"/>
            <xs:element name="Tag" type="xs:string" minOccurs="0" maxOccurs="unbounded"/>
        </xs:sequence>
        <xs:attribute name="id" type="xs:ID" use="required"/>
        <xs:attribute name="color" type="t:Color"/>
    </xs:complexType>
    <xs:complexType name="Circle">
        <xs:complexContent>
            <xs:extension base="t:Shape">
                <xs:sequence>
                    <xs:element name="Radius" type="xs:double"/>
                </xs:sequence>
                <xs:attribute name="filled" type="xs:boolean" default="false"/>
            </xs:extension>
        </xs:complexContent>
    </xs:complexType>
    <xs:complexType name="Measure">
        <xs:simpleContent>
            <xs:extension base="xs:decimal">
                <xs:attribute name="unit" type="xs:string"/>
            </xs:extension>
        </xs:simpleContent>
    </xs:complexType>
    <xs:complexType name="Drawing">
        <xs:sequence>
            <xs:choice maxOccurs="unbounded">
                <xs:element name="Circle" type="t:Circle"/>
                <xs:element name="Shape" type="t:Shape"/>
            </xs:choice>
            <xs:sequence minOccurs="0" maxOccurs="3">
                <xs:element name="Note" type="xs:string" maxOccurs="2"/>
            </xs:sequence>
            <xs:element name="Width" type="t:Measure"/>
            <xs:element name="Opacity" type="t:Percent" minOccurs="0"/>
        </xs:sequence>
    </xs:complexType>
    <xs:element name="Drawing" type="t:Drawing"/>
    <xs:element name="Comment" type="xs:string"/>
    <xs:element name="Canvas">
        <xs:complexType>
            <xs:sequence>
                <xs:element name="Layer" maxOccurs="unbounded">
                    <xs:complexType>
                        <xs:sequence>
                            <xs:element name="Item" type="t:Shape" maxOccurs="unbounded"/>
                        </xs:sequence>
                        <xs:attribute name="name" type="xs:string"/>
                    </xs:complexType>
                </xs:element>
            </xs:sequence>
        </xs:complexType>
    </xs:element>
</xs:schema>
"""


def _wrap_xsd(body: str, target_namespace: str | None) -> str:
    if target_namespace is None:
        return f'<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema">{body}</xs:schema>'
    return (
        '<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema"'
        f' xmlns:t="{target_namespace}" targetNamespace="{target_namespace}">'
        f"{body}</xs:schema>"
    )


@pytest.fixture
def simple_schema():
    """The Person/Address schema compiled by xmlschema."""
    return xmlschema.XMLSchema(SIMPLE_XSD)


@pytest.fixture
def features_schema():
    """Schema exercising choices, attributes, extension and simple types."""
    return xmlschema.XMLSchema(FEATURES_XSD)


@pytest.fixture
def simple_xsd_file(tmp_path):
    """Write the simple schema to a file."""
    xsd_path = tmp_path / "simple.xsd"
    xsd_path.write_text(SIMPLE_XSD)
    return xsd_path


@pytest.fixture
def compile_xsd():
    """Factory compiling schema components wrapped in an xs:schema document.

    Components may use the 't' prefix for the target namespace
    ('urn:test' unless given).
    """

    def _compile(body: str, target_namespace: str | None = "urn:test") -> xmlschema.XMLSchema:
        return xmlschema.XMLSchema(_wrap_xsd(body, target_namespace))

    return _compile

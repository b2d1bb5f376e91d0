# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface: derive a code model from an XSD file.

Usage:
    genro-xsdmodel schema.xsd -o out/schema --map http://tempuri.org/S=Gen
    genro-xsdmodel schema.xsd -o out/schema --msgpack -v

Several mappings can be given with repeated --map options or as a comma
separated list. The output file gets the '.xsdmodel.json' extension, or
'.xsdmodel.mp' with --msgpack.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from genro_toolbox import smartsplit

from .builder import CodeModelBuilder
from .exceptions import XsdModelError


def parse_mappings(values: list[str] | None) -> list[tuple[str, str]]:
    """Parse 'XMLNS=NS' items into (xml namespace, output namespace) pairs.

    The split happens at the last '=', so namespace URIs may contain '='.
    """
    pairs: list[tuple[str, str]] = []
    for value in values or ():
        for item in smartsplit(value, ","):
            item = item.strip()
            if not item:
                continue
            xml_namespace, sep, output_namespace = item.rpartition("=")
            if not sep:
                raise ValueError(f"invalid namespace mapping '{item}', expected XMLNS=NS")
            pairs.append((xml_namespace.strip(), output_namespace.strip()))
    return pairs


def main(argv: list[str] | None = None) -> int:
    """Command-line interface for the code model builder."""
    parser = argparse.ArgumentParser(
        description="Derive a language-neutral code model from an XSD schema",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "input",
        type=Path,
        help="Input XSD file path",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        required=True,
        help="Output model file (.xsdmodel.json or .xsdmodel.mp)",
    )
    parser.add_argument(
        "--map",
        action="append",
        metavar="XMLNS=NS",
        help="Map an XML namespace to an output namespace (repeatable)",
    )
    parser.add_argument(
        "--msgpack",
        action="store_true",
        help="Write MessagePack instead of JSON",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Print diagnostic info",
    )

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if not args.input.exists():
        print(f"ERROR: Input file not found: {args.input}")
        return 1

    try:
        mappings = parse_mappings(args.map)
    except ValueError as e:
        parser.error(str(e))

    print(f"Building code model from {args.input}...")
    try:
        builder = CodeModelBuilder(args.input, namespaces=mappings)
        model = builder.build()
    except XsdModelError as e:
        print(f"ERROR: {e}")
        return 1

    n_classes = sum(1 for _ in model.classes())
    print(f"  Generated {n_classes} classes in {len(model)} namespaces")
    if args.verbose:
        for cls in model.classes():
            print(f"    {cls.full_name}")

    transport = "msgpack" if args.msgpack else "json"
    ext = ".xsdmodel.mp" if args.msgpack else ".xsdmodel.json"
    args.output.parent.mkdir(parents=True, exist_ok=True)
    model.to_tytx(transport=transport, filename=str(args.output))

    output = str(args.output)
    if not output.endswith(ext):
        output += ext
    print(f"Saved model to {output}")

    print("\nDone!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

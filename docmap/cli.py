# ==============================================
# CLI - Command Line Entry Point
# ==============================================
#
# PURPOSE:
#   Inspect how a class maps to documents without writing code.
#
# COMMANDS:
# ---------
# 1. Describe a class:
#    python -m docmap.cli describe myapp.models:Person
#
# 2. Describe a generic class bound to arguments:
#    python -m docmap.cli describe myapp.models:Pair --args str int
#
# 3. More logging:
#    python -m docmap.cli -v describe myapp.models:Person
#
# OUTPUT:
# -------
#   Person  (collection: people)
#   fields:
#     full_name: str -> "name"
#     id: int -> "_id"
#   methods:
#     greet(other: Person) -> str
#
# Names without a module ("str", "int") are looked up in builtins.
# Exit status is 1 when the class cannot be mapped.
#
# ==============================================

import argparse
import builtins
import importlib
import logging
import sys
from typing import Any, List, Optional

from docmap.errors import TypeMappingError
from docmap.introspection.generics import type_name
from docmap.mapper import TypeMapper
from docmap.model.type_model import TypeModel


def import_object(reference: str) -> Any:
    """
    Resolve "package.module:Name" (or a builtin name) to an object.

    Raises:
        ValueError: If the module or name does not exist
    """
    if ":" not in reference:
        if hasattr(builtins, reference):
            return getattr(builtins, reference)
        raise ValueError(f"Unknown type {reference!r}; use module:Name")

    module_name, _, attribute = reference.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import {module_name!r}: {e}") from e

    obj = module
    for part in attribute.split("."):
        if not hasattr(obj, part):
            raise ValueError(f"{module_name!r} has no attribute {attribute!r}")
        obj = getattr(obj, part)
    return obj


def describe(model: TypeModel) -> List[str]:
    """Render a model as the lines printed by the describe command."""
    lines = [f"{type_name(model.type)}  (collection: {model.get_collection_name() or '-'})"]

    if model.type_parameters:
        bound = ", ".join(
            f"{p.__name__}={type_name(model.resolve_generic_type(p.__name__))}"
            if model.resolve_generic_type(p.__name__) is not None else p.__name__
            for p in model.type_parameters
        )
        lines.append(f"type parameters: {bound}")

    lines.append("fields:")
    for field in model.get_fields():
        target = f'"{field.document_name}"' if field.included else "(transient)"
        lines.append(f"  {field.name}: {type_name(field.type)} -> {target}")

    lines.append("methods:")
    for name in sorted(model.methods):
        for method in model.get_methods(name):
            params = ", ".join(f"{p}: {type_name(tp)}" for p, tp in method.parameters)
            lines.append(f"  {name}({params}) -> {type_name(method.return_type)}")
    return lines


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docmap", description="Inspect document mappings of Python classes")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    describe_parser = subparsers.add_parser("describe", help="show the model of a class")
    describe_parser.add_argument("type", help="module:Class")
    describe_parser.add_argument("--args", nargs="+", default=[], metavar="TYPE",
                                 help="type arguments for a generic class")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        tp = import_object(args.type)
        type_arguments = [import_object(reference) for reference in args.args]
        mapper = TypeMapper()
        model = mapper.specialize(tp, type_arguments) if type_arguments else mapper.model_for(tp)
    except (ValueError, TypeMappingError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    for line in describe(model):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""IR type representations and the PowerShell type literal parser."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from lark import Lark, Transformer
from lark.exceptions import LarkError

from pwsh_lowering.src.common.constants import (
    INTEGER_TYPE_NAME,
    STRING_TYPE_NAME,
    UNKNOWN_TYPE_NAME,
)

# Type accelerators and their full .NET names, keyed in lower case
TYPE_ACCELERATORS = {
    "int": INTEGER_TYPE_NAME,
    "int32": INTEGER_TYPE_NAME,
    "system.int32": INTEGER_TYPE_NAME,
    "integer": INTEGER_TYPE_NAME,
    "long": "long",
    "int64": "long",
    "system.int64": "long",
    "string": STRING_TYPE_NAME,
    "str": STRING_TYPE_NAME,
    "system.string": STRING_TYPE_NAME,
    "bool": "boolean",
    "boolean": "boolean",
    "system.boolean": "boolean",
    "double": "double",
    "system.double": "double",
    "char": "char",
    "system.char": "char",
    "object": "object",
    "system.object": "object",
    "hashtable": "hashtable",
    "system.collections.hashtable": "hashtable",
    "scriptblock": "scriptblock",
    "system.management.automation.scriptblock": "scriptblock",
    "switch": "switch",
    "system.management.automation.switchparameter": "switch",
}


class IRType:
    """Base class for IR types."""

    @property
    def is_unknown(self) -> bool:
        return False


@dataclass(frozen=True)
class UnknownType(IRType):
    """Placeholder for a type that could not be determined."""

    @property
    def is_unknown(self) -> bool:
        return True

    def __str__(self) -> str:
        return UNKNOWN_TYPE_NAME


@dataclass(frozen=True)
class NamedType(IRType):
    """A plain named type (``integer``, ``System.IO.FileInfo``)."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ArrayType(IRType):
    """Array of an element type (``string[]``)."""

    element: IRType

    def __str__(self) -> str:
        return f"{self.element}[]"


@dataclass(frozen=True)
class GenericType(IRType):
    """Generic type instance (``List[string]``)."""

    name: str
    arguments: Tuple[IRType, ...]

    def __str__(self) -> str:
        joined = ",".join(str(argument) for argument in self.arguments)
        return f"{self.name}[{joined}]"


UNKNOWN_TYPE = UnknownType()


def named_type(name: str) -> NamedType:
    """Create a named type, normalising PowerShell type accelerators."""
    return NamedType(TYPE_ACCELERATORS.get(name.lower(), name))


def first_known(*types: Optional[IRType]) -> IRType:
    """Return the first known type, or the unknown type."""
    for candidate in types:
        if candidate is not None and not candidate.is_unknown:
            return candidate
    return UNKNOWN_TYPE


class TypeSyntaxError(ValueError):
    """Raised when a type literal cannot be parsed."""


_ARRAY_RANK = object()


class TypeLiteralTransformer(Transformer):
    """Transforms the type literal parse tree into IR types."""

    def qualified_name(self, items) -> str:
        return ".".join(str(item) for item in items)

    def generic_arguments(self, items) -> Tuple[IRType, ...]:
        return tuple(items)

    def array_rank(self, items) -> object:
        return _ARRAY_RANK

    def type_literal(self, items) -> IRType:
        name = items[0]
        result: IRType = named_type(name)
        for item in items[1:]:
            if item is _ARRAY_RANK:
                result = ArrayType(result)
            else:
                result = GenericType(name, item)
        return result


class TypeParser:
    """Parses PowerShell type literals into IR types."""

    def __init__(self, grammar_path: Optional[Path] = None):
        if grammar_path is None:
            grammar_path = (
                Path(__file__).resolve().parent.parent.parent
                / "grammar"
                / "type_literal.lark"
            )

        self.grammar_path = grammar_path
        self.parser = None
        self._load_grammar()

    def _load_grammar(self) -> None:
        """Load and compile the Lark grammar."""
        try:
            with open(self.grammar_path, "r") as handle:
                grammar_text = handle.read()
        except FileNotFoundError as exc:
            raise FileNotFoundError(
                f"Grammar file not found: {self.grammar_path}"
            ) from exc

        self.parser = Lark(
            grammar_text,
            parser="lalr",
            transformer=TypeLiteralTransformer(),
            start="start",
        )

    def parse(self, text: str) -> IRType:
        """Parse a type literal such as ``[string[]]`` into an IR type.

        Raises:
            TypeSyntaxError: If the text is empty or not a type literal
        """
        if self.parser is None:
            raise RuntimeError("Parser not initialized")

        stripped = _strip_outer_brackets(text.strip())
        if not stripped:
            raise TypeSyntaxError(f"Empty type literal: {text!r}")

        try:
            return self.parser.parse(stripped)
        except LarkError as exc:
            raise TypeSyntaxError(f"Invalid type literal {text!r}: {exc}") from exc


def _strip_outer_brackets(text: str) -> str:
    """Remove ``[...]`` wrappers that enclose the whole literal."""
    while text.startswith("[") and text.endswith("]"):
        depth = 0
        for index, char in enumerate(text):
            if char == "[":
                depth += 1
            elif char == "]":
                depth -= 1
                if depth == 0 and index != len(text) - 1:
                    return text
        text = text[1:-1].strip()
    return text

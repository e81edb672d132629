"""Parser for object identifiers and type descriptors used in JSON plans.

Grammar:

    type       := PRIMITIVE
                | ARRAY '<' type '>'
                | STRUCT '<' [field (',' field)*] '>'
                | EMBEDDING '(' NUMBER ',' STRING ')'
                | RAW '(' STRING ')'
    field      := name type
    identifier := name ('.' name)*
    name       := WORD | `quoted` (backticks doubled inside)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Optional

from jsonplan.core._class_loader import ClassLoader
from jsonplan.core._type_factory import TypeFactory
from jsonplan.core.error import ClassLoadingError, ParseError
from jsonplan.core.types.datatypes import (
    ArrayType,
    DataType,
    EmbeddingType,
    StructField,
    StructType,
    UserDefinedType,
)

_TOKEN_RE = re.compile(
    r"""
    (?P<whitespace>\s+)
    | (?P<quoted>`(?:[^`]|``)*`)
    | (?P<string>'(?:[^']|'')*')
    | (?P<number>\d+)
    | (?P<word>[A-Za-z_][A-Za-z0-9_$]*)
    | (?P<symbol>[<>(),.])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class _Token:
    kind: str
    value: str
    position: int


class _TokenStream:
    def __init__(self, text: str):
        self.text = text
        self._tokens = self._tokenize(text)
        self._index = 0

    def _tokenize(self, text: str) -> List[_Token]:
        tokens = []
        position = 0
        while position < len(text):
            match = _TOKEN_RE.match(text, position)
            if match is None:
                raise ParseError(f"Unexpected character '{text[position]}'", text, position)
            kind = match.lastgroup
            if kind == "quoted":
                tokens.append(_Token(kind, match.group()[1:-1].replace("``", "`"), position))
            elif kind == "string":
                tokens.append(_Token(kind, match.group()[1:-1].replace("''", "'"), position))
            elif kind != "whitespace":
                tokens.append(_Token(kind, match.group(), position))
            position = match.end()
        return tokens

    def peek(self) -> Optional[_Token]:
        return self._tokens[self._index] if self._index < len(self._tokens) else None

    def next(self, expected: str) -> _Token:
        token = self.peek()
        if token is None:
            raise ParseError(f"Expected {expected} but reached end of input", self.text, len(self.text))
        self._index += 1
        return token

    def expect_symbol(self, symbol: str) -> None:
        token = self.next(f"'{symbol}'")
        if token.kind != "symbol" or token.value != symbol:
            raise ParseError(f"Expected '{symbol}' but found '{token.value}'", self.text, token.position)

    def accept_symbol(self, symbol: str) -> bool:
        token = self.peek()
        if token is not None and token.kind == "symbol" and token.value == symbol:
            self._index += 1
            return True
        return False

    def expect_end(self) -> None:
        token = self.peek()
        if token is not None:
            raise ParseError(f"Unexpected trailing '{token.value}'", self.text, token.position)


class Parser:
    """Parses the symbolic names embedded in serialized plans."""

    def __init__(self, type_factory: TypeFactory, class_loader: ClassLoader):
        self._type_factory = type_factory
        self._class_loader = class_loader

    def parse_identifier(self, text: str) -> List[str]:
        """Split a dotted, optionally backtick-quoted identifier into its parts.

        Raises:
            ParseError: If the text is not a valid identifier.
        """
        tokens = _TokenStream(text)
        parts = [self._parse_name(tokens)]
        while tokens.accept_symbol("."):
            parts.append(self._parse_name(tokens))
        tokens.expect_end()
        return parts

    def parse_type(self, text: str) -> DataType:
        """Parse a type descriptor into the canonical data type of the type factory.

        Raises:
            ParseError: If the descriptor is malformed or names an unknown type.
        """
        tokens = _TokenStream(text)
        data_type = self._parse_type(tokens)
        tokens.expect_end()
        return self._type_factory.canonicalize(data_type)

    def _parse_name(self, tokens: _TokenStream) -> str:
        token = tokens.next("a name")
        if token.kind not in ("word", "quoted"):
            raise ParseError(f"Expected a name but found '{token.value}'", tokens.text, token.position)
        return token.value

    def _parse_type(self, tokens: _TokenStream) -> DataType:
        token = tokens.next("a type")
        if token.kind != "word":
            raise ParseError(f"Expected a type but found '{token.value}'", tokens.text, token.position)
        keyword = token.value.upper()

        if keyword == "ARRAY":
            tokens.expect_symbol("<")
            element_type = self._parse_type(tokens)
            tokens.expect_symbol(">")
            return ArrayType(element_type=element_type)

        if keyword == "STRUCT":
            tokens.expect_symbol("<")
            fields = []
            if not tokens.accept_symbol(">"):
                fields.append(self._parse_field(tokens))
                while tokens.accept_symbol(","):
                    fields.append(self._parse_field(tokens))
                tokens.expect_symbol(">")
            return StructType(struct_fields=fields)

        if keyword == "EMBEDDING":
            tokens.expect_symbol("(")
            dimensions = tokens.next("a dimension count")
            if dimensions.kind != "number":
                raise ParseError(
                    f"Expected a dimension count but found '{dimensions.value}'",
                    tokens.text,
                    dimensions.position,
                )
            tokens.expect_symbol(",")
            model = self._parse_string(tokens)
            tokens.expect_symbol(")")
            return EmbeddingType(dimensions=int(dimensions.value), embedding_model=model)

        if keyword == "RAW":
            tokens.expect_symbol("(")
            class_path = self._parse_string(tokens)
            tokens.expect_symbol(")")
            try:
                type_class = self._class_loader.load_class(class_path, UserDefinedType)
            except ClassLoadingError as e:
                raise ParseError(str(e), tokens.text, token.position) from e
            return type_class()

        primitive = self._type_factory.primitive(keyword)
        if primitive is None:
            raise ParseError(f"Unknown type '{token.value}'", tokens.text, token.position)
        return primitive

    def _parse_field(self, tokens: _TokenStream) -> StructField:
        name = self._parse_name(tokens)
        return StructField(name=name, data_type=self._parse_type(tokens))

    def _parse_string(self, tokens: _TokenStream) -> str:
        token = tokens.next("a string literal")
        if token.kind != "string":
            raise ParseError(
                f"Expected a string literal but found '{token.value}'", tokens.text, token.position
            )
        return token.value

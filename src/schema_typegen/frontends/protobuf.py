"""Protobuf IDL front-end.

Tokenizes and parses Protocol Buffer (.proto) files with a recursive-descent
parser. Supports proto2 and proto3 syntax for messages (with nesting), enums,
oneofs, map fields and services. Services, options, ``reserved`` and
``extend`` blocks are parsed but carry no type information.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from schema_typegen.errors import ParseError
from schema_typegen.frontends.base import FrontEnd
from schema_typegen.ir.base import SchemaGrammar

logger = logging.getLogger(__name__)


class TokenKind(str, Enum):
    IDENT = "identifier"
    INT = "integer"
    FLOAT = "float"
    STRING = "string"
    SYMBOL = "symbol"
    EOF = "end of input"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    value: str
    line: int
    column: int

    def is_symbol(self, symbol: str) -> bool:
        return self.kind == TokenKind.SYMBOL and self.value == symbol

    def is_ident(self, word: str | None = None) -> bool:
        return self.kind == TokenKind.IDENT and (word is None or self.value == word)


class FieldLabel(str, Enum):
    OPTIONAL = "optional"
    REQUIRED = "required"
    REPEATED = "repeated"


@dataclass
class ProtoField:
    name: str
    type_name: str
    number: int
    label: FieldLabel | None = None
    key_type: str | None = None
    options: dict[str, str] = field(default_factory=dict)
    line: int = 0
    column: int = 0

    @property
    def is_map(self) -> bool:
        return self.key_type is not None


@dataclass
class ProtoOneof:
    name: str
    fields: list[ProtoField] = field(default_factory=list)
    line: int = 0
    column: int = 0


@dataclass
class ProtoEnumValue:
    name: str
    number: int
    line: int = 0
    column: int = 0


@dataclass
class ProtoEnum:
    name: str
    path: tuple[str, ...]
    values: list[ProtoEnumValue] = field(default_factory=list)
    line: int = 0
    column: int = 0


@dataclass
class ProtoMessage:
    name: str
    path: tuple[str, ...]
    members: list[ProtoField | ProtoOneof] = field(default_factory=list)
    messages: list["ProtoMessage"] = field(default_factory=list)
    enums: list[ProtoEnum] = field(default_factory=list)
    definitions: list["ProtoMessage | ProtoEnum"] = field(default_factory=list)
    line: int = 0
    column: int = 0

    @property
    def fields(self) -> list[ProtoField]:
        return [m for m in self.members if isinstance(m, ProtoField)]

    @property
    def oneofs(self) -> list[ProtoOneof]:
        return [m for m in self.members if isinstance(m, ProtoOneof)]


@dataclass
class ProtoMethod:
    name: str
    input_type: str
    output_type: str
    client_streaming: bool = False
    server_streaming: bool = False


@dataclass
class ProtoService:
    name: str
    methods: list[ProtoMethod] = field(default_factory=list)
    line: int = 0
    column: int = 0


@dataclass
class ProtoFile:
    """A parsed .proto file."""

    syntax: str = "proto3"
    edition: str | None = None
    package: str | None = None
    imports: list[str] = field(default_factory=list)
    options: dict[str, str] = field(default_factory=dict)
    definitions: list[ProtoMessage | ProtoEnum] = field(default_factory=list)
    services: list[ProtoService] = field(default_factory=list)

    @property
    def messages(self) -> list[ProtoMessage]:
        return [d for d in self.definitions if isinstance(d, ProtoMessage)]

    @property
    def enums(self) -> list[ProtoEnum]:
        return [d for d in self.definitions if isinstance(d, ProtoEnum)]

    def all_messages(self) -> list[ProtoMessage]:
        """All messages including nested ones, in declaration order."""
        result: list[ProtoMessage] = []

        def visit(message: ProtoMessage) -> None:
            result.append(message)
            for nested in message.messages:
                visit(nested)

        for message in self.messages:
            visit(message)
        return result

    def all_enums(self) -> list[ProtoEnum]:
        result = list(self.enums)
        for message in self.all_messages():
            result.extend(message.enums)
        return result


# -----------------------------------------------------------------------------
# Tokenizer
# -----------------------------------------------------------------------------

_IDENT_RE = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_NUMBER_RE = re.compile(
    r"[-+]?(?:0[xX][0-9A-Fa-f]+|(?:\d+\.\d*|\.\d+|\d+)(?:[eE][-+]?\d+)?)"
)
_INT_RE = re.compile(r"[-+]?(?:0[xX][0-9A-Fa-f]+|\d+)$")
_SYMBOLS = set("{}()<>[];=,.:/-+")
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\", "'": "'", '"': '"'}


def tokenize(content: str) -> list[Token]:
    """Split .proto content into tokens, dropping whitespace and comments."""
    tokens: list[Token] = []
    pos = 0
    line = 1
    line_start = 0
    length = len(content)

    while pos < length:
        ch = content[pos]
        column = pos - line_start + 1

        if ch == "\n":
            pos += 1
            line += 1
            line_start = pos
            continue
        if ch.isspace():
            pos += 1
            continue

        if content.startswith("//", pos):
            end = content.find("\n", pos)
            pos = length if end == -1 else end
            continue

        if content.startswith("/*", pos):
            end = content.find("*/", pos + 2)
            if end == -1:
                raise ParseError("Unterminated block comment", line, column)
            comment = content[pos:end + 2]
            newlines = comment.count("\n")
            if newlines:
                line += newlines
                line_start = pos + comment.rfind("\n") + 1
            pos = end + 2
            continue

        if ch in "\"'":
            value, pos = _read_string(content, pos, line, column)
            tokens.append(Token(TokenKind.STRING, value, line, column))
            continue

        if ch.isdigit() or (ch in "-+." and pos + 1 < length and content[pos + 1].isdigit()):
            match = _NUMBER_RE.match(content, pos)
            if match:
                text = match.group(0)
                kind = TokenKind.INT if _INT_RE.match(text) else TokenKind.FLOAT
                tokens.append(Token(kind, text, line, column))
                pos = match.end()
                continue

        match = _IDENT_RE.match(content, pos)
        if match:
            tokens.append(Token(TokenKind.IDENT, match.group(0), line, column))
            pos = match.end()
            continue

        if ch in _SYMBOLS:
            tokens.append(Token(TokenKind.SYMBOL, ch, line, column))
            pos += 1
            continue

        raise ParseError(f"Unexpected character {ch!r}", line, column)

    tokens.append(Token(TokenKind.EOF, "", line, pos - line_start + 1))
    return tokens


def _read_string(content: str, pos: int, line: int, column: int) -> tuple[str, int]:
    quote = content[pos]
    pos += 1
    chars: list[str] = []
    while pos < len(content):
        ch = content[pos]
        if ch == quote:
            return "".join(chars), pos + 1
        if ch == "\n":
            break
        if ch == "\\" and pos + 1 < len(content):
            chars.append(_ESCAPES.get(content[pos + 1], content[pos + 1]))
            pos += 2
            continue
        chars.append(ch)
        pos += 1
    raise ParseError("Unterminated string literal", line, column)


def parse_int(text: str) -> int:
    """Parse a protobuf integer literal (decimal, hex or octal)."""
    sign = -1 if text.startswith("-") else 1
    digits = text.lstrip("+-")
    if digits.lower().startswith("0x"):
        return sign * int(digits, 16)
    if len(digits) > 1 and digits.startswith("0"):
        return sign * int(digits, 8)
    return sign * int(digits)


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------

MAP_KEY_TYPES = {
    "int32", "int64", "uint32", "uint64", "sint32", "sint64",
    "fixed32", "fixed64", "sfixed32", "sfixed64", "bool", "string",
}

MAX_FIELD_NUMBER = 536_870_911


class _Parser:
    """Recursive-descent parser over a token list.

    The cursor lives on the instance, which is created per ``parse`` call.
    """

    def __init__(self, tokens: list[Token]):
        self.tokens = tokens
        self.pos = 0
        self.file = ProtoFile()

    # -- cursor helpers -------------------------------------------------------

    def peek(self, offset: int = 0) -> Token:
        index = min(self.pos + offset, len(self.tokens) - 1)
        return self.tokens[index]

    def advance(self) -> Token:
        token = self.peek()
        if token.kind != TokenKind.EOF:
            self.pos += 1
        return token

    def error(self, message: str, token: Token | None = None) -> ParseError:
        token = token or self.peek()
        return ParseError(message, token.line, token.column, token.value or token.kind.value)

    def expect_symbol(self, symbol: str) -> Token:
        token = self.peek()
        if not token.is_symbol(symbol):
            raise self.error(f"Expected '{symbol}'")
        return self.advance()

    def expect_ident(self, what: str = "identifier") -> Token:
        token = self.peek()
        if token.kind != TokenKind.IDENT:
            raise self.error(f"Expected {what}")
        return self.advance()

    def expect_string(self) -> Token:
        token = self.peek()
        if token.kind != TokenKind.STRING:
            raise self.error("Expected string literal")
        return self.advance()

    def expect_int(self, what: str = "integer") -> int:
        token = self.peek()
        if token.kind != TokenKind.INT:
            raise self.error(f"Expected {what}")
        self.advance()
        return parse_int(token.value)

    def accept_symbol(self, symbol: str) -> bool:
        if self.peek().is_symbol(symbol):
            self.advance()
            return True
        return False

    def starts_declaration(self, keyword: str) -> bool:
        """True when the cursor sits on ``keyword`` followed by a name."""
        return self.peek().is_ident(keyword) and self.peek(1).kind == TokenKind.IDENT

    # -- file level -----------------------------------------------------------

    def parse_file(self) -> ProtoFile:
        while self.peek().kind != TokenKind.EOF:
            token = self.peek()

            if token.is_symbol(";"):
                self.advance()
            elif token.is_ident("syntax"):
                self.parse_syntax()
            elif token.is_ident("edition"):
                self.parse_edition()
            elif token.is_ident("package"):
                self.parse_package()
            elif token.is_ident("import"):
                self.parse_import()
            elif token.is_ident("option"):
                name, value = self.parse_option_statement()
                self.file.options[name] = value
            elif self.starts_declaration("message"):
                self.file.definitions.append(self.parse_message(()))
            elif self.starts_declaration("enum"):
                self.file.definitions.append(self.parse_enum(()))
            elif self.starts_declaration("service"):
                self.file.services.append(self.parse_service())
            elif token.is_ident("extend"):
                self.skip_extend()
            elif token.kind == TokenKind.IDENT:
                raise self.error(f"Unknown top-level keyword '{token.value}'")
            else:
                raise self.error("Unexpected token at top level")

        return self.file

    def parse_syntax(self) -> None:
        self.advance()
        self.expect_symbol("=")
        token = self.expect_string()
        if token.value not in ("proto2", "proto3"):
            raise self.error(f"Unsupported syntax '{token.value}'", token)
        self.expect_symbol(";")
        self.file.syntax = token.value

    def parse_edition(self) -> None:
        self.advance()
        self.expect_symbol("=")
        token = self.expect_string()
        self.expect_symbol(";")
        self.file.edition = token.value
        self.file.syntax = "proto3"

    def parse_package(self) -> None:
        start = self.advance()
        if self.file.package is not None:
            raise self.error("Duplicate package declaration", start)
        self.file.package = self.parse_dotted_name()
        self.expect_symbol(";")

    def parse_import(self) -> None:
        self.advance()
        if self.peek().is_ident("public") or self.peek().is_ident("weak"):
            self.advance()
        self.file.imports.append(self.expect_string().value)
        self.expect_symbol(";")

    def parse_dotted_name(self) -> str:
        parts = [self.expect_ident().value]
        while self.accept_symbol("."):
            parts.append(self.expect_ident().value)
        return ".".join(parts)

    def parse_type_name(self) -> str:
        prefix = "." if self.accept_symbol(".") else ""
        return prefix + self.parse_dotted_name()

    def parse_option_name(self) -> str:
        parts: list[str] = []
        while True:
            if self.accept_symbol("("):
                parts.append(f"({self.parse_type_name()})")
                self.expect_symbol(")")
            else:
                parts.append(self.expect_ident("option name").value)
            if not self.accept_symbol("."):
                break
        return ".".join(parts)

    def parse_option_value(self) -> str:
        """Consume an option value, returning its raw text."""
        token = self.peek()
        if token.is_symbol("{"):
            return self.skip_block()
        if token.kind in (TokenKind.IDENT, TokenKind.INT, TokenKind.FLOAT, TokenKind.STRING):
            self.advance()
            return token.value
        if token.is_symbol("-") or token.is_symbol("+"):
            self.advance()
            return token.value + self.expect_ident("option value").value
        raise self.error("Expected option value")

    def parse_option_statement(self) -> tuple[str, str]:
        self.advance()
        name = self.parse_option_name()
        self.expect_symbol("=")
        value = self.parse_option_value()
        self.expect_symbol(";")
        logger.debug("Dropping option %s = %s", name, value)
        return name, value

    def skip_block(self) -> str:
        """Skip a balanced ``{ ... }`` block and return its raw token text."""
        start = self.expect_symbol("{")
        depth = 1
        parts: list[str] = []
        while depth > 0:
            token = self.advance()
            if token.kind == TokenKind.EOF:
                raise self.error("Unclosed '{'", start)
            if token.is_symbol("{"):
                depth += 1
            elif token.is_symbol("}"):
                depth -= 1
                if depth == 0:
                    break
            parts.append(token.value)
        return " ".join(parts)

    def skip_statement(self) -> None:
        """Skip tokens up to and including the next ';'."""
        start = self.peek()
        while not self.peek().is_symbol(";"):
            if self.peek().kind == TokenKind.EOF:
                raise self.error(f"Unterminated '{start.value}' statement", start)
            self.advance()
        self.advance()

    def skip_extend(self) -> None:
        start = self.advance()
        target = self.parse_type_name()
        self.skip_block()
        logger.debug("Dropping extend block for %s at line %d", target, start.line)

    # -- messages -------------------------------------------------------------

    def parse_message(self, parent_path: tuple[str, ...]) -> ProtoMessage:
        start = self.advance()
        name = self.expect_ident("message name").value
        path = parent_path + (name,)
        message = ProtoMessage(name=name, path=path, line=start.line, column=start.column)
        open_brace = self.expect_symbol("{")

        while not self.peek().is_symbol("}"):
            token = self.peek()
            if token.kind == TokenKind.EOF:
                raise self.error(f"Unclosed body of message '{name}'", open_brace)

            if token.is_symbol(";"):
                self.advance()
            elif self.starts_declaration("message"):
                nested = self.parse_message(path)
                message.messages.append(nested)
                message.definitions.append(nested)
            elif self.starts_declaration("enum"):
                nested_enum = self.parse_enum(path)
                message.enums.append(nested_enum)
                message.definitions.append(nested_enum)
            elif self.starts_declaration("oneof") and self.peek(2).is_symbol("{"):
                message.members.append(self.parse_oneof())
            elif token.is_ident("map") and self.peek(1).is_symbol("<"):
                message.members.append(self.parse_map_field())
            elif token.is_ident("option"):
                self.parse_option_statement()
            elif token.is_ident("reserved") or token.is_ident("extensions"):
                self.skip_statement()
            elif token.is_ident("extend"):
                self.skip_extend()
            elif token.kind == TokenKind.IDENT or token.is_symbol("."):
                message.members.append(self.parse_field())
            else:
                raise self.error(f"Unexpected token in message '{name}'")

        self.expect_symbol("}")
        return message

    def parse_label(self) -> FieldLabel | None:
        token = self.peek()
        if token.kind != TokenKind.IDENT or token.value not in FieldLabel._value2member_map_:
            return None
        following = self.peek(1)
        if following.kind == TokenKind.IDENT or following.is_symbol("."):
            self.advance()
            return FieldLabel(token.value)
        return None

    def parse_field(self, in_oneof: bool = False) -> ProtoField:
        start = self.peek()
        label = self.parse_label()

        if self.peek().is_ident("group"):
            raise self.error("Groups are not supported")
        if self.peek().is_ident("map") and self.peek(1).is_symbol("<"):
            raise self.error("Map fields cannot have a label")

        type_name = self.parse_type_name()
        name = self.expect_ident("field name").value
        self.expect_symbol("=")
        number_token = self.peek()
        number = self.expect_int("field number")
        self.check_field_number(number, number_token)
        options = self.parse_field_options()
        self.expect_symbol(";")

        if in_oneof and label is not None:
            raise self.error(f"Field '{name}' inside oneof cannot be labelled", start)
        if not in_oneof:
            self.check_label(name, label, start)

        return ProtoField(
            name=name,
            type_name=type_name,
            number=number,
            label=label,
            options=options,
            line=start.line,
            column=start.column,
        )

    def check_label(self, name: str, label: FieldLabel | None, token: Token) -> None:
        if self.file.syntax == "proto2" and label is None:
            raise self.error(
                f"proto2 field '{name}' must be labelled required, optional or repeated",
                token,
            )
        if self.file.syntax == "proto3" and label == FieldLabel.REQUIRED:
            raise self.error(f"'required' is not allowed in proto3 (field '{name}')", token)

    def check_field_number(self, number: int, token: Token) -> None:
        if not 1 <= number <= MAX_FIELD_NUMBER:
            raise self.error(f"Field number {number} out of range", token)

    def parse_map_field(self) -> ProtoField:
        start = self.advance()
        self.expect_symbol("<")
        key_token = self.peek()
        key_type = self.parse_type_name()
        if key_type not in MAP_KEY_TYPES:
            raise self.error(f"Invalid map key type '{key_type}'", key_token)
        self.expect_symbol(",")
        value_type = self.parse_type_name()
        self.expect_symbol(">")
        name = self.expect_ident("field name").value
        self.expect_symbol("=")
        number_token = self.peek()
        number = self.expect_int("field number")
        self.check_field_number(number, number_token)
        options = self.parse_field_options()
        self.expect_symbol(";")

        return ProtoField(
            name=name,
            type_name=value_type,
            number=number,
            key_type=key_type,
            options=options,
            line=start.line,
            column=start.column,
        )

    def parse_field_options(self) -> dict[str, str]:
        options: dict[str, str] = {}
        if not self.accept_symbol("["):
            return options
        while True:
            name = self.parse_option_name()
            self.expect_symbol("=")
            options[name] = self.parse_option_value()
            if not self.accept_symbol(","):
                break
        self.expect_symbol("]")
        return options

    def parse_oneof(self) -> ProtoOneof:
        start = self.advance()
        name = self.expect_ident("oneof name").value
        oneof = ProtoOneof(name=name, line=start.line, column=start.column)
        open_brace = self.expect_symbol("{")

        while not self.peek().is_symbol("}"):
            token = self.peek()
            if token.kind == TokenKind.EOF:
                raise self.error(f"Unclosed oneof '{name}'", open_brace)
            if token.is_symbol(";"):
                self.advance()
            elif token.is_ident("option"):
                self.parse_option_statement()
            else:
                oneof.fields.append(self.parse_field(in_oneof=True))

        self.expect_symbol("}")
        if not oneof.fields:
            raise self.error(f"oneof '{name}' has no fields", start)
        return oneof

    # -- enums ----------------------------------------------------------------

    def parse_enum(self, parent_path: tuple[str, ...]) -> ProtoEnum:
        start = self.advance()
        name = self.expect_ident("enum name").value
        enum = ProtoEnum(name=name, path=parent_path + (name,), line=start.line, column=start.column)
        open_brace = self.expect_symbol("{")

        while not self.peek().is_symbol("}"):
            token = self.peek()
            if token.kind == TokenKind.EOF:
                raise self.error(f"Unclosed body of enum '{name}'", open_brace)
            if token.is_symbol(";"):
                self.advance()
            elif token.is_ident("option") and not self.peek(1).is_symbol("="):
                self.parse_option_statement()
            elif token.is_ident("reserved"):
                self.skip_statement()
            elif token.kind == TokenKind.IDENT:
                self.advance()
                self.expect_symbol("=")
                number = self.expect_int("enum value number")
                self.parse_field_options()
                self.expect_symbol(";")
                enum.values.append(
                    ProtoEnumValue(name=token.value, number=number, line=token.line, column=token.column)
                )
            else:
                raise self.error(f"Unexpected token in enum '{name}'")

        self.expect_symbol("}")
        return enum

    # -- services -------------------------------------------------------------

    def parse_service(self) -> ProtoService:
        start = self.advance()
        name = self.expect_ident("service name").value
        service = ProtoService(name=name, line=start.line, column=start.column)
        open_brace = self.expect_symbol("{")

        while not self.peek().is_symbol("}"):
            token = self.peek()
            if token.kind == TokenKind.EOF:
                raise self.error(f"Unclosed body of service '{name}'", open_brace)
            if token.is_symbol(";"):
                self.advance()
            elif token.is_ident("option"):
                self.parse_option_statement()
            elif token.is_ident("rpc"):
                service.methods.append(self.parse_method())
            else:
                raise self.error(f"Unexpected token in service '{name}'")

        self.expect_symbol("}")
        return service

    def parse_method(self) -> ProtoMethod:
        self.advance()
        name = self.expect_ident("method name").value
        client_streaming, input_type = self.parse_method_type()
        if not self.peek().is_ident("returns"):
            raise self.error("Expected 'returns'")
        self.advance()
        server_streaming, output_type = self.parse_method_type()

        if self.peek().is_symbol("{"):
            self.skip_block()
        else:
            self.expect_symbol(";")

        return ProtoMethod(
            name=name,
            input_type=input_type,
            output_type=output_type,
            client_streaming=client_streaming,
            server_streaming=server_streaming,
        )

    def parse_method_type(self) -> tuple[bool, str]:
        self.expect_symbol("(")
        streaming = False
        if self.peek().is_ident("stream") and not self.peek(1).is_symbol(")"):
            self.advance()
            streaming = True
        type_name = self.parse_type_name()
        self.expect_symbol(")")
        return streaming, type_name


class ProtobufFrontEnd(FrontEnd):
    """Front-end for Protocol Buffer schemas."""

    grammar = SchemaGrammar.PROTOBUF

    def parse(self, source_text: str) -> ProtoFile:
        """Parse .proto content.

        Args:
            source_text: Protocol buffer content as string

        Returns:
            Parsed ProtoFile
        """
        proto = _Parser(tokenize(source_text)).parse_file()
        logger.debug(
            "Parsed proto file: %d messages, %d enums, %d services",
            len(proto.all_messages()),
            len(proto.all_enums()),
            len(proto.services),
        )
        return proto


def parse_proto(content: str) -> ProtoFile:
    """Convenience function to parse .proto content."""
    return ProtobufFrontEnd().parse(content)

"""SQL DDL front-end.

Parses CREATE TABLE statements (and PostgreSQL ``CREATE TYPE ... AS ENUM``)
from SQL DDL. Supports the common dialects (PostgreSQL, MySQL, SQLite).
Other statements that start with a known SQL verb are skipped.
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum

from schema_typegen.config import ProviderConfig, SqlDialect
from schema_typegen.errors import ParseError
from schema_typegen.frontends.base import FrontEnd
from schema_typegen.frontends.mappings import DIALECT_SCALARS
from schema_typegen.ir.base import SchemaGrammar

logger = logging.getLogger(__name__)


class SqlTokenKind(str, Enum):
    WORD = "word"
    QUOTED = "quoted identifier"
    STRING = "string"
    NUMBER = "number"
    SYMBOL = "symbol"
    EOF = "end of input"


@dataclass(frozen=True)
class SqlToken:
    kind: SqlTokenKind
    value: str
    line: int
    column: int

    @property
    def upper(self) -> str:
        """Upper-cased value for bare words, empty string otherwise."""
        return self.value.upper() if self.kind == SqlTokenKind.WORD else ""

    @property
    def is_identifier(self) -> bool:
        return self.kind in (SqlTokenKind.WORD, SqlTokenKind.QUOTED)

    def is_word(self, *words: str) -> bool:
        return self.kind == SqlTokenKind.WORD and self.value.upper() in words

    def is_symbol(self, symbol: str) -> bool:
        return self.kind == SqlTokenKind.SYMBOL and self.value == symbol


class ColumnConstraintKind(str, Enum):
    PRIMARY_KEY = "primary_key"
    NOT_NULL = "not_null"
    NULL = "null"
    UNIQUE = "unique"
    AUTO_INCREMENT = "auto_increment"
    DEFAULT = "default"
    REFERENCES = "references"
    CHECK = "check"
    CONSTRAINT = "constraint"
    COLLATE = "collate"
    GENERATED = "generated"
    COMMENT = "comment"


class TableConstraintKind(str, Enum):
    PRIMARY_KEY = "primary_key"
    UNIQUE = "unique"
    FOREIGN_KEY = "foreign_key"
    CHECK = "check"
    INDEX = "index"
    EXCLUDE = "exclude"
    LIKE = "like"


@dataclass(frozen=True)
class ColumnConstraint:
    kind: ColumnConstraintKind
    value: str | None = None


@dataclass
class TableConstraint:
    kind: TableConstraintKind
    columns: list[str] = field(default_factory=list)
    expression: str | None = None
    name: str | None = None


@dataclass
class SqlColumnType:
    """A column's declared type.

    ``name`` keeps the source spelling (multi-word names joined by single
    spaces); ``base_name`` is the upper-cased form used for table lookups.
    """

    name: str
    args: list[str] = field(default_factory=list)
    array_depth: int = 0
    unsigned: bool = False
    enum_values: list[str] | None = None

    @property
    def base_name(self) -> str:
        return self.name.upper()

    @property
    def is_enum(self) -> bool:
        return self.enum_values is not None


@dataclass
class Column:
    name: str
    type: SqlColumnType
    constraints: list[ColumnConstraint] = field(default_factory=list)
    line: int = 0
    column: int = 0

    def has_constraint(self, kind: ColumnConstraintKind) -> bool:
        return any(c.kind == kind for c in self.constraints)

    def constraint_value(self, kind: ColumnConstraintKind) -> str | None:
        for constraint in self.constraints:
            if constraint.kind == kind:
                return constraint.value
        return None

    @property
    def is_primary_key(self) -> bool:
        return self.has_constraint(ColumnConstraintKind.PRIMARY_KEY)

    @property
    def is_not_null(self) -> bool:
        return self.has_constraint(ColumnConstraintKind.NOT_NULL)


@dataclass
class Table:
    name: str
    schema: str | None = None
    columns: list[Column] = field(default_factory=list)
    constraints: list[TableConstraint] = field(default_factory=list)
    line: int = 0
    column: int = 0

    def get_column(self, name: str) -> Column | None:
        for column in self.columns:
            if column.name == name:
                return column
        return None

    @property
    def primary_key_columns(self) -> list[str]:
        names = [c.name for c in self.columns if c.is_primary_key]
        for constraint in self.constraints:
            if constraint.kind == TableConstraintKind.PRIMARY_KEY:
                names.extend(n for n in constraint.columns if n not in names)
        return names


@dataclass
class EnumType:
    name: str
    values: list[str] = field(default_factory=list)
    schema: str | None = None
    line: int = 0
    column: int = 0


@dataclass
class SqlSchema:
    """A parsed DDL script."""

    tables: list[Table] = field(default_factory=list)
    enum_types: list[EnumType] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def list_tables(self) -> list[str]:
        return [t.name for t in self.tables]

    def get_table(self, name: str) -> Table:
        for table in self.tables:
            if table.name == name:
                return table
        available = ", ".join(self.list_tables())
        raise ValueError(f"Table '{name}' not found. Available: {available}")


# -----------------------------------------------------------------------------
# Tokenizer
# -----------------------------------------------------------------------------

_WORD_RE = re.compile(r"[A-Za-z_][\w$]*")
_NUMBER_RE = re.compile(r"(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_DOLLAR_TAG_RE = re.compile(r"\$(?:[A-Za-z_]\w*)?\$")


class _SqlLexer:
    def __init__(self, content: str, dialect: SqlDialect = SqlDialect.GENERIC):
        self.content = content
        self.pos = 0
        self.line = 1
        self.line_start = 0
        self.hash_comments = dialect == SqlDialect.MYSQL
        self.backslash_escapes = dialect == SqlDialect.MYSQL
        # MySQL reads double-quoted text as a string literal.
        self.string_quotes = "'\"" if dialect == SqlDialect.MYSQL else "'"

    def _move_to(self, end: int) -> None:
        segment = self.content[self.pos:end]
        newlines = segment.count("\n")
        if newlines:
            self.line += newlines
            self.line_start = self.pos + segment.rfind("\n") + 1
        self.pos = end

    def _read_quoted(self, closing: str, line: int, column: int) -> tuple[str, int]:
        content = self.content
        i = self.pos + 1
        chars: list[str] = []
        while i < len(content):
            ch = content[i]
            if self.backslash_escapes and closing in self.string_quotes and ch == "\\" and i + 1 < len(content):
                chars.append(content[i + 1])
                i += 2
                continue
            if ch == closing:
                if i + 1 < len(content) and content[i + 1] == closing:
                    chars.append(closing)
                    i += 2
                    continue
                return "".join(chars), i + 1
            chars.append(ch)
            i += 1
        raise ParseError("Unterminated quoted text", line, column)

    def tokenize(self) -> list[SqlToken]:
        content = self.content
        length = len(content)
        tokens: list[SqlToken] = []

        while self.pos < length:
            pos = self.pos
            ch = content[pos]
            line, column = self.line, pos - self.line_start + 1

            if ch.isspace():
                self._move_to(pos + 1)
                continue

            if content.startswith("--", pos) or (self.hash_comments and ch == "#"):
                end = content.find("\n", pos)
                self._move_to(length if end == -1 else end)
                continue

            if content.startswith("/*", pos):
                end = content.find("*/", pos + 2)
                if end == -1:
                    raise ParseError("Unterminated block comment", line, column)
                self._move_to(end + 2)
                continue

            if ch in self.string_quotes:
                value, end = self._read_quoted(ch, line, column)
                tokens.append(SqlToken(SqlTokenKind.STRING, value, line, column))
                self._move_to(end)
                continue

            if ch in "\"`":
                value, end = self._read_quoted(ch, line, column)
                tokens.append(SqlToken(SqlTokenKind.QUOTED, value, line, column))
                self._move_to(end)
                continue

            if ch == "[":
                following = content[pos + 1:].lstrip()
                if not (following.startswith("]") or following[:1].isdigit()):
                    value, end = self._read_quoted("]", line, column)
                    tokens.append(SqlToken(SqlTokenKind.QUOTED, value, line, column))
                    self._move_to(end)
                    continue

            if ch == "$":
                match = _DOLLAR_TAG_RE.match(content, pos)
                if match:
                    tag = match.group(0)
                    end = content.find(tag, match.end())
                    if end == -1:
                        raise ParseError("Unterminated dollar-quoted text", line, column)
                    value = content[match.end():end]
                    tokens.append(SqlToken(SqlTokenKind.STRING, value, line, column))
                    self._move_to(end + len(tag))
                    continue

            match = _NUMBER_RE.match(content, pos) if (ch.isdigit() or ch == ".") else None
            if match:
                tokens.append(SqlToken(SqlTokenKind.NUMBER, match.group(0), line, column))
                self._move_to(match.end())
                continue

            match = _WORD_RE.match(content, pos)
            if match:
                tokens.append(SqlToken(SqlTokenKind.WORD, match.group(0), line, column))
                self._move_to(match.end())
                continue

            if content.startswith("::", pos):
                tokens.append(SqlToken(SqlTokenKind.SYMBOL, "::", line, column))
                self._move_to(pos + 2)
                continue

            tokens.append(SqlToken(SqlTokenKind.SYMBOL, ch, line, column))
            self._move_to(pos + 1)

        tokens.append(SqlToken(SqlTokenKind.EOF, "", self.line, self.pos - self.line_start + 1))
        return tokens


def tokenize_sql(content: str, dialect: SqlDialect = SqlDialect.GENERIC) -> list[SqlToken]:
    """Split DDL into tokens, dropping whitespace and comments."""
    return _SqlLexer(content, dialect).tokenize()


def split_statements(tokens: list[SqlToken]) -> list[list[SqlToken]]:
    """Split a token stream on top-level ``;``.

    Raises:
        ParseError: on unbalanced parentheses
    """
    statements: list[list[SqlToken]] = []
    current: list[SqlToken] = []
    open_parens: list[SqlToken] = []

    for token in tokens:
        if token.kind == SqlTokenKind.EOF:
            break
        if token.is_symbol("("):
            open_parens.append(token)
        elif token.is_symbol(")"):
            if not open_parens:
                raise ParseError("Unbalanced ')'", token.line, token.column, token.value)
            open_parens.pop()
        elif token.is_symbol(";") and not open_parens:
            if current:
                statements.append(current)
            current = []
            continue
        current.append(token)

    if open_parens:
        token = open_parens[-1]
        raise ParseError("Unclosed '('", token.line, token.column, token.value)
    if current:
        statements.append(current)
    return statements


def split_on_commas(tokens: list[SqlToken]) -> list[list[SqlToken]]:
    """Split tokens on commas outside parentheses."""
    parts: list[list[SqlToken]] = [[]]
    depth = 0
    for token in tokens:
        if token.is_symbol("("):
            depth += 1
        elif token.is_symbol(")"):
            depth -= 1
        elif token.is_symbol(",") and depth == 0:
            parts.append([])
            continue
        parts[-1].append(token)
    return parts


def render_tokens(tokens: list[SqlToken]) -> str:
    """Rebuild readable SQL text from tokens."""
    parts: list[str] = []
    previous = ""
    for token in tokens:
        if token.kind == SqlTokenKind.STRING:
            text = "'" + token.value.replace("'", "''") + "'"
        elif token.kind == SqlTokenKind.QUOTED:
            text = f'"{token.value}"'
        else:
            text = token.value
        if parts and previous not in ("(", ".", "::") and text not in (")", ",", ".", "::", "("):
            parts.append(" ")
        parts.append(text)
        previous = text
    return "".join(parts)


class _Cursor:
    """Position in one statement's token list."""

    def __init__(self, tokens: list[SqlToken]):
        last = tokens[-1] if tokens else SqlToken(SqlTokenKind.EOF, "", 1, 1)
        eof = SqlToken(SqlTokenKind.EOF, "", last.line, last.column + len(last.value))
        self.tokens = [*tokens, eof]
        self.pos = 0

    def peek(self, offset: int = 0) -> SqlToken:
        return self.tokens[min(self.pos + offset, len(self.tokens) - 1)]

    def advance(self) -> SqlToken:
        token = self.peek()
        if token.kind != SqlTokenKind.EOF:
            self.pos += 1
        return token

    def at_end(self) -> bool:
        return self.peek().kind == SqlTokenKind.EOF

    def rest(self) -> list[SqlToken]:
        tokens = self.tokens[self.pos:-1]
        self.pos = len(self.tokens) - 1
        return tokens

    def error(self, message: str, token: SqlToken | None = None) -> ParseError:
        token = token or self.peek()
        return ParseError(message, token.line, token.column, token.value or token.kind.value)

    def accept_word(self, *words: str) -> bool:
        if self.peek().is_word(*words):
            self.advance()
            return True
        return False

    def accept_symbol(self, symbol: str) -> bool:
        if self.peek().is_symbol(symbol):
            self.advance()
            return True
        return False

    def expect_word(self, *words: str) -> SqlToken:
        if not self.peek().is_word(*words):
            raise self.error(f"Expected {' or '.join(words)}")
        return self.advance()

    def expect_symbol(self, symbol: str) -> SqlToken:
        if not self.peek().is_symbol(symbol):
            raise self.error(f"Expected '{symbol}'")
        return self.advance()

    def expect_identifier(self, what: str = "identifier") -> SqlToken:
        if not self.peek().is_identifier:
            raise self.error(f"Expected {what}")
        return self.advance()

    def balanced_group(self, include_parens: bool = False) -> list[SqlToken]:
        """Consume a parenthesized group and return its tokens."""
        start = self.expect_symbol("(")
        depth = 1
        inner: list[SqlToken] = []
        while True:
            token = self.advance()
            if token.kind == SqlTokenKind.EOF:
                raise self.error("Unclosed '('", start)
            if token.is_symbol("("):
                depth += 1
            elif token.is_symbol(")"):
                depth -= 1
                if depth == 0:
                    return [start, *inner, token] if include_parens else inner
            inner.append(token)


# -----------------------------------------------------------------------------
# Parser
# -----------------------------------------------------------------------------

SKIPPED_VERBS = {
    "ALTER", "ANALYZE", "BEGIN", "CALL", "CLUSTER", "COMMENT", "COMMIT", "COPY",
    "DECLARE", "DELETE", "DO", "DROP", "END", "EXPLAIN", "GRANT", "INSERT", "LOCK",
    "PRAGMA", "REINDEX", "RENAME", "REPLACE", "REVOKE", "ROLLBACK", "SAVEPOINT",
    "SELECT", "SET", "SHOW", "START", "TRUNCATE", "UPDATE", "USE", "VACUUM", "WITH",
}

CREATE_MODIFIERS = ("TEMP", "TEMPORARY", "GLOBAL", "LOCAL", "UNLOGGED")

MULTI_WORD_TYPES = (
    "DOUBLE PRECISION",
    "CHARACTER VARYING",
    "CHAR VARYING",
    "NATIONAL CHARACTER",
    "NATIONAL CHARACTER VARYING",
    "NATIONAL CHAR",
    "BIT VARYING",
    "TIMESTAMP WITH TIME ZONE",
    "TIMESTAMP WITHOUT TIME ZONE",
    "TIME WITH TIME ZONE",
    "TIME WITHOUT TIME ZONE",
)

CONSTRAINT_STARTS = {
    "PRIMARY", "NOT", "NULL", "UNIQUE", "KEY", "AUTO_INCREMENT", "AUTOINCREMENT",
    "IDENTITY", "DEFAULT", "REFERENCES", "CHECK", "CONSTRAINT", "COLLATE",
    "GENERATED", "AS", "COMMENT", "ON", "CHARACTER", "CHARSET",
}

IGNORED_COLUMN_WORDS = {
    "ASC", "DESC", "VISIBLE", "INVISIBLE", "STORED", "VIRTUAL",
    "DEFERRABLE", "INITIALLY", "DEFERRED", "IMMEDIATE",
}

TYPELESS_COLUMN_WORDS = {"PRIMARY", "NOT", "NULL", "UNIQUE", "DEFAULT", "REFERENCES", "CHECK", "CONSTRAINT"}

TABLE_CONSTRAINT_WORDS = {"PRIMARY", "FOREIGN", "CHECK", "CONSTRAINT", "EXCLUDE", "LIKE"}
INDEX_WORDS = {"UNIQUE", "KEY", "INDEX", "FULLTEXT", "SPATIAL"}


def _is_known_type(word: str) -> bool:
    upper = word.upper()
    if upper in ("ENUM", "SET"):
        return True
    return any(upper in table for table in DIALECT_SCALARS.values())


def _is_table_constraint(tokens: list[SqlToken]) -> bool:
    first = tokens[0]
    if first.kind != SqlTokenKind.WORD:
        return False
    word = first.upper
    if word in TABLE_CONSTRAINT_WORDS:
        return True
    if word not in INDEX_WORDS or len(tokens) < 2:
        return False

    # KEY/INDEX/UNIQUE double as column names: ``key TEXT`` is a column,
    # ``KEY idx_name (col)`` and ``UNIQUE (col)`` are not.
    second = tokens[1]
    if second.is_symbol("(") or second.is_word("KEY", "INDEX"):
        return True
    if second.kind == SqlTokenKind.WORD and _is_known_type(second.value):
        return False
    return len(tokens) > 2 and tokens[2].is_symbol("(")


class DDLFrontEnd(FrontEnd):
    """Front-end for SQL DDL scripts."""

    grammar = SchemaGrammar.SQL

    def parse(self, source_text: str) -> SqlSchema:
        """Parse a DDL script.

        Args:
            source_text: SQL DDL content as string

        Returns:
            Parsed SqlSchema with tables, enum types and skipped statements
        """
        tokens = tokenize_sql(source_text, self.config.dialect)
        schema = SqlSchema()

        for statement in split_statements(tokens):
            self.parse_statement(statement, schema)

        logger.debug(
            "Parsed DDL: %d tables, %d enum types, %d skipped statements",
            len(schema.tables),
            len(schema.enum_types),
            len(schema.skipped),
        )
        return schema

    def parse_statement(self, tokens: list[SqlToken], schema: SqlSchema) -> None:
        cursor = _Cursor(tokens)
        first = cursor.peek()
        if first.kind != SqlTokenKind.WORD:
            raise cursor.error("Expected a SQL statement")

        verb = first.upper
        if verb == "CREATE":
            self.parse_create(cursor, schema)
        elif verb in SKIPPED_VERBS:
            schema.skipped.append(verb)
            logger.debug("Skipping %s statement at line %d", verb, first.line)
        else:
            raise cursor.error(f"Unknown statement '{first.value}'")

    def parse_create(self, cursor: _Cursor, schema: SqlSchema) -> None:
        start = cursor.advance()
        if cursor.accept_word("OR"):
            cursor.expect_word("REPLACE")
        while cursor.accept_word(*CREATE_MODIFIERS):
            pass

        if cursor.peek().is_word("TABLE"):
            table = self.parse_table(cursor)
            if table is not None:
                schema.tables.append(table)
        elif cursor.peek().is_word("TYPE"):
            enum_type = self.parse_create_type(cursor)
            if enum_type is not None:
                schema.enum_types.append(enum_type)
        else:
            what = cursor.peek().value.upper() or "statement"
            schema.skipped.append(f"CREATE {what}")
            logger.debug("Skipping CREATE %s at line %d", what, start.line)

    def parse_qualified_name(self, cursor: _Cursor, what: str = "name") -> list[str]:
        parts = [cursor.expect_identifier(what).value]
        while cursor.accept_symbol("."):
            parts.append(cursor.expect_identifier(what).value)
        return parts

    def parse_table(self, cursor: _Cursor) -> Table | None:
        cursor.advance()
        if cursor.accept_word("IF"):
            cursor.expect_word("NOT")
            cursor.expect_word("EXISTS")

        name_token = cursor.peek()
        parts = self.parse_qualified_name(cursor, "table name")
        if not cursor.peek().is_symbol("("):
            logger.debug("Skipping CREATE TABLE %s without a column list", ".".join(parts))
            return None

        table = Table(
            name=parts[-1],
            schema=".".join(parts[:-1]) or None,
            line=name_token.line,
            column=name_token.column,
        )
        open_paren = cursor.peek()
        body = cursor.balanced_group()

        for element in split_on_commas(body):
            if not element:
                raise cursor.error(f"Empty element in table '{table.name}'", open_paren)
            if _is_table_constraint(element):
                table.constraints.append(self.parse_table_constraint(_Cursor(element)))
            else:
                table.columns.append(self.parse_column(_Cursor(element)))

        if not cursor.at_end():
            logger.debug("Ignoring table options for %s: %s", table.name, render_tokens(cursor.rest()))
        return table

    def parse_create_type(self, cursor: _Cursor) -> EnumType | None:
        cursor.advance()
        name_token = cursor.peek()
        parts = self.parse_qualified_name(cursor, "type name")

        if not (cursor.accept_word("AS") and cursor.accept_word("ENUM")):
            logger.debug("Skipping CREATE TYPE %s (not an enum)", ".".join(parts))
            return None

        values = self.read_string_list(cursor)
        return EnumType(
            name=parts[-1],
            values=values,
            schema=".".join(parts[:-1]) or None,
            line=name_token.line,
            column=name_token.column,
        )

    def read_string_list(self, cursor: _Cursor) -> list[str]:
        values = []
        for part in split_on_commas(cursor.balanced_group()):
            if len(part) != 1 or part[0].kind != SqlTokenKind.STRING:
                token = part[0] if part else cursor.peek()
                raise cursor.error("Enum values must be string literals", token)
            values.append(part[0].value)
        return values

    # -- columns --------------------------------------------------------------

    def parse_column(self, cursor: _Cursor) -> Column:
        name_token = cursor.expect_identifier("column name")
        if cursor.at_end() or cursor.peek().upper in TYPELESS_COLUMN_WORDS:
            raise cursor.error(f"Column '{name_token.value}' has no type", name_token)

        column_type = self.parse_column_type(cursor)
        constraints = self.parse_column_constraints(cursor)
        return Column(
            name=name_token.value,
            type=column_type,
            constraints=constraints,
            line=name_token.line,
            column=name_token.column,
        )

    def parse_column_type(self, cursor: _Cursor) -> SqlColumnType:
        words = [cursor.expect_identifier("column type").value]
        while cursor.accept_symbol("."):
            words[-1] += "." + cursor.expect_identifier("type name").value

        args: list[str] | None = None
        enum_values: list[str] | None = None
        while True:
            token = cursor.peek()
            if token.is_symbol("(") and args is None:
                if len(words) == 1 and words[0].upper() == "ENUM":
                    enum_values = self.read_string_list(cursor)
                    args = [f"'{v}'" for v in enum_values]
                else:
                    args = [render_tokens(part) for part in split_on_commas(cursor.balanced_group())]
                continue
            if token.kind == SqlTokenKind.WORD:
                candidate = " ".join(w.upper() for w in (*words, token.value))
                if any(m == candidate or m.startswith(candidate + " ") for m in MULTI_WORD_TYPES):
                    words.append(cursor.advance().value)
                    continue
            break

        unsigned = False
        while cursor.peek().is_word("UNSIGNED", "SIGNED", "ZEROFILL"):
            if cursor.advance().upper == "UNSIGNED":
                unsigned = True

        array_depth = 0
        while True:
            if cursor.peek().is_symbol("["):
                self.read_array_suffix(cursor)
            elif cursor.accept_word("ARRAY"):
                if cursor.peek().is_symbol("["):
                    self.read_array_suffix(cursor)
            else:
                break
            array_depth += 1

        return SqlColumnType(
            name=" ".join(words),
            args=args or [],
            array_depth=array_depth,
            unsigned=unsigned,
            enum_values=enum_values,
        )

    def read_array_suffix(self, cursor: _Cursor) -> None:
        cursor.expect_symbol("[")
        if cursor.peek().kind == SqlTokenKind.NUMBER:
            cursor.advance()
        cursor.expect_symbol("]")

    def parse_column_constraints(self, cursor: _Cursor) -> list[ColumnConstraint]:
        constraints: list[ColumnConstraint] = []

        def add(kind: ColumnConstraintKind, value: str | None = None) -> None:
            constraints.append(ColumnConstraint(kind=kind, value=value))

        while not cursor.at_end():
            token = cursor.peek()
            word = token.upper

            if word == "PRIMARY":
                cursor.advance()
                cursor.expect_word("KEY")
                add(ColumnConstraintKind.PRIMARY_KEY)
            elif word == "KEY":
                cursor.advance()
                add(ColumnConstraintKind.PRIMARY_KEY)
            elif word == "NOT":
                cursor.advance()
                if cursor.accept_word("NULL"):
                    add(ColumnConstraintKind.NOT_NULL)
                else:
                    cursor.expect_word("DEFERRABLE")
            elif word == "NULL":
                cursor.advance()
                add(ColumnConstraintKind.NULL)
            elif word == "UNIQUE":
                cursor.advance()
                cursor.accept_word("KEY")
                add(ColumnConstraintKind.UNIQUE)
            elif word in ("AUTO_INCREMENT", "AUTOINCREMENT", "IDENTITY"):
                cursor.advance()
                if cursor.peek().is_symbol("("):
                    cursor.balanced_group()
                add(ColumnConstraintKind.AUTO_INCREMENT)
            elif word == "DEFAULT":
                cursor.advance()
                add(ColumnConstraintKind.DEFAULT, render_tokens(self.read_expression(cursor)))
            elif word == "REFERENCES":
                cursor.advance()
                add(ColumnConstraintKind.REFERENCES, self.read_reference(cursor))
            elif word == "CHECK":
                cursor.advance()
                add(ColumnConstraintKind.CHECK, render_tokens(cursor.balanced_group()))
            elif word == "CONSTRAINT":
                cursor.advance()
                add(ColumnConstraintKind.CONSTRAINT, cursor.expect_identifier("constraint name").value)
            elif word == "COLLATE":
                cursor.advance()
                collation = cursor.advance()
                if collation.kind == SqlTokenKind.EOF:
                    raise cursor.error("Expected collation name")
                add(ColumnConstraintKind.COLLATE, collation.value)
            elif word in ("GENERATED", "AS"):
                add(ColumnConstraintKind.GENERATED, self.read_generated(cursor))
            elif word == "COMMENT":
                cursor.advance()
                if cursor.peek().kind != SqlTokenKind.STRING:
                    raise cursor.error("Expected comment string")
                add(ColumnConstraintKind.COMMENT, cursor.advance().value)
            elif word == "ON":
                cursor.advance()
                clause = render_tokens(self.read_expression(cursor))
                logger.debug("Dropping column clause ON %s", clause)
            elif word in ("CHARACTER", "CHARSET"):
                cursor.advance()
                if word == "CHARACTER":
                    cursor.expect_word("SET")
                charset = cursor.expect_identifier("character set").value
                logger.debug("Dropping character set %s", charset)
            elif word in IGNORED_COLUMN_WORDS:
                cursor.advance()
            else:
                raise cursor.error(f"Unexpected '{token.value}' in column definition")

        return constraints

    def read_expression(self, cursor: _Cursor) -> list[SqlToken]:
        """Consume tokens up to the next column constraint keyword."""
        tokens: list[SqlToken] = []
        while not cursor.at_end():
            token = cursor.peek()
            if tokens and token.upper in CONSTRAINT_STARTS:
                break
            if token.is_symbol("("):
                tokens.extend(cursor.balanced_group(include_parens=True))
            else:
                tokens.append(cursor.advance())
        if not tokens:
            raise cursor.error("Expected expression")
        return tokens

    def read_reference(self, cursor: _Cursor) -> str:
        target = ".".join(self.parse_qualified_name(cursor, "referenced table"))
        if cursor.peek().is_symbol("("):
            target += f"({render_tokens(cursor.balanced_group())})"

        while True:
            if cursor.peek().is_word("ON") and cursor.peek(1).is_word("DELETE", "UPDATE"):
                cursor.advance()
                cursor.advance()
                if cursor.accept_word("SET"):
                    cursor.expect_word("NULL", "DEFAULT")
                elif cursor.accept_word("NO"):
                    cursor.expect_word("ACTION")
                else:
                    cursor.expect_word("CASCADE", "RESTRICT")
            elif cursor.accept_word("MATCH"):
                cursor.expect_word("FULL", "PARTIAL", "SIMPLE")
            elif cursor.accept_word("DEFERRABLE"):
                pass
            elif cursor.accept_word("INITIALLY"):
                cursor.expect_word("DEFERRED", "IMMEDIATE")
            else:
                return target

    def read_generated(self, cursor: _Cursor) -> str:
        tokens = [cursor.advance()]
        while not cursor.at_end():
            token = cursor.peek()
            if token.is_symbol("("):
                tokens.extend(cursor.balanced_group(include_parens=True))
            elif token.is_word("ALWAYS", "BY", "DEFAULT", "ON", "NULL", "AS", "IDENTITY", "STORED", "VIRTUAL"):
                tokens.append(cursor.advance())
            else:
                break
        return render_tokens(tokens)

    # -- table constraints ----------------------------------------------------

    def parse_table_constraint(self, cursor: _Cursor) -> TableConstraint:
        name = None
        if cursor.accept_word("CONSTRAINT"):
            name = cursor.expect_identifier("constraint name").value

        token = cursor.advance()
        word = token.upper
        columns: list[str] = []
        expression = None

        if word == "PRIMARY":
            cursor.expect_word("KEY")
            kind = TableConstraintKind.PRIMARY_KEY
            columns = self.read_column_list(cursor)
        elif word == "UNIQUE":
            kind = TableConstraintKind.UNIQUE
            cursor.accept_word("KEY", "INDEX")
            self.skip_index_name(cursor)
            columns = self.read_column_list(cursor)
        elif word == "FOREIGN":
            cursor.expect_word("KEY")
            kind = TableConstraintKind.FOREIGN_KEY
            self.skip_index_name(cursor)
            columns = self.read_column_list(cursor)
            if cursor.accept_word("REFERENCES"):
                expression = self.read_reference(cursor)
        elif word == "CHECK":
            kind = TableConstraintKind.CHECK
            expression = render_tokens(cursor.balanced_group())
        elif word in ("KEY", "INDEX", "FULLTEXT", "SPATIAL"):
            kind = TableConstraintKind.INDEX
            cursor.accept_word("KEY", "INDEX")
            self.skip_index_name(cursor)
            columns = self.read_column_list(cursor)
        elif word in ("EXCLUDE", "LIKE"):
            kind = TableConstraintKind(word.lower())
            expression = render_tokens(cursor.rest())
        else:
            raise cursor.error("Expected table constraint", token)

        if not cursor.at_end():
            logger.debug("Ignoring trailing constraint text: %s", render_tokens(cursor.rest()))

        return TableConstraint(kind=kind, columns=columns, expression=expression, name=name)

    def skip_index_name(self, cursor: _Cursor) -> None:
        if cursor.peek().is_identifier:
            cursor.advance()

    def read_column_list(self, cursor: _Cursor) -> list[str]:
        names = []
        for part in split_on_commas(cursor.balanced_group()):
            if not part or not part[0].is_identifier:
                raise cursor.error("Expected column name in key list")
            names.append(part[0].value)
        return names


def parse_ddl(content: str, dialect: SqlDialect = SqlDialect.GENERIC) -> SqlSchema:
    """Convenience function to parse DDL content."""
    return DDLFrontEnd(ProviderConfig(dialect=dialect)).parse(content)

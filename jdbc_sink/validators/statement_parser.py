"""Mapping statement parser.

Turns one export statement into a ``ParsedStatement``:

    INSERT INTO orders SELECT id, amount AS total FROM orders_topic PK id AUTOCREATE

Grammar (keywords are case-insensitive):

    (INSERT | UPSERT) INTO <table>
    SELECT <* | field [AS alias]> [, ...]
    FROM <source>
    [IGNORE field [, ...]]
    [PK field [, ...]]
    [AUTOCREATE] [AUTOEVOLVE] [CAPITALIZE]

Identifiers may contain letters, digits, ``_``, ``.``, ``-`` and ``$``.
Anything else (including keywords) can be quoted with backticks.

Parsing never raises for bad input. ``parse_statement`` returns either a
``ParsedStatement`` or a ``StatementSyntaxError`` value naming the statement.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

STATEMENT_SEPARATOR = ";"

WRITE_MODE_TOKENS = ("INSERT", "UPSERT")

_FLAG_KEYWORDS = {
    "AUTOCREATE": "auto_create",
    "AUTOEVOLVE": "auto_evolve",
    "CAPITALIZE": "capitalize",
    "CAPITALIZENAMES": "capitalize",
}

KEYWORDS = frozenset({
    *WRITE_MODE_TOKENS,
    "INTO", "SELECT", "FROM", "AS", "IGNORE", "PK",
    *_FLAG_KEYWORDS,
})

# One token per match: backtick-quoted identifier, bare word, '*' or ','
_TOKEN_PATTERN = re.compile(r"\s*(?:`([^`]*)`|([A-Za-z0-9_.$\-]+)|(\*)|(,))")


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ParsedStatement:
    """Structured form of a single mapping statement.

    Attributes:
        target: Destination table name.
        source: Source stream (topic) name.
        include_all_fields: True when ``*`` was selected.
        field_aliases: ``(field, alias)`` pairs in select order. A field
            without ``AS`` is paired with itself.
        primary_keys: Names listed after ``PK``.
        ignored_fields: Names listed after ``IGNORE``.
        write_mode: ``"INSERT"`` or ``"UPSERT"``.
        auto_create: ``AUTOCREATE`` was given.
        auto_evolve: ``AUTOEVOLVE`` was given.
        capitalize: ``CAPITALIZE`` was given.
    """

    target: str
    source: str
    include_all_fields: bool
    field_aliases: tuple[tuple[str, str], ...]
    primary_keys: tuple[str, ...]
    ignored_fields: tuple[str, ...] = ()
    write_mode: str = "INSERT"
    auto_create: bool = False
    auto_evolve: bool = False
    capitalize: bool = False


@dataclass(frozen=True)
class StatementSyntaxError:
    """A statement that could not be parsed.

    Attributes:
        statement: Offending statement text, exactly as given.
        reason: What was wrong with it.
    """

    statement: str
    reason: str

    def __str__(self) -> str:
        return f"{self.reason}: {self.statement}"


ParseResult = ParsedStatement | StatementSyntaxError


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Token:
    text: str
    quoted: bool = False

    @property
    def keyword(self) -> str | None:
        if self.quoted:
            return None
        upper = self.text.upper()
        return upper if upper in KEYWORDS else None


class _ParseError(Exception):
    """Internal: aborts parsing of the current statement."""


def tokenize(statement: str) -> list[_Token]:
    """Split a statement into tokens.

    Raises:
        _ParseError: On a character no token can start with.
    """
    tokens: list[_Token] = []
    pos = 0
    length = len(statement)

    while pos < length:
        if statement[pos:].strip() == "":
            break
        match = _TOKEN_PATTERN.match(statement, pos)
        if match is None:
            offset = pos + len(statement[pos:]) - len(statement[pos:].lstrip())
            raise _ParseError(
                f"Unexpected character '{statement[offset]}' at position {offset}"
            )
        quoted, word, star, comma = match.groups()
        if quoted is not None:
            if not quoted:
                raise _ParseError(f"Empty quoted identifier at position {match.start(1) - 1}")
            tokens.append(_Token(quoted, quoted=True))
        else:
            tokens.append(_Token(word or star or comma))
        pos = match.end()

    return tokens


class _TokenStream:
    """Cursor over the token list with grammar-level helpers."""

    def __init__(self, tokens: list[_Token]) -> None:
        self._tokens = tokens
        self._pos = 0

    def at_end(self) -> bool:
        return self._pos >= len(self._tokens)

    def peek(self) -> _Token | None:
        return None if self.at_end() else self._tokens[self._pos]

    def next(self, expected: str) -> _Token:
        token = self.peek()
        if token is None:
            raise _ParseError(f"Unexpected end of statement, expected {expected}")
        self._pos += 1
        return token

    def expect_keyword(self, *keywords: str) -> str:
        token = self.next(" or ".join(keywords))
        if token.keyword not in keywords:
            raise _ParseError(
                f"Expected {' or '.join(keywords)} but found '{token.text}'"
            )
        return token.keyword

    def accept(self, text: str) -> bool:
        token = self.peek()
        if token is not None and not token.quoted and token.text.upper() == text:
            self._pos += 1
            return True
        return False

    def identifier(self, what: str) -> str:
        token = self.next(what)
        if token.keyword is not None or (not token.quoted and token.text in ("*", ",")):
            raise _ParseError(f"Expected {what} but found '{token.text}'")
        return token.text

    def identifier_list(self, what: str) -> tuple[str, ...]:
        names = [self.identifier(what)]
        while self.accept(","):
            names.append(self.identifier(what))
        return tuple(names)


# ---------------------------------------------------------------------------
# Grammar
# ---------------------------------------------------------------------------


def _parse_select_list(stream: _TokenStream) -> tuple[bool, tuple[tuple[str, str], ...]]:
    include_all = False
    aliases: list[tuple[str, str]] = []

    while True:
        if stream.accept("*"):
            if include_all:
                raise _ParseError("'*' selected more than once")
            include_all = True
        else:
            field_name = stream.identifier("field name")
            alias = stream.identifier("alias") if stream.accept("AS") else field_name
            aliases.append((field_name, alias))
        if not stream.accept(","):
            break

    return include_all, tuple(aliases)


def _parse(statement: str) -> ParsedStatement:
    stream = _TokenStream(tokenize(statement))

    write_mode = stream.expect_keyword(*WRITE_MODE_TOKENS)
    stream.expect_keyword("INTO")
    target = stream.identifier("table name")
    stream.expect_keyword("SELECT")
    include_all, field_aliases = _parse_select_list(stream)
    stream.expect_keyword("FROM")
    source = stream.identifier("source name")

    clauses: dict[str, object] = {}
    while not stream.at_end():
        keyword = stream.expect_keyword("IGNORE", "PK", *_FLAG_KEYWORDS)
        clause = _FLAG_KEYWORDS.get(keyword, keyword)
        if clause in clauses:
            raise _ParseError(f"Duplicate {keyword} clause")
        if keyword == "IGNORE":
            clauses[clause] = stream.identifier_list("ignored field name")
        elif keyword == "PK":
            clauses[clause] = stream.identifier_list("primary key field")
        else:
            clauses[clause] = True

    return ParsedStatement(
        target=target,
        source=source,
        include_all_fields=include_all,
        field_aliases=field_aliases,
        primary_keys=clauses.get("PK", ()),  # type: ignore[arg-type]
        ignored_fields=clauses.get("IGNORE", ()),  # type: ignore[arg-type]
        write_mode=write_mode,
        auto_create="auto_create" in clauses,
        auto_evolve="auto_evolve" in clauses,
        capitalize="capitalize" in clauses,
    )


def parse_statement(statement: str) -> ParseResult:
    """Parse a single mapping statement.

    Args:
        statement: One statement, without the ``;`` separator.

    Returns:
        ParsedStatement on success, StatementSyntaxError otherwise.

    Examples:
        >>> parse_statement("INSERT INTO t SELECT * FROM topic").target
        't'

        >>> parse_statement("INSERT t").reason
        "Expected INTO but found 't'"
    """
    if STATEMENT_SEPARATOR in statement:
        return StatementSyntaxError(
            statement,
            f"A statement cannot contain the '{STATEMENT_SEPARATOR}' separator",
        )
    if not statement.strip():
        return StatementSyntaxError(statement, "Empty mapping statement")

    try:
        return _parse(statement)
    except _ParseError as e:
        return StatementSyntaxError(statement, str(e))

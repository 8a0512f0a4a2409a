"""An in-memory database of typed tables answering a small query language."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from treebase.avltree import AvlTree
from treebase.btree import BTree, Entry
from treebase.minheap import MinHeap
from treebase.query import (
    Timestamp,
    decode_string,
    encode_string,
    is_integer,
    parse_integer,
    parse_timestamp,
    split_condition,
    tokenize,
)

COMMANDS = ("CREATE", "INSERT", "DELETE", "UPDATE", "SELECT")

NO_TABLE = "there is no table with this name or wrong syntax!"
NO_TABLE_SELECT = "there is no table with this name!"
NOT_ENOUGH_INPUT = "there isn't enough input for inserting!"
NOT_ENOUGH_UPDATE = "there isn't enough input for updating!"
INSERT_STRING = 'you\'re input should be string! like "ali"'
INSERT_INTEGER = "you're input should be integer!"
INSERT_TIMESTAMP = "you're input should be timestamp of youre input is not valid!"
SHOULD_BE_INTEGER = "should be integer"
SHOULD_BE_TIME = "should be time and valid"
BAD_STRING = "strings may hold only lowercase letters and digits"
BAD_OPERATOR = "wrong syntax(just use < or > or ==)"
WRONG_SYNTAX = "Wrong syntax"
UNKNOWN_COMMAND = "wrong input:( \n try again:"


class QueryError(Exception):
    """A query that cannot be carried out; the message is meant for the user."""


class ColumnType(Enum):
    """The types a column may hold."""

    INT = "int"
    STRING = "string"
    TIMESTAMP = "timestamp"


def _strip_quotes(text: str) -> str:
    return text[1:-1]


@dataclass
class Table:
    """A table stored column by column, one B-tree per column.

    The entries of a row are linked into a ring starting at the id column,
    so any entry found in a column leads to the rest of its row.
    """

    name: str
    columns: list[str]
    types: list[ColumnType]
    max_degree: int = 3
    trees: list[BTree] = field(init=False, repr=False)
    free_ids: MinHeap = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if len(self.columns) != len(self.types):
            raise ValueError("every column needs exactly one type")
        self.trees = [BTree(self.max_degree) for _ in self.columns]
        self.free_ids = MinHeap([1])

    def column_index(self, name: str) -> int:
        """Return the index of the column ``name``; unknown names give 0 (id)."""
        return next((i for i, column in enumerate(self.columns) if column == name), 0)

    def encode(self, column: int, text: str) -> int:
        """Turn the text of a value into the integer stored for ``column``."""
        kind = self.types[column]
        if kind is ColumnType.INT:
            if not is_integer(text):
                raise QueryError(SHOULD_BE_INTEGER)
            return parse_integer(text)
        if kind is ColumnType.TIMESTAMP:
            try:
                return parse_timestamp(text).key()
            except ValueError:
                raise QueryError(SHOULD_BE_TIME) from None
        try:
            return encode_string(_strip_quotes(text))
        except ValueError:
            raise QueryError(BAD_STRING) from None

    def _validate_insert(self, column: int, text: str) -> None:
        kind = self.types[column]
        if kind is ColumnType.STRING:
            if not (text.startswith('"') and text.endswith('"')):
                raise QueryError(INSERT_STRING)
        elif kind is ColumnType.INT:
            if not is_integer(text):
                raise QueryError(INSERT_INTEGER)
        else:
            try:
                parse_timestamp(text)
            except ValueError:
                raise QueryError(INSERT_TIMESTAMP) from None

    def _insert_row(self, texts: list[str]) -> int:
        for column, text in enumerate(texts, start=1):
            self._validate_insert(column, text)
        values = [self.encode(column, text) for column, text in enumerate(texts, start=1)]
        row_id = self.free_ids.pop()
        if not len(self.free_ids):
            self.free_ids.push(row_id + 1)
        first = self.trees[0].insert(row_id)
        previous = first
        for tree, value in zip(self.trees[1:], values):
            entry = tree.insert(value)
            previous.next = entry
            previous = entry
        previous.next = first
        return row_id

    def _ring(self, row: Entry) -> list[Entry]:
        entries = [row]
        for _ in range(len(self.columns) - 1):
            nxt = entries[-1].next
            assert nxt is not None
            entries.append(nxt)
        return entries

    @staticmethod
    def _advance(entry: Entry, steps: int) -> Entry:
        for _ in range(steps):
            assert entry.next is not None
            entry = entry.next
        return entry

    def _matching(self, text: str) -> list[Entry]:
        condition = split_condition(text)
        index = self.column_index(condition.column)
        value = self.encode(index, condition.operand)
        tree = self.trees[index]
        if condition.operator in ("==", "<"):
            entries = tree.scan_ascending(value, condition.operator)
        elif condition.operator == ">":
            entries = tree.scan_descending(value, ">")
        else:
            raise QueryError(BAD_OPERATOR)
        steps = (len(self.columns) - index) % len(self.columns)
        return [self._advance(entry, steps) for entry in entries]

    def _rows_where(self, parts: list[str]) -> list[Entry]:
        if len(parts) == 1:
            return self._matching(parts[0])
        if len(parts) == 3 and parts[1][:1] in ("&", "|"):
            first = self._matching(parts[0])
            second = self._matching(parts[2])
            if parts[1].startswith("&"):
                keep = set(second)
                return [row for row in first if row in keep]
            seen = set(first)
            return first + [row for row in second if row not in seen]
        raise QueryError(WRONG_SYNTAX)

    def _delete_row(self, row: Entry) -> None:
        for tree, entry in zip(self.trees, self._ring(row)):
            tree.delete_entry(entry)
        self.free_ids.push(row.value)

    def _update_row(self, row: Entry, values: list[int]) -> None:
        previous = row
        for tree, value in zip(self.trees[1:], values):
            assert previous.next is not None
            replacement = tree.update_entry(previous.next, value)
            previous.next = replacement
            previous = replacement

    def _format(self, column: int, value: int) -> str:
        kind = self.types[column]
        if kind is ColumnType.TIMESTAMP:
            return str(Timestamp.from_key(value))
        if kind is ColumnType.STRING:
            return decode_string(value)
        return str(value)

    def _render(self, row: Entry, selected: list[bool]) -> str:
        return " ".join(
            self._format(column, entry.value)
            for column, entry in enumerate(self._ring(row))
            if selected[column]
        )


class Database:
    """A set of tables indexed by name, driven by query lines."""

    def __init__(self, max_degree: int = 3) -> None:
        self._tables = AvlTree()
        self._max_degree = max_degree

    def _table(self, name: str, message: str = NO_TABLE) -> Table:
        table = self._tables.find(name)
        if table is None:
            raise QueryError(message)
        return table

    def create_table(self, tokens: list[str], size: int) -> None:
        """Create a table from ``CREATE TABLE name (col type, ...)`` tokens.

        ``size`` is the number of comma-separated column definitions; an
        ``id`` column of type int is always added in front.
        """
        if len(tokens) < 3:
            raise QueryError(WRONG_SYNTAX)
        definitions = tokens[3:]
        names = definitions[0::2]
        type_names = definitions[1::2]
        if len(names) != size or len(type_names) != size:
            raise QueryError(WRONG_SYNTAX)
        try:
            types = [ColumnType(type_name) for type_name in type_names]
        except ValueError:
            raise QueryError(WRONG_SYNTAX) from None
        table = Table(
            tokens[2],
            ["id", *names],
            [ColumnType.INT, *types],
            self._max_degree,
        )
        self._tables.insert(table.name, table)

    def insert(self, tokens: list[str]) -> int:
        """Insert a row from ``INSERT INTO name VALUES (...)`` tokens; return its id."""
        if len(tokens) < 3:
            raise QueryError(NO_TABLE)
        table = self._table(tokens[2])
        if len(tokens) - 3 != len(table.columns):
            raise QueryError(NOT_ENOUGH_INPUT)
        return table._insert_row(tokens[4:])

    def delete(self, tokens: list[str]) -> int:
        """Delete the rows matching ``DELETE FROM name WHERE ...``; return their count."""
        if len(tokens) < 3:
            raise QueryError(NO_TABLE)
        table = self._table(tokens[2])
        if len(tokens) not in (5, 7):
            raise QueryError(WRONG_SYNTAX)
        rows = table._rows_where(tokens[4:])
        for row in rows:
            table._delete_row(row)
        return len(rows)

    def update(self, tokens: list[str]) -> int:
        """Rewrite the rows matching ``UPDATE name SET (...) WHERE ...``; return their count."""
        if len(tokens) < 2:
            raise QueryError(NO_TABLE)
        table = self._table(tokens[1])
        if "WHERE" not in tokens:
            raise QueryError(WRONG_SYNTAX)
        where = tokens.index("WHERE")
        texts = tokens[3:where]
        if len(texts) != len(table.columns) - 1:
            raise QueryError(NOT_ENOUGH_UPDATE)
        values = [table.encode(column, text) for column, text in enumerate(texts, start=1)]
        rows = table._rows_where(tokens[where + 1:])
        for row in rows:
            table._update_row(row, values)
        return len(rows)

    def select(self, tokens: list[str]) -> list[str]:
        """Return the matching rows of ``SELECT cols FROM name WHERE ...``, by id."""
        if "FROM" not in tokens:
            raise QueryError(WRONG_SYNTAX)
        source = tokens.index("FROM")
        if source + 1 >= len(tokens):
            raise QueryError(WRONG_SYNTAX)
        table = self._table(tokens[source + 1], NO_TABLE_SELECT)
        if tokens[1:2] == ["*"]:
            selected = [True] * len(table.columns)
        else:
            wanted = set(tokens[1:source])
            selected = [column in wanted for column in table.columns]
        if "WHERE" not in tokens[source:]:
            raise QueryError(WRONG_SYNTAX)
        where = tokens.index("WHERE", source)
        rows = sorted(table._rows_where(tokens[where + 1:]), key=lambda row: row.value)
        return [table._render(row, selected) for row in rows]

    def execute(self, line: str) -> list[str]:
        """Run one query line and return the lines it prints."""
        tokens, size = tokenize(line)
        command = tokens[0]
        if command == "CREATE":
            self.create_table(tokens, size)
        elif command == "INSERT":
            self.insert(tokens)
        elif command == "DELETE":
            self.delete(tokens)
        elif command == "UPDATE":
            self.update(tokens)
        elif command == "SELECT":
            return self.select(tokens)
        else:
            raise QueryError(UNKNOWN_COMMAND)
        return []
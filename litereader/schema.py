"""Column information parsed from CREATE TABLE statements."""

from __future__ import annotations

from dataclasses import dataclass, field

from .varint import FormatError


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    index: int
    is_primary_key: bool


@dataclass
class TableSchema:
    columns: list[ColumnInfo] = field(default_factory=list)

    @classmethod
    def from_create_sql(cls, sql: str) -> TableSchema:
        """Read the column names out of a CREATE TABLE statement."""
        start = sql.find("(")
        if start < 0:
            raise FormatError("No opening parenthesis found in CREATE TABLE statement")
        end = sql.rfind(")")
        if end < 0:
            raise FormatError("No closing parenthesis found in CREATE TABLE statement")
        if start >= end:
            raise FormatError("Invalid parentheses in CREATE TABLE statement")

        columns = []
        for index, part in enumerate(sql[start + 1 : end].split(",")):
            definition = part.strip()
            words = definition.split()
            if words:
                columns.append(
                    ColumnInfo(
                        name=words[0],
                        index=index,
                        is_primary_key="primary key" in definition.lower(),
                    )
                )
        return cls(columns)

    def column_index(self, name: str) -> int | None:
        """Index of the column with this name, compared case-insensitively."""
        wanted = name.lower()
        return next(
            (column.index for column in self.columns if column.name.lower() == wanted),
            None,
        )
from __future__ import annotations

from typing import Optional


class JSONSemanticError(Exception):
    """Base class for everything the comparison engine raises."""

    def to_dict(self) -> dict:
        return {"error": "invalid_json", "message": str(self)}


class ParseError(JSONSemanticError):
    """Malformed JSON text."""

    def __init__(
        self,
        message: str,
        position: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        self.message = message
        self.position = position
        self.line = line
        self.column = column
        if line is not None and column is not None:
            super().__init__(f"{message}: line {line} column {column} (char {position})")
        else:
            super().__init__(message)

    def to_dict(self) -> dict:
        return {
            "error": "parse_error",
            "message": self.message,
            "position": self.position,
            "line": self.line,
            "column": self.column,
        }


class DepthExceeded(JSONSemanticError):
    """Input nested deeper than the configured limit."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"JSON value is too deeply nested (limit {limit})")

    def to_dict(self) -> dict:
        return {
            "error": "too_deeply_nested",
            "message": str(self),
            "limit": self.limit,
        }

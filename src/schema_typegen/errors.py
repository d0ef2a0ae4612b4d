"""Error taxonomy for the type generation pipeline.

All errors derive from ``TypegenError`` (itself a ``ValueError``) so callers can
catch one exception type per schema unit and carry on with the next one.
"""

from typing import Any


class TypegenError(ValueError):
    """Base class for every error raised by schema_typegen."""

    def to_dict(self) -> dict[str, Any]:
        return {"error": type(self).__name__, "message": str(self)}


class ParseError(TypegenError):
    """A front-end could not parse its input.

    Carries the position of the offending token when it is known.
    """

    def __init__(
        self,
        message: str,
        line: int | None = None,
        column: int | None = None,
        token: str | None = None,
    ):
        self.message = message
        self.line = line
        self.column = column
        self.token = token
        super().__init__(self._format())

    def _format(self) -> str:
        location = ""
        if self.line is not None:
            location = f"line {self.line}"
            if self.column is not None:
                location += f", column {self.column}"
            location = f" ({location})"
        near = f" near '{self.token}'" if self.token else ""
        return f"{self.message}{near}{location}"

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result.update({"line": self.line, "column": self.column, "token": self.token})
        return result


class ResolutionError(TypegenError):
    """The input is neither inline schema text nor a readable file."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        super().__init__(message)


class GenerationError(TypegenError):
    """The canonical schema could not be projected into target declarations."""

    def __init__(self, message: str, type_name: str | None = None):
        self.type_name = type_name
        super().__init__(message)

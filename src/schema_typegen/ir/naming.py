"""Naming helpers: case conversion and collision-free type names."""

import re
from enum import Enum
from typing import Iterable


_WORD_SPLIT = re.compile(r"[^0-9A-Za-z]+")


def to_pascal_case(name: str) -> str:
    """Convert an identifier to PascalCase.

    ``UNKNOWN`` -> ``Unknown``, ``STATUS_ACTIVE`` -> ``StatusActive``,
    ``server_config`` -> ``ServerConfig``, ``userId`` -> ``UserId``.
    Mixed-case words keep their inner capitals.
    """
    words = [w for w in _WORD_SPLIT.split(name) if w]
    parts = []
    for word in words:
        if word.isupper() or word.islower():
            parts.append(word[0].upper() + word[1:].lower())
        else:
            parts.append(word[0].upper() + word[1:])
    result = "".join(parts)
    if not result:
        return "_"
    if result[0].isdigit():
        return f"_{result}"
    return result


class NamingStrategy(str, Enum):
    """How source names become target type and variant names."""

    PASCAL = "pascal"
    PRESERVE = "preserve"

    def apply(self, name: str) -> str:
        if self is NamingStrategy.PASCAL:
            return to_pascal_case(name)
        return name


class TypeNamer:
    """Hands out unique type names within one module.

    Names are compared by their PascalCase form, so ``user_status`` and
    ``UserStatus`` count as the same name. A candidate that is taken falls
    through to the next one; when all are taken the last candidate gets a
    numeric suffix starting at 2.
    """

    def __init__(self, reserved: Iterable[str] = ()):
        self._taken: set[str] = set()
        for name in reserved:
            self.reserve(name)

    @staticmethod
    def _key(name: str) -> str:
        return to_pascal_case(name)

    def reserve(self, name: str) -> None:
        self._taken.add(self._key(name))

    def is_taken(self, name: str) -> bool:
        return self._key(name) in self._taken

    def claim(self, *candidates: str) -> str:
        if not candidates:
            raise ValueError("claim() needs at least one candidate name")

        for candidate in candidates:
            if not self.is_taken(candidate):
                self.reserve(candidate)
                return candidate

        base = candidates[-1]
        counter = 2
        while self.is_taken(f"{base}{counter}"):
            counter += 1
        name = f"{base}{counter}"
        self.reserve(name)
        return name

    def hoisted(self, parent: str, field_name: str, suffix: str = "") -> str:
        """Claim the name for a structure hoisted out of ``parent.field_name``."""
        return self.claim(f"{to_pascal_case(parent)}{to_pascal_case(field_name)}{suffix}")

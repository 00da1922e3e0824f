from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from .parser import ParsedTree, Parser


@dataclass(slots=True)
class ConfigTree:
    raw: ParsedTree
    separator: str = Parser.category_separator

    def get(self, *path: str, default: str | None = None) -> str | None:
        return self.raw.get(self._join(path), default)

    def has_section(self, *path: str) -> bool:
        """True when ``path`` names a section.

        The flat tree stores sections as empty values, so an entry holding
        an empty string is indistinguishable from an empty section.
        """
        if not path:
            return True
        return self.raw.get(self._join(path)) == ""

    def section(self, *path: str) -> ConfigTree:
        if not path:
            return self
        prefix = self._join(path) + self.separator
        return ConfigTree(
            {key[len(prefix):]: value for key, value in self.raw.items() if key.startswith(prefix)},
            self.separator,
        )

    def keys(self) -> list[str]:
        names: list[str] = []
        for key in self.raw:
            name = key.split(self.separator, 1)[0]
            if name not in names:
                names.append(name)
        return names

    def missing(self, *paths: tuple[str, ...]) -> Iterable[tuple[str, ...]]:
        """Yield the requested paths, given as segment tuples, that are absent."""
        for path in paths:
            if self._join(path) not in self.raw:
                yield path

    def _join(self, path: Iterable[str]) -> str:
        return self.separator.join(path)

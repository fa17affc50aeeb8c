from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from ..common.validators import require_non_empty, require_unique


@dataclass(frozen=True)
class Roster:
    """Fixed ordered list of students eligible for a session.

    Students are addressed by a stable integer id (their position in ``names``);
    ``index_of`` is the parallel name lookup.
    """

    names: tuple[str, ...]
    _ids: dict[str, int] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        cleaned = require_unique((require_non_empty(n, "student name") for n in self.names), "roster")
        object.__setattr__(self, "names", tuple(cleaned))
        object.__setattr__(self, "_ids", {name: i for i, name in enumerate(cleaned)})

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "Roster":
        return cls(tuple(names))

    def index_of(self, name: str) -> Optional[int]:
        return self._ids.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._ids

    def __iter__(self) -> Iterator[str]:
        return iter(self.names)

    def __len__(self) -> int:
        return len(self.names)

"""Record types shared by the binding tests."""

from dataclasses import dataclass, field
from typing import List, Optional

from ormy import column


@dataclass
class Thing:
    """A record with every field mapped by a column annotation."""

    col: str = column("col", default="")
    two: str = column("two", default="")


@dataclass
class Measurement:
    """A record mixing annotated and plain fields."""

    name: str
    value: float = column("reading", default=0.0)
    count: Optional[int] = None
    active: bool = False
    tags: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class FrozenThing:
    """A record that cannot be populated."""

    col: str = ""

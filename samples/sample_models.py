"""Runtime types of the sample entity catalog."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Owner:
    name: str
    email: str | None = None


@dataclass
class Widget:
    id: str
    name: str
    price: float
    owner: Owner
    tags: list[str] = field(default_factory=list)
    labels: dict[str, str] | None = None

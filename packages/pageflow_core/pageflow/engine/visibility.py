"""Header/footer visibility rules.

A policy answers one question, ``should_show(page_number)``, and holds no
state between calls. Supported rules:

- ``"all"``: every page
- ``"first"``: page 1 only
- ``"all-except-first"``: every page but page 1
- ``"none"``: no page
- an iterable of page numbers: membership test
- a callable ``(page_number) -> bool``
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import FrozenSet, Optional, Union

from ..exceptions import ConfigurationError


VisibilitySpec = Union[str, Iterable[int], Callable[[int], bool], "VisibilityPolicy", None]

NAMED_RULES = ("all", "first", "all-except-first", "none")


@dataclass(frozen=True)
class VisibilityPolicy:
    """Stateless rule deciding on which pages a band is rendered."""

    rule: str = "all"
    pages: FrozenSet[int] = field(default_factory=frozenset)
    predicate: Optional[Callable[[int], bool]] = None

    @classmethod
    def all(cls) -> "VisibilityPolicy":
        return cls("all")

    @classmethod
    def first(cls) -> "VisibilityPolicy":
        return cls("first")

    @classmethod
    def all_except_first(cls) -> "VisibilityPolicy":
        return cls("all-except-first")

    @classmethod
    def none(cls) -> "VisibilityPolicy":
        return cls("none")

    @classmethod
    def on_pages(cls, pages: Iterable[int]) -> "VisibilityPolicy":
        return cls("pages", pages=frozenset(int(p) for p in pages))

    @classmethod
    def custom(cls, predicate: Callable[[int], bool]) -> "VisibilityPolicy":
        return cls("predicate", predicate=predicate)

    @classmethod
    def from_spec(cls, spec: VisibilitySpec) -> "VisibilityPolicy":
        """Build a policy from an option value (name, page set or callable)."""
        if spec is None:
            return cls.all()
        if isinstance(spec, VisibilityPolicy):
            return spec
        if isinstance(spec, str):
            name = spec.strip().lower().replace("_", "-")
            if name not in NAMED_RULES:
                raise ConfigurationError(
                    f"Unknown visibility rule '{spec}'",
                    f"expected one of {', '.join(NAMED_RULES)}, a page list or a callable",
                )
            return cls(name)
        if callable(spec):
            return cls.custom(spec)
        try:
            return cls.on_pages(spec)
        except (TypeError, ValueError) as exc:
            raise ConfigurationError("Invalid visibility page set", str(exc)) from exc

    def should_show(self, page_number: int) -> bool:
        if self.rule == "all":
            return True
        if self.rule == "first":
            return page_number == 1
        if self.rule == "all-except-first":
            return page_number != 1
        if self.rule == "none":
            return False
        if self.rule == "pages":
            return page_number in self.pages
        if self.rule == "predicate" and self.predicate is not None:
            return bool(self.predicate(page_number))
        return True

    def __call__(self, page_number: int) -> bool:
        return self.should_show(page_number)

"""Attribute declarations for provider and resource configuration."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .diagnostics import Diagnostics


class Kind(Enum):
    STRING = "string"
    INT64 = "int64"
    FLOAT = "float"
    STRING_LIST = "list(string)"
    INT64_LIST = "list(int64)"


@dataclass(frozen=True, slots=True)
class Attribute:
    """One attribute of a schema.

    Exactly one of ``required``, ``optional`` or ``computed`` is expected to
    be set. ``requires_replace`` marks attributes the backend cannot change
    in place: a new value means destroy and re-create.
    """

    name: str
    kind: Kind
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    requires_replace: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        modes = sum((self.required, self.optional, self.computed))
        if modes != 1:
            raise ValueError(
                f"attribute '{self.name}' must be exactly one of required, optional, computed"
            )


@dataclass(frozen=True, slots=True)
class Schema:
    type_name: str
    attributes: tuple[Attribute, ...]
    description: str = ""

    def __getitem__(self, name: str) -> Attribute:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        raise KeyError(name)

    @property
    def sensitive(self) -> frozenset[str]:
        return frozenset(a.name for a in self.attributes if a.sensitive)

    def validate(self, model: Any) -> Diagnostics:
        """Report every required attribute missing from ``model``."""
        diagnostics = Diagnostics()
        for attr in self.attributes:
            if attr.required and getattr(model, attr.name, None) is None:
                diagnostics.add_error(
                    "Missing required argument",
                    f'The argument "{attr.name}" is required for {self.type_name}.',
                )
        return diagnostics

    def replacement_fields(self, prior: Any, planned: Any) -> list[str]:
        """Names of replacement-triggering attributes that differ between states."""
        return [
            attr.name
            for attr in self.attributes
            if attr.requires_replace
            and getattr(prior, attr.name, None) != getattr(planned, attr.name, None)
        ]

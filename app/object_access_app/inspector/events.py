from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ObjectSelected:
    value: str | None


@dataclass(frozen=True)
class FieldSelected:
    value: str | None


@dataclass(frozen=True)
class UserSelected:
    value: str | None


@dataclass(frozen=True)
class SubmitClicked:
    pass


InspectorEvent = ObjectSelected | FieldSelected | UserSelected | SubmitClicked

"""CLI utilities and types for cyclefinder."""

import re
from enum import Enum
from typing import Any, Generic, TypeVar

import click


def validate_pattern(ctx: Any, param: Any, value: str | None) -> re.Pattern[str] | None:
    """Compile a regular expression option."""
    if value is None:
        return None
    try:
        return re.compile(value)
    except re.error as e:
        raise click.BadParameter(f"{value!r} is not a valid regular expression: {e}")


EnumType = TypeVar("EnumType", bound=Enum)


class EnumChoice(click.Choice, Generic[EnumType]):
    """A click Choice that works with Enums."""

    def __init__(self, enum: type[EnumType]) -> None:
        self.enum = enum
        choices = [str(e.name) for e in enum]
        self.__values = {e.name: e for e in enum}
        super().__init__(choices)

    def convert(self, value: Any, param: Any, ctx: Any) -> EnumType:
        if isinstance(value, self.enum):
            return value
        return self.__values[super().convert(value, param, ctx)]

"""
Closed Enumerations with a Single Bounds-Checked Constructor

Modes and stages travel across the host boundary as integers or strings.
CodedEnum.normalize() is the one place where such raw values become
members; anything outside the enumeration is rejected.

Copyright (c) 2026 Andreas Wagner. All rights reserved.
"""

import re
from enum import IntEnum
from typing import Dict, Union

from saleline.core.errors import SaleLineError

CodeLike = Union[int, str, IntEnum]

# Integer codes in ASCII digits only
INTEGER_CODE = re.compile(r"[+-]?[0-9]+")


class CodedEnum(IntEnum):
    """IntEnum accepting members, integer codes, numeric strings or names."""

    @classmethod
    def _invalid(cls, value, detail: str) -> SaleLineError:
        """Build the error raised for out-of-range values. Subclasses override."""
        return SaleLineError(value, detail)

    @classmethod
    def _aliases(cls) -> Dict[str, "CodedEnum"]:
        """Extra accepted names (already upper-cased, without separators)."""
        return {}

    @classmethod
    def normalize(cls, value: CodeLike) -> "CodedEnum":
        """
        Normalize a raw mode/stage value into a member.

        Accepted:
        - a member (returned as-is)
        - an integer code: 0, 1, 2
        - a numeric string: "0", " 2 "
        - a name, case and separator insensitive: "percentual", "over-tax"

        Raises:
            The subclass error (InvalidModeError / InvalidStageError)
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, bool):
            raise cls._invalid(value, f"{cls.__name__} cannot be a boolean")

        if isinstance(value, int):
            try:
                return cls(int(value))
            except ValueError:
                raise cls._invalid(value, f"valid {cls.__name__} codes are {cls.codes()}") from None

        if isinstance(value, str):
            text = value.strip()
            if INTEGER_CODE.fullmatch(text):
                return cls.normalize(int(text))

            key = text.upper().replace(" ", "").replace("-", "").replace("_", "")
            lookup = {member.name.replace("_", ""): member for member in cls}
            lookup.update(cls._aliases())

            member = lookup.get(key)
            if member is None:
                raise cls._invalid(value, f"valid {cls.__name__} names are {[m.name for m in cls]}")
            return member

        raise cls._invalid(value, f"unsupported type {type(value).__name__}")

    @classmethod
    def codes(cls):
        """Return the integer codes of all members."""
        return [member.value for member in cls]

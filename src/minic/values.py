"""Runtime values and literal decoding for the minic interpreter."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import List

from .semantic import DataType

HEX_DIGITS = "0123456789abcdefABCDEF"

_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "0": "\0", "\\": "\\", '"': '"', "'": "'"}


class ValueType(Enum):
    INT = auto()
    CHAR = auto()
    BOOL = auto()
    STRING = auto()
    ARRAY = auto()


#tagged union over the runtime types; array payloads are mutated in place
@dataclass(frozen=True, slots=True)
class Value:
    type: ValueType
    data: object

    @classmethod
    def of_int(cls, value: int) -> "Value":
        return cls(ValueType.INT, value)

    @classmethod
    def of_char(cls, value: str) -> "Value":
        return cls(ValueType.CHAR, value)

    @classmethod
    def of_bool(cls, value: bool) -> "Value":
        return cls(ValueType.BOOL, value)

    @classmethod
    def of_string(cls, value: str) -> "Value":
        return cls(ValueType.STRING, value)

    @classmethod
    def of_array(cls, elements: List["Value"]) -> "Value":
        return cls(ValueType.ARRAY, elements)

    @classmethod
    def zero(cls, data_type: DataType) -> "Value":
        if data_type is DataType.CHAR:
            return cls.of_char("\0")
        if data_type is DataType.BOOL:
            return cls.of_bool(False)
        return cls.of_int(0)

    @classmethod
    def zeroed_array(cls, data_type: DataType, size: int) -> "Value":
        return cls.of_array([cls.zero(data_type) for _ in range(size)])

    @property
    def is_array(self) -> bool:
        return self.type is ValueType.ARRAY

    @property
    def elements(self) -> List["Value"]:
        assert self.type is ValueType.ARRAY
        return self.data

    #arrays are copied so callers and callees never share storage
    def copy(self) -> "Value":
        if self.type is ValueType.ARRAY:
            return Value.of_array(list(self.elements))
        return self

    # Coercions ----------------------------------------------------------------

    def as_int(self) -> int:
        if self.type is ValueType.INT:
            return self.data
        if self.type is ValueType.CHAR:
            return ord(self.data)
        if self.type is ValueType.BOOL:
            return 1 if self.data else 0
        return 0

    def as_char(self) -> str:
        if self.type is ValueType.CHAR:
            return self.data
        if self.type is ValueType.INT:
            return chr(self.data & 0xFF)
        return "\0"

    def as_bool(self) -> bool:
        if self.type is ValueType.BOOL:
            return bool(self.data)
        if self.type is ValueType.INT:
            return self.data != 0
        if self.type is ValueType.CHAR:
            return self.data != "\0"
        return False

    #char arrays render up to their first NUL element
    def as_text(self) -> str:
        if self.type is ValueType.STRING:
            return self.data
        if self.type is ValueType.INT:
            return str(self.data)
        if self.type is ValueType.CHAR:
            return self.data
        if self.type is ValueType.ARRAY:
            chars: List[str] = []
            for element in self.elements:
                char = element.as_char()
                if char == "\0":
                    break
                chars.append(char)
            return "".join(chars)
        return ""


# Literal decoding ---------------------------------------------------------------


def decode_escapes(text: str) -> str:
    """Decode the backslash escapes kept verbatim by the lexer."""

    result: List[str] = []
    index = 0
    length = len(text)
    while index < length:
        char = text[index]
        if char != "\\" or index + 1 >= length:
            result.append(char)
            index += 1
            continue
        escaped = text[index + 1]
        index += 2
        if escaped == "x":
            digits = ""
            while len(digits) < 2 and index < length and text[index] in HEX_DIGITS:
                digits += text[index]
                index += 1
            result.append(chr(int(digits, 16)) if digits else "\0")
        else:
            result.append(_SIMPLE_ESCAPES.get(escaped, escaped))
    return "".join(result)


def string_literal(text: str) -> Value:
    return Value.of_string(decode_escapes(text))


#an empty literal decodes to NUL
def char_literal(text: str) -> Value:
    decoded = decode_escapes(text)
    return Value.of_char(decoded[0] if decoded else "\0")


#C-style division: truncate toward zero, zero divisor yields zero
def divide(left: int, right: int) -> int:
    if right == 0:
        return 0
    quotient = abs(left) // abs(right)
    return quotient if (left < 0) == (right < 0) else -quotient


def modulo(left: int, right: int) -> int:
    if right == 0:
        return 0
    return left - right * divide(left, right)

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from resp_parser.exceptions import DecodeErrorCode, RespDecodeError

TERMINATOR = b"\r\n"

NULL_LENGTH = b"-1"

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

INTEGER_PATTERN = re.compile(rb"[+-]?[0-9]+")
LENGTH_PATTERN = re.compile(rb"[0-9]+")


class RedisType:
    SIMPLE_STRING = b"+"
    ERROR = b"-"
    INTEGER = b":"
    BULK_STRING = b"$"
    ARRAY = b"*"


class Value(ABC):
    """
    Base of the decoded value tree.

    Every variant is a frozen dataclass, so a returned tree cannot be changed.
    """

    def is_null(self) -> bool:
        return False

    @abstractmethod
    def to_python(self):
        """
        Plain python equivalent of the value: str, int, bytes, list or None
        """

    @classmethod
    def from_segment(cls, segment: bytes, encoding: str = "utf-8") -> "Value":
        """
        Build a value out of a single line, without its terminator.

        Scalars come back complete. "$" and "*" lines come back as stubs carrying
        only the declared length, which the decoder fills from the following lines.

        "+OK" -> SimpleString("OK")
        "$5"  -> BulkString(b"", length=5)
        "*-1" -> Null(b"*")

        Raises:
            RespDecodeError: the line breaks the rule for its type tag
        """

        resp_type = bytes(segment[:1])
        rest = bytes(segment[1:])

        if resp_type == RedisType.SIMPLE_STRING:
            return SimpleString(_decode_text(rest, encoding))

        if resp_type == RedisType.ERROR:
            return SimpleError(_decode_text(rest, encoding))

        if resp_type == RedisType.INTEGER:
            return Integer(_parse_integer(rest))

        if resp_type in (RedisType.BULK_STRING, RedisType.ARRAY):
            if rest == NULL_LENGTH:
                return Null(resp_type)

            length = _parse_length(rest)
            if resp_type == RedisType.BULK_STRING:
                return BulkString(length=length)
            return Array(length=length)

        raise RespDecodeError(DecodeErrorCode.INVALID_FIRST_CHAR)


@dataclass(frozen=True)
class SimpleString(Value):
    data: str

    def to_python(self):
        return self.data


@dataclass(frozen=True)
class SimpleError(Value):
    data: str

    def to_python(self):
        return self.data


@dataclass(frozen=True)
class Integer(Value):
    data: int

    def to_python(self):
        return self.data


@dataclass(frozen=True)
class BulkString(Value):
    """
    Owned byte payload.

    `length` is the size declared on the wire. It defaults to the payload size
    and never takes part in equality.
    """

    data: bytes = b""
    length: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "data", bytes(self.data))
        if self.length is None:
            object.__setattr__(self, "length", len(self.data))

    def to_python(self):
        return self.data


@dataclass(frozen=True)
class Array(Value):
    """
    Ordered elements, held as a tuple.

    Like BulkString, `length` is the declared element count and is ignored by ==.
    """

    items: tuple = ()
    length: Optional[int] = field(default=None, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "items", tuple(self.items))
        if self.length is None:
            object.__setattr__(self, "length", len(self.items))

    def __iter__(self):
        return iter(self.items)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, index):
        return self.items[index]

    def to_python(self):
        return [item.to_python() for item in self.items]


@dataclass(frozen=True)
class Null(Value):
    """
    "$-1" or "*-1". `kind` remembers which of the two it came from.
    """

    kind: bytes = RedisType.BULK_STRING

    def is_null(self) -> bool:
        return True

    def to_python(self):
        return None


def _decode_text(raw: bytes, encoding: str) -> str:
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError:
        raise RespDecodeError(DecodeErrorCode.INVALID_ENCODING)


def _parse_integer(raw: bytes) -> int:
    # int() alone would also take whitespace and underscores
    if not INTEGER_PATTERN.fullmatch(raw):
        raise RespDecodeError(DecodeErrorCode.INVALID_NUMBER)

    number = int(raw)
    if not INT64_MIN <= number <= INT64_MAX:
        raise RespDecodeError(DecodeErrorCode.INVALID_NUMBER)

    return number


def _parse_length(raw: bytes) -> int:
    if not LENGTH_PATTERN.fullmatch(raw):
        raise RespDecodeError(DecodeErrorCode.INVALID_LENGTH)

    return int(raw)

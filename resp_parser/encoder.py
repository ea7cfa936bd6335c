from resp_parser.exceptions import EncodeError
from resp_parser.value import (
    TERMINATOR, Array, BulkString, Integer, Null, RedisType, SimpleError, SimpleString, Value,
)


class RedisEncoder:
    """
    Turn Value trees back into wire bytes
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def encode(self, value: Value) -> bytes:
        if isinstance(value, SimpleString):
            return self.encode_simple_string(value.data)

        if isinstance(value, SimpleError):
            return self.encode_error(value.data)

        if isinstance(value, Integer):
            return self.encode_integer(value.data)

        if isinstance(value, BulkString):
            return self.encode_bulk_string(value.data)

        if isinstance(value, Array):
            return self.encode_array(value)

        if isinstance(value, Null):
            return self.encode_null(value.kind)

        raise EncodeError(f"Cannot encode {type(value).__name__}")

    def encode_simple_string(self, data: str) -> bytes:
        return RedisType.SIMPLE_STRING + self._line(data) + TERMINATOR

    def encode_error(self, data: str) -> bytes:
        return RedisType.ERROR + self._line(data) + TERMINATOR

    def encode_integer(self, data: int) -> bytes:
        return RedisType.INTEGER + str(data).encode("ascii") + TERMINATOR

    def encode_bulk_string(self, data: bytes) -> bytes:
        """
        The decoder reads the payload as one line, so it may not hold a terminator.
        """
        if TERMINATOR in data:
            raise EncodeError("Bulk string payload cannot contain CRLF")

        return RedisType.BULK_STRING + str(len(data)).encode("ascii") + TERMINATOR + data + TERMINATOR

    def encode_array(self, items) -> bytes:
        ret = [RedisType.ARRAY + str(len(items)).encode("ascii") + TERMINATOR]

        for item in items:
            ret.append(self.encode(item))

        return b"".join(ret)

    def encode_null(self, kind: bytes = RedisType.BULK_STRING) -> bytes:
        return kind + b"-1" + TERMINATOR

    def _line(self, data: str) -> bytes:
        if "\r\n" in data:
            raise EncodeError("Simple strings cannot contain CRLF")

        return data.encode(self.encoding)

import logging
from typing import List, Tuple

from resp_parser.config import DecoderConfig
from resp_parser.exceptions import DecodeErrorCode, IncompleteFrameError, RespDecodeError
from resp_parser.value import TERMINATOR, Array, BulkString, Value

logger = logging.getLogger(__name__)


def count_segments(value: Value) -> int:
    """
    Number of terminated lines the value occupies on the wire.

    Scalars and nulls are a single line, a bulk string is its length line plus
    its payload line, and an array is its own count line plus whatever its
    elements take. Nothing on the wire marks where an array ends, so this is
    the only way to find the start of the element that follows it.
    """

    if isinstance(value, Array):
        return 1 + sum(count_segments(item) for item in value)

    if isinstance(value, BulkString):
        return 2

    return 1


class RedisDecoder:
    """
    Decode RESP frames into Value trees.

    The buffer is never copied while decoding. Frames are walked with an offset
    into it, and only single lines are sliced out.
    """

    def __init__(self, config: DecoderConfig = None):
        self.config = config or DecoderConfig()

    def decode(self, data) -> Value:
        """
        Decode the first frame found in data.

        Args:
            data (bytes | str): complete buffer, anything after the first frame is ignored

        Returns:
            Value: the decoded tree

        Raises:
            RespDecodeError: malformed input, IncompleteFrameError when it stops mid frame
        """

        data = self._to_bytes(data)

        try:
            # No terminator at all, so the whole buffer is one line
            if data.find(TERMINATOR) == -1:
                return self._decode_bare(data)

            return self._decode_frame(data, 0, depth=1)
        except RespDecodeError as exc:
            logger.warning("Rejected frame %r: %s", data[:64], exc)
            raise

    def decode_all(self, data) -> List[Tuple[Value, int]]:
        """
        Decode every frame packed back to back in data.

        Returns:
            list: Each element is tuple of the value with the number of bytes its frame took
        """

        data = self._to_bytes(data)
        frames = []
        pos = 0

        try:
            while pos < len(data):

                if data.find(TERMINATOR, pos) == -1:
                    frames.append((self._decode_bare(data[pos:]), len(data) - pos))
                    break

                value = self._decode_frame(data, pos, depth=1)
                end = self._skip_lines(data, pos, count_segments(value))
                frames.append((value, end - pos))
                pos = end
        except RespDecodeError as exc:
            logger.warning("Rejected frame %r after %d good ones: %s", data[pos:pos + 64], len(frames), exc)
            raise

        logger.debug("Decoded %d frames", len(frames))
        return frames

    def _to_bytes(self, data) -> bytes:
        if isinstance(data, str):
            return data.encode(self.config.encoding)

        if isinstance(data, (bytes, bytearray, memoryview)):
            return bytes(data)

        raise TypeError(f"Expected bytes or str, got {type(data).__name__}")

    def _decode_bare(self, segment: bytes) -> Value:
        value = Value.from_segment(segment, self.config.encoding)

        # A bare header can't carry the lines it announces
        if isinstance(value, BulkString) or (isinstance(value, Array) and value.length):
            raise IncompleteFrameError()

        return value

    def _decode_frame(self, data: bytes, pos: int, depth: int) -> Value:
        """
        Decode the value whose first line starts at pos, reading any further lines it owns.
        """

        line, pos = self._read_line(data, pos)
        value = Value.from_segment(line, self.config.encoding)

        if value.is_null():
            return value

        if isinstance(value, BulkString):
            return self._fill_bulk_string(value, data, pos)

        if isinstance(value, Array):
            if depth > self.config.max_depth:
                raise RespDecodeError(DecodeErrorCode.MAX_DEPTH_EXCEEDED)
            return self._fill_array(value, data, pos, depth)

        return value

    def _fill_bulk_string(self, stub: BulkString, data: bytes, pos: int) -> BulkString:
        payload, _ = self._read_line(data, pos)

        if self.config.strict_lengths and len(payload) != stub.length:
            raise RespDecodeError(DecodeErrorCode.INVALID_LENGTH)

        return BulkString(payload, length=stub.length)

    def _fill_array(self, stub: Array, data: bytes, pos: int, depth: int) -> Array:
        if stub.length == 0:
            return stub

        items = []

        while True:
            item = self._decode_frame(data, pos, depth + 1)
            items.append(item)

            if len(items) == stub.length:
                break

            # pos is the item's first line, the next item begins count_segments(item) lines later
            pos = self._skip_lines(data, pos, count_segments(item))

        logger.debug("Decoded array of %d items at depth %d", len(items), depth)
        return Array(items, length=stub.length)

    @staticmethod
    def _read_line(data: bytes, pos: int) -> Tuple[bytes, int]:
        """
        Line starting at pos without its terminator, and the offset of the line after it.
        """

        end = data.find(TERMINATOR, pos)
        if end == -1:
            raise IncompleteFrameError()

        return data[pos:end], end + len(TERMINATOR)

    @staticmethod
    def _skip_lines(data: bytes, pos: int, count: int) -> int:
        for _ in range(count):
            end = data.find(TERMINATOR, pos)
            if end == -1:
                raise IncompleteFrameError()
            pos = end + len(TERMINATOR)

        return pos


def decode(data, config: DecoderConfig = None) -> Value:
    """
    Decode a single frame with a throwaway decoder
    """
    return RedisDecoder(config).decode(data)

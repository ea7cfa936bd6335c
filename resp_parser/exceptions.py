from enum import Enum

DECODER = "decoder"


class RespException(Exception):
    """
    Base class for everything raised by resp_parser
    """


class DecodeErrorCode(Enum):
    INVALID_FIRST_CHAR = (DECODER, "first-char", "invalid first char")
    INVALID_NUMBER = (DECODER, "number", "invalid number")
    INVALID_LENGTH = (DECODER, "length", "invalid length")
    INVALID_ENCODING = (DECODER, "encoding", "invalid encoding")
    INCOMPLETE = (DECODER, "incomplete", "incomplete frame")
    MAX_DEPTH_EXCEEDED = (DECODER, "max-depth", "max depth exceeded")

    def __init__(self, module, code, message):
        self.code = code
        self.module = module
        self.message = message


class RespDecodeError(RespException):
    """
    Raised when a buffer violates the wire format.

    Decoding is all or nothing, so no partial value is attached.
    """

    def __init__(self, error_code: DecodeErrorCode):
        self.error_code = error_code
        super().__init__(f"[{error_code.code}] {error_code.message}")

    @property
    def code(self):
        return self.error_code.code

    @property
    def module(self):
        return self.error_code.module

    @property
    def message(self):
        return self.error_code.message


class IncompleteFrameError(RespDecodeError):
    """
    The buffer ended before the frame did. More bytes may fix it.
    """

    def __init__(self):
        super().__init__(DecodeErrorCode.INCOMPLETE)


class EncodeError(RespException):
    pass


class ConfigError(RespException):
    pass

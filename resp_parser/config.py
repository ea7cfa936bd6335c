import codecs
import os
import sys

from resp_parser.exceptions import ConfigError

MAX_DEPTH = "RESP_MAX_DEPTH"
ENCODING = "RESP_ENCODING"
STRICT_LENGTHS = "RESP_STRICT_LENGTHS"
LOG_LEVEL = "RESP_LOG_LEVEL"

DEFAULT_MAX_DEPTH = 128
DEFAULT_ENCODING = "utf-8"
DEFAULT_LOG_LEVEL = "WARNING"

LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]

TRUTHY = {"1", "true", "yes", "on"}
FALSY = {"0", "false", "no", "off", ""}


def depth_limit() -> int:
    """
    Largest max_depth that still fails with MAX_DEPTH_EXCEEDED instead of RecursionError.

    Decoding uses two frames per nesting level, and comparing or converting the
    resulting tree uses about as many again.
    """
    return sys.getrecursionlimit() // 4


class DecoderConfig:
    """
    Settings shared by a decoder instance.

    Args:
        max_depth: deepest array nesting accepted, the top-level value being depth 1
        encoding: codec used for simple strings, simple errors and str input
        strict_lengths: reject bulk strings whose payload size differs from the declared length
    """

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, encoding: str = DEFAULT_ENCODING,
                 strict_lengths: bool = False):

        if not 1 <= max_depth <= depth_limit():
            raise ConfigError(f"max_depth must be between 1 and {depth_limit()}, got {max_depth}")

        try:
            codecs.lookup(encoding)
        except LookupError:
            raise ConfigError(f"Unknown encoding {encoding!r}")

        self.max_depth = max_depth
        self.encoding = encoding
        self.strict_lengths = strict_lengths

    @classmethod
    def from_env(cls, **overrides):
        """
        Build config from RESP_* environment variables.
        Keyword arguments which are not None win over the environment.
        """

        values = {
            "max_depth": _env_int(MAX_DEPTH, DEFAULT_MAX_DEPTH),
            "encoding": os.getenv(ENCODING, DEFAULT_ENCODING),
            "strict_lengths": _env_bool(STRICT_LENGTHS, False),
        }

        for key, value in overrides.items():
            if value is not None:
                values[key] = value

        return cls(**values)

    def __repr__(self):
        return (
            f"DecoderConfig(max_depth={self.max_depth}, encoding={self.encoding!r}, "
            f"strict_lengths={self.strict_lengths})"
        )


def _env_int(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default

    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}")


def _env_bool(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default

    raw = raw.strip().lower()
    if raw in TRUTHY:
        return True
    if raw in FALSY:
        return False

    raise ConfigError(f"{name} must be a boolean, got {raw!r}")


def log_level():
    level = os.getenv(LOG_LEVEL, DEFAULT_LOG_LEVEL).upper()

    if level not in LOG_LEVELS:
        raise ConfigError(f"{LOG_LEVEL} must be one of {', '.join(LOG_LEVELS)}, got {level!r}")

    return level

import argparse
import logging
import sys

from resp_parser.config import LOG_LEVELS, DecoderConfig, log_level
from resp_parser.decoder import RedisDecoder
from resp_parser.encoder import RedisEncoder
from resp_parser.exceptions import RespException

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        prog="resp-parser",
        description="Decode a RESP buffer and print the values it holds")
    parser.add_argument("file", nargs="?", help="File to read the buffer from, stdin when missing")
    parser.add_argument(
        "--data",
        help="Buffer given inline. Backslash escapes are understood, so '+OK\\r\\n' works")
    parser.add_argument("--all", action="store_true", help="Decode every frame in the buffer")
    parser.add_argument("--max-depth", type=int, help="Deepest array nesting accepted")
    parser.add_argument(
        "--strict-lengths", action="store_true", default=None,
        help="Reject bulk strings whose payload size differs from the declared one")
    parser.add_argument("--reencode", action="store_true", help="Print the frames as wire bytes again")
    parser.add_argument(
        "--log-level", type=str.upper, choices=LOG_LEVELS,
        help="Defaults to RESP_LOG_LEVEL, then WARNING")
    return parser


def read_buffer(args) -> bytes:
    if args.data is not None:
        # unicode_escape reads raw bytes as latin-1, so this keeps non ascii bytes intact
        return args.data.encode("utf-8").decode("unicode_escape").encode("latin-1")

    if args.file:
        with open(args.file, "rb") as f:
            return f.read()

    return sys.stdin.buffer.read()


def main(argv=None):

    args = build_parser().parse_args(argv)

    try:
        logging.basicConfig(level=args.log_level or log_level(), format="%(levelname)s %(name)s: %(message)s")

        config = DecoderConfig.from_env(max_depth=args.max_depth, strict_lengths=args.strict_lengths)
        logger.debug("Using %r", config)

        data = read_buffer(args)
        decoder = RedisDecoder(config)

        if args.all:
            frames = decoder.decode_all(data)
        else:
            frames = [(decoder.decode(data), None)]
    except RespException as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    encoder = RedisEncoder(config.encoding)

    for value, size in frames:
        if args.reencode:
            sys.stdout.buffer.write(encoder.encode(value))
            continue

        if size is None:
            print(repr(value.to_python()))
        else:
            print(f"{size}\t{value.to_python()!r}")

    sys.stdout.flush()
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
import dataclasses
import logging
import sys

from plumbum import cli  # type: ignore[import-untyped]

from .config import load_decoder_config
from .decoding import disassemble_with_layout
from .errors import DecodeError, OutOfBounds, UnknownOpcode
from .listing import format_located


class DviDumpCLI(cli.Application):
    """Print the instructions of a DVI file, one per line."""

    PROGNAME = "dvidump"
    VERSION = "0.1.0"

    layout = cli.Flag(["-l", "--layout"], help="Show operand offsets and widths")
    legacy_unsigned = cli.Flag(
        ["--legacy-unsigned"],
        help="Read 1-3 byte movement and rule operands as unsigned",
    )
    verbose = cli.Flag(["-v", "--verbose"], help="Enable debug logging")

    def main(self, input_file: cli.ExistingFile) -> int:
        logging.basicConfig(
            level=logging.DEBUG if self.verbose else logging.WARNING,
            format="%(levelname)s %(name)s: %(message)s",
        )
        config = load_decoder_config()
        if self.legacy_unsigned:
            config = dataclasses.replace(config, legacy_unsigned=True)

        with open(input_file, "rb") as f:
            data = f.read()

        try:
            located = disassemble_with_layout(data, config)
        except UnknownOpcode as e:
            print(
                f"{input_file}: unknown opcode {e.opcode} at offset {e.offset}",
                file=sys.stderr,
            )
            return 1
        except OutOfBounds as e:
            print(f"{input_file}: truncated input: {e}", file=sys.stderr)
            return 1
        except DecodeError as e:
            print(f"{input_file}: {e}", file=sys.stderr)
            return 1

        for item in located:
            print(format_located(item, with_layout=self.layout))
        return 0


def main() -> None:
    DviDumpCLI.run()


if __name__ == "__main__":
    main()

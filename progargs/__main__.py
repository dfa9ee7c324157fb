"""
Progargs example program.

    python -m progargs -i input.txt -n 50 -t 0.7 -v extra1 extra2

Declares one argument of each type, attaches range/extension validators and
prints the resolved values. -h/--help anywhere on the command line prints the
usage and exits before parsing, so a missing --input does not get in the way.
"""
import sys

from rich.console import Console

from . import Outcome, Parser
from .utils import Unset, coalesce

__prog__ = "progargs"


def validate_count(value, type):
    if not 1 <= value <= 100:
        return Outcome.invalid("Count must be between 1 and 100, got %d" % value)
    return Outcome.valid()


def validate_threshold(value, type):
    if not 0.0 <= value <= 1.0:
        return Outcome.invalid("Threshold must be between 0.0 and 1.0, got %.2f" % value)
    return Outcome.valid()


def validate_output(value, type):
    if value is None or not value.endswith(".txt"):
        return Outcome.invalid("Output file must have .txt extension, got '%s'" % value)
    return Outcome.valid()


def build(prog=__prog__):
    parser = Parser(prog, shell=True)

    parser.add_flag("-v", "--verbose", "Enable verbose output")
    parser.add_flag("-h", "--help", "Display this help message")
    parser.add_string("-o", "--output", "Output file path", default="output.txt")
    parser.add_string("-i", "--input", "Input file path", required=True)
    parser.add_int("-n", "--count", "Number of iterations", default=10)
    parser.add_float("-t", "--threshold", "Threshold value", default=0.5)

    parser.set_validator("--count", validate_count)
    parser.set_validator("--threshold", validate_threshold)
    parser.set_validator("--output", validate_output)

    return parser


def main(argv=Unset):
    argv = list(coalesce(argv, sys.argv))
    console = Console(highlight=False, markup=False)

    with build() as parser:
        if any(token in ("-h", "--help") for token in argv[1:]):
            parser.print_help()
            return 0

        parser.parse(argv)

        if parser.get_flag("--help"):
            parser.print_help()
            return 0

        verbose = parser.get_flag("--verbose")
        input = parser.get_string("--input")
        output = parser.get_string("--output")
        count = parser.get_int("--count")
        threshold = parser.get_float("--threshold")

        def default(name):
            return "" if parser.is_set(name) else " (default)"

        console.print("=== Program Arguments Example ===")
        console.print("Verbose mode: %s" % ("enabled" if verbose else "disabled"))
        console.print("Input file: %s" % input)
        console.print("Output file: %s%s" % (output, default("--output")))
        console.print("Count: %d%s" % (count, default("--count")))
        console.print("Threshold: %.2f%s" % (threshold, default("--threshold")))

        if positionals := parser.get_positional():
            console.print("\nPositional arguments:")
            for index, positional in enumerate(positionals):
                console.print("  [%d] %s" % (index, positional))

        if verbose:
            console.print("\n=== Verbose Details ===")
            console.print("Processing %d iterations with threshold %.2f" % (count, threshold))
            console.print("Reading from: %s" % input)
            console.print("Writing to: %s" % output)

    return 0


if __name__ == "__main__":
    sys.exit(main())

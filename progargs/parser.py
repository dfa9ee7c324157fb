"""
Progargs parser: declare, parse, validate lazily, read.

What this module provides
- Parser: owns a definition registry, the per-definition results of the last
  successful parse and the positional arguments.
  • add_flag/add_string/add_int/add_float: register definitions (before parsing).
  • set_validator: attach a validator by long name (any time before the first read).
  • parse(argv): consume an argument vector (argv[0] is the program name).
  • get/get_flag/get_string/get_int/get_float/is_set/get_validation_error/get_positional.
  • print_help: usage text (see progargs.helper).
  • destroy: release everything (idempotent); Parser is also a context manager.
- create(**options) / destroy(parser): module-level entry points.

Parsing (strictly left to right, from argv[1])
- a token starting with '-' is an option reference, resolved by short or long name;
  an unresolved one is fatal (UnknownArgumentError).
- a flag is set to True; any other type consumes the next token unconditionally
  as its value (MissingValueError when there is none) and coerces it.
- other tokens are positional arguments, kept in encounter order.
- after the loop, every required definition must have been set (RequiredMissingError).
- the first fault stops the parse; nothing is committed unless it succeeds.

Reading
- the first read of a result runs its validator once (see progargs.results);
  invalid values are replaced by the definition's default and reported once.
- typed accessors degrade to the type's zero value for unknown names and type
  mismatches (without touching the validation state).

Quick start
    from progargs import Parser, Outcome

    parser = Parser()
    parser.add_string("-i", "--input", "Input file path", required=True)
    parser.add_int("-n", "--count", "Number of iterations", default=10)

    @parser.set_validator("--count")
    def count(value, type):
        return Outcome.valid() if 1 <= value <= 100 else Outcome.invalid("out of range, got %d" % value)

    parser.parse(["prog", "-i", "input.txt", "-n", "50"])
    parser.get_int("--count")  # 50
"""
import os.path
import sys
from collections import deque
from collections.abc import Iterable

from .definitions import Registry
from .faults import *
from .faults import trigger as _trigger
from .helper import print_help as _print_help
from .results import Result
from .utils import *
from .values import ValueType, coerce


class Parser(metaclass=IntrospectableType):
    """
    Command-line argument parser instance.

    Options
    - prog: Unset | str
      program name used in diagnostics and help; taken from argv[0] on every parse when Unset.
    - shell: bool
      False (library use): parse faults are raised, validation warnings go through
      the warnings module. True (program use): faults are printed on stderr with rich,
      parse faults exit with status 1.
    - fancy: bool
      render diagnostics inside a rich Panel.
    - colorful: bool
      enable styles in diagnostics and help.
    - strict: bool
      reject malformed int/float text (MalformedValueError) instead of coercing it to zero.
    """

    __introspectable__ = (
        "prog",
        "shell",
        "fancy",
        "colorful",
        "strict",
        "definitions",
        "positionals",
        "parsed",
        "destroyed",
    )

    def __init__(self, prog=Unset, /, *, shell=False, fancy=False, colorful=True, strict=False):
        if not isinstance(prog, str | Unset):
            raise TypeError(f"{type(self).__typename__} 'prog' must be a string")
        elif isinstance(prog, str) and not (prog := prog.strip()):
            raise ValueError(f"{type(self).__typename__} 'prog' cannot be empty")

        self._prog = coalesce(prog)
        self._named = prog is not Unset
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._strict = bool(strict)

        self._registry = Registry()
        self._results = {}
        self._positionals = []
        self._started = False
        self._parsed = False
        self._destroyed = False

    @property
    def _definitions(self):
        return tuple(self._registry)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.destroy()

    def _guard(self):
        if self._destroyed:
            raise ParserStateError(
                "parser was already destroyed",
                title="invalid state",
                code=FaultCode.INVALID_STATE,
                hint="create a new parser",
                docs=getdoc(FaultCode.INVALID_STATE),
            )

    def trigger(self, fault, /, **options):
        """
        Surface a fault with this parser's runtime options merged in.
        """
        _trigger(fault, **options | {
            "prog": self._prog,
            "shell": self._shell,
            "fancy": self._fancy,
            "colorful": self._colorful,
        })

    # --- registration ---

    def _register(self, short_name, long_name, description, type, required, default):
        self._guard()
        if self._started:
            raise LateDefinitionError(
                "%r cannot be registered after parsing started" % (long_name,),
                title="late definition",
                code=FaultCode.LATE_DEFINITION,
                name=long_name,
                hint="register every argument before calling parse()",
                docs=getdoc(FaultCode.LATE_DEFINITION),
            )
        return self._registry.register(short_name, long_name, description, type, required, default)

    def add_flag(self, short_name, long_name, /, description=None, default=False):
        """
        Register a presence-only flag (never required).
        """
        return self._register(short_name, long_name, description, ValueType.FLAG, False, default)

    def add_string(self, short_name, long_name, /, description=None, required=False, default=None):
        """
        Register a string option; its default may be None.
        """
        return self._register(short_name, long_name, description, ValueType.STRING, required, default)

    def add_int(self, short_name, long_name, /, description=None, required=False, default=0):
        """
        Register an integer option.
        """
        return self._register(short_name, long_name, description, ValueType.INT, required, default)

    def add_float(self, short_name, long_name, /, description=None, required=False, default=0.0):
        """
        Register a floating-point option.
        """
        return self._register(short_name, long_name, description, ValueType.FLOAT, required, default)

    def set_validator(self, long_name, validator=Unset, /):
        """
        Attach a validator to the definition registered as `long_name`.

        Forms
        - parser.set_validator("--count", check)
        - @parser.set_validator("--count")
          def check(value, type): ...

        The validator is called as validator(payload, type) on the first read and
        must return a bool or an Outcome.

        Raises
        - NotFoundError: no definition has that long name.
        - TypeError: validator is not callable.
        """
        self._guard()

        @rename("set_validator")
        def wrapper(validator, /):
            self._registry.attach_validator(long_name, validator)
            return validator

        if validator is Unset:
            # fail early on unknown names, even in decorator form
            self._registry.lookup(long_name)
            return wrapper
        return wrapper(validator)

    # --- parsing ---

    def parse(self, argv=Unset, /):
        """
        Parse an argument vector whose first element is the program name.

        Parameters
        - argv: Unset | Iterable[str]
          Unset reads sys.argv.

        Raises (non-shell mode; shell mode prints and exits with status 1)
        - UnknownArgumentError, MissingValueError, RequiredMissingError,
          MalformedValueError (strict mode only).
        - TypeError: argv is not an iterable of strings.
        """
        self._guard()

        if argv is Unset:
            argv = sys.argv
        if isinstance(argv, str) or not isinstance(argv, Iterable):
            raise TypeError("parse() argument must be an iterable of strings")
        tokens = deque(argv)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be an iterable of strings")

        self._started = True
        self._parsed = False
        self._results = {}
        self._positionals = []

        if tokens and not self._named:
            self._prog = os.path.basename(tokens[0]) or None
        if tokens:
            tokens.popleft()

        results = {definition: Result(definition) for definition in self._registry}
        positionals = []

        index = 1
        while tokens:
            token = tokens.popleft()

            if not token.startswith("-"):
                positionals.append(token)
                index += 1
                continue

            if (definition := self._registry.find(token)) is None:
                return self.trigger(UnknownArgumentError(
                    "unknown argument %r at %s position" % (token, ordinal(index)),
                    title="unknown argument",
                    code=FaultCode.UNKNOWN_ARGUMENT,
                    token=token,
                    index=index,
                    hint="use --help for usage information",
                    docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
                ))

            result = results[definition]

            if definition.type is ValueType.FLAG:
                result.assign(coerce(ValueType.FLAG, token))
                index += 1
                continue

            if not tokens:
                return self.trigger(MissingValueError(
                    "missing value for argument %r at %s position" % (token, ordinal(index)),
                    title="missing value",
                    code=FaultCode.MISSING_VALUE,
                    token=token,
                    index=index,
                    definition=definition,
                    hint="pass a value after the name (for example: %s %s)" % (token, definition.type.placeholder),
                    docs=getdoc(FaultCode.MISSING_VALUE),
                ))

            raw = tokens.popleft()
            try:
                value = coerce(definition.type, raw, strict=self._strict)
            except ValueError:
                return self.trigger(MalformedValueError(
                    "value %r for argument %r at %s position is not a valid %s" % (
                        raw, token, ordinal(index + 1), definition.type.value
                    ),
                    title="malformed value",
                    code=FaultCode.MALFORMED_VALUE,
                    token=raw,
                    index=index + 1,
                    definition=definition,
                    hint="use a valid %s for %s" % (definition.type.value, definition.long_name),
                    docs=getdoc(FaultCode.MALFORMED_VALUE),
                ))
            result.assign(value)
            index += 2

        for definition, result in results.items():
            if definition.required and not result.is_set:
                return self.trigger(RequiredMissingError(
                    "required argument missing: %s" % definition.long_name,
                    title="required argument missing",
                    code=FaultCode.REQUIRED_MISSING,
                    name=definition.long_name,
                    definition=definition,
                    hint="pass %s %s; use --help for usage information" % (
                        definition.long_name, definition.type.placeholder
                    ),
                    docs=getdoc(FaultCode.REQUIRED_MISSING),
                ))

        self._results = results
        self._positionals = positionals
        self._parsed = True

    # --- reading ---

    def get(self, long_name, /):
        """
        Return the Result registered as `long_name`, validating it on first access.

        Raises
        - ParserStateError: no successful parse yet, or the parser was destroyed.
        - NotFoundError: no definition has that long name.
        """
        result = self._lookup(long_name)
        result.validate(self.trigger)
        return result

    def _lookup(self, long_name, /):
        self._guard()
        if not self._parsed:
            raise ParserStateError(
                "values cannot be read before a successful parse",
                title="invalid state",
                code=FaultCode.INVALID_STATE,
                hint="call parse() first and check that it succeeded",
                docs=getdoc(FaultCode.INVALID_STATE),
            )
        return self._results[self._registry.lookup(long_name)]

    def _project(self, long_name, type, /):
        try:
            result = self._lookup(long_name)
        except NotFoundError:
            return type.zero
        if result.definition.type is not type:
            return type.zero
        return result.resolve(self.trigger).payload

    def get_flag(self, long_name, /):
        return self._project(long_name, ValueType.FLAG)

    def get_string(self, long_name, /):
        return self._project(long_name, ValueType.STRING)

    def get_int(self, long_name, /):
        return self._project(long_name, ValueType.INT)

    def get_float(self, long_name, /):
        return self._project(long_name, ValueType.FLOAT)

    def is_set(self, long_name, /):
        """
        Whether the option appeared in argv and its value passed validation.
        """
        try:
            result = self.get(long_name)
        except NotFoundError:
            return False
        return result.is_set and result.valid

    def get_validation_error(self, long_name, /):
        """
        The validator's message for `long_name` (None when valid or unknown).
        """
        try:
            return self.get(long_name).error
        except NotFoundError:
            return None

    def get_positional(self):
        """
        Positional arguments in encounter order.
        """
        self._guard()
        if not self._parsed:
            raise ParserStateError(
                "positional arguments cannot be read before a successful parse",
                title="invalid state",
                code=FaultCode.INVALID_STATE,
                hint="call parse() first and check that it succeeded",
                docs=getdoc(FaultCode.INVALID_STATE),
            )
        return tuple(self._positionals)

    # --- presentation and teardown ---

    def print_help(self, program_name=Unset, /):
        """
        Print usage text for the registered definitions on stdout.
        """
        self._guard()
        _print_help(self, program_name)

    def destroy(self):
        """
        Release definitions, results and positionals. Calling it again is a no-op.
        """
        if self._destroyed:
            return
        self._results.clear()
        self._positionals.clear()
        self._registry.clear()
        self._destroyed = True


def create(*args, **kwargs):
    """
    Create a Parser (arguments are forwarded to Parser).
    """
    return Parser(*args, **kwargs)


def destroy(parser, /):
    """
    Destroy a parser; None and already-destroyed parsers are ignored.
    """
    if parser is None:
        return
    if not isinstance(parser, Parser):
        raise TypeError("destroy() argument must be a parser")
    parser.destroy()


__all__ = (
    "Parser",
    "create",
    "destroy",
)

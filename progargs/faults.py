"""
Progargs faults: error and warning types, codes and rendering.

Taxonomy
- RegistrationError (also a ValueError): bad declarations, raised directly by
  the registry and the parser's add_* methods.
  • MissingNameError, MalformedNameError, DuplicatedNameError,
    MalformedDefinitionError, InvalidDefaultError, LateDefinitionError
- NotFoundError (also a LookupError): an accessor key no definition owns.
- ParserStateError (also a RuntimeError): reads before a successful parse or after destroy().
- ParseError: fatal to the parse in progress, surfaced through Parser.trigger.
  • UnknownArgumentError, MissingValueError, RequiredMissingError, MalformedValueError
- ValidationWarning: a validator rejected a value; the accessor serves the default.

Every fault carries a message and a read-only `options` mapping (code, title,
hint, docs and whatever context the raiser attached: name, token, index,
definition...). copy.replace(fault, **options) returns a copy with more options.

Surfacing (trigger)
- shell=False: exceptions are raised, warnings go through the warnings module,
  attributed to the first caller outside progargs and never deduplicated.
- shell=True: the fault is printed on stderr; exceptions then exit with status 1.
- colorful and fancy shape the printed form (styles on/off, Panel around it).

Host hooks read from __main__
- __prog__: program name when the fault carries none.
- __styles__: palette overrides.
- __codes__: FaultCode -> label used instead of the number.
- __docs__: FaultCode -> documentation string (see getdoc()).
"""
import copy
import inspect
import os.path
import sys
import warnings
from abc import ABC
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)

_PACKAGE = os.path.dirname(os.path.abspath(__file__))


class FaultCode(IntEnum):
    """
    stable numeric identifiers, one per fault kind.

    - 111xx registration, 112xx lookup and state, 113xx parsing: errors
    - 12xxx: warnings
    """
    # --- registration errors (111xx) ---
    MISSING_NAME                = 11101
    MALFORMED_NAME              = 11102
    DUPLICATED_NAME             = 11103
    MALFORMED_DEFINITION        = 11104
    INVALID_DEFAULT             = 11105
    LATE_DEFINITION             = 11106

    # --- lookup errors (112xx) ---
    UNKNOWN_DEFINITION          = 11201
    INVALID_STATE               = 11202

    # --- parsing errors (113xx) ---
    UNKNOWN_ARGUMENT            = 11301
    MISSING_VALUE               = 11302
    REQUIRED_MISSING            = 11303
    MALFORMED_VALUE             = 11304

    # --- warnings (12xxx) ---
    VALIDATION_FAILURE          = 12101
    DELEGATED_VALIDATION        = 12102

    def normalize(self):
        """
        label shown in diagnostics: __main__.__codes__[self] when the host maps
        this code, the number as a string otherwise.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class _Fault:
    """
    state and rendering shared by ArgumentException and ArgumentWarning.
    """
    __kind__ = "fault"
    __palette__ = {}

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **self.options | overrides)

    def __rich__(self):
        main = __import__("__main__")
        kind = self.__kind__
        colorful = self.options.get("colorful", True)

        styles = defaultdict(str, self.__palette__ | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.code
        header = Text.assemble(
            "[ ",
            text(self.options.get("prog") or getattr(main, "__prog__", "progargs"), styler("prog-name")),
            " — ",
            text(code.normalize() if code else "", styler("code")),
            " | ",
            text(str(self.options.get("title", kind)).title(), styler(kind + "-title")),
            " ]"
        )
        body = [text(self.message, styler(kind + "-message"))]
        if hint := self.options.get("hint"):
            body.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if not self.options.get("fancy", False):
            return Group(header, *body)

        # ratio narrows the panel relative to the console
        try:
            width = int((console.width - 4) * self.options["ratio"])
        except KeyError:
            width = None
        return Panel(Group(*body), title=header, title_align="left", width=width)


class ArgumentException(_Fault, Exception):
    __kind__ = "error"
    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white
        "code": "bold #00E5FF",  # cyan
        "error-title": "bold #FF4DA6",  # pink
        "error-message": "#C8C8D0",  # light gray
        "hint-arrow": "#9CE19C dim",
        "hint": "italic #9CE19C",  # green
    }

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)


class RegistrationError(ArgumentException, ValueError): ...
class MissingNameError(RegistrationError): ...
class MalformedNameError(RegistrationError): ...
class DuplicatedNameError(RegistrationError): ...
class MalformedDefinitionError(RegistrationError): ...
class InvalidDefaultError(RegistrationError): ...
class LateDefinitionError(RegistrationError): ...

class NotFoundError(ArgumentException, LookupError): ...
class ParserStateError(ArgumentException, RuntimeError): ...

class ParseError(ArgumentException): ...
class UnknownArgumentError(ParseError): ...
class MissingValueError(ParseError): ...
class RequiredMissingError(ParseError): ...
class MalformedValueError(ParseError): ...


class ArgumentWarning(_Fault, ABC, Warning):
    __kind__ = "warning"
    __palette__ = {
        "prog-name": "bold #E6E6F0",  # near-white
        "code": "bold #FFB400",  # amber
        "warning-title": "bold #FFC2E0",  # pale pink
        "warning-message": "#D6D6DE",  # light gray
        "hint-arrow": "#B8EFAF dim",
        "hint": "italic #B8EFAF",  # pale green
    }

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            frame = inspect.currentframe()
            while frame.f_back and os.path.dirname(os.path.abspath(frame.f_code.co_filename)) == _PACKAGE:
                frame = frame.f_back
            # a fresh registry per report: each failed validation is shown
            return warnings.warn_explicit(
                self,
                type(self),
                frame.f_code.co_filename,
                frame.f_lineno,
                module=frame.f_globals.get("__name__"),
                registry={},
                module_globals=frame.f_globals,
            )
        console.print(self)


class ValidationWarning(ArgumentWarning): ...


def trigger(fault, /, **options):
    """
    Surface `fault` after merging `options` into a copy of it.

    `fault` must implement __trigger__ and __replace__ (every progargs fault does).
    Parser.trigger calls this with the parser's prog/shell/fancy/colorful.
    """
    if not callable(getattr(fault, "__trigger__", None)) or not callable(getattr(fault, "__replace__", None)):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    __main__.__docs__[code], or None when the host documents nothing for it.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    return getattr(__import__("__main__"), "__docs__", {}).get(code)


__all__ = (
    "ArgumentException",
    "RegistrationError",
    "MissingNameError",
    "MalformedNameError",
    "DuplicatedNameError",
    "MalformedDefinitionError",
    "InvalidDefaultError",
    "LateDefinitionError",
    "NotFoundError",
    "ParserStateError",
    "ParseError",
    "UnknownArgumentError",
    "MissingValueError",
    "RequiredMissingError",
    "MalformedValueError",
    "ArgumentWarning",
    "ValidationWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)

"""
Progargs parse results and the lazy validation cache.

Overview
- Outcome: what a validator returns (valid, or invalid with an optional message).
  Validators may also return a plain bool.
- ValidationState: UNVALIDATED → VALID | INVALID, entered at most once.
- Result: one per definition per parse. Holds the current value (the definition's
  default until the option is matched), is_set, and the validation state.

Validation contract
- validate() runs on the first read only. Without a validator the result is
  vacuously VALID; otherwise the validator is called as validator(payload, type)
  and its verdict is cached forever.
- A validator that raises is treated as a rejection: the exception text becomes the
  message and the reported warning carries the exception.
- An INVALID verdict with a non-empty message is reported exactly once, as a
  ValidationWarning tagged with the definition's long name.
- resolve() serves the current value when VALID and the definition's default when
  INVALID.
"""
from enum import Enum
from typing import final

from .faults import *
from .utils import *
from .values import Value


class ValidationState(Enum):
    UNVALIDATED = "unvalidated"
    VALID = "valid"
    INVALID = "invalid"


@final
class Outcome(metaclass=IntrospectableType):
    """
    Validator verdict.

    Build with Outcome.valid() or Outcome.invalid("explanation"). Truthiness
    follows the verdict, so `if outcome:` reads naturally.
    """

    __introspectable__ = (
        "ok",
        "message",
    )

    def __init__(self, ok, message=None, /):
        if not isinstance(ok, bool):
            raise TypeError("outcome 'ok' must be a boolean")
        if not isinstance(message, str | None):
            raise TypeError("outcome 'message' must be a string")
        if ok and message:
            raise ValueError("a valid outcome cannot carry a message")
        self._ok = ok
        self._message = message or None

    @classmethod
    def valid(cls):
        return cls(True)

    @classmethod
    def invalid(cls, message=None, /):
        return cls(False, message)

    @classmethod
    def normalize(cls, object, /):
        """
        Accept a bool or an Outcome as returned by a validator.

        Raises
        - TypeError: anything else.
        """
        if isinstance(object, Outcome):
            return object
        if isinstance(object, bool):
            return cls(object)
        raise TypeError("validator must return a boolean or an outcome, not %r" % type(object).__name__)

    def __bool__(self):
        return self._ok


class Result(metaclass=IntrospectableType):
    """
    Per-definition parse outcome plus validation cache state.

    Properties
    - definition: the owning Definition (not copied).
    - value: the current Value (default until matched on the command line).
    - is_set: True iff the option appeared in argv.
    - state: ValidationState.
    - error: the validator's message once INVALID (None otherwise).
    """

    __introspectable__ = (
        "definition",
        "value",
        "is_set",
        "state",
        "error",
    )

    def __init__(self, definition, /):
        self._definition = definition
        self._value = definition.default
        self._is_set = False
        self._state = ValidationState.UNVALIDATED
        self._error = None

    @property
    def attempted(self):
        return self._state is not ValidationState.UNVALIDATED

    @property
    def valid(self):
        """
        True once VALID; False while UNVALIDATED or when INVALID.
        """
        return self._state is ValidationState.VALID

    def assign(self, value, /):
        """
        Store a value matched on the command line and mark the result as set.

        Raises
        - TypeError: the value's tag differs from the definition's type.
        - RuntimeError: the result was already validated (values are frozen after the first read).
        """
        if not isinstance(value, Value) or value.type is not self._definition.type:
            raise TypeError("%r expects a %s value" % (self._definition.long_name, self._definition.type.value))
        if self.attempted:
            raise RuntimeError("%r was already validated" % self._definition.long_name)
        self._value = value
        self._is_set = True

    def validate(self, report=Unset, /):
        """
        Run the validator once and cache the verdict.

        Parameters
        - report: Unset | callable
          receives the ValidationWarning when the verdict is INVALID with a message.
          Unset triggers the warning directly (non-shell semantics).

        Returns
        - bool: the cached verdict.
        """
        if self.attempted:
            return self.valid

        if (validator := self._definition.validator) is None:
            self._state = ValidationState.VALID
            return True

        exception = None
        try:
            outcome = validator(self._value.payload, self._value.type)
        except Exception as error:
            exception = error
            outcome = Outcome.invalid(str(error) or type(error).__name__)
        outcome = Outcome.normalize(outcome)

        self._state = ValidationState.VALID if outcome else ValidationState.INVALID
        self._error = outcome.message if not outcome else None

        if not outcome and outcome.message:
            code = FaultCode.DELEGATED_VALIDATION if exception else FaultCode.VALIDATION_FAILURE
            warning = ValidationWarning(
                "validation error for %r: %s" % (self._definition.long_name, outcome.message),
                title="invalid value",
                code=code,
                name=self._definition.long_name,
                definition=self._definition,
                value=self._value,
                hint="using the default %s instead" % _display(self._definition.default),
                docs=getdoc(code),
                **({"exception": exception} if exception else {})
            )
            coalesce(report, trigger)(warning)

        return self.valid

    def resolve(self, report=Unset, /):
        """
        Value served to accessors: the current value when valid, the default otherwise.
        """
        return self._value if self.validate(report) else self._definition.default


def _display(value, /):
    return "(none)" if value.payload is None else repr(value.payload)


__all__ = (
    "ValidationState",
    "Outcome",
    "Result",
)

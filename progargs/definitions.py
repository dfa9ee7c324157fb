r"""
Progargs argument definitions and the definition registry.

Overview
- Definition: an argument declaration (short alias, long name, description, value
  type, requiredness, default value and an optional validator). Everything but the
  validator is read-only once built.
- Registry: the ordered, append-only collection of definitions owned by a parser.
  • register(...) builds and appends a Definition.
  • attach_validator(long_name, validator) stores a validator on an existing definition.
  • find(name) resolves an option token by short or long name.
  • lookup(long_name) resolves accessor keys (exact long-name match).

Metadata (sanitized on construction)
- long_name: required, non-empty, must look like an option ("-x", "--name").
- short_name: None or a name of the same shape, different from long_name.
- description: None | str | Text, trimmed, non-empty when provided.
- type: ValueType.
- required: bool; flags cannot be required.
- default: Unset (the type's zero value) or a payload fitting the type.

Uniqueness
- Every name (short or long) is unique across the registry, so find() can never
  resolve a token to two different definitions.
"""
import builtins
import re

from rich.text import Text

from .faults import *
from .values import Value, ValueType
from .utils import *

_NAME = r"-\S+"


def _sanitize_names(cls, metadata, /):
    """
    Internal: validate short_name/long_name.

    Raises
    - MissingNameError: long_name absent or blank.
    - MalformedNameError: a name is not a string or does not look like an option.
    - DuplicatedNameError: short_name equals long_name.
    """
    long_name = metadata["long_name"]
    if long_name is None or isinstance(long_name, str) and not long_name.strip():
        raise MissingNameError(
            "%s must specify a long name" % cls.__typename__,
            title="missing name",
            code=FaultCode.MISSING_NAME,
            hint="pass a long name such as '--verbose'",
            docs=getdoc(FaultCode.MISSING_NAME),
        )
    if not isinstance(long_name, str):
        raise MalformedNameError(
            "%s long name must be a string" % cls.__typename__,
            title="malformed name",
            code=FaultCode.MALFORMED_NAME,
            hint="pass a long name such as '--verbose'",
            docs=getdoc(FaultCode.MALFORMED_NAME),
        )

    metadata["long_name"] = long_name = long_name.strip()

    if (short_name := metadata["short_name"]) is not None:
        if not isinstance(short_name, str):
            raise MalformedNameError(
                "%s short name must be a string" % cls.__typename__,
                title="malformed name",
                code=FaultCode.MALFORMED_NAME,
                hint="pass a short name such as '-v', or None",
                docs=getdoc(FaultCode.MALFORMED_NAME),
            )
        metadata["short_name"] = short_name = short_name.strip()

    for name in filter(None, (short_name, long_name)):
        if not re.fullmatch(_NAME, name):
            raise MalformedNameError(
                "%s name %r must start with '-' and cannot contain spaces" % (cls.__typename__, name),
                title="malformed name",
                code=FaultCode.MALFORMED_NAME,
                name=name,
                hint="use shell-style option names such as '-v' or '--verbose'",
                docs=getdoc(FaultCode.MALFORMED_NAME),
            )

    if short_name == long_name:
        raise DuplicatedNameError(
            "%s short and long names cannot both be %r" % (cls.__typename__, long_name),
            title="duplicated name",
            code=FaultCode.DUPLICATED_NAME,
            name=long_name,
            hint="drop the short name or pick a different one",
            docs=getdoc(FaultCode.DUPLICATED_NAME),
        )
    metadata["short_name"] = short_name or None


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate description/type/required/default.

    Raises
    - TypeError: description/type/required of the wrong kind.
    - ValueError: blank description.
    - MalformedDefinitionError: a required flag.
    - InvalidDefaultError: a default that does not fit the type.
    """
    if not isinstance(description := metadata["description"], str | Text | None):
        raise TypeError(f"{cls.__typename__} 'description' must be a string")
    elif isinstance(description, str) and not (description := description.strip()):
        raise ValueError(f"{cls.__typename__} 'description' cannot be empty")
    metadata["description"] = description

    if not isinstance(type := metadata["type"], ValueType):
        raise TypeError(f"{cls.__typename__} 'type' must be a value-type")

    if not isinstance(required := metadata["required"], bool):
        raise TypeError(f"{cls.__typename__} 'required' must be a boolean")
    if required and type is ValueType.FLAG:
        raise MalformedDefinitionError(
            "flag %r cannot be required" % metadata["long_name"],
            title="malformed definition",
            code=FaultCode.MALFORMED_DEFINITION,
            name=metadata["long_name"],
            hint="flags are presence-only; declare a string/int/float instead",
            docs=getdoc(FaultCode.MALFORMED_DEFINITION),
        )

    default = metadata["default"]
    if isinstance(default, Value):
        default = default.payload if default.type is type else Unset
        if default is Unset:
            raise InvalidDefaultError(
                "default of %r must be a %s value" % (metadata["long_name"], type.value),
                title="invalid default",
                code=FaultCode.INVALID_DEFAULT,
                name=metadata["long_name"],
                hint="use a default that matches the declared type",
                docs=getdoc(FaultCode.INVALID_DEFAULT),
            )
    if default is not Unset and not type.accepts(default):
        raise InvalidDefaultError(
            "default %r of %r must be a %s value" % (default, metadata["long_name"], type.value),
            title="invalid default",
            code=FaultCode.INVALID_DEFAULT,
            name=metadata["long_name"],
            hint="use a default that matches the declared type",
            docs=getdoc(FaultCode.INVALID_DEFAULT),
        )
    try:
        metadata["default"] = Value(type, default)
    except OverflowError:
        raise InvalidDefaultError(
            "default %r of %r does not fit a float" % (default, metadata["long_name"]),
            title="invalid default",
            code=FaultCode.INVALID_DEFAULT,
            name=metadata["long_name"],
            hint="use a default within the float range",
            docs=getdoc(FaultCode.INVALID_DEFAULT),
        ) from None


class Definition(metaclass=IntrospectableType):
    """
    Registered argument declaration.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values.
    - names: (short_name, long_name) without the missing short alias.
    """

    __introspectable__ = (
        "short_name",
        "long_name",
        "description",
        "type",
        "required",
        "default",
        "validator",
    )

    def __init__(
            self,
            short_name,
            long_name,
            /,
            description=None,
            type=ValueType.STRING,
            required=False,
            default=Unset,
            *,
            validator=None
    ):
        """
        Construct a Definition with the provided metadata.

        Parameters
        - short_name: str | None
          Optional alias (e.g., "-v").
        - long_name: str
          Mandatory unique key (e.g., "--verbose"); accessors use it.
        - description: str | Text | None
          Short help text.
        - type: ValueType
          Value tag; drives coercion and accessor checks.
        - required: bool
          Parsing fails when a required definition is not given (never for flags).
        - default: Unset | payload | Value
          Value used when the option is absent or its validator rejects the input.
          Unset means the type's zero value.
        - validator: callable | None (keyword-only)
          See Registry.attach_validator.
        """
        metadata = {
            "short_name": short_name,
            "long_name": long_name,
            "description": description,
            "type": type,
            "required": required,
            "default": default,
        }
        _sanitize_names(builtins.type(self), metadata)
        _sanitize_metadata(builtins.type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._validator = None
        if validator is not None:
            self._attach(validator)

    @property
    def names(self):
        return tuple(name for name in (self._short_name, self._long_name) if name)

    def matches(self, name, /):
        """
        whether `name` is this definition's short or long name.
        """
        return name == self._long_name or (self._short_name is not None and name == self._short_name)

    def _attach(self, validator, /):
        if not callable(validator):
            raise TypeError(f"{type(self).__typename__} 'validator' must be callable")
        self._validator = validator


class Registry(metaclass=IntrospectableType):
    """
    Ordered, append-only collection of definitions.

    Lookups
    - find(name): short or long name, first registered match wins (names are unique,
      so the first match is the only one).
    - lookup(long_name): exact long-name match, NotFoundError otherwise.

    The registry itself never reorders or removes definitions; clear() exists only
    for parser teardown.
    """

    __introspectable__ = (
        "definitions",
    )

    def __init__(self):
        self._definitions = []
        self._names = {}

    def register(
            self,
            short_name,
            long_name,
            /,
            description=None,
            type=ValueType.STRING,
            required=False,
            default=Unset
    ):
        """
        Build and append a Definition.

        Returns
        - Definition: the registered handle.

        Raises
        - RegistrationError subclasses (see Definition and _sanitize_* helpers).
        - DuplicatedNameError: a name is already registered (short or long).
        """
        definition = Definition(short_name, long_name, description, type, required, default)

        for name in definition.names:
            if name in self._names:
                raise DuplicatedNameError(
                    "name %r is already registered by %r" % (name, self._names[name].long_name),
                    title="duplicated name",
                    code=FaultCode.DUPLICATED_NAME,
                    name=name,
                    definition=self._names[name],
                    hint="each short and long name can be registered only once",
                    docs=getdoc(FaultCode.DUPLICATED_NAME),
                )

        self._definitions.append(definition)
        self._names.update(dict.fromkeys(definition.names, definition))
        return definition

    def attach_validator(self, long_name, validator, /):
        """
        Attach `validator` to the definition whose long name is exactly `long_name`.

        Raises
        - NotFoundError: no definition has that long name.
        - TypeError: validator is not callable.
        """
        self.lookup(long_name)._attach(validator)

    def find(self, name, /):
        """
        Resolve an option token by short or long name; None when unknown.
        """
        for definition in self._definitions:
            if definition.matches(name):
                return definition
        return None

    def lookup(self, long_name, /):
        """
        Resolve an accessor key by exact long name.

        Raises
        - NotFoundError: no definition has that long name.
        """
        for definition in self._definitions:
            if definition.long_name == long_name:
                return definition
        raise NotFoundError(
            "no argument is registered as %r" % (long_name,),
            title="unknown definition",
            code=FaultCode.UNKNOWN_DEFINITION,
            name=long_name,
            hint="register it with add_flag/add_string/add_int/add_float first",
            docs=getdoc(FaultCode.UNKNOWN_DEFINITION),
        )

    def clear(self):
        self._definitions.clear()
        self._names.clear()

    def __len__(self):
        return len(self._definitions)

    def __iter__(self):
        return iter(tuple(self._definitions))

    def __contains__(self, name, /):
        return name in self._names


__all__ = (
    "Definition",
    "Registry",
)

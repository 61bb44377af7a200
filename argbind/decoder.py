r"""
argbind decoder: one left-to-right pass over command-line tokens.

Token shapes
- '--name', '-name', '--name=value', '-name=value' (any number of dashes, all equivalent).

Per flag (looked up after stripping dashes from the part before the first '=')
- bool:    set True; never consumes an operand; an inline value is ignored.
- list:    inline value split on ',' gives the first elements; then every following
           token is one more element until a token that starts with '-' and names a
           known flag (so '-5' is a value, '--other' is a boundary) or the end.
- scalars: the inline value, else the next token (whatever it looks like), else "".
- others:  UnsupportedTypeError.

Guarantees
- flags apply in token order; a repeated scalar keeps the last value and a repeated
  list flag replaces the earlier list.
- the first fault aborts decoding; fields already written stay written.
"""
import logging
import shlex
import sys
from collections.abc import Iterable

from .coercion import coerce
from .faults import (
    FaultCode,
    DecodeException,
    UnknownFlagError,
    UnsupportedTypeError,
    trigger,
)
from .kinds import Bool, List, Excluded
from .schema import build
from .timestamps import localzone
from .utils import Unset

logger = logging.getLogger(__name__)


def _split(token):
    """split a token into (flag part, inline value or None) on the first '='."""
    flag, separator, value = token.partition("=")
    return flag, value if separator else None


def _boundary(token, mapping):
    """tell whether a token ends a list run: dash-prefixed and naming a known flag."""
    return token.startswith("-") and _split(token)[0].strip("-") in mapping


def _store(target, flag, values, zone):
    try:
        value = coerce(values, target.kind, zone=zone)
    except DecodeException as error:
        # same fault kind as the coercer's, annotated with the flag
        raise type(error)(
            "cannot decode %s (%s) into %s: %s" % (flag, " ".join(values), target.kind, error.message),
            **{
                "title": "invalid value",
                "code": FaultCode.INVALID_VALUE,
                "hint": "check the value given to %s" % flag,
                **error.options,
                "input": flag,
                "values": tuple(values),
                "type": target.kind,
            },
        ) from error
    target.set(value)
    logger.debug("set %s to %r", target.name, value)


def decode(record, tokens, /, *, zone=Unset, **options):
    """
    decode command-line tokens into a dataclass record, in place.

    parameters
    - record: dataclass instance
      the configuration record; its flag table is rebuilt on every call (see schema.build).
    - tokens: Iterable[str]
      the raw arguments, without the program name.
    - zone: tzinfo (keyword-only)
      zone for timestamps without one; defaults to timestamps.localzone().
    - **options: rendering options forwarded to build() for its warnings
      (shell, fancy, colorful).

    errors
    - UnknownFlagError: a token names no known flag (excluded and private fields included).
    - InvalidValueError (TimestampFormatError for timestamps): a value could not be
      converted; same kind as the coercion fault, annotated with the flag and chained to it.
    - UnsupportedTypeError: a value was given to a field whose type cannot be decoded.
    """
    if zone is Unset:
        zone = localzone()

    mapping = build(record, **options)
    tokens = list(tokens)
    count = len(tokens)
    index = 0

    while index < count:
        flag, value = _split(tokens[index])
        try:
            target = mapping[flag.strip("-")]
        except KeyError:
            raise UnknownFlagError(
                "unknown flag %r" % flag,
                title="unknown flag",
                code=FaultCode.UNKNOWN_FLAG,
                hint="check the spelling of %r" % flag,
                input=flag,
            ) from None
        index += 1
        logger.debug("resolved %r to %r", flag, target)

        match target.kind:
            case Bool():
                target.set(True)
            case List():
                values = value.split(",") if value is not None else []
                while index < count and not _boundary(tokens[index], mapping):
                    values.append(tokens[index])
                    index += 1
                _store(target, flag, values, zone)
            case Excluded(type=annotation):
                raise UnsupportedTypeError(
                    "cannot decode %s into %s" % (flag, target.kind),
                    title="unsupported type",
                    code=FaultCode.UNSUPPORTED_TYPE,
                    hint="%s fields cannot be set from the command line" % target.kind,
                    input=flag,
                    type=annotation,
                )
            case _:
                if value is None:
                    if index < count:
                        value = tokens[index]
                        index += 1
                    else:
                        value = ""
                _store(target, flag, [value], zone)


def parse_args(record, prompt=Unset, /, *, zone=Unset, shell=False, fancy=False, colorful=True, deferred=False):
    """
    decode a prompt into `record` and return it, surfacing faults via trigger().

    parameters
    - prompt:
      • Unset: read tokens from sys.argv[1:].
      • str: shell-like string; will be split via shlex.split.
      • Iterable[str]: pre-tokenized sequence, used as-is.
    - zone: see decode().
    - shell: render faults with rich on stderr and exit with status 1 instead of raising.
    - fancy / colorful: rendering style in shell mode.
    - deferred: in shell mode, render but return instead of exiting.

    raises
    - TypeError: when prompt is not Unset/str/Iterable[str].
    - DecodeException subclasses outside shell mode.
    """
    if prompt is Unset:
        tokens = sys.argv[1:]
    elif isinstance(prompt, str):
        tokens = shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse_args() prompt must be a string or an iterable of strings")
    else:
        raise TypeError("parse_args() prompt must be a string or an iterable of strings")

    try:
        decode(record, tokens, zone=zone, shell=shell, fancy=fancy, colorful=colorful)
    except DecodeException as fault:
        trigger(fault, shell=shell, fancy=fancy, colorful=colorful, deferred=deferred)
    return record


__all__ = (
    "decode",
    "parse_args",
)

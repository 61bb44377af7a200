"""
argbind coercion: raw command-line strings into typed values.

    >>> coerce(["0x2A"], SignedInt(8))
    42
    >>> coerce(["1.5", "-2"], List(Float(32)))
    [1.5, -2.0]

Scalar kinds take exactly one raw string; lists take any number and coerce each
element with the element kind. Every failure is a DecodeException subclass whose
message names the offending text; the decoder adds the flag context on top.
"""
import logging
import math
import re
import struct

from .faults import (
    FaultCode,
    ArityMismatchError,
    InvalidValueError,
    UnsupportedTypeError,
    DecodeException,
)
from .kinds import Bool, String, SignedInt, UnsignedInt, Float, Timestamp, List, Excluded
from .timestamps import parse as _timestamp
from .utils import Unset

logger = logging.getLogger(__name__)

_SIGNED = {10: re.compile(r"[+-]?[0-9]+"), 16: re.compile(r"[+-]?[0-9a-fA-F]+")}
_UNSIGNED = {10: re.compile(r"[0-9]+"), 16: re.compile(r"[0-9a-fA-F]+")}
_FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf(?:inity)?|nan)", re.IGNORECASE)


def _invalid(message, kind, value):
    return InvalidValueError(
        message,
        title="invalid value",
        code=FaultCode.INVALID_VALUE,
        hint="pass a valid %s value" % kind,
        input=value,
        type=kind,
    )


def _integer(value, kind):
    # '0x' switches the remainder to base 16; anything else is base 10
    digits, base = (value[2:], 16) if value.startswith("0x") else (value, 10)
    patterns = _UNSIGNED if isinstance(kind, UnsignedInt) else _SIGNED
    if not patterns[base].fullmatch(digits):
        raise _invalid("invalid %s literal %r" % (kind, value), kind, value)
    number = int(digits, base)
    if not kind.minimum <= number <= kind.maximum:
        raise _invalid("%r is out of range for %s" % (value, kind), kind, value)
    return number


def _float(value, kind):
    if not _FLOAT.fullmatch(value):
        raise _invalid("invalid %s literal %r" % (kind, value), kind, value)
    number = float(value)
    if math.isinf(number) and "inf" not in value.lower():
        raise _invalid("%r is out of range for %s" % (value, kind), kind, value)
    if kind.width == 32:
        try:
            number = struct.unpack("<f", struct.pack("<f", number))[0]
        except OverflowError:
            raise _invalid("%r is out of range for %s" % (value, kind), kind, value) from None
    return number


def coerce(values, kind, /, *, zone=Unset):
    """
    convert raw strings into the value for `kind`.

    parameters
    - values: Sequence[str]
      the raw strings; exactly one for scalar kinds.
    - kind: Kind
      the target kind (see argbind.kinds).
    - zone: tzinfo (keyword-only)
      zone for timestamps without one; defaults to timestamps.localzone().

    returns
    - bool | str | int | float | datetime | list, per kind.

    errors
    - ArityMismatchError: a scalar kind received zero or several values.
    - InvalidValueError: malformed or out-of-range text; for lists, the failing
      element position is named and the element fault is chained.
    - TimestampFormatError: no timestamp layout matched.
    - UnsupportedTypeError: Excluded kinds, always.
    """
    values = list(values)
    logger.debug("coerce %r into %s", values, kind)

    match kind:
        case List(element=element):
            result = []
            for index, value in enumerate(values):
                try:
                    result.append(coerce([value], element, zone=zone))
                except DecodeException as error:
                    raise InvalidValueError(
                        "list element %d: %s" % (index, error.message),
                        title="invalid list element",
                        code=FaultCode.INVALID_VALUE,
                        hint="check the value at position %d" % index,
                        input=value,
                        index=index,
                        type=kind,
                    ) from error
            return result
        case Excluded(type=annotation):
            raise UnsupportedTypeError(
                "cannot decode into %s" % kind,
                title="unsupported type",
                code=FaultCode.UNSUPPORTED_TYPE,
                hint="use a bool, str, int, float, datetime or list field instead",
                type=annotation,
            )

    if len(values) != 1:
        raise ArityMismatchError(
            "cannot set a scalar %s to %d values" % (kind, len(values)),
            title="wrong number of values",
            code=FaultCode.ARITY_MISMATCH,
            hint="pass exactly one value",
            values=tuple(values),
            type=kind,
        )

    value, = values
    match kind:
        case Bool():
            return True
        case String():
            return value
        case SignedInt() | UnsignedInt():
            return _integer(value, kind)
        case Float():
            return _float(value, kind)
        case Timestamp():
            return _timestamp(value, zone=zone)
        case _:
            raise TypeError("coerce() argument must be a kind, not %r" % kind)


__all__ = (
    "coerce",
)

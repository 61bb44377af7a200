r"""
argbind kinds: the closed set of value shapes a flag can decode into.

Overview
- Kinds
  • Bool: presence-only switch, never consumes an operand.
  • String: operand stored verbatim.
  • SignedInt(width) / UnsignedInt(width): base-10 or '0x' base-16 integers, range-checked.
  • Float(width): decimal/scientific floats, narrowed to 32 bits when asked.
  • Timestamp: aware datetime.datetime, parsed against an ordered list of layouts.
  • List(element): zero or more values of one element kind.
  • Excluded(type): anything else; present in the mapping but undecodable.

- Width aliases
  • Int8, Int16, Int32, Int64, Uint, Uint8, Uint16, Uint32, Uint64, Float32, Float64
    are typing.Annotated aliases carrying their kind, e.g.

        @dataclass
        class Args:
            level: Int8 = 0
            mask: Uint32 = 0

- resolve(annotation)
  • Map a (resolved) field annotation to its kind. Annotated markers win, then
    Optional[T] unwraps to T, then the builtin leaf types, then list[T].

Consumers
- schema.build() resolves each leaf field once.
- coercion.coerce() and decoder.decode() dispatch on the kind with `match`;
  adding a kind means extending both.
"""
import datetime
import types
import typing
from dataclasses import dataclass
from typing import Annotated, Union, final


class Kind:
    """base type of every target kind."""
    __slots__ = ()


@final
@dataclass(frozen=True, slots=True)
class Bool(Kind):
    def __str__(self):
        return "bool"


@final
@dataclass(frozen=True, slots=True)
class String(Kind):
    def __str__(self):
        return "str"


@final
@dataclass(frozen=True, slots=True)
class SignedInt(Kind):
    width: int = 64

    def __post_init__(self):
        if self.width not in (8, 16, 32, 64):
            raise ValueError("signed integer width must be one of 8, 16, 32 or 64")

    @property
    def minimum(self):
        return -(1 << (self.width - 1))

    @property
    def maximum(self):
        return (1 << (self.width - 1)) - 1

    def __str__(self):
        return "int%d" % self.width


@final
@dataclass(frozen=True, slots=True)
class UnsignedInt(Kind):
    width: int = 64

    def __post_init__(self):
        if self.width not in (8, 16, 32, 64):
            raise ValueError("unsigned integer width must be one of 8, 16, 32 or 64")

    @property
    def minimum(self):
        return 0

    @property
    def maximum(self):
        return (1 << self.width) - 1

    def __str__(self):
        return "uint%d" % self.width


@final
@dataclass(frozen=True, slots=True)
class Float(Kind):
    width: int = 64

    def __post_init__(self):
        if self.width not in (32, 64):
            raise ValueError("float width must be 32 or 64")

    def __str__(self):
        return "float%d" % self.width


@final
@dataclass(frozen=True, slots=True)
class Timestamp(Kind):
    def __str__(self):
        return "datetime"


@final
@dataclass(frozen=True, slots=True)
class List(Kind):
    element: Kind

    def __str__(self):
        return "list[%s]" % self.element


@final
@dataclass(frozen=True, slots=True)
class Excluded(Kind):
    type: object

    def __str__(self):
        return typename(self.type)


Int8 = Annotated[int, SignedInt(8)]
Int16 = Annotated[int, SignedInt(16)]
Int32 = Annotated[int, SignedInt(32)]
Int64 = Annotated[int, SignedInt(64)]
Uint = Annotated[int, UnsignedInt(64)]
Uint8 = Annotated[int, UnsignedInt(8)]
Uint16 = Annotated[int, UnsignedInt(16)]
Uint32 = Annotated[int, UnsignedInt(32)]
Uint64 = Annotated[int, UnsignedInt(64)]
Float32 = Annotated[float, Float(32)]
Float64 = Annotated[float, Float(64)]


def typename(annotation, /):
    """human-friendly name of an annotation, used in fault messages."""
    if isinstance(annotation, type):
        return annotation.__qualname__
    return repr(annotation).removeprefix("typing.")


def optional(annotation, /):
    """
    return T when annotation is Optional[T] (T | None); otherwise None.
    """
    if typing.get_origin(annotation) in (Union, types.UnionType):
        arguments = typing.get_args(annotation)
        others = [argument for argument in arguments if argument is not type(None)]
        if len(others) == 1 and len(arguments) == 2:
            return others[0]
    return None


def strip(annotation, /):
    """
    drop Annotated metadata and a single Optional layer, keeping the bare type.
    """
    if typing.get_origin(annotation) is Annotated:
        annotation = typing.get_args(annotation)[0]
    if (inner := optional(annotation)) is not None:
        return strip(inner)
    return annotation


def resolve(annotation, /):
    """
    map a field annotation to its Kind.

    rules (first match wins)
    - Annotated[T, kind, ...] → the first Kind marker; without a marker, resolve(T).
    - T | None               → resolve(T).
    - bool/str/int/float     → Bool/String/SignedInt(64)/Float(64).
    - datetime.datetime      → Timestamp.
    - list[T]                → List(resolve(T)).
    - anything else          → Excluded(annotation).

    bool is tested before int since it is an int subclass.
    """
    if typing.get_origin(annotation) is Annotated:
        base, *markers = typing.get_args(annotation)
        for marker in markers:
            if isinstance(marker, Kind):
                return marker
        return resolve(base)

    if (inner := optional(annotation)) is not None:
        return resolve(inner)

    if annotation is bool:
        return Bool()
    if annotation is str:
        return String()
    if annotation is int:
        return SignedInt(64)
    if annotation is float:
        return Float(64)
    if annotation is datetime.datetime:
        return Timestamp()

    if typing.get_origin(annotation) is list and (arguments := typing.get_args(annotation)):
        return List(resolve(arguments[0]))

    return Excluded(annotation)


__all__ = (
    # Types
    "Kind",
    "Bool",
    "String",
    "SignedInt",
    "UnsignedInt",
    "Float",
    "Timestamp",
    "List",
    "Excluded",

    # Width aliases
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "Float32",
    "Float64",

    # Functions
    "resolve",
)

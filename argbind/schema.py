r"""
argbind schema mapping: dataclass records into flag-name → Target tables.

Overview
- arg(name, *, embedded=False, **field_options)
  • dataclasses.field() carrying argbind metadata:
      - "arg": explicit flag name (dashes stripped); exactly "-" excludes the field.
      - "embedded": merge a sub-record's flags into its parent without prefix.
  • plain dataclasses.field(metadata={"arg": ...}) works the same.

- build(record)
  • walk a dataclass instance (recursively) and return {flag name: Target}.
  • naming: explicit name, else the lower-cased field identifier; named sub-records
    prefix their flags with "<name>-", embedded ones do not.
  • fields starting with '_' and fields named "-" are left out entirely.
  • unsupported leaf types stay in the table with an Excluded kind; they only fail
    when a value is actually decoded for them.

- Target
  • writable binding (owner, attribute) into the original record, plus its kind.

Side effects
- a sub-record reached through an Optional field that is currently None is replaced,
  during build(), by zero(<its type>) so that decoded values have somewhere to live.
  this happens even if no flag under that path is ever supplied.

Collisions
- when two fields produce the same flag name, the one visited later (declaration
  order, depth-first) wins and a DuplicatedFlagWarning is emitted.

Example
    @dataclass
    class Sub:
        count: int = 0

    @dataclass
    class Args:
        verbose: bool = False
        level: Int8 = arg("lvl", default=0)
        sub: Sub = arg(default_factory=Sub)
        base: Sub = arg(embedded=True, default_factory=Sub)
        secret: str = arg("-", default="")

    sorted(build(Args()))  # ['count', 'lvl', 'sub-count', 'verbose']
"""
import dataclasses
import datetime
import logging
import typing

from .faults import FaultCode, DuplicatedFlagWarning, trigger
from .kinds import resolve, strip, optional
from .utils import Unset

logger = logging.getLogger(__name__)


def arg(name=Unset, /, *, embedded=False, **options):
    """
    declare a dataclass field with an explicit flag name and/or as embedded.

    parameters
    - name: str (positional-only)
      the flag name; leading/trailing dashes are stripped, "-" excludes the field.
    - embedded: bool
      for sub-record fields: merge their flags without the "<name>-" prefix.
    - **options: forwarded to dataclasses.field (default, default_factory, metadata, ...).
    """
    metadata = dict(options.pop("metadata", None) or {})
    if name is not Unset:
        if not isinstance(name, str):
            raise TypeError("arg() name must be a string")
        metadata["arg"] = name
    if embedded:
        metadata["embedded"] = True
    return dataclasses.field(metadata=metadata, **options)


def _is_record(annotation):
    return isinstance(annotation, type) and dataclasses.is_dataclass(annotation)


def zero(annotation, /):
    """
    build the zero value of an annotation.

    - Optional[T]                    → None
    - dataclass                      → instance with zero values for fields without defaults
    - datetime.datetime              → datetime.min in UTC
    - bool/str/int/float/list/dict/… → the type called with no arguments
    - anything else                  → None
    """
    if typing.get_origin(annotation) is typing.Annotated:
        annotation = typing.get_args(annotation)[0]
    if optional(annotation) is not None:
        return None
    if _is_record(annotation):
        hints = typing.get_type_hints(annotation, include_extras=True)
        return annotation(**{
            field.name: zero(hints.get(field.name, field.type))
            for field in dataclasses.fields(annotation)
            if field.init
            and field.default is dataclasses.MISSING
            and field.default_factory is dataclasses.MISSING
        })
    if annotation is datetime.datetime:
        return datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)
    origin = typing.get_origin(annotation) or annotation
    if isinstance(origin, type):
        try:
            return origin()
        except TypeError:
            pass
    return None


class Target:
    """
    writable binding between a flag name and an attribute of a record.

    attributes
    - name: full flag name (prefixes included).
    - kind: the Kind decoded values take.
    - owner / attribute: where set() stores the value (setattr(owner, attribute, value)).
    - annotation: the field annotation the kind was resolved from.
    """
    __slots__ = ("name", "kind", "owner", "attribute", "annotation")

    def __init__(self, name, kind, owner, attribute, annotation):
        self.name = name
        self.kind = kind
        self.owner = owner
        self.attribute = attribute
        self.annotation = annotation

    def get(self):
        return getattr(self.owner, self.attribute)

    def set(self, value, /):
        setattr(self.owner, self.attribute, value)

    def __repr__(self):
        return "Target(%r, %s, %s.%s)" % (self.name, self.kind, type(self.owner).__qualname__, self.attribute)


def _put(mapping, name, target, options):
    if name in mapping:
        trigger(DuplicatedFlagWarning(
            "flag %r is declared by both %s.%s and %s.%s; the latter wins" % (
                name,
                type(mapping[name].owner).__qualname__, mapping[name].attribute,
                type(target.owner).__qualname__, target.attribute,
            ),
            title="duplicated flag",
            code=FaultCode.DUPLICATED_FLAG,
            hint="give one of the fields an explicit name with arg(\"...\")",
            input=name,
        ), **options)
    mapping[name] = target


def _walk(record, mapping, prefix, options):
    if type(record).__dataclass_params__.frozen:
        raise TypeError("cannot bind flags to frozen dataclass %s" % type(record).__qualname__)

    hints = typing.get_type_hints(type(record), include_extras=True)
    for field in dataclasses.fields(record):
        if field.name.startswith("_"):
            continue
        if (name := field.metadata.get("arg", "")) == "-":
            continue
        name = name.strip("-") if name else field.name.lower()

        annotation = hints.get(field.name, field.type)
        if _is_record(base := strip(annotation)):
            if (value := getattr(record, field.name)) is None:
                setattr(record, field.name, value := zero(base))
                logger.debug("attached empty %s to %s.%s", base.__qualname__, type(record).__qualname__, field.name)
            _walk(value, mapping, prefix if field.metadata.get("embedded") else prefix + name + "-", options)
        else:
            _put(mapping, prefix + name, Target(prefix + name, resolve(annotation), record, field.name, annotation), options)


def build(record, /, **options):
    """
    derive the flag table of a dataclass instance.

    options
    - forwarded to trigger() for DuplicatedFlagWarning (shell, fancy, colorful, ...).

    returns
    - dict[str, Target] with one entry per reachable leaf field.

    errors
    - TypeError when record is not a (non-frozen) dataclass instance.
    """
    if isinstance(record, type) or not dataclasses.is_dataclass(record):
        raise TypeError("build() argument must be a dataclass instance")
    mapping = {}
    _walk(record, mapping, "", options)
    logger.debug("derived %d flags from %s", len(mapping), type(record).__qualname__)
    return mapping


__all__ = (
    "Target",
    "arg",
    "build",
    "zero",
)

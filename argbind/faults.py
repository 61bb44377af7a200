"""
argbind faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue
  (errors and warnings), grouped by domain so logs/searches stay predictable.
- DecodeException / DecodeWarning: base types that carry message + options and
  know how to render themselves in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface any fault (respecting shell/deferred/fancy/colorful).

Error model
- decoding aborts on the first fault; there is no aggregation and no rollback.
- every fault is also a builtin exception type (LookupError, ValueError, TypeError)
  so callers that do not know argbind can still catch it sensibly.
- context is chained: the decoder raises its annotated fault `from` the coercer's
  fault, and the annotated message embeds the cause message.

Integration
- outside shell mode, exceptions are raised and warnings go through warnings.warn.
- in shell mode, they are rendered via rich on stderr (errors then exit with status 1).
"""
import copy
import inspect
import sys
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - flags (1111x): UNKNOWN_FLAG
    - arity (1112x): ARITY_MISMATCH
    - values (1113x): INVALID_VALUE, TIMESTAMP_FORMAT
    - types (1114x): UNSUPPORTED_TYPE
    - warnings (12xxx): DUPLICATED_FLAG
    """
    # --- flag errors (11xxx) ---
    UNKNOWN_FLAG                = 11112

    # --- arity errors (11xxx) ---
    ARITY_MISMATCH              = 11122

    # --- value errors (11xxx) ---
    INVALID_VALUE               = 11131
    TIMESTAMP_FORMAT            = 11132

    # --- type errors (11xxx) ---
    UNSUPPORTED_TYPE            = 11141

    # --- warnings (12xxx) ---
    DUPLICATED_FLAG             = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette):
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

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

    prog = text(getattr(main, "__prog__", options.get("prog", "argbind")), styler("prog-name"))

    code = options.get("code")
    header = Text.assemble(
        "[ ",
        prog,
        " — ",
        text(code.normalize() if code else "", styler("code")),
        " | ",
        text(str(options.get("title", "")).title(), styler("title")),
        " ]"
    )
    message = text(fault.message, styler("message"))
    hint = Text.assemble(text(" → ", styler("hint-arrow")), text(options.get("hint"), styler("hint")))

    if fancy:
        return Panel(Group(message, hint), title=header, title_align="left", width=console.width - 4)

    return Group(header, message, hint)


class DecodeException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title

            # body
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            raise self
        console.print(self)
        if self.options.get("deferred"):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class UnknownFlagError(DecodeException, LookupError): ...
class ArityMismatchError(DecodeException, ValueError): ...
class InvalidValueError(DecodeException, ValueError): ...
class TimestampFormatError(InvalidValueError): ...
class UnsupportedTypeError(DecodeException, TypeError): ...


class DecodeWarning(UserWarning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        return _render(self, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #FFB400",  # amber fault code for warnings
            "title": "bold #FFC2E0",  # softer pinky title for warnings

            # body
            "message": "#D6D6DE",  # slightly lighter gray body
            "hint-arrow": "#B8EFAF dim",  # softer green arrow
            "hint": "italic #B8EFAF",  # softer green hint text
        })

    def __trigger__(self) -> None:
        if not self.options.get("shell"):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class DuplicatedFlagWarning(DecodeWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.

    typical options
    - shell, fancy, colorful, deferred, prog, title, code, hint, and any other
      context the reporter may want to keep (e.g., input/values/type).
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "DecodeException",
    "UnknownFlagError",
    "ArityMismatchError",
    "InvalidValueError",
    "TimestampFormatError",
    "UnsupportedTypeError",
    "DecodeWarning",
    "DuplicatedFlagWarning",
    "FaultCode",
    "trigger",
)

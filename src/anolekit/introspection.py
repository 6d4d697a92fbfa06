"""Look inside a function: its signature, defaults, and source."""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

__all__ = [
    "REQUIRED",
    "FunctionDescription",
    "ParameterInfo",
    "args",
    "describe_function",
    "formals",
]


class _Required:
    """Marker for parameters without a default value."""

    def __repr__(self) -> str:
        return "<required>"


REQUIRED = _Required()


@dataclass(frozen=True)
class ParameterInfo:
    """One parameter of a function.

    Attributes:
        name: Parameter name.
        kind: ``"positional_only"``, ``"positional_or_keyword"``,
            ``"var_positional"``, ``"keyword_only"`` or ``"var_keyword"``.
        default: The default value, or :data:`REQUIRED`.
    """

    name: str
    kind: str
    default: Any


@dataclass(frozen=True)
class FunctionDescription:
    """Summary of a callable for display.

    Attributes:
        name: Qualified name of the callable.
        signature: Signature text, e.g. ``"(x, *, na_rm=True, **kwargs)"``.
        parameters: Parameters in declaration order.
        source: Source text, or ``None`` when it is not available (builtins,
            C extensions, interactively defined functions).
        doc: First line of the docstring, or an empty string.
    """

    name: str
    signature: str
    parameters: tuple[ParameterInfo, ...]
    source: str | None
    doc: str


def describe_function(fn: Callable[..., Any]) -> FunctionDescription:
    """Collect the signature, defaults, and source of *fn*.

    Raises:
        TypeError: If *fn* is not callable.
        ValueError: If no signature can be determined for *fn*.
    """
    if not callable(fn):
        raise TypeError(f"{fn!r} is not callable")

    sig = inspect.signature(fn)
    parameters = tuple(
        ParameterInfo(
            name=p.name,
            kind=p.kind.name.lower(),
            default=REQUIRED if p.default is inspect.Parameter.empty else p.default,
        )
        for p in sig.parameters.values()
    )
    try:
        source: str | None = inspect.getsource(fn)
    except (OSError, TypeError):
        source = None

    doc = inspect.getdoc(fn) or ""
    return FunctionDescription(
        name=getattr(fn, "__qualname__", repr(fn)),
        signature=str(sig),
        parameters=parameters,
        source=source,
        doc=doc.splitlines()[0] if doc else "",
    )


def formals(fn: Callable[..., Any]) -> dict[str, Any]:
    """Parameter name -> default (:data:`REQUIRED` when there is none)."""
    return {p.name: p.default for p in describe_function(fn).parameters}


def args(fn: Callable[..., Any]) -> str:
    """Signature text of *fn*, prefixed by its name."""
    description = describe_function(fn)
    return f"{description.name}{description.signature}"

"""Lexical scoping examples.

Python resolves a name by looking in the local scope, then enclosing
function scopes, then the module (global) scope, then builtins. The lookup
follows where a function was *defined*, not where it was *called*:
:func:`scope_function3` sets its own ``important_variable`` and then calls
:func:`scope_function1`, which still sees the module-level value.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

__all__ = [
    "NameResolution",
    "important_function",
    "important_variable",
    "lookup_chain",
    "make_scaler",
    "scope_function1",
    "scope_function2",
    "scope_function3",
]

important_variable = -1


def scope_function1(x: Any) -> Any:
    local_var = 1
    return x * important_variable + local_var


def scope_function2(x: Any) -> Any:
    # Local binding hides the module-level name.
    local_var = 1
    important_variable = 10
    return x * important_variable + local_var


def scope_function3(x: Any) -> Any:
    important_variable = 10  # noqa: F841
    return x * scope_function1(1)


def important_function(x: Any) -> Any:
    """Multiply by ``important_variable``.

    The local assignment is misspelled, so the module-level value (-1) is
    what actually gets used.
    """
    important_varaible = 10  # noqa: F841
    return x * important_variable


def make_scaler(factor: float) -> Callable[[Any], Any]:
    """Return a function that multiplies its input by *factor*.

    *factor* lives in the enclosing scope and stays reachable from the
    returned closure after :func:`make_scaler` has returned.
    """

    def scale(x: Any) -> Any:
        return x * factor

    return scale


@dataclass(frozen=True)
class NameResolution:
    """Where each free and local name of a function is resolved.

    Attributes:
        local: Names bound inside the function body (including parameters).
        enclosing: Names captured from enclosing function scopes, with values.
        module: Names read from the module scope, with current values.
        builtin: Names resolved from builtins.
        unbound: Names referenced but not resolvable at inspection time
            (typically attribute names).
    """

    local: tuple[str, ...]
    enclosing: dict[str, Any]
    module: dict[str, Any]
    builtin: tuple[str, ...]
    unbound: tuple[str, ...]


def lookup_chain(fn: Callable[..., Any]) -> NameResolution:
    """Report which scope each name used by *fn* comes from.

    Args:
        fn: A plain Python function (not a builtin).

    Returns:
        A :class:`NameResolution` for *fn*.

    Raises:
        TypeError: If *fn* is not a Python function.
    """
    closure = inspect.getclosurevars(fn)
    return NameResolution(
        local=tuple(fn.__code__.co_varnames[: fn.__code__.co_nlocals]),
        enclosing=dict(closure.nonlocals),
        module=dict(closure.globals),
        builtin=tuple(sorted(closure.builtins)),
        unbound=tuple(sorted(closure.unbound)),
    )

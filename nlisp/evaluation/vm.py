"""The nlisp virtual machine.

The VM owns the global symbol table and evaluates calls. A call is a list
whose head resolves to a callable:

- a Closure is bound to the raw parameters (one per upvalue slot) and its
  code is evaluated with the bound closure as the new context;
- a NativeFunction receives (vm, context, params) with the parameters
  unevaluated, and decides itself what to resolve or evaluate. This is how
  `if`, `quote` and `lambda` get their special-form behaviour.

Evaluation is recursive. A depth counter bounds it, raising
RecursionLimitExceeded. Building a Vm raises the Python recursion limit to
fit `max_depth` levels; should the Python stack still run out first, the
outermost call reports RecursionLimitExceeded as well.
"""

from __future__ import annotations

import sys
from types import MappingProxyType
from typing import Mapping, Optional

from nlisp import Atom, AtomList
from nlisp.config import get_max_depth
from nlisp.errors import NonEvaluable, NotAFunction, RecursionLimitExceeded
from nlisp.logging_config import get_logger
from nlisp.types.atom import NativeFunction, format_atom
from nlisp.types.closure import Closure
from nlisp.types.symbol import Symbol

logger = get_logger(__name__)

# Python frames one evaluation level may take (evaluate, the native, its
# argument resolution), plus room for the caller's own stack. The raised
# limit is capped; past it the stack overflow itself is reported.
_FRAMES_PER_LEVEL = 5
_STACK_HEADROOM = 500
_MAX_RECURSION_LIMIT = 10000


def _ensure_recursion_limit(max_depth: int) -> None:
    needed = min(max_depth * _FRAMES_PER_LEVEL + _STACK_HEADROOM, _MAX_RECURSION_LIMIT)
    if sys.getrecursionlimit() < needed:
        logger.debug("Raising the Python recursion limit to %d", needed)
        sys.setrecursionlimit(needed)


class Vm:
    """Global symbol table plus the evaluator."""

    __slots__ = ("_symbols", "max_depth", "depth")

    def __init__(self, max_depth: Optional[int] = None):
        self._symbols: dict[str, Atom] = {}
        self.max_depth: int = max_depth if max_depth is not None else get_max_depth()
        self.depth: int = 0
        _ensure_recursion_limit(self.max_depth)

        from nlisp.builtin.primitives import register
        register(self)

    @property
    def symbols(self) -> Mapping[str, Atom]:
        """Read-only view of the globals; use add_symbol to change them."""
        return MappingProxyType(self._symbols)

    def add_symbol(self, name: str, value: Atom) -> None:
        """Create or replace the global `name`."""
        logger.debug("Binding global %s", name)
        self._symbols[name] = value

    def resolve(self, name: str) -> Optional[Atom]:
        """Value of the global `name`, or None when unbound."""
        return self._symbols.get(name)

    def resolve_symbol(self, symbol: Symbol) -> Atom:
        """Value of a global symbol, or the symbol itself when unbound."""
        return self._symbols.get(symbol.name, symbol)

    def evaluate(self, context: Closure, form: AtomList) -> Atom:
        """Evaluate `form` as a call inside `context`.

        Raises NonEvaluable for an empty list, NotAFunction when the head is
        not callable, and RecursionLimitExceeded past `max_depth` nested calls.
        Errors raised by the callee propagate unchanged.
        """
        if not form:
            raise NonEvaluable("Cannot evaluate an empty list")

        head, params = form[0], form[1:]
        # Unbound symbols are kept; they fail below as NotAFunction
        if isinstance(head, Symbol):
            head = self.resolve_symbol(head)

        if self.depth >= self.max_depth:
            logger.warning("Evaluation depth limit (%d) reached", self.max_depth)
            raise RecursionLimitExceeded(
                f"Evaluation nested deeper than {self.max_depth} calls"
            )

        self.depth += 1
        try:
            if isinstance(head, Closure):
                frame = head.bind(params)
                return self.evaluate(frame, frame.code)
            if isinstance(head, NativeFunction):
                logger.debug("Calling native %s with %d params", head.name, len(params))
                return head.fn(self, context, params)
            raise NotAFunction(f"{format_atom(head)} is not a function")
        except RecursionError as e:
            # Python's stack ran out before max_depth; report it at the outermost call
            if self.depth > 1:
                raise
            logger.warning("Python recursion limit reached below depth %d", self.max_depth)
            raise RecursionLimitExceeded(
                f"Evaluation exhausted the Python stack (limit {sys.getrecursionlimit()})"
            ) from e
        finally:
            self.depth -= 1

from __future__ import annotations

from nlisp import Atom, AtomList
from nlisp.errors import VmError
from nlisp.evaluation.vm import Vm
from nlisp.logging_config import get_logger
from nlisp.reader.parser import parse
from nlisp.types.atom import ErrorAtom, format_atom
from nlisp.types.closure import Closure

logger = get_logger(__name__)


class Interpreter:
    """
    Reads and evaluates nlisp code against one VM.
    The VM globals persist across calls; every top-level form is evaluated
    in the same thin root closure.
    """

    def __init__(self, vm: Vm | None = None, max_depth: int | None = None):
        self.vm: Vm = vm if vm is not None else Vm(max_depth=max_depth)
        self.root: Closure = Closure.compile_thin(())

    def parse(self, code: str) -> AtomList:
        return parse(code)

    def define(self, name: str, value: Atom) -> None:
        """Bind a global from the host side."""
        self.vm.add_symbol(name, value)

    def eval_form(self, form: Atom) -> Atom:
        # Only lists are calls; other top-level atoms are returned as written
        if not isinstance(form, tuple):
            return form
        return self.vm.evaluate(self.root, form)

    def eval(self, code: str) -> list[Atom]:
        """Evaluate every top-level form; the first error propagates."""
        return [self.eval_form(form) for form in parse(code)]

    def eval_each(self, code: str) -> list[Atom]:
        """Evaluate every top-level form, turning a failed form into an Error atom.

        Parse errors still propagate since nothing can be evaluated then.
        """
        results: list[Atom] = []
        for form in parse(code):
            try:
                results.append(self.eval_form(form))
            except VmError as e:
                logger.info("Form %s failed: %s", format_atom(form), e)
                results.append(ErrorAtom.from_error(e))
        return results

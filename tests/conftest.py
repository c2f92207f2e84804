import pytest

from nlisp.evaluation.vm import Vm
from nlisp.interpreter import Interpreter
from nlisp.types.closure import Closure


# Every test gets its own VM: the globals table is mutable and `global`
# writes into it, so sharing one across tests would leak bindings.


@pytest.fixture
def vm():
    return Vm()


@pytest.fixture
def root():
    """Thin, empty root closure used as the top-level context."""
    return Closure.compile_thin(())


@pytest.fixture
def interp():
    return Interpreter()


@pytest.fixture
def run(interp):
    """Evaluate source in a fresh interpreter and return the last result."""

    def _run(code: str):
        return interp.eval(code)[-1]

    return _run


SAMPLE_PRELUDE = r"""
(global fn
    (lambda (name args definition)
        (global name (lambda args definition))))

(fn - (a b)
    (+ a (neg b)))

(fn fib (n fib)
    (if (= n 0)
        0
    (if (= n 1)
        1
    (+ (fib (- n 1)) (fib (- n 2))))))
"""


@pytest.fixture
def sample(interp):
    """Interpreter with the `fn`, `-` and `fib` definitions loaded."""
    interp.eval(SAMPLE_PRELUDE)
    return interp


@pytest.fixture
def sample_prelude():
    return SAMPLE_PRELUDE

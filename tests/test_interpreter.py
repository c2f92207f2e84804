import pytest

from nlisp.errors import ErrorKind, IncompleteList, NotAFunction, RecursionLimitExceeded
from nlisp.evaluation.vm import Vm
from nlisp.interpreter import Interpreter
from nlisp.types.atom import ErrorAtom, is_equal, number
from nlisp.types.closure import Closure
from nlisp.types.nil import Nil
from nlisp.types.symbol import Symbol


def test_one_result_per_top_level_form(interp):
    results = interp.eval("(+ 1 2) (+ 2 2)")
    assert is_equal(tuple(results), (number(3), number(4)))


def test_top_level_atoms_are_returned_as_written(interp):
    results = interp.eval('1 "s" x pi')
    assert is_equal(tuple(results), (number(1), "s", Symbol("x"), Symbol("pi")))


def test_empty_source(interp):
    assert interp.eval("") == []


def test_first_error_propagates(interp):
    with pytest.raises(NotAFunction):
        interp.eval("(global a 1) (nope) (global b 2)")
    assert interp.vm.resolve("a") == number(1)
    assert interp.vm.resolve("b") is None


def test_parse_errors_propagate(interp):
    with pytest.raises(IncompleteList):
        interp.eval("(+ 1 2")
    with pytest.raises(IncompleteList):
        interp.eval_each("(+ 1 2")


def test_eval_each_keeps_going(interp):
    results = interp.eval_each("(+ 1 2) () (nope) (global c 3) 7")
    assert is_equal(
        tuple(results),
        (
            number(3),
            ErrorAtom(ErrorKind.NON_EVALUABLE),
            ErrorAtom(ErrorKind.NOT_A_FUNCTION),
            Nil,
            number(7),
        ),
    )
    assert interp.vm.resolve("c") == number(3)


def test_globals_persist_across_calls(interp):
    interp.eval("(global x 40)")
    assert interp.eval("(+ x 2)") == [number(42)]


def test_define_from_host(interp):
    interp.define("answer", number(42))
    assert interp.eval("(+ answer 0)") == [number(42)]


def test_interpreter_uses_given_vm():
    vm = Vm()
    interp = Interpreter(vm)
    interp.eval("(global shared 1)")
    assert vm.resolve("shared") == number(1)


def test_root_context_is_thin(interp):
    assert interp.root == Closure.compile_thin(())


# -------------------------------
# The sample program
# -------------------------------
def test_sample_definitions(interp, sample_prelude):
    results = interp.eval(sample_prelude)
    assert results == [Nil, Nil, Nil]
    assert isinstance(interp.vm.resolve("fn"), Closure)
    assert isinstance(interp.vm.resolve("-"), Closure)
    assert isinstance(interp.vm.resolve("fib"), Closure)


@pytest.mark.parametrize(
    "source, expected",
    [
        ("(- 5 3)", number(2)),
        ("(- 3 5)", number(-2)),
        ("(- (- 10 1) 4)", number(5)),
    ],
)
def test_sample_subtraction(sample, source, expected):
    assert sample.eval(source) == [expected]


@pytest.mark.parametrize(
    "n, expected",
    [(0, 0), (1, 1), (2, 1), (3, 2), (10, 55), (15, 610)],
)
def test_sample_fib(sample, n, expected):
    assert sample.eval(f"(fib {n} fib)") == [number(expected)]


def test_sample_fib_25(sample):
    assert sample.eval("(fib 25 fib)") == [number(75025)]


COUNT_SOURCE = """
(fn count (n count)
    (if (= n 0)
        0
    (+ 1 (count (- n 1) count))))
"""


def test_non_tail_recursion_fits_the_default_depth(sample):
    sample.eval(COUNT_SOURCE)
    assert sample.eval("(count 200 count)") == [number(200)]


def test_runaway_recursion_hits_the_depth_limit(sample):
    sample.eval(COUNT_SOURCE)
    with pytest.raises(RecursionLimitExceeded):
        sample.eval("(count 400 count)")
    assert sample.vm.depth == 0


def test_fib_runs_twice_from_the_same_stored_closure(sample):
    stored = sample.vm.resolve("fib")
    placeholders = stored.upvalues

    first = sample.eval("(fib 12 fib)")
    second = sample.eval("(fib 12 fib)")
    assert first == second == [number(144)]

    # still the very same, unbound closure
    assert sample.vm.resolve("fib") is stored
    assert stored.upvalues == placeholders == (Symbol("n"), Symbol("fib"))


def test_fib_interleaved_arguments_do_not_leak(sample):
    assert sample.eval("(fib 10 fib) (fib 6 fib) (fib 10 fib)") == [
        number(55),
        number(8),
        number(55),
    ]


def test_whole_sample_in_one_call(interp, sample_prelude):
    results = interp.eval(sample_prelude + "\n(fib 11 fib)\n")
    assert results[-1] == number(89)

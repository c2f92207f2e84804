from timeit import timeit

from nlisp.interpreter import Interpreter
from nlisp.reader.parser import parse


PRELUDE = r"""
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

CLOSURE_APPLY_CODE = "(- 3 1)"

FIB_CODE = "(fib 15 fib)"


def time_parse(code: str, rounds: int) -> float:
    """Time the reader alone on `code`."""
    parse(code)
    return timeit(lambda: parse(code), number=rounds)


def time_eval(code: str, rounds: int) -> float:
    """Time evaluation only: the prelude and `code` are parsed once up front."""
    itp = Interpreter()
    itp.eval(PRELUDE)
    forms = itp.parse(code)
    # Warmup
    for form in forms:
        itp.eval_form(form)
    return timeit(lambda: [itp.eval_form(form) for form in forms], number=rounds)


def _print_result(name: str, seconds: float, rounds: int) -> None:
    print(f"Benchmark: {name}")
    print(f"  time: {seconds:.6f}s  [rounds={rounds}]")


if __name__ == "__main__":
    _print_result("parse prelude", time_parse(PRELUDE, 2000), 2000)
    _print_result("closure application", time_eval(CLOSURE_APPLY_CODE, 20000), 20000)
    _print_result("recursive fib 15", time_eval(FIB_CODE, 5), 5)

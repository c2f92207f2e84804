"""Primitive functions of the nlisp runtime.

Every primitive is called as `fn(vm, context, params)` with its parameters
unevaluated, and chooses its own resolution policy (see
nlisp.evaluation.resolution). `register` binds them, with the constants,
into a VM's globals.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from nlisp import Atom, AtomList
from nlisp.errors import InvalidUsage, NotASymbol, VmError
from nlisp.evaluation.resolution import evaluate_atom, resolve_arguments, resolve_upvalues
from nlisp.types.atom import ErrorAtom, NativeFunction, format_atom, is_equal, is_number, number, type_name
from nlisp.types.closure import Closure, UpvalueRef
from nlisp.types.nil import Nil
from nlisp.types.symbol import Symbol

if TYPE_CHECKING:
    from nlisp.evaluation.vm import Vm


# -------------------------------
# Control flow
# -------------------------------
def if_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(if cond then [else])

    Only the condition and the selected branch are evaluated. False and nil
    are falsy, everything else is truthy. A missing branch gives nil.
    """
    if not params:
        raise InvalidUsage("if requires a condition")

    cond = evaluate_atom(vm, context, params[0])
    is_true = cond is not Nil and cond is not False

    index = 1 if is_true else 2
    if index >= len(params):
        return Nil
    return evaluate_atom(vm, context, params[index])


def lambda_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(lambda (upvalues...) (body...))

    Create a closure. Upvalue references already present in the body are
    read from the current context first, so a nested lambda captures the
    arguments of the closure it is created in.
    """
    params = resolve_arguments(vm, context, params, False)

    if len(params) < 2 or not isinstance(params[0], tuple) or not isinstance(params[1], tuple):
        raise InvalidUsage("lambda requires a list of upvalue names and a body list")
    upvalues, source = params[0], params[1]

    if not all(isinstance(atom, Symbol) for atom in upvalues):
        raise InvalidUsage(f"lambda upvalues must be symbols: {format_atom(upvalues)}")

    return Closure.compile(
        resolve_upvalues(context, source),
        [atom.name for atom in upvalues],
    )


def quote_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(quote ...) returns its parameters as a list, untouched."""
    return tuple(params)


def eval_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(eval (expr1) (expr2) ... (exprN))

    Evaluate each expression and return the list of results. An expression
    that fails yields an Error atom in its place instead of aborting the call.
    """
    if not all(isinstance(atom, tuple) for atom in params):
        raise InvalidUsage("eval expects only lists")

    results = []
    for form in params:
        try:
            results.append(vm.evaluate(context, form))
        except VmError as e:
            results.append(ErrorAtom.from_error(e))
    return tuple(results)


def map_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(map func list)

    Call `func` once per element of `list`, the element being its single
    parameter, and return the list of results.

    Elements are passed raw, like any call parameter: a closure receives a
    List element as data, while a strict primitive such as `+` or `neg`
    evaluates it as a call. So `(map neg (quote (+ 1 2)))` gives `(-3)`
    and `(map + (quote (1 2)))` fails with NotAFunction.
    """
    if len(params) < 2:
        raise InvalidUsage("map requires a function and a list")

    func = evaluate_atom(vm, context, params[0])
    items = evaluate_atom(vm, context, params[1])
    if not isinstance(items, tuple):
        raise InvalidUsage(f"map expects a list, got {type_name(items)}")

    results = []
    for item in items:
        results.append(vm.evaluate(context, (func, item)))
    return tuple(results)


# -------------------------------
# Environment access
# -------------------------------
def global_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(global symbol value)

    Create or replace the global `symbol` with the value computed from
    `value`. The symbol may come through an upvalue.
    """
    name = params[0] if params else None
    if isinstance(name, UpvalueRef):
        name = context.resolve_ref(name)
    if not isinstance(name, Symbol):
        raise NotASymbol("global expects a symbol name")

    if len(params) < 2:
        raise InvalidUsage(f"global {name} requires a value")

    vm.add_symbol(name.name, evaluate_atom(vm, context, params[1]))
    return Nil


def resolve_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(resolve ...) returns its parameters with upvalues and globals substituted."""
    return resolve_arguments(vm, context, params, False)


def type_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(type val1 ... valN) returns the type name of each value, as strings."""
    return tuple(type_name(atom) for atom in resolve_arguments(vm, context, params, False))


# -------------------------------
# Arithmetic and comparison
# -------------------------------
def _as_number(atom: Atom) -> np.float32:
    return atom if is_number(atom) else number(0)


def sum_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(+ num1 ... numN); non-numbers count as 0."""
    total = number(0)
    for atom in resolve_arguments(vm, context, params, True):
        total = total + _as_number(atom)
    return total


def product_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(* num1 ... numN)

    Folds like `+`, seeded with 0 as well, so every product is 0.
    Non-numbers count as 0.
    """
    product = number(0)
    for atom in resolve_arguments(vm, context, params, True):
        product = product * _as_number(atom)
    return product


def eq_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(= p1 ... pN) is true when every param equals the first; true for 0 or 1 params."""
    values = resolve_arguments(vm, context, params, True)
    if not values:
        return True
    first = values[0]
    return all(is_equal(first, other) for other in values[1:])


def neg_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """(neg num) negates a number; any other value is returned unchanged."""
    atom = evaluate_atom(vm, context, params[0] if params else Nil)
    if is_number(atom):
        return -atom
    return atom


# -------------------------------
# Output
# -------------------------------
def print_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """Print the evaluated parameters; returns nil."""
    print(format_atom(resolve_arguments(vm, context, params, True)))
    return Nil


def printd_function(vm: Vm, context: Closure, params: AtomList) -> Atom:
    """Print the raw parameters; returns nil."""
    print(repr(tuple(params)))
    return Nil


# -------------------------------
# Registration
# -------------------------------
PRIMITIVES = {
    "print": print_function,
    "printd": printd_function,
    "if": if_function,
    "lambda": lambda_function,
    "quote": quote_function,
    "type": type_function,
    "global": global_function,
    "resolve": resolve_function,
    "eval": eval_function,
    "map": map_function,
    "+": sum_function,
    "*": product_function,
    "=": eq_function,
    "neg": neg_function,
}


def register(vm: Vm) -> None:
    """Seed `vm` with the constants and every primitive."""
    vm.add_symbol("pi", number(3.14159265))
    vm.add_symbol("true", True)
    vm.add_symbol("false", False)
    vm.add_symbol("nil", Nil)
    for name, fn in PRIMITIVES.items():
        vm.add_symbol(name, NativeFunction(name, fn))

import copy

import numpy as np
import pytest

from nlisp.errors import ErrorKind, InvalidUsage, NotAFunction
from nlisp.types.atom import (
    ErrorAtom,
    NativeFunction,
    format_atom,
    is_equal,
    number,
    type_name,
)
from nlisp.types.closure import Closure, UpvalueRef
from nlisp.types.nil import Nil
from nlisp.types.symbol import Symbol


def _native_a(vm, context, params):
    return Nil


def _native_b(vm, context, params):
    return True


def test_symbols_compare_by_name():
    assert Symbol("abc") == Symbol("abc")
    assert Symbol("abc") != Symbol("abd")
    assert hash(Symbol("x")) == hash(Symbol("x"))
    assert Symbol("abc") != "abc"


def test_one_symbol_per_name():
    assert Symbol("abc") is Symbol("abc")
    assert Symbol("abc") is not Symbol("abd")
    assert copy.copy(Symbol("abc")) is Symbol("abc")


def test_parsed_symbols_are_shared():
    from nlisp.reader.parser import parse

    (form,) = parse("(f x x)")
    assert form[1] is form[2] is Symbol("x")
    compiled = Closure.compile(form, ["x"])
    assert compiled.upvalues[0] is Symbol("x")


def test_nil_is_a_falsy_singleton():
    assert not Nil
    assert Nil == Nil
    assert Nil != ()
    assert repr(Nil) == "nil"


@pytest.mark.parametrize(
    "a, b, expected",
    [
        (number(1), number(1), True),
        (number(1), number(2), False),
        (number(1), True, False),
        (number(0), False, False),
        (True, True, True),
        ("s", "s", True),
        ("s", Symbol("s"), False),
        (Nil, Nil, True),
        (Nil, (), False),
        ((number(1), (Symbol("a"),)), (number(1), (Symbol("a"),)), True),
        ((number(1), (Symbol("a"),)), (number(1), (Symbol("b"),)), False),
        ((number(1),), (number(1), number(1)), False),
        (UpvalueRef(0, "a"), UpvalueRef(0, "a"), True),
        (UpvalueRef(0, "a"), UpvalueRef(1, "a"), False),
        (ErrorAtom(ErrorKind.INVALID_USAGE), ErrorAtom(ErrorKind.INVALID_USAGE), True),
        (ErrorAtom(ErrorKind.INVALID_USAGE), ErrorAtom(ErrorKind.NOT_A_SYMBOL), False),
    ],
)
def test_structural_equality(a, b, expected):
    assert is_equal(a, b) is expected


def test_nan_is_never_equal():
    nan = number(float("nan"))
    assert not is_equal(nan, nan)


def test_native_functions_are_all_equal():
    a = NativeFunction("a", _native_a)
    b = NativeFunction("b", _native_b)
    assert a == b
    assert is_equal(a, b)
    assert is_equal((a,), (b,))
    assert a != Symbol("a")


def test_native_function_calls_through():
    fn = NativeFunction("b", _native_b)
    assert fn(None, None, ()) is True


def test_error_atom_from_error():
    assert ErrorAtom.from_error(NotAFunction("x")) == ErrorAtom(ErrorKind.NOT_A_FUNCTION)
    assert ErrorAtom.from_error(InvalidUsage("x")).kind is ErrorKind.INVALID_USAGE


@pytest.mark.parametrize(
    "atom, expected",
    [
        (Symbol("a"), "Symbol"),
        (number(1), "Number"),
        ("s", "String"),
        ((), "List"),
        (False, "Bool"),
        (Nil, "Nil"),
        (UpvalueRef(0, "a"), "Upvalue"),
        (Closure.compile_thin(()), "Closure"),
        (NativeFunction("a", _native_a), "NativeFunction"),
        (ErrorAtom(ErrorKind.NON_EVALUABLE), "Error:NonEvaluable"),
        (ErrorAtom(ErrorKind.NOT_A_FUNCTION), "Error:NotAFunction"),
        (ErrorAtom(ErrorKind.INVALID_USAGE), "Error:InvalidUsage"),
        (ErrorAtom(ErrorKind.NOT_A_SYMBOL), "Error:NotASymbol"),
    ],
)
def test_type_names(atom, expected):
    assert type_name(atom) == expected


def test_type_name_rejects_foreign_values():
    with pytest.raises(TypeError):
        type_name(object())


def test_number_is_float32():
    assert isinstance(number(3), np.float32)
    assert number(1) + number(2) == number(3)


@pytest.mark.parametrize(
    "atom, text",
    [
        ((Symbol("+"), number(1), "a b"), '(+ 1.0 "a b")'),
        ((True, False, Nil), "(true false nil)"),
        ((), "()"),
        (UpvalueRef(2, "x"), "#<upvalue 2 x>"),
        (NativeFunction("neg", _native_a), "#<native neg>"),
        (ErrorAtom(ErrorKind.NOT_A_SYMBOL), "#<error NotASymbol>"),
        (Closure.compile((Symbol("x"),), ["x"]), "#<closure (x) (#<upvalue 0 x>)>"),
    ],
)
def test_format_atom(atom, text):
    assert format_atom(atom) == text

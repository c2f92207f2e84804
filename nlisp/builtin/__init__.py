from nlisp.builtin.primitives import PRIMITIVES, register

__all__ = ["PRIMITIVES", "register"]

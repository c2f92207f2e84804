from nlisp.reader.parser import parse

__all__ = ["parse"]

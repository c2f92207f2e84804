# setup.py
from setuptools import setup, find_packages

setup(
    name="nlisp",
    version="0.1.0",
    description="A minimal Lisp runtime with upvalue-indexed closures",
    packages=find_packages(include=["nlisp", "nlisp.*"]),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)

"""Evaluation engine: the VM and the argument-resolution policies."""

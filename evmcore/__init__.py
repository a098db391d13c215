"""Ethereum virtual machine primitives: hashes, bytecode, state, environment, results and database interfaces."""

__version__ = "0.1.0"
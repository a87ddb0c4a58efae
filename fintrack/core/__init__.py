"""
Core utilities shared across the fintrack API.

This package hosts configuration, logging, password hashing, bearer tokens,
the error taxonomy and the JSON envelope helpers. Services and routers depend
on these primitives instead of reading the environment or crypto libraries
directly.
"""

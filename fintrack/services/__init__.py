"""
High-level use cases for the fintrack API.

Each service module orchestrates repositories/adapters to implement business
rules (register, login, bulk-create categories, soft-delete transactions...).
Services receive the request's SQLAlchemy session explicitly.

Routers (FastAPI endpoints) call these services instead of manipulating the
database directly.
"""

"""
Shared, cross-cutting code for the API.

`core/` holds the small building blocks every feature uses (DB pool,
settings, logging, errors, validators, upload storage). Keep feature-specific
SQL and business logic in the corresponding feature package (e.g. `posts/`).
"""

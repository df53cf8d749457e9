"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that several features use (settings,
DB pool, upload storage). Feature-specific SQL and business logic stays in
the feature package (e.g. `documents/`, `search/`).
"""

"""
Core utilities shared across the postboard API.

This package hosts:
- configuration helpers (env vars, data paths, feature flags)
- cross-cutting services such as logging, password hashing and rate limiting.

Repositories and routers depend on these primitives instead of reading
os.environ or configuring logging themselves.
"""

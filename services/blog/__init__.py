# services/blog/__init__.py
"""blog service package initializer — explicit exports only; no runtime side effects."""

__all__ = ["app", "accounts", "routes", "deps", "repo", "models"]

from __future__ import annotations

from collections.abc import Callable


def require_roles(roles: list[str]) -> Callable:
    """
    Attach required-role metadata to a route handler.

    The decorator does not perform auth itself; the global security dependency
    reads the metadata after routing.
    """

    def decorator(fn: Callable) -> Callable:
        existing = set(getattr(fn, "__security_required_roles__", set()))
        setattr(fn, "__security_required_roles__", existing | set(roles))
        return fn

    return decorator


def filter_by_work_center() -> Callable:
    """
    Attach metadata that enables work-center scoping for this endpoint.
    """

    def decorator(fn: Callable) -> Callable:
        setattr(fn, "__security_filter_by_work_center__", True)
        return fn

    return decorator

"""Resolve a Table class from the name used in an association declaration."""

from typing import Iterable, Optional


def _get_subclasses(base: type) -> Iterable[type]:
    """Recursively yield all subclasses of base, most recently defined first."""
    for subclass in base.__subclasses__()[::-1]:
        yield from _get_subclasses(subclass)
        yield subclass


def get_all_tables() -> Iterable[type["Table"]]:
    """Yield all Table subclasses in the application."""
    from ..table import Table
    yield from _get_subclasses(Table)


def get_table_by_name(name: str) -> Optional[type["Table"]]:
    """Return the Table subclass whose __name__ or _get_table_name() equals name."""
    for cls in get_all_tables():
        if name in (cls.__name__, cls._get_table_name()):
            return cls
    return None

"""Declarative table schemas and their associations.

A ``Table`` subclass describes one SQL table and the associations it owns::

    class User(Table, table_name="users"):
        pass

    class Post(Table, table_name="posts"):
        creator = belongs_to(User)
        reviewer = belongs_to("User", foreign_key="reviewed_by_id")

Associations are only metadata: they tell a ``Query`` how to join the target
table and tell the alias resolver which join belongs to which association.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel

from .errors import ConfigurationError
from .utils.get_table_by_name import get_table_by_name
from .utils.snake_case import snake_case


class AssociationKind(str, enum.Enum):
    """Relation kinds; only the to-one kinds can be ordered on."""

    BELONGS_TO = "belongs_to"
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"


class Association(BaseModel):
    """A named relation from an owner table to a target table.

    For ``belongs_to`` the foreign key is a column of the owner table pointing
    at the target's primary key. For ``has_one`` and ``has_many`` it is a column
    of the target table pointing back at the owner's primary key.
    """

    model_config = {"arbitrary_types_allowed": True}

    kind: AssociationKind
    target: Any
    """Target Table subclass, or its class name (resolved lazily)."""
    foreign_key_name: Optional[str] = None
    name: Optional[str] = None
    owner: Any = None
    """Owner Table subclass; set when the owner class is created."""

    @property
    def is_to_one(self) -> bool:
        return self.kind in (AssociationKind.BELONGS_TO, AssociationKind.HAS_ONE)

    @property
    def target_table(self) -> type[Table]:
        """The target Table subclass."""
        if isinstance(self.target, str):
            table = get_table_by_name(self.target)
            if table is None:
                raise ConfigurationError(
                    f"Association {self.name!r} targets unknown table {self.target!r}"
                )
            return table
        return self.target

    @property
    def table_name(self) -> str:
        """SQL name of the target table."""
        return self.target_table._get_table_name()

    @property
    def foreign_key(self) -> str:
        """Foreign key column: explicit, else ``<name>_id`` (belongs_to) or ``<owner_snake_case>_id``."""
        if self.foreign_key_name:
            return self.foreign_key_name
        if self.kind is AssociationKind.BELONGS_TO:
            return f"{self.name}_id"
        return f"{snake_case(self.owner.__name__)}_id"


def belongs_to(target: type[Table] | str, foreign_key: Optional[str] = None) -> Association:
    """Declare a to-one relation whose foreign key lives on the owner table."""
    return Association(kind=AssociationKind.BELONGS_TO, target=target, foreign_key_name=foreign_key)


def has_one(target: type[Table] | str, foreign_key: Optional[str] = None) -> Association:
    """Declare a to-one relation whose foreign key lives on the target table."""
    return Association(kind=AssociationKind.HAS_ONE, target=target, foreign_key_name=foreign_key)


def has_many(target: type[Table] | str, foreign_key: Optional[str] = None) -> Association:
    """Declare a to-many relation whose foreign key lives on the target table."""
    return Association(kind=AssociationKind.HAS_MANY, target=target, foreign_key_name=foreign_key)


class Table:
    """Base class for table schemas.

    Class keywords:
        table_name: SQL table name (default: lowercased class name).
        primary_key: primary key column (default: inherited, else ``id``).
    """

    _table_name: ClassVar[Optional[str]] = None
    _primary_key: ClassVar[str] = "id"
    _associations: ClassVar[dict[str, Association]] = {}

    def __init_subclass__(cls, table_name: Optional[str] = None,
                          primary_key: Optional[str] = None, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._table_name = table_name
        if primary_key:
            cls._primary_key = primary_key
        associations = {}
        for base in reversed(cls.__mro__[1:]):
            associations.update(getattr(base, "_associations", {}))
        for name, value in list(vars(cls).items()):
            if isinstance(value, Association):
                association = value.model_copy(update={"name": name, "owner": cls})
                associations[name] = association
                setattr(cls, name, association)
        cls._associations = associations

    @classmethod
    def _get_table_name(cls) -> str:
        """Return the SQL table name for this class."""
        return cls._table_name or cls.__name__.lower()

    @classmethod
    def _get_primary_key(cls) -> str:
        return cls._primary_key

    @classmethod
    def _get_associations(cls) -> dict[str, Association]:
        return cls._associations

    @classmethod
    def _get_association(cls, name: str) -> Association:
        """Return the association declared under name, or raise KeyError."""
        try:
            return cls._associations[name]
        except KeyError:
            raise KeyError(f"No such association for {cls.__name__}: {name}") from None

    @classmethod
    def reflect_on_association(cls, name: str) -> Optional[Association]:
        """Return the association declared under name, or None."""
        return cls._associations.get(name)

    @classmethod
    def q(cls) -> "Query":
        """Return a Query object for this table class."""
        from .query import Query
        return Query(table=cls)


__all__ = [
    "Association",
    "AssociationKind",
    "Table",
    "belongs_to",
    "has_many",
    "has_one",
]

"""Tests for hasorder.resolver: reading association aliases back from the join graph."""

import pytest

from hasorder.errors import ConfigurationError, ResolutionError
from hasorder.expressions import ColumnReference, Equality, Join, TableReference
from hasorder.query import Query
from hasorder.resolver import generate_table_alias, resolve_table_alias
from tests.helpers import assert_single_join


def test_belongs_to_resolves_to_table_name(schema):
    q, table_name = resolve_table_alias(Query(table=schema["Post"]), "creator")
    assert table_name == "users"
    assert_single_join(q, "creator")


def test_has_one_resolves_to_table_name(schema):
    q, table_name = resolve_table_alias(Query(table=schema["User"]), "profile")
    assert table_name == "profiles"
    assert_single_join(q, "profile")


def test_resolution_is_idempotent(schema):
    q, first = resolve_table_alias(Query(table=schema["Post"]), "creator")
    q, second = resolve_table_alias(q, "creator")
    assert first == second == "users"
    assert len(q.join_graph) == 1


def test_two_associations_to_same_table_get_distinct_aliases(dates_schema):
    Experience = dates_schema["Experience"]
    q = Query(table=Experience)
    q, start = resolve_table_alias(q, "start_date")
    q, end = resolve_table_alias(q, "end_date")
    assert start == "dates"
    assert end == "end_date_experiences"
    assert len(q.join_graph) == 2
    # resolving again in the other order still reads each alias from its own join
    assert resolve_table_alias(q, "end_date")[1] == "end_date_experiences"
    assert resolve_table_alias(q, "start_date")[1] == "dates"


def test_alias_follows_join_order_not_naming(dates_schema):
    """Whichever association is joined first gets the bare table name."""
    Experience = dates_schema["Experience"]
    q = Query(table=Experience).left_outer_joins("end_date", "start_date")
    assert generate_table_alias(q, Experience.end_date) == "dates"
    assert generate_table_alias(q, Experience.start_date) == "start_date_experiences"


def test_self_join_resolves_to_alias(schema):
    q, table_name = resolve_table_alias(Query(table=schema["Post"]), "parent")
    assert table_name == "parent_posts"


def test_existing_inner_join_is_reused(schema):
    q = Query(table=schema["Post"]).joins("creator")
    q2, table_name = resolve_table_alias(q, "creator")
    assert table_name == "users"
    assert q2.join_graph == q.join_graph


def test_has_many_raises_configuration_error(schema):
    with pytest.raises(ConfigurationError, match="must be has_one or belongs_to"):
        resolve_table_alias(Query(table=schema["User"]), "posts")


def test_unknown_association_raises_resolution_error(schema):
    with pytest.raises(ResolutionError, match="no association named 'nope'"):
        resolve_table_alias(Query(table=schema["Post"]), "nope")


def test_missing_join_raises_resolution_error(schema):
    """Resolving against a query that lacks the join is an error, not a guess."""
    Post = schema["Post"]
    with pytest.raises(ResolutionError, match="No join on users.creator_id"):
        generate_table_alias(Query(table=Post), Post.creator)


def test_join_with_wrong_foreign_key_does_not_match(schema):
    """A join to the right table through another foreign key is not the association's join."""
    Post = schema["Post"]
    q = Query(table=Post).left_outer_joins("editor")
    with pytest.raises(ResolutionError):
        generate_table_alias(q, Post.creator)


def test_generate_table_alias_rejects_has_many(schema):
    User = schema["User"]
    with pytest.raises(ConfigurationError):
        generate_table_alias(Query(table=User), User.posts)


class _ForeignQuery:
    """Minimal third-party query exposing only the OrderableQuery capabilities."""

    def __init__(self, table, joins=()):
        self._table = table
        self._joins = tuple(joins)

    @property
    def table_name(self):
        return self._table._get_table_name()

    @property
    def join_graph(self):
        return self._joins

    def reflect_on_association(self, name):
        return self._table.reflect_on_association(name)

    def left_outer_joins(self, *names):
        owner = TableReference(name=self.table_name)
        joined = TableReference(name="users", alias="u1")
        join = Join(
            association=names[0],
            table=joined,
            on=Equality(
                left=ColumnReference(relation=joined, name="id"),
                right=ColumnReference(relation=owner, name="creator_id"),
            ),
        )
        return _ForeignQuery(self._table, self._joins + (join,))

    def order(self, *fragments):
        return self

    def reorder(self, *fragments):
        return self


def test_alias_is_read_from_foreign_query_join_graph(schema):
    """The alias comes from whatever the query engine bound, not from a naming convention."""
    q, table_name = resolve_table_alias(_ForeignQuery(schema["Post"]), "creator")
    assert table_name == "u1"
    assert len(q.join_graph) == 1


class _PlainAssociation:
    """Association metadata reporting its kind as a plain string."""

    def __init__(self, name, kind, table_name, foreign_key):
        self.name = name
        self.kind = kind
        self.table_name = table_name
        self.foreign_key = foreign_key


class _StringKindQuery(_ForeignQuery):
    def __init__(self, table, joins=(), kind="belongs_to"):
        super().__init__(table, joins)
        self._kind = kind

    def reflect_on_association(self, name):
        return _PlainAssociation(name, self._kind, "users", "creator_id")

    def left_outer_joins(self, *names):
        joined = super().left_outer_joins(*names)
        return _StringKindQuery(self._table, joined.join_graph, self._kind)


def test_string_kind_matches_owner_side_foreign_key(schema):
    """A belongs_to kind given as a plain string still matches the FK on the owner side."""
    q, table_name = resolve_table_alias(_StringKindQuery(schema["Post"]), "creator")
    assert table_name == "u1"
    assert len(q.join_graph) == 1


def test_unknown_string_kind_raises_configuration_error(schema):
    with pytest.raises(ConfigurationError, match="not other"):
        resolve_table_alias(_StringKindQuery(schema["Post"], kind="other"), "creator")

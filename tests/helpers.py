"""Shared test helpers."""

from hasorder.query import Query


def assert_single_join(query: Query, association: str):
    """Assert association is joined exactly once and return that join."""
    joins = [join for join in query.join_graph if join.association == association]
    assert len(joins) == 1, f"expected one join for {association}, got {len(joins)}"
    return joins[0]

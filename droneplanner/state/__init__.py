"""Mini README: Literal and state model for the planning engine.

Everything the planner knows about the world is a set of ground literals;
the ``literals`` module defines the value types and the textual syntax
used by queries.
"""

from .literals import (
    Literal,
    State,
    Term,
    functional_key,
    is_variable,
    literal_sort_key,
    parse_literal,
    parse_literals,
)

__all__ = [
    "Literal",
    "State",
    "Term",
    "functional_key",
    "is_variable",
    "literal_sort_key",
    "parse_literal",
    "parse_literals",
]

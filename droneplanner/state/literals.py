"""Mini README: Ground facts and immutable world snapshots.

Structure:
    * Literal - predicate name plus an ordered tuple of terms.
    * State - immutable set of literals with goal tests and transitions.
    * functional_key - identifies literals that must be unique per object.
    * parse_literal / parse_literals - read the textual fact syntax
      (``at_drone(drone1,warehouse1)``), optionally wrapped in ``[...]``.

States are values: every transition returns a new ``State`` so the search
can backtrack freely and hash states for cycle detection. Strings starting
with ``?`` are variables and only appear inside action schema patterns.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Tuple, Union

from ..errors import MalformedQueryError

Term = Union[str, int]

_LITERAL_PATTERN = re.compile(r"^([A-Za-z_][A-Za-z0-9_]*)\s*(?:\((.*)\))?$", re.DOTALL)
_IDENTIFIER_PATTERN = re.compile(r"^\??[A-Za-z0-9_]+$")
_INTEGER_PATTERN = re.compile(r"^-?\d+$")


class Literal(NamedTuple):
    """A single fact such as ``energy(drone1, 100)``."""

    predicate: str
    args: Tuple[Term, ...] = ()

    def __str__(self) -> str:
        if not self.args:
            return self.predicate
        return f"{self.predicate}({', '.join(str(arg) for arg in self.args)})"

    @property
    def is_ground(self) -> bool:
        return not any(is_variable(arg) for arg in self.args)

    def bind(self, bindings: Mapping[str, Term]) -> "Literal":
        """Substitute variables; unknown variables are left in place."""

        return Literal(
            self.predicate,
            tuple(bindings.get(arg, arg) if is_variable(arg) else arg for arg in self.args),
        )


def is_variable(term: Term) -> bool:
    return isinstance(term, str) and term.startswith("?")


def functional_key(literal: Literal) -> Optional[Tuple[str, Term]]:
    """Return the uniqueness key of a literal, or ``None`` when unconstrained.

    A drone has one position and one energy level; a package is either at a
    location or held by a drone, so both predicates share the package key.
    """

    if literal.predicate in ("at_drone", "energy") and literal.args:
        return (literal.predicate, literal.args[0])
    if literal.predicate == "at_package" and literal.args:
        return ("package", literal.args[0])
    if literal.predicate == "holding" and len(literal.args) == 2:
        return ("package", literal.args[1])
    return None


def literal_sort_key(literal: Literal) -> Tuple:
    # ints sort before strings at the same position, strings alphabetically
    return (
        literal.predicate,
        tuple((0, arg, "") if isinstance(arg, int) else (1, 0, arg) for arg in literal.args),
    )


@dataclass(frozen=True, slots=True)
class State:
    """Immutable world snapshot."""

    literals: frozenset = frozenset()

    @classmethod
    def of(cls, literals: Iterable[Literal]) -> "State":
        return cls(frozenset(literals))

    def __contains__(self, literal: object) -> bool:
        return literal in self.literals

    def __iter__(self) -> Iterator[Literal]:
        return iter(self.sorted_literals())

    def __len__(self) -> int:
        return len(self.literals)

    def __str__(self) -> str:
        return "[" + ", ".join(str(literal) for literal in self.sorted_literals()) + "]"

    def sorted_literals(self) -> List[Literal]:
        return sorted(self.literals, key=literal_sort_key)

    def satisfies(self, goal: Iterable[Literal]) -> bool:
        """Goal satisfaction is set inclusion; extra facts are allowed."""

        return self.literals.issuperset(goal)

    def apply(self, delete: Iterable[Literal], add: Iterable[Literal]) -> "State":
        """Return the successor state: delete-list first, then add-list.

        Adding a functional literal evicts any other literal with the same
        key so the one-position/one-energy/one-place-per-package invariant
        survives effects that only name the new value.
        """

        remaining = set(self.literals)
        remaining.difference_update(delete)
        for literal in add:
            key = functional_key(literal)
            if key is not None:
                stale = [existing for existing in remaining if functional_key(existing) == key]
                remaining.difference_update(stale)
            remaining.add(literal)
        return State(frozenset(remaining))

    def facts(self, predicate: str) -> List[Literal]:
        """All literals of ``predicate`` in deterministic order."""

        return sorted(
            (literal for literal in self.literals if literal.predicate == predicate),
            key=literal_sort_key,
        )

    def value_of(self, predicate: str, key: Term) -> Optional[Term]:
        """Second argument of the ``predicate(key, value)`` literal, if any."""

        for literal in self.literals:
            if literal.predicate == predicate and len(literal.args) == 2 and literal.args[0] == key:
                return literal.args[1]
        return None

    def invariant_violations(self) -> List[str]:
        """Describe every key that is bound more than once."""

        grouped: Dict[Tuple[str, Term], List[Literal]] = {}
        for literal in self.literals:
            key = functional_key(literal)
            if key is not None:
                grouped.setdefault(key, []).append(literal)
        violations: List[str] = []
        for (kind, subject), literals in sorted(grouped.items(), key=lambda item: (item[0][0], str(item[0][1]))):
            if len(literals) > 1:
                listed = ", ".join(str(literal) for literal in sorted(literals, key=literal_sort_key))
                violations.append(f"{subject} has conflicting {kind} facts: {listed}")
        return violations


def _parse_term(raw: str, source: str) -> Term:
    term = raw.strip()
    if _INTEGER_PATTERN.match(term):
        return int(term)
    if not _IDENTIFIER_PATTERN.match(term):
        raise MalformedQueryError("Invalid term in literal", {"term": term or "<empty>", "literal": source})
    return term


def parse_literal(text: str) -> Literal:
    """Parse ``name(arg, ...)`` (or a bare ``name``) into a literal."""

    source = text.strip()
    match = _LITERAL_PATTERN.match(source)
    if not match:
        raise MalformedQueryError("Cannot parse literal", {"literal": source or "<empty>"})
    predicate, arguments = match.group(1), match.group(2)
    if arguments is None or not arguments.strip():
        return Literal(predicate, ())
    if "(" in arguments or ")" in arguments:
        raise MalformedQueryError("Nested terms are not supported", {"literal": source})
    return Literal(predicate, tuple(_parse_term(part, source) for part in arguments.split(",")))


def _split_top_level(text: str) -> List[str]:
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth < 0:
                raise MalformedQueryError("Unbalanced parentheses", {"facts": text})
        if char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    if depth != 0:
        raise MalformedQueryError("Unbalanced parentheses", {"facts": text})
    parts.append("".join(current))
    return parts


def parse_literals(source: Union[str, Iterable[Union[str, Literal]]]) -> List[Literal]:
    """Parse a fact list given as text or as an iterable of text/literals."""

    if isinstance(source, str):
        text = source.strip().rstrip(".").strip()
        if text.startswith("[") and text.endswith("]"):
            text = text[1:-1]
        elif text.startswith("[") or text.endswith("]"):
            raise MalformedQueryError("Unbalanced brackets", {"facts": source})
        if not text.strip():
            return []
        return [parse_literal(part) for part in _split_top_level(text)]

    literals: List[Literal] = []
    for item in source:
        if isinstance(item, Literal):
            literals.append(item)
        elif isinstance(item, str):
            literals.append(parse_literal(item))
        else:
            raise MalformedQueryError("Facts must be strings or literals", {"item": repr(item)})
    return literals

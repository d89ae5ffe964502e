"""
Query AST for the supported SPARQL subset.

A query is a projection list plus an ordered sequence of triple patterns.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


# =============================================================================
# Terms
# =============================================================================

@dataclass(frozen=True)
class Variable:
    """A query variable such as ``?x`` or ``$x``; ``name`` excludes the sigil."""
    name: str

    def __str__(self) -> str:
        return f"?{self.name}"


@dataclass(frozen=True)
class IRI:
    """
    A bound identifier.

    Can be a full IRI (<http://...>), a prefixed name (foaf:name) or a bare
    token (knows) naming a resource exactly as it is stored.
    """
    value: str
    prefixed: bool = False

    def __str__(self) -> str:
        if self.prefixed or not self.value.startswith(("http://", "https://", "urn:")):
            return self.value
        return f"<{self.value}>"


@dataclass(frozen=True)
class Literal:
    """A quoted or numeric literal, compared by its lexical value."""
    value: str

    def __str__(self) -> str:
        escaped = self.value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'


Term = Union[Variable, IRI, Literal]


# =============================================================================
# Patterns and queries
# =============================================================================

@dataclass(frozen=True)
class TriplePattern:
    """One ``subject predicate object`` pattern; any position may be a Variable."""
    subject: Term
    predicate: Term
    object: Term

    def __str__(self) -> str:
        return " ".join(str(t) for t in self.terms()) + " ."

    def terms(self) -> tuple[Term, Term, Term]:
        return (self.subject, self.predicate, self.object)

    def get_variables(self) -> list[Variable]:
        """Variables of this pattern in subject, predicate, object order."""
        found: list[Variable] = []
        for term in self.terms():
            if isinstance(term, Variable) and term not in found:
                found.append(term)
        return found


@dataclass
class WhereClause:
    """Triple patterns in evaluation order."""
    patterns: list[TriplePattern] = field(default_factory=list)

    def get_all_variables(self) -> list[Variable]:
        """All variables in order of first appearance."""
        ordered: dict[Variable, None] = {}
        for p in self.patterns:
            ordered.update(dict.fromkeys(p.get_variables()))
        return list(ordered)


@dataclass
class SelectQuery:
    """
    A parsed ``SELECT ... WHERE { ... }`` query.

    An empty ``variables`` list stands for ``SELECT *``.
    """
    variables: list[Variable] = field(default_factory=list)
    where: WhereClause = field(default_factory=WhereClause)
    prefixes: dict[str, str] = field(default_factory=dict)
    limit: Optional[int] = None

    def is_select_all(self) -> bool:
        return not self.variables

    def projection(self) -> list[Variable]:
        """Variables to project, resolving ``*`` to all pattern variables."""
        if self.is_select_all():
            return self.where.get_all_variables()
        return list(self.variables)

    def unbound_variables(self) -> list[Variable]:
        """SELECT variables that no pattern mentions."""
        available = set(self.where.get_all_variables())
        return [v for v in self.variables if v not in available]

    def __str__(self) -> str:
        lines = [f"PREFIX {name}: <{base}>" for name, base in self.prefixes.items()]
        head = "*" if self.is_select_all() else " ".join(map(str, self.variables))
        lines.append(f"SELECT {head}")
        lines.append("WHERE {")
        lines.extend(f"  {p}" for p in self.where.patterns)
        lines.append("}")
        if self.limit is not None:
            lines.append(f"LIMIT {self.limit}")
        return "\n".join(lines)

"""
SPARQL subset parser using pyparsing.

Supported grammar (keywords are case-insensitive):

    query   := prefix* SELECT (var+ | '*') WHERE '{' (term term term '.'?)+ '}' [LIMIT int]
    prefix  := PREFIX name? ':' <iri>
    term    := ?var | $var | <iri> | prefix:local | bare-token | "literal" | 'literal' | number

``#`` comments are ignored. Literals may contain braces, dots and ``#``.
"""

from dataclasses import dataclass
from typing import Optional

import pyparsing as pp

from rdf_graphview.errors import QueryParseError
from rdf_graphview.sparql.ast import (
    SelectQuery, TriplePattern, WhereClause,
    Variable, IRI, Literal,
)


@dataclass(frozen=True)
class _PrefixDecl:
    prefix: str
    iri: str


# =============================================================================
# Parse actions
# =============================================================================

def _to_variable(tokens):
    # "?name" / "$name" -> Variable("name")
    return Variable(tokens[0][1:])


def _to_full_iri(tokens):
    return IRI(tokens[0][1:-1])


def _to_prefixed(tokens):
    return IRI(tokens[0], prefixed=True)


def _to_bare(tokens):
    return IRI(tokens[0])


def _to_literal(tokens):
    return Literal(tokens[0])


def _to_pattern(tokens):
    subject, predicate, obj = tokens[:3]
    return TriplePattern(subject=subject, predicate=predicate, object=obj)


def _to_where(tokens):
    return WhereClause(patterns=list(tokens))


def _to_prefix(tokens):
    return _PrefixDecl(prefix=tokens[0][:-1], iri=tokens[1].value)


def _to_query(tokens):
    query = SelectQuery()
    for token in tokens:
        if isinstance(token, _PrefixDecl):
            query.prefixes[token.prefix] = token.iri
        elif isinstance(token, pp.ParseResults):
            query.variables = list(token)
        elif isinstance(token, WhereClause):
            query.where = token
        elif isinstance(token, int):
            query.limit = token
    return query


class SPARQLParser:
    """
    Parser for conjunctive SELECT queries.

    Produces a SelectQuery AST; no OPTIONAL, UNION, FILTER or aggregation.

    Example:
        query = SPARQLParser().parse("SELECT ?x WHERE { ?x type Person }")
    """

    def __init__(self):
        self.grammar = self._build_grammar()

    @staticmethod
    def _build_grammar() -> pp.ParserElement:
        pp.ParserElement.enable_packrat()

        select_kw = pp.CaselessKeyword("SELECT")
        where_kw = pp.CaselessKeyword("WHERE")
        prefix_kw = pp.CaselessKeyword("PREFIX")
        limit_kw = pp.CaselessKeyword("LIMIT")

        # =================================================================
        # Terms
        # =================================================================

        var_name = pp.Word(pp.alphas + "_", pp.alphanums + "_")
        variable = pp.Combine(pp.one_of("? $") + var_name).set_parse_action(_to_variable)

        full_iri = pp.Regex(r"<[^<>\s]*>").set_parse_action(_to_full_iri)

        # The local part never ends with a dot, leaving the pattern terminator alone
        prefixed_name = pp.Regex(
            r"(?:[A-Za-z][\w-]*)?:(?:[\w-]+(?:\.[\w-]+)*)?"
        ).set_parse_action(_to_prefixed)

        bare_token = pp.Regex(r"[A-Za-z_][\w-]*(?:\.[\w-]+)*").set_parse_action(_to_bare)

        quoted = (
            pp.QuotedString('"', esc_char="\\", multiline=True)
            | pp.QuotedString("'", esc_char="\\", multiline=True)
        ).set_parse_action(_to_literal)
        number = pp.Regex(r"[+-]?\d+(?:\.\d+)?").set_parse_action(_to_literal)

        # Order matters: prefixed names before bare tokens
        term = variable | full_iri | quoted | number | prefixed_name | bare_token

        # =================================================================
        # Clauses
        # =================================================================

        pattern = (term + term + term + pp.Opt(pp.Suppress("."))).set_parse_action(_to_pattern)

        where = (
            pp.Suppress(where_kw)
            + pp.Suppress("{")
            + pp.OneOrMore(pattern)
            + pp.Suppress("}")
        ).set_parse_action(_to_where)

        prefix_decl = (
            pp.Suppress(prefix_kw) + pp.Regex(r"(?:[A-Za-z][\w-]*)?:") + full_iri
        ).set_parse_action(_to_prefix)

        star = pp.Literal("*").set_parse_action(lambda: [])
        projection = pp.Group(star | pp.OneOrMore(variable.copy()))

        limit = pp.Suppress(limit_kw) + pp.pyparsing_common.integer.copy()

        grammar = (
            pp.ZeroOrMore(prefix_decl)
            + pp.Suppress(select_kw)
            + projection
            + where
            + pp.Opt(limit)
        ).set_parse_action(_to_query)
        grammar.ignore(pp.Literal("#") + pp.rest_of_line)
        return grammar

    def parse(self, query_string: str) -> SelectQuery:
        """
        Parse query text into a SelectQuery.

        Raises:
            QueryParseError: If the text does not match the supported grammar
        """
        try:
            result = self.grammar.parse_string(query_string, parse_all=True)
        except pp.ParseBaseException as e:
            raise QueryParseError(
                f"Unsupported query at line {e.lineno}, column {e.col}: {e.msg}",
                line=e.lineno,
                column=e.col,
            ) from e
        return result[0]


_parser: Optional[SPARQLParser] = None


def parse_query(query_string: str) -> SelectQuery:
    """Parse ``query_string`` with a shared, lazily built parser."""
    global _parser
    if _parser is None:
        _parser = SPARQLParser()
    return _parser.parse(query_string)

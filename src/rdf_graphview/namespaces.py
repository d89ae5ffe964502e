"""
Namespace registry.

Maps short prefixes to base IRIs, expands/compacts CURIEs, and auto-detects
new bases from identifiers seen during ingestion.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, Iterator, Optional, Tuple

from rdf_graphview.errors import NamespaceConflictError

logger = logging.getLogger(__name__)

# Well-known namespaces
RDF = "http://www.w3.org/1999/02/22-rdf-syntax-ns#"
RDFS = "http://www.w3.org/2000/01/rdf-schema#"
OWL = "http://www.w3.org/2002/07/owl#"
FOAF = "http://xmlns.com/foaf/0.1/"
DC = "http://purl.org/dc/elements/1.1/"
DCT = "http://purl.org/dc/terms/"
SKOS = "http://www.w3.org/2004/02/skos/core#"
XSD = "http://www.w3.org/2001/XMLSchema#"
EX = "http://example.org/"

COMMON_NAMESPACES: Dict[str, str] = {
    "rdf": RDF,
    "rdfs": RDFS,
    "owl": OWL,
    "foaf": FOAF,
    "dc": DC,
    "dcterms": DCT,
    "skos": SKOS,
    "xsd": XSD,
    "ex": EX,
}

_CURIE = re.compile(r"^([A-Za-z][\w.-]*)?:([^/].*)?$")
_HOST = re.compile(r"^https?://([^/#]+)")


class NamespaceRegistry:
    """
    Bidirectional prefix <-> base IRI registry.

    Prefixes are unique and so are bases: no two prefixes may resolve to the
    same base.

    Example:
        ns = NamespaceRegistry()
        ns.expand("foaf:name")       # "http://xmlns.com/foaf/0.1/name"
        ns.compact(FOAF + "knows")   # "foaf:knows"
    """

    def __init__(self, seed_common: bool = True):
        self._by_prefix: Dict[str, str] = {}
        self._by_base: Dict[str, str] = {}
        if seed_common:
            for prefix, base in COMMON_NAMESPACES.items():
                self.register(prefix, base)

    def register(self, prefix: str, base: str) -> None:
        """
        Bind ``prefix`` to ``base``.

        Raises:
            NamespaceConflictError: If either side is already bound elsewhere.
        """
        existing = self._by_prefix.get(prefix)
        if existing == base:
            return
        if existing is not None:
            raise NamespaceConflictError(
                f"Prefix '{prefix}' already bound to <{existing}>"
            )
        owner = self._by_base.get(base)
        if owner is not None:
            raise NamespaceConflictError(
                f"Base <{base}> already bound to prefix '{owner}'"
            )
        self._by_prefix[prefix] = base
        self._by_base[base] = prefix

    def base_for(self, prefix: str) -> Optional[str]:
        return self._by_prefix.get(prefix)

    def prefix_for(self, base: str) -> Optional[str]:
        return self._by_base.get(base)

    def expand(self, term: str) -> str:
        """Expand a ``prefix:local`` CURIE; anything else is returned as-is."""
        match = _CURIE.match(term)
        if not match:
            return term
        base = self._by_prefix.get(match.group(1) or "")
        if base is None:
            return term
        return base + (match.group(2) or "")

    def compact(self, iri: str) -> str:
        """Compact an IRI with the longest registered base, if any."""
        best: Optional[Tuple[str, str]] = None
        for base, prefix in self._by_base.items():
            if iri.startswith(base) and len(iri) > len(base):
                if best is None or len(base) > len(best[0]):
                    best = (base, prefix)
        if best is None:
            return iri
        return f"{best[1]}:{iri[len(best[0]):]}"

    def is_curie(self, term: str) -> bool:
        """True when ``term`` uses a registered prefix."""
        match = _CURIE.match(term)
        return bool(match) and (match.group(1) or "") in self._by_prefix

    def detect(self, identifier: str) -> Optional[str]:
        """
        Register the namespace of an http(s) identifier if it is new.

        The base is everything up to and including the last ``#`` or ``/``.
        The prefix is derived from the host name.

        Returns:
            The prefix now bound to the base, or None if nothing was detected.
        """
        if not identifier.startswith(("http://", "https://")):
            return None
        cut = max(identifier.rfind("#"), identifier.rfind("/"))
        base = identifier[: cut + 1]
        if base.endswith("://") or base.count("/") < 3:
            return None
        known = self._by_base.get(base)
        if known is not None:
            return known

        candidate = self._generate_prefix(base)
        prefix = candidate
        suffix = 1
        while prefix in self._by_prefix:
            prefix = f"{candidate}{suffix}"
            suffix += 1
        self.register(prefix, base)
        logger.debug(f"Detected namespace {prefix}: <{base}>")
        return prefix

    @staticmethod
    def _generate_prefix(base: str) -> str:
        host = _HOST.match(base)
        if host:
            parts = host.group(1).split(":")[0].split(".")
            if len(parts) >= 2 and parts[-2]:
                return re.sub(r"\W", "", parts[-2]).lower() or "ns"
        return "ns"

    def as_dict(self) -> Dict[str, str]:
        return dict(self._by_prefix)

    def __contains__(self, prefix: object) -> bool:
        return prefix in self._by_prefix

    def __len__(self) -> int:
        return len(self._by_prefix)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self._by_prefix.items())

"""
Core data models for rdf-graphview.

Triples are the stored facts; ViewNode/ViewEdge/GraphView are the ephemeral
projection output handed to a renderer. Every record converts to plain
dictionaries so it can cross any transport unchanged.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class ObjectType(str, Enum):
    """Kind of value held in a triple's object position."""
    LITERAL = "literal"
    URI = "uri"
    BLANK = "blank"

    @classmethod
    def from_value(cls, value: Union[str, "ObjectType"]) -> "ObjectType":
        if isinstance(value, ObjectType):
            return value
        return cls(value.lower())


PropertyValue = Union[str, list[str]]


@dataclass(frozen=True)
class Triple:
    """
    A single subject-predicate-object fact.

    ``triple_id`` is assigned by the store on insertion and is ``None`` for
    triples that have not been stored yet.
    """
    subject: str
    predicate: str
    object: str
    object_type: ObjectType = ObjectType.LITERAL
    triple_id: Optional[int] = field(default=None, compare=False)

    @property
    def is_literal(self) -> bool:
        return self.object_type == ObjectType.LITERAL

    def key(self) -> tuple[str, str, str]:
        return (self.subject, self.predicate, self.object)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.triple_id,
            "subject": self.subject,
            "predicate": self.predicate,
            "object": self.object,
            "object_type": self.object_type.value,
        }

    def __str__(self) -> str:
        obj = f'"{self.object}"' if self.is_literal else f"<{self.object}>"
        return f"<{self.subject}> <{self.predicate}> {obj} ."


def edge_id(subject: str, predicate: str, obj: str) -> str:
    """Deterministic edge identity for a (subject, predicate, object) triple."""
    return f"{subject}-{predicate}-{obj}"


@dataclass
class ViewNode:
    """A node of the projected view model; identity is ``id``."""
    id: str
    label: str
    type: str = "Resource"
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    x: float = 0.0
    y: float = 0.0
    vx: float = 0.0
    vy: float = 0.0
    pinned: bool = False

    def copy(self) -> "ViewNode":
        return ViewNode(
            id=self.id,
            label=self.label,
            type=self.type,
            properties={
                k: list(v) if isinstance(v, list) else v
                for k, v in self.properties.items()
            },
            x=self.x,
            y=self.y,
            vx=self.vx,
            vy=self.vy,
            pinned=self.pinned,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "type": self.type,
            "properties": self.properties,
            "x": self.x,
            "y": self.y,
            "vx": self.vx,
            "vy": self.vy,
            "pinned": self.pinned,
        }


@dataclass(frozen=True)
class ViewEdge:
    """A directed edge between two projected nodes."""
    id: str
    source: str
    target: str
    predicate: str
    label: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "source": self.source,
            "target": self.target,
            "predicate": self.predicate,
            "label": self.label,
        }


@dataclass
class GraphView:
    """Result of one projection pass."""
    nodes: list[ViewNode] = field(default_factory=list)
    edges: list[ViewEdge] = field(default_factory=list)

    @property
    def node_ids(self) -> set[str]:
        return {n.id for n in self.nodes}

    def node(self, node_id: str) -> Optional[ViewNode]:
        for n in self.nodes:
            if n.id == node_id:
                return n
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
            "node_count": len(self.nodes),
            "edge_count": len(self.edges),
        }

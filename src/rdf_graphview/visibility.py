"""
Visibility sets: named, saved queries that decide which resources are shown.

At most one set is active at a time; the engine evaluates the active set's
query to get the visible-id set for projection.
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class VisibilitySet:
    """A saved visibility query."""
    set_id: str
    name: str
    query: str
    description: str = ""
    is_active: bool = False
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "set_id": self.set_id,
            "name": self.name,
            "query": self.query,
            "description": self.description,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> VisibilitySet:
        return cls(
            set_id=data["set_id"],
            name=data["name"],
            query=data["query"],
            description=data.get("description", ""),
            is_active=data.get("is_active", False),
            created_at=datetime.fromisoformat(data["created_at"])
            if data.get("created_at") else datetime.now(),
        )


class VisibilitySetManager:
    """
    In-memory registry of visibility sets.

    Example:
        sets = VisibilitySetManager()
        people = sets.create("People", "SELECT ?x WHERE { ?x type Person }")
        sets.activate(people.set_id)
    """

    def __init__(self):
        self._sets: dict[str, VisibilitySet] = {}

    def create(self, name: str, query: str, description: str = "") -> VisibilitySet:
        vs = VisibilitySet(
            set_id=uuid.uuid4().hex[:12],
            name=name,
            query=query,
            description=description,
        )
        self._sets[vs.set_id] = vs
        logger.info(f"Created visibility set '{name}' with ID {vs.set_id}")
        return vs

    def get(self, set_id: str) -> VisibilitySet | None:
        return self._sets.get(set_id)

    def list(self) -> list[VisibilitySet]:
        return list(self._sets.values())

    def delete(self, set_id: str) -> bool:
        return self._sets.pop(set_id, None) is not None

    def activate(self, set_id: str) -> VisibilitySet:
        """
        Make ``set_id`` the only active set.

        Raises:
            KeyError: If the set does not exist
        """
        if set_id not in self._sets:
            raise KeyError(f"Visibility set not found: {set_id}")
        for vs in self._sets.values():
            vs.is_active = vs.set_id == set_id
        active = self._sets[set_id]
        logger.info(f"Activated visibility set '{active.name}'")
        return active

    def deactivate(self) -> None:
        for vs in self._sets.values():
            vs.is_active = False

    @property
    def active(self) -> VisibilitySet | None:
        for vs in self._sets.values():
            if vs.is_active:
                return vs
        return None

    def __len__(self) -> int:
        return len(self._sets)

    def to_dict(self) -> dict[str, Any]:
        return {"sets": [vs.to_dict() for vs in self.list()]}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> VisibilitySetManager:
        manager = cls()
        for item in data.get("sets", []):
            vs = VisibilitySet.from_dict(item)
            manager._sets[vs.set_id] = vs
        return manager

"""Game data models: items, tasks, users, roles and accounts."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from .mathx import INT32_MIN, checked_sum


@dataclass
class Item:
    """A stack of one kind of item."""

    id: int = 0
    count: int = 0

    def clone(self) -> "Item":
        return Item(self.id, self.count)

    def to_dict(self) -> dict[str, int]:
        return {"id": self.id, "count": self.count}


class ItemList(list):
    """A list of item stacks, at most one stack per item id."""

    def _merge(self, item: Item) -> bool:
        for existing in self:
            if existing.id != item.id:
                continue
            try:
                existing.count = checked_sum(existing.count, item.count)
            except OverflowError:
                return False
            return True
        self.append(Item(item.id, item.count))
        return True

    def add(self, *args: Item) -> bool:
        """Add items; returns False if a merged count is not positive or would overflow."""
        merged = ItemList()
        for item in args:
            if not merged._merge(item):
                return False
        if any(item.count <= 0 for item in merged):
            return False
        for item in merged:
            if not self._merge(item):
                return False
        return True

    def _subtract(self, item: Item) -> None:
        for existing in self:
            if existing.id != item.id:
                continue
            if existing.count - item.count < INT32_MIN:
                existing.count = INT32_MIN
                continue
            existing.count -= item.count

    def sub(self, *args: Item) -> None:
        """Subtract items, clamping counts at INT32_MIN.

        Nothing is subtracted unless the items would themselves form a valid add.
        """
        merged = ItemList()
        merged.add(*args)
        for item in merged:
            self._subtract(item)

    def get(self, item_id: int) -> Optional[Item]:
        return next((item for item in self if item.id == item_id), None)

    def clone(self) -> "ItemList":
        return ItemList(item.clone() for item in self)


@dataclass
class Task:
    """Progress of one task."""

    id: int = 0
    count: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"id": self.id, "count": self.count}


class TaskList(list):
    """A list of task progress entries."""

    def get(self, task_id: int) -> Optional[Task]:
        return next((task for task in self if task.id == task_id), None)


class Document(ABC):
    """Something that can be stored in a named document collection."""

    @abstractmethod
    def document_id(self) -> str:
        """Identifier of the document within its collection."""

    @abstractmethod
    def document_name(self) -> str:
        """Name of the collection the document belongs to."""


@dataclass
class Role:
    """A player's in-game character."""

    role_id: int = 0
    level: int = 0
    exp: int = 0
    name: str = ""
    items: ItemList = field(default_factory=ItemList)
    tasks: TaskList = field(default_factory=TaskList)

    def to_dict(self) -> dict[str, Any]:
        return {
            "role_id": self.role_id,
            "level": self.level,
            "exp": self.exp,
            "name": self.name,
            "items": [item.to_dict() for item in self.items],
            "tasks": [task.to_dict() for task in self.tasks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Role":
        return cls(
            role_id=data.get("role_id", 0),
            level=data.get("level", 0),
            exp=data.get("exp", 0),
            name=data.get("name", ""),
            items=ItemList(
                Item(entry.get("id", 0), entry.get("count", 0))
                for entry in data.get("items") or []
            ),
            tasks=TaskList(
                Task(entry.get("id", 0), entry.get("count", 0))
                for entry in data.get("tasks") or []
            ),
        )


@dataclass
class User(Document):
    """A stored user with their role."""

    id: str = ""
    user_id: int = 0
    created: Optional[datetime] = None
    role: Role = field(default_factory=Role)

    def document_id(self) -> str:
        return self.id

    def document_name(self) -> str:
        return "user"

    def to_document(self) -> dict[str, Any]:
        """Document form; empty user id, creation time and role are left out."""
        doc: dict[str, Any] = {"_id": self.id}
        if self.user_id:
            doc["user_id"] = self.user_id
        if self.created is not None:
            doc["created"] = self.created
        if self.role != Role():
            doc["role"] = self.role.to_dict()
        return doc

    @classmethod
    def from_document(cls, data: dict[str, Any]) -> "User":
        role = data.get("role")
        return cls(
            id=data.get("_id", ""),
            user_id=data.get("user_id", 0),
            created=data.get("created"),
            role=Role.from_dict(role) if role else Role(),
        )


@dataclass
class Account:
    """A login account: passport name and hashed password."""

    user_id: int = 0
    passport: str = ""
    pwd: str = ""
    created: Optional[datetime] = None
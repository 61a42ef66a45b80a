"""A tree of whiskers that resolves a memory state to the rule that governs it."""

from __future__ import annotations

from dataclasses import dataclass, field

from remycc.memory import Memory, MemoryRange, max_memory, min_memory
from remycc.whisker import Whisker


class WhiskerInsertError(ValueError):
    """Raised when a whisker cannot replace the rule already covering its domain."""


class WhiskerLookupError(LookupError):
    """Raised when no whisker covers a memory state."""


def _default_whisker() -> Whisker:
    return Whisker(0, 0, 1.0, 0.0, MemoryRange(min_memory(), max_memory()))


@dataclass
class WhiskerNode:
    """A node holding one whisker and its child nodes."""

    whisker: Whisker
    children: list[WhiskerNode] = field(default_factory=list)


@dataclass
class WhiskerTree:
    """Whiskers arranged by domain, rooted at a rule covering all memory."""

    root: WhiskerNode = field(default_factory=lambda: WhiskerNode(_default_whisker()))

    def insert(self, whisker: Whisker) -> None:
        """Insert ``whisker``, replacing an older-generation rule whose domain it meets."""
        node = self.root
        while True:
            if node.whisker.domain.intersects(whisker.domain):
                if node.whisker.generation >= whisker.generation:
                    raise WhiskerInsertError(
                        f"failed to insert whisker: whisker with generation "
                        f"{whisker.generation} already exists in the domain"
                    )
                node.whisker = whisker
                return
            child = next((c for c in node.children
                          if c.whisker.domain.intersects(whisker.domain)), None)
            if child is None:
                node.children.append(WhiskerNode(whisker))
                return
            node = child

    def find_whisker(self, memory: Memory) -> Whisker:
        """Return the whisker whose domain contains ``memory``."""
        node = self.root
        while not node.whisker.domain.contains(memory):
            node = next((c for c in node.children if c.whisker.domain.contains(memory)), None)
            if node is None:
                raise WhiskerLookupError("memory not found in the tree")
        return node.whisker

    def __str__(self) -> str:
        lines: list[str] = []
        stack = [(self.root, 0)]
        while stack:
            node, indent = stack.pop()
            lines.append(f"{' ' * indent}{node.whisker}\n")
            stack.extend((child, indent + 2) for child in reversed(node.children))
        return "".join(lines)
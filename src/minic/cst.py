"""Concrete syntax tree produced by the parser."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional


#generic n-ary node: a grammar label or a literal token value plus its children
@dataclass(slots=True)
class CSTNode:
    label: str
    line: int = 0
    children: List["CSTNode"] = field(default_factory=list)

    def add(self, child: "CSTNode") -> "CSTNode":
        self.children.append(child)
        return child

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def child(self, label: str) -> Optional["CSTNode"]:
        """Return the first direct child carrying ``label``."""

        for node in self.children:
            if node.label == label:
                return node
        return None

    def after(self, label: str) -> Optional["CSTNode"]:
        """Return the sibling that follows the first child labelled ``label``."""

        for index, node in enumerate(self.children):
            if node.label == label:
                if index + 1 < len(self.children):
                    return self.children[index + 1]
                return None
        return None

    def walk(self) -> Iterator["CSTNode"]:
        yield self
        for node in self.children:
            yield from node.walk()

    def pretty(self, depth: int = 0) -> str:
        lines = ["  " * depth + self.label]
        for node in self.children:
            lines.append(node.pretty(depth + 1))
        return "\n".join(lines)

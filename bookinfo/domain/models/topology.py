from __future__ import annotations
from typing import Tuple
from pydantic import BaseModel


class ServiceNode(BaseModel):
    name: str
    base_url: str
    children: Tuple["ServiceNode", ...] = ()

    model_config = {"frozen": True}  # built once at startup, read-only afterwards

    def walk(self):
        """Depth-first iteration over this node and its descendants."""
        yield self
        for child in self.children:
            yield from child.walk()

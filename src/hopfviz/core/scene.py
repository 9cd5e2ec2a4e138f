"""
Minimal scene registry.

Circles register their renderables here; a renderer (see
``hopfviz.viz.viewer.MatplotlibScene``) subclasses Scene and hooks
``_on_add``/``_on_remove`` to create and drop the matching artists.
"""

from __future__ import annotations

from typing import Any, List

from hopfviz.core.enums import SceneRole

__all__ = ["Scene"]


class Scene:
    def __init__(self, role: SceneRole = SceneRole.MAIN):
        self.role = role
        self._children: List[Any] = []

    @property
    def children(self) -> List[Any]:
        """Registered renderables in insertion order (a copy)."""
        return list(self._children)

    def add(self, obj: Any) -> None:
        if any(child is obj for child in self._children):
            return
        self._children.append(obj)
        self._on_add(obj)

    def remove(self, obj: Any) -> None:
        for index, child in enumerate(self._children):
            if child is obj:
                del self._children[index]
                self._on_remove(obj)
                return

    def owned_by(self, owner: Any) -> List[Any]:
        """Renderables whose ``owner`` attribute is `owner`."""
        return [child for child in self._children if getattr(child, "owner", None) is owner]

    # Hooks for renderer-backed scenes
    def _on_add(self, obj: Any) -> None:
        pass

    def _on_remove(self, obj: Any) -> None:
        pass

    def __contains__(self, obj: Any) -> bool:
        return any(child is obj for child in self._children)

    def __len__(self) -> int:
        return len(self._children)

    def __iter__(self):
        return iter(list(self._children))

    def __repr__(self) -> str:
        return f"Scene(role={self.role.value}, children={len(self._children)})"

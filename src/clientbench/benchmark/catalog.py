"""
Action Catalog

Ordered, fixed sequence of actions executed in one benchmark pass.
"""

from typing import Iterable, Iterator, List, Tuple

from .action import Action


def is_filtered(action: Action, action_filter: str) -> bool:
    """Return True if the action name occurs in the filter value."""
    if not action_filter:
        return False
    return action.action in action_filter


class ActionCatalog:
    """Immutable, ordered collection of actions."""

    def __init__(self, actions: Iterable[Action]):
        self._actions: Tuple[Action, ...] = tuple(actions)

        seen = set()
        for action in self._actions:
            if action.action in seen:
                raise ValueError(f"Duplicate action name in catalog: {action.action}")
            seen.add(action.action)

    def __iter__(self) -> Iterator[Action]:
        return iter(self._actions)

    def __len__(self) -> int:
        return len(self._actions)

    def names(self) -> List[str]:
        return [action.action for action in self._actions]

    def selected(self, action_filter: str = "") -> Iterator[Action]:
        """Yield the actions not skipped by the filter, in catalog order."""
        for action in self._actions:
            if not is_filtered(action, action_filter):
                yield action

"""
Form error scopes
Validation errors are keyed by a structured scope instead of concatenated
strings, so a project field called "event-1-name" can never collide with the
name field of the second event.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class GlobalScope:
    """Error that belongs to the whole form"""


@dataclass(frozen=True)
class FieldScope:
    name: str


@dataclass(frozen=True)
class EventFieldScope:
    index: int
    name: str


ErrorScope = Union[GlobalScope, FieldScope, EventFieldScope]


class ErrorMap:
    """Validation messages keyed by scope"""

    def __init__(self):
        self._errors: Dict[ErrorScope, str] = {}

    def set(self, scope: ErrorScope, message: str) -> None:
        self._errors[scope] = message

    def get(self, scope: ErrorScope) -> Optional[str]:
        return self._errors.get(scope)

    def clear(self, scope: ErrorScope) -> None:
        self._errors.pop(scope, None)

    def clear_all(self) -> None:
        self._errors.clear()

    def clear_fields(self) -> None:
        """Drop project-level field errors, keeping event errors"""
        self._errors = {s: m for s, m in self._errors.items() if not isinstance(s, FieldScope)}

    def clear_events(self) -> None:
        self._errors = {s: m for s, m in self._errors.items() if not isinstance(s, EventFieldScope)}

    def __contains__(self, scope: ErrorScope) -> bool:
        return scope in self._errors

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[ErrorScope]:
        return iter(self._errors)

    def items(self) -> List[Tuple[ErrorScope, str]]:
        return list(self._errors.items())

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def field_errors(self) -> Dict[str, str]:
        return {s.name: m for s, m in self._errors.items() if isinstance(s, FieldScope)}

    def event_errors(self, index: int) -> Dict[str, str]:
        return {
            s.name: m
            for s, m in self._errors.items()
            if isinstance(s, EventFieldScope) and s.index == index
        }

    def event_indexes_with_errors(self) -> List[int]:
        """Event tabs that still have outstanding errors, in order"""
        return sorted({s.index for s in self._errors if isinstance(s, EventFieldScope)})

    def drop_event(self, index: int) -> None:
        """Forget the errors of a removed event and shift later events down"""
        shifted: Dict[ErrorScope, str] = {}
        for scope, message in self._errors.items():
            if isinstance(scope, EventFieldScope):
                if scope.index == index:
                    continue
                if scope.index > index:
                    scope = EventFieldScope(scope.index - 1, scope.name)
            shifted[scope] = message
        self._errors = shifted

    def as_dict(self) -> Dict[str, str]:
        """Flat view for display, e.g. {"projectName": .., "event-0-name": ..}"""
        flat = {}
        for scope, message in self._errors.items():
            if isinstance(scope, GlobalScope):
                flat["global"] = message
            elif isinstance(scope, FieldScope):
                flat[scope.name] = message
            else:
                flat[f"event-{scope.index}-{scope.name}"] = message
        return flat

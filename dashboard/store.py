import dataclasses
from collections.abc import Callable

from dashboard.models import SelectionState

Listener = Callable[[SelectionState], None]


class SelectionStore:
    """
    Shared selection for the linked views.

    Single writer, synchronous. Listeners are called in subscription order and
    only when a field actually changed. A listener that calls set_state itself
    triggers a nested notification pass that finishes before the outer one
    continues, so it must not react unconditionally to its own writes.
    """

    def __init__(self, initial: SelectionState | None = None):
        self._state = initial if initial is not None else SelectionState()
        # dict keeps insertion order and gives set semantics per callable
        self._listeners: dict[Listener, None] = {}

    def get_state(self) -> SelectionState:
        return self._state

    def set_state(self, **patch) -> None:
        prev = self._state
        nxt = dataclasses.replace(prev, **patch)
        changed = any(
            getattr(nxt, f.name) != getattr(prev, f.name) for f in dataclasses.fields(nxt)
        )

        self._state = nxt
        if changed:
            for listener in list(self._listeners):
                # skip listeners removed earlier in this pass; always hand out the latest state
                if listener in self._listeners:
                    listener(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners[listener] = None
        listener(self._state)

        def unsubscribe() -> None:
            self._listeners.pop(listener, None)

        return unsubscribe

    def reset(self) -> None:
        self.set_state(**dataclasses.asdict(SelectionState()))

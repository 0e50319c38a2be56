"""Fan-in barrier that fires once every script of a template has loaded."""

from __future__ import annotations

from typing import Callable, Optional, Sequence

from .models import LoadedCallback, ScriptSource


class ScriptLoadBarrier:
    """Subscribes to a fixed set of sources and fires ``on_complete`` exactly once.

    The check runs synchronously inside the notification that completes the set.
    An empty set, or a set that is already fully loaded, fires before the
    constructor returns.
    """

    def __init__(
        self,
        sources: Sequence[ScriptSource],
        on_complete: Callable[[], None],
        *,
        on_loaded: Optional[LoadedCallback] = None,
    ) -> None:
        self._sources = tuple(sources)
        self._on_complete = on_complete
        self._on_loaded = on_loaded
        self.pending: set[ScriptSource] = {source for source in self._sources if not source.loaded}
        self.fired = False

        for source in self._sources:
            source.subscribe(self._on_source_loaded)
        self._check()

    def _on_source_loaded(self, source: ScriptSource, content: str) -> None:
        self.pending.discard(source)
        if self._on_loaded is not None:
            self._on_loaded(source, content)
        self._check()

    def _check(self) -> None:
        if self.fired or self.pending:
            return
        if not all(source.loaded for source in self._sources):
            return
        self.fired = True
        self._on_complete()

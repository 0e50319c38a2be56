"""Per-request completion gate driven by wait/done calls."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(slots=True)
class RequestWaitCounter:
    """Counts pending asynchronous work and emits exactly once when it drains."""

    emit: Callable[[], None]
    count: int = 0
    sent: bool = False

    def wait(self) -> None:
        self.count += 1

    def done(self) -> None:
        self.count = max(self.count - 1, 0)
        if self.count == 0:
            self.send()

    def settle(self) -> None:
        """Emit now unless some handler is still waiting."""
        if self.count == 0:
            self.send()

    def send(self) -> bool:
        if self.sent:
            return False
        self.sent = True
        self.emit()
        return True

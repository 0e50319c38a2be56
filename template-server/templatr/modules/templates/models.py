"""Domain models for rendered template resources."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

HTML_MEDIA_TYPE = "text/html"
SCRIPT_MEDIA_TYPE = "application/javascript"


@dataclass(frozen=True, slots=True)
class RenderedResource:
    body: str
    media_type: str = HTML_MEDIA_TYPE
    bundle_index: Optional[int] = None

    @property
    def is_bundle(self) -> bool:
        return self.bundle_index is not None

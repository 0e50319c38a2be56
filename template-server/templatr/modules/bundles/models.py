"""Domain models for merged script bundles."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

BUNDLE_PATTERN = re.compile(r"script-(\d+)\.js$")


def bundle_path(index: int) -> str:
    return f"./script-{index}.js"


def match_bundle_index(path: str) -> Optional[int]:
    match = BUNDLE_PATTERN.search(path)
    return int(match.group(1)) if match else None


@dataclass(frozen=True, slots=True)
class Bundle:
    index: int
    content: str
    servable: bool = True

    @property
    def path(self) -> str:
        return bundle_path(self.index)


@dataclass(frozen=True, slots=True)
class BundlePlan:
    bundles: tuple[Bundle, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.bundles)

    def get(self, index: int) -> Optional[Bundle]:
        if 0 <= index < len(self.bundles):
            return self.bundles[index]
        return None

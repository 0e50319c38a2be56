"""Merges adjacent script tags of a prepared template into numbered bundles."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from templatr.infrastructure.html import drop_node, is_attached, is_script, previous_element
from templatr.modules.scripts import ScriptSource

from .models import Bundle, BundlePlan, bundle_path

logger = logging.getLogger(__name__)


def remove_server_only(scripts: Sequence[ScriptSource]) -> int:
    """Detach every server-only script still present in the document."""
    removed = 0
    for script in scripts:
        if script.server_only and is_attached(script.node):
            drop_node(script.node)
            removed += 1
    return removed


def is_follow_on(script: ScriptSource) -> bool:
    """Whether the script's previous sibling element is itself a ``<script>``.

    Server-only scripts are gone by the time this is asked, so ``runat`` is not
    checked again.
    """
    return is_script(previous_element(script.node))


@dataclass(slots=True)
class BundlePlanner:
    merge: bool = True

    def plan(self, scripts: Sequence[ScriptSource]) -> BundlePlan:
        """Mutate the document that owns ``scripts`` and return the bundle table."""
        remove_server_only(scripts)
        if not self.merge:
            return BundlePlan()

        contents: list[str] = []
        for script in scripts:
            if script.server_only:
                continue

            node = script.node
            if contents and is_follow_on(script):
                contents[-1] += script.content
                drop_node(node)
                continue

            contents.append(script.content)
            node.set("src", bundle_path(len(contents) - 1))
            node.text = None

        bundles = tuple(Bundle(index=index, content=content) for index, content in enumerate(contents))
        logger.debug("Merged %d scripts into %d bundles", len(scripts), len(bundles))
        return BundlePlan(bundles=bundles)

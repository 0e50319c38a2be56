"""Simple dependency container for wiring the template and its collaborators."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from templatr.core.config import Settings, get_settings
from templatr.infrastructure.loaders import RemoteFetcher
from templatr.modules.templates import PassiveScriptEngine, ScriptEngine, Template

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ApplicationContainer:
    settings: Settings
    engine: ScriptEngine = field(default_factory=PassiveScriptEngine)
    _template: Optional[Template] = field(default=None, init=False, repr=False)

    @property
    def template(self) -> Template:
        if self._template is None:
            self._template = self.build_template()
        return self._template

    def build_template(self) -> Template:
        section = self.settings.template
        logger.debug("Building template %s with options %r", self.settings.template_path, section.options)
        return Template(
            section.directory,
            section.name,
            section.options,
            engine=self.engine,
            fetcher=RemoteFetcher(timeout=self.settings.loader.remote_timeout),
            location_origin=section.location_origin,
            encoding=section.encoding,
        )


@lru_cache()
def get_container() -> ApplicationContainer:
    return ApplicationContainer(settings=get_settings())


__all__ = ["ApplicationContainer", "get_container"]

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from templatr import __version__
from templatr.core.config import Settings, get_settings
from templatr.core.container import ApplicationContainer
from templatr.interfaces.http import TemplateMiddleware
from templatr.modules.templates import Template


def create_app(settings: Optional[Settings] = None, template: Optional[Template] = None) -> FastAPI:
    settings = settings or get_settings()
    if template is None:
        template = ApplicationContainer(settings=settings).template

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Scripts load in the background; early requests wait in the middleware.
        template.start()
        yield

    app = FastAPI(
        title=settings.project_name,
        description="Precompiled HTML templates with merged script bundles",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.template = template
    app.add_middleware(
        TemplateMiddleware,
        template=template,
        ready_timeout=settings.middleware.ready_timeout,
    )
    return app

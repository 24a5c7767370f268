from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from actionpalette.api.v1.actions import router as actions_router
from actionpalette.config.runtime import get_settings
from actionpalette.config.settings import PaletteSettings
from actionpalette.plugins.strategies.handoff import handoff_strategies
from actionpalette.services.palette import Palette, build_palette


def create_app(
    *,
    cfg: Optional[PaletteSettings] = None,
    palette: Optional[Palette] = None,
) -> FastAPI:
    """
    Builds the FastAPI app, registers routers, and attaches the palette to
    app.state. Without an explicit palette one is built from settings with
    hand-off strategies for chat / inline / saved_chats.
    """
    settings = cfg or get_settings()
    palette = palette or build_palette(strategies=handoff_strategies(), settings=settings)

    app = FastAPI(
        title="actionpalette sidecar",
        version="0.1",
    )

    # CORS
    if settings.server.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.server.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Routers
    app.include_router(router=actions_router, prefix="/api/v1")

    app.state.settings = settings
    app.state.palette = palette

    return app

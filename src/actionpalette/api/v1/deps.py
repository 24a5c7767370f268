# request-scoped dependencies for the sidecar API

from dataclasses import dataclass

from fastapi import HTTPException, Request

from actionpalette.core.actions.action_spec import Action
from actionpalette.core.context.snapshot import Context
from actionpalette.services.palette import Palette


@dataclass
class PresetConfirmer:
    """The remote host asks the user before calling us and sends the answer along."""

    confirmed: bool

    def confirm(self, action: Action, context: Context) -> bool:
        return self.confirmed


async def get_palette(request: Request) -> Palette:
    palette = getattr(request.app.state, "palette", None)
    if palette is None:
        raise HTTPException(status_code=503, detail="Palette not configured")
    return palette

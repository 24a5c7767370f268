# actionpalette/config/loader.py
import logging
import os
from pathlib import Path
from typing import List, Optional

from .settings import PaletteSettings

ENV_FILE_VAR = "ACTIONPALETTE_ENV_FILE"

log = logging.getLogger("actionpalette.config.loader")


def env_files(root: Path) -> List[Path]:
    """
    Env files to read, lowest precedence first:

      1. $ACTIONPALETTE_ENV_FILE (must exist when set)
      2. <root>/.env
      3. <root>/.env.local
    """
    files: List[Path] = []

    explicit = os.environ.get(ENV_FILE_VAR)
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise FileNotFoundError(f"{ENV_FILE_VAR} points to a missing file: {path}")
        files.append(path)

    files.extend(p for p in (root / ".env", root / ".env.local") if p.is_file())
    return files


def load_settings(root: Optional[Path] = None) -> PaletteSettings:
    files = env_files(root or Path.cwd())
    if not files:
        log.debug("No env files found; using defaults and environment only.")
        return PaletteSettings()

    log.debug("Reading settings from %s", ", ".join(str(p) for p in files))
    # process environment still wins over every file
    return PaletteSettings(_env_file=[str(p) for p in files])

from functools import lru_cache

from .loader import load_settings
from .settings import PaletteSettings


@lru_cache(maxsize=1)
def get_settings() -> PaletteSettings:
    """Process-wide settings, read once from env files and the environment."""
    return load_settings()


def reset_settings() -> None:
    """Forget the cached settings; the next get_settings() reloads them."""
    get_settings.cache_clear()

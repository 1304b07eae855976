from inkwell.config.settings import (
    ContentSettings,
    Settings,
    WordFilterMode,
    get_settings,
)


__all__ = [
    "ContentSettings",
    "Settings",
    "WordFilterMode",
    "get_settings",
]

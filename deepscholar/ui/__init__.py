"""Local UI subsystem for DeepScholar."""

from deepscholar.ui.server import (
    BriefCompareServer,
    UIServerConfig,
    build_ui_url,
    create_ui_server,
    start_ui_server,
)

__all__ = [
    "BriefCompareServer",
    "UIServerConfig",
    "build_ui_url",
    "create_ui_server",
    "start_ui_server",
]

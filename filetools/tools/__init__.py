from filetools.tools.base import BaseTool
from filetools.tools.factory import ToolFactory
from filetools.tools.registry import ToolConfig, ToolId, ToolRegistry, build_default_registry

__all__ = [
    "BaseTool",
    "ToolConfig",
    "ToolFactory",
    "ToolId",
    "ToolRegistry",
    "build_default_registry",
]

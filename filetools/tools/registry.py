from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from filetools.config.settings import Settings
from filetools.processor.exceptions import TOOL_NOT_FOUND, ProcessingError

_MB = 1024 * 1024

PDF_TYPES = frozenset({"application/pdf"})
IMAGE_TYPES = frozenset({"image/jpeg", "image/png", "image/gif", "image/webp"})


class ToolId(str, Enum):
    """Every tool the processor can dispatch to."""

    MERGE_PDF = "merge-pdf"
    SPLIT_PDF = "split-pdf"
    COMPRESS_PDF = "compress-pdf"
    ROTATE_PAGES = "rotate-pages"
    ADD_WATERMARK = "add-watermark"
    PROTECT_PDF = "protect-pdf"
    UNLOCK_PDF = "unlock-pdf"
    PDF_TO_TEXT = "pdf-to-text"
    PDF_TO_WORD = "pdf-to-word"
    IMAGE_TO_PDF = "image-to-pdf"
    IMAGE_RESIZE = "image-resize"
    IMAGE_COMPRESS = "image-compress"

    @classmethod
    def parse(cls, raw: "str | ToolId") -> "ToolId":
        """Convert an externally supplied tool name into a ToolId.

        Raises:
            ProcessingError: with code TOOL_NOT_FOUND for unknown names.
        """
        if isinstance(raw, cls):
            return raw
        try:
            return cls(str(raw).strip().lower())
        except ValueError:
            raise ProcessingError(
                f"Tool {raw} not implemented",
                code=TOOL_NOT_FOUND,
                recoverable=False,
                context="tool_processing",
            ) from None


@dataclass(frozen=True)
class ToolConfig:
    """Input limits for one tool."""

    allowed_types: frozenset[str]
    max_size: int


DEFAULT_TOOL_CONFIG = ToolConfig(allowed_types=frozenset({"*/*"}), max_size=100 * _MB)


class ToolRegistry:
    """Read-only ToolId -> ToolConfig table with a permissive fallback."""

    def __init__(
        self,
        configs: Mapping[ToolId, ToolConfig],
        default: ToolConfig = DEFAULT_TOOL_CONFIG,
    ) -> None:
        self._configs = MappingProxyType(dict(configs))
        self._default = default

    def get(self, tool_id: ToolId) -> ToolConfig:
        return self._configs.get(tool_id, self._default)

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._configs

    def __len__(self) -> int:
        return len(self._configs)


def build_default_registry(settings: Settings) -> ToolRegistry:
    """Registry with the stock limits for every tool, sized from settings."""
    pdf = ToolConfig(allowed_types=PDF_TYPES, max_size=settings.pdf_max_size_bytes())
    image = ToolConfig(allowed_types=IMAGE_TYPES, max_size=settings.image_max_size_bytes())
    configs = {
        ToolId.MERGE_PDF: pdf,
        ToolId.SPLIT_PDF: pdf,
        ToolId.COMPRESS_PDF: pdf,
        ToolId.ROTATE_PAGES: pdf,
        ToolId.ADD_WATERMARK: pdf,
        ToolId.PROTECT_PDF: pdf,
        ToolId.UNLOCK_PDF: pdf,
        ToolId.PDF_TO_TEXT: pdf,
        ToolId.PDF_TO_WORD: pdf,
        ToolId.IMAGE_TO_PDF: image,
        ToolId.IMAGE_RESIZE: image,
        ToolId.IMAGE_COMPRESS: image,
    }
    default = ToolConfig(
        allowed_types=frozenset({"*/*"}),
        max_size=settings.default_max_size_bytes(),
    )
    return ToolRegistry(configs, default=default)

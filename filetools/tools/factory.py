from collections.abc import Mapping

from filetools.config.settings import Settings
from filetools.image.pillow_adapter import PillowImageCodec
from filetools.pdf.base import BasePdfExtractor
from filetools.pdf.factory import PdfExtractorFactory
from filetools.progress.tracker import ProgressTracker
from filetools.tools.base import BaseTool
from filetools.tools.convert_tools import ImageToPdfTool, PdfToTextTool, PdfToWordTool
from filetools.tools.image_tools import ImageCompressTool, ImageResizeTool
from filetools.tools.pdf_tools import (
    AddWatermarkTool,
    CompressPdfTool,
    MergePdfTool,
    ProtectPdfTool,
    RotatePagesTool,
    SplitPdfTool,
    UnlockPdfTool,
)
from filetools.tools.registry import ToolId


class ToolFactory:
    """Builds the ToolId -> BaseTool dispatch table."""

    @classmethod
    def create(
        cls,
        settings: Settings,
        tracker: ProgressTracker,
        extractor: BasePdfExtractor | None = None,
    ) -> dict[ToolId, BaseTool]:
        extractor = extractor or PdfExtractorFactory.create(settings)
        codec = PillowImageCodec()
        tools: dict[ToolId, BaseTool] = {
            ToolId.MERGE_PDF: MergePdfTool(tracker),
            ToolId.SPLIT_PDF: SplitPdfTool(tracker),
            ToolId.COMPRESS_PDF: CompressPdfTool(tracker),
            ToolId.ROTATE_PAGES: RotatePagesTool(tracker),
            ToolId.ADD_WATERMARK: AddWatermarkTool(tracker),
            ToolId.PROTECT_PDF: ProtectPdfTool(tracker),
            ToolId.UNLOCK_PDF: UnlockPdfTool(tracker),
            ToolId.PDF_TO_TEXT: PdfToTextTool(tracker, extractor),
            ToolId.PDF_TO_WORD: PdfToWordTool(tracker, extractor),
            ToolId.IMAGE_TO_PDF: ImageToPdfTool(tracker, codec),
            ToolId.IMAGE_RESIZE: ImageResizeTool(
                tracker, codec, default_width=settings.image_resize_default_width
            ),
            ToolId.IMAGE_COMPRESS: ImageCompressTool(tracker, codec),
        }
        ensure_exhaustive(tools)
        return tools


def ensure_exhaustive(tools: Mapping[ToolId, object]) -> None:
    """Raise ValueError unless every ToolId has a routine."""
    missing = [tool_id.value for tool_id in ToolId if tool_id not in tools]
    if missing:
        raise ValueError(f"No routine registered for tools: {missing}")

from filetools.image.pillow_adapter import JPEG_QUALITY, PillowImageCodec, scaled_dimensions
from filetools.processor.exceptions import InvalidOptionsError
from filetools.processor.models import ProcessedFile, ProcessingOptions, SourceFile
from filetools.progress.tracker import ProgressTracker
from filetools.tools.base import BaseTool

# options.format -> (Pillow format, extension, MIME type)
OUTPUT_FORMATS: dict[str, tuple[str, str, str]] = {
    "png": ("PNG", "png", "image/png"),
    "jpeg": ("JPEG", "jpg", "image/jpeg"),
    "jpg": ("JPEG", "jpg", "image/jpeg"),
    "webp": ("WEBP", "webp", "image/webp"),
}


def _output_format(requested: str | None, default: str) -> tuple[str, str, str]:
    key = (requested or default).lower()
    if key not in OUTPUT_FORMATS:
        raise InvalidOptionsError(
            f"Unsupported output format '{requested}'. Choose from: {sorted(OUTPUT_FORMATS)}"
        )
    return OUTPUT_FORMATS[key]


class ImageResizeTool(BaseTool):
    """Scales to ``width`` (default from settings), keeping aspect ratio unless ``height`` is set."""

    def __init__(
        self,
        tracker: ProgressTracker,
        codec: PillowImageCodec,
        default_width: int = 800,
    ) -> None:
        super().__init__(tracker)
        self._codec = codec
        self._default_width = default_width

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        for name, value in (("width", options.width), ("height", options.height)):
            if value is not None and value <= 0:
                raise InvalidOptionsError(f"Target {name} must be positive, got {value}")
        pil_format, extension, mime_type = _output_format(options.format, "png")
        self._report(job_id, 10)

        image = self._codec.decode(file.data)
        self._report(job_id, 50)

        target_width = options.width or (None if options.height else self._default_width)
        width, height = scaled_dimensions(image.width, image.height, target_width, options.height)
        resized = self._codec.resize(image, width, height)
        self._report(job_id, 80)

        params: dict[str, object] = {}
        if pil_format != "PNG":
            params["quality"] = JPEG_QUALITY["high"]
        buffer = self._codec.encode(resized, pil_format, **params)
        self._report(job_id, 95)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}_resized.{extension}", mime_type)


class ImageCompressTool(BaseTool):
    """Re-encodes as JPEG (or ``format``) at the quality level's setting."""

    def __init__(self, tracker: ProgressTracker, codec: PillowImageCodec) -> None:
        super().__init__(tracker)
        self._codec = codec

    def run(self, file: SourceFile, options: ProcessingOptions, job_id: str) -> ProcessedFile:
        pil_format, extension, mime_type = _output_format(options.format, "jpeg")
        self._report(job_id, 10)

        image = self._codec.decode(file.data)
        self._report(job_id, 40)

        quality = JPEG_QUALITY.get(options.quality, JPEG_QUALITY["medium"])
        params: dict[str, object] = {"optimize": True}
        if pil_format != "PNG":
            params["quality"] = quality
        self._report(job_id, 70)
        buffer = self._codec.encode(image, pil_format, **params)
        self._report(job_id, 95)
        return ProcessedFile.from_bytes(buffer, f"{file.stem}_compressed.{extension}", mime_type)

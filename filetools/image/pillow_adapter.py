import io

from PIL import Image, ImageOps, UnidentifiedImageError

from filetools.image.exceptions import ImageError
from filetools.processor.exceptions import ErrorKind, classify_exception

JPEG_QUALITY = {"high": 90, "medium": 70, "low": 50}


class PillowImageCodec:
    """Decodes, resizes and encodes images with Pillow."""

    def decode(self, data: bytes) -> Image.Image:
        """Fully decode image bytes, honouring EXIF orientation.

        Raises:
            ImageError: CORRUPTED for unreadable data, OUT_OF_MEMORY for
                decompression bombs.
        """
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
            return ImageOps.exif_transpose(image)
        except Image.DecompressionBombError as exc:
            raise ImageError(f"Image too large to decode: {exc}", kind=ErrorKind.OUT_OF_MEMORY) from exc
        except UnidentifiedImageError as exc:
            raise ImageError(f"Image is corrupted or unrecognized: {exc}") from exc
        except Exception as exc:
            raise ImageError(
                f"Image decode failed: {exc}",
                kind=classify_exception(exc, default=ErrorKind.CORRUPTED),
            ) from exc

    def resize(self, image: Image.Image, width: int, height: int) -> Image.Image:
        try:
            return image.resize((width, height), Image.Resampling.LANCZOS)
        except Exception as exc:
            raise ImageError(
                f"Image resize failed: {exc}",
                kind=classify_exception(exc, default=ErrorKind.UNKNOWN),
            ) from exc

    def encode(self, image: Image.Image, fmt: str, **params: object) -> bytes:
        """Encode image into fmt ("PNG", "JPEG", "PDF", ...)."""
        if fmt in ("JPEG", "PDF"):
            image = to_rgb(image)
        buf = io.BytesIO()
        try:
            image.save(buf, format=fmt, **params)
        except Exception as exc:
            raise ImageError(
                f"Image encode to {fmt} failed: {exc}",
                kind=classify_exception(exc, default=ErrorKind.UNKNOWN),
            ) from exc
        return buf.getvalue()

    def encode_pdf(self, images: list[Image.Image]) -> bytes:
        """Write each image as one page of a single PDF."""
        if not images:
            raise ImageError("No images to convert", kind=ErrorKind.UNSUPPORTED)
        first, *rest = [to_rgb(image) for image in images]
        return self.encode(first, "PDF", save_all=True, append_images=rest, resolution=72.0)


def to_rgb(image: Image.Image) -> Image.Image:
    """Flatten alpha onto white so JPEG/PDF encoders accept the image."""
    if image.mode == "RGB":
        return image
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.split()[-1])
        return background
    return image.convert("RGB")


def scaled_dimensions(
    width: int,
    height: int,
    target_width: int | None,
    target_height: int | None,
) -> tuple[int, int]:
    """Target size for a resize, keeping aspect ratio when only one side is given."""
    if target_width and target_height:
        return target_width, target_height
    if target_height and not target_width:
        return max(1, round(target_height * width / height)), target_height
    if not target_width:
        raise ValueError("target_width or target_height is required")
    return target_width, max(1, round(target_width * height / width))

"""Metadata and content checks run before any tool touches a file."""

import re
from collections.abc import Collection

from filetools.processor.models import SourceFile, ValidationResult

MAX_FILE_NAME_LENGTH = 255
CONTENT_HEADER_LENGTH = 16

_DANGEROUS_NAME = re.compile(r"\.(exe|bat|cmd|scr)$", re.IGNORECASE)
_SIZE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")

_ZIP_SIGNATURE = b"PK\x03\x04"
_SIGNATURES: dict[str, tuple[bytes, ...]] = {
    "application/pdf": (b"%PDF",),
    "image/jpeg": (b"\xff\xd8\xff",),
    "image/png": (b"\x89PNG",),
    "image/gif": (b"GIF87a", b"GIF89a"),
    "image/webp": (b"RIFF",),
    "application/zip": (_ZIP_SIGNATURE,),
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": (
        _ZIP_SIGNATURE,
    ),
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": (
        _ZIP_SIGNATURE,
    ),
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": (
        _ZIP_SIGNATURE,
    ),
}


def validate_file(
    file: SourceFile,
    allowed_types: Collection[str],
    max_size: int,
) -> ValidationResult:
    """Check declared type, size and file name against a tool's limits.

    Every check runs; the result carries all failures in check order.
    """
    errors: list[str] = []
    mime_type = file.mime_type.strip().lower()

    if not is_type_allowed(mime_type, allowed_types):
        errors.append(f"File type {file.mime_type} not supported")

    if file.size > max_size:
        errors.append(f"File size exceeds {format_bytes(max_size)} limit")

    if len(file.name) > MAX_FILE_NAME_LENGTH:
        errors.append("File name too long")

    if _DANGEROUS_NAME.search(file.name):
        errors.append("File type not allowed for security reasons")

    return ValidationResult(is_valid=not errors, errors=tuple(errors))


def validate_file_content(file: SourceFile) -> bool:
    """Compare the file header with the magic number of its declared type.

    Types without a known signature are accepted.
    """
    mime_type = file.mime_type.strip().lower()
    signatures = _SIGNATURES.get(mime_type)
    if signatures is None:
        return True
    header = file.head(CONTENT_HEADER_LENGTH)
    if mime_type == "image/webp":
        return header.startswith(b"RIFF") and header[8:12] == b"WEBP"
    return any(header.startswith(signature) for signature in signatures)


def is_type_allowed(mime_type: str, allowed_types: Collection[str]) -> bool:
    """Exact match, ``*/*``, or a ``type/*`` wildcard."""
    if "*/*" in allowed_types or mime_type in allowed_types:
        return True
    major = mime_type.split("/", 1)[0]
    return f"{major}/*" in allowed_types


def format_bytes(size: int, decimals: int = 2) -> str:
    """Render a byte count as e.g. ``'1.5 MB'``."""
    if size <= 0:
        return "0 Bytes"
    index = 0
    while size >= 1024 ** (index + 1) and index < len(_SIZE_UNITS) - 1:
        index += 1
    value = round(size / 1024**index, max(0, decimals))
    if value == int(value):
        value = int(value)
    return f"{value} {_SIZE_UNITS[index]}"

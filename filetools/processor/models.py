from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field, fields
from enum import Enum
from pathlib import PurePath
from typing import Any

QUALITY_LEVELS = ("high", "medium", "low")


@dataclass(frozen=True)
class SourceFile:
    """An input file as handed over by the caller: name, declared type, bytes."""

    name: str
    mime_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def stem(self) -> str:
        return PurePath(self.name).stem or "document"

    def head(self, length: int = 16) -> bytes:
        return self.data[:length]


@dataclass(frozen=True)
class ProcessingOptions:
    """Per-job options. Each tool reads only the keys it understands."""

    quality: str = "medium"
    compression: bool = True
    format: str | None = None
    pages: tuple[int, ...] = ()
    additional_files: tuple[SourceFile, ...] = ()
    width: int | None = None
    height: int | None = None
    rotation: int = 90
    watermark_text: str = ""
    watermark_opacity: float = 0.5
    font_size: int = 50
    ranges: str = ""
    password: str = ""
    owner_password: str = ""

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> "ProcessingOptions":
        """Build options from a loose mapping, ignoring unknown keys.

        Numeric strings such as ``"90"`` are accepted for integer options.
        An unknown ``quality`` falls back to the default.

        Raises:
            TypeError: if a value has the wrong type.
            ValueError: if a value cannot be converted.
        """
        if not raw:
            return cls()
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in raw.items() if key in known}
        if values.get("quality") not in QUALITY_LEVELS:
            values.pop("quality", None)
        for key, value in list(values.items()):
            values[key] = _COERCERS[key](key, value)
        return cls(**values)


def _as_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise TypeError(f"Option '{key}' must be an integer, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError(f"Option '{key}' must be a whole number, got {value}")
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError(f"Option '{key}' must be an integer, got '{value}'") from None
    raise TypeError(f"Option '{key}' must be an integer, got {type(value).__name__}")


def _as_optional_int(key: str, value: Any) -> int | None:
    return None if value is None else _as_int(key, value)


def _as_float(key: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise TypeError(f"Option '{key}' must be a number, got {type(value).__name__}")
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"Option '{key}' must be a number, got '{value}'") from None


def _as_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in _BOOL_STRINGS:
        return _BOOL_STRINGS[value.strip().lower()]
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"Option '{key}' must be true or false, got {value!r}")


def _as_str(key: str, value: Any) -> str:
    if not isinstance(value, str):
        raise TypeError(f"Option '{key}' must be a string, got {type(value).__name__}")
    return value


def _as_optional_str(key: str, value: Any) -> str | None:
    return None if value is None else _as_str(key, value)


def _as_pages(key: str, value: Any) -> tuple[int, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise TypeError(f"Option '{key}' must be a list of page numbers")
    return tuple(_as_int(key, page) for page in value)


def _as_files(key: str, value: Any) -> tuple[SourceFile, ...]:
    if isinstance(value, (str, bytes)) or not isinstance(value, Iterable):
        raise TypeError(f"Option '{key}' must be a list of files")
    files = tuple(value)
    for item in files:
        if not isinstance(item, SourceFile):
            raise TypeError(
                f"Option '{key}' must contain SourceFile items, got {type(item).__name__}"
            )
    return files


_BOOL_STRINGS = {
    "true": True,
    "yes": True,
    "on": True,
    "1": True,
    "false": False,
    "no": False,
    "off": False,
    "0": False,
}

_COERCERS: dict[str, Callable[[str, Any], Any]] = {
    "quality": _as_str,
    "compression": _as_bool,
    "format": _as_optional_str,
    "pages": _as_pages,
    "additional_files": _as_files,
    "width": _as_optional_int,
    "height": _as_optional_int,
    "rotation": _as_int,
    "watermark_text": _as_str,
    "watermark_opacity": _as_float,
    "font_size": _as_int,
    "ranges": _as_str,
    "password": _as_str,
    "owner_password": _as_str,
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a metadata validation pass."""

    is_valid: bool
    errors: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProcessedFile:
    """A finished job's output, owned by the caller."""

    buffer: bytes = field(repr=False)
    file_name: str
    mime_type: str
    size: int

    @classmethod
    def from_bytes(cls, buffer: bytes, file_name: str, mime_type: str) -> "ProcessedFile":
        return cls(buffer=buffer, file_name=file_name, mime_type=mime_type, size=len(buffer))


class JobState(str, Enum):
    CREATED = "created"
    VALIDATING = "validating"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

import argparse
import mimetypes
import sys
from collections.abc import Sequence
from pathlib import Path

from filetools.config.settings import Settings
from filetools.logging.logger import Log
from filetools.processor.exceptions import ProcessingError
from filetools.processor.models import ProcessedFile, SourceFile
from filetools.processor.processor import build_processor
from filetools.ratelimit.rate_limiter import RateLimiter
from filetools.tools.registry import ToolId
from filetools.worker.job_runner import JobRequest, JobRunner

# Options parsed as integers / integer lists / booleans; the rest stay strings.
_INT_OPTIONS = frozenset({"width", "height", "rotation", "font_size"})
_FLOAT_OPTIONS = frozenset({"watermark_opacity"})
_BOOL_OPTIONS = frozenset({"compression"})
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def load_source_file(path: Path) -> SourceFile:
    """Read a file from disk, guessing its MIME type from the extension."""
    mime_type, _ = mimetypes.guess_type(path.name)
    return SourceFile(
        name=path.name,
        mime_type=mime_type or "application/octet-stream",
        data=path.read_bytes(),
    )


def parse_option(raw: str) -> tuple[str, object]:
    """Parse ``key=value`` into a typed option pair."""
    key, sep, value = raw.partition("=")
    key = key.strip().replace("-", "_")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"Option must be KEY=VALUE, got '{raw}'")
    value = value.strip()
    try:
        if key in _INT_OPTIONS:
            return key, int(value)
        if key in _FLOAT_OPTIONS:
            return key, float(value)
        if key == "pages":
            return key, tuple(int(p) for p in value.split(",") if p.strip())
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid value for option '{key}': '{value}'") from None
    if key in _BOOL_OPTIONS:
        return key, value.lower() in _TRUE_VALUES
    return key, value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="filetools",
        description="Run a single file-processing tool on a local file.",
    )
    parser.add_argument("tool", choices=[tool.value for tool in ToolId])
    parser.add_argument("input", type=Path)
    parser.add_argument(
        "--extra",
        type=Path,
        action="append",
        default=[],
        help="Additional input file (merge-pdf, image-to-pdf). Repeatable.",
    )
    parser.add_argument(
        "--option",
        type=parse_option,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Tool option, e.g. quality=low or pages=1,3. Repeatable.",
    )
    parser.add_argument("--output-dir", type=Path, default=Path("."))
    parser.add_argument("--identifier", default="cli", help="Rate limit identifier.")
    return parser


def write_result(result: ProcessedFile, output_dir: Path) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / result.file_name
    path.write_bytes(result.buffer)
    return path


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point: parse args -> build dependencies -> run one job."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)

    try:
        primary = load_source_file(args.input)
        extras = tuple(load_source_file(path) for path in args.extra)
    except OSError as exc:
        Log.error(f"Cannot read input: {exc}")
        return 2

    options: dict[str, object] = dict(args.option)
    if extras:
        options["additional_files"] = extras

    processor = build_processor(settings)
    rate_limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    runner = JobRunner(processor, rate_limiter)
    request = JobRequest(
        identifier=args.identifier,
        file=primary,
        tool_id=args.tool,
        options=options,
        on_progress=lambda progress: Log.debug(f"{args.tool}: {progress:.0f}%"),
    )

    try:
        result = runner.run(request)
    except ProcessingError as exc:
        hint = "retry or pick another file" if exc.recoverable else "not retryable"
        Log.error(f"{exc.code}: {exc.message} ({hint})")
        return 1

    try:
        path = write_result(result, args.output_dir)
    except OSError as exc:
        Log.error(f"Cannot write output: {exc}")
        return 2
    Log.info(f"Wrote {path} ({result.size} bytes, {result.mime_type})")
    return 0


if __name__ == "__main__":
    sys.exit(main())

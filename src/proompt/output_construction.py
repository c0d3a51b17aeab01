from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from proompt.config import BLOCK_DELIMITER
from proompt.exceptions import OversizedFileError, UndecodableFileError
from proompt.file_manipulation import collect_metadata, display_path, read_text, truncate_lines
from proompt.logging import logger
from proompt.sizes import format_size, parse_size

if TYPE_CHECKING:
    from proompt.settings import Settings


@dataclass(frozen=True)
class Rendered:
    """The text block to append to the output for one file."""

    text: str


@dataclass(frozen=True)
class Skipped:
    """A file left out of the output, with the warning to report."""

    error: OversizedFileError | UndecodableFileError


RenderDecision = Rendered | Skipped


def render_block(header: str, content: str) -> str:
    """Assemble the four-line block: header, delimiter, content, delimiter.

    Args:
        header (str): the header line (path, optionally with metadata)
        content (str): the file content, possibly truncated

    Returns:
        str: the block, newline-terminated
    """
    return f"{header}\n{BLOCK_DELIMITER}\n{content}\n{BLOCK_DELIMITER}\n"


def build_header(path: Path, display: str) -> str:
    """Build the metadata header for a file.

    Falls back to the bare path when the metadata cannot be gathered.

    Args:
        path (Path): the file to inspect
        display (str): the path as shown in the output

    Returns:
        str: ``"{path} ({n} lines, {size}, modified: {date})"`` or `display`
    """
    try:
        meta = collect_metadata(path)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logger.debug("metadata_unavailable", path=display, error=str(e))
        return display
    return f"{display} ({meta.line_count} lines, {meta.formatted_size}, modified: {meta.modified})"


def render_file(path: str | Path, settings: Settings) -> RenderDecision:
    """Decide how a single file appears in the output.

    Steps, in order: size ceiling (checked before reading), strict UTF-8 read,
    line truncation, header, block assembly.

    Args:
        path (str | Path): the file, as it should be displayed in the header
        settings (Settings): the run configuration

    Raises:
        InvalidSizeFormatError: if ``max_file_size`` cannot be parsed
        OSError: for read failures other than undecodable content

    Returns:
        RenderDecision: the block to write, or the reason the file is skipped
    """
    display = display_path(path)
    file = Path(path)

    if settings.max_file_size is not None:
        limit = parse_size(settings.max_file_size)
        size = file.stat().st_size
        if size > limit:
            return Skipped(OversizedFileError(path=display, actual=format_size(size), limit=settings.max_file_size))

    try:
        content = read_text(file)
    except UnicodeDecodeError:
        return Skipped(UndecodableFileError(path=display))

    body = truncate_lines(content, settings.max_lines)
    header = build_header(file, display) if settings.add_metadata else display
    return Rendered(render_block(header, body))

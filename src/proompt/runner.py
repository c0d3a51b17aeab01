from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING

from proompt.config import WalkOptions
from proompt.exceptions import IOFailureError, MissingPathError, ProomptError
from proompt.file_manipulation import file_extension, should_include
from proompt.logging import emit_diagnostic, logger
from proompt.output_construction import Rendered, Skipped, render_file
from proompt.sizes import parse_size
from proompt.walker import walk

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import TextIO

    from proompt.settings import Settings


@contextmanager
def open_sink(output: Path | None) -> Iterator[TextIO]:
    """Open the output stream: a created (truncated) file, or stdout.

    Args:
        output (Path | None): the output file; None selects stdout

    Yields:
        TextIO: the stream to append render blocks to
    """
    if output is None:
        yield sys.stdout
        sys.stdout.flush()
        return
    with output.open("w", encoding="utf-8", newline="") as fh:
        yield fh


def process_file(path: str, settings: Settings, sink: TextIO) -> None:
    """Render one file and append it to the sink, or report why it was skipped."""
    match render_file(path, settings):
        case Rendered(text=text):
            sink.write(text)
            logger.debug("file_rendered", path=path, chars=len(text))
        case Skipped(error=error):
            emit_diagnostic(error)
            logger.info("file_skipped", path=path, kind=str(error.kind))


def process_path(path: str, settings: Settings, sink: TextIO) -> None:
    """Render an input path: a file directly, a directory through a filtered walk.

    Explicitly named files bypass the extension, ignore and hidden rules.
    The path is assumed to exist.

    Args:
        path (str): the input path, as given on the command line
        settings (Settings): the run configuration
        sink (TextIO): the output stream

    Raises:
        OSError: if a selected file cannot be read or the sink cannot be written
    """
    target = Path(path)
    if target.is_file():
        process_file(path, settings, sink)
        return
    if not target.is_dir():
        logger.info("path_skipped", path=path, reason="neither file nor directory")
        return

    for entry in walk(path, WalkOptions.from_settings(settings), on_error=emit_diagnostic):
        if not entry.is_file:
            continue
        if should_include(entry.rel, file_extension(entry.rel), settings):
            process_file(entry.path, settings, sink)
        else:
            logger.debug("entry_filtered", path=entry.path)


def run(settings: Settings) -> int:
    """Process every input path in order against one shared output sink.

    Stops at the first missing path, invalid size limit or I/O failure.

    Args:
        settings (Settings): the run configuration

    Returns:
        int: the process exit code, 0 on success and 1 on a fatal error
    """
    try:
        if settings.max_file_size is not None:
            parse_size(settings.max_file_size)
        with open_sink(settings.output) as sink:
            for path in settings.paths:
                if not Path(path).exists():
                    raise MissingPathError(path=path)
                process_path(path, settings, sink)
    except ProomptError as e:
        error = e
    except OSError as e:
        error = IOFailureError.from_os_error(e)
    else:
        logger.info("run_finished", paths=len(settings.paths))
        return 0

    emit_diagnostic(error)
    logger.info("run_aborted", kind=str(error.kind))
    return 1

# tedit/core/Buffer.py
"""tedit.core.Buffer
====================
The in-memory document: an ordered list of ``Line`` objects, the identity of
the file it belongs to and a modified ("dirty") flag.

The buffer exposes line-level and multi-line edit operations addressed by a
``Location`` (line index, grapheme index), loading and saving, and a ring-scan
substring search used by the view's find prompt.

Index conventions:
    - ``lines[i]`` is the i-th line of the document (0-based).
    - A ``line_index`` equal to the line count means "a new line appended here".
    - Any other out-of-range index makes an edit a silent no-op.

File I/O failures are reported as ``BufferIOError``; nothing else raises.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional, Union

import chardet

from tedit.core.Line import Line
from tedit.core.Location import Location
from tedit.utils.logging_config import logger


PathLike = Union[str, "os.PathLike[str]"]

# Bytes fed to chardet when guessing the encoding of a file.
ENCODING_SAMPLE_SIZE = 1024 * 20
# Below this chardet confidence the guess is not trusted over UTF-8.
ENCODING_MIN_CONFIDENCE = 0.75


class BufferIOError(OSError):
    """Raised when a document cannot be read from or written to disk.

    Attributes:
        path (Optional[str]): The path that failed.
    """

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class FileInfo:
    """Identity of the file backing a buffer. ``path is None`` means unsaved."""

    def __init__(self, path: Optional[PathLike] = None) -> None:
        self.path: Optional[Path] = Path(path) if path is not None else None

    def has_path(self) -> bool:
        return self.path is not None

    def get_path(self) -> Optional[Path]:
        return self.path

    def __str__(self) -> str:
        if self.path is None:
            return "[No Name]"
        return self.path.name

    def __repr__(self) -> str:
        return f"FileInfo({str(self.path) if self.path else None!r})"


def _detect_encoding(raw: bytes) -> str:
    """Guesses the text encoding of ``raw``; falls back to UTF-8."""
    if not raw:
        return "utf-8"
    result = chardet.detect(raw[:ENCODING_SAMPLE_SIZE])
    encoding = result.get("encoding")
    confidence = result.get("confidence") or 0.0
    logging.debug(
        "chardet guessed encoding %r with confidence %.2f", encoding, confidence
    )
    if not encoding or confidence < ENCODING_MIN_CONFIDENCE:
        return "utf-8"
    # chardet reports pure ASCII files as 'ascii'; UTF-8 is a superset.
    if encoding.lower() == "ascii":
        return "utf-8"
    return encoding


def _split_lines(text: str) -> list[str]:
    """Splits ``text`` on ``\\n`` only, dropping one ``\\r`` before each break.

    Form feeds, vertical tabs and Unicode line separators stay inside their
    line. A trailing newline does not start an extra empty line.
    """
    rows = text.split("\n")
    last = rows.pop()
    lines = [row[:-1] if row.endswith("\r") else row for row in rows]
    if last:
        lines.append(last)
    return lines


## ==================== Buffer Class ====================
class Buffer:
    """Class Buffer
    =================
    Ordered lines of a document plus its file identity and dirty flag.

    Attributes:
        lines (list[Line]): The document, one ``Line`` per row.
        file_info (FileInfo): Path the document is bound to (may be unset).
        dirty (bool): True when the buffer has unsaved modifications.
        encoding (str): Encoding used when the buffer is written back.
    """

    def __init__(
        self,
        lines: Optional[list[Line]] = None,
        file_info: Optional[FileInfo] = None,
        encoding: str = "utf-8",
    ) -> None:
        self.lines: list[Line] = lines if lines is not None else []
        self.file_info = file_info or FileInfo()
        self.dirty = False
        self.encoding = encoding

    @classmethod
    def from_text(cls, text: str) -> "Buffer":
        """Builds an unbound buffer from a string, one line per text line."""
        return cls([Line(row) for row in _split_lines(text)])

    # ---------------- Loading ------------------------

    @classmethod
    def load(cls, path: PathLike) -> "Buffer":
        """Reads a whole file into a new buffer.

        The encoding is detected with chardet (falling back to UTF-8) and kept
        so that ``save()`` writes the file back the way it was read.

        Args:
            path: File to read.

        Returns:
            Buffer: A clean (not dirty) buffer bound to ``path``.

        Raises:
            BufferIOError: The file does not exist, is not readable, or cannot
                be decoded.
        """
        file_name = os.fspath(path)
        try:
            with open(file_name, "rb") as f_binary:
                raw = f_binary.read()
            encoding = _detect_encoding(raw)
            content = raw.decode(encoding)
        except (OSError, UnicodeDecodeError, LookupError) as e:
            logger.error("Failed to read file '%s': %s", file_name, e)
            raise BufferIOError(
                f"Could not read '{file_name}': {e}", path=file_name
            ) from e

        lines = [Line(row) for row in _split_lines(content)]
        buffer = cls(lines, FileInfo(file_name), encoding=encoding)
        logger.info(
            "Loaded '%s' (encoding: %s, %d lines)", file_name, encoding, len(lines)
        )
        return buffer

    # ---------------- Inspection ------------------------

    def is_empty(self) -> bool:
        return not self.lines

    def line_count(self) -> int:
        return len(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def get_line(self, index: int) -> Optional[Line]:
        if 0 <= index < len(self.lines):
            return self.lines[index]
        return None

    def grapheme_count(self, index: int) -> int:
        """Grapheme count of line ``index``; 0 for the virtual past-end line."""
        line = self.get_line(index)
        return line.grapheme_count() if line is not None else 0

    # ---------------- Editing ------------------------

    def insert_char(self, character: str, at: Location) -> None:
        """Inserts ``character`` at ``at``.

        On the virtual line just past the end a new one-character line is
        appended; past that the call is ignored.
        """
        if at.line_index > len(self.lines):
            return

        if at.line_index == len(self.lines):
            self.lines.append(Line(character))
        else:
            self.lines[at.line_index].insert_char(character, at.grapheme_index)
        self.dirty = True

    def delete(self, at: Location) -> None:
        """Deletes the cluster at ``at``, joining lines at the end of a line.

        At or past the end of a line that has a successor, the next line is
        appended to this one and removed. At the end of the last line, or on an
        out-of-range line, nothing happens.
        """
        if at.line_index >= len(self.lines):
            return

        line = self.lines[at.line_index]
        if at.grapheme_index >= line.grapheme_count():
            if at.line_index < len(self.lines) - 1:
                next_line = self.lines.pop(at.line_index + 1)
                line.append(next_line)
                self.dirty = True
        else:
            line.delete(at.grapheme_index)
            self.dirty = True

    def insert_newline(self, at: Location) -> None:
        """Splits the line at ``at`` and inserts the tail as the next line."""
        if at.line_index == len(self.lines):
            self.lines.append(Line())
            self.dirty = True
        elif at.line_index < len(self.lines):
            line = self.lines[at.line_index]
            # Line.split() requires an in-range index.
            tail = line.split(min(at.grapheme_index, line.grapheme_count()))
            self.lines.insert(at.line_index + 1, tail)
            self.dirty = True

    def delete_line(self, index: int) -> None:
        """Removes the whole line at ``index`` if it exists."""
        if 0 <= index < len(self.lines):
            del self.lines[index]
            self.dirty = True

    # ---------------- Saving ------------------------

    def _write(self, file_name: str) -> None:
        logging.debug("Buffer._write: writing %d lines to '%s'", len(self.lines), file_name)
        try:
            with open(file_name, "w", encoding=self.encoding, newline="\n") as f:
                for line in self.lines:
                    f.write(f"{line}\n")
        except (OSError, UnicodeEncodeError, LookupError) as e:
            logger.error("Failed to write file '%s': %s", file_name, e, exc_info=True)
            raise BufferIOError(
                f"Could not write '{file_name}': {e}", path=file_name
            ) from e

    def save(self) -> None:
        """Writes the buffer to its bound path and clears the dirty flag.

        Does nothing when the buffer has no path; use ``save_as`` for that.

        Raises:
            BufferIOError: The file could not be written.
        """
        path = self.file_info.get_path()
        if path is None:
            logging.debug("Buffer.save: no file bound, nothing written")
            return
        self._write(os.fspath(path))
        self.dirty = False
        logger.info("Saved '%s'", path)

    def save_as(self, path: PathLike) -> None:
        """Writes the buffer to ``path`` and binds the buffer to it.

        The binding only changes once the write succeeded.

        Raises:
            BufferIOError: The file could not be written.
        """
        file_name = os.fspath(path)
        self._write(file_name)
        self.file_info = FileInfo(file_name)
        self.dirty = False
        logger.info("Saved buffer as '%s'", file_name)

    # ---------------- Search ------------------------

    def _ring(self, start: int, step: int) -> Iterator[int]:
        """Yields ``len(lines) + 1`` line indices walking a ring from ``start``.

        The first line is yielded twice (first and last), every other line once.
        """
        count = len(self.lines)
        for offset in range(count + 1):
            yield (start + step * offset) % count

    def search_forward(self, start: Location, query: str) -> Optional[Location]:
        """Finds the next occurrence of ``query`` at or after ``start``.

        The document is scanned as a ring: the line of ``start`` first (only
        from its grapheme index on), then every following line, wrapping to
        the top, and finally the line of ``start`` once more in full. At most
        ``line_count + 1`` lines are visited.

        Returns:
            Optional[Location]: The match, or ``None`` if ``query`` is empty or
            occurs nowhere.
        """
        if not query or not self.lines:
            return None

        first_line, first_from = start.line_index, start.grapheme_index
        if first_line >= len(self.lines):
            # From the virtual past-end line the scan wraps straight to the top.
            first_line, first_from = 0, 0

        is_first = True
        for line_index in self._ring(first_line, 1):
            from_index = first_from if is_first else 0
            is_first = False

            grapheme_index = self.lines[line_index].search_forward(query, from_index)
            if grapheme_index is not None:
                return Location(line_index, grapheme_index)
        logging.debug("search_forward: %r not found", query)
        return None

    def search_backward(self, start: Location, query: str) -> Optional[Location]:
        """Finds the previous occurrence of ``query`` before ``start``.

        Mirror image of ``search_forward``: the line of ``start`` is searched
        only before its grapheme index, then the preceding lines are searched
        whole, wrapping to the bottom.
        """
        if not query or not self.lines:
            return None

        first_line, first_from = start.line_index, start.grapheme_index
        if first_line >= len(self.lines):
            first_line = len(self.lines) - 1
            first_from = self.lines[first_line].grapheme_count()

        is_first = True
        for line_index in self._ring(first_line, -1):
            line = self.lines[line_index]
            from_index = first_from if is_first else line.grapheme_count()
            is_first = False

            grapheme_index = line.search_backward(query, from_index)
            if grapheme_index is not None:
                return Location(line_index, grapheme_index)
        logging.debug("search_backward: %r not found", query)
        return None

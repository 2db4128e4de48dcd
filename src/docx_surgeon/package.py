"""
Access to the members of a .docx archive.

The archive is only a container for the document body: this module unpacks
it into a scratch directory, reads named members as unicode strings and
writes them back, keeping archive handling apart from markup manipulation.
"""

import io
import logging
import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Any, BinaryIO

from .errors import PackageError

logger = logging.getLogger(__name__)

CONTENT_TYPES = "[Content_Types].xml"


def _unpack(source: Path | BinaryIO) -> Path:
    """Unpack a ZIP archive into a fresh scratch directory and return it."""
    if not zipfile.is_zipfile(source):
        raise PackageError("Source must be a valid .docx (ZIP) file")
    if hasattr(source, "seek"):
        source.seek(0)

    scratch = Path(tempfile.mkdtemp(prefix="docx_surgeon_"))
    try:
        with zipfile.ZipFile(source, "r") as archive:
            archive.extractall(scratch)
    except (zipfile.BadZipFile, OSError) as e:
        shutil.rmtree(scratch, ignore_errors=True)
        raise PackageError(f"Failed to extract .docx file: {e}") from e
    return scratch


class DocxPackage:
    """An unpacked .docx archive whose members are read and written as text.

    Instances own a scratch directory that is removed by ``close()``, on
    leaving a ``with`` block, or when the object is collected.

    Example:
        >>> with DocxPackage.open("letter.docx") as pkg:
        ...     body = pkg.read_part("word/document.xml")
        ...     pkg.write_part("word/document.xml", body.replace("foo", "bar"))
        ...     pkg.save("letter-edited.docx")

    Attributes:
        temp_dir: Scratch directory holding the unpacked members
        source_path: File the package was opened from; None for streams
            and bytes
    """

    def __init__(self, temp_dir: Path, source_path: Path | None = None) -> None:
        self.temp_dir = temp_dir
        self.source_path = source_path
        self._closed = False

    @classmethod
    def open(cls, source: str | Path | BinaryIO) -> "DocxPackage":
        """Unpack a .docx given by path or as a binary stream.

        Raises:
            PackageError: If the file does not exist or is not a ZIP archive
        """
        if isinstance(source, str | Path):
            path = Path(source)
            if not path.exists():
                raise PackageError(f"Document not found: {path}")
            package = cls(_unpack(path), path)
        else:
            package = cls(_unpack(source))

        logger.debug(
            "Unpacked %s into %s", package.source_path or "<stream>", package.temp_dir
        )
        return package

    @classmethod
    def from_bytes(cls, data: bytes) -> "DocxPackage":
        return cls.open(io.BytesIO(data))

    def _member(self, part_name: str) -> Path:
        path = (self.temp_dir / part_name).resolve()
        if not path.is_relative_to(self.temp_dir.resolve()):
            raise PackageError(f"Member {part_name} is outside the package")
        return path

    def part_exists(self, part_name: str) -> bool:
        return self._member(part_name).is_file()

    def read_part(self, part_name: str) -> str:
        """Read a member and decode it as UTF-8.

        Args:
            part_name: Member name inside the archive, e.g. ``word/document.xml``

        Raises:
            PackageError: If the member is missing or cannot be decoded
        """
        path = self._member(part_name)
        if not path.is_file():
            raise PackageError(f"No contents for member {part_name}")
        try:
            return path.read_bytes().decode("utf-8")
        except UnicodeDecodeError as e:
            raise PackageError(f"Member {part_name} is not valid UTF-8: {e}") from e

    def write_part(self, part_name: str, contents: str) -> None:
        """Store ``contents`` as the member, UTF-8 encoded, creating it if needed."""
        path = self._member(part_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(contents.encode("utf-8"))
        logger.debug("Wrote %d characters to %s", len(contents), part_name)

    def _pack(self, target: Path | BinaryIO) -> None:
        members = sorted(
            (f for f in self.temp_dir.rglob("*") if f.is_file()),
            key=lambda f: f.name != CONTENT_TYPES,
        )
        # content types first, as Word writes it
        with zipfile.ZipFile(target, "w", zipfile.ZIP_DEFLATED) as archive:
            for member in members:
                archive.write(member, member.relative_to(self.temp_dir))

    def save(self, output_path: str | Path) -> None:
        """Pack the members into a .docx at ``output_path``.

        Raises:
            PackageError: If the archive cannot be written
        """
        output_path = Path(output_path)
        try:
            self._pack(output_path)
        except OSError as e:
            raise PackageError(f"Error writing zip archive to {output_path}: {e}") from e
        logger.debug("Saved package to %s", output_path)

    def save_to_bytes(self) -> bytes:
        """Pack the members and return the .docx contents."""
        buffer = io.BytesIO()
        self._pack(buffer)
        return buffer.getvalue()

    def close(self) -> None:
        """Remove the scratch directory; later calls do nothing."""
        if self._closed:
            return
        self._closed = True
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def __enter__(self) -> "DocxPackage":
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __del__(self) -> None:
        self.close()

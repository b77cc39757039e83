"""
Source tree packaging for deployment.

Creates an in-memory ZIP archive of a source directory, with paths relative
to the directory root and maximum compression.
"""

import asyncio
import io
import logging
import os
import zipfile
from pathlib import Path
from typing import Optional, Union

from npl_deploy.core.exceptions import (
    ArchiveError,
    EmptySourcePathError,
    SourcePathNotDirectoryError,
    SourcePathNotFoundError,
    SourcePathNotReadableError,
    SourcePathOutsideProjectError,
)

log = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


class Archive:
    """In-memory ZIP archive owned by a single deployment run.

    Use as a context manager; the buffer is released on exit and the
    archive cannot be read afterwards.
    """

    def __init__(self, data: bytes, file_count: int):
        self._data: Optional[bytes] = data
        self.file_count = file_count

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise ArchiveError("Archive has been released")
        return self._data

    @property
    def size(self) -> int:
        return len(self._data) if self._data is not None else 0

    @property
    def closed(self) -> bool:
        return self._data is None

    def close(self) -> None:
        self._data = None

    def __enter__(self) -> "Archive":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        state = "released" if self.closed else f"{self.size} bytes"
        return f"Archive(files={self.file_count}, {state})"


class ArchiveBuilder:
    """Packages a source directory into an Archive."""

    compression = zipfile.ZIP_DEFLATED
    compresslevel = 9

    def validate_source(
        self, source_path: PathLike, project_path: Optional[PathLike] = None
    ) -> Path:
        """
        Check the source path, in order, raising a distinct error per problem.

        Args:
            source_path: Directory to package
            project_path: Optional directory the source must live under

        Returns:
            Resolved source directory

        Raises:
            ArchiveError: One of its path-specific subclasses
        """
        if source_path is None or not str(source_path).strip():
            raise EmptySourcePathError()

        source = Path(source_path).expanduser()
        if not source.exists():
            raise SourcePathNotFoundError(source_path)

        if not source.is_dir():
            raise SourcePathNotDirectoryError(source_path)

        if not os.access(source, os.R_OK):
            raise SourcePathNotReadableError(source_path)

        resolved = source.resolve()
        if project_path:
            project = Path(project_path).expanduser().resolve()
            if not resolved.is_relative_to(project):
                raise SourcePathOutsideProjectError(source_path, project_path)

        return resolved

    async def build(
        self, source_path: PathLike, project_path: Optional[PathLike] = None
    ) -> Archive:
        """
        Create the archive without blocking the event loop.

        Either returns a complete archive or raises before producing output.
        """
        source = self.validate_source(source_path, project_path)
        log.debug(f"Creating archive of {source}")
        return await asyncio.to_thread(self._zip_directory, source)

    def _zip_directory(self, source: Path) -> Archive:
        buffer = io.BytesIO()
        file_count = 0

        try:
            with zipfile.ZipFile(
                buffer,
                mode="w",
                compression=self.compression,
                compresslevel=self.compresslevel,
            ) as zf:
                for item in sorted(source.rglob("*")):
                    if not item.is_file():
                        continue

                    arcname = item.relative_to(source).as_posix()
                    if not item.resolve().is_relative_to(source):
                        log.warning(f"Skipping {arcname}: links outside {source}")
                        continue

                    try:
                        zf.write(item, arcname=arcname)
                    except FileNotFoundError as e:
                        log.warning(f"Warning while zipping: {e}")
                        continue

                    file_count += 1
                    log.debug(f"   Archived: {arcname}")
        except (OSError, zipfile.BadZipFile) as e:
            raise ArchiveError(f"Failed to create archive of {source}: {e}") from e

        data = buffer.getvalue()
        buffer.close()

        log.info(f"Archive created: {file_count} file(s), {len(data) / 1024:.1f} KB")
        return Archive(data, file_count)

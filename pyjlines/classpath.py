"""
Class path made of directories and jar/zip archives.
"""

import io
import logging
import os
import zipfile
from pathlib import Path
from typing import BinaryIO, Optional

from .runtime import JavaClass

logger = logging.getLogger(__name__)


class ClassPath:
    """Resource loader backed by a list of class path entries."""

    def __init__(self):
        self.entries: list[Path | zipfile.ZipFile] = []
        self._zip_files: list[zipfile.ZipFile] = []

    @classmethod
    def from_string(cls, classpath: str) -> "ClassPath":
        """Build from an ``os.pathsep`` separated list of entries."""
        cp = cls()
        for entry in classpath.split(os.pathsep):
            if entry:
                cp.add_path(entry)
        return cp

    def add_path(self, path: str | Path):
        """Add a path to the classpath (directory or jar/zip)."""
        path = Path(path)
        if path.suffix in (".jar", ".zip"):
            zf = zipfile.ZipFile(path, "r")
            self._zip_files.append(zf)
            self.entries.append(zf)
        elif path.is_dir():
            self.entries.append(path)
        else:
            raise ValueError(f"Invalid classpath entry: {path}")

    def get_resource_as_stream(self, name: str) -> Optional[BinaryIO]:
        """Open the first resource called ``name`` (e.g. 'java/lang/String.class')."""
        for entry in self.entries:
            if isinstance(entry, zipfile.ZipFile):
                try:
                    # Archive members are copied out so the stream outlives close()
                    return io.BytesIO(entry.read(name))
                except KeyError:
                    continue
            elif isinstance(entry, Path):
                path = entry / name
                if path.is_file():
                    return open(path, "rb")
        logger.debug("resource '%s' not found", name)
        return None

    def load_class(self, class_name: str) -> JavaClass:
        """Bind a binary class name (e.g. 'com.example.Foo') to this class path."""
        return JavaClass(class_name, self)

    def close(self):
        """Close all zip files."""
        for zf in self._zip_files:
            zf.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

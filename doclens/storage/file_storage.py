from pathlib import Path, PurePosixPath

DEFAULT_FILE_NAME = "document"


def safe_file_name(name: str, fallback: str = DEFAULT_FILE_NAME) -> str:
    """Reduce a client-supplied name to its last path segment.

    Both ``/`` and ``\\`` count as separators; a name with nothing usable left
    becomes ``fallback``.
    """
    candidate = PurePosixPath(name.replace("\\", "/")).name.strip()
    if candidate in ("", ".", ".."):
        return fallback
    return candidate


class LocalFileStorage:
    """Reads, writes and removes uploaded files under a root directory.

    Relative paths resolve against the root; absolute paths are used as is.
    """

    def __init__(self, root: Path) -> None:
        self._root = root

    @property
    def root(self) -> Path:
        return self._root

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self._root / candidate

    def write(self, file_name: str, content: bytes) -> str:
        """Store ``content`` under ``file_name`` and return the absolute path."""
        target = self.resolve(file_name)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(content)
        return str(target.resolve())

    def read(self, path: str) -> bytes:
        """Read file bytes.

        Raises:
            FileNotFoundError: if the file does not exist at resolved path.
        """
        resolved = self.resolve(path)
        if not resolved.is_file():
            raise FileNotFoundError(f"File not found: {resolved}")
        return resolved.read_bytes()

    def delete(self, path: str) -> bool:
        """Remove the file. Returns False if it was already gone."""
        resolved = self.resolve(path)
        try:
            resolved.unlink()
        except FileNotFoundError:
            return False
        return True

"""Repository persistence for contract-verification library."""

import shutil
from pathlib import Path
from typing import Optional, Union

from .exceptions import PersistenceError
from .paths import get_default_repository_dir, match_dir
from .types import MatchQuality, StorageTarget


class RepositoryStore:
    """Writes verified artifacts into a directory tree."""

    def __init__(self, repository_path: Optional[Union[Path, str]] = None):
        """
        Initialize the store.

        Args:
            repository_path: Repository root (defaults to get_default_repository_dir())
        """
        if repository_path is None:
            repository_path = get_default_repository_dir()
        self.root = Path(repository_path)

    def target_path(self, target: StorageTarget) -> Path:
        """Get the file path a storage target routes to."""
        directory = match_dir(self.root, target.match_quality, target.chain, target.address)
        if target.source:
            directory = directory / "sources"
        return directory / target.file_name

    def _write(self, path: Path, content: Union[str, bytes]) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content)
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e

    def save(self, target: StorageTarget, content: Union[str, bytes]) -> Path:
        """
        Save a file under its chain/address location.

        Raises:
            PersistenceError: If the write fails
        """
        path = self.target_path(target)
        self._write(path, content)
        return path

    def save_at(self, relative_path: str, content: Union[str, bytes]) -> Path:
        """
        Save a file at a content-addressed path such as /ipfs/<hash>.

        Raises:
            PersistenceError: If the write fails
        """
        path = self.root / relative_path.lstrip("/")
        self._write(path, content)
        return path

    def delete_partial(self, chain: str, address: str) -> None:
        """
        Remove a previously stored partial match for chain/address.

        Raises:
            PersistenceError: If the directory exists but cannot be removed
        """
        directory = match_dir(self.root, MatchQuality.PARTIAL, chain, address)
        try:
            shutil.rmtree(directory)
        except FileNotFoundError:
            return
        except OSError as e:
            raise PersistenceError(f"Failed to delete {directory}: {e}") from e

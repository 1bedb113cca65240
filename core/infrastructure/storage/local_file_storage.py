"""Product files on the local filesystem."""
import logging
from pathlib import Path

from core.application.interfaces import IFileStorage
from core.domain.exceptions import ExternalDependencyError


logger = logging.getLogger(__name__)


class LocalFileStorage(IFileStorage):
    """Resolves file references relative to a storage root."""

    def __init__(self, root: str):
        self.root = Path(root).resolve()

    async def resolve(self, file_ref: str) -> str:
        path = (self.root / file_ref).resolve()
        if self.root not in path.parents:
            logger.error(f"File reference escapes storage root: {file_ref}")
            raise ExternalDependencyError("Invalid file reference", dependency="storage")
        if not path.is_file():
            logger.error(f"Product file missing: {path}")
            raise ExternalDependencyError("Product file is unavailable", dependency="storage")
        return str(path)

import shutil
from pathlib import Path, PurePosixPath, PureWindowsPath

import structlog
from fastapi import UploadFile

from . import crud

logger = structlog.get_logger()


class UploadStore:
    """Directory of uploaded photos, served back by filename."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def ensure(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    def path_for(self, filename: str) -> Path:
        return self.directory / filename

    def stored_name(self, original: str) -> str:
        # drop any directory part the client sent along with the name
        name = PurePosixPath(PureWindowsPath(original).name).name
        return f"{crud.now_ms()}-{name}"

    def save(self, upload: UploadFile) -> str:
        """Write the upload to disk and return the stored filename.

        Superseded photos are never removed.
        """
        filename = self.stored_name(upload.filename)
        with self.path_for(filename).open("wb") as fh:
            shutil.copyfileobj(upload.file, fh)
        logger.info("Stored upload", filename=filename)
        return filename

import logging
import os
import shutil

from app.core.config import UPLOAD_DIR

logger = logging.getLogger(__name__)

# Public URL prefix the blob root is mounted under
PUBLIC_PREFIX = "/uploads"


class BlobStore:
    """Per-board blob namespace on the local filesystem."""

    def __init__(self, root: str):
        self.root = root

    def board_dir(self, board_id: str) -> str:
        return os.path.join(self.root, board_id)

    def write(self, board_id: str, filename: str, data: bytes) -> str:
        name = os.path.basename(filename)
        if not name or name in (".", ".."):
            raise ValueError(f"Unusable blob filename: {filename!r}")
        directory = self.board_dir(board_id)
        os.makedirs(directory, exist_ok=True)
        with open(os.path.join(directory, name), "wb") as buffer:
            buffer.write(data)
        return f"{PUBLIC_PREFIX}/{board_id}/{name}"

    def remove(self, board_id: str, filename: str) -> bool:
        path = os.path.join(self.board_dir(board_id), os.path.basename(filename))
        if not os.path.isfile(path):
            return False
        os.remove(path)
        return True

    def purge(self, board_id: str) -> bool:
        directory = self.board_dir(board_id)
        if not os.path.isdir(directory):
            return False
        shutil.rmtree(directory)
        logger.info(f"Purged blobs for board {board_id}")
        return True


def get_blob_store() -> BlobStore:
    return BlobStore(UPLOAD_DIR)

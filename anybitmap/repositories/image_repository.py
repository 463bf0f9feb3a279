from pathlib import Path
from typing import BinaryIO, Union
import logging

from ..errors import InvalidArgumentError

logger = logging.getLogger(__name__)


class ImageRepository:
    """
    Handles file and stream I/O for encoded image bytes.
    No decoding here.
    """

    @staticmethod
    def read_file(path: Union[str, Path]) -> bytes:
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Image not found or unreadable: {path}")
        data = path.read_bytes()
        logger.info(f"Read {len(data)} bytes from {path}")
        return data

    @staticmethod
    def read_stream(stream: BinaryIO) -> bytes:
        if stream is None:
            raise InvalidArgumentError("Please provide a stream to read from.")
        # Read from the start so a stream that was already consumed still works
        if stream.seekable():
            stream.seek(0)
        data = stream.read()
        if isinstance(data, str):
            raise InvalidArgumentError("Stream must be opened in binary mode.")
        return bytes(data)

    @staticmethod
    def write_file(path: Union[str, Path], data: bytes) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        logger.info(f"Wrote {len(data)} bytes to {path}")
        return path

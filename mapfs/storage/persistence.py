"""Reading and writing whole-filesystem files."""

import logging
from pathlib import Path
from typing import Optional, Union

from mapfs.config import StorageConfig
from mapfs.storage.codecs import Codec, codec_for_path
from mapfs.vfs.base import DirectoryNode

logger = logging.getLogger(__name__)


class PersistenceManager:
    """Serializes a tree to and from a single text file.

    A file is always read and written in one piece: there is no header,
    no version tag and no partial write.
    """

    def __init__(self, config: Optional[StorageConfig] = None):
        """Initialize the manager.

        Args:
            config: Storage settings (default format, JSON indent)
        """
        self.config = config or StorageConfig()

    def codec_for(self, filename: Union[str, Path]) -> Codec:
        return codec_for_path(
            filename,
            default_format=self.config.default_format,
            json_indent=self.config.json_indent,
        )

    def read(self, filename: Union[str, Path]) -> DirectoryNode:
        """Parse a file into a root directory.

        Args:
            filename: File to read

        Returns:
            Root directory of the stored tree

        Raises:
            FileNotFoundError: If the file does not exist
            CodecError: If the content is malformed
        """
        path = Path(filename)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {filename}")

        codec = self.codec_for(path)
        root = codec.loads(path.read_text(encoding="utf-8"))
        logger.info(f"Read {codec.name} filesystem from {path}")
        return root

    def write(self, root: DirectoryNode, filename: Union[str, Path]) -> None:
        """Overwrite a file with the tree's literal.

        The whole text is encoded before the file is opened, so an
        encoding error leaves the existing file untouched.

        Raises:
            CodecError: If a stored value cannot be encoded
            OSError: If the file cannot be written
        """
        path = Path(filename)
        codec = self.codec_for(path)
        text = codec.dumps(root)
        path.write_text(text, encoding="utf-8")
        logger.info(f"Wrote {codec.name} filesystem to {path}")

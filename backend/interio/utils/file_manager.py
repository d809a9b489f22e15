"""File management utilities."""

from pathlib import Path
import logging
import time
import uuid


logger = logging.getLogger(__name__)


class FileManager:
    """Manages generated export files and their cleanup."""

    def __init__(self, export_dir: Path):
        """
        Initialize FileManager.

        Args:
            export_dir: Directory where generated documents are written
        """
        self.export_dir = Path(export_dir)
        self.export_dir.mkdir(parents=True, exist_ok=True)

    def new_export_path(self, prefix: str, suffix: str = ".xlsx") -> Path:
        """
        Build a unique path inside the export directory.

        Args:
            prefix: Human readable file name prefix (e.g. quotation number)
            suffix: File extension including the dot

        Returns:
            Path that does not exist yet
        """
        safe_prefix = "".join(c if c.isalnum() or c in "-_" else "_" for c in prefix)
        return self.export_dir / f"{safe_prefix}_{uuid.uuid4().hex[:8]}{suffix}"

    def cleanup_exports(self, days: int = 7) -> int:
        """
        Clean up export files older than specified days.

        Args:
            days: Number of days (delete files older than this)

        Returns:
            Number of files deleted
        """
        deleted_count = 0
        cutoff_time = time.time() - (days * 86400)

        for file_path in self.export_dir.glob("*"):
            if file_path.is_file() and file_path.stat().st_mtime < cutoff_time:
                try:
                    file_path.unlink()
                    deleted_count += 1
                    logger.info(f"Cleaned up old export: {file_path}")
                except OSError as e:
                    logger.warning(f"Failed to delete export {file_path}: {e}")

        return deleted_count

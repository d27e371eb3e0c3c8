"""
File management service for veogen.

Handles local storage of downloaded videos with path traversal protection.
Each generate() call gets its own run directory holding one clip per step.
"""
from pathlib import Path

from veogen.config import settings


class FileManager:
    """
    Manage local artifacts for generation runs.

    Creates structured directories:
    - {base_dir}/{run_id}/step_{n}.mp4 - Video downloaded for story step n

    Implements path traversal protection to prevent directory escape attacks.
    """

    def __init__(self, base_dir: str | Path | None = None):
        """
        Initialize FileManager with base directory.

        Args:
            base_dir: Root directory for all generation artifacts.
                     If None, uses settings.storage.output_dir
        """
        if base_dir is None:
            base_dir = settings.storage.output_dir

        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def get_run_dir(self, run_id: str) -> Path:
        """
        Get or create the directory for one generation run.

        Args:
            run_id: Identifier of the generate() call

        Returns:
            Resolved Path to the run directory

        Raises:
            ValueError: If run_id creates path outside base_dir (traversal attack)
        """
        run_dir = (self.base_dir / run_id).resolve()

        if run_dir == self.base_dir or not run_dir.is_relative_to(self.base_dir):
            raise ValueError("Invalid run path")

        run_dir.mkdir(exist_ok=True)
        return run_dir

    def save_clip(self, run_id: str, step: int, data: bytes) -> Path:
        """
        Save the video downloaded for a step.

        Args:
            run_id: Identifier of the generate() call
            step: Step number (1-based)
            data: MP4 video data

        Returns:
            Path to saved clip file
        """
        filepath = self.get_run_dir(run_id) / f"step_{step}.mp4"
        filepath.write_bytes(data)
        return filepath

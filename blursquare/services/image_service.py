from pathlib import Path
from typing import Optional, Union
import logging
import os
import tempfile
import time

from dotenv import load_dotenv

from ..models.image import Image
from ..repositories.image_repository import ImageRepository
from ..repositories.clipboard_repository import ClipboardRepository
from ..errors import ImageDecodeError, ImageEncodeError, OutputPathInvalid, UserDeclinedOverwrite
from .confirm_service import ConfirmService

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class ImageService:
    """
    Where the source image comes from and where the result goes.
    No pixel logic here: a file path or the clipboard on either side.
    """

    def __init__(self,
                 image_repository: ImageRepository = None,
                 clipboard_repository: ClipboardRepository = None,
                 confirm_service: ConfirmService = None,
                 backup_dir: Union[str, Path] = None,
                 backup_prefix: str = None):
        self.image_repository = image_repository or ImageRepository()
        self.clipboard_repository = clipboard_repository or ClipboardRepository()
        self.confirm_service = confirm_service or ConfirmService()
        self.backup_dir = Path(backup_dir or os.getenv("BACKUP_DIR") or tempfile.gettempdir())
        self.backup_prefix = backup_prefix or os.getenv("BACKUP_PREFIX", "BACKUP")

    # ─── Backups ───────────────────────────────────────────────────
    @staticmethod
    def timestamp_suffix() -> str:
        """
        Returns a hyphen followed by the current time in milliseconds,
        or "" when the clock reads before the epoch or cannot be read.
        """
        try:
            millis = time.time_ns() // 1_000_000
        except OSError:
            return ""
        if millis < 0:
            return ""
        return f"-{millis}"

    def backup_path(self, ext: str = "") -> Path:
        return self.backup_dir / f"{self.backup_prefix}{self.timestamp_suffix()}{ext}"

    # ─── Source ────────────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> Image:
        """Load a single image from disk into an Image object."""
        return self.image_repository.load(path)

    def open_image_from_clipboard(self) -> Image:
        with self.clipboard_repository.open() as clipboard:
            img = clipboard.get_image()
        if img is None:
            raise ImageDecodeError("Could not construct clipboard image (perhaps it is empty?)")
        logger.info("Read clipboard image")
        return img

    def open_image(self, input_path: Optional[Union[str, Path]] = None) -> Image:
        if input_path is not None:
            return self.load(input_path)
        return self.open_image_from_clipboard()

    # ─── Sink ──────────────────────────────────────────────────────
    def save_image_to_path(self, image: Image, output_path: Union[str, Path]) -> Path:
        output_path = Path(output_path)
        if output_path.is_symlink() or output_path.is_dir():
            raise OutputPathInvalid(
                f"{str(output_path)!r} is a directory or a symbolic link, cannot proceed"
            )
        self.image_repository.check_encodable(output_path)

        backup = None
        if output_path.is_file():
            if not self.confirm_service.confirm(
                f"{str(output_path)!r} is an existing file. replace? [y/n]: "
            ):
                raise UserDeclinedOverwrite(
                    "Please rerun with a different output path, or without an output path "
                    "(to copy the result to the clipboard)"
                )
            backup = self.image_repository.move(output_path, self.backup_path())
            logger.info(f"Original file at {str(output_path)!r} backed up to: {str(backup)!r}")

        try:
            self.image_repository.save(Image(pixels=image.pixels, path=output_path))
        except ImageEncodeError:
            if backup is not None:
                output_path.unlink(missing_ok=True)
                self.image_repository.move(backup, output_path)
                logger.info(f"Restored original file at {str(output_path)!r}")
            raise
        logger.info(f"Saved image to {str(output_path)!r}!")
        return output_path

    def save_image_to_clipboard(self, image: Image) -> None:
        if not self.confirm_service.confirm(
            "Overwrite clipboard content with edited image? [y/n]: "
        ):
            raise UserDeclinedOverwrite(
                "Please rerun with the clipboard content backed up, or with an output path "
                "specified (see '--help')"
            )

        with self.clipboard_repository.open() as clipboard:
            previous = clipboard.get_image()
            if previous is not None:
                previous.path = self.backup_path(".png")
                self.image_repository.save(previous)
                logger.info(f"Previous clipboard image backed up to: {str(previous.path)!r}")
            clipboard.set_image(image)
        logger.info("Edited image copied to clipboard!")

    def save_image(self, image: Image, output_path: Optional[Union[str, Path]] = None) -> None:
        if output_path is not None:
            self.save_image_to_path(image, output_path)
        else:
            self.save_image_to_clipboard(image)

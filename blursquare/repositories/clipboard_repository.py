# repositories/clipboard_repository.py
"""
Scoped access to the system clipboard.

• Reading goes through Pillow's ImageGrab.
• Writing hands a PNG payload to the platform's clipboard tool
  (wl-copy / xclip on Linux, osascript on macOS, PowerShell on Windows).
• The clipboard is a process-wide resource: grab a handle with
  ClipboardRepository.open() right before use and let the context manager
  release it right after.
"""
from __future__ import annotations
from contextlib import contextmanager
from io import BytesIO
from pathlib import Path
from typing import Iterator, List, Optional
import logging
import os
import platform
import shutil
import subprocess
import tempfile

import numpy as np
from PIL import Image as PILImage
from PIL import ImageGrab

from ..models.image import Image
from ..errors import ImageAccessError, ImageDecodeError, ImageEncodeError

logger = logging.getLogger(__name__)

_COMMAND_TIMEOUT = 10  # seconds


def _get_platform() -> str:
    system = platform.system().lower()
    if "windows" in system:
        return "windows"
    if "darwin" in system:
        return "macos"
    return "linux"


def _is_wayland() -> bool:
    return os.environ.get("XDG_SESSION_TYPE", "").lower() == "wayland"


class ClipboardHandle:
    """Live clipboard access; only valid inside ClipboardRepository.open()."""

    def __init__(self, system: str, linux_tool: Optional[str] = None):
        self.system = system
        self.linux_tool = linux_tool
        self._closed = False

    def close(self) -> None:
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise ImageAccessError("Clipboard handle used after release")

    # ─── Read ──────────────────────────────────────────────────────
    def get_image(self) -> Optional[Image]:
        """
        Returns the clipboard image as RGBA, or None when the clipboard holds
        no image.
        """
        self._check_open()
        try:
            grabbed = ImageGrab.grabclipboard()
        except (OSError, NotImplementedError) as err:
            raise ImageAccessError(f"Could not read clipboard image: {err}") from err

        # A list means file names were copied, not pixels
        if grabbed is None or isinstance(grabbed, list):
            return None

        try:
            rgba = np.asarray(grabbed.convert("RGBA"), dtype=np.uint8)
            return Image(pixels=np.ascontiguousarray(rgba))
        except (OSError, ValueError) as err:
            raise ImageDecodeError(f"Could not construct clipboard image: {err}") from err

    # ─── Write ─────────────────────────────────────────────────────
    @staticmethod
    def _to_png(image: Image) -> bytes:
        buf = BytesIO()
        try:
            PILImage.fromarray(image.pixels).convert("RGBA").save(buf, format="PNG")
        except (OSError, ValueError) as err:
            raise ImageEncodeError(f"Could not encode clipboard image: {err}") from err
        return buf.getvalue()

    def _linux_command(self) -> List[str]:
        if self.linux_tool == "wl-copy":
            return ["wl-copy", "--type", "image/png"]
        return ["xclip", "-selection", "clipboard", "-t", "image/png", "-i"]

    @staticmethod
    def _file_command(system: str, png_path: Path) -> List[str]:
        if system == "macos":
            script = f'set the clipboard to (read (POSIX file "{png_path}") as «class PNGf»)'
            return ["osascript", "-e", script]
        script = (
            "Add-Type -AssemblyName System.Windows.Forms; "
            "Add-Type -AssemblyName System.Drawing; "
            f"[System.Windows.Forms.Clipboard]::SetImage([System.Drawing.Image]::FromFile('{png_path}'))"
        )
        return ["powershell.exe", "-NoProfile", "-NonInteractive", "-STA", "-Command", script]

    @staticmethod
    def _run(cmd: List[str], payload: Optional[bytes] = None) -> None:
        # Clipboard tools fork to keep serving the selection, so never pipe their output
        try:
            proc = subprocess.run(
                cmd,
                input=payload,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                timeout=_COMMAND_TIMEOUT,
            )
        except (OSError, subprocess.TimeoutExpired) as err:
            raise ImageAccessError(f"Could not copy edited image to clipboard: {err}") from err
        if proc.returncode != 0:
            raise ImageAccessError(
                f"Could not copy edited image to clipboard: {cmd[0]} returned {proc.returncode}"
            )

    def set_image(self, image: Image) -> None:
        self._check_open()
        payload = self._to_png(image)

        if self.system == "linux":
            self._run(self._linux_command(), payload)
            return

        fd, tmp_name = tempfile.mkstemp(suffix=".png")
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
            self._run(self._file_command(self.system, Path(tmp_name)))
        finally:
            os.unlink(tmp_name)


class ClipboardRepository:
    """Hands out short-lived ClipboardHandle objects."""

    @staticmethod
    def _detect_linux_tool() -> str:
        candidates = ["wl-copy", "xclip"] if _is_wayland() else ["xclip", "wl-copy"]
        for tool in candidates:
            if shutil.which(tool):
                return tool
        raise ImageAccessError("Error accessing clipboard: wl-clipboard or xclip is required")

    @contextmanager
    def open(self) -> Iterator[ClipboardHandle]:
        system = _get_platform()
        linux_tool = self._detect_linux_tool() if system == "linux" else None
        handle = ClipboardHandle(system, linux_tool)
        logger.info("Accessed clipboard")
        try:
            yield handle
        finally:
            handle.close()

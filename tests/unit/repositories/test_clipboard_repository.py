#!/usr/bin/env python3
"""
Unit tests for the ClipboardRepository. The real clipboard is never touched.
"""

import os
import subprocess
import sys
import unittest
from unittest.mock import patch

import numpy as np
from PIL import Image as PILImage

# Add repository root to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../..')))

from blursquare.errors import ImageAccessError
from blursquare.models.image import Image
from blursquare.repositories.clipboard_repository import ClipboardHandle, ClipboardRepository

MODULE = 'blursquare.repositories.clipboard_repository'


class TestClipboardHandle(unittest.TestCase):
    """Test cases for ClipboardHandle"""

    def setUp(self):
        self.handle = ClipboardHandle("linux", "xclip")
        self.image = Image(np.full((3, 2, 3), 80, dtype=np.uint8))

    @patch(f'{MODULE}.ImageGrab.grabclipboard')
    def test_get_image_is_rgba(self, mock_grab):
        mock_grab.return_value = PILImage.new("RGB", (4, 3), (1, 2, 3))
        img = self.handle.get_image()
        self.assertEqual(img.pixels.shape, (3, 4, 4))
        np.testing.assert_array_equal(img.pixels[0, 0], [1, 2, 3, 255])

    @patch(f'{MODULE}.ImageGrab.grabclipboard')
    def test_get_image_without_image(self, mock_grab):
        mock_grab.return_value = None
        self.assertIsNone(self.handle.get_image())
        mock_grab.return_value = ["/tmp/some_file.png"]
        self.assertIsNone(self.handle.get_image())

    @patch(f'{MODULE}.ImageGrab.grabclipboard')
    def test_get_image_backend_missing(self, mock_grab):
        mock_grab.side_effect = NotImplementedError("wl-paste or xclip is required")
        with self.assertRaises(ImageAccessError):
            self.handle.get_image()

    @patch(f'{MODULE}.subprocess.run')
    def test_set_image_linux(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0)
        self.handle.set_image(self.image)

        args, kwargs = mock_run.call_args
        self.assertEqual(args[0][0], "xclip")
        self.assertIn("image/png", args[0])
        self.assertTrue(kwargs["input"].startswith(b"\x89PNG"))

    @patch(f'{MODULE}.subprocess.run')
    def test_set_image_wayland(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=0)
        ClipboardHandle("linux", "wl-copy").set_image(self.image)
        self.assertEqual(mock_run.call_args[0][0][:3], ["wl-copy", "--type", "image/png"])

    @patch(f'{MODULE}.subprocess.run')
    def test_set_image_macos_uses_temp_file(self, mock_run):
        seen = {}

        def _fake_run(cmd, **kwargs):
            script = cmd[2]
            path = script.split('POSIX file "')[1].split('"')[0]
            seen["path"] = path
            seen["exists"] = os.path.exists(path)
            return subprocess.CompletedProcess(args=cmd, returncode=0)

        mock_run.side_effect = _fake_run
        ClipboardHandle("macos").set_image(self.image)

        self.assertEqual(mock_run.call_args[0][0][0], "osascript")
        self.assertTrue(seen["exists"])
        self.assertFalse(os.path.exists(seen["path"]))

    @patch(f'{MODULE}.subprocess.run')
    def test_set_image_failure(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess(args=[], returncode=1)
        with self.assertRaises(ImageAccessError):
            self.handle.set_image(self.image)

    @patch(f'{MODULE}.subprocess.run', side_effect=FileNotFoundError("xclip"))
    def test_set_image_tool_missing(self, _mock_run):
        with self.assertRaises(ImageAccessError):
            self.handle.set_image(self.image)

    def test_closed_handle(self):
        self.handle.close()
        with self.assertRaises(ImageAccessError):
            self.handle.get_image()
        with self.assertRaises(ImageAccessError):
            self.handle.set_image(self.image)


class TestClipboardRepository(unittest.TestCase):
    """Test cases for ClipboardRepository.open"""

    @patch(f'{MODULE}.shutil.which', return_value="/usr/bin/xclip")
    @patch(f'{MODULE}._get_platform', return_value="linux")
    def test_handle_released_after_use(self, _mock_platform, _mock_which):
        with ClipboardRepository().open() as handle:
            self.assertEqual(handle.system, "linux")
            self.assertIsNotNone(handle.linux_tool)
        with self.assertRaises(ImageAccessError):
            handle.get_image()

    @patch(f'{MODULE}.shutil.which', return_value=None)
    @patch(f'{MODULE}._get_platform', return_value="linux")
    def test_no_linux_tool(self, _mock_platform, _mock_which):
        with self.assertRaises(ImageAccessError):
            with ClipboardRepository().open():
                pass

    @patch(f'{MODULE}._get_platform', return_value="windows")
    def test_windows_needs_no_tool(self, _mock_platform):
        with ClipboardRepository().open() as handle:
            self.assertEqual(handle.system, "windows")
            self.assertIsNone(handle.linux_tool)


if __name__ == '__main__':
    unittest.main()

#!/usr/bin/env python3
"""
Unit tests for the ConfirmService prompt.
"""

import io
import os
import sys
import unittest
from unittest.mock import MagicMock

# Add repository root to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../..')))

from blursquare.errors import PromptIOError
from blursquare.services.confirm_service import ConfirmService, ConfirmState


class TestConfirmService(unittest.TestCase):
    """Test cases for ConfirmService"""

    def _service(self, answers):
        self.out = io.StringIO()
        return ConfirmService(stdin=io.StringIO(answers), stdout=self.out)

    def test_yes_variants(self):
        for answer in ("y\n", "yes\n", "  YES \n", "Y\n"):
            self.assertEqual(self._service(answer).ask("? "), ConfirmState.CONFIRMED)

    def test_no_variants(self):
        for answer in ("n\n", "no\n", " No\n"):
            self.assertEqual(self._service(answer).ask("? "), ConfirmState.DECLINED)

    def test_reprompts_on_unrecognised(self):
        service = self._service("maybe\n\nyep\nyes\n")
        self.assertEqual(service.ask("replace? [y/n]: "), ConfirmState.CONFIRMED)
        self.assertEqual(self.out.getvalue(), "replace? [y/n]: " * 4)

    def test_eof_is_io_failure(self):
        self.assertEqual(self._service("").ask("? "), ConfirmState.IO_FAILURE)
        self.assertEqual(self._service("what\n").ask("? "), ConfirmState.IO_FAILURE)

    def test_read_error_is_io_failure(self):
        stdin = MagicMock()
        stdin.readline.side_effect = OSError("broken pipe")
        service = ConfirmService(stdin=stdin, stdout=io.StringIO())
        self.assertEqual(service.ask("? "), ConfirmState.IO_FAILURE)

    def test_confirm(self):
        self.assertTrue(self._service("y\n").confirm("? "))
        self.assertFalse(self._service("n\n").confirm("? "))
        with self.assertRaises(PromptIOError):
            self._service("").confirm("? ")


if __name__ == '__main__':
    unittest.main()

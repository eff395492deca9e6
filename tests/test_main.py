import io
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

import config
from main import main


class TestCommandLine(unittest.TestCase):

    def setUp(self):
        self.folder = tempfile.TemporaryDirectory()
        self.jd = self.write("backend.txt", "Job Title: Backend Engineer\nRequired Skills: Python, Docker\n")
        self.resume = self.write("alice.txt", "Alice Smith\nSkills: Python, Docker, AWS\n")
        # keep the oracle offline
        patcher = patch.object(config, 'GEMINI_API_KEY', '')
        patcher.start()
        self.addCleanup(patcher.stop)
        self.addCleanup(self.folder.cleanup)

    def write(self, name, text):
        path = os.path.join(self.folder.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        return path

    def test_ranking_printed(self):
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(['--jd', self.jd, '--resume', self.resume, '--skill-policy', 'select-hold-reject'])
        self.assertEqual(code, 0)
        self.assertIn("1. Alice Smith -> Backend Engineer: 100% (Select)", out.getvalue())

    def test_report_written(self):
        report = os.path.join(self.folder.name, "out.pdf")
        with redirect_stdout(io.StringIO()):
            code = main(['--jd', self.jd, '--resume', self.resume, '--report', report])
        self.assertEqual(code, 0)
        self.assertTrue(os.path.exists(report))

    def test_missing_file(self):
        err = io.StringIO()
        with redirect_stderr(err):
            code = main(['--jd', self.jd, '--resume', os.path.join(self.folder.name, "missing.txt")])
        self.assertEqual(code, 1)
        self.assertIn("Error reading input file", err.getvalue())

    def test_nothing_parsed(self):
        broken = os.path.join(self.folder.name, "cv.doc")
        with open(broken, "wb") as f:
            f.write(b"\xd0\xcf\x11\xe0")
        with redirect_stderr(io.StringIO()):
            self.assertEqual(main(['--jd', self.jd, '--resume', broken]), 1)


if __name__ == '__main__':
    unittest.main()

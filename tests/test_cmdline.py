from contextlib import redirect_stdout
from io import StringIO
from pathlib import Path
import tempfile
import unittest
from unittest import mock

from typetag import cmdline
from typetag.diagnostics import Report

class CommandLineTests(unittest.TestCase):

	def setUp(self) -> None:
		self._folder = tempfile.TemporaryDirectory()
		self.folder = Path(self._folder.name)

	def tearDown(self) -> None:
		self._folder.cleanup()

	def specimen(self, name, text) -> str:
		path = self.folder/name
		path.write_text(text, encoding="utf-8")
		return str(path)

	def run_with(self, *argv) -> tuple[int, list[str]]:
		out = StringIO()
		with redirect_stdout(out):
			status = cmdline.run(cmdline.parser.parse_args(list(argv)))
		return status, out.getvalue().split("\n")[:-1]

	def test_listing(self):
		name = self.specimen("defs.bzl", 's = "string"\ns2 = s\n\ndef f(d = {}):\n    return d | depset()\n')
		status, lines = self.run_with(name)
		self.assertEqual(0, status)
		self.assertEqual([
			name+':1:5: string: "string"',
			name+':2:6: string: s',
			name+':4:11: dict: {}',
			name+':5:12: dict: d',
			name+':5:16: depset: depset()',
		], lines)

	def test_multi_line_expression_is_abbreviated(self):
		name = self.specimen("BUILD", 'x = {\n    "a": 1,\n}\n')
		status, lines = self.run_with(name)
		self.assertEqual(0, status)
		self.assertEqual(name+':1:5: dict: { ...', lines[0])

	def test_form_feed_keeps_rows_and_columns(self):
		name = self.specimen("odd.bzl", 's = "a\x0cb"\nt = s\n')
		status, lines = self.run_with(name)
		self.assertEqual(0, status)
		self.assertEqual([
			name+':1:5: string: "a\x0cb"',
			name+":2:5: string: s",
		], lines)

	def test_several_files(self):
		first = self.specimen("a.bzl", "x = 1\n")
		second = self.specimen("b.bzl", "y = x\n")
		status, lines = self.run_with(first, second)
		self.assertEqual(0, status)
		self.assertEqual([first+":1:5: int: 1"], lines)

	@mock.patch.object(Report, "complain_to_console")
	def test_bad_file_fails(self, complain):
		good = self.specimen("good.bzl", "x = 1\n")
		bad = self.specimen("bad.bzl", "class X:\n    pass\n")
		status, lines = self.run_with(bad, good)
		self.assertEqual(1, status)
		self.assertEqual([good+":1:5: int: 1"], lines)
		self.assertEqual(1, complain.call_count)

	@mock.patch.object(Report, "complain_to_console")
	def test_gives_up_after_too_many_issues(self, complain):
		bad = [self.specimen("bad%d.bzl"%i, "import os\n") for i in range(3)]
		with redirect_stdout(StringIO()), mock.patch("sys.stderr", new_callable=StringIO) as err:
			status = cmdline.run(cmdline.parser.parse_args(["--max-issues", "2", *bad]))
		self.assertEqual(1, status)
		self.assertIn("Giving up", err.getvalue())
		self.assertEqual(1, complain.call_count)

	@mock.patch.object(Report, "complain_to_console")
	def test_missing_file(self, complain):
		status, lines = self.run_with(str(self.folder/"absent.bzl"))
		self.assertEqual(1, status)
		self.assertEqual([], lines)

if __name__ == '__main__':
	unittest.main()

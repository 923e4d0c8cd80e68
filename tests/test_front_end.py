from pathlib import Path
import tempfile
import unittest
from unittest import mock

from typetag import syntax
from typetag.diagnostics import Report
from typetag.front_end import parse_text, parse_file
from typetag.location import lookup_span

specimen_path = Path("specimen.bzl")

class Silence(Report):
	def __init__(self):
		super().__init__(verbose=False, max_issues=30)
		self.complain_to_console = mock.Mock()

def _good(text:str) -> list[syntax.Statement]:
	report = Silence()
	module = parse_text(text, specimen_path, report)
	report.assert_no_issues("Specimen should have parsed.")
	return module.statements

def _text_of(node) -> str:
	return lookup_span(*node.span()).excerpt()

class ShapeTests(unittest.TestCase):
	""" The transduction builds the nodes the detector expects. """

	def test_spans_cover_source_text(self):
		[stmt] = _good('x = depset(items = [a, "b"])')
		self.assertIsInstance(stmt, syntax.Assignment)
		self.assertEqual('depset(items = [a, "b"])', _text_of(stmt.expr))
		[kw] = stmt.expr.keywords
		self.assertIsInstance(kw, syntax.KeywordArgument)
		self.assertEqual("items", kw.nom.text)
		self.assertEqual('[a, "b"]', _text_of(kw.expr))
		self.assertEqual("x", _text_of(stmt.targets[0]))

	def test_splats(self):
		[stmt] = _good("f(*a, **b)")
		call = stmt.expr
		self.assertEqual(["*", "**"], [a.star for a in call.args])
		self.assertEqual([], list(call.keywords))

	def test_load(self):
		[stmt] = _good('load("//pkg:defs.bzl", "a", b = "c")')
		self.assertIsInstance(stmt, syntax.Load)
		self.assertEqual("//pkg:defs.bzl", stmt.label.value)
		self.assertEqual([("a", "a"), ("c", "b")], [(s.yonder, s.hither.text) for s in stmt.vocab])

	def test_function_parameters(self):
		[fn] = _good('def build(name, srcs = [], *args, visibility = None, **kwargs):\n    pass')
		self.assertIsInstance(fn, syntax.FunctionDef)
		self.assertEqual("build", fn.nom.text)
		self.assertEqual("build", _text_of(fn.nom))
		self.assertEqual(
			[("name", ""), ("srcs", ""), ("args", "*"), ("visibility", ""), ("kwargs", "**")],
			[(p.key(), p.kind) for p in fn.params],
		)
		self.assertIsNone(fn.params[0].default)
		self.assertIsInstance(fn.params[1].default, syntax.ListDisplay)
		self.assertIsInstance(fn.body[0], syntax.Skip)

	def test_operators(self):
		binary, short, compare, unary = [s.expr for s in _good("a + b\na or b or c\na < b < c\nnot a")]
		self.assertIsInstance(binary, syntax.BinExp)
		self.assertIsInstance(short, syntax.ShortCutExp)
		self.assertIsInstance(short.lhs, syntax.ShortCutExp)
		self.assertIsInstance(compare, syntax.Comparison)
		self.assertIsInstance(compare.lhs, syntax.Comparison)
		self.assertIsInstance(unary, syntax.UnaryExp)

	def test_targets(self):
		chain, destructure, subscript, augmented = _good("a = b = 1\nc, (d, e) = f\ng[0] = 1\nh.i += 1")
		self.assertEqual(["a", "b"], [t.text for t in chain.targets])
		outer = destructure.targets[0]
		self.assertEqual("c", outer.elts[0].text)
		self.assertIsInstance(outer.elts[1], syntax.Destructure)
		self.assertEqual(["d", "e"], [n.text for n in outer.elts[1].elts])
		self.assertIsInstance(subscript.targets[0], syntax.Index)
		self.assertIsInstance(augmented, syntax.AugmentedAssignment)
		self.assertIsInstance(augmented.target, syntax.FieldReference)

	def test_comprehension_clauses(self):
		[stmt] = _good("[x for y in z if y for x in y]")
		comp = stmt.expr
		self.assertIsInstance(comp, syntax.ListComprehension)
		self.assertEqual(
			[syntax.ForClause, syntax.IfClause, syntax.ForClause],
			[type(c) for c in comp.clauses],
		)

	def test_non_ascii_columns(self):
		[_, stmt] = _good('s = "häßlich"\nt = {"ü": s}')
		self.assertEqual('{"ü": s}', _text_of(stmt.expr))

	def test_form_feed_is_not_a_line_break(self):
		[_, stmt] = _good('s = "a\x0cb"  # \u2028\nt = {"k": s}')
		self.assertEqual('{"k": s}', _text_of(stmt.expr))
		self.assertEqual("s", _text_of(stmt.expr.entries[0].value))

	def test_reparsing_a_path_keeps_earlier_spans(self):
		[first] = _good('x = "one"')
		[second] = _good("x = {}")
		self.assertEqual('"one"', _text_of(first.expr))
		self.assertEqual("{}", _text_of(second.expr))

class RejectionTests(unittest.TestCase):
	""" Python which is not Starlark gets reported, and the parse fails. """

	def expect(self, text, fragment):
		report = Silence()
		module = parse_text(text, specimen_path, report)
		self.assertIsNone(module)
		self.assertTrue(report.sick())
		self.assertIn(fragment, report.issues[0].intro)
		self.assertEqual(0, report.complain_to_console.call_count)

	def test_python_only_constructs(self):
		for text, fragment in [
			("class Foo:\n    pass", "class definition"),
			("import os", "import statement"),
			("while x:\n    pass", "while-loop"),
			('x = f"{y}"', "f-string"),
			("x = {1, 2}", "set display"),
			("@decorate\ndef f():\n    pass", "decorator"),
			("def f(x: int):\n    pass", "type annotation"),
			("x: int = 1", "annotated assignment"),
			("x = (y for y in z)", "generator expression"),
			("x = {**y}", "dictionary unpacking"),
			("x = a is b", "comparison"),
			("for x in y:\n    pass\nelse:\n    pass", "else-clause"),
		]:
			with self.subTest(text):
				self.expect(text, fragment)

	def test_syntax_error(self):
		self.expect("x = (", "confused")

	def test_malformed_load(self):
		self.expect("load(label)", "load(...)")
		self.expect('load(":x.bzl", sym)', "load(...)")

	def test_missing_file(self):
		report = Silence()
		self.assertIsNone(parse_file(Path(tempfile.gettempdir())/"no such file.bzl", report))
		self.assertIn("no file", report.issues[0].intro)

	def test_good_file(self):
		with tempfile.TemporaryDirectory() as folder:
			path = Path(folder)/"BUILD"
			path.write_text('x = "y"\n', encoding="utf-8")
			report = Silence()
			module = parse_file(path, report)
		self.assertFalse(report.sick())
		self.assertEqual(path, module.source_path)
		self.assertEqual(1, len(module.statements))

if __name__ == '__main__':
	unittest.main()

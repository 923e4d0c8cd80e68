"""
Source text in, syntax.Module out.

Starlark is syntactically a subset of Python, so Python's own parser does the
heavy lifting. A Visitor then transduces the Python parse tree bottom-up into
our own (smaller, closed) set of syntax nodes. Anything Python accepts but
Starlark does not gets reported as an issue, and the parse fails.
"""
import ast
from pathlib import Path
from typing import Optional, Sequence

from boozetools.support.foundation import Visitor
from . import syntax
from .diagnostics import Report
from .location import LineMap, start_segment, insert_token
from .ontology import Nom

class NotStarlark(Exception):
	""" The transducer has already reported the reason. """

_BINARY = {
	ast.Add: "+", ast.Sub: "-", ast.Mult: "*", ast.Div: "/", ast.FloorDiv: "//", ast.Mod: "%",
	ast.BitOr: "|", ast.BitAnd: "&", ast.BitXor: "^", ast.LShift: "<<", ast.RShift: ">>",
}
_COMPARE = {
	ast.Eq: "==", ast.NotEq: "!=", ast.Lt: "<", ast.LtE: "<=", ast.Gt: ">", ast.GtE: ">=",
	ast.In: "in", ast.NotIn: "not in",
}
_UNARY = {ast.USub: "-", ast.UAdd: "+", ast.Not: "not", ast.Invert: "~"}
_SHORTCUT = {ast.And: "and", ast.Or: "or"}

# Friendly names for the commonest Python-only constructs.
_PYTHON_ONLY = {
	"ClassDef": "a class definition",
	"Import": "an import statement",
	"ImportFrom": "an import statement",
	"While": "a while-loop",
	"Try": "a try-statement",
	"With": "a with-statement",
	"Global": "a global declaration",
	"Nonlocal": "a nonlocal declaration",
	"Delete": "a del-statement",
	"Raise": "a raise-statement",
	"Assert": "an assert-statement",
	"AnnAssign": "an annotated assignment",
	"AsyncFunctionDef": "an async function",
	"Set": "a set display",
	"SetComp": "a set comprehension",
	"GeneratorExp": "a generator expression",
	"JoinedStr": "an f-string",
	"NamedExpr": "an assignment expression",
	"Await": "an await-expression",
	"Yield": "a yield-expression",
	"YieldFrom": "a yield-expression",
	"Starred": "a starred expression",
}

def _describe(node:ast.AST) -> str:
	name = type(node).__name__
	return _PYTHON_ONLY.get(name, "a(n) "+name)

class Transducer(Visitor):
	"""
	Each visit-method takes a Python node and answers the corresponding syntax node.
	Every node gets a spot registered for its whole character extent.
	"""

	def __init__(self, text:str, report:Report):
		self._text = text
		self._lines = LineMap(text)
		self._report = report

	def _slice(self, node:ast.AST) -> slice:
		start = self._lines.offset(node.lineno, node.col_offset)
		stop = self._lines.offset(node.end_lineno, node.end_col_offset)
		return slice(start, stop)

	def _spot(self, node:ast.AST) -> int:
		return insert_token(self._slice(node))

	def _nom_at(self, text:str, start:int) -> Nom:
		return Nom(text, insert_token(slice(start, start+len(text))))

	def _nom(self, node:ast.AST, text:str) -> Nom:
		return self._nom_at(text, self._slice(node).start)

	def _reject(self, node:ast.AST, what:Optional[str]=None):
		self._report.not_starlark(Nom("", self._spot(node)), what or _describe(node))
		raise NotStarlark(what)

	def transduce(self, node:ast.AST):
		if not hasattr(self, "visit_"+type(node).__name__):
			self._reject(node)
		return self.visit(node)

	def optional(self, node:Optional[ast.AST]):
		if node is not None: return self.transduce(node)

	def tour(self, nodes:Sequence[ast.AST]) -> list:
		return [self.transduce(n) for n in nodes]

	########################################
	# Statements

	def visit_Expr(self, node:ast.Expr):
		value = node.value
		if isinstance(value, ast.Call) and isinstance(value.func, ast.Name) and value.func.id == "load":
			return self._load(node, value)
		return syntax.ExprStmt(self.transduce(value), self._spot(node))

	def _load(self, stmt:ast.Expr, call:ast.Call):
		def string(it:ast.AST) -> str:
			if isinstance(it, ast.Constant) and isinstance(it.value, str): return it.value
			self._report.malformed_load(Nom("", self._spot(it)))
			raise NotStarlark("load")
		if not call.args:
			string(call)
		label = syntax.Literal(string(call.args[0]), self._spot(call.args[0]))
		vocab = []
		for a in call.args[1:]:
			text = string(a)
			vocab.append(syntax.ImportSymbol(text, self._nom(a, text)))
		for kw in call.keywords:
			if kw.arg is None: string(kw)
			vocab.append(syntax.ImportSymbol(string(kw.value), self._nom(kw, kw.arg)))
		return syntax.Load(label, vocab, self._spot(stmt))

	def visit_Assign(self, node:ast.Assign):
		targets = [self._target(t) for t in node.targets]
		return syntax.Assignment(targets, self.transduce(node.value), self._spot(node))

	def visit_AugAssign(self, node:ast.AugAssign):
		op = self._operator(node, _BINARY)
		target = node.target
		if isinstance(target, ast.Name):
			lhs = syntax.Lookup(self._nom(target, target.id))
		elif isinstance(target, (ast.Subscript, ast.Attribute)):
			lhs = self.transduce(target)
		else:
			self._reject(target, "an augmented assignment to "+_describe(target))
		return syntax.AugmentedAssignment(lhs, op, self.transduce(node.value), self._spot(node))

	def _target(self, node:ast.AST) -> syntax.Target:
		if isinstance(node, ast.Name):
			return self._nom(node, node.id)
		if isinstance(node, (ast.Tuple, ast.List)):
			return syntax.Destructure([self._target(e) for e in node.elts], self._spot(node))
		if isinstance(node, (ast.Subscript, ast.Attribute)):
			return self.transduce(node)
		self._reject(node)

	def visit_FunctionDef(self, node:ast.FunctionDef):
		if node.decorator_list:
			self._reject(node.decorator_list[0], "a decorator")
		if node.returns is not None:
			self._reject(node.returns, "a type annotation")
		spot = self._spot(node)
		name_start = self._text.index(node.name, self._slice(node).start + len("def"))
		nom = self._nom_at(node.name, name_start)
		params = self._parameters(node.args)
		return syntax.FunctionDef(nom, params, self.tour(node.body), spot)

	def _parameters(self, args:ast.arguments) -> list[syntax.FormalParameter]:
		params = []
		def formal(arg:ast.arg, default:Optional[ast.AST], kind=""):
			if arg.annotation is not None:
				self._reject(arg.annotation, "a type annotation")
			nom = self._nom(arg, arg.arg)
			params.append(syntax.FormalParameter(nom, self.optional(default), kind))
		positional = list(args.posonlyargs) + list(args.args)
		padding = [None] * (len(positional) - len(args.defaults))
		for arg, default in zip(positional, padding + list(args.defaults)):
			formal(arg, default)
		if args.vararg is not None:
			formal(args.vararg, None, "*")
		for arg, default in zip(args.kwonlyargs, args.kw_defaults):
			formal(arg, default)
		if args.kwarg is not None:
			formal(args.kwarg, None, "**")
		return params

	def visit_Return(self, node:ast.Return):
		return syntax.Return(self.optional(node.value), self._spot(node))

	def visit_If(self, node:ast.If):
		return syntax.IfStmt(self.transduce(node.test), self.tour(node.body), self.tour(node.orelse), self._spot(node))

	def visit_For(self, node:ast.For):
		if node.orelse:
			self._reject(node.orelse[0], "the else-clause of a for-loop")
		target = self._target(node.target)
		return syntax.ForStmt(target, self.transduce(node.iter), self.tour(node.body), self._spot(node))

	def visit_Pass(self, node:ast.Pass): return syntax.Skip("pass", self._spot(node))
	def visit_Break(self, node:ast.Break): return syntax.Skip("break", self._spot(node))
	def visit_Continue(self, node:ast.Continue): return syntax.Skip("continue", self._spot(node))

	########################################
	# Expressions

	def visit_Constant(self, node:ast.Constant):
		if node.value is Ellipsis:
			self._reject(node, "an ellipsis")
		return syntax.Literal(node.value, self._spot(node))

	def visit_Name(self, node:ast.Name):
		return syntax.Lookup(self._nom(node, node.id))

	def visit_Call(self, node:ast.Call):
		spot = self._spot(node)
		fn_exp = self.transduce(node.func)
		args, keywords = [], []
		for a in node.args:
			if isinstance(a, ast.Starred):
				args.append(syntax.Splat("*", self.transduce(a.value), self._spot(a)))
			else:
				args.append(self.transduce(a))
		for kw in node.keywords:
			if kw.arg is None:
				args.append(syntax.Splat("**", self.transduce(kw.value), self._spot(kw)))
			else:
				keywords.append(syntax.KeywordArgument(self._nom(kw, kw.arg), self.transduce(kw.value)))
		return syntax.Call(fn_exp, args, keywords, spot)

	def visit_Dict(self, node:ast.Dict):
		entries = []
		for k, v in zip(node.keys, node.values):
			if k is None:
				self._reject(v, "dictionary unpacking")
			entries.append(syntax.DictEntry(self.transduce(k), self.transduce(v)))
		return syntax.DictDisplay(entries, self._spot(node))

	def visit_List(self, node:ast.List):
		return syntax.ListDisplay(self.tour(node.elts), self._spot(node))

	def visit_Tuple(self, node:ast.Tuple):
		return syntax.TupleDisplay(self.tour(node.elts), self._spot(node))

	def _clauses(self, generators:Sequence[ast.comprehension]) -> list[syntax.Clause]:
		clauses = []
		for g in generators:
			clauses.append(syntax.ForClause(self._target(g.target), self.transduce(g.iter)))
			clauses.extend(syntax.IfClause(self.transduce(test)) for test in g.ifs)
		return clauses

	def visit_ListComp(self, node:ast.ListComp):
		spot = self._spot(node)
		clauses = self._clauses(node.generators)
		return syntax.ListComprehension(self.transduce(node.elt), clauses, spot)

	def visit_DictComp(self, node:ast.DictComp):
		spot = self._spot(node)
		clauses = self._clauses(node.generators)
		entry = syntax.DictEntry(self.transduce(node.key), self.transduce(node.value))
		return syntax.DictComprehension(entry, clauses, spot)

	def _operator(self, node:ast.AST, table:dict) -> str:
		op = getattr(node, "op", None)
		if type(op) not in table:
			self._reject(node, "the operator "+type(op).__name__)
		return table[type(op)]

	def visit_BinOp(self, node:ast.BinOp):
		op = self._operator(node, _BINARY)
		return syntax.BinExp(self.transduce(node.left), op, self.transduce(node.right), self._spot(node))

	def visit_BoolOp(self, node:ast.BoolOp):
		# a or b or c arrives flattened; fold it back into a left-leaning chain.
		op = self._operator(node, _SHORTCUT)
		spot = self._spot(node)
		values = self.tour(node.values)
		expr = values[0]
		for v in values[1:]:
			expr = syntax.ShortCutExp(expr, op, v, spot)
		return expr

	def visit_Compare(self, node:ast.Compare):
		spot = self._spot(node)
		expr = self.transduce(node.left)
		for op, comparator in zip(node.ops, node.comparators):
			if type(op) not in _COMPARE:
				self._reject(node, "the comparison "+type(op).__name__)
			expr = syntax.Comparison(expr, _COMPARE[type(op)], self.transduce(comparator), spot)
		return expr

	def visit_UnaryOp(self, node:ast.UnaryOp):
		op = self._operator(node, _UNARY)
		return syntax.UnaryExp(op, self.transduce(node.operand), self._spot(node))

	def visit_IfExp(self, node:ast.IfExp):
		then_part, if_part, else_part = self.tour((node.body, node.test, node.orelse))
		return syntax.Cond(then_part, if_part, else_part, self._spot(node))

	def visit_Attribute(self, node:ast.Attribute):
		spot = self._spot(node)
		lhs = self.transduce(node.value)
		name_start = self._slice(node).stop - len(node.attr)
		return syntax.FieldReference(lhs, self._nom_at(node.attr, name_start), spot)

	def visit_Subscript(self, node:ast.Subscript):
		spot = self._spot(node)
		lhs = self.transduce(node.value)
		s = node.slice
		if isinstance(s, ast.Slice):
			lower, upper, step = map(self.optional, (s.lower, s.upper, s.step))
			return syntax.Slice(lhs, lower, upper, step, spot)
		return syntax.Index(lhs, self.transduce(s), spot)

	def visit_Lambda(self, node:ast.Lambda):
		spot = self._spot(node)
		return syntax.LambdaForm(self._parameters(node.args), self.transduce(node.body), spot)

def parse_text(text:str, path:Path, report:Report) -> Optional[syntax.Module]:
	""" Submit text to the parser; transduce the result. None means the report says why. """
	assert isinstance(path, Path)
	report.info("Parsing", path)
	start_segment(path, text)
	try:
		tree = ast.parse(text, filename=str(path))
	except SyntaxError as ex:
		start = LineMap(text).offset(ex.lineno or 1, max(0, (ex.offset or 1) - 1))
		report.syntax_error(Nom("", insert_token(slice(start, start+1))), ex.msg)
		return None
	try:
		statements = Transducer(text, report).tour(tree.body)
	except NotStarlark:
		assert report.sick()
		return None
	return syntax.Module(statements, path)

def parse_file(path:Path, report:Report) -> Optional[syntax.Module]:
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except FileNotFoundError:
		report.no_such_file(path)
		return None
	except (OSError, UnicodeDecodeError):
		report.broken_file(path)
		return None
	return parse_text(text, path, report)

"""
Best-effort detection of coarse types: string, int, dict, depset.

This is not a type system. It never proves the absence of a type error;
it merely collects facts that a linter can use to spot things like a dict
being used as a depset. Whatever is in doubt is left Unknown, which means:
not in the map at all.

The walk is a single pass, top to bottom, with no fixpoint. In consequence,
a function which mentions a module-level name assigned further down the file
does not see that name's type, even though at run time it would. That is a
known and accepted limitation.
"""
from collections.abc import Mapping
from typing import Iterator, Optional, Sequence
from boozetools.support.foundation import Visitor

from . import syntax
from .diagnostics import Report
from .ontology import Nom, ValueExpression, Statement
from .primitive import TypeTag, DICT, BUILTIN_CONSTRUCTORS, type_of_literal, type_of_builtin_call
from .space import ScopeChain

class TypeMap(Mapping):
	""" From syntax node (by identity) to TypeTag. Each node is written at most once. """
	def __init__(self):
		self._tags: dict[ValueExpression, TypeTag] = {}

	def __getitem__(self, node: ValueExpression) -> TypeTag: return self._tags[node]
	def __iter__(self) -> Iterator[ValueExpression]: return iter(self._tags)
	def __len__(self) -> int: return len(self._tags)

	def _record(self, node: ValueExpression, tag: TypeTag):
		assert isinstance(tag, TypeTag), tag
		assert node not in self._tags, node
		self._tags[node] = tag

def _combine(left: Optional[TypeTag], right: Optional[TypeTag]) -> Optional[TypeTag]:
	# One known operand decides, from either side.
	# Two known operands stay Unknown: there's no basis to prefer either.
	if left is None: return right
	if right is None: return left
	return None

class TypeDetector(Visitor):
	"""
	Expression visit-methods answer a TypeTag or None. The resolve method
	wraps them so that every known answer lands in the type-map.
	Statement visit-methods answer nothing; they drive the scope chain.

	One detector makes one run. Scope chain and type-map belong to that run.
	"""
	types: TypeMap
	_scopes: ScopeChain

	def __init__(self, report: Optional[Report] = None, builtins: Mapping = BUILTIN_CONSTRUCTORS):
		self._report = report or Report(verbose=False)
		self._builtins = builtins
		self._scopes = ScopeChain()
		self.types = TypeMap()
		self._spent = False

	def detect(self, module: syntax.Module) -> TypeMap:
		assert not self._spent, "A TypeDetector is good for one run."
		self._spent = True
		self._report.info("Detecting types", module.source_path)
		self.tour(module.statements)
		assert self._scopes.depth == 1, self._scopes.depth
		return self.types

	def resolve(self, expr: ValueExpression) -> Optional[TypeTag]:
		tag = self.visit(expr)
		if tag is not None:
			self.types._record(expr, tag)
		return tag

	def tour(self, statements: Sequence[Statement]) -> None:
		for s in statements: self.visit(s)

	def _assign(self, target: syntax.Target, tag: Optional[TypeTag]):
		if isinstance(target, Nom):
			self._scopes.assign(target.text, tag)
		elif isinstance(target, syntax.Destructure):
			# Not modeled: the names become local, but nothing gets a type.
			for t in target.elts: self._assign(t, None)
		else:
			# d[k] = v and x.y = v: these read d, k, and x; they bind nothing.
			self.resolve(target)

	def _enter_function(self, params: Sequence[syntax.FormalParameter], nom: Optional[Nom] = None):
		""" Defaults evaluate where the definition is; parameters live inside. """
		defaults = [(p, None if p.default is None else self.resolve(p.default)) for p in params]
		if nom is not None:
			self._scopes.declare(nom.text)
		self._scopes.push()
		for p, tag in defaults:
			self._scopes.assign(p.key(), tag)

	######################################################
	# Statements

	def visit_Assignment(self, stmt: syntax.Assignment):
		tag = self.resolve(stmt.expr)
		for target in stmt.targets:
			self._assign(target, tag)

	def visit_AugmentedAssignment(self, stmt: syntax.AugmentedAssignment):
		tag = _combine(self.resolve(stmt.target), self.resolve(stmt.expr))
		if isinstance(stmt.target, syntax.Lookup):
			self._scopes.assign(stmt.target.nom.text, tag)

	def visit_ExprStmt(self, stmt: syntax.ExprStmt):
		self.resolve(stmt.expr)

	def visit_FunctionDef(self, fn: syntax.FunctionDef):
		self._enter_function(fn.params, fn.nom)
		self._report.info("Entering", fn)
		self.tour(fn.body)
		self._scopes.pop()

	def visit_Return(self, stmt: syntax.Return):
		if stmt.expr is not None:
			self.resolve(stmt.expr)

	def visit_IfStmt(self, stmt: syntax.IfStmt):
		self.resolve(stmt.test)
		self.tour(stmt.body)
		self.tour(stmt.orelse)

	def visit_ForStmt(self, stmt: syntax.ForStmt):
		self.resolve(stmt.iterable)
		self._assign(stmt.target, None)
		self.tour(stmt.body)

	def visit_Load(self, stmt: syntax.Load):
		for symbol in stmt.vocab:
			self._scopes.declare(symbol.hither.text)

	def visit_Skip(self, stmt: syntax.Skip): pass

	######################################################
	# Expressions

	def visit_Literal(self, expr: syntax.Literal):
		return type_of_literal(expr.value)

	def visit_Lookup(self, expr: syntax.Lookup):
		return self._scopes.lookup(expr.nom.text)

	def visit_Splat(self, expr: syntax.Splat):
		self.resolve(expr.expr)

	def visit_Call(self, expr: syntax.Call):
		self.resolve(expr.fn_exp)
		for a in expr.args:
			self.resolve(a)
		for kw in expr.keywords:
			# The keyword itself is only a label at the call site.
			self.resolve(kw.expr)
		return type_of_builtin_call(expr.callee_name(), self._builtins)

	def visit_DictDisplay(self, expr: syntax.DictDisplay):
		for key, value in expr.entries:
			self.resolve(key)
			self.resolve(value)
		return DICT

	def visit_ListDisplay(self, expr: syntax.ListDisplay):
		for e in expr.elts: self.resolve(e)

	def visit_TupleDisplay(self, expr: syntax.TupleDisplay):
		for e in expr.elts: self.resolve(e)

	def _comprehension(self, clauses: Sequence[syntax.Clause]):
		# The first iterable evaluates outside; everything after sees the loop variables.
		head = clauses[0]
		self.resolve(head.iterable)
		self._scopes.push()
		self._assign(head.target, None)
		for clause in clauses[1:]:
			self.visit(clause)

	def visit_ForClause(self, clause: syntax.ForClause):
		self.resolve(clause.iterable)
		self._assign(clause.target, None)

	def visit_IfClause(self, clause: syntax.IfClause):
		self.resolve(clause.test)

	def visit_ListComprehension(self, expr: syntax.ListComprehension):
		self._comprehension(expr.clauses)
		self.resolve(expr.elt)
		self._scopes.pop()

	def visit_DictComprehension(self, expr: syntax.DictComprehension):
		self._comprehension(expr.clauses)
		self.resolve(expr.entry.key)
		self.resolve(expr.entry.value)
		self._scopes.pop()
		return DICT

	def visit_BinExp(self, expr: syntax.BinExp):
		return _combine(self.resolve(expr.lhs), self.resolve(expr.rhs))

	visit_Comparison = visit_BinExp
	visit_ShortCutExp = visit_BinExp

	def visit_UnaryExp(self, expr: syntax.UnaryExp):
		self.resolve(expr.arg)

	def visit_Cond(self, expr: syntax.Cond):
		self.resolve(expr.then_part)
		self.resolve(expr.if_part)
		self.resolve(expr.else_part)

	def visit_FieldReference(self, expr: syntax.FieldReference):
		self.resolve(expr.lhs)

	def visit_Index(self, expr: syntax.Index):
		self.resolve(expr.lhs)
		self.resolve(expr.index)

	def visit_Slice(self, expr: syntax.Slice):
		self.resolve(expr.lhs)
		for bound in expr.bounds:
			if bound is not None: self.resolve(bound)

	def visit_LambdaForm(self, expr: syntax.LambdaForm):
		self._enter_function(expr.params)
		self.resolve(expr.body)
		self._scopes.pop()

def detect_types(module: syntax.Module, report: Optional[Report] = None, builtins: Mapping = BUILTIN_CONSTRUCTORS) -> TypeMap:
	return TypeDetector(report, builtins).detect(module)

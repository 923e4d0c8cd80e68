"""
The set of syntax-tree nodes in simple form.
The front end calls these constructors bottom-up while it transduces Python's parse tree.
This is a closed set: the detector has a visit-method for every concrete class in here.
Class-level annotations describe the fields so the IDE can keep later code honest.
"""
from pathlib import Path
from typing import Optional, Any, Sequence, NamedTuple, Union
from .ontology import Nom, Node, ValueExpression, Statement

##########################################################################
#  Expressions

class Literal(ValueExpression):
	def __init__(self, value: Any, spot: int):
		self.value, self.spot = value, spot
	def __str__(self): return "<Literal %r>" % (self.value,)

class Lookup(ValueExpression):
	""" A name in value context: a read of whatever the name refers to. """
	def __init__(self, nom: Nom): self.nom, self.spot = nom, nom.spot
	def __str__(self): return "<ref:%s>" % self.nom.text

class Splat(ValueExpression):
	""" The *args or **kwargs of a call site """
	def __init__(self, star: str, expr: ValueExpression, spot: int):
		assert star in ("*", "**"), star
		self.star, self.expr, self.spot = star, expr, spot

class KeywordArgument(Node):
	"""
	The name here is a label at the call site, not a reference to anything,
	which is why it is a bare Nom and not a Lookup.
	"""
	def __init__(self, nom: Nom, expr: ValueExpression):
		self.nom, self.expr, self.spot = nom, expr, nom.spot

class Call(ValueExpression):
	def __init__(self, fn_exp: ValueExpression, args: Sequence[ValueExpression], keywords: Sequence[KeywordArgument], spot: int):
		self.fn_exp, self.args, self.keywords, self.spot = fn_exp, args, keywords, spot
	def __str__(self):
		return "%s(%s)" % (self.fn_exp, ', '.join(map(str, self.args)))
	def callee_name(self) -> Optional[str]:
		""" Only a direct, unqualified name counts. """
		if isinstance(self.fn_exp, Lookup):
			return self.fn_exp.nom.text

class DictEntry(NamedTuple):
	key: ValueExpression
	value: ValueExpression

class DictDisplay(ValueExpression):
	def __init__(self, entries: Sequence[DictEntry], spot: int):
		self.entries, self.spot = entries, spot

class ListDisplay(ValueExpression):
	def __init__(self, elts: Sequence[ValueExpression], spot: int):
		self.elts, self.spot = elts, spot

class TupleDisplay(ValueExpression):
	def __init__(self, elts: Sequence[ValueExpression], spot: int):
		self.elts, self.spot = elts, spot

class ForClause(NamedTuple):
	target: "Target"
	iterable: ValueExpression

class IfClause(NamedTuple):
	test: ValueExpression

Clause = Union[ForClause, IfClause]

class ListComprehension(ValueExpression):
	def __init__(self, elt: ValueExpression, clauses: Sequence[Clause], spot: int):
		assert isinstance(clauses[0], ForClause)
		self.elt, self.clauses, self.spot = elt, clauses, spot

class DictComprehension(ValueExpression):
	def __init__(self, entry: DictEntry, clauses: Sequence[Clause], spot: int):
		assert isinstance(clauses[0], ForClause)
		self.entry, self.clauses, self.spot = entry, clauses, spot

class Binary(ValueExpression):
	def __init__(self, lhs: ValueExpression, op: str, rhs: ValueExpression, spot: int):
		self.lhs, self.op, self.rhs, self.spot = lhs, op, rhs, spot
	def __str__(self): return "(%s %s %s)" % (self.lhs, self.op, self.rhs)

class BinExp(Binary):
	""" Arithmetic and bitwise operators: the ones whose result follows an operand. """

class Comparison(Binary):
	""" The ones that answer true or false """

class ShortCutExp(Binary):
	""" and / or """

class UnaryExp(ValueExpression):
	def __init__(self, op: str, arg: ValueExpression, spot: int):
		self.op, self.arg, self.spot = op, arg, spot

class Cond(ValueExpression):
	def __init__(self, then_part: ValueExpression, if_part: ValueExpression, else_part: ValueExpression, spot: int):
		self.then_part, self.if_part, self.else_part = then_part, if_part, else_part
		self.spot = spot

class FieldReference(ValueExpression):
	def __init__(self, lhs: ValueExpression, field_name: Nom, spot: int):
		self.lhs, self.field_name, self.spot = lhs, field_name, spot
	def __str__(self): return "(%s.%s)" % (self.lhs, self.field_name.text)

class Index(ValueExpression):
	def __init__(self, lhs: ValueExpression, index: ValueExpression, spot: int):
		self.lhs, self.index, self.spot = lhs, index, spot

class Slice(ValueExpression):
	def __init__(self, lhs: ValueExpression, lower, upper, step, spot: int):
		self.lhs, self.spot = lhs, spot
		self.bounds: tuple[Optional[ValueExpression], ...] = (lower, upper, step)

class FormalParameter(Node):
	""" kind is "" for an ordinary parameter, else "*" or "**". """
	def __init__(self, nom: Nom, default: Optional[ValueExpression], kind: str = ""):
		self.nom, self.default, self.kind, self.spot = nom, default, kind, nom.spot
	def key(self): return self.nom.key()
	def __repr__(self): return "<:%s%s>" % (self.kind, self.nom.text)

class LambdaForm(ValueExpression):
	def __init__(self, params: Sequence[FormalParameter], body: ValueExpression, spot: int):
		self.params, self.body, self.spot = params, body, spot

##########################################################################
#  Assignment targets

class Destructure(Node):
	""" A tuple or list on the left of an assignment or in a for-clause """
	def __init__(self, elts: Sequence["Target"], spot: int):
		self.elts, self.spot = elts, spot

# A plain Nom is a (re-)binding. Index and FieldReference targets only read their parts.
Target = Union[Nom, Destructure, Index, FieldReference]

##########################################################################
#  Statements

class Assignment(Statement):
	""" Several targets means a chain, as in a = b = value. """
	def __init__(self, targets: Sequence[Target], expr: ValueExpression, spot: int):
		assert targets
		self.targets, self.expr, self.spot = targets, expr, spot

class AugmentedAssignment(Statement):
	""" The target reads before it writes, so a name target appears as a Lookup. """
	def __init__(self, target: Union[Lookup, Index, FieldReference], op: str, expr: ValueExpression, spot: int):
		self.target, self.op, self.expr, self.spot = target, op, expr, spot

class ExprStmt(Statement):
	def __init__(self, expr: ValueExpression, spot: int):
		self.expr, self.spot = expr, spot

class FunctionDef(Statement):
	def __init__(self, nom: Nom, params: Sequence[FormalParameter], body: Sequence[Statement], spot: int):
		self.nom, self.params, self.body, self.spot = nom, params, body, spot
	def __repr__(self):
		p = ", ".join(map(repr, self.params))
		return "{def|%s(%s)}" % (self.nom.text, p)

class Return(Statement):
	def __init__(self, expr: Optional[ValueExpression], spot: int):
		self.expr, self.spot = expr, spot

class IfStmt(Statement):
	def __init__(self, test: ValueExpression, body: Sequence[Statement], orelse: Sequence[Statement], spot: int):
		self.test, self.body, self.orelse, self.spot = test, body, orelse, spot

class ForStmt(Statement):
	def __init__(self, target: Target, iterable: ValueExpression, body: Sequence[Statement], spot: int):
		self.target, self.iterable, self.body, self.spot = target, iterable, body, spot

class ImportSymbol(NamedTuple):
	yonder : str   # The name as the loaded file exports it
	hither : Nom   # The name it gets here

class Load(Statement):
	def __init__(self, label: Literal, vocab: Sequence[ImportSymbol], spot: int):
		self.label, self.vocab, self.spot = label, vocab, spot

class Skip(Statement):
	""" pass, break, and continue: nothing to see here. """
	def __init__(self, word: str, spot: int):
		self.word, self.spot = word, spot

class Module:
	source_path: Optional[Path]
	statements: list[Statement]
	def __init__(self, statements: list[Statement], source_path: Optional[Path] = None):
		self.statements = statements
		self.source_path = source_path

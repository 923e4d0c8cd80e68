"""
Nested scopes for the type detector.

A Layer maps names to type tags for one lexical level: the module, or one
function (or lambda, or comprehension) body. Layers link outward to their
lexical parent, so the chain of layers mirrors the nesting of definitions.
The ScopeChain keeps a pointer to the innermost layer. Leaving a body drops
its layer on the floor, which is why one function's locals can never be seen
from a sibling function.
"""
from typing import Optional
from .primitive import TypeTag

class ScopeUnderflow(AssertionError):
	""" pop() without a matching push(): the driver has a bug. """

class Layer:
	"""
	Besides typed bindings, a layer can hold names that are local but untyped.
	Those stop the search for outer bindings without putting Unknown in the table.
	"""
	_bindings: dict[str, TypeTag]
	_declared: set[str]
	outer: Optional["Layer"]

	def __init__(self, outer: Optional["Layer"] = None):
		self._bindings, self._declared = {}, set()
		self.outer = outer

	def __contains__(self, name: str) -> bool:
		return name in self._bindings or name in self._declared

	def get(self, name: str) -> Optional[TypeTag]:
		return self._bindings.get(name)

	def bind(self, name: str, tag: TypeTag):
		assert isinstance(tag, TypeTag), tag
		self._declared.discard(name)
		self._bindings[name] = tag

	def declare(self, name: str):
		self._bindings.pop(name, None)
		self._declared.add(name)

	def __repr__(self):
		return "<Layer %r +%r>" % (self._bindings, sorted(self._declared))

class ScopeChain:
	_top: Layer

	def __init__(self):
		self._root = self._top = Layer()

	@property
	def depth(self) -> int:
		n, layer = 0, self._top
		while layer is not None:
			n, layer = n+1, layer.outer
		return n

	def push(self):
		self._top = Layer(self._top)

	def pop(self):
		if self._top is self._root:
			raise ScopeUnderflow("pop() of the module scope")
		self._top = self._top.outer

	def lookup(self, name: str) -> Optional[TypeTag]:
		layer = self._top
		while layer is not None:
			if name in layer: return layer.get(name)
			layer = layer.outer
		return None

	def bind(self, name: str, tag: TypeTag):
		self._top.bind(name, tag)

	def declare(self, name: str):
		self._top.declare(name)

	def assign(self, name: str, tag: Optional[TypeTag]):
		""" Bind if the tag is known; otherwise the name is merely local. """
		if tag is None: self.declare(name)
		else: self.bind(name, tag)

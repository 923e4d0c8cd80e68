"""
The most-fundamental classes of the syntax tree live apart from the rest,
so that the front end, the detector, and the diagnostics can all
refer to them without circular imports.

Nodes deliberately keep the default identity-based equality and hashing:
two textually identical expressions at different places are different keys.
"""

class Phrase:
	def left(self) -> int:
		""" Return the index of the leftmost token of this phrase """
		raise NotImplementedError(type(self))
	def right(self) -> int:
		""" Return the index of the rightmost token of this phrase """
		raise NotImplementedError(type(self))
	def span(self) -> tuple[int, int]: return self.left(), self.right()

class Nom(Phrase):
	""" Representing the occurrence of a name anywhere. """
	spot: int  # zero-spot means pre-defined or synthetic.
	def __init__(self, text, spot):
		assert isinstance(text, str)
		assert isinstance(spot, int) or spot is None, type(spot)
		self.text, self.spot = text, spot or 0
	def __repr__(self): return "<Name %r>" % self.text
	def key(self): return self.text
	def left(self): return self.spot
	def right(self): return self.spot

class Node(Phrase):
	""" Everything the front end builds has one spot covering its whole extent. """
	spot: int
	def left(self): return self.spot
	def right(self): return self.spot

class ValueExpression(Node):
	""" The things that may receive a type tag. """

class Statement(Node):
	""" The things the detector walks in document order. """

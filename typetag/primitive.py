"""
The coarse type tags, and the fixed table of built-in constructors.

Unknown is not a tag. Throughout, it is spelled None: absent from the
type-map, absent from any scope.
"""
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional

class TypeTag(Enum):
	STRING = "string"
	INT = "int"
	DICT = "dict"
	DEPSET = "depset"
	def __str__(self): return self.value

STRING, INT, DICT, DEPSET = TypeTag.STRING, TypeTag.INT, TypeTag.DICT, TypeTag.DEPSET

# A call to one of these names produces the same type no matter the arguments.
BUILTIN_CONSTRUCTORS = MappingProxyType({
	"dict": DICT,
	"depset": DEPSET,
	"str": STRING,
	"int": INT,
})

def type_of_literal(value: Any) -> Optional[TypeTag]:
	# bool is a subclass of int in Python, but not a number in Starlark.
	if isinstance(value, bool): return None
	if isinstance(value, str): return STRING
	if isinstance(value, int): return INT
	return None

def type_of_builtin_call(callee_name: Optional[str], registry=BUILTIN_CONSTRUCTORS) -> Optional[TypeTag]:
	if callee_name is None: return None
	return registry.get(callee_name)

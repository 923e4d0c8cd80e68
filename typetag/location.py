"""
Points and spans within a collection of source files, as plain integers.

Each syntax node carries one integer "spot". The front end registers the
character slice of the node under that spot, grouped into one segment per file.
Spot zero is reserved for things with no place in any file.

A segment keeps the text it was registered with. Parsing the same path twice
makes two segments, and the spans of each still point into their own text.
"""
from bisect import bisect_right
from pathlib import Path
from typing import NamedTuple, Optional
from boozetools.support.failureprone import LINEBREAK_MODE

# Where Python's tokenizer breaks lines, unlike str.splitlines.
LINE_BREAK = LINEBREAK_MODE["normal"]

class Span(NamedTuple):
	""" Aimed at whatever prints error messages and listings """
	path: Optional[Path]
	slice: slice
	text: str

	def excerpt(self) -> str:
		return self.text[self.slice]

_slices: list[slice] = []
_bounds: list[int] = []
_paths: list[Optional[Path]] = []
_texts: list[str] = []

def reset_location_index():
	for it in _slices, _bounds, _paths, _texts: it.clear()
	start_segment(None)
	insert_token(slice(0,0))

def start_segment(path:Optional[Path], text:str=""):
	assert isinstance(path, Path) or path is None
	_bounds.append(len(_slices)-1)
	_paths.append(path)
	_texts.append(text)

def insert_token(s:slice) -> int:
	index = len(_slices)
	_slices.append(s)
	return index

def lookup_token(index:int) -> Span:
	segment_index = bisect_right(_bounds, index)-1
	return Span(_paths[segment_index], _slices[index], _texts[segment_index])

def lookup_span(first: int, last:int) -> Span:
	left = lookup_token(first)
	right = lookup_token(last)
	assert left.text is right.text
	return Span(left.path, slice(left.slice.start, right.slice.stop), left.text)

class LineMap:
	"""
	Python's own parser reports positions as (line, UTF-8 byte column).
	This converts those into character offsets within the text, and back
	into one-based (row, column) for listings.
	"""
	def __init__(self, text:str):
		self._starts = [0] + [m.end() for m in LINE_BREAK.finditer(text)]
		self._lines = [text[a:b] for a, b in zip(self._starts, self._starts[1:] + [len(text)])]
		if self._lines and not self._lines[-1] and len(self._lines) > 1:
			# Text ending in a line break has no extra line after it.
			self._lines.pop()
			self._starts.pop()
		self._starts.append(len(text))

	def offset(self, lineno:int, col_offset:int) -> int:
		if lineno > len(self._lines):
			return self._starts[-1]
		line = self._lines[lineno-1]
		prefix = line.encode("utf-8")[:col_offset].decode("utf-8", errors="ignore")
		return self._starts[lineno-1] + len(prefix)

	def row_col(self, offset:int) -> tuple[int, int]:
		row = max(1, min(bisect_right(self._starts, offset), len(self._lines)))
		return row, offset - self._starts[row-1] + 1

reset_location_index()

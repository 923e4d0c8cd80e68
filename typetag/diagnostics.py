import sys, random
from pathlib import Path
from typing import Sequence, Optional
from boozetools.support.failureprone import SourceText, illustration

from .location import lookup_span
from .ontology import Phrase

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Hmm, ", "", ""]

	minced_oaths = [
		'Ack', 'Blargh', 'Confound it', 'Crud', 'Curses', 'Drat',
		'Fiddlesticks', 'Good Grief', 'Great Scott', 'Jeepers', 'Nuts', 'Rats',
	]

	resignations = [
		'That file is not Starlark as I know it.',
		'I cannot make heads or tails of this.',
		'I need to ask for help.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	"""
	Collects the issues the front end runs into, and carries the verbosity
	setting for the progress chatter of every pass.
	"""
	_issues : list["Pic"]

	def __init__(self, *, verbose:int, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	def sick(self): return bool(self._issues)

	@property
	def issues(self) -> Sequence["Pic"]: return tuple(self._issues)

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Methods the front end is likely to call:
	def syntax_error(self, guilty:Phrase, complaint:str):
		intro = "The parser got confused."
		problem = [Annotation(guilty, complaint)]
		self.issue(Pic(intro, problem))

	def not_starlark(self, guilty:Phrase, what:str):
		intro = "This is %s, which is Python but not Starlark."%what
		problem = [Annotation(guilty)]
		self.issue(Pic(intro, problem, ["Only the Starlark subset of Python syntax is understood."]))

	def malformed_load(self, guilty:Phrase):
		intro = "A load(...) needs a label string and then only string-literal symbols."
		self.issue(Pic(intro, [Annotation(guilty)]))

	def _file_error(self, path:Path, prefix:str):
		intro = prefix+" "+str(path)
		self.issue(Pic(intro, []))

	def no_such_file(self, path:Path):
		self._file_error(path, "I see no file called")

	def broken_file(self, path:Path):
		self._file_error(path, "Something went pear-shaped while trying to read")

class Annotation:
	path: Optional[Path]
	slice: slice
	text: str
	caption: str
	def __init__(self, node:Phrase, caption:str=""):
		span = lookup_span(*node.span())
		self.path = span.path
		self.slice = span.slice
		self.text = span.text
		self.caption = caption
	def illustrate(self):
		source = SourceText(self.text, filename=str(self.path))
		row, col = source.find_row_col(self.slice.start)
		single_line = source.line_of_text(row)
		width = max(1, self.slice.stop - self.slice.start)
		return illustration(single_line, col, width, prefix='% 6d |' % row, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	@property
	def intro(self): return self._intro
	def as_text(self):
		lines = [self._intro, ""]
		path = None
		for ann in self._anns:
			if ann.path != path:
				path = ann.path
				lines.append(str(path))
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()

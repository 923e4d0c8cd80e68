"""
Lists the coarse types detected in Starlark (BUILD and .bzl) files.

{0}

For example:

    typetag BUILD.bazel defs.bzl

prints one line per annotated expression, in document order:

    defs.bzl:3:6: dict: {{}}

    typetag -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path
from typing import Iterator

from .location import Span, LineMap, LINE_BREAK, lookup_span
from .primitive import TypeTag

parser = argparse.ArgumentParser(
	prog="typetag",
	description="Detect coarse types (string, int, dict, depset) in Starlark files.",
)
parser.add_argument("files", nargs="+", help="BUILD or .bzl files to examine.")
parser.add_argument('-v', "--verbose", action="count", help="Narrate progress on the standard error stream.")
parser.add_argument("--max-issues", type=int, default=3, help="Give up after this many parse problems. (Default: 3)")

def annotations(types) -> list[tuple[Span, TypeTag]]:
	""" The contents of a type-map, as source spans in document order. Outer before inner. """
	found = [(lookup_span(*node.span()), tag) for node, tag in types.items()]
	found.sort(key=lambda pair: (str(pair[0].path), pair[0].slice.start, -pair[0].slice.stop))
	return found

def listing(types) -> Iterator[str]:
	line_maps = {}
	for span, tag in annotations(types):
		if id(span.text) not in line_maps: line_maps[id(span.text)] = LineMap(span.text)
		row, col = line_maps[id(span.text)].row_col(span.slice.start)
		lines = LINE_BREAK.split(span.excerpt())
		snippet = lines[0] if len(lines) == 1 else lines[0] + " ..."
		yield "%s:%d:%d: %s: %s" % (span.path, row, col, tag, snippet)

def run(args) -> int:
	from .diagnostics import Report, TooManyIssues
	from .front_end import parse_file
	from .inference import detect_types
	report = Report(verbose=args.verbose, max_issues=args.max_issues)
	try:
		for name in args.files:
			module = parse_file(Path(name), report)
			if module is None: continue
			for line in listing(detect_types(module, report)):
				print(line)
	except TooManyIssues:
		report.complain_to_console()
		print(" *"*35, file=sys.stderr)
		print("Giving up after a few issues. One crisis at a time, eh?", file=sys.stderr)
		return 1
	if report.sick():
		report.complain_to_console()
		return 1
	return 0

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))

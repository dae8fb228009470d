"""Top-level driver for the Kaleidoscope front end.

The driver reads top-level constructs one at a time:

    top ::= definition | external | expression | ';'

It dispatches on the current token, asks the parser for the matching
construct and reports each one. A construct that fails to parse is reported
and one token is skipped before dispatch resumes, so an error only affects
the construct it occurred in.
"""

from __future__ import annotations
import json
import sys
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, List, Mapping, Optional, TextIO

from lexer import Lexer
from tokens import Token, TokenType
from ast_nodes import ASTNode
from errors import ParseResult
from parser import DEFAULT_BINOP_PRECEDENCE, Parser
from pretty_printer import PrettyPrinter
from ast_json import ast_to_json
from ast_viz import write_and_render

PROMPT = "kaleidoscope >>> "

_STATUS = {
    "definition": "Parsed a function definition",
    "extern": "Parsed an extern",
    "expression": "Parsed a top-level expression",
}


@dataclass(frozen=True)
class TopLevelOutcome:
    kind: str
    result: ParseResult

    @property
    def ok(self) -> bool:
        return self.result.ok


def lex(text: str) -> List[Token]:
    """Tokenize input string."""
    return Lexer(text).tokenize()


def iter_top_level(
    parser: Parser, on_separator: Optional[Callable[[], None]] = None
) -> Iterator[TopLevelOutcome]:
    """Yield one outcome per top-level construct until end of input."""
    while True:
        token = parser.current
        if token.type == TokenType.EOF:
            return

        # Top-level semicolons are separators only.
        if token.is_char(";"):
            if on_separator is not None:
                on_separator()
            parser.advance()
            continue

        if token.type == TokenType.DEF:
            kind, result = "definition", parser.parse_definition()
        elif token.type == TokenType.EXTERN:
            kind, result = "extern", parser.parse_extern()
        else:
            kind, result = "expression", parser.parse_top_level_expr()

        if not result.ok:
            # Skip token for error recovery
            parser.advance()

        yield TopLevelOutcome(kind, result)


def parse_program(
    text: str, precedence: Optional[Mapping[str, int]] = None
) -> List[TopLevelOutcome]:
    """Parse every top-level construct of a text."""
    return list(iter_top_level(Parser.from_text(text, precedence)))


def report(
    outcome: TopLevelOutcome,
    *,
    print_ast: bool = True,
    print_surface: bool = False,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> None:
    out = out or sys.stdout
    err = err or sys.stderr
    if not outcome.ok:
        print(f"Error: {outcome.result.error}", file=err)
        return

    print(_STATUS[outcome.kind], file=err)
    node = outcome.result.node
    if print_ast:
        print(PrettyPrinter.print_ast(node), file=out)
    if print_surface:
        print(PrettyPrinter.print_surface(node), file=out)


def process_program(
    text: str,
    *,
    precedence: Optional[Mapping[str, int]] = None,
    print_tokens: bool = False,
    print_ast: bool = True,
    print_surface: bool = False,
    dump_ast_path: Optional[str] = None,
    viz_path: Optional[str] = None,
    viz_format: str = "svg",
) -> List[TopLevelOutcome]:
    """Process a whole program: lex, parse each construct and optionally print stages.

    Returns the outcomes so callers can inspect what was parsed.
    """
    if print_tokens:
        tokens = lex(text)
        print(f"Tokens ({len(tokens)}):")
        for i, token in enumerate(tokens[:50]):
            print(f"  {i:3}: {token}")
        if len(tokens) > 50:
            print(f"  ... and {len(tokens) - 50} more")

    outcomes: List[TopLevelOutcome] = []
    for outcome in iter_top_level(Parser.from_text(text, precedence)):
        report(outcome, print_ast=print_ast, print_surface=print_surface)
        outcomes.append(outcome)

    nodes: List[ASTNode] = [o.result.node for o in outcomes if o.ok]

    if dump_ast_path:
        try:
            with open(dump_ast_path, "w", encoding="utf-8") as fh:
                json.dump([ast_to_json(n) for n in nodes], fh, indent=2, allow_nan=False)
            print(f"Wrote AST JSON to {dump_ast_path}", file=sys.stderr)
        except (OSError, ValueError) as e:
            print(f"Failed to write AST JSON to {dump_ast_path}: {e}", file=sys.stderr)

    if viz_path:
        try:
            write_and_render(nodes, viz_path, fmt=viz_format)
            print(f"Wrote AST visualization to {viz_path}.{viz_format}", file=sys.stderr)
        except Exception as e:
            print(f"Failed to render AST visualization to {viz_path}: {e}", file=sys.stderr)

    return outcomes


def interactive_mode(
    *,
    precedence: Optional[Mapping[str, int]] = None,
    print_ast: bool = True,
    print_surface: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Parse constructs from a character stream as they are typed."""
    stream = stream or sys.stdin

    def _prompt() -> None:
        print(PROMPT, end="", file=sys.stderr, flush=True)

    _prompt()
    parser = Parser(Lexer(stream), precedence)
    try:
        for outcome in iter_top_level(parser, on_separator=_prompt):
            report(outcome, print_ast=print_ast, print_surface=print_surface)
    except KeyboardInterrupt:
        pass
    print(file=sys.stderr)


def parse_binop(option: str) -> tuple[str, int]:
    """Parse an `OP=PRECEDENCE` command-line option."""
    op, sep, level = option.rpartition("=")
    if not sep or len(op) != 1:
        raise ValueError(f"expected OP=PRECEDENCE with a single-character OP, got {option!r}")
    return op, int(level)


def main(argv: Optional[List[str]] = None) -> int:
    import argparse

    parser = argparse.ArgumentParser(
        description="Parse Kaleidoscope programs from a file or interactively from stdin"
    )
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--file", "-f", dest="file", help="Path to source file to process"
    )
    group.add_argument(
        "--interactive",
        "-i",
        dest="interactive",
        action="store_true",
        help="Read constructs from stdin as they are typed",
    )
    # printing options
    parser.add_argument(
        "--print-tokens", dest="print_tokens", action="store_true", help="Print tokens"
    )
    parser.add_argument(
        "--no-ast", dest="print_ast", action="store_false", help="Do not print the AST"
    )
    parser.add_argument(
        "--surface",
        dest="print_surface",
        action="store_true",
        help="Print each construct as fully parenthesized source",
    )
    parser.set_defaults(print_tokens=False, print_ast=True, print_surface=False)
    parser.add_argument(
        "--dump-ast", dest="dump_ast", help="Path to write the parsed ASTs as JSON"
    )
    parser.add_argument(
        "--viz-ast",
        dest="viz_ast",
        help="Path (without extension) to write a Graphviz rendering of the ASTs",
    )
    parser.add_argument(
        "--viz-format",
        dest="viz_format",
        default="svg",
        help="Format for Graphviz output (svg, png, pdf, etc)",
    )
    parser.add_argument(
        "--binop",
        dest="binops",
        action="append",
        default=[],
        metavar="OP=PREC",
        help="Add or override a binary operator precedence (repeatable)",
    )

    args = parser.parse_args(argv)

    precedence: Dict[str, int] = dict(DEFAULT_BINOP_PRECEDENCE)
    for option in args.binops:
        try:
            op, level = parse_binop(option)
        except ValueError as e:
            parser.error(f"--binop: {e}")
        precedence[op] = level

    if args.interactive:
        interactive_mode(
            precedence=precedence,
            print_ast=args.print_ast,
            print_surface=args.print_surface,
        )
    elif args.file:
        try:
            with open(args.file, "r", encoding="utf-8") as fh:
                text = fh.read()
        except OSError as e:
            print(f"Failed to read file {args.file}: {e}", file=sys.stderr)
            return 1

        process_program(
            text,
            precedence=precedence,
            print_tokens=args.print_tokens,
            print_ast=args.print_ast,
            print_surface=args.print_surface,
            dump_ast_path=args.dump_ast,
            viz_path=args.viz_ast,
            viz_format=args.viz_format,
        )
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())

from lexer import Lexer
from parser import Parser
from pretty_printer import PrettyPrinter


def lex_pairs(text: str):
    """Return (type, value) pairs for the tokens of a source text."""
    return [(t.type, t.value) for t in Lexer(text).tokenize()]


def parse_expr(text: str, precedence=None):
    """Parse a single top-level expression and return its body."""
    return Parser.from_text(text, precedence).parse_top_level_expr().unwrap().body


def surface(text: str, precedence=None) -> str:
    """Convenience: parse an expression and print it fully parenthesized."""
    return PrettyPrinter.print_surface(parse_expr(text, precedence))

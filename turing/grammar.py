"""
Grammar for the Turing machine DSL.

A program looks like:

    /// Adds one to a unary number
    {111};
    I = {q0};
    F = {q2};
    compose = {inc};
    (q0, 1, 1, R, q0);
    (q0, 0, 0, L, q2);

Records must appear in that order. `//` starts a line comment. The
movement letter of an instruction is R or L; any other identifier halts.
"""

import logging

import lark
from lark.exceptions import UnexpectedCharacters, UnexpectedEOF, UnexpectedInput, UnexpectedToken

from turing.errors import ErrorPosition, ParseError
from turing.instruction import Instruction, Movement

log = logging.getLogger(__name__)

GRAMMAR = r"""
start: [description] tape initial_state final_state [compose] (instruction ";")*
instructions: (instruction ";")*

description: DESCRIPTION
tape: LBRACE BIT* RBRACE ";"
initial_state: "I" "=" LBRACE NAME RBRACE ";"
final_state: "F" "=" LBRACE NAME ("," NAME)* RBRACE ";"
compose: "compose" "=" LBRACE NAME ("," NAME)* RBRACE ";"
instruction: "(" NAME "," BIT "," BIT "," NAME "," NAME ")"

DESCRIPTION.2: /\/\/\/[^\n]*/
COMMENT: /\/\/[^\n]*/
LBRACE: "{"
RBRACE: "}"
BIT: "0" | "1"
NAME: /[A-Za-z0-9_]+/

%import common.WS
%ignore WS
%ignore COMMENT
"""

# Readable names for the terminals reported in "expected" sets
TERMINAL_NAMES = {
    "LBRACE": "'{'",
    "RBRACE": "'}'",
    "LPAR": "'('",
    "RPAR": "')'",
    "COMMA": "','",
    "SEMICOLON": "';'",
    "EQUAL": "'='",
    "I": "'I'",
    "F": "'F'",
    "COMPOSE": "'compose'",
    "BIT": "a tape value (0 or 1)",
    "NAME": "an identifier",
    "DESCRIPTION": "a description (///)",
    "$END": "end of input",
}

_PARSER = lark.Lark(
    GRAMMAR,
    start=["start", "instruction", "instructions"],
    parser="lalr",
    lexer="contextual",
    propagate_positions=True,
    maybe_placeholders=True,
)


def record_rules():
    """Names of the grammar rules that produce top-level records."""
    names = {rule.origin.name for rule in _PARSER.rules}
    names = {str(name) for name in names}
    return {name for name in names if not name.startswith("_")} - {"start", "instructions"}


def _expected(names):
    return sorted({TERMINAL_NAMES.get(name, name) for name in names or ()})


def _to_parse_error(exc, source):
    lines = source.splitlines()
    line = getattr(exc, "line", None)
    column = getattr(exc, "column", None)
    end = None

    if isinstance(exc, UnexpectedToken):
        token = exc.token
        expected = _expected(exc.expected)
        found = "end of input" if token.type == "$END" else repr(str(token))
        end_line = getattr(token, "end_line", None)
        end_column = getattr(token, "end_column", None)
        if isinstance(end_line, int) and isinstance(end_column, int):
            if token.type == "$END":
                # $END borrows the last token's span, point just past it
                line, column = end_line, end_column
            else:
                end = (end_line, end_column)
    elif isinstance(exc, UnexpectedCharacters):
        expected = _expected(exc.allowed)
        found = repr(exc.char)
    elif isinstance(exc, UnexpectedEOF):
        expected = _expected(exc.expected)
        found = "end of input"
    else:
        expected = []
        found = str(exc)

    if not isinstance(line, int) or line < 1:
        # End of input: point just past the last character
        line = max(len(lines), 1)
        column = len(lines[-1]) + 1 if lines else 1
    if not isinstance(column, int) or column < 1:
        column = 1

    code = lines[line - 1] if 0 < line <= len(lines) else ""
    return ParseError(expected, found, ErrorPosition((line, column), end), code)


def parse(source, start="start"):
    """Parse DSL source into a lark tree, raising ParseError on failure."""
    try:
        return _PARSER.parse(source, start=start)
    except UnexpectedInput as exc:
        error = _to_parse_error(exc, source)
        log.debug("Parse failed: %s", error)
        raise error from None


def instruction_from_tree(tree):
    from_state, from_symbol, to_symbol, movement, to_state = [
        child for child in tree.children if isinstance(child, lark.Token)
    ]
    return Instruction(
        from_state=str(from_state),
        from_symbol=int(from_symbol),
        to_symbol=int(to_symbol),
        movement=Movement.parse(str(movement)),
        to_state=str(to_state),
    )


def parse_instruction(text):
    """Parse a single `(state, bit, bit, movement, state)` tuple."""
    return instruction_from_tree(parse(text.strip(), start="instruction"))


def parse_instructions(text):
    """Parse a block of `instruction;` records, e.g. a library body."""
    tree = parse(text, start="instructions")
    return [instruction_from_tree(child) for child in tree.children]

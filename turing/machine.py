import logging
from collections import Counter

import numpy as np
from lark import Token

from turing.errors import CompilerError, CompilerWarning, ErrorPosition, SemanticError
from turing.grammar import instruction_from_tree, parse, record_rules
from turing.instruction import Instruction, Movement
from turing.libraries import default_registry
from turing.output import Defined, Undefined

log = logging.getLogger(__name__)

# Blank cells kept on each side of the head
TAPE_MARGIN = 3


class TuringMachine:
    def __init__(self, tape, initial_state, final_states=(), instructions=(),
                 description=None, code="", composed=(), warnings=()):
        self.instructions = {}
        for instruction in instructions:
            self.add_transition(instruction)
        self.final_states = set(final_states)
        self.initial_state = initial_state
        self.current_state = initial_state
        self.previous_state = None
        self.tape = [int(symbol) for symbol in tape]
        self.tape_position = 0
        self.description = description
        self.code = code
        self.composed = list(composed)
        self.warnings = list(warnings)
        self.frequencies = Counter()
        self.steps = 0

        self._initial_tape = list(self.tape)
        self._grow_tape()

    @classmethod
    def build(cls, source, registry=None):
        """Compile DSL source into a machine. Raises CompilerError on invalid input."""
        return MachineBuilder(source, registry).build()

    def add_transition(self, instruction):
        self.instructions[instruction.key] = instruction

    # === TAPE ===
    def _grow_tape(self):
        while self.tape_position < TAPE_MARGIN:
            self.tape.insert(0, 0)
            self.tape_position += 1
        while self.tape_position > len(self.tape) - TAPE_MARGIN - 1:
            self.tape.append(0)

    @property
    def symbol(self):
        return self.tape[self.tape_position]

    # === EXECUTION ===
    def current_instruction(self):
        """The rule that applies to the current state and symbol, or None."""
        key = (self.current_state, self.symbol)
        instruction = self.instructions.get(key)
        if instruction is not None:
            return instruction
        if self.current_state in self.final_states:
            return Instruction.halt(*key)
        return None

    def step(self):
        """Apply one transition. Returns False when no rule applies."""
        instruction = self.current_instruction()
        if instruction is None:
            log.debug("No instruction for (%s, %d)", self.current_state, self.symbol)
            return False

        self.tape[self.tape_position] = instruction.to_symbol

        if instruction.movement is Movement.LEFT:
            if self.tape_position == 0:
                self.tape.insert(0, 0)
            else:
                self.tape_position -= 1
        elif instruction.movement is Movement.RIGHT:
            if self.tape_position == len(self.tape) - 1:
                self.tape.append(0)
            self.tape_position += 1

        self._grow_tape()

        self.previous_state = self.current_state
        self.current_state = instruction.to_state
        self.frequencies[self.current_state] += 1
        self.steps += 1
        return True

    def is_undefined(self):
        return self.current_instruction() is None

    def finished(self):
        if self.current_state not in self.final_states:
            return False
        if self.previous_state != self.current_state:
            return False
        instruction = self.current_instruction()
        return instruction is not None and instruction.is_halt()

    def is_infinite_loop(self, threshold):
        """Heuristic: some state has been entered at least `threshold` times."""
        return any(count >= threshold for count in self.frequencies.values())

    def reset_frequencies(self):
        self.frequencies.clear()

    def final_result(self):
        """Step until finished. Returns (total steps, number of 1s on the tape)."""
        while not self.finished():
            if not self.step():
                break
        return self.steps, self.tape_sum()

    def run(self, max_steps=10000, threshold=None):
        """Step until finished, undefined, max_steps or a suspected loop."""
        start = self.steps
        while not self.finished() and self.steps - start < max_steps:
            if threshold is not None and self.is_infinite_loop(threshold):
                log.warning("State visited %d times, assuming an infinite loop", threshold)
                break
            if not self.step():
                break
        return self.tape_value()

    def reset(self):
        self.tape = list(self._initial_tape)
        self.tape_position = 0
        self.current_state = self.initial_state
        self.previous_state = None
        self.frequencies.clear()
        self.steps = 0
        self._grow_tape()

    # === OUTPUT ===
    def tape_sum(self):
        return int(np.count_nonzero(self.tape))

    def tape_value(self):
        if self.is_undefined():
            return Undefined(self.steps)
        return Defined(self.steps, self.tape_sum())

    def values(self):
        """Decode the tape as unary numbers: a run of n ones is n - 1."""
        cells = np.concatenate(([0], np.asarray(self.tape, dtype=np.int8), [0]))
        edges = np.flatnonzero(np.diff(cells))
        lengths = edges[1::2] - edges[0::2]
        return [int(length) - 1 for length in lengths]

    def render(self, window=None):
        """Tape cells on one line, a caret under the head on the next."""
        start, end = 0, len(self.tape)
        if window is not None:
            start = max(0, self.tape_position - window)
            end = min(len(self.tape), self.tape_position + window + 1)

        tape_str = ""
        head_str = ""
        for pos in range(start, end):
            tape_str += f"{self.tape[pos]} "
            head_str += "^ " if pos == self.tape_position else "  "
        return f"{tape_str}\n{head_str}"

    def __str__(self):
        return self.render()


class MachineBuilder:
    """Walks the parse tree of a program and assembles a TuringMachine."""

    def __init__(self, source, registry=None):
        self.source = source
        self.lines = source.splitlines()
        self.registry = registry if registry is not None else default_registry()

        self.description = None
        self.tape = []
        self.initial_state = ""
        self.final_states = []
        self.composed = []
        self.instructions = {}
        self.own_instructions = []

    def build(self):
        try:
            tree = parse(self.source)
            for record in tree.children:
                if record is None:
                    continue
                handler = self.HANDLERS.get(str(record.data))
                if handler is None:
                    raise CompilerError(
                        f"Unhandled record: {record.data}", self._position(record), self._code(record)
                    )
                handler(self, record)
        except CompilerError as e:
            log.error("Could not build the machine: %s", e)
            raise

        return TuringMachine(
            tape=self.tape,
            initial_state=self.initial_state,
            final_states=self.final_states,
            instructions=self.instructions.values(),
            description=self.description,
            code=self.source,
            composed=self.composed,
            warnings=self._collisions(),
        )

    # === POSITIONS ===
    def _position(self, tree):
        meta = tree.meta
        if not getattr(meta, "empty", True):
            return ErrorPosition((meta.line, meta.column), (meta.end_line, meta.end_column))
        tokens = [child for child in tree.children if isinstance(child, Token)]
        if tokens:
            return ErrorPosition(
                (tokens[0].line, tokens[0].column), (tokens[-1].end_line, tokens[-1].end_column)
            )
        return ErrorPosition((1, 1))

    def _code(self, tree):
        line = self._position(tree).start[0]
        return self.lines[line - 1] if 0 < line <= len(self.lines) else ""

    def _token_position(self, token):
        return ErrorPosition((token.line, token.column), (token.end_line, token.end_column))

    # === RECORDS ===
    def _description(self, record):
        if self.description is None:
            text = str(record.children[0]).replace("///", "").strip()
            if text:
                self.description = text
                log.debug("Found description: %r", text)

    def _tape(self, record):
        self.tape = [int(token) for token in record.children if token.type == "BIT"]
        log.debug("Tape: %s", self.tape)

        if 1 not in self.tape:
            raise SemanticError(
                "Expected at least a 1 in the tape", self._position(record), self._code(record)
            )

    def _initial_state(self, record):
        (name,) = [token for token in record.children if token.type == "NAME"]
        self.initial_state = str(name)
        log.debug("The initial tape state is %r", self.initial_state)

    def _final_state(self, record):
        self.final_states = [str(token) for token in record.children if token.type == "NAME"]
        log.debug("The final tape states are %s", self.final_states)

    def _compose(self, record):
        for token in record.children:
            if token.type != "NAME":
                continue
            library = self.registry.get(str(token))
            if library is None:
                raise SemanticError(
                    f"Unknown library {str(token)!r}, expected one of: {', '.join(self.registry)}",
                    self._token_position(token),
                    self.lines[token.line - 1],
                )
            self.composed.append(library)
            for instruction in library.instructions:
                self.instructions[instruction.key] = instruction
            log.debug("Composed library %r (%d instructions)", library.name, len(library.instructions))

    def _instruction(self, record):
        instruction = instruction_from_tree(record)
        self.instructions[instruction.key] = instruction
        self.own_instructions.append((instruction, self._position(record)))
        log.debug("Found instruction %s", instruction)

    HANDLERS = {
        "description": _description,
        "tape": _tape,
        "initial_state": _initial_state,
        "final_state": _final_state,
        "compose": _compose,
        "instruction": _instruction,
    }

    def _collisions(self):
        """Warn about program rules that reach into a library's internal states."""
        warnings = []
        for library in self.composed:
            for instruction, position in self.own_instructions:
                if instruction.from_state in library.used_states and instruction.from_state != library.final_state:
                    message = (
                        f"Instruction {instruction} starts from state {instruction.from_state!r}, "
                        f"used internally by library {library.name!r}"
                    )
                elif instruction.to_state in library.used_states and instruction.to_state != library.initial_state:
                    message = (
                        f"Instruction {instruction} jumps to state {instruction.to_state!r}, "
                        f"used internally by library {library.name!r}"
                    )
                else:
                    continue
                log.warning("%s", message)
                warnings.append(CompilerWarning(message, position))
        return warnings


def check_handlers():
    """Every record the grammar can produce must have a builder handler."""
    missing = record_rules() - set(MachineBuilder.HANDLERS)
    if missing:
        raise RuntimeError(f"Grammar records without a handler: {', '.join(sorted(missing))}")


check_handlers()


def build(source, registry=None):
    return TuringMachine.build(source, registry)

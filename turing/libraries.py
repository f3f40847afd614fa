"""
Catalog of composable instruction sets.

A program pulls libraries in with `compose = {sum, next};` and jumps into
a library by transitioning to its initial state; the library leaves the
head on its final state. Library state names are global: they are
spliced into the caller's table unchanged, so a program must not reuse
them for its own rules. Each entry declares the states it uses so the
builder can warn about collisions.

All libraries work on unary numbers (n is written as n + 1 ones) with the
head on the leftmost 1 of the argument.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import FrozenSet, Tuple

from turing.grammar import parse_instructions
from turing.instruction import Instruction


@dataclass(frozen=True)
class Library:
    name: str
    description: str
    initial_state: str
    final_state: str
    used_states: FrozenSet[str]
    instructions: Tuple[Instruction, ...]

    @classmethod
    def from_code(cls, name, description, initial_state, final_state, used_states, code):
        return cls(
            name=name,
            description=description,
            initial_state=initial_state,
            final_state=final_state,
            used_states=frozenset(used_states),
            instructions=tuple(parse_instructions(code)),
        )


class LibraryRegistry(Mapping):
    """Read-only name -> Library lookup, in catalog order."""

    def __init__(self, libraries):
        entries = {}
        for library in libraries:
            if library.name in entries:
                raise ValueError(f"Duplicate library name: {library.name}")
            entries[library.name] = library
        self._entries = entries

    def __getitem__(self, name):
        return self._entries[name]

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    def libraries(self):
        return list(self._entries.values())


# === CATALOG ===
SUM_CODE = """
(sum0, 1, 1, R, sum0);
(sum0, 0, 1, R, sum1);
(sum1, 1, 1, R, sum1);
(sum1, 0, 0, L, sum2);
(sum2, 1, 0, L, sum3);
(sum3, 1, 0, L, sum4);
(sum4, 1, 1, L, sum4);
(sum4, 0, 0, R, sumf);
"""

INC_CODE = """
(inc0, 1, 1, L, inc1);
(inc1, 0, 1, H, incf);
"""

DEC_CODE = """
(dec0, 1, 1, R, dec1);
(dec1, 1, 1, L, dec2);
(dec1, 0, 0, L, decf);
(dec2, 1, 0, R, decf);
"""

NEXT_CODE = """
(next0, 1, 1, R, next0);
(next0, 0, 0, R, nextf);
"""

PREV_CODE = """
(prev0, 1, 1, L, prev1);
(prev1, 0, 0, L, prev2);
(prev2, 1, 1, L, prev2);
(prev2, 0, 0, R, prevf);
"""


def build_catalog():
    return [
        Library.from_code(
            "sum", "Adds the two unary numbers under and right of the head",
            "sum0", "sumf", ["sum0", "sum1", "sum2", "sum3", "sum4", "sumf"], SUM_CODE,
        ),
        Library.from_code(
            "inc", "Adds one to the unary number under the head",
            "inc0", "incf", ["inc0", "inc1", "incf"], INC_CODE,
        ),
        Library.from_code(
            "dec", "Subtracts one from the unary number under the head (0 stays 0)",
            "dec0", "decf", ["dec0", "dec1", "dec2", "decf"], DEC_CODE,
        ),
        Library.from_code(
            "next", "Moves the head to the start of the next unary number",
            "next0", "nextf", ["next0", "nextf"], NEXT_CODE,
        ),
        Library.from_code(
            "prev", "Moves the head to the start of the previous unary number",
            "prev0", "prevf", ["prev0", "prev1", "prev2", "prevf"], PREV_CODE,
        ),
    ]


@lru_cache(maxsize=None)
def default_registry():
    """The process-wide catalog, built on first use."""
    return LibraryRegistry(build_catalog())

from dataclasses import dataclass
from enum import Enum


class Movement(Enum):
    """Head movement after writing a symbol."""

    LEFT = "L"
    RIGHT = "R"
    HALT = "H"

    @classmethod
    def parse(cls, letter):
        # Anything that is not R or L halts. Existing programs rely on this
        # (e.g. writing N or S for "stay").
        if letter == "R":
            return cls.RIGHT
        if letter == "L":
            return cls.LEFT
        return cls.HALT

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Instruction:
    """One transition rule: (from_state, from_symbol) -> (to_symbol, movement, to_state)."""

    from_state: str
    from_symbol: int
    to_symbol: int
    movement: Movement
    to_state: str

    @property
    def key(self):
        return (self.from_state, self.from_symbol)

    @classmethod
    def halt(cls, state, symbol):
        """Synthetic rule for a final state with no explicit rule for `symbol`."""
        return cls(state, symbol, symbol, Movement.HALT, state)

    def is_halt(self):
        return (
            self.movement is Movement.HALT
            and self.from_state == self.to_state
            and self.from_symbol == self.to_symbol
        )

    def __str__(self):
        return (
            f"({self.from_state}, {self.from_symbol}, {self.to_symbol}, "
            f"{self.movement}, {self.to_state})"
        )

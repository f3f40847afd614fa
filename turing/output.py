from dataclasses import dataclass


class TuringOutput:
    """Result of interpreting the tape: Undefined(steps) or Defined(steps, value)."""

    steps: int

    def is_defined(self):
        return isinstance(self, Defined)


@dataclass(frozen=True)
class Undefined(TuringOutput):
    steps: int

    def __str__(self):
        return "Undefined"


@dataclass(frozen=True)
class Defined(TuringOutput):
    steps: int
    value: int

    def __str__(self):
        return f"Defined({self.steps}, {self.value})"

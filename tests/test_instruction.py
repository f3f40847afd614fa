from turing.grammar import parse_instruction
from turing.instruction import Instruction, Movement


def test_movement_letters():
    assert Movement.parse("R") is Movement.RIGHT
    assert Movement.parse("L") is Movement.LEFT
    assert Movement.parse("H") is Movement.HALT


def test_unknown_movement_halts():
    assert Movement.parse("N") is Movement.HALT
    assert Movement.parse("S") is Movement.HALT
    assert Movement.parse("r") is Movement.HALT


def test_instruction_text():
    instruction = Instruction("q0", 1, 0, Movement.RIGHT, "q1")
    assert str(instruction) == "(q0, 1, 0, R, q1)"
    assert instruction.key == ("q0", 1)


def test_halt_instruction():
    instruction = Instruction.halt("q2", 1)
    assert instruction == Instruction("q2", 1, 1, Movement.HALT, "q2")
    assert instruction.is_halt()


def test_is_halt_requires_noop():
    assert not Instruction("q2", 1, 0, Movement.HALT, "q2").is_halt()
    assert not Instruction("q2", 1, 1, Movement.HALT, "q3").is_halt()
    assert not Instruction("q2", 1, 1, Movement.RIGHT, "q2").is_halt()


def test_round_trip():
    instructions = [
        Instruction("q0", 1, 0, Movement.RIGHT, "q1"),
        Instruction("loop_2", 0, 0, Movement.LEFT, "loop_2"),
        Instruction("q9", 0, 1, Movement.HALT, "end"),
        Instruction("0", 1, 1, Movement.LEFT, "1"),
    ]
    for instruction in instructions:
        assert parse_instruction(str(instruction)) == instruction


def test_instructions_are_hashable():
    a = Instruction("q0", 1, 0, Movement.RIGHT, "q1")
    b = Instruction("q0", 1, 0, Movement.RIGHT, "q1")
    assert len({a, b}) == 1

import json

from conftest import EXAMPLE1, PING_PONG
from tools.program_inspect import format_latex, format_table, ordered_states
from tools.run_programs import load_checkpoint, run_program, run_programs, run_source
from turing import TuringMachine

UNDEFINED = """{1};
I = {q0};
F = {q9};
(q0, 1, 1, R, q0);
"""


def test_run_program_finished():
    record = run_program(TuringMachine.build(EXAMPLE1))
    assert record["status"] == "finished"
    assert record["steps_taken"] == 7
    assert record["value"] == 5
    assert record["values"] == [3, 0]
    assert record["state"] == "q2"


def test_run_program_loop():
    record = run_program(TuringMachine.build(PING_PONG), threshold=10)
    assert record["status"] == "loop"
    assert record["steps_taken"] == 19
    assert record["value"] == 1


def test_run_program_timeout():
    record = run_program(TuringMachine.build(PING_PONG), max_steps=5)
    assert record["status"] == "timeout"
    assert record["steps_taken"] == 5


def test_run_program_undefined():
    record = run_program(TuringMachine.build(UNDEFINED))
    assert record["status"] == "undefined"
    assert record["steps_taken"] == 1
    assert record["value"] is None


def test_run_source_reports_compile_errors():
    record = run_source("{000};\nI = {q0};\nF = {q0};\n")
    assert record["status"] == "error"
    assert "Expected at least a 1 in the tape" in record["error"]


def test_run_programs_with_checkpoint(tmp_path):
    programs = tmp_path / "batch"
    programs.mkdir()
    (programs / "a.tm").write_text(EXAMPLE1)
    (programs / "b.tm").write_text(PING_PONG)
    (programs / "c.tm").write_text("{1}; I = {q0};")
    results_root = tmp_path / "results"

    results = run_programs(programs, batch_size=2, threshold=10, results_root=results_root)

    assert [r["program"] for r in results] == ["a.tm", "b.tm", "c.tm"]
    assert [r["status"] for r in results] == ["finished", "loop", "error"]

    checkpoint = results_root / "batch" / "results_checkpoint.json"
    assert load_checkpoint(checkpoint) == ["a.tm", "b.tm", "c.tm"]
    assert json.loads(checkpoint.read_text())["completed"] == ["a.tm", "b.tm", "c.tm"]

    halting = list((results_root / "batch").glob("halting_*.jsonl"))
    assert len(halting) == 1
    assert json.loads(halting[0].read_text().splitlines()[0])["program"] == "a.tm"

    # Everything is checkpointed, a second run has nothing left to do
    assert run_programs(programs, threshold=10, results_root=results_root) == []


def test_ordered_states():
    assert ordered_states(TuringMachine.build(EXAMPLE1)) == ["q0", "q1", "q2"]


def test_format_table():
    lines = format_table(TuringMachine.build(EXAMPLE1)).splitlines()
    assert lines == [
        "State\t0\t1",
        "q0\t-\t0Rq1",
        "q1\t0Rq2\t1Rq1",
        "q2\t0Hq2\t0Hq2",
    ]


def test_format_table_marks_implicit_halts():
    tm = TuringMachine.build("{1}; I = {q0}; F = {q1}; (q0, 1, 1, R, q1);")
    assert format_table(tm).splitlines()[-1] == "q1\tHALT\tHALT"


def test_format_latex():
    latex = format_latex(TuringMachine.build(EXAMPLE1))
    lines = latex.splitlines()
    assert lines[0] == r"\begin{array}{c|cc}"
    assert lines[2] == r"q0 & - & 0Rq1 \\"
    assert lines[-1] == r"\end{array}"

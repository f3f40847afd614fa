import argparse
from pathlib import Path

from turing import TuringMachine


def ordered_states(tm):
    """Initial state first, then states in order of first appearance, final states last."""
    states = [tm.initial_state]
    for instruction in tm.instructions.values():
        for state in (instruction.from_state, instruction.to_state):
            if state not in states:
                states.append(state)
    finals = [s for s in states[1:] if s in tm.final_states]
    unused_finals = sorted(tm.final_states - set(states))
    return [s for s in states if s not in finals] + finals + unused_finals


def transition_rows(tm):
    rows = []
    for state in ordered_states(tm):
        row = [state]
        for symbol in (0, 1):
            instruction = tm.instructions.get((state, symbol))
            if instruction is None:
                action = "HALT" if state in tm.final_states else "-"
            else:
                action = f"{instruction.to_symbol}{instruction.movement}{instruction.to_state}"
            row.append(action)
        rows.append(row)
    return rows


def format_table(tm):
    """Human-readable state x symbol table."""
    lines = ["\t".join(["State", "0", "1"])]
    for row in transition_rows(tm):
        lines.append("\t".join(row))
    return "\n".join(lines)


def format_latex(tm):
    lines = [r"\begin{array}{c|cc}", r"State/Symbol & \text{0} & \text{1} \\ \hline"]
    for state, on_zero, on_one in transition_rows(tm):
        lines.append(f"{state} & {on_zero} & {on_one} " + r"\\")
    lines.append(r"\end{array}")
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(description="Turing Machine Program Inspector")
    parser.add_argument("file", help="Program file (.tm)")
    parser.add_argument("--latex", action="store_true", help="Also print the table as LaTeX")
    args = parser.parse_args()

    tm = TuringMachine.build(Path(args.file).read_text(encoding="utf-8"))

    if tm.description:
        print(f"[INFO] {tm.description}")
    print(f"  Initial state: {tm.initial_state}")
    print(f"  Final states: {', '.join(sorted(tm.final_states))}")
    if tm.composed:
        print(f"  Composed: {', '.join(lib.name for lib in tm.composed)}")

    print("\n=== Transition Table ===")
    print(format_table(tm))

    if args.latex:
        print("\n=== LaTeX Table ===")
        print(format_latex(tm))


if __name__ == "__main__":
    main()

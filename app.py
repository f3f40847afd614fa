# app.py

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.prompt import Prompt, Confirm
from rich.table import Table

from config.config_loader import DEFAULT_CONFIG_PATH, load_config
from logger.logger import JSONLogger
from tools.run_programs import run_program
from turing import CompilerError, TuringMachine, default_registry

console = Console()

# === Utilities ===
def setup_logging(verbosity):
    level = [logging.WARNING, logging.INFO, logging.DEBUG][min(verbosity, 2)]
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

def load_machine(path):
    source = Path(path).read_text(encoding="utf-8")
    try:
        tm = TuringMachine.build(source)
    except CompilerError as e:
        console.print(f"[red]I found an error while parsing {path}![/red]")
        console.print(e.render(), markup=False, highlight=False)
        sys.exit(2)

    for warning in tm.warnings:
        console.print(f"[yellow]\tWarning: {warning}[/yellow]")
    return tm

def show_libraries():
    table = Table(title="Composition libraries", show_header=True, header_style="bold magenta")
    table.add_column("Library name")
    table.add_column("Description")
    table.add_column("Initial state", justify="center")
    table.add_column("Final state", justify="center")
    table.add_column("Used states")

    for library in default_registry().libraries():
        table.add_row(
            library.name,
            library.description,
            library.initial_state,
            library.final_state,
            ", ".join(sorted(library.used_states)),
        )
    console.print(table)

def print_machine(tm, config):
    console.print(tm.render(window=config["tape_window"]), markup=False, highlight=False)
    console.print(f"[cyan]State: {tm.current_state}[/cyan]  Steps: {tm.steps}")

# === Modes ===
def handle_run(tm, config, name):
    record = run_program(tm, max_steps=config["max_steps"], threshold=config["threshold_inf_loop"])

    if record["status"] == "undefined":
        console.print(f"After {record['steps_taken']} steps, the result is: Undefined")
    else:
        console.print(f"After {record['steps_taken']} steps, the result is: {record['value']}")
    if record["status"] == "loop":
        console.print("[yellow]Stopped: the machine looks stuck in an infinite loop.[/yellow]")
    elif record["status"] == "timeout":
        console.print(f"[yellow]Stopped after reaching the step limit ({config['max_steps']:,}).[/yellow]")

    if config["log_runs"]:
        json_logger = JSONLogger(config["output_directory"], config["log_file_prefix"])
        json_logger.log_results([dict(record, program=name)])

    return record

def handle_interactive(tm, config):
    if tm.description:
        console.print(f"[bold]{tm.description}[/bold]")
    print_machine(tm, config)

    threshold = config["threshold_inf_loop"]
    while not tm.finished():
        choice = Prompt.ask("\n[s]tep, [r]un or [q]uit", choices=["s", "r", "q"], default="s")
        if choice == "q":
            break

        if choice == "r":
            while not tm.finished() and not tm.is_infinite_loop(threshold) and tm.step():
                pass
        else:
            tm.step()
        print_machine(tm, config)

        if tm.is_undefined():
            console.print(f"[red]No instruction for state {tm.current_state} reading {tm.symbol}.[/red]")
            break

        if tm.is_infinite_loop(threshold):
            if Confirm.ask("The machine looks stuck in an infinite loop. Keep going?", default=False):
                tm.reset_frequencies()
            else:
                break

    console.print(f"Result: {tm.tape_value()}")
    console.print(f"Values: {tm.values()}")

# === CLI ===
def main(argv=None):
    parser = argparse.ArgumentParser(description="Binary Turing machine interpreter")
    parser.add_argument("file", nargs="?", help="Program file with the instructions")
    parser.add_argument("-i", "--interactive", action="store_true", help="Run the machine step by step")
    parser.add_argument("--libraries", action="store_true", help="List the composition libraries and exit")
    parser.add_argument("--config", help="Path to a runtime_config.json (default: the shipped config/runtime_config.json)")
    parser.add_argument("--threshold", type=int, help="State visits before assuming an infinite loop")
    parser.add_argument("--max-steps", type=int, help="Maximum number of steps in non-interactive mode")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.libraries:
        show_libraries()
        return 0

    if not args.file:
        parser.error("No file provided")

    try:
        config = load_config(args.config or DEFAULT_CONFIG_PATH)
    except (FileNotFoundError, ValueError, TypeError) as e:
        console.print(f"[red]Error: {e}[/red]")
        return 1
    if args.threshold is not None:
        config["threshold_inf_loop"] = args.threshold
    if args.max_steps is not None:
        config["max_steps"] = args.max_steps

    tm = load_machine(args.file)

    if args.interactive:
        handle_interactive(tm, config)
    else:
        handle_run(tm, config, Path(args.file).name)
    return 0

if __name__ == "__main__":
    sys.exit(main())

# tools/run_programs.py

import argparse
import json
import logging
from pathlib import Path

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, BarColumn, TextColumn, TimeElapsedColumn

from logger.logger import JSONLogger
from turing import CompilerError, TuringMachine

log = logging.getLogger(__name__)
console = Console()

# === Single Program ===
def run_program(tm, max_steps=1000000, threshold=100):
    """Run a built machine and summarise how it stopped."""
    output = tm.run(max_steps=max_steps, threshold=threshold)

    if tm.finished():
        status = "finished"
    elif tm.is_undefined():
        status = "undefined"
    elif tm.is_infinite_loop(threshold):
        status = "loop"
    else:
        status = "timeout"

    return {
        "steps_taken": tm.steps,
        "status": status,
        "value": output.value if output.is_defined() else None,
        "values": tm.values(),
        "state": tm.current_state,
    }

def run_source(source, max_steps=1000000, threshold=100):
    try:
        tm = TuringMachine.build(source)
    except CompilerError as e:
        return {"status": "error", "error": str(e)}
    return run_program(tm, max_steps=max_steps, threshold=threshold)

# === Utility Loaders ===
def load_programs(program_dir):
    return sorted(Path(program_dir).glob("*.tm"))

def load_checkpoint(checkpoint_path):
    if checkpoint_path.exists():
        with open(checkpoint_path, "r", encoding="utf-8") as f:
            checkpoint = json.load(f)
        return checkpoint.get("completed", [])
    return []

def save_checkpoint(completed, checkpoint_path):
    with open(checkpoint_path, "w", encoding="utf-8") as f:
        json.dump({"completed": completed}, f, indent=4)

# === Main Runner ===
def run_programs(program_dir, output_name="results", batch_size=64, max_steps=1000000, threshold=100, results_root="results"):
    results_folder = Path(results_root) / Path(program_dir).name
    results_folder.mkdir(parents=True, exist_ok=True)
    checkpoint_file = results_folder / f"{output_name}_checkpoint.json"
    json_logger = JSONLogger(output_directory=str(results_folder), log_file_prefix=f"{output_name}_")

    all_programs = load_programs(program_dir)
    completed = load_checkpoint(checkpoint_file)

    pending = [p for p in all_programs if p.name not in completed]
    log.info("Loaded %d programs, %d pending.", len(all_programs), len(pending))

    results = []
    for batch_start in range(0, len(pending), batch_size):
        batch = pending[batch_start:batch_start + batch_size]
        log.info("Processing batch %d with %d programs...", batch_start // batch_size + 1, len(batch))

        with Progress(
                SpinnerColumn(),
                BarColumn(),
                "[progress.percentage]{task.percentage:>3.0f}%",
                TextColumn("{task.completed}/{task.total} Programs"),
                TimeElapsedColumn(),
                console=console,
        ) as progress:

            task = progress.add_task("[cyan]Running...", total=len(batch))

            batch_results = []

            for program in batch:
                entry = {"program": program.name}
                entry.update(run_source(program.read_text(encoding="utf-8"), max_steps=max_steps, threshold=threshold))
                if entry["status"] == "error":
                    log.warning("Failed to build %s: %s", program.name, entry["error"])
                batch_results.append(entry)
                completed.append(program.name)
                progress.update(task, advance=1)

            # Bulk write once per batch
            json_logger.log_results(batch_results)
            save_checkpoint(completed, checkpoint_file)
            results.extend(batch_results)
            log.info("Batch completed. Checkpoint saved.")

    return results

# === CLI ===
def main():
    parser = argparse.ArgumentParser(description="Run a directory of Turing machine programs with checkpointing.")
    parser.add_argument("--programs", required=True, help="Directory containing .tm programs")
    parser.add_argument("--output", default="results", help="Output result file name (default: results)")
    parser.add_argument("--batch_size", type=int, default=64, help="Batch size per save/checkpoint")
    parser.add_argument("--max_steps", type=int, default=1000000, help="Maximum steps before timeout")
    parser.add_argument("--threshold", type=int, default=100, help="State visits before assuming an infinite loop")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")

    results = run_programs(
        args.programs,
        args.output,
        batch_size=args.batch_size,
        max_steps=args.max_steps,
        threshold=args.threshold,
    )
    console.print(f"[green]Ran {len(results):,} programs.[/green]")

if __name__ == "__main__":
    main()

import json
import os
from datetime import datetime, timezone

class JSONLogger:
    """Appends program run records to JSON-lines files, one file per day."""

    def __init__(self, output_directory="logs/", log_file_prefix="turing_"):
        self.output_directory = output_directory
        self.log_file_prefix = log_file_prefix
        os.makedirs(self.output_directory, exist_ok=True)
        self.today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
        self.current_log = self._get_log_filename()

    def _get_log_filename(self):
        filename = f"{self.log_file_prefix}{self.today}.jsonl"  # JSON lines format
        return os.path.join(self.output_directory, filename)

    def _log_to_file(self, filename, entries):
        path = os.path.join(self.output_directory, filename)
        with open(path, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log(self, entry: dict):
        """Log a single entry to the main run log."""
        self.log_batch([entry])

    def log_batch(self, entries: list):
        """Log a batch of entries to the main run log."""
        with open(self.current_log, "a", encoding="utf-8") as f:
            for entry in entries:
                f.write(json.dumps(entry) + "\n")

    def log_halting(self, entries: list):
        """Log programs that reached a final state."""
        self._log_to_file(f"halting_{self.today}.jsonl", entries)

    def log_non_halting(self, entries: list):
        """Log programs stopped by the loop heuristic or the step limit."""
        self._log_to_file(f"non_halting_{self.today}.jsonl", entries)

    def log_undefined(self, entries: list):
        """Log programs that reached a state with no applicable rule."""
        self._log_to_file(f"undefined_{self.today}.jsonl", entries)

    def log_results(self, entries: list):
        """Write entries to the main log and to the file matching their status."""
        self.log_batch(entries)
        by_status = {"finished": [], "undefined": [], "loop": [], "timeout": []}
        for entry in entries:
            by_status.setdefault(entry.get("status"), []).append(entry)
        if by_status["finished"]:
            self.log_halting(by_status["finished"])
        if by_status["undefined"]:
            self.log_undefined(by_status["undefined"])
        non_halting = by_status["loop"] + by_status["timeout"]
        if non_halting:
            self.log_non_halting(non_halting)

# run_logger.py

"""
Keeps a JSON Lines ledger of processed images.
Each line in the log file is a JSON object describing one run of the tool.
"""

import json
import os
import sys
from datetime import datetime
from typing import Dict, Any, Optional

# A reference to the application configuration (set by the caller)
_config_ref: Optional[Any] = None


def set_config_reference(config_instance: Any):
    """Sets the reference to the Config instance whose run_log_file is used."""
    global _config_ref

    if not hasattr(config_instance, 'run_log_file'):
        raise AttributeError("Config instance must have a 'run_log_file' attribute.")

    _config_ref = config_instance


def log_run(run_index: int, input_path: Optional[str], output_path: Optional[str],
            feature_counts: Dict[str, int], config_data: Dict[str, Any]) -> None:
    """
    Appends one entry to the ledger.

    Args:
        run_index (int): Serial number of this run.
        input_path, output_path: Image paths, or None for stdin/stdout.
        feature_counts (Dict[str, int]): Features painted, per kind.
        config_data (Dict[str, Any]): The configuration used for the run.
    """
    if _config_ref is None or not _config_ref.run_log_file:
        return

    log_filepath = _config_ref.run_log_file
    os.makedirs(os.path.dirname(log_filepath) or ".", exist_ok=True)

    log_entry = {
        "run_index": run_index,
        "timestamp": datetime.now().isoformat(),
        "input": input_path or "<stdin>",
        "output": output_path or "<stdout>",
        "feature_counts": feature_counts,
        "config": config_data,
    }

    with open(log_filepath, 'a', encoding='utf-8') as f:
        json.dump(log_entry, f)
        f.write('\n')


def get_last_run_index() -> int:
    """
    Reads the ledger to determine the last used run index.
    Returns 0 if the file does not exist or holds no valid entries.
    """
    if _config_ref is None or not _config_ref.run_log_file:
        return 0

    log_filepath = _config_ref.run_log_file
    last_index = 0
    if os.path.exists(log_filepath):
        with open(log_filepath, 'r', encoding='utf-8') as f:
            for line in f:
                try:
                    entry = json.loads(line)
                except json.JSONDecodeError:
                    print(f"Warning: Skipping malformed line in run log: {line.strip()}", file=sys.stderr)
                    continue
                if isinstance(entry, dict) and "run_index" in entry:
                    last_index = max(last_index, int(entry["run_index"]))
    return last_index

import os
import sys
import datetime
import json
from typing import Optional


class Logger:
    """
    Status log for one run of the MLAA tool.

    Messages are echoed to stderr (stdout may be carrying image data) and,
    when `log_dir` is given, appended with timestamps to
    `<log_dir>/<YYYYmmdd-HHMMSS>.log`.
    """
    def __init__(self, log_dir: Optional[str] = None, prefix: str = "run_mlaa", echo: bool = True):
        self.prefix = prefix
        self.echo = echo
        self.start_time = datetime.datetime.now()
        self.run_timestamp = self.start_time.strftime("%Y%m%d-%H%M%S")

        self.log_filepath = None
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            self.log_filepath = os.path.join(log_dir, f"{self.run_timestamp}.log")

    def _write(self, message: str):
        if self.log_filepath is None:
            return
        with open(self.log_filepath, 'a', encoding='utf-8') as f:
            f.write(message + '\n')

    def log(self, message: str):
        if self.echo:
            print(f"{self.prefix}: {message}", file=sys.stderr)
        timestamp = datetime.datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        self._write(f"[{timestamp}] {message}")

    def log_config(self, config_obj):
        # Only to the file; the echo stays one line per event
        self._write("Configuration:")
        self._write(json.dumps(config_obj.to_dict(), indent=2))

    def log_feature_counts(self, source: str, counts: dict):
        summary = ", ".join(f"{name}={count}" for name, count in counts.items())
        self.log(f"{source}: {summary}")

    def log_total_time(self):
        duration = datetime.datetime.now() - self.start_time
        self.log(f"Total execution time: {duration}")

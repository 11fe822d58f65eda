# logger_utils.py - for logging messages and timing metrics, timestamps etc

import os
import sys
import time
from datetime import datetime

# Directory used when a relative log file name is given without a folder
LOG_DIR = "logs"

# Numeric rank of each level, anything below the threshold is dropped
LEVELS = {
    "DEBUG": 10,
    "INFO": 20,
    "WARNING": 30,
    "ERROR": 40,
}


class Log:
    """Lightweight logger for writing messages and tracking metrics."""
    COLORS = {
        "DEBUG": "\033[90m",   # gray
        "INFO": "\033[94m",    # blue
        "WARNING": "\033[93m", # yellow
        "ERROR": "\033[91m",   # red
        "RESET": "\033[0m",
    }

    def __init__(self, path: str = None, level: str = "WARNING", use_color: bool = True, stream=None):
        self.path = path or None
        self.level = self._check_level(level)
        self.use_color = use_color
        self.stream = stream

    @staticmethod
    def _check_level(level: str) -> str:
        lvl = str(level).upper()
        if lvl not in LEVELS:
            raise ValueError(f"unknown log level: {level!r}")
        return lvl

    def set_level(self, level: str) -> None:
        self.level = self._check_level(level)

    def enabled(self, level: str) -> bool:
        return LEVELS[level] >= LEVELS[self.level]

    def write(self, level: str, msg: str):
        """
        Append a log message to the log file (if any) and the console.
        Each entry is written as: [YYYY-MM-DD HH:MM:SS] LEVEL   | message
        """
        level = self._check_level(level)
        if not self.enabled(level):
            return

        ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        line = f"[{ts}] {level:<7} | {msg}"

        if self.path:
            folder = os.path.dirname(self.path)
            if folder:
                os.makedirs(folder, exist_ok=True)  # create the folder on first write
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(line + "\n")

        # console goes to stderr so it never mixes with command output
        out = self.stream or sys.stderr
        if self.use_color:
            out.write(f"{self.COLORS[level]}{line}{self.COLORS['RESET']}\n")
        else:
            out.write(line + "\n")

    # Public logging methods
    def debug(self, msg: str):
        self.write("DEBUG", msg)

    def info(self, msg: str):
        self.write("INFO", msg)

    def warning(self, msg: str):
        self.write("WARNING", msg)

    def error(self, msg: str):
        self.write("ERROR", msg)

    def metric(self, tag, value, unit=""):
        """
        Record a metric (like timing or counts) at INFO level.
        Example: [2024-01-01 12:45:02] INFO    | train done: 0.123s
        """
        self.info(f"{tag}: {value}{unit}")

    def time_block(self, label):
        """
        Helper for measuring execution time of a code block.
        To use:
            with log.time_block("train"):
                do_some_work()
        It logs how long the block took, the duration is on `.elapsed` afterwards.
        """
        return _Timer(self, label)

    @classmethod
    def from_config(cls, cfg, stream=None):
        """Build a logger from a Config (log_file, log_level, use_color)."""
        path = cfg.get("log_file") or None
        if path and not os.path.dirname(path):
            path = os.path.join(LOG_DIR, path)
        return cls(path=path, level=cfg.get("log_level"), use_color=cfg.get("use_color"), stream=stream)


class _Timer:
    """Context manager used internally to measure time for a code block."""
    def __init__(self, log, label):
        self.log = log
        self.label = label
        self.start = time.time()
        self.elapsed = 0.0

    def __enter__(self):
        self.start = time.time()
        return self

    def __exit__(self, exc_type, exc, tb):
        """When exiting the 'with' block, calculate how long it took and record it as a metric."""
        self.elapsed = time.time() - self.start
        self.log.metric(f"{self.label} done", round(self.elapsed, 3), "s")


# default logger for library code: silent unless something goes wrong
default_log = Log()

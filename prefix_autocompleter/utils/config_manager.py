# config_manager.py - JSON config manager

import json
import os

from prefix_autocompleter.utils.logger_utils import LEVELS, default_log

DEFAULTS = {
    "max_nodes": 0,          # node budget per store, 0 = unbounded
    "log_level": "WARNING",
    "log_file": "",          # empty = console only
    "use_color": True,
    "show_timings": False,   # cli prints ms per insert/lookup
}

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class Config:
    def __init__(self, path=None, log=None):
        self.path = path
        self.log = log or default_log
        self.data = dict(DEFAULTS)
        self._load()

    def _load(self):
        if not self.path or not os.path.exists(self.path):
            return
        try:
            with open(self.path, "r", encoding="utf8") as f:
                loaded = json.load(f)
        except (OSError, ValueError) as e:
            self.log.warning(f"config {self.path} unreadable, using defaults ({e})")
            return
        if not isinstance(loaded, dict):
            self.log.warning(f"config {self.path} is not a JSON object, using defaults")
            return
        for k, v in loaded.items():
            if k not in self.data:
                self.log.warning(f"config: ignoring unknown option {k!r}")
                continue
            try:
                self.data[k] = self._coerce(k, v)
            except ValueError as e:
                self.log.warning(f"config: {e}, keeping default")

    def save(self):
        if not self.path:
            return
        with open(self.path, "w", encoding="utf8") as f:
            json.dump(self.data, f, indent=2)

    def get(self, key):
        return self.data[key]

    def show(self):
        return sorted(self.data.items())

    def set(self, key, val):
        """Set an option from a (usually string) value and persist it. Unknown keys raise KeyError."""
        self.override(key, val)
        self.save()

    def override(self, key, val):
        """Like set() but only for this run, nothing is written."""
        if key not in self.data:
            raise KeyError(f"No such option: {key}")
        self.data[key] = self._coerce(key, val)

    def _coerce(self, key, val):
        kind = type(DEFAULTS[key])
        if kind is bool:
            if isinstance(val, bool):
                return val
            s = str(val).strip().lower()
            if s in _TRUE:
                return True
            if s in _FALSE:
                return False
            raise ValueError(f"{key}: expected a boolean, got {val!r}")
        try:
            out = kind(val)
        except (TypeError, ValueError) as e:
            raise ValueError(f"{key}: expected {kind.__name__}, got {val!r}") from e
        if key == "max_nodes" and out < 0:
            raise ValueError("max_nodes must be >= 0")
        if key == "log_level":
            out = out.upper()
            if out not in LEVELS:
                raise ValueError(f"log_level: unknown level {val!r}")
        return out

from .logger_utils import Log
from .config_manager import Config
from .metrics_tracker import Metrics

__all__ = ["Log", "Config", "Metrics"]

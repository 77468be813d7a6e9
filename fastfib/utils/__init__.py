from .logging import get_logger, set_level, log_metrics

__all__ = ["get_logger", "set_level", "log_metrics"]

"""
Structured logging for the unsubscribe resolution pipeline.

Records are emitted as JSON documents carrying the component name, the
scoped context and per-call extras. Unsubscribe URIs routinely embed
subscriber tokens, so every message and value passes through a filter
that masks them before it reaches a handler.
"""

import logging
import json
import time
import re
import threading
from typing import Dict, Any, Optional
from contextlib import contextmanager
from datetime import datetime, timezone
from collections import defaultdict


class SensitiveDataFilter:
    """Mask credentials and subscriber tokens in log data."""
    
    SENSITIVE_KEYS = {'password', 'token', 'api_key', 'key', 'secret'}
    
    def __init__(self):
        self.sensitive_patterns = [
            (re.compile(r'(token|uid|sig|signature|hash)=([^&\s"\'<>]+)', re.IGNORECASE), r'\1=***'),
            (re.compile(r'password["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', re.IGNORECASE), 'password=***'),
            (re.compile(r'api_key["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', re.IGNORECASE), 'api_key=***'),
            (re.compile(r'secret["\']?\s*[:=]\s*["\']?([^"\'\s&]+)', re.IGNORECASE), 'secret=***'),
        ]
    
    def filter_message(self, message: str) -> str:
        """Filter sensitive data from a message string."""
        filtered = message
        for pattern, replacement in self.sensitive_patterns:
            filtered = pattern.sub(replacement, filtered)
        return filtered
    
    def filter_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Filter sensitive data from a dictionary, recursively."""
        filtered = {}
        for key, value in data.items():
            if key.lower() in self.SENSITIVE_KEYS:
                filtered[key] = '***'
            elif isinstance(value, str):
                filtered[key] = self.filter_message(value)
            elif isinstance(value, dict):
                filtered[key] = self.filter_dict(value)
            else:
                filtered[key] = value
        return filtered


class UnsubscribeLogger:
    """Structured logger with scoped context and outcome counters."""
    
    def __init__(self, component: str):
        self.component = component
        self.logger = logging.getLogger(f"unsubscribe.{component}")
        self.context: Dict[str, Any] = {}
        self.filter = SensitiveDataFilter()
        self.operation_stats = defaultdict(lambda: {'total': 0, 'success': 0, 'failure': 0})
        self._stats_lock = threading.Lock()
    
    def add_context(self, key: str, value: Any) -> None:
        """Add context information to all subsequent log messages."""
        self.context[key] = value
    
    def _prepare_log_data(self, message: str, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        log_data = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'component': self.component,
            'message': self.filter.filter_message(message),
            'context': self.filter.filter_dict(self.context.copy())
        }
        if extra:
            log_data['extra'] = self.filter.filter_dict(extra)
        return log_data
    
    def _emit(self, level: int, message: str, extra: Optional[Dict[str, Any]] = None, **kwargs):
        # Skip JSON encoding when the level is disabled
        if not self.logger.isEnabledFor(level):
            return
        log_data = self._prepare_log_data(message, extra)
        self.logger.log(level, json.dumps(log_data, default=str), **kwargs)
    
    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.DEBUG, message, extra)
    
    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.INFO, message, extra)
    
    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.WARNING, message, extra)
    
    def error(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._emit(logging.ERROR, message, extra)
    
    def log_exception(self, exception: Exception, extra: Optional[Dict[str, Any]] = None):
        """Log an exception with its type and any attached context."""
        details = {
            'type': type(exception).__name__,
            'message': str(exception)
        }
        context = getattr(exception, 'context', None)
        if context:
            details['context'] = context
        merged = dict(extra or {})
        merged['exception'] = details
        self._emit(logging.WARNING, f"Exception occurred: {exception}", merged)
    
    @contextmanager
    def time_operation(self, operation_name: str):
        """Time a block and log its duration and outcome."""
        start_time = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.error(f"Operation {operation_name} failed", {
                'operation': operation_name,
                'duration_seconds': round(time.perf_counter() - start_time, 3),
                'status': 'failure',
                'error': str(e)
            })
            raise
        self.info(f"Operation {operation_name} completed", {
            'operation': operation_name,
            'duration_seconds': round(time.perf_counter() - start_time, 3),
            'status': 'success'
        })
    
    @contextmanager
    def scoped_context(self, context: Dict[str, Any]):
        """Add context for the duration of a block."""
        original_context = self.context.copy()
        self.context.update(context)
        try:
            yield
        finally:
            self.context = original_context
    
    def log_operation_count(self, operation: str, success: bool):
        """Count an operation outcome for statistics."""
        with self._stats_lock:
            self.operation_stats[operation]['total'] += 1
            if success:
                self.operation_stats[operation]['success'] += 1
            else:
                self.operation_stats[operation]['failure'] += 1

    def get_operation_stats(self) -> Dict[str, Dict[str, int]]:
        with self._stats_lock:
            return {name: dict(counts) for name, counts in self.operation_stats.items()}


def configure_unsubscribe_logging(
    level: str = "WARNING",
    format: str = "json",
    output: str = "console",
    filename: Optional[str] = None
):
    """Configure handlers for the ``unsubscribe`` logger hierarchy."""
    log_level = getattr(logging, level.upper(), logging.WARNING)
    
    logger = logging.getLogger("unsubscribe")
    logger.setLevel(log_level)
    logger.handlers.clear()
    
    if format == "json":
        formatter = logging.Formatter('%(message)s')
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
    
    if output in ["console", "both"]:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)
    
    if output in ["file", "both"] and filename:
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    
    return logger

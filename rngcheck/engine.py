"""rngcheck analysis engine."""

import datetime
import hashlib
import importlib.metadata
import json
import logging
import platform
import sys
import time
from typing import Any, Callable, Dict, Iterable, List, Optional

import numpy as np

from .helpers import BitIter, RngBitIter
from .plugin_api import TestPlugin, TestResult, serialize_testresult

log = logging.getLogger("rngcheck.engine")


class _JSONFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record):
        rec = {
            "timestamp": datetime.datetime.now(datetime.timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in ("test_name", "status", "time_ms", "bits_processed"):
            if hasattr(record, key):
                rec[key] = getattr(record, key)
        if record.exc_info:
            rec["exc"] = self.formatException(record.exc_info)
        return json.dumps(rec, ensure_ascii=False, default=str)


def _normalize_test_entry(t) -> Dict[str, Any]:
    """Normalize a single test entry which may be either a string or a dict."""
    if isinstance(t, str):
        return {"name": t, "params": {}}
    if isinstance(t, dict):
        return {"name": t.get("name"), "params": t.get("params") or {}}
    raise ValueError("Invalid test entry type")


class Engine:
    """Runs the registered test plugins over a buffer or a live random source."""

    def __init__(self):
        self._tests: Dict[str, TestPlugin] = {}
        # Map of configured log_path -> handler to avoid duplicate handlers across analyze calls
        self._log_handlers: Dict[str, logging.Handler] = {}
        self._discover_plugins()

    def _discover_plugins(self):
        """Register built-in plugins and those published via entry points."""
        from .plugins import BlockFrequencyTest, MonobitTest

        self.register_test("monobit", MonobitTest())
        self.register_test("block_frequency", BlockFrequencyTest())

        for ep in importlib.metadata.entry_points(group="rngcheck.plugins"):
            cls = ep.load()
            if isinstance(cls, type) and issubclass(cls, TestPlugin):
                self.register_test(ep.name, cls())
            else:
                log.warning("Ignoring entry point %s: not a TestPlugin", ep.name)

    def register_test(self, name: str, plugin: TestPlugin):
        """Register a test plugin and inject a logger for observability."""
        plugin.logger = logging.getLogger(f"rngcheck.plugins.{name}")
        self._tests[name] = plugin

    def get_available_tests(self) -> List[str]:
        """Get list of available test names."""
        return list(self._tests.keys())

    def _configure_logging(self, config: Dict[str, Any]) -> None:
        """Configure logging based on config options.

        - Respect 'log_level' (default INFO) on the package logger.
        - If 'log_path' is set, attach a FileHandler writing JSONL records.
        """
        log_level = config.get("log_level", "INFO")
        level_no = logging.getLevelName(str(log_level).upper())
        if not isinstance(level_no, int):
            raise ValueError(f"Unknown log_level: {log_level}")

        pkg_logger = logging.getLogger("rngcheck")
        pkg_logger.setLevel(level_no)

        log_path = config.get("log_path")
        if not log_path:
            return

        existing = self._log_handlers.get(log_path)
        if existing:
            existing.setLevel(level_no)
            return

        fh = logging.FileHandler(log_path, encoding="utf-8")
        fh.setLevel(level_no)
        fh.setFormatter(_JSONFormatter())
        pkg_logger.addHandler(fh)
        self._log_handlers[log_path] = fh

    def close(self) -> None:
        """Detach and close any file handlers opened for 'log_path'."""
        pkg_logger = logging.getLogger("rngcheck")
        for fh in self._log_handlers.values():
            pkg_logger.removeHandler(fh)
            fh.close()
        self._log_handlers.clear()

    def analyze(self, input_bytes: bytes, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Analyze a byte buffer with the configured tests.

        config format:
        {
            'tests': ['monobit', {'name': 'block_frequency', 'params': {'block_size': 128}}],
            'log_level': 'INFO',
            'log_path': 'rngcheck.jsonl',
        }

        Each test gets its own BitIter over the same buffer.
        Returns a dict with 'results', 'scorecard' and 'meta'.
        """
        config = config or {}
        view = memoryview(input_bytes)
        out = self._run(lambda: BitIter(view), config)
        out["meta"]["input_hash"] = hashlib.sha256(view).hexdigest()
        out["meta"]["input_bytes"] = view.nbytes
        return out

    def analyze_rng(self, rng, n_bits: int, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Analyze bits streamed from a random source.

        Each configured test draws its own ``n_bits`` fresh bits from ``rng``.
        """
        if n_bits < 0:
            raise ValueError("n_bits must be >= 0")
        config = config or {}
        out = self._run(lambda: RngBitIter(rng, n_bits), config)
        out["meta"]["input_hash"] = None
        out["meta"]["source"] = type(rng).__name__
        return out

    def _run(self, make_bits: Callable[[], Iterable[bool]], config: Dict[str, Any]) -> Dict[str, Any]:
        self._configure_logging(config)

        tests_conf = config.get("tests") or list(self._tests.keys())
        tests_conf = [_normalize_test_entry(t) for t in tests_conf]

        results: List[Dict[str, Any]] = []
        for c in tests_conf:
            name = c["name"]
            tp = self._tests.get(name)
            if tp is None:
                entry = {"test_name": name, "status": "error", "reason": f"Unknown test '{name}'"}
                log.warning("unknown_test", extra={"test_name": name, "status": "error"})
                results.append(entry)
                continue

            log.debug("starting_test", extra={"test_name": name})
            start = time.perf_counter()
            res = tp.safe_run(make_bits(), c["params"])
            duration_ms = (time.perf_counter() - start) * 1000.0

            if isinstance(res, TestResult):
                if res.time_ms is None:
                    res.time_ms = duration_ms
                entry = serialize_testresult(res)
                entry["status"] = "completed"
            else:
                entry = {
                    "test_name": name,
                    "status": res.get("status", "error"),
                    "reason": res.get("reason"),
                    "time_ms": duration_ms,
                }
                if entry["status"] == "error":
                    log.warning("test_error", extra={"test_name": name, "status": "error"})

            log.debug(
                "finished_test",
                extra={
                    "test_name": name,
                    "status": entry["status"],
                    "time_ms": entry.get("time_ms"),
                    "bits_processed": entry.get("bits_processed"),
                },
            )
            results.append(entry)

        return {
            "results": results,
            "scorecard": self._scorecard(results),
            "meta": self._meta(config),
        }

    @staticmethod
    def _scorecard(results: List[Dict[str, Any]]) -> Dict[str, Any]:
        completed = [r for r in results if r.get("status") == "completed"]
        return {
            "total_tests": len(results),
            "passed_tests": sum(1 for r in completed if r.get("passed")),
            "failed_tests": sum(1 for r in completed if not r.get("passed")),
            "skipped_tests": sum(1 for r in results if r.get("status") == "skipped"),
            "error_tests": sum(1 for r in results if r.get("status") == "error"),
        }

    def _meta(self, config: Dict[str, Any]) -> Dict[str, Any]:
        """Observability / reproducibility information for reports."""
        meta: Dict[str, Any] = {
            "python": platform.python_version(),
            "python_full": sys.version,
            "platform": platform.platform(),
            "numpy": np.__version__,
        }
        try:
            meta["rngcheck"] = importlib.metadata.version("rngcheck")
        except importlib.metadata.PackageNotFoundError:
            meta["rngcheck"] = None

        meta["plugins"] = [
            {"name": name, "class": plug.__class__.__name__, "module": plug.__class__.__module__}
            for name, plug in self._tests.items()
        ]

        cfg_json = json.dumps(config, sort_keys=True, default=str)
        meta["config_hash"] = hashlib.sha256(cfg_json.encode("utf-8")).hexdigest()
        return meta

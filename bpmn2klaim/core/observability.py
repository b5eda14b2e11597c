"""
Observability Infrastructure

Provides structured logging, tracing, and metrics collection for the
X-Klaim generator. Logging goes through loguru (stdlib ``logging`` records
are routed into it); tracing and metrics use the OpenTelemetry SDK with
in-process providers.
"""

import contextlib
import functools
import logging
import sys
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional, TypeVar, Union

from loguru import logger
from opentelemetry import metrics, trace
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import InMemoryMetricReader
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider

F = TypeVar("F", bound=Callable[..., Any])


class LogLevel(str, Enum):
    """Log level enumeration."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _level_name(level: Union[str, LogLevel]) -> str:
    # LogLevel is a str subclass, so check it first
    if isinstance(level, LogLevel):
        return level.value
    return str(level).upper()


class ObservabilityConfig:
    """Configuration for observability."""

    def __init__(
        self,
        service_name: str = "bpmn2klaim",
        log_level: Union[str, LogLevel] = LogLevel.INFO,
        json_logs: bool = False,
        enable_tracing: bool = True,
        enable_metrics: bool = True,
        setup_logging: bool = True,
    ):
        """Initialize observability configuration."""
        self.service_name = service_name
        self.log_level = _level_name(log_level)
        self.json_logs = json_logs
        self.enable_tracing = enable_tracing
        self.enable_metrics = enable_metrics
        self.setup_logging = setup_logging


class InterceptHandler(logging.Handler):
    """Forward stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: Union[str, int] = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller outside the logging module
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


class ObservabilityManager:
    """Centralized observability management."""

    _instance: Optional["ObservabilityManager"] = None

    def __init__(self, config: ObservabilityConfig):
        """Initialize observability manager."""
        self.config = config
        if config.setup_logging:
            self._setup_logging()

        if config.enable_tracing:
            self._setup_tracing()

        if config.enable_metrics:
            self._setup_metrics()

        logger.debug(
            f"Observability initialized: service={config.service_name}, "
            f"log_level={config.log_level}"
        )

    def _setup_logging(self) -> None:
        """Set up structured logging with loguru."""
        # Remove default handler
        logger.remove()

        log_format = (
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        )

        # Logs go to stderr; stdout carries the generated X-Klaim
        if self.config.json_logs:
            logger.add(
                sys.stderr,
                level=self.config.log_level,
                serialize=True,
                colorize=False,
            )
        else:
            logger.add(
                sys.stderr,
                format=log_format,
                level=self.config.log_level,
                colorize=True,
                backtrace=True,
                diagnose=False,
            )

        logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    def _setup_tracing(self) -> None:
        """Set up OpenTelemetry tracing."""
        resource = Resource(attributes={SERVICE_NAME: self.config.service_name})
        self.tracer_provider = TracerProvider(resource=resource)
        self.tracer = self.tracer_provider.get_tracer(__name__)
        logger.debug("OpenTelemetry tracing initialized")

    def _setup_metrics(self) -> None:
        """Set up OpenTelemetry metrics."""
        # Use in-memory reader for collecting metrics
        self.metric_reader = InMemoryMetricReader()

        resource = Resource(attributes={SERVICE_NAME: self.config.service_name})
        self.meter_provider = MeterProvider(resource=resource, metric_readers=[self.metric_reader])
        self.meter = self.meter_provider.get_meter(__name__)

        self.counter = self.meter.create_counter(
            "translations_total",
            description="Total number of translated elements",
            unit="1",
        )
        self.histogram = self.meter.create_histogram(
            "translation_duration_ms",
            description="Translation duration in milliseconds",
            unit="ms",
        )

        logger.debug("OpenTelemetry metrics initialized")

    @classmethod
    def initialize(cls, config: Optional[ObservabilityConfig] = None) -> "ObservabilityManager":
        """Initialize or get singleton instance."""
        if cls._instance is None:
            if config is None:
                config = ObservabilityConfig()
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "ObservabilityManager":
        """Get singleton instance."""
        if cls._instance is None:
            # Host application owns logging configuration
            cls._instance = cls(ObservabilityConfig(setup_logging=False))
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the singleton so the next call reconfigures."""
        cls._instance = None


@contextlib.contextmanager
def span(name: str, attributes: Optional[Dict[str, Any]] = None):
    """Context manager for creating spans."""
    manager = ObservabilityManager.get_instance()

    if hasattr(manager, "tracer"):
        with manager.tracer.start_as_current_span(name) as span_obj:
            if attributes:
                for key, value in attributes.items():
                    span_obj.set_attribute(key, value)
            yield span_obj
    else:
        yield None


def log_execution(
    level: Union[str, LogLevel] = LogLevel.DEBUG,
    include_result: bool = False,
) -> Callable[[F], F]:
    """
    Decorator for logging function execution and duration.

    Args:
        level: Logging level
        include_result: Whether to log the (truncated) function result
    """
    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            log_level = _level_name(level)
            func_name = f"{func.__module__}.{func.__qualname__}"
            start_time = time.time()

            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration_ms = (time.time() - start_time) * 1000
                logger.error(f"Function failed: {func_name} after {duration_ms:.1f}ms: {e}")
                raise

            duration_ms = (time.time() - start_time) * 1000
            record_metric(f"{func.__name__}_duration", duration_ms)
            message = f"Function executed: {func_name} in {duration_ms:.1f}ms"
            if include_result:
                message += f" -> {str(result)[:200]}"
            logger.log(log_level, message)
            return result

        return wrapper  # type: ignore

    return decorator


def record_metric(
    metric_name: str,
    value: Union[int, float],
    attributes: Optional[Dict[str, str]] = None,
) -> None:
    """
    Record a metric value with OpenTelemetry.

    Integers and ``*_total`` metrics go to the counter, everything else to
    the histogram.
    """
    manager = ObservabilityManager.get_instance()
    metric_attributes = {"metric": metric_name, **(attributes or {})}

    if hasattr(manager, "counter") and hasattr(manager, "histogram"):
        if metric_name.endswith("_total") or isinstance(value, int):
            manager.counter.add(value, attributes=metric_attributes)
        else:
            manager.histogram.record(value, attributes=metric_attributes)

    logger.debug(f"Metric recorded: {metric_name}={value}")


class Timer:
    """Context manager for timing operations."""

    def __init__(self, name: str, log: bool = True):
        """Initialize timer."""
        self.name = name
        self.log = log
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.time()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed = time.time() - self.start_time
        if self.log:
            logger.debug(f"Timer '{self.name}': {self.elapsed:.3f}s")
            record_metric(f"{self.name}_duration", self.elapsed * 1000)


__all__ = [
    "LogLevel",
    "ObservabilityConfig",
    "ObservabilityManager",
    "InterceptHandler",
    "span",
    "log_execution",
    "record_metric",
    "Timer",
]

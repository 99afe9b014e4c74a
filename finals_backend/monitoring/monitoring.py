import json
import threading
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import psutil

from ..app.config import Settings
from ..app.utils.logger import setup_logger

settings = Settings()


@dataclass
class SystemMetrics:
    """Container for system metrics"""
    cpu_percent: float
    memory_percent: float
    disk_usage_percent: float
    active_tasks: int
    failed_tasks: int
    processing_time: float
    timestamp: str = field(default_factory=lambda: datetime.utcnow().isoformat())


class SystemStatus:
    """System status constants"""
    OK = "OK"
    WARNING = "WARNING"
    CRITICAL = "CRITICAL"


class MetricsCollector:
    """Collects and stores system metrics"""

    def __init__(self, max_history_size: int = 1000):
        self.metrics_history: List[SystemMetrics] = []
        self.max_history_size = max_history_size
        self._lock = threading.Lock()

    def add_metrics(self, metrics: SystemMetrics):
        with self._lock:
            self.metrics_history.append(metrics)
            if len(self.metrics_history) > self.max_history_size:
                self.metrics_history.pop(0)

    def get_recent_metrics(self, n: int = 10) -> List[SystemMetrics]:
        with self._lock:
            return self.metrics_history[-n:]

    def export_metrics(self, export_path: Path):
        """Export metrics to JSON file"""
        with self._lock:
            metrics_data = [vars(m) for m in self.metrics_history]
            export_path.write_text(json.dumps(metrics_data, indent=2))


class MonitoringService:
    """Health checks over the process and the finals processing task table"""

    def __init__(self, processing_tasks: Optional[Dict[str, dict]] = None):
        self.logger = setup_logger("monitoring")
        self.metrics_collector = MetricsCollector()
        self.processing_tasks = processing_tasks if processing_tasks is not None else {}

        self.metrics_dir = settings.LOGS_DIR / "metrics"
        self.metrics_dir.mkdir(parents=True, exist_ok=True)

    def collect_metrics(self) -> SystemMetrics:
        """Collect current system metrics"""
        metrics = SystemMetrics(
            cpu_percent=psutil.cpu_percent(interval=0.1),
            memory_percent=psutil.virtual_memory().percent,
            disk_usage_percent=psutil.disk_usage('/').percent,
            active_tasks=self._count_tasks("processing"),
            failed_tasks=self._count_tasks("failed"),
            processing_time=self._get_average_processing_time()
        )

        self.metrics_collector.add_metrics(metrics)

        # Export metrics periodically
        if len(self.metrics_collector.metrics_history) % 100 == 0:
            export_path = self.metrics_dir / f"metrics_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
            self.metrics_collector.export_metrics(export_path)

        return metrics

    def _count_tasks(self, status: str) -> int:
        return sum(1 for task in list(self.processing_tasks.values()) if task.get("status") == status)

    def _get_average_processing_time(self) -> float:
        """Average duration in seconds of finished tasks"""
        durations = [task["duration"] for task in list(self.processing_tasks.values())
                     if task.get("duration") is not None]
        return sum(durations) / len(durations) if durations else 0.0

    def check_health(self) -> Tuple[str, List[str]]:
        """Comprehensive health check"""
        warnings = []
        status = SystemStatus.OK

        metrics = self.collect_metrics()

        # CPU check
        if metrics.cpu_percent > 90:
            warnings.append(f"Critical CPU usage: {metrics.cpu_percent}%")
            status = SystemStatus.CRITICAL
        elif metrics.cpu_percent > 75:
            warnings.append(f"High CPU usage: {metrics.cpu_percent}%")
            status = SystemStatus.WARNING

        # Memory check
        if metrics.memory_percent > 90:
            warnings.append(f"Critical memory usage: {metrics.memory_percent}%")
            status = SystemStatus.CRITICAL
        elif metrics.memory_percent > 75:
            warnings.append(f"High memory usage: {metrics.memory_percent}%")
            if status != SystemStatus.CRITICAL:
                status = SystemStatus.WARNING

        # Disk check
        if metrics.disk_usage_percent > 90:
            warnings.append(f"Critical disk usage: {metrics.disk_usage_percent}%")
            status = SystemStatus.CRITICAL

        self.logger.info({
            "event": "health_check",
            "status": status,
            "warnings": warnings,
            "metrics": vars(metrics)
        })

        return status, warnings

    def log_task_completion(self, task_id: str, success: bool, duration: float):
        """Log task completion metrics"""
        self.logger.info({
            "event": "task_completion",
            "task_id": task_id,
            "success": success,
            "duration": duration,
            "timestamp": datetime.utcnow().isoformat()
        })

    def log_extraction_metrics(self, source: str, strategy: str, entries_found: int):
        """Log extraction-specific metrics"""
        self.logger.info({
            "event": "extraction_metrics",
            "source": source,
            "strategy": strategy,
            "entries_found": entries_found,
            "timestamp": datetime.utcnow().isoformat()
        })

from finals_backend.monitoring import MonitoringService
from finals_backend.monitoring.monitoring import MetricsCollector, SystemMetrics, SystemStatus


def make_metrics(**overrides):
    values = dict(cpu_percent=1.0, memory_percent=1.0, disk_usage_percent=1.0,
                  active_tasks=0, failed_tasks=0, processing_time=0.0)
    values.update(overrides)
    return SystemMetrics(**values)


def test_metrics_history_is_bounded():
    collector = MetricsCollector(max_history_size=3)
    for i in range(5):
        collector.add_metrics(make_metrics(active_tasks=i))

    assert [m.active_tasks for m in collector.get_recent_metrics()] == [2, 3, 4]


def test_task_counts_follow_task_table():
    tasks = {
        "a": {"status": "processing"},
        "b": {"status": "failed", "duration": 2.0},
        "c": {"status": "completed", "duration": 4.0},
    }
    service = MonitoringService(tasks)
    metrics = service.collect_metrics()

    assert metrics.active_tasks == 1
    assert metrics.failed_tasks == 1
    assert metrics.processing_time == 3.0


def test_health_reports_critical_cpu(monkeypatch):
    service = MonitoringService()
    monkeypatch.setattr(service, "collect_metrics", lambda: make_metrics(cpu_percent=95.0))

    status, warnings = service.check_health()

    assert status == SystemStatus.CRITICAL
    assert warnings == ["Critical CPU usage: 95.0%"]


def test_health_ok():
    service = MonitoringService()
    service.collect_metrics = lambda: make_metrics()

    assert service.check_health() == (SystemStatus.OK, [])

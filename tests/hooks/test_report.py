"""Tests for the performance report."""

import hookctl.hooks.metrics as metrics
import hookctl.hooks.report as report


def _stats(**kwargs: object) -> metrics.HookExecutionStats:
    return metrics.HookExecutionStats(**kwargs)  # type: ignore[arg-type]


class TestBuildReport:
    """Tests for build_report()."""

    def test_empty(self) -> None:
        perf = report.build_report({})
        assert perf.summary == report.ReportSummary()
        assert perf.hooks == {}
        assert perf.recommendations == []

    def test_never_executed_hook(self) -> None:
        perf = report.build_report({"idle": metrics.HookExecutionStats()})
        assert perf.summary.total_hooks == 1
        assert perf.hooks["idle"].success_rate == "N/A"
        assert perf.hooks["idle"].min_time_ms is None

    def test_summary_and_rates(self) -> None:
        perf = report.build_report({
            "a": _stats(executions=4, failures=1, total_time_ms=100.0, avg_time_ms=25.0, min_time_ms=10.0, max_time_ms=40.0),
            "b": _stats(executions=1, failures=0, total_time_ms=50.0, avg_time_ms=50.0, min_time_ms=50.0, max_time_ms=50.0),
        })
        assert perf.summary.total_executions == 5
        assert perf.summary.total_failures == 1
        assert perf.summary.avg_execution_time_ms == 30.0
        assert perf.hooks["a"].success_rate == "75.00%"
        assert perf.hooks["b"].success_rate == "100.00%"

    def test_recommendations(self) -> None:
        perf = report.build_report(
            {
                "slow": _stats(executions=2, total_time_ms=3000.0, avg_time_ms=1500.0),
                "failing": _stats(executions=4, failures=2, total_time_ms=40.0, avg_time_ms=10.0),
                "disabled": _stats(executions=6, total_time_ms=6000.0, avg_time_ms=1000.0, disabled=True),
                "healthy": _stats(executions=5, failures=1, total_time_ms=50.0, avg_time_ms=10.0),
            },
            warning_threshold_ms=1000,
        )
        text = "\n".join(perf.recommendations)
        assert "'slow' averages 1500ms" in text
        assert "'failing' has 50.00% failure rate" in text
        assert "'disabled' was auto-disabled" in text
        assert "healthy" not in text
        assert perf.hooks["disabled"].disabled

    def test_to_dict(self) -> None:
        data = report.build_report({"a": _stats(executions=1, total_time_ms=5.0, avg_time_ms=5.0)}).to_dict()
        assert set(data) == {"summary", "hooks", "recommendations"}
        assert data["hooks"]["a"]["executions"] == 1

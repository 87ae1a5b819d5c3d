"""
Integration tests for a full benchmark sweep and the CLI.
"""

import re
from unittest.mock import AsyncMock, Mock, patch

import pytest
from click.testing import CliRunner

from conftest import (
    ScriptedMeasurable, ScriptedSetupMeasurable, make_action, make_config, make_response,
)
from clientbench.benchmark.catalog import ActionCatalog
from clientbench.benchmark.reporting import ElasticsearchReportSink
from clientbench.core.exceptions import ConfigurationError, ResponseError, TransportError
from clientbench.main import cli, run_benchmarks

STAT_LINE = re.compile(r"^(\w+): (\d+)ns$")


def _stat_lines(output):
    return [STAT_LINE.match(line).groups() for line in output.splitlines() if STAT_LINE.match(line)]


@pytest.fixture
def catalog():
    return ActionCatalog([
        make_action("ping", script=[200], warmups=1, repetitions=3),
        make_action("index", script=[TransportError("connection refused"), 201],
                    warmups=0, repetitions=2),
    ])


class TestRunBenchmarks:
    """Sweep over a catalog."""

    def test_runs_every_action_in_order(self, config, catalog, capsys):
        summaries = run_benchmarks(config, catalog)

        assert [s.action for s in summaries] == ["ping", "index"]
        ping, index = summaries
        assert (ping.repetitions, ping.successes, ping.errors) == (3, 3, 0)
        assert (index.repetitions, index.successes, index.failures, index.errors) == (2, 1, 1, 1)

        output = capsys.readouterr().out
        names = [name for name, _ in _stat_lines(output)]
        assert names == ["ping"] * 3 + ["index"] * 2
        assert "run 0: connection refused" in output

    def test_filter_skips_action_entirely(self, catalog, capsys):
        config = make_config(action_filter="index")
        index_measurable = list(catalog)[1].measurable

        summaries = run_benchmarks(config, catalog)

        assert [s.action for s in summaries] == ["ping"]
        assert index_measurable.calls == []
        assert all(name == "ping" for name, _ in _stat_lines(capsys.readouterr().out))

    def test_setup_failure_does_not_stop_sweep(self, config, capsys):
        broken = ScriptedSetupMeasurable([200], setup_error=TransportError("connection refused"))
        catalog = ActionCatalog([
            make_action("index", measurable=broken, repetitions=2),
            make_action("ping", repetitions=2),
        ])

        summaries = run_benchmarks(config, catalog)

        assert summaries[0].aborted
        assert summaries[1].successes == 2
        output = capsys.readouterr().out
        assert "index: setup failed: connection refused" in output
        assert [name for name, _ in _stat_lines(output)] == ["ping", "ping"]

    def test_each_action_is_reported(self, config, catalog):
        sink = Mock()

        run_benchmarks(config, catalog, sink)

        batches = [call.args[0] for call in sink.report.call_args_list]
        assert [b.action for b in batches] == ["ping", "index"]
        assert [len(b.stats) for b in batches] == [3, 2]

    def test_reporting_failure_is_not_fatal(self, config, catalog, capsys):
        sink = Mock()
        sink.report.side_effect = ResponseError(TransportError("report cluster down"))

        summaries = run_benchmarks(config, catalog, sink)

        assert len(summaries) == 2
        assert "report cluster down" in capsys.readouterr().out

    def test_html_bulk_reply_is_not_fatal(self, config, catalog, capsys):
        client = Mock()
        client.send = AsyncMock(return_value=make_response(200, body="<html>proxy ok</html>"))
        client.close = AsyncMock()

        summaries = run_benchmarks(config, catalog, ElasticsearchReportSink(client, "bench-data"))

        assert [s.action for s in summaries] == ["ping", "index"]
        assert "bulk response is not a JSON object" in capsys.readouterr().out


class TestCli:
    """Command-line interface."""

    def setup_method(self):
        self.runner = CliRunner()

    def _invoke(self, args, config=None, catalog=None):
        with patch("clientbench.main.load_config", return_value=config or make_config()), \
                patch("clientbench.main.setup_logging"), \
                patch("clientbench.main.default_catalog", return_value=catalog):
            return self.runner.invoke(cli, args)

    def test_run_prints_one_line_per_repetition(self, catalog):
        result = self._invoke(["run"], catalog=catalog)

        assert result.exit_code == 0, result.output
        lines = _stat_lines(result.output)
        assert [name for name, _ in lines] == ["ping"] * 3 + ["index"] * 2
        assert all(int(duration) >= 0 for _, duration in lines)

    def test_run_errors_are_not_fatal(self, catalog):
        result = self._invoke(["run"], catalog=catalog)

        assert result.exit_code == 0
        assert "run 0: connection refused" in result.output

    def test_filter_option_overrides_config(self, catalog):
        result = self._invoke(["run", "--filter", "index"], catalog=catalog)

        assert result.exit_code == 0
        assert {name for name, _ in _stat_lines(result.output)} == {"ping"}

    def test_repetition_override(self):
        measurable = ScriptedMeasurable([200])
        catalog = ActionCatalog([make_action("ping", measurable=measurable, warmups=5, repetitions=50)])

        result = self._invoke(["run", "--warmups", "0", "--repetitions", "2"], catalog=catalog)

        assert result.exit_code == 0
        assert len(_stat_lines(result.output)) == 2
        assert len(measurable.calls) == 2

    def test_summary_table(self, catalog):
        result = self._invoke(["run", "--summary"], catalog=catalog)

        assert result.exit_code == 0
        assert "Benchmark Summary" in result.output

    def test_report_flag_builds_sink(self, catalog):
        with patch("clientbench.main.ElasticsearchReportSink") as sink_class:
            result = self._invoke(["run", "--report"], catalog=catalog)

        assert result.exit_code == 0
        sink_class.from_config.assert_called_once()
        assert sink_class.from_config.return_value.report.call_count == 2

    def test_configuration_error_is_fatal(self):
        error = ConfigurationError(
            "BUILD_ID environment variable not found\nDATA_SOURCE environment variable is empty"
        )
        with patch("clientbench.main.load_config", side_effect=error):
            result = self.runner.invoke(cli, ["run"])

        assert result.exit_code == 1
        assert "BUILD_ID environment variable not found" in result.output
        assert "DATA_SOURCE environment variable is empty" in result.output

    def test_check_config(self):
        result = self._invoke(["check-config"])

        assert result.exit_code == 0
        assert "build-42" in result.output
        assert "http://localhost:9200" in result.output

    def test_list_actions(self):
        result = self.runner.invoke(cli, ["list"])

        assert result.exit_code == 0
        assert "ping" in result.output
        assert "index" in result.output

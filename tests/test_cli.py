"""
Tests for the quoterelay CLI module.
"""

import signal
from unittest.mock import call, patch

import yaml
from click.testing import CliRunner

from quoterelay.cli import load_commands, main
from quoterelay.relay.errors import FetchHTTPStatusError, PublishHTTPStatusError
from quoterelay.relay.fetcher import QuoteFetcher
from quoterelay.relay.publisher import BrokerPublisher
from quoterelay.relay.scheduler import RelayScheduler
from quoterelay.settings import Settings


class TestCLICore:
    """Test cases for core CLI functionality."""

    def test_main_cli_group_creation(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])

        assert result.exit_code == 0
        assert "quoterelay CLI" in result.output

    def test_plugin_commands_registered(self):
        for name in ("run", "once", "quote", "config", "info"):
            assert name in main.commands

    def test_cli_with_log_level_option(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--log-level", "DEBUG", "--help"])

        assert result.exit_code == 0

    def test_invalid_log_level(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--log-level", "LOUD", "info"])

        assert result.exit_code != 0

    @patch("quoterelay.cli.logger")
    def test_load_commands_with_plugin_error(self, mock_logger):
        with patch("quoterelay.cli.importlib.import_module") as mock_import:
            mock_import.side_effect = ImportError("Test import error")

            load_commands()

            mock_logger.error.assert_called()


class TestConfigCommands:
    """Test cases for the config command group."""

    def test_show_masks_api_key(self, test_settings):
        runner = CliRunner()
        result = runner.invoke(main, ["config", "show"], obj={"settings": test_settings})

        assert result.exit_code == 0
        assert "test-key-1234" not in result.output
        assert "*********1234" in result.output
        assert "AAPL, GOOGL, MSFT" in result.output
        assert "http://broker.test/updates" in result.output

    def test_check_incomplete(self, clean_env):
        runner = CliRunner()
        result = runner.invoke(
            main, ["config", "check"], obj={"settings": Settings(_env_file=None)}
        )

        assert result.exit_code != 0
        assert "QUOTERELAY_API_KEY" in result.output

    def test_check_complete(self, test_settings):
        runner = CliRunner()
        result = runner.invoke(main, ["config", "check"], obj={"settings": test_settings})

        assert result.exit_code == 0
        assert "Configuration is complete" in result.output

    def test_check_malformed_symbols_file(self, test_settings, temp_dir):
        path = temp_dir / "broken.yml"
        path.write_text("symbols: [AAPL\n")
        settings = test_settings.model_copy(update={"symbols_file": path})

        runner = CliRunner()
        result = runner.invoke(main, ["config", "check"], obj={"settings": settings})

        assert result.exit_code != 0
        assert not isinstance(result.exception, yaml.YAMLError)
        assert "✗ Cannot read symbols file" in result.output


class TestRunCommands:
    """Test cases for run, once and quote."""

    def test_run_without_configuration_aborts(self, clean_env):
        runner = CliRunner()
        result = runner.invoke(
            main, ["run", "--cycles", "1"], obj={"settings": Settings(_env_file=None)}
        )

        assert result.exit_code != 0
        assert "Missing required settings" in result.output

    def test_run_single_cycle(self, test_settings):
        runner = CliRunner()
        with patch.object(QuoteFetcher, "fetch_price", return_value=100.0) as fetch, \
                patch.object(BrokerPublisher, "publish") as publish:
            result = runner.invoke(
                main,
                ["run", "--cycles", "1", "--run-now", "--symbols", "IBM,ORCL"],
                obj={"settings": test_settings},
            )

        assert result.exit_code == 0, result.output
        assert [c.args[0] for c in fetch.call_args_list] == ["IBM", "ORCL"]
        assert publish.call_count == 2

    def test_run_stops_on_sigterm(self, test_settings):
        def fake_run(max_cycles=None):
            handler = mock_signal.call_args_list[0].args[1]
            handler(signal.SIGTERM, None)
            return 0

        runner = CliRunner()
        with patch.object(signal, "signal") as mock_signal, \
                patch.object(RelayScheduler, "run", side_effect=fake_run), \
                patch.object(RelayScheduler, "stop") as stop:
            result = runner.invoke(main, ["run"], obj={"settings": test_settings})

        assert result.exit_code == 0, result.output
        assert mock_signal.call_args_list[0].args[0] == signal.SIGTERM
        stop.assert_called_once()
        # Previous handler restored on the way out
        assert mock_signal.call_args_list[-1] == call(
            signal.SIGTERM, mock_signal.return_value
        )

    def test_run_stops_on_keyboard_interrupt(self, test_settings):
        runner = CliRunner()
        with patch.object(RelayScheduler, "run", side_effect=KeyboardInterrupt), \
                patch.object(RelayScheduler, "stop") as stop:
            result = runner.invoke(main, ["run"], obj={"settings": test_settings})

        assert result.exit_code == 0, result.output
        stop.assert_called_once()

    def test_run_with_missing_symbols_file_aborts(self, test_settings, temp_dir):
        settings = test_settings.model_copy(update={"symbols_file": temp_dir / "nope.yml"})

        runner = CliRunner()
        result = runner.invoke(main, ["run", "--cycles", "1"], obj={"settings": settings})

        assert result.exit_code != 0
        assert not isinstance(result.exception, OSError)
        assert "Cannot read symbols file" in result.output

    def test_once_with_missing_symbols_file_aborts(self, test_settings, temp_dir):
        settings = test_settings.model_copy(update={"symbols_file": temp_dir / "nope.yml"})

        runner = CliRunner()
        result = runner.invoke(main, ["once"], obj={"settings": settings})

        assert result.exit_code != 0
        assert not isinstance(result.exception, OSError)
        assert "Cannot read symbols file" in result.output

    def test_once_reports_each_symbol(self, test_settings):
        runner = CliRunner()
        with patch.object(QuoteFetcher, "fetch_price", return_value=189.25), \
                patch.object(BrokerPublisher, "publish"):
            result = runner.invoke(main, ["once"], obj={"settings": test_settings})

        assert result.exit_code == 0, result.output
        assert "✓ AAPL: 189.25" in result.output
        assert "Completed: 3/3 symbols relayed" in result.output

    def test_once_exit_code_on_failure(self, test_settings):
        def fetch(symbol):
            if symbol == "GOOGL":
                raise FetchHTTPStatusError(500, symbol)
            return 1.0

        def publish(record):
            if record.symbol == "MSFT":
                raise PublishHTTPStatusError(503, record.symbol)

        runner = CliRunner()
        with patch.object(QuoteFetcher, "fetch_price", side_effect=fetch), \
                patch.object(BrokerPublisher, "publish", side_effect=publish):
            result = runner.invoke(main, ["once"], obj={"settings": test_settings})

        assert result.exit_code == 1
        assert "✗ GOOGL: fetch_failed" in result.output
        assert "✗ MSFT: publish_failed" in result.output
        assert "Completed: 1/3 symbols relayed" in result.output

    def test_quote(self, test_settings):
        runner = CliRunner()
        with patch.object(QuoteFetcher, "fetch_price", return_value=42.5):
            result = runner.invoke(main, ["quote", "IBM"], obj={"settings": test_settings})

        assert result.exit_code == 0
        assert "IBM: 42.5" in result.output

    def test_quote_failure(self, test_settings):
        runner = CliRunner()
        with patch.object(
            QuoteFetcher, "fetch_price", side_effect=FetchHTTPStatusError(500, "IBM")
        ):
            result = runner.invoke(main, ["quote", "IBM"], obj={"settings": test_settings})

        assert result.exit_code != 0
        assert "✗ IBM" in result.output


class TestInfoCommand:
    """Test cases for the info command."""

    def test_info_lists_symbols(self, test_settings):
        runner = CliRunner()
        result = runner.invoke(main, ["info"], obj={"settings": test_settings})

        assert result.exit_code == 0
        assert "quoterelay version:" in result.output
        assert "  - GOOGL" in result.output

    def test_info_with_missing_symbols_file(self, test_settings, temp_dir):
        settings = test_settings.model_copy(update={"symbols_file": temp_dir / "nope.yml"})

        runner = CliRunner()
        result = runner.invoke(main, ["info"], obj={"settings": settings})

        assert result.exit_code != 0
        assert not isinstance(result.exception, OSError)
        assert "Cannot read symbols file" in result.output

"""Tests for command-line token parsing."""

import pytest

from pymbpoll.args import parse_args, parse_tokens
from pymbpoll.errors import ConfigValidationError, UnsupportedModeError, UsageError, WriteValueError
from pymbpoll.types import Action, DataType, Mode, ModbusTable, RegisterFormat


class TestTarget:
    """Classification of the first bare token as HOST or DEVICE."""

    def test_default_mode_binds_host(self) -> None:
        config = parse_tokens(["192.168.1.10"])
        assert config.mode is Mode.TCP
        assert config.host == "192.168.1.10"
        assert config.device == ""

    def test_rtu_before_target_binds_device(self) -> None:
        config = parse_tokens(["-m", "rtu", "/dev/ttyUSB0"])
        assert config.mode is Mode.RTU
        assert config.device == "/dev/ttyUSB0"
        assert config.host == ""

    def test_rtu_after_target_binds_host(self) -> None:
        """The mode seen so far decides; -m given later does not reclassify the target."""
        config = parse_tokens(["/dev/ttyUSB0", "-m", "rtu"])
        assert config.mode is Mode.RTU
        assert config.host == "/dev/ttyUSB0"
        assert config.device == ""

    def test_rtu_after_target_rejected_by_validation(self) -> None:
        with pytest.raises(ConfigValidationError, match="needs a DEVICE"):
            parse_args(["/dev/ttyUSB0", "-m", "rtu"])

    @pytest.mark.parametrize("mode", ["tls", "udp", "rtuovertcp", "rtuoverudp"])
    def test_network_modes_bind_host(self, mode: str) -> None:
        config = parse_args(["-m", mode, "plc.local"])
        assert config.host == "plc.local"
        assert config.device == ""

    def test_missing_target(self) -> None:
        with pytest.raises(UsageError, match="device or host parameter missing"):
            parse_tokens(["-c", "2"])

    def test_empty_command_line(self) -> None:
        with pytest.raises(UsageError, match="device or host parameter missing"):
            parse_tokens([])


class TestOptions:
    """Valued options, flags and their errors."""

    def test_defaults(self) -> None:
        config = parse_args(["h"])
        assert config.port == 502
        assert config.slave_id == 1
        assert config.start_ref == 1
        assert config.count == 1
        assert config.data_type == DataType(ModbusTable.HOLDING_REGISTER, RegisterFormat.DECIMAL)
        assert config.baudrate == 19200
        assert config.parity == "even"
        assert config.big_endian is True
        assert config.poll_once is False
        assert config.poll_rate_ms == 1000
        assert config.timeout == 1.0
        assert config.write_values == ()

    def test_short_and_long_forms(self) -> None:
        short = parse_args(["-a", "7", "-r", "100", "-c", "4", "-t", "3:hex", "-p", "1502", "h"])
        long = parse_args(
            ["--address", "7", "--reference", "100", "--count", "4", "--type", "3:hex", "--port", "1502", "h"]
        )
        assert short == long
        assert short.slave_id == 7
        assert short.start_ref == 100
        assert short.count == 4
        assert short.data_type == DataType(ModbusTable.INPUT_REGISTER, RegisterFormat.HEX)
        assert short.port == 1502

    def test_flags(self) -> None:
        config = parse_args(["-0", "-1", "-v", "-r", "0", "h"])
        assert config.zero_based is True
        assert config.poll_once is True
        assert config.verbose is True
        assert config.address == 0

    def test_word_order_flags(self) -> None:
        assert parse_args(["-L", "h"]).big_endian is False
        assert parse_args(["-L", "-B", "h"]).big_endian is True

    def test_timing_options(self) -> None:
        config = parse_args(["-o", "0.5", "-l", "100", "h"])
        assert config.timeout == 0.5
        assert config.poll_rate_ms == 100
        assert config.poll_rate == 0.1

    def test_serial_options(self) -> None:
        config = parse_args(["-m", "rtu", "-b", "9600", "-d", "7", "-s", "2", "-P", "none", "/dev/ttyS0"])
        assert (config.baudrate, config.databits, config.stopbits, config.parity) == (9600, 7, 2, "none")

    def test_options_after_target(self) -> None:
        config = parse_args(["h", "-c", "3", "-1"])
        assert config.count == 3
        assert config.poll_once is True

    def test_missing_value(self) -> None:
        with pytest.raises(UsageError, match="missing value for -c"):
            parse_tokens(["h", "-c"])

    def test_unknown_short_option(self) -> None:
        with pytest.raises(UsageError, match="unknown option: -x"):
            parse_tokens(["-x", "h"])

    def test_unknown_long_option(self) -> None:
        with pytest.raises(UsageError, match="unknown option: --bogus"):
            parse_tokens(["--bogus", "h"])

    def test_non_numeric_count(self) -> None:
        with pytest.raises(UsageError, match="invalid count: 'abc'"):
            parse_tokens(["-c", "abc", "h"])

    def test_non_numeric_timeout(self) -> None:
        with pytest.raises(UsageError, match="invalid timeout"):
            parse_tokens(["-o", "soon", "h"])

    def test_unsupported_mode_lists_modes(self) -> None:
        with pytest.raises(UnsupportedModeError) as exc_info:
            parse_tokens(["-m", "ascii", "h"])
        assert exc_info.value.mode == "ascii"
        assert "tcp, tls, udp, rtu, rtuovertcp, rtuoverudp" in str(exc_info.value)

    @pytest.mark.parametrize("tag", ["2", "5", "0:hex", "1:float", "4:double", "4:", ""])
    def test_unsupported_data_type(self, tag: str) -> None:
        with pytest.raises(UsageError, match="unsupported data type"):
            parse_tokens(["-t", tag, "h"])

    @pytest.mark.parametrize(
        ("tag", "table", "fmt"),
        [
            ("0", ModbusTable.COIL, RegisterFormat.DECIMAL),
            ("1", ModbusTable.DISCRETE_INPUT, RegisterFormat.DECIMAL),
            ("3:int", ModbusTable.INPUT_REGISTER, RegisterFormat.INT),
            ("4:float", ModbusTable.HOLDING_REGISTER, RegisterFormat.FLOAT),
        ],
    )
    def test_data_types(self, tag: str, table: ModbusTable, fmt: RegisterFormat) -> None:
        assert parse_tokens(["-t", tag, "h"]).data_type == DataType(table, fmt)

    def test_parity_checked_in_validation(self) -> None:
        assert parse_tokens(["-P", "mark", "h"]).parity == "mark"
        with pytest.raises(ConfigValidationError, match="parity must be none, even, or odd"):
            parse_args(["-P", "mark", "h"])


class TestWriteValues:
    """Bare tokens after the target and the -- separator."""

    def test_values_after_target(self) -> None:
        config = parse_args(["h", "1", "2.5", "1e3"])
        assert config.write_values == (1.0, 2.5, 1000.0)
        assert config.is_write is True

    def test_invalid_write_value(self) -> None:
        with pytest.raises(WriteValueError, match="invalid write value: 'abc'"):
            parse_tokens(["h", "1", "abc"])

    def test_separator_allows_negative_values(self) -> None:
        config = parse_args(["h", "--", "-1", "-2"])
        assert config.write_values == (-1.0, -2.0)

    def test_separator_takes_option_looking_tokens(self) -> None:
        config = parse_args(["h", "5", "--", "-0", "-3"])
        assert config.write_values == (5.0, -0.0, -3.0)
        assert config.zero_based is False

    def test_separator_before_target(self) -> None:
        with pytest.raises(UsageError, match="device or host parameter missing"):
            parse_tokens(["--", "5"])

    def test_options_between_values(self) -> None:
        config = parse_args(["h", "1", "-r", "10", "2"])
        assert config.write_values == (1.0, 2.0)
        assert config.start_ref == 10

    def test_read_when_no_values(self) -> None:
        assert parse_args(["h"]).is_write is False


class TestMeta:
    """Help and version short-circuit everything else."""

    def test_help(self) -> None:
        assert parse_args(["-h"]).action is Action.HELP
        assert parse_args(["--help"]).action is Action.HELP

    def test_version(self) -> None:
        assert parse_args(["-V"]).action is Action.VERSION

    def test_help_skips_target_and_validation(self) -> None:
        assert parse_args(["-c", "0", "--help", "-x"]).action is Action.HELP

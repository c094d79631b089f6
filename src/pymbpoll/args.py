"""
Command-line parsing for pymbpoll.

The parser walks the raw token list once, left to right, and builds a Configuration.
The first bare token is the target; it is classified as HOST or DEVICE using the mode
seen *so far*, so `-m` has to come before the target (`-m rtu /dev/ttyUSB0`).
Written the other way round the device path is taken as a host name and validation
rejects the result.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, NamedTuple, Sequence

from .config import Configuration, validate
from .errors import UsageError, WriteValueError
from .types import Action, DataType, Mode

SEPARATOR = "--"

HELP_TEXT = """\
pymbpoll - Modbus master for the command line

USAGE:
  pymbpoll [OPTIONS] DEVICE|HOST [WRITE_VALUES...] [OPTIONS]

ARGUMENTS:
  DEVICE        Serial port when using Modbus RTU (e.g. /dev/ttyUSB0, COM1)
  HOST          Host name or IP address for the network modes
  WRITE_VALUES  Values to write (if none are given, data is read)
                Put them after -- when they start with a minus sign

GENERAL OPTIONS:
  -m, --mode MODE         tcp, tls, udp, rtu, rtuovertcp, rtuoverudp (default: tcp)
                          Must be given before DEVICE|HOST
  -a, --address ADDR      Slave address (0-255, default: 1)
  -r, --reference REF     Start reference (default: 1)
  -c, --count COUNT       Number of values to read (1-125, default: 1)
  -t, --type TYPE         Data type:
                            0       = discrete output (coil)
                            1       = discrete input
                            3       = 16-bit input register
                            3:hex   = 16-bit input register, hex display
                            3:int   = 32-bit integer in input registers
                            3:float = 32-bit float in input registers
                            4       = 16-bit holding register (default)
                            4:hex   = 16-bit holding register, hex display
                            4:int   = 32-bit integer in holding registers
                            4:float = 32-bit float in holding registers
  -0, --zero-based        First reference is 0 (PDU addressing)
  -B, --big-endian        Big endian word order for 32-bit data (default)
  -L, --little-endian     Little endian word order for 32-bit data
  -1, --once              Poll only once, otherwise poll continuously
  -l, --poll-rate MS      Poll rate in milliseconds (>= 10, default: 1000)
  -o, --timeout SEC       Timeout in seconds (0.01-10.00, default: 1.0)

TCP OPTIONS:
  -p, --port PORT         TCP port number (default: 502)

RTU OPTIONS:
  -b, --baudrate RATE     Baudrate (1200-921600, default: 19200)
  -d, --databits BITS     Databits (7 or 8, default: 8)
  -s, --stopbits BITS     Stopbits (1 or 2, default: 1)
  -P, --parity PARITY     Parity: none, even, odd (default: even)

OTHER OPTIONS:
  -v, --verbose           Verbose mode
  -h, --help              Show this help message
  -V, --version           Show version information

EXAMPLES:
  pymbpoll -t 4 -r 1 -c 2 192.168.1.100
  pymbpoll -m rtu -t 3:float -r 1 -c 2 /dev/ttyUSB0
  pymbpoll -t 4 -r 1 192.168.1.100 123 456 789
  pymbpoll -t 4:float -r 1 192.168.1.100 16456 62915
  pymbpoll -t 0 -r 1 192.168.1.100 1 0 1 1
  pymbpoll -t 4 -r 1 192.168.1.100 -- -1
  pymbpoll -t 0 -r 1 -c 8 -l 500 192.168.1.100
"""


def _to_int(name: str) -> Callable[[str], int]:
    def convert(raw: str) -> int:
        try:
            return int(raw)
        except ValueError:
            raise UsageError(f"invalid {name}: {raw!r}") from None

    return convert


def _to_float(name: str) -> Callable[[str], float]:
    def convert(raw: str) -> float:
        try:
            return float(raw)
        except ValueError:
            raise UsageError(f"invalid {name}: {raw!r}") from None

    return convert


class _Option(NamedTuple):
    short: str
    long: str
    field: str
    convert: Callable[[str], Any] | None = None
    constant: Any = True


_OPTIONS: tuple[_Option, ...] = (
    _Option("-m", "--mode", "mode", Mode.parse),
    _Option("-a", "--address", "slave_id", _to_int("slave address")),
    _Option("-r", "--reference", "start_ref", _to_int("reference")),
    _Option("-c", "--count", "count", _to_int("count")),
    _Option("-t", "--type", "data_type", DataType.parse),
    _Option("-l", "--poll-rate", "poll_rate_ms", _to_int("poll rate")),
    _Option("-o", "--timeout", "timeout", _to_float("timeout")),
    _Option("-p", "--port", "port", _to_int("port")),
    _Option("-b", "--baudrate", "baudrate", _to_int("baudrate")),
    _Option("-d", "--databits", "databits", _to_int("databits")),
    _Option("-s", "--stopbits", "stopbits", _to_int("stopbits")),
    _Option("-P", "--parity", "parity", str),
    _Option("-0", "--zero-based", "zero_based"),
    _Option("-B", "--big-endian", "big_endian", constant=True),
    _Option("-L", "--little-endian", "big_endian", constant=False),
    _Option("-1", "--once", "poll_once"),
    _Option("-v", "--verbose", "verbose"),
    _Option("-h", "--help", "action", constant=Action.HELP),
    _Option("-V", "--version", "action", constant=Action.VERSION),
)

_BY_TOKEN: dict[str, _Option] = {token: opt for opt in _OPTIONS for token in (opt.short, opt.long)}


def parse_write_value(raw: str) -> float:
    """Parse one positional write value; raises WriteValueError naming the token."""
    try:
        return float(raw)
    except ValueError:
        raise WriteValueError(f"invalid write value: {raw!r}", value=raw) from None


@dataclass
class _ParseState:
    """Explicit state threaded through one parse; never shared between calls."""

    fields: dict[str, Any] = field(default_factory=dict)
    host: str = ""
    device: str = ""
    write_values: list[float] = field(default_factory=list)

    @property
    def mode(self) -> Mode:
        return self.fields.get("mode", Mode.TCP)

    @property
    def has_target(self) -> bool:
        return bool(self.host or self.device)

    def take_bare(self, token: str) -> None:
        if not self.has_target:
            if self.mode.is_network:
                self.host = token
            else:
                self.device = token
        else:
            self.write_values.append(parse_write_value(token))


def parse_tokens(tokens: Sequence[str]) -> Configuration:
    """
    Turn raw command-line tokens (program name excluded) into a Configuration.

    Does not run the range checks; see parse_args. Help and version requests stop
    parsing at once and come back as a Configuration whose action says so.
    """
    state = _ParseState()
    i = 0
    while i < len(tokens):
        token = tokens[i]
        if token == SEPARATOR:
            state.write_values.extend(parse_write_value(t) for t in tokens[i + 1 :])
            break
        opt = _BY_TOKEN.get(token)
        if opt is not None:
            if opt.convert is None:
                if opt.field == "action":
                    return Configuration(action=opt.constant)
                state.fields[opt.field] = opt.constant
                i += 1
                continue
            if i + 1 >= len(tokens):
                raise UsageError(f"missing value for {token}", option=token)
            state.fields[opt.field] = opt.convert(tokens[i + 1])
            i += 2
            continue
        if token.startswith("-") and len(token) > 1:
            raise UsageError(f"unknown option: {token}", option=token)
        state.take_bare(token)
        i += 1

    if not state.has_target:
        raise UsageError("device or host parameter missing ! Try -h for help")

    return Configuration(
        **state.fields,
        host=state.host,
        device=state.device,
        write_values=tuple(state.write_values),
    )


def parse_args(tokens: Sequence[str]) -> Configuration:
    """Parse and validate; the result is ready for the transport selector and dispatcher."""
    config = parse_tokens(tokens)
    if config.action is not Action.RUN:
        return config
    return validate(config)

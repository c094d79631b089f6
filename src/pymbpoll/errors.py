"""Clear exceptions for pymbpoll: bad command lines, bad values and Modbus I/O errors."""


class MbpollError(Exception):
    """Base exception for pymbpoll."""

    pass


class UsageError(MbpollError):
    """Raised when the command line is malformed (missing value, unknown option, bad value)."""

    def __init__(self, message: str, *, option: str | None = None) -> None:
        self.option = option
        super().__init__(message)


class ConfigValidationError(UsageError):
    """Raised when a parsed field falls outside its legal range."""

    def __init__(self, message: str, *, field: str | None = None) -> None:
        self.field = field
        super().__init__(message)


class WriteValueError(UsageError):
    """Raised when a write value cannot be used for the selected data type."""

    def __init__(self, message: str, *, value: object = None) -> None:
        self.value = value
        super().__init__(message)


class UnsupportedModeError(UsageError):
    """Raised for a transport mode outside the six supported ones."""

    def __init__(self, mode: str, supported: tuple[str, ...]) -> None:
        self.mode = mode
        super().__init__(f"unsupported mode: {mode} (supported: {', '.join(supported)})", option="-m")


class NotWritableError(UsageError):
    """Raised when write values are given for a read-only data type."""

    def __init__(self, data_type: str) -> None:
        self.data_type = data_type
        super().__init__(f"write operations not supported for data type: {data_type}", option="-t")


class ModbusIOError(MbpollError):
    """Raised when a Modbus read/write fails (wraps pymodbus or connection errors)."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        table: str | None = None,
        address: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.operation = operation
        self.table = table
        self.address = address
        self.cause = cause
        super().__init__(message)

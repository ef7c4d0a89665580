"""Parameter monitoring: condition checks and the feedback connection."""

from __future__ import annotations

import socket
import struct

FLOAT_EPSILON = 2.0**-23

CONDITIONS = (">", ">=", "<", "<=", "==", "!=")


def _as_float32(value: float) -> float:
    return struct.unpack("f", struct.pack("f", value))[0]


def floats_differ_enough(a: float, b: float) -> bool:
    """True when ``a`` and ``b`` differ by at least single-precision epsilon."""
    return abs(a - b) >= FLOAT_EPSILON


def check_condition(op: int, cond_value: float, value: float) -> bool:
    """Test ``value`` against ``cond_value`` with the operator at ``CONDITIONS[op]``.

    Unknown operators never match.
    """
    if op == 0:
        return value > cond_value
    if op == 1:
        return value >= cond_value
    if op == 2:
        return value < cond_value
    if op == 3:
        return value <= cond_value
    if op == 4:
        return not floats_differ_enough(value, cond_value)
    if op == 5:
        return floats_differ_enough(value, cond_value)
    return False


class ParameterMonitor:
    """TCP connection that receives ``monitor`` messages for watched parameters."""

    def __init__(self) -> None:
        self._sock: socket.socket | None = None
        self._active = False

    def __enter__(self) -> ParameterMonitor:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()

    def start(self, addr: str, port: int) -> None:
        """Connect to ``addr:port`` over IPv4 and switch to non-blocking mode.

        Raises OSError when the host cannot be resolved or reached.
        """
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            host = socket.gethostbyname(addr)
            sock.connect((host, port))
        except OSError:
            sock.close()
            raise
        self._sock = sock
        self._active = True
        sock.setblocking(False)

    def status(self) -> bool:
        return self._active

    def stop(self) -> None:
        """Close the connection, if any, and mark monitoring as off."""
        if self._sock is not None:
            self._sock.close()
            self._sock = None
        self._active = False

    def send(self, instance: int, symbol: str, value: float) -> int:
        """Send ``monitor <instance> <symbol> <value>`` with a trailing NUL.

        Returns the number of bytes sent.
        """
        if self._sock is None:
            raise ConnectionError("parameter monitor is not connected")
        message = f"monitor {instance} {symbol} {_as_float32(value):f}".encode() + b"\0"
        self._sock.sendall(message)
        return len(message)
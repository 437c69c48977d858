"""Server: accepts one client and logs the messages and packages it sends."""

from __future__ import annotations

import argparse
import logging
import socket
import sys

from .protocol import OpCode, decode_values

PORT = 4444
DEFAULT_LOG_PATH = "log.log"

_INT_SIZE = 4
_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d:%(thread)d): %(message)s"
_logger = logging.getLogger("Servidor")


def start_server(host: str = "", port: int = PORT) -> socket.socket:
    """Create a listening IPv4 TCP socket."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        if hasattr(socket, "SO_REUSEPORT"):
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEPORT, 1)
        sock.bind((host, port))
        sock.listen(socket.SOMAXCONN)
    except OSError:
        sock.close()
        raise
    _logger.debug("Listo para escuchar a mi cliente")
    return sock


def wait_client(server_sock: socket.socket) -> socket.socket:
    """Accept one client connection."""
    try:
        conn, _ = server_sock.accept()
    except OSError:
        _logger.error("Error al aceptar cliente")
        raise
    _logger.info("Se conecto un cliente!")
    return conn


def _recv_exact(sock: socket.socket, size: int) -> bytes:
    data = bytearray()
    while len(data) < size:
        chunk = sock.recv(size - len(data))
        if not chunk:
            raise ConnectionError("connection closed by peer")
        data += chunk
    return bytes(data)


def _recv_int(sock: socket.socket) -> int:
    return int.from_bytes(_recv_exact(sock, _INT_SIZE), "little", signed=True)


def receive_operation(sock: socket.socket) -> int:
    """Read the next operation code.

    Unknown codes come back as plain ints. When the client has gone the
    socket is closed and ConnectionError is raised.
    """
    try:
        value = _recv_int(sock)
    except OSError as exc:
        sock.close()
        raise ConnectionError("client disconnected") from exc
    try:
        return OpCode(value)
    except ValueError:
        return value


def receive_buffer(sock: socket.socket) -> bytes:
    """Read a size-prefixed payload."""
    size = _recv_int(sock)
    return _recv_exact(sock, max(size, 0))


def receive_message(sock: socket.socket) -> str:
    """Read and log a text message."""
    data = receive_buffer(sock)
    message = data.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    _logger.info("Me llego el mensaje %s", message)
    return message


def receive_package(sock: socket.socket) -> list[str]:
    """Read a package and return its values."""
    return decode_values(receive_buffer(sock))


def serve(sock: socket.socket, logger: logging.Logger | None = None) -> list[tuple[OpCode, object]]:
    """Handle frames until the client disconnects; return what arrived."""
    log = logger or _logger
    received: list[tuple[OpCode, object]] = []
    while True:
        try:
            op = receive_operation(sock)
        except ConnectionError:
            log.error("el cliente se desconecto. Terminando servidor")
            return received
        if op == OpCode.MESSAGE:
            received.append((OpCode.MESSAGE, receive_message(sock)))
        elif op == OpCode.PACKAGE:
            values = receive_package(sock)
            log.info("Me llegaron los siguientes valores:\n")
            for value in values:
                log.info("%s", value)
            received.append((OpCode.PACKAGE, values))
        else:
            log.warning("Operacion desconocida. No quieras meter la pata")


def _configure_logger(path: str) -> None:
    formatter = logging.Formatter(_FORMAT)
    for handler in (logging.FileHandler(path, encoding="utf-8"), logging.StreamHandler(sys.stdout)):
        handler.setFormatter(formatter)
        _logger.addHandler(handler)
    _logger.setLevel(logging.DEBUG)
    _logger.propagate = False


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Receive messages from one client.")
    parser.add_argument("--port", type=int, default=PORT)
    parser.add_argument("--log", default=DEFAULT_LOG_PATH)
    args = parser.parse_args(argv)

    _configure_logger(args.log)
    with start_server(port=args.port) as server_sock:
        _logger.info("Servidor listo para recibir al cliente")
        client = wait_client(server_sock)
        with client:
            serve(client)
    return 1


if __name__ == "__main__":
    sys.exit(main())
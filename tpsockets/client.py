"""Client: logs, reads its config and console, then sends to the server."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from collections.abc import Iterable, Iterator

from .protocol import Package, encode_message

LOGGER_NAME = "Hola! Soy un log"
DEFAULT_LOG_PATH = "tp0.log"
DEFAULT_CONFIG_PATH = "cliente.config"

_FORMAT = "[%(levelname)s] %(asctime)s %(name)s/(%(process)d:%(thread)d): %(message)s"


def start_logger(path: str) -> logging.Logger:
    """Create the client logger, writing to ``path`` and to stdout."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    formatter = logging.Formatter(_FORMAT)
    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setFormatter(formatter)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)
    logger.setLevel(logging.INFO)
    logger.propagate = False
    return logger


def load_config(path: str) -> dict[str, str]:
    """Read ``KEY=VALUE`` lines; blank lines and ``#`` comments are skipped."""
    config: dict[str, str] = {}
    with open(path, encoding="utf-8") as handle:
        for raw in handle:
            line = raw.rstrip("\r\n")
            if not line or line.startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if sep:
                config[key] = value
    return config


def _console_lines() -> Iterator[str]:
    while True:
        try:
            yield input("> ")
        except EOFError:
            return


def read_console(logger: logging.Logger, lines: Iterable[str]) -> list[str]:
    """Read lines until an empty one, logging every line after the first.

    The terminating empty line is logged too. Returns the logged lines.
    """
    source = iter(lines)
    first = next(source, None)
    if not first:
        return []
    logged: list[str] = []
    for line in source:
        logger.info(">> %s", line)
        logged.append(line)
        if line == "":
            break
    return logged


def build_package(lines: Iterable[str]) -> Package:
    """Collect lines into a package until an empty line."""
    package = Package()
    for line in lines:
        if line == "":
            break
        package.add(line)
    return package


def create_connection(ip: str, port: str | int) -> socket.socket:
    """Open a TCP connection to the server over IPv4."""
    infos = socket.getaddrinfo(ip, int(port), socket.AF_INET, socket.SOCK_STREAM)
    family, socktype, proto, _, address = infos[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.connect(address)
    except OSError:
        sock.close()
        raise
    return sock


def send_message(message: str, sock: socket.socket) -> None:
    """Send one text message."""
    sock.sendall(encode_message(message))


def send_package(package: Package, sock: socket.socket) -> None:
    """Send a package of values."""
    sock.sendall(package.serialize())


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Send console input to the server.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--log", default=DEFAULT_LOG_PATH)
    args = parser.parse_args(argv)

    try:
        logger = start_logger(args.log)
    except OSError:
        print("No pude crear el logger", file=sys.stderr)
        return 1
    logger.info("Hola! Soy un log")

    try:
        config = load_config(args.config)
    except OSError:
        print("No pude crear el config", file=sys.stderr)
        return 1

    values = {}
    for key in ("IP", "PUERTO", "CLAVE"):
        if key not in config:
            logger.error("Falta la clave %s en el config", key)
            return 1
        values[key] = config[key]
        logger.info("%s", values[key])

    console = _console_lines()
    read_console(logger, console)

    try:
        sock = create_connection(values["IP"], values["PUERTO"])
    except (OSError, ValueError):
        logger.error("Nose pudo establecer conexión con el servidor")
        return 1

    with sock:
        send_message(values["CLAVE"], sock)
        send_package(build_package(console), sock)
    return 0


if __name__ == "__main__":
    sys.exit(main())
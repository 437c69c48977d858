# tpsockets

A small TCP client and server that talk over a simple binary protocol.
The client sends one text message and then a package of values. The server
logs everything it receives.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running

Start the server first. By default it listens on port 4444 on all IPv4
interfaces and waits for a single client:

```
tpsockets-server [--port PORT] [--log PATH]
```

Its log goes to `log.log` (or `--log`) and to standard output, at debug
level.

Then start the client in another terminal:

```
tpsockets-client [--config PATH] [--log PATH]
```

The client reads `cliente.config` and logs to `tp0.log` by default; the log
is also echoed to standard output. The configuration file holds `KEY=VALUE`
lines; blank lines and lines starting with `#` are skipped. For example:

```
IP=127.0.0.1
PUERTO=4444
CLAVE=hello
```

The client then works in these steps:

1. It logs a greeting and the values of `IP`, `PUERTO` and `CLAVE`. If the
   log or the configuration file cannot be opened, or one of the keys is
   missing, it exits with status 1.
2. It reads lines from the console after a `> ` prompt until an empty line.
   The first line is read but not logged; every later line, including the
   closing empty one, is logged as `>> line`.
3. It connects to `IP`:`PUERTO` and sends the value of `CLAVE` as a message.
   If the connection fails it logs an error and exits with status 1.
4. It reads more lines until an empty line (or end of input), collects them
   into a package and sends it.

The server logs each message it receives, and every value of each package.
A frame with an operation code it does not know is logged as a warning and
the server goes on reading. When the client disconnects, the server logs an
error and exits with status 1.

## Protocol

Every frame holds three parts, in this order. Integers are 4-byte signed
little-endian.

| field          | size           | meaning                                        |
|----------------|----------------|------------------------------------------------|
| operation code | 4-byte integer | `OpCode.MESSAGE` (0) or `OpCode.PACKAGE` (1)   |
| payload size   | 4-byte integer | number of payload bytes that follow            |
| payload        | variable       | message text or packed values                  |

A message payload is UTF-8 text followed by a terminating NUL byte. A
package payload is a run of entries, each a 4-byte length followed by that
many bytes of value; text values are stored NUL-terminated.

## Library use

`tpsockets.protocol` builds and reads frames without touching a socket:

- `OpCode`: the operation codes `MESSAGE` and `PACKAGE`.
- `Package`: collects values with `add()` and produces a complete frame with
  `serialize()`.
- `serialize(op_code, payload)`: frames any payload.
- `encode_message(message)`: builds a complete message frame.
- `decode_values(payload)`: splits a package payload back into its values,
  raising `ValueError` if it is truncated or holds a negative length.

`tpsockets.client` offers `start_logger`, `load_config`, `read_console`,
`build_package`, `create_connection`, `send_message`, `send_package` and
`main`.

`tpsockets.server` offers `start_server`, `wait_client`,
`receive_operation`, `receive_buffer`, `receive_message`,
`receive_package`, `serve` and `main`. `serve` handles frames until the
client disconnects and returns the list of `(OpCode, value)` pairs that
arrived.

## What it does not do

The server accepts exactly one client and stops when that client leaves; it
does not serve several clients, concurrently or one after another. No
configuration file is shipped with the package; the client needs one
written by hand.
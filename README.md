# modbuskit

Small building blocks for Modbus tools written in Python. It has no
dependencies outside the standard library.

## What is inside

### `modbuskit.coils.CoilData`

Packed storage for up to 2000 Modbus coils (bits), laid out LSB-first in
bytes as on the wire.

- `CoilData(size, init_value)` creates `size` coils (capped at 2000), all set
  to `init_value`.
- `CoilData.from_image("1101 0010")` builds a set from a bit image;
  `assign_image` re-initialises an existing set and raises `ValueError` if the
  image holds no valid bits or more than 2000.
- `len()`, `bool()`, iteration and `bytes()` give the coil count, whether
  there are any coils, the coil values and the packed bytes.
- `coils[i]` reads one coil; indexes outside the set read as `False`.
- `slice(start, length)` returns a new set (length 0 means "to the end");
  illegal ranges give an empty set.
- `set(index, value)`, `set_bytes(start, length, data)`,
  `set_coils(index, other)` and `set_image(index, image)` change coils. They
  raise `IndexError` for positions outside the set, and `set_bytes` raises
  `ValueError` when `data` is too short. `set_coils` and `set_image` stop when
  either side runs out.
- `matches(image)` (also `coils == "1010"`) compares with a bit image; bits in
  the image beyond the coil count make it fail. Two `CoilData` objects compare
  equal when size and content match.
- `init(value)`, `coils_on()`, `coils_off()`.
- `format(label)` renders the coils in groups of four after a label, wrapping
  near 80 columns; `print(label, stream)` writes that to a stream (standard
  output by default).

In bit images `1` and `0` are bits and `_` makes the next bit digit be
skipped. Any other character is a separator: it is ignored, and it cancels a
pending `_`.

### `modbuskit.logging_utils`

- `LogLevel` (`NONE` … `VERBOSE`), with `set_log_level` / `get_log_level`
  holding one shared level (default `ERROR`); `set_log_level` raises
  `ValueError` for unknown levels.
- `file_name(path)` returns the part after the last `/` or `\`.
- `format_hex_dump(letter, label, data)` renders a header line followed by
  rows of 16 bytes in hex and ASCII; `hex_dump(...)` writes it to a stream.
  The header shows an object id and the data length.
- ANSI colour constants `RED`, `GREEN`, `YELLOW`, `BLUE`, `MAGENTA`, `CYAN`,
  `NORMAL`.

### `modbuskit.ipaddress_value`

- `IPAddress(b0, b1, b2, b3)`, `IPAddress.from_int(value)` and
  `IPAddress.parse("a.b.c.d")`; `int()`, `str()`, byte access with `[]`
  (out-of-range reads give 0, writes are ignored) and equality against other
  addresses, 32-bit integers and dotted strings.
- `parse_dotted(text)` splits dotted text into four bytes; invalid text gives
  `(0, 0, 0, 0)`.
- `NIL_ADDR` is `0.0.0.0`.

### `modbuskit.tcp_client.TcpClient`

A small blocking TCP client addressed by `IPAddress` or host name:
`connect`, `disconnect` (drains pending input for up to two seconds, then
closes), `write`, `read`, `available`, `peek`, `connected`, `set_no_delay`,
`stop`, and `hostname_to_ip`. It works as a context manager and closes the
connection on exit. `connect` raises `ConnectionError` for an unknown host
name and `OSError` when the connection fails.

### `modbuskit.target`

`parse_target(source, resolver)` parses `IP[:port[:serverID]]` or
`hostname[:port[:serverID]]` into a `Target` (`ip`, `port`, `server_id`,
defaulting to 502 and 1). Host names go through `resolver`, or DNS by
default. It raises `TargetError` (a `ValueError` with a `code` of
`UNKNOWN_HOST`, `BAD_PORT` or `BAD_SERVER_ID`) for invalid descriptors.

## What it does not do

modbuskit does not build or decode Modbus request and response messages, and
it has no Modbus client, server, bridge or request queue. It also has no
command-line program. It supplies the pieces listed above for code that does
those jobs.

## Installation

```
pip install .
```

## Examples

Coils:

```python
from modbuskit.coils import CoilData

coils = CoilData(35)
coils.set(3, True)
coils.set_image(20, "0110 1001 0110")
print(coils.format("State: "), end="")
print(bytes(coils.slice(13, 12)))
print(coils.coils_on(), coils.coils_off())
```

Targets:

```python
from modbuskit.target import parse_target

target = parse_target("192.168.1.20:502:1")
print(target.ip, target.port, target.server_id)
```

Hex dumps:

```python
from modbuskit.logging_utils import format_hex_dump

print(format_hex_dump("D", "Response", b"\x01\x03\x02\x00\x2a"), end="")
```

## Running the tests

```
pip install .[test]
pytest
```
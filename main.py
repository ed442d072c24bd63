import argparse
import sys

from typing import Callable, Dict, List, Optional, Tuple
from membuffer import MemoryBuffer
from readers import ArrayReader, BinaryReader
from writer import MemoryBufferWriter

#: Value type name -> (writer method, reader method, takes endianness)
TYPES: Dict[str, Tuple[str, str, bool]] = {
    "u8": ("write_byte", "read_byte", False),
    "i8": ("write_sbyte", "read_sbyte", False),
    "u16": ("write_uint16", "read_uint16", True),
    "i16": ("write_int16", "read_int16", True),
    "u32": ("write_uint32", "read_uint32", True),
    "i32": ("write_int32", "read_int32", True),
    "u64": ("write_uint64", "read_uint64", True),
    "i64": ("write_int64", "read_int64", True),
    "f32": ("write_single", "read_single", True),
    "f64": ("write_double", "read_double", True),
}
RAW = "raw"  #: Type name for verbatim bytes


def get_parser():
    """Create and configure the CLI argument parser.

    :returns: Configured argument parser.
    :rtype: argparse.ArgumentParser
    """
    parser = argparse.ArgumentParser(
        description="Encode and decode fixed-width binary values"
    )
    subparsers = parser.add_subparsers(
        title="subcommands", dest="cmd", required=True
    )

    pack = subparsers.add_parser(
        "pack", aliases=["p"], help="Encode typed values into bytes"
    )
    pack.add_argument(
        "values",
        nargs="+",
        help="Values as TYPE:LITERAL (e.g. i32:300, f64:1.5, raw:0a0b)",
    )
    pack.add_argument(
        "-o", "--output", help="Write bytes to a file instead of printing hex"
    )

    unpack = subparsers.add_parser(
        "unpack", aliases=["u"], help="Decode bytes into typed values"
    )
    unpack.add_argument(
        "types",
        nargs="+",
        help="Types to read in order (e.g. i32 f64 raw:4)",
    )
    source = unpack.add_mutually_exclusive_group(required=True)
    source.add_argument("-i", "--input", help="Read bytes from a file")
    source.add_argument("--hex", help="Read bytes from a hex string")

    for sub in (pack, unpack):
        order = sub.add_mutually_exclusive_group()
        order.add_argument(
            "--big",
            dest="little_endian",
            action="store_false",
            help="Big-endian byte order",
        )
        order.add_argument(
            "--little",
            dest="little_endian",
            action="store_true",
            help="Little-endian byte order (default)",
        )
        sub.set_defaults(little_endian=True)
        sub.add_argument(
            "-q", "--quiet", action="store_true", help="Suppress the summary"
        )

    return parser


def _split_item(item: str) -> Tuple[str, str]:
    """Split ``TYPE:LITERAL`` into its parts.

    :param item: Command line item.
    :type item: str
    :returns: ``(type_name, literal)``; literal is empty when absent.
    :rtype: Tuple[str, str]
    :raises ValueError: If the type name is unknown.
    """
    name, _, literal = item.partition(":")
    name = name.strip().lower()
    if name != RAW and name not in TYPES:
        raise ValueError(f"Unknown type: {name}")
    return name, literal


def _parse_literal(name: str, literal: str):
    """Convert a literal to the Python value a writer method expects.

    :param name: Type name.
    :type name: str
    :param literal: Text after the colon.
    :type literal: str
    :returns: ``bytes`` for raw, ``float`` for f32/f64, ``int`` otherwise.
    :raises ValueError: If the literal cannot be parsed.
    """
    if not literal:
        raise ValueError(f"Missing value for {name}")
    if name == RAW:
        return bytes.fromhex(literal)
    if name.startswith("f"):
        return float(literal)
    return int(literal, 0)


def _fmt_bytes(n: int) -> str:
    """Format a byte count into a human-readable string.

    :param n: Number of bytes.
    :type n: int
    :returns: Human-readable string.
    :rtype: str
    """
    for unit in ['', 'Ki', 'Mi', 'Gi']:
        if abs(n) < 1024:
            return f"{n:.2f} {unit}B"
        n /= 1024
    return f"{n:.2f} TiB"


def pack_values(items: List[str], little_endian: bool) -> bytes:
    """Encode ``TYPE:LITERAL`` items in order.

    :param items: Items to encode.
    :type items: List[str]
    :param little_endian: Byte order for multi-byte values.
    :type little_endian: bool
    :returns: The encoded bytes.
    :rtype: bytes
    :raises ValueError: If an item is malformed.
    """
    buffer = MemoryBuffer()
    writer = MemoryBufferWriter(buffer, little_endian)
    for item in items:
        name, literal = _split_item(item)
        value = _parse_literal(name, literal)
        if name == RAW:
            writer.write(value)
            continue
        method_name, _, ordered = TYPES[name]
        method: Callable = getattr(writer, method_name)
        if ordered:
            method(value, little_endian)
        else:
            method(value)
    return buffer.to_bytes()


def _read_item(reader: BinaryReader, item: str, little_endian: bool):
    name, literal = _split_item(item)
    if name == RAW:
        if not literal:
            raise ValueError("raw needs a byte count (raw:N)")
        return name, reader.read_bytes(int(literal, 0))
    _, method_name, ordered = TYPES[name]
    method: Callable = getattr(reader, method_name)
    return name, method(little_endian) if ordered else method()


def unpack_values(
    data: bytes, items: List[str], little_endian: bool
) -> Tuple[List[Tuple[str, object]], int]:
    """Decode ``items`` from the start of ``data``.

    :param data: Encoded bytes.
    :type data: bytes
    :param items: Type names (``raw:N`` for raw bytes).
    :type items: List[str]
    :param little_endian: Byte order for multi-byte values.
    :type little_endian: bool
    :returns: Decoded ``(type_name, value)`` pairs and the unread byte count.
    :rtype: Tuple[List[Tuple[str, object]], int]
    :raises ValueError: If an item is malformed.
    :raises EOFError: If ``data`` is too short.
    """
    reader = ArrayReader(data, little_endian=little_endian)
    values = [_read_item(reader, item, little_endian) for item in items]
    return values, reader.remaining


def _format_value(value) -> str:
    if isinstance(value, bytes):
        return value.hex()
    return repr(value)


def run_pack(
    items: List[str],
    output_path: Optional[str],
    little_endian: bool,
    quiet: bool,
) -> int:
    """Handle the ``pack`` subcommand.

    :returns: Process exit status.
    :rtype: int
    """
    try:
        data = pack_values(items, little_endian)
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    if output_path is None:
        print(data.hex())
    else:
        try:
            with open(output_path, "wb") as out:
                out.write(data)
        except OSError as e:
            print(f"[!] Cannot write {output_path}: {e}")
            return 1
    if not quiet:
        print("Encoded size: ", _fmt_bytes(len(data)))
    return 0


def run_unpack(
    items: List[str],
    input_path: Optional[str],
    hex_data: Optional[str],
    little_endian: bool,
    quiet: bool,
) -> int:
    """Handle the ``unpack`` subcommand.

    :returns: Process exit status.
    :rtype: int
    """
    try:
        if input_path is not None:
            with open(input_path, "rb") as f:
                data = f.read()
        else:
            data = bytes.fromhex(hex_data)
    except FileNotFoundError:
        print(f"[!] Input file not found: {input_path}")
        return 1
    except ValueError as e:
        print(f"[!] Invalid hex input: {e}")
        return 1

    try:
        values, left = unpack_values(data, items, little_endian)
    except ValueError as e:
        print(f"[!] {e}")
        return 1
    except EOFError as e:
        print(f"[!] Input too short: {e}")
        return 1

    for name, value in values:
        print(f"{name} = {_format_value(value)}")
    if not quiet and left:
        print("Unread: ", _fmt_bytes(left))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI tool.

    :param argv: Arguments to parse; defaults to ``sys.argv[1:]``.
    :type argv: Optional[List[str]]
    :returns: Process exit status.
    :rtype: int
    """
    parser = get_parser()
    args = parser.parse_args(argv)

    if args.cmd in ["pack", "p"]:
        return run_pack(
            args.values, args.output, args.little_endian, args.quiet
        )
    return run_unpack(
        args.types, args.input, args.hex, args.little_endian, args.quiet
    )


if __name__ == "__main__":
    sys.exit(main())

import argparse
import json
import sys
from typing import Callable

import yaml
from colorama import Fore, Style, just_fix_windows_console

import edid_tools.edid.bcp00501 as bcp00501
import edid_tools.edid.edid as edid
import edid_tools.edid.json_mapping as json_mapping
import edid_tools.edid.mode_filter as mode_filter
import edid_tools.edid.text_dump as text_dump
import edid_tools.io_util as io_util
from edid_tools.edid.common import EdidError


class EdidToolArgs(argparse.Namespace):
    subcommand_function: Callable[["EdidToolArgs"], None]
    input_edid_file: str | None
    input_edid_files: list[str] | None
    input_json_file: str | None
    output_edid_file: str | None
    output_json_file: str | None
    filter_file: str | None


def parse_args() -> EdidToolArgs:
    parser = argparse.ArgumentParser(
        prog="edid_tool",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Decode, edit and encode binary EDID files with CTA-861 extension blocks.",
    )
    subparsers = parser.add_subparsers(
        description="Use these subcommands to inspect, convert or filter EDID files.",
        required=True,
    )

    # Subcommand: decode
    decode = subparsers.add_parser(
        "decode",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Print a human-readable description of a binary EDID file.",
        description="Print every block, descriptor and data block of a binary EDID file, "
        "followed by the list of video modes it advertises.",
    )
    decode.set_defaults(subcommand_function=decode_command)
    decode.add_argument(
        "input_edid_file",
        type=str,
        help="Input binary EDID file.",
    )

    # Subcommand: to_json
    to_json = subparsers.add_parser(
        "to_json",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Convert a binary EDID file to JSON.",
        description="Convert a binary EDID file to JSON.  The JSON file can be edited and "
        "converted back with the from_json command.",
    )
    to_json.set_defaults(subcommand_function=to_json_command)
    to_json.add_argument(
        "input_edid_file",
        type=str,
        help="Input binary EDID file.",
    )
    to_json.add_argument(
        "output_json_file",
        type=str,
        nargs="?",
        help="Output JSON file.  The JSON is printed if no file is given.",
    )

    # Subcommand: from_json
    from_json = subparsers.add_parser(
        "from_json",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Convert a JSON file back to a binary EDID file.",
        description="Convert a JSON file previously created by the to_json command back to a "
        "binary EDID file.  Checksums and the extension block count are recalculated.",
    )
    from_json.set_defaults(subcommand_function=from_json_command)
    from_json.add_argument(
        "input_json_file",
        type=str,
        help="Input JSON file.",
    )
    from_json.add_argument(
        "output_edid_file",
        type=str,
        help="Output binary EDID file.",
    )

    # Subcommand: bcp_005_01
    bcp = subparsers.add_parser(
        "bcp_005_01",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Print the NMOS BCP-005-01 constraint sets for the video modes of an EDID.",
        description="Print one NMOS BCP-005-01 receiver capability constraint set as JSON for "
        "each distinct video mode advertised by a binary EDID file.",
    )
    bcp.set_defaults(subcommand_function=bcp_005_01_command)
    bcp.add_argument(
        "input_edid_file",
        type=str,
        help="Input binary EDID file.",
    )
    bcp.add_argument(
        "--filter",
        dest="filter_file",
        type=str,
        help="YAML mode filter file.  Modes removed by the filter are left out of the output.",
    )

    # Subcommand: filter
    filter_parser = subparsers.add_parser(
        "filter",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Remove video modes from a binary EDID file.",
        description="Remove the video modes rejected by a YAML mode filter file from a binary "
        "EDID file, and write the re-encoded EDID to a new file.",
    )
    filter_parser.set_defaults(subcommand_function=filter_command)
    filter_parser.add_argument(
        "input_edid_file",
        type=str,
        help="Input binary EDID file.",
    )
    filter_parser.add_argument(
        "filter_file",
        type=str,
        help="YAML mode filter file.",
    )
    filter_parser.add_argument(
        "output_edid_file",
        type=str,
        help="Output binary EDID file.",
    )

    # Subcommand: test_run
    test_run = subparsers.add_parser(
        "test_run",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        help="Check that binary EDID files survive decoding and encoding unchanged.",
        description="Decode and re-encode each binary EDID file, and report whether the "
        "result is identical to the original file.",
    )
    test_run.set_defaults(subcommand_function=test_run_command)
    test_run.add_argument(
        "input_edid_files",
        type=str,
        nargs="+",
        help="Input binary EDID files.",
    )

    return parser.parse_args(namespace=EdidToolArgs())


def read_edid(input_edid_filename: str) -> edid.EdidData:
    print(f"Reading EDID from {input_edid_filename}...", file=sys.stderr)
    return edid.parse_binary(io_util.read_file(input_edid_filename))


def decode_command(args: EdidToolArgs) -> None:
    input_edid_filename = args.input_edid_file
    assert input_edid_filename is not None

    edid_data = read_edid(input_edid_filename)
    for line in text_dump.describe_edid(edid_data):
        if line.startswith(text_dump.SECTION_PREFIX):
            print(f"{Fore.CYAN}{Style.BRIGHT}{line}{Style.RESET_ALL}")
        else:
            print(line)


def to_json_command(args: EdidToolArgs) -> None:
    input_edid_filename = args.input_edid_file
    assert input_edid_filename is not None

    edid_data = read_edid(input_edid_filename)
    json_text = json.dumps(json_mapping.edid_to_dict(edid_data), indent=2)
    if args.output_json_file is None:
        print(json_text)
    else:
        print(f"Writing JSON to {args.output_json_file}...", file=sys.stderr)
        with open(args.output_json_file, "wt") as output_json_file:
            output_json_file.write(json_text + "\n")


def from_json_command(args: EdidToolArgs) -> None:
    input_json_filename = args.input_json_file
    assert input_json_filename is not None
    output_edid_filename = args.output_edid_file
    assert output_edid_filename is not None

    print(f"Reading JSON from {input_json_filename}...", file=sys.stderr)
    with open(input_json_filename, "rt") as input_json_file:
        edid_data = json_mapping.edid_from_dict(json.load(input_json_file))

    print(f"Writing EDID to {output_edid_filename}...", file=sys.stderr)
    io_util.write_file(output_edid_filename, edid.to_binary(edid_data))


def load_mode_filter(filter_filename: str) -> mode_filter.ModeFilter:
    print(f"Reading mode filter from {filter_filename}...", file=sys.stderr)
    with open(filter_filename, "rb") as filter_file:
        return mode_filter.load_mode_filter(filter_file)


def bcp_005_01_command(args: EdidToolArgs) -> None:
    input_edid_filename = args.input_edid_file
    assert input_edid_filename is not None

    edid_data = read_edid(input_edid_filename)
    if args.filter_file is not None:
        load_mode_filter(args.filter_file).apply(edid_data)
    print(json.dumps(bcp00501.generate_constraint_sets(edid_data), indent=2))


def filter_command(args: EdidToolArgs) -> None:
    input_edid_filename = args.input_edid_file
    assert input_edid_filename is not None
    filter_filename = args.filter_file
    assert filter_filename is not None
    output_edid_filename = args.output_edid_file
    assert output_edid_filename is not None

    edid_data = read_edid(input_edid_filename)
    load_mode_filter(filter_filename).apply(edid_data)

    print(f"Writing EDID to {output_edid_filename}...", file=sys.stderr)
    io_util.write_file(output_edid_filename, edid.to_binary(edid_data))


def test_run_command(args: EdidToolArgs) -> None:
    input_edid_filenames = args.input_edid_files
    assert input_edid_filenames is not None

    failures = 0
    for input_edid_filename in input_edid_filenames:
        edid_bytes = io_util.read_file(input_edid_filename)
        try:
            round_trip_bytes = edid.to_binary(edid.parse_binary(edid_bytes))
        except EdidError as e:
            print(f"{Fore.RED}FAIL{Style.RESET_ALL} {input_edid_filename}: {e}")
            failures += 1
            continue
        if round_trip_bytes == edid_bytes:
            print(f"{Fore.GREEN}OK{Style.RESET_ALL}   {input_edid_filename}")
        else:
            print(f"{Fore.RED}DIFF{Style.RESET_ALL} {input_edid_filename}")
            failures += 1

    print(f"{len(input_edid_filenames) - failures} of {len(input_edid_filenames)} files passed.")
    if failures:
        sys.exit(1)


def main() -> None:
    just_fix_windows_console()
    args = parse_args()
    try:
        args.subcommand_function(args)
    except (EdidError, OSError, yaml.YAMLError, KeyError, ValueError) as e:
        print(f"{Fore.RED}Error: {e}{Style.RESET_ALL}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

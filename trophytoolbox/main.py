import argparse
import sys
import logging

from trophytoolbox.Utilities import Logger, SettingsManager
from trophytoolbox.Utilities.Trophy import (
    EntryFlag, ESMFDecrypter, TRPCreator, TRPExtractor, TRPReader, TRPError, Utils
)


def extract_trophies(args, settings):
    output = args.output or settings.output_directory
    trophy_key = args.key or settings.trophy_key
    decrypter = ESMFDecrypter(trophy_key) if trophy_key else None
    if decrypter is None:
        Logger.log_warning("No trophy key configured, encrypted trophy data will be skipped")

    extractor = TRPExtractor(output, decrypt=decrypter)
    status = extractor.extract(args.title)
    if not status:
        Logger.log_error(f"Trophy data unavailable for {args.title}")
        return 1
    Logger.log_information(f"Trophy extraction finished for {args.title}: {status.value}")
    return 0


def print_trp_info(args, settings):
    try:
        with TRPReader(args.trp) as trp:
            print(f"TRP Version: {trp.version}")
            print(f"File size: {trp.file_size}")
            print(f"Files count: {trp.file_count}")
            print(f"Element size: {trp.header.entry_size}")
            print(f"Dev flag: {trp.header.dev_flag}")
            integrity = trp.verify_integrity()
            if integrity is not None:
                print(f"SHA1: {trp.sha1} ({'OK' if integrity else 'MISMATCH'})")

            for entry in trp.entries():
                line = f"{entry.index:3d}  {Utils.printable_name(entry.name):<32} offset=0x{entry.offset:08X} size={entry.size:<8d} flag={entry.flag}"
                if entry.flag == EntryFlag.PNG:
                    try:
                        width, height = Utils.image_dimensions(trp.read_payload(entry.offset, entry.size))
                        line += f" {width}x{height}"
                    except (TRPError, OSError) as e:
                        logging.debug(f"Cannot read image {entry.name}: {e}")
                print(line)
    except (TRPError, OSError) as e:
        Logger.log_error(f"Cannot read {args.trp}: {e}")
        return 1
    return 0


def create_trp(args, settings):
    creator = TRPCreator()
    creator.set_version = args.version
    try:
        creator.create(args.output, args.files)
    except (OSError, ValueError) as e:
        Logger.log_error(f"Error creating file: {e}")
        return 1
    Logger.log_information(f"Packed {len(args.files)} files into {args.output}")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="trophytoolbox", description="Extract and inspect PS4 trophy (TRP) containers")
    parser.add_argument("--settings", help="Path to the JSON settings file")
    parser.add_argument("--log-file", help="Write a debug log to this file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages to the console")
    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract icons and trophy XML for a title")
    extract.add_argument("title", help="Title directory containing sce_sys/trophy and sce_sys/npbind.dat")
    extract.add_argument("-o", "--output", help="Output root directory")
    extract.add_argument("--key", help="Trophy key as 32 hex characters")
    extract.set_defaults(func=extract_trophies)

    info = subparsers.add_parser("info", help="Show the header and entries of a TRP file")
    info.add_argument("trp", help="Path to a TRP file")
    info.set_defaults(func=print_trp_info)

    create = subparsers.add_parser("create", help="Pack files into a TRP file")
    create.add_argument("output", help="Path of the TRP file to write")
    create.add_argument("files", nargs="+", help="Files to pack")
    create.add_argument("--version", type=int, default=3, choices=[1, 2, 3], help="TRP version")
    create.set_defaults(func=create_trp)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = SettingsManager.load_settings(args.settings)

    level = "DEBUG" if args.verbose else settings.log_level
    Logger.setup_logger(args.log_file or settings.log_file or None, level)

    try:
        return args.func(args, settings)
    except ValueError as e:
        Logger.log_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())

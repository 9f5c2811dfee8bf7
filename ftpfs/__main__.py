import argparse
import logging
import stat
import sys
from typing import List, Optional, TextIO

from ftpfs.clients.filesystem import FileSystem
from ftpfs.clients.ftplibclient import FtplibPool
from ftpfs.config import Config, FtpConfig
from ftpfs.config.base import DEFAULT_CONFIG_PATH
from ftpfs.exceptions import FtpfsError
from ftpfs.filemetadata import FileMetadata


class Exit(Exception):
    pass


def format_entry(info: FileMetadata) -> str:
    """Render an entry like one row of ``ls -l``."""
    return (
        f"{stat.filemode(info.mode)} {info.size:>12} "
        f"{info.modified_time.strftime('%Y-%m-%d %H:%M:%S')} {info.name}"
    )


def run_command(fs: FileSystem, args: argparse.Namespace, out: TextIO) -> None:
    match args.command:
        case "ls":
            for info in fs.read_dir(args.path):
                print(format_entry(info), file=out)
        case "stat":
            print(format_entry(fs.stat(args.path)), file=out)
        case "pwd":
            print(fs.getwd(), file=out)
        case "mkdir":
            print(fs.mkdir(args.path), file=out)
        case "rmdir":
            fs.rmdir(args.path)
        case "rm":
            fs.delete(args.path)
        case "mv":
            fs.rename(args.src, args.dst)
        case _:
            raise Exit(f"fatal error: unknown command '{args.command}'.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ftpfs", description="run file operations on an FTP remote"
    )
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("-v", "--verbose", action="store_true", help="log protocol traffic")
    parser.add_argument("remote")

    commands = parser.add_subparsers(dest="command", required=True)
    for name in ("ls", "stat", "mkdir", "rmdir", "rm"):
        commands.add_parser(name).add_argument("path")
    commands.add_parser("pwd")
    mv = commands.add_parser("mv")
    mv.add_argument("src")
    mv.add_argument("dst")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the ftpfs command line."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        config = Config.from_path(args.config)

        for warning in config.get_warnings():
            print(f"Warning: {warning}", file=sys.stderr)

        remote_config = config.get_remote(args.remote)
        if not isinstance(remote_config, FtpConfig):
            raise Exit(f"fatal error: remote '{args.remote}' is not an FTP remote.")

        with FtplibPool(remote_config) as pool:
            run_command(FileSystem(pool, name=remote_config.name), args, sys.stdout)

    except (Exit, FtpfsError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())

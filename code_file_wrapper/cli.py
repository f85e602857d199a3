import argparse
import logging
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import FILETYPES, PRESETS
from .file_ops import (
    OUTPUT_FILE,
    append_additional_commands,
    combine_commands,
    write_folder_tags,
)
from .selection import SelectionRecord, parse_extensions, parse_ignored_folders
from .sinks import ClipboardError, copy_to_clipboard, open_in_viewer

log = logging.getLogger(__name__)
console = Console()
err_console = Console(stderr=True)

DEFAULT_EXTENSIONS = ("rs", "toml", "json", "lua", "md", "txt")


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    description = """
    Creates a text file of tag-wrapped file contents from a directory.

    Without a path, a window asks for the directory, file types, presets and
    extra commands. With a path, the directory is processed right away using
    the built-in extension list (or --extensions).
    """
    epilog = f"""
    Output is written to ./{OUTPUT_FILE}. File type groups and presets are kept
    in ./{FILETYPES.path} and ./{PRESETS.path}.

    Example: wrap every Rust and TOML file of a crate, skipping target/
    $ code-file-wrapper ./my-crate -e rs toml -r --ignore-folders target
    """
    parser = argparse.ArgumentParser(
        prog="code-file-wrapper",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        nargs="?",
        help="Full path to a folder (skips the selection window).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    path_group = parser.add_argument_group("Path Mode Options")
    path_group.add_argument(
        "-e",
        "--extensions",
        nargs="+",
        default=[],
        help=f"File extensions to include (default: {', '.join(DEFAULT_EXTENSIONS)}).",
        metavar="EXT",
    )
    path_group.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        help="Descend into subfolders. Folders starting with '.' are always skipped.",
    )
    path_group.add_argument(
        "--ignore-folders",
        nargs="+",
        default=[],
        help="Folder names to skip while recursing (case insensitive).",
        metavar="NAME",
    )
    path_group.add_argument(
        "-c",
        "--clipboard",
        action="store_true",
        help="Copy the output file to the clipboard.",
    )
    path_group.add_argument(
        "-m",
        "--command",
        default="",
        help="Text to append under [Additional Commands].",
        metavar="TEXT",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging for detailed execution information.",
    )
    return parser


def selection_from_args(args: argparse.Namespace) -> SelectionRecord:
    return SelectionRecord(
        directory=Path(args.path),
        extensions=parse_extensions(args.extensions) or DEFAULT_EXTENSIONS,
        recursive=args.recursive,
        ignored_folder_names=parse_ignored_folders("\n".join(args.ignore_folders)),
        user_text=args.command,
        copy_to_clipboard=args.clipboard,
    )


def run_selection_session() -> SelectionRecord:
    from .gui import mode_selection_gui

    return mode_selection_gui(FILETYPES.load(), PRESETS.load())


def ask_open_output(output_file: Path) -> bool:
    from . import gui

    return gui.ask_open_output(output_file)


def process_selection(selection: SelectionRecord, output_file: Path) -> int:
    """Write the output file for a confirmed selection. Returns the exit code."""
    directory = selection.directory
    if not directory.is_dir():
        log.error(f"Selected path is not a directory: {directory}")
        return 1

    console.print(f"[bold blue]Wrapping files from[/] [green]{escape(str(directory))}[/]")
    console.print(f"Including extensions: [green]{escape(', '.join(selection.extensions))}[/]")
    if selection.recursive:
        ignored = ", ".join(sorted(selection.ignored_folder_names)) or "none"
        console.print(f"Recursive search: [cyan]Yes[/] (ignoring: [yellow]{escape(ignored)}[/])")

    try:
        with console.status("Writing tags..."):
            summary = write_folder_tags(
                directory,
                selection.extensions,
                selection.recursive,
                selection.ignored_folder_names,
                output_file,
            )
    except OSError as e:
        log.error(f"Could not write folder tags: {e}")
        return 1

    combined = combine_commands(selection.preset_texts, selection.user_text)
    if combined.strip():
        try:
            append_additional_commands(output_file, combined)
        except OSError as e:
            log.error(f"Could not append combined additional commands: {e}")
            return 1

    console.print(
        f"[bold green]✓[/] {summary.written} files written to [blue]{escape(str(output_file))}[/]. "
        f"{summary.skipped} files skipped (unreadable/not UTF-8)."
    )
    return 0


def deliver_output(output_file: Path, clipboard: bool, offer_viewer: bool) -> None:
    if clipboard:
        try:
            copy_to_clipboard(output_file)
            console.print("[green]Copied to clipboard.[/]")
        except ClipboardError as e:
            log.error(f"Could not copy to clipboard: {e}")
    elif offer_viewer and ask_open_output(output_file):
        try:
            open_in_viewer(output_file)
        except OSError as e:
            log.error(f"Failed to open {output_file}: {e}")


def main(argv: Optional[List[str]] = None) -> int:
    """Wrap a directory's files in tags, from the command line or the selection window."""
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)
    output_file = Path(OUTPUT_FILE)

    if args.path is not None:
        path = Path(args.path)
        if not path.exists():
            log.error(f"Path '{args.path}' does not exist.")
            return 1
        if not path.is_dir():
            log.error(f"Path '{args.path}' is not a directory.")
            return 1
        selection = selection_from_args(args)
        interactive = False
    else:
        selection = run_selection_session()
        interactive = True

    if selection.directory is None:
        log.info("No directory selected. Exiting.")
        return 0
    if selection.extensions is None:
        log.info("No file type group selected. Exiting.")
        return 0

    status = process_selection(selection, output_file)
    if status != 0:
        return status

    deliver_output(output_file, selection.copy_to_clipboard, offer_viewer=interactive)
    return 0

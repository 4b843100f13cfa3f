"""
Cellmontage CLI - Build labelled two-channel microscopy montages.

Run 'python -m cellmontage help' for usage information.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from pathlib import Path

import numpy as np

VERSION = "0.1.0"


class Style:
    """Terminal styling with ANSI codes."""

    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"

    BRIGHT_BLACK = "\033[90m"
    BRIGHT_CYAN = "\033[96m"
    BRIGHT_WHITE = "\033[97m"

    RESET = "\033[0m"

    @classmethod
    def disable(cls) -> None:
        """Disable all styling."""
        for attr in dir(cls):
            if attr.isupper() and not attr.startswith("_"):
                setattr(cls, attr, "")


class Icons:
    """Unicode icons and box-drawing characters."""

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    CIRCLE = "○"
    DIAMOND = "◆"
    CHEVRON = "›"
    INFO = "ℹ"
    BOX_H = "─"
    BOX_L = "├"
    BOX_BL = "╰"

    @classmethod
    def disable(cls) -> None:
        """Replace unicode with ASCII fallbacks."""
        cls.CHECK = "+"
        cls.CROSS = "x"
        cls.ARROW = "->"
        cls.CIRCLE = "o"
        cls.DIAMOND = "*"
        cls.CHEVRON = ">"
        cls.INFO = "(i)"
        cls.BOX_H = "-"
        cls.BOX_L = "|"
        cls.BOX_BL = "`"


class Spinner:
    """Animated spinner for long operations."""

    FRAMES = ["⣾", "⣽", "⣻", "⢿", "⡿", "⣟", "⣯", "⣷"]
    FALLBACK = ["|", "/", "-", "\\"]

    def __init__(self, message: str = ""):
        self.message = message
        self._stop = False
        self._thread: threading.Thread | None = None
        self._frames = self.FRAMES if sys.stdout.isatty() else self.FALLBACK

    def __enter__(self) -> "Spinner":
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop()

    def start(self) -> None:
        if not sys.stdout.isatty():
            return
        self._stop = False
        self._thread = threading.Thread(target=self._spin, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop = True
        if self._thread:
            self._thread.join(timeout=0.5)
            # Clear spinner line
            sys.stdout.write("\r\033[K")
            sys.stdout.flush()

    def _spin(self) -> None:
        s = Style
        i = 0
        while not self._stop:
            frame = self._frames[i % len(self._frames)]
            sys.stdout.write(f"\r  {s.CYAN}{frame}{s.RESET} {self.message}")
            sys.stdout.flush()
            time.sleep(0.08)
            i += 1


# Disable colors if not a TTY
if not sys.stdout.isatty():
    Style.disable()
    Icons.disable()


def _print_error(message: str) -> None:
    """Print an error message."""
    s = Style
    i = Icons
    print()
    print(f"  {s.RED}{i.CROSS}{s.RESET} {s.RED}{s.BOLD}Error{s.RESET} {message}")
    print()


def _print_success(path: str) -> None:
    """Print a success message."""
    s = Style
    i = Icons
    print(f"  {s.GREEN}{i.CHECK}{s.RESET} {s.GREEN}{s.BOLD}Saved{s.RESET} {path}")
    print()


def _print_step(message: str, status: str = "working") -> None:
    """Print a step in a process."""
    s = Style
    i = Icons
    if status == "working":
        print(f"  {s.YELLOW}{i.CHEVRON}{s.RESET} {message}")
    elif status == "done":
        print(f"  {s.GREEN}{i.CHECK}{s.RESET} {message}")
    elif status == "info":
        print(f"  {s.BRIGHT_BLACK}{i.CIRCLE}{s.RESET} {s.DIM}{message}{s.RESET}")


def _print_header(title: str) -> None:
    """Print an operation header."""
    s = Style
    i = Icons
    print()
    print(f"  {s.BRIGHT_CYAN}{s.BOLD}{i.DIAMOND} {title}{s.RESET}")
    print(f"  {s.BRIGHT_BLACK}{i.BOX_H * 54}{s.RESET}")
    print()


def _print_subcommand_help(name: str, usage: str, options: list[tuple[str, str, str]], examples: list[tuple[str, str]]) -> None:
    """Print help for a subcommand."""
    s = Style
    i = Icons

    _print_header(name)
    print(f"  {s.BOLD}USAGE{s.RESET}")
    print(f"  {s.DIM}${s.RESET} {usage}")
    print()

    if options:
        print(f"  {s.BOLD}OPTIONS{s.RESET}")
        for opt, arg, desc in options:
            if arg:
                print(f"    {s.CYAN}{opt}{s.RESET} {s.DIM}{arg}{s.RESET}")
                print(f"        {s.BRIGHT_BLACK}{i.ARROW}{s.RESET} {desc}")
            else:
                print(f"    {s.CYAN}{opt}{s.RESET}  {s.BRIGHT_BLACK}{i.ARROW}{s.RESET} {desc}")
        print()

    if examples:
        print(f"  {s.BOLD}EXAMPLES{s.RESET}")
        for comment, cmd in examples:
            print(f"  {s.BRIGHT_BLACK}# {comment}{s.RESET}")
            print(f"  {s.DIM}${s.RESET} {cmd}")
            print()


def _print_help() -> None:
    """Print help information."""
    s = Style
    _print_header(f"CELLMONTAGE TOOLS v{VERSION}")
    print(f"  {s.DIM}Align, normalize and merge two-channel microscopy images{s.RESET}")
    print()
    print(f"  {s.BOLD}USAGE{s.RESET}")
    print(f"  {s.DIM}${s.RESET} python -m cellmontage {s.CYAN}<command>{s.RESET} {s.BRIGHT_BLACK}[files] [options]{s.RESET}")
    print()
    print(f"  {s.BOLD}COMMANDS{s.RESET}")
    for cmd, desc in (
        ("row", "Compose one row from a channel pair"),
        ("montage", "Compose and stack several rows"),
        ("info", "Show TIFF page count, shape and dtype"),
        ("config", "Write a default settings file"),
        ("version", "Show version"),
        ("help", "Show this help"),
    ):
        print(f"    {s.CYAN}{cmd:10}{s.RESET}{s.DIM}{desc}{s.RESET}")
    print()
    print(f"  {s.BOLD}GLOBAL OPTIONS{s.RESET}")
    print(f"    {s.CYAN}{'--verbose':10}{s.RESET}{s.DIM}Print ROI and scaling diagnostics{s.RESET}")
    print()


def _make_rng(seed: str | None) -> np.random.Generator:
    """Seeded generator, or an OS-entropy one when no seed is given."""
    return np.random.default_rng(None if seed is None else int(seed))


def _load_config(path: str | None):
    from cellmontage.core.config import load_processing_config
    from cellmontage.core.types import ProcessingConfig

    if path is None:
        return ProcessingConfig()
    return load_processing_config(path)


def _print_info(file_path: str) -> int:
    """Print TIFF file information."""
    from cellmontage.core.exceptions import DecodeError
    from cellmontage.core.file import describe_tiff

    s = Style
    i = Icons
    path = Path(file_path)
    if not path.exists():
        _print_error(f"File not found: {file_path}")
        return 1

    try:
        info = describe_tiff(path)
    except DecodeError as e:
        _print_error(f"Could not read file: {e}")
        return 1

    _print_header(path.name)
    rows = [
        ("Pages", str(info.n_pages)),
        ("Size", f"{info.width} x {info.height} px"),
        ("Shape", str(info.shape)),
        ("Dtype", info.dtype),
        ("Photometric", info.photometric),
    ]
    for idx, (label, value) in enumerate(rows):
        connector = i.BOX_BL if idx == len(rows) - 1 else i.BOX_L
        print(f"  {s.BRIGHT_BLACK}{connector}{i.BOX_H}{s.RESET} {label:12} {value}")
    print()
    return 0


def _compose_row_cmd(args: list[str]) -> int:
    """Compose a single row from two TIFF files."""
    from cellmontage.core.config import get_output_dir
    from cellmontage.core.file import load_tiff
    from cellmontage.processing.export import export_row_png
    from cellmontage.processing.pipeline import process_row

    if len(args) < 2:
        _print_subcommand_help(
            "Row",
            "python -m cellmontage row <ch1.tif> <ch2.tif> [output.png] [options]",
            [
                ("--label", "<text>", "Row (condition) label"),
                ("--config", "<file.json>", "Settings file"),
                ("--seed", "<n>", "Seed for the brightness jitter"),
                ("--no-column-labels", "", "Do not draw column labels"),
                ("--view", "", "Preview the row and ROI after saving"),
            ],
            [
                ("Compose a row with default settings", "python -m cellmontage row gfp.tif rfp.tif"),
                ("Label the condition", "python -m cellmontage row gfp.tif rfp.tif wt.png --label WT"),
            ],
        )
        return 1

    ch1_path, ch2_path = args[0], args[1]
    output_path: str | None = None
    label = ""
    config_path: str | None = None
    seed: str | None = None
    first_row = True
    view = False

    i = 2
    while i < len(args):
        if args[i] == "--label" and i + 1 < len(args):
            label = args[i + 1]
            i += 2
        elif args[i] == "--config" and i + 1 < len(args):
            config_path = args[i + 1]
            i += 2
        elif args[i] == "--seed" and i + 1 < len(args):
            seed = args[i + 1]
            i += 2
        elif args[i] == "--no-column-labels":
            first_row = False
            i += 1
        elif args[i] == "--view":
            view = True
            i += 1
        elif not output_path:
            output_path = args[i]
            i += 1
        else:
            i += 1

    if not output_path:
        output_path = str(get_output_dir() / f"{Path(ch1_path).stem}_row.png")

    _print_header("Row")
    _print_step(f"Channel 1: {Path(ch1_path).name}", "info")
    _print_step(f"Channel 2: {Path(ch2_path).name}", "info")
    print()

    try:
        config = _load_config(config_path)
        with Spinner("Loading channels..."):
            channel1 = load_tiff(ch1_path)
            channel2 = load_tiff(ch2_path)
        _print_step(f"Loaded {channel1.width}x{channel1.height}", "done")

        with Spinner("Composing row..."):
            result = process_row(channel1, channel2, config, label, first_row, _make_rng(seed))
        roi = result.roi
        _print_step(f"ROI at ({roi.x}, {roi.y}) size {roi.w}x{roi.h}", "done")

        saved = export_row_png(result.figure, output_path)
        print()
        _print_success(str(saved))
    except Exception as e:
        _print_error(str(e))
        return 1

    if view:
        from cellmontage.viewer.preview import MontagePreview

        MontagePreview(result.figure, title=label or None, sources=(channel1, channel2), roi=roi).show()
    return 0


def _compose_montage_cmd(args: list[str]) -> int:
    """Compose several rows and stack them into one montage."""
    from cellmontage.core.config import get_output_dir
    from cellmontage.core.constants import MONTAGE_ROW_GAP
    from cellmontage.core.file import load_tiff
    from cellmontage.processing.export import default_montage_name, export_montage_png
    from cellmontage.processing.montage import MontageRow, compose_rows

    files: list[str] = []
    output_path: str | None = None
    labels: list[str] = []
    config_path: str | None = None
    seed: str | None = None
    gap_arg: str | None = None
    view = False

    i = 0
    while i < len(args):
        if args[i] in ("-o", "--output") and i + 1 < len(args):
            output_path = args[i + 1]
            i += 2
        elif args[i] == "--labels" and i + 1 < len(args):
            labels = [part.strip() for part in args[i + 1].split(",")]
            i += 2
        elif args[i] == "--config" and i + 1 < len(args):
            config_path = args[i + 1]
            i += 2
        elif args[i] == "--seed" and i + 1 < len(args):
            seed = args[i + 1]
            i += 2
        elif args[i] == "--gap" and i + 1 < len(args):
            gap_arg = args[i + 1]
            i += 2
        elif args[i] == "--view":
            view = True
            i += 1
        else:
            files.append(args[i])
            i += 1

    if not files or len(files) % 2:
        _print_subcommand_help(
            "Montage",
            "python -m cellmontage montage <ch1.tif> <ch2.tif> [<ch1.tif> <ch2.tif> ...] [options]",
            [
                ("-o, --output", "<file.png>", "Output file (default: montage_<time>.png)"),
                ("--labels", "<A,B,...>", "Comma-separated row labels"),
                ("--config", "<file.json>", "Settings file"),
                ("--seed", "<n>", "Seed for the brightness jitter"),
                ("--gap", "<px>", f"Gap between rows (default: {MONTAGE_ROW_GAP})"),
                ("--view", "", "Preview the montage after saving"),
            ],
            [
                ("Two conditions", "python -m cellmontage montage wt_g.tif wt_r.tif ko_g.tif ko_r.tif --labels WT,KO"),
            ],
        )
        return 1

    if not output_path:
        output_path = str(get_output_dir() / default_montage_name())

    n_rows = len(files) // 2
    _print_header("Montage")
    _print_step(f"Rows: {n_rows}", "info")
    print()

    try:
        gap = int(gap_arg) if gap_arg is not None else MONTAGE_ROW_GAP
        config = _load_config(config_path)
        rows = []
        with Spinner("Loading channels..."):
            for idx in range(n_rows):
                label = labels[idx] if idx < len(labels) else ""
                rows.append(MontageRow(load_tiff(files[2 * idx]), load_tiff(files[2 * idx + 1]), label))
        _print_step(f"Loaded {2 * n_rows} images", "done")

        with Spinner("Composing rows..."):
            figures = compose_rows(rows, config, _make_rng(seed))
        _print_step("Rows composed", "done")

        saved = export_montage_png(figures, output_path, gap=gap)
        print()
        _print_success(str(saved))
    except Exception as e:
        _print_error(str(e))
        return 1

    if view:
        from cellmontage.processing.export import stack_montage
        from cellmontage.viewer.preview import show_montage

        show_montage(stack_montage(figures, gap=gap), title=saved.name)
    return 0


def _write_config_cmd(args: list[str]) -> int:
    """Write the default settings file."""
    from cellmontage.core.config import save_processing_config
    from cellmontage.core.types import ProcessingConfig

    output_path = args[0] if args else "settings.json"
    try:
        saved = save_processing_config(ProcessingConfig(), output_path)
    except OSError as e:
        _print_error(str(e))
        return 1
    _print_success(str(saved))
    return 0


def main() -> int:
    """Main CLI entry point."""
    from cellmontage.core.config import set_verbose

    argv = sys.argv[1:]
    verbose = "--verbose" in argv
    argv = [a for a in argv if a != "--verbose"]

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    set_verbose(verbose)

    if not argv:
        _print_help()
        return 1

    command = argv[0].lower()
    args_list = argv[1:]

    if command in ("help", "-h", "--help", "-?"):
        _print_help()
        return 0

    if command in ("version", "-v", "--version"):
        s = Style
        print(f"{s.BRIGHT_CYAN}cellmontage-tools{s.RESET} {s.DIM}v{VERSION}{s.RESET}")
        return 0

    if command == "info":
        if not args_list:
            _print_error("Missing file path")
            print("  Usage: python -m cellmontage info <file.tif>")
            print()
            return 1
        return _print_info(args_list[0])

    elif command == "row":
        return _compose_row_cmd(args_list)

    elif command == "montage":
        return _compose_montage_cmd(args_list)

    elif command == "config":
        return _write_config_cmd(args_list)

    else:
        _print_error(f"Unknown command: {command}")
        _print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())

"""Command line interface for tifgen."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .api import (
    ConvertOptions,
    convert_image,
    inspect_texture,
    plan_texture,
    run_batch,
)
from .logging import configure_logging, section, step
from .packing.errors import TifError
from .packing.inspector import validate_container
from .reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    SilentReporter,
    get_reporter,
    set_reporter,
    set_verbosity,
)
from .texture.formats import SUPPORTED_FORMATS

EXIT_FAILURE = 2

COMMANDS = ("convert", "plan", "inspect", "batch")


def _convert_cmd(args: argparse.Namespace) -> int:
    convert_image(
        ConvertOptions(
            source=args.file,
            pixel_format=args.format,
            variant=args.game,
            output_path=args.output,
            manifest_path=args.emit_manifest,
            swap_rb=args.swap_rb,
        )
    )
    return 0


def _plan_cmd(args: argparse.Namespace) -> int:
    layout, layout_dict = plan_texture(args.file, args.format, args.game)
    rep = get_reporter()
    rep.flush()
    if args.json:
        print(json.dumps(layout_dict, indent=2, sort_keys=True))
    else:
        levels_summary = ",".join(
            f"{lvl.width}x{lvl.height}+{lvl.size}" for lvl in layout.levels
        )
        rep.status(
            f"Plan summary: total_length={layout.total_length} levels={levels_summary}"
        )
    return 0


def _inspect_cmd(args: argparse.Namespace) -> int:
    step(f"inspecting {args.tif.name}")
    info = inspect_texture(args.tif)
    issues = validate_container(info)
    rep = get_reporter()
    if args.json:
        print(json.dumps({**info, "issues": issues}, indent=2, sort_keys=True))
    else:
        fields = info["fields"]
        rep.status(
            "Inspect summary: "
            + f"format={info.get('format')} variant={info.get('variant')} "
            + f"size={fields.get('wdth')}x{fields.get('hgt')} mips={fields.get('mips')} "
            + f"payload={fields.get('size')} issues={len(issues)}"
        )
        for issue in issues:
            rep.warning(issue)
    return 1 if issues else 0


def _batch_cmd(args: argparse.Namespace) -> int:
    with section(f"Batch {args.job.name}"):
        run_batch(args.job)
    return 0


def _add_texture_args(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "file", type=Path, help="Source image to convert (png or bmp)"
    )
    # Validated by the format catalog so errors use the common reporting path
    p.add_argument(
        "game", help="Which game to convert the texture for (ma1 or ma2)"
    )
    p.add_argument(
        "-f",
        "--format",
        required=True,
        help=f"Texture format ({', '.join(SUPPORTED_FORMATS)})",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tifgen",
        description="Converts an image into MechAssault's tif texture format",
        epilog="Without a command, 'tifgen FILE GAME -f FORMAT' runs convert.",
    )
    p.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (repeatable)",
    )
    p.add_argument(
        "-r",
        "--reporter",
        choices=["plain", "rich", "json", "silent"],
        default="plain",
        help="Select reporter backend: plain (default), rich, json (JSONL events), silent",
    )
    sub = p.add_subparsers(dest="cmd", required=True)

    c = sub.add_parser("convert", help="Convert an image to a tif texture")
    _add_texture_args(c)
    c.add_argument(
        "-o",
        "--output",
        type=Path,
        help="Output path (default: source path with a .tif suffix)",
    )
    c.add_argument(
        "--emit-manifest",
        dest="emit_manifest",
        type=Path,
        help="Optional path to write manifest JSON",
    )
    c.add_argument(
        "--swap-rb",
        dest="swap_rb",
        action="store_true",
        help="Swap red and blue before block compression",
    )
    c.set_defaults(func=_convert_cmd)

    pl = sub.add_parser("plan", help="Compute the container layout (no write)")
    _add_texture_args(pl)
    pl.add_argument("--json", action="store_true", help="Emit JSON layout")
    pl.set_defaults(func=_plan_cmd)

    i = sub.add_parser("inspect", help="Inspect a tif texture's chunk structure")
    i.add_argument("tif", type=Path)
    i.add_argument("--json", action="store_true", help="Emit JSON report")
    i.set_defaults(func=_inspect_cmd)

    b = sub.add_parser("batch", help="Convert every image of a job file")
    b.add_argument("job", type=Path, help="Job file (.yaml, .yml or .json)")
    b.set_defaults(func=_batch_cmd)

    return p


def _select_reporter(requested: str) -> None:
    if requested == "json":
        set_reporter(JsonLinesReporter())
    elif requested == "silent":
        set_reporter(SilentReporter())
    elif requested == "rich" and sys.stderr.isatty():
        set_reporter(RichReporter())
    else:  # plain, or rich without a TTY
        set_reporter(PlainReporter())


def _is_global_flag(arg: str) -> bool:
    if arg in ("--verbose", "-h", "--help") or arg.startswith("--reporter="):
        return True
    if arg.startswith("-v") and set(arg[1:]) == {"v"}:
        return True
    return arg.startswith("-r") and len(arg) > 2 and not arg.startswith("--")


def with_default_command(argv: list[str]) -> list[str]:
    """Insert ``convert`` when no command is named (``tifgen FILE GAME -f FMT``)."""
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg in ("-r", "--reporter"):
            i += 2
        elif _is_global_flag(arg):
            i += 1
        else:
            break
    if i >= len(argv) or argv[i] in COMMANDS:
        return list(argv)
    return [*argv[:i], "convert", *argv[i:]]


def main(argv: list[str] | None = None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    argv = with_default_command(argv)
    parser = build_parser()
    args = parser.parse_args(argv)
    _select_reporter(args.reporter)
    set_verbosity(args.verbose)
    configure_logging(args.verbose)
    rep = get_reporter()
    try:
        return args.func(args)
    except TifError as exc:
        rep.error(f"{exc.code}: {exc.message}")
        return EXIT_FAILURE
    except FileNotFoundError as exc:
        rep.error(f"File not found: {exc.filename or exc}")
        return EXIT_FAILURE
    finally:
        rep.flush()


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

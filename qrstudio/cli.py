"""qrstudio CLI — render, check and export QR codes from the command line."""

import argparse
import asyncio
import shlex
import sys
from pathlib import Path

from qrstudio.clipboard import copy_text
from qrstudio.color import check_contrast, parse_color, suggest_foreground
from qrstudio.compositor import render
from qrstudio.config import RenderConfig
from qrstudio.errors import ConfigError, EncodingCapacityExceeded, QRStudioError
from qrstudio.exporter import MIME_TYPES, export_filename, save
from qrstudio.logging import audit, get_logger, setup_logging

log = get_logger("cli")

# CLI flag -> RenderConfig field
_CONFIG_FLAGS = {
    "module_size": "module_size",
    "margin": "quiet_zone",
    "ecc": "ecc",
    "fg": "foreground",
    "bg": "background",
    "width": "width",
}


def _config_from_args(args, content: str) -> RenderConfig:
    values = {field: getattr(args, flag) for flag, field in _CONFIG_FLAGS.items()}
    values["content"] = content
    return RenderConfig.from_mapping(values)


def _report_contrast(config: RenderConfig) -> bool:
    result = check_contrast(config.foreground, config.background)
    if result.passes_threshold:
        print(f"Contrast: {result.label}")
    else:
        fix = suggest_foreground(config.background)
        print(f"Contrast: {result.label} (try --fg {fix.to_hex()} or --fix-contrast)", file=sys.stderr)
    return result.passes_threshold


def cmd_render(args) -> int:
    """Render once and export to PNG or PDF."""
    config = _config_from_args(args, args.text)
    if args.fix_contrast:
        config = config.replace(foreground=suggest_foreground(config.background))
    _report_contrast(config)

    output = Path(args.output) if args.output else None
    kind = args.format or (output.suffix.lstrip(".").lower() if output else "png")
    if kind not in MIME_TYPES:
        print(f"Unsupported output format: {kind}", file=sys.stderr)
        return 2

    try:
        surface = render(config)
    except EncodingCapacityExceeded as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if output is None:
        output = Path(args.out_dir) / export_filename(kind)
    path = save(surface, config.content, kind=kind, directory=output.parent, filename=output.name)
    print(f"Saved: {path} ({surface.width}x{surface.height}, {MIME_TYPES[kind]})")

    if args.copy:
        if copy_text(config.content):
            print("Content copied to clipboard")
    return 0


def cmd_contrast(args) -> int:
    """Check a foreground/background pair against the 4.5:1 threshold."""
    fg = parse_color(args.fg)
    bg = parse_color(args.bg)
    result = check_contrast(fg, bg)
    status = "PASS" if result.passes_threshold else "LOW"
    print(f"{fg} on {bg}: {result.ratio:.2f}:1 [{status}]")
    if not result.passes_threshold:
        print(f"Suggested foreground: {suggest_foreground(bg)}")
    return 0 if result.passes_threshold else 1


def _parse_edit(line: str) -> dict:
    """Parse 'key=value ...' edits typed into the live session."""
    try:
        tokens = shlex.split(line)
    except ValueError as e:
        raise ConfigError(f"Cannot parse edit {line!r}: {e}") from None
    changes = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        if not sep:
            raise ConfigError(f"Expected key=value, got {token!r}")
        field = _CONFIG_FLAGS.get(key.replace("-", "_"), key)
        if field in ("module_size", "quiet_zone", "width"):
            try:
                changes[field] = int(value)
            except ValueError:
                raise ConfigError(f"{key} must be an integer, got {value!r}") from None
        else:
            changes[field] = value
    return changes


def _parse_switch(value: str) -> bool:
    value = value.strip().lower()
    if value not in ("on", "off"):
        raise ConfigError(f"Expected 'on' or 'off', got {value!r}")
    return value == "on"


async def _live(args) -> int:
    from qrstudio.controller import RenderController
    from qrstudio.scheduler import AsyncioScheduler

    output = Path(args.output)
    kind = output.suffix.lstrip(".").lower() or "png"

    def on_rendered(surface):
        path = save(surface, surface.config.content, kind=kind, directory=output.parent, filename=output.name)
        print(f"[rendered] {path} ({surface.width}x{surface.height})")

    def on_error(error):
        print(f"[kept previous] {error}", file=sys.stderr)

    controller = RenderController(
        _config_from_args(args, args.text),
        scheduler=AsyncioScheduler(asyncio.get_running_loop()),
        auto_render=not args.manual,
        on_rendered=on_rendered,
        on_error=on_error,
    )
    controller.start()
    print("Edit with key=value (content, module_size, margin, ecc, fg, bg, width); "
          "commands: generate, fix, auto on|off, copy, quit")

    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, sys.stdin.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        if line in ("quit", "exit"):
            break
        try:
            if line == "generate":
                controller.generate()
            elif line == "fix":
                print(f"[foreground] {controller.fix_contrast()}")
            elif line.startswith("auto "):
                controller.set_auto_render(_parse_switch(line.split(None, 1)[1]))
            elif line == "copy":
                controller.copy_content()
            else:
                controller.update(**_parse_edit(line))
                contrast = controller.contrast
                if not contrast.passes_threshold:
                    print(f"[contrast] {contrast.label}", file=sys.stderr)
        except ConfigError as e:
            print(f"[invalid] {e}", file=sys.stderr)

    controller.close()
    return 0


def cmd_live(args) -> int:
    """Interactive session: edits are re-rendered after a short debounce."""
    return asyncio.run(_live(args))


def _add_config_flags(p: argparse.ArgumentParser):
    p.add_argument("--module-size", type=int, default=None, help="Pixels per module (default 8)")
    p.add_argument("--margin", type=int, default=None, help="Quiet zone in pixels (default 16)")
    p.add_argument("-e", "--ecc", default=None, choices=["L", "M", "Q", "H"], help="Error correction level (default M)")
    p.add_argument("--fg", default=None, help="Foreground colour, hex (default #0f172a)")
    p.add_argument("--bg", default=None, help="Background colour, hex (default #ffffff)")
    p.add_argument("--width", type=int, default=None, help="Scale the symbol to this many pixels")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrstudio", description="qrstudio: render, check and export QR codes")

    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")
    parser.add_argument("--json-logs", action="store_true", help="JSON logs on the console")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- render ---
    p_render = subparsers.add_parser("render", help="Render a QR code to PNG or PDF")
    p_render.add_argument("text", help="Text or URL to encode")
    p_render.add_argument("-o", "--output", default=None, help="Output file (.png or .pdf)")
    p_render.add_argument("--out-dir", default="output", help="Directory for timestamp-named output")
    p_render.add_argument("-f", "--format", default=None, choices=sorted(MIME_TYPES), help="Output format")
    p_render.add_argument("--fix-contrast", action="store_true", help="Use black/white foreground for the background")
    p_render.add_argument("--copy", action="store_true", help="Copy the text to the clipboard")
    _add_config_flags(p_render)

    # --- contrast ---
    p_con = subparsers.add_parser("contrast", help="Check colour contrast")
    p_con.add_argument("fg", help="Foreground colour (hex)")
    p_con.add_argument("bg", help="Background colour (hex)")

    # --- live ---
    p_live = subparsers.add_parser("live", help="Live preview session driven by stdin edits")
    p_live.add_argument("text", nargs="?", default="", help="Initial content")
    p_live.add_argument("-o", "--output", default="output/live.png", help="Preview file, rewritten on every render")
    p_live.add_argument("--manual", action="store_true", help="Disable auto-render; use 'generate'")
    _add_config_flags(p_live)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level="DEBUG" if args.verbose else "INFO",
                  log_file=args.log_file, json_format=args.json_logs)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        return 1

    commands = {
        "render": cmd_render,
        "contrast": cmd_contrast,
        "live": cmd_live,
    }
    try:
        code = commands[args.command](args)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        code = 2
    except QRStudioError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 1
    audit("cli.done", logger=log, command=args.command, exit_code=code)
    return code


if __name__ == "__main__":
    sys.exit(main())

"""Command-line interface for lexcalc."""

from __future__ import annotations

import argparse
import csv
import logging
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lexcalc.errors import ConfigError, UnterminatedBlockError
from lexcalc.render import FONT_STYLE
from lexcalc.rules import Rule, rules_from_config

logger = logging.getLogger(__name__)

CONFIG_NAME = "lexcalc.toml"


@dataclass(frozen=True, slots=True)
class HighlightOptions:
    """Resolved options for ``lexcalc highlight``."""

    input_file: Path
    output_file: Path | None
    rules: tuple[Rule, ...]
    font_style: str
    watch: bool
    debug: bool
    strict: bool


@dataclass(frozen=True, slots=True)
class EvalOptions:
    """Resolved options for ``lexcalc eval``."""

    expression: str
    x: float
    variable: str


@dataclass(frozen=True, slots=True)
class PlotOptions:
    """Resolved options for ``lexcalc plot``."""

    expression: str
    start: float
    end: float
    steps: int
    variable: str
    output_file: Path | None


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lexcalc",
        description="Expression evaluator and syntax highlighter",
    )
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = p.add_subparsers(dest="command", required=True)

    hl = sub.add_parser("highlight", help="Highlight a source file to HTML")
    hl.add_argument("input", help="Source file to highlight")
    hl.add_argument("-o", "--output", help="Output file (default: stdout)")
    hl.add_argument("--config", metavar="FILE", help=f"Config file (default: {CONFIG_NAME})")
    hl.add_argument("--watch", action="store_true", help="Watch for changes and re-highlight")
    hl.add_argument("--debug", action="store_true", help="Dump tokens to stderr")
    hl.add_argument(
        "--strict", action="store_true", help="Fail when a block is left unterminated"
    )

    ev = sub.add_parser("eval", help="Evaluate an arithmetic expression")
    ev.add_argument("expression", help="Expression, e.g. '2 * x ^ 2 + 1'")
    ev.add_argument("-x", type=float, default=0.0, metavar="VALUE", help="Variable value")
    ev.add_argument("--var", metavar="NAME", help="Variable name (default: x)")
    ev.add_argument("--config", metavar="FILE", help=f"Config file (default: {CONFIG_NAME})")

    pl = sub.add_parser("plot", help="Sample an expression over a range as CSV")
    pl.add_argument("expression", help="Expression in the variable, e.g. 'x ^ 2'")
    pl.add_argument("--start", type=float, required=True, help="Range start")
    pl.add_argument("--end", type=float, required=True, help="Range end")
    pl.add_argument("--steps", type=int, default=None, help="Intervals (default: 1000)")
    pl.add_argument("--var", metavar="NAME", help="Variable name (default: x)")
    pl.add_argument("-o", "--output", help="Output file (default: stdout)")
    pl.add_argument("--config", metavar="FILE", help=f"Config file (default: {CONFIG_NAME})")
    return p


def load_config(config_path: Path | None, base_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else base_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}", path) from exc


def _config_path(args: argparse.Namespace) -> Path | None:
    return Path(args.config) if args.config else None


def _table(config: dict[str, Any], name: str, path: Path | None) -> dict[str, Any]:
    table = config.get(name, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] must be a table", path)
    return table


def _variable(args: argparse.Namespace, config: dict[str, Any], path: Path | None) -> str:
    # config < CLI
    variable = _table(config, "eval", path).get("variable", "x")
    if args.var:
        variable = args.var
    if not isinstance(variable, str) or not variable:
        raise ConfigError("variable name must be a non-empty string", path)
    return variable


def resolve_highlight_options(args: argparse.Namespace) -> HighlightOptions:
    """Merge config file and CLI args into HighlightOptions.

    Precedence: defaults < config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = _config_path(args)
    config = load_config(config_path, input_dir)
    source_path = config_path or input_dir / CONFIG_NAME

    rules = rules_from_config(config, source_path)

    font_style = FONT_STYLE
    cfg_style = _table(config, "highlight", source_path).get("font_style")
    if isinstance(cfg_style, str):
        font_style = cfg_style

    output_file = Path(args.output) if args.output else None

    return HighlightOptions(
        input_file=input_file,
        output_file=output_file,
        rules=rules,
        font_style=font_style,
        watch=args.watch,
        debug=args.debug,
        strict=args.strict,
    )


def resolve_eval_options(args: argparse.Namespace) -> EvalOptions:
    config_path = _config_path(args)
    config = load_config(config_path, Path("."))
    source_path = config_path or Path(CONFIG_NAME)
    return EvalOptions(
        expression=args.expression,
        x=args.x,
        variable=_variable(args, config, source_path),
    )


def resolve_plot_options(args: argparse.Namespace) -> PlotOptions:
    from lexcalc.plot import DEFAULT_STEPS

    config_path = _config_path(args)
    config = load_config(config_path, Path("."))
    source_path = config_path or Path(CONFIG_NAME)

    # Steps: default < config < CLI
    steps = DEFAULT_STEPS
    cfg_steps = _table(config, "plot", source_path).get("steps")
    if isinstance(cfg_steps, int) and not isinstance(cfg_steps, bool):
        steps = cfg_steps
    if args.steps is not None:
        steps = args.steps

    return PlotOptions(
        expression=args.expression,
        start=args.start,
        end=args.end,
        steps=steps,
        variable=_variable(args, config, source_path),
        output_file=Path(args.output) if args.output else None,
    )


# ---------------------------------------------------------------------------
# highlight
# ---------------------------------------------------------------------------


def highlight_file(options: HighlightOptions) -> str:
    """Read and highlight a source file to markup."""
    from lexcalc.debug import dump_tokens
    from lexcalc.highlighter import scan
    from lexcalc.render import render

    source = options.input_file.read_text(encoding="utf-8")
    result = scan(source, options.rules)

    if options.debug:
        dump_tokens(result)

    opened = result.dangling
    if opened is not None:
        message = f"unterminated block {opened.text!r}"
        if options.strict:
            raise UnterminatedBlockError(message, opened.span, source)
        start = opened.span.start
        logger.warning("%s at %s:%d:%d", message, options.input_file, start.line, start.column)

    return render(result.tokens, font_style=options.font_style)


def _write(text: str, output_file: Path | None) -> None:
    if output_file:
        output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)
        sys.stdout.flush()


def watch_loop(options: HighlightOptions) -> None:
    """Poll input file for changes, re-highlight on each modification."""
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    _write(highlight_file(options), options.output_file)
                    print(f"Highlighted {options.input_file}", file=sys.stderr)
                except UnterminatedBlockError as exc:
                    print(exc.format(str(options.input_file)), file=sys.stderr)
                except (OSError, UnicodeDecodeError) as exc:
                    print(f"error: {exc}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def _run_highlight(args: argparse.Namespace) -> int:
    options = resolve_highlight_options(args)

    if options.watch:
        watch_loop(options)
        return 0

    try:
        html = highlight_file(options)
    except UnterminatedBlockError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    _write(html, options.output_file)
    return 0


# ---------------------------------------------------------------------------
# eval / plot
# ---------------------------------------------------------------------------


def _run_eval(args: argparse.Namespace) -> int:
    from lexcalc.evaluator import evaluate

    options = resolve_eval_options(args)
    result = evaluate(options.expression, options.x, options.variable)
    print(f"{result:g}")
    return 0


def write_csv(points: tuple[tuple[float, float], ...], output_file: Path | None) -> None:
    if output_file:
        with open(output_file, "w", newline="", encoding="utf-8") as f:
            _write_rows(points, f)
    else:
        _write_rows(points, sys.stdout)


def _write_rows(points: tuple[tuple[float, float], ...], f: Any) -> None:
    writer = csv.writer(f, lineterminator="\n")
    writer.writerow(["x", "y"])
    for x, y in points:
        writer.writerow([f"{x:g}", f"{y:g}"])


def _run_plot(args: argparse.Namespace) -> int:
    from lexcalc.plot import sample

    options = resolve_plot_options(args)
    try:
        graph = sample(
            options.expression, options.start, options.end, options.steps, options.variable
        )
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    logger.info("y range [%g, %g]", graph.y_min, graph.y_max)
    write_csv(graph.points, options.output_file)
    return 0


_COMMANDS = {
    "highlight": _run_highlight,
    "eval": _run_eval,
    "plot": _run_plot,
}


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        return _COMMANDS[args.command](args)
    except ConfigError as exc:
        print(exc.format(), file=sys.stderr)
        return 2

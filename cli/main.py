"""
Urban Impact CLI - Main Entry Point

Command-line interface for the environmental-economic impact engine.
Built with Click for robust argument parsing and help generation.
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click

from core.config import EngineConfig
from core.exceptions import ConfigurationError

# Configure logging for CLI
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("urbanimpact")


class ImpactContext:
    """Context object for passing global options to subcommands."""

    def __init__(
        self,
        verbose: bool = False,
        quiet: bool = False,
        config_path: Optional[Path] = None,
    ):
        self.verbose = verbose
        self.quiet = quiet
        self.config_path = config_path
        self._config = None

        # Library loggers live under "core"; keep them in step with the CLI
        level = logging.WARNING if quiet else logging.DEBUG if verbose else logging.INFO
        logger.setLevel(level)
        logging.getLogger("core").setLevel(level)

    @property
    def config(self) -> EngineConfig:
        """Lazy load configuration from file or defaults."""
        if self._config is None:
            self._config = EngineConfig.load(self.config_path)
            if self.verbose:
                logger.debug(f"Configuration loaded (path={self.config_path or 'defaults'})")
        return self._config


class ImpactGroup(click.Group):
    """Custom Click group with improved help formatting."""

    def format_help(self, ctx, formatter):
        """Format help with custom banner and examples."""
        formatter.write_paragraph()
        formatter.write_text("Urban Impact - Environmental-Economic Simulation Engine")
        formatter.write_paragraph()
        formatter.write_text(
            "Turn (location, year) into flood extent, economic loss and population projections."
        )
        formatter.write_paragraph()

        super().format_help(ctx, formatter)

        formatter.write_paragraph()
        formatter.write_text("Examples:")
        formatter.indent()

        examples = [
            "# Evaluate a scenario for Delhi in 2032",
            "urbanimpact evaluate --lat 28.61 --lng 77.21 --year 2032",
            "",
            "# Convert a PM2.5 concentration to AQI",
            "urbanimpact aqi 42.5",
            "",
            "# Animate a flood over flat terrain",
            "urbanimpact flood --lat 28.61 --lng 77.21 --rainfall 30",
        ]
        for line in examples:
            formatter.write_text(line)

        formatter.dedent()


pass_context = click.make_pass_decorator(ImpactContext, ensure=True)


@click.group(cls=ImpactGroup)
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    default=False,
    help="Enable verbose output (debug logging).",
)
@click.option(
    "-q",
    "--quiet",
    is_flag=True,
    default=False,
    help="Quiet mode (only warnings and errors).",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to YAML configuration file.",
)
@click.version_option(
    version="0.1.0",
    prog_name="urbanimpact",
    message="%(prog)s version %(version)s - Urban Impact CLI",
)
@click.pass_context
def app(ctx, verbose: bool, quiet: bool, config_path: Optional[Path]):
    """
    Urban Impact CLI - Environmental-Economic Simulation

    Flood spread, AQI conversion, economic loss and demographic
    projection for a location and year.
    """
    if verbose and quiet:
        raise click.UsageError("Cannot use both --verbose and --quiet")

    ctx.obj = ImpactContext(
        verbose=verbose,
        quiet=quiet,
        config_path=config_path,
    )


def register_commands():
    """Register all subcommands."""
    from cli.commands import aqi, evaluate, flood

    app.add_command(evaluate.evaluate)
    app.add_command(aqi.aqi)
    app.add_command(flood.flood)


@app.command("info")
@pass_context
def info(ctx):
    """Display the effective configuration."""
    import json

    try:
        config = ctx.config
    except ConfigurationError as e:
        raise click.ClickException(str(e))

    click.echo("\n=== Urban Impact Configuration ===\n")
    click.echo(json.dumps(config.to_dict(), indent=2))
    click.echo()


register_commands()


def main():
    """Main entry point for the CLI."""
    try:
        app()
    except Exception as e:
        logger.error(f"Error: {e}")
        if "--verbose" in sys.argv or "-v" in sys.argv:
            import traceback

            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()

"""
bpmn2klaim CLI Interface

Command-line tool translating BPMN 2.0 XML files into X-Klaim.
"""

import json
import logging
import sys
from typing import Optional

import click

from bpmn2klaim.config import GeneratorConfig, OutputFormat, UnhandledVariantPolicy
from bpmn2klaim.core.observability import LogLevel, ObservabilityConfig, ObservabilityManager
from bpmn2klaim.errors import BpmnParseError, TranslationError
from bpmn2klaim.generator import Generator
from bpmn2klaim.loaders import load_bpmn
from bpmn2klaim.models import ElementType

# Setup logging
logger = logging.getLogger(__name__)


@click.group()
def cli():
    """bpmn2klaim CLI - Translate BPMN diagrams to X-Klaim."""
    pass


@cli.command()
@click.argument("bpmn_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file path for the generated X-Klaim",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat]),
    default=OutputFormat.TEXT.value,
    help="Output format",
)
@click.option(
    "--strict/--lenient",
    default=None,
    help="Fail on elements without a translation routine (default: skip them)",
)
@click.option(
    "--net-name",
    default=None,
    help="Fallback name of the generated net",
)
@click.option(
    "--verbose/--quiet",
    default=False,
    help="Verbose logging output",
)
def translate(
    bpmn_file: str,
    output: Optional[str],
    output_format: str,
    strict: Optional[bool],
    net_name: Optional[str],
    verbose: bool,
) -> None:
    """
    Translate a BPMN XML file into X-Klaim.

    \b
    Examples:
        bpmn2klaim translate order.bpmn
        bpmn2klaim translate order.bpmn -o order.xklaim
        bpmn2klaim translate order.bpmn --format json --strict
    """
    ObservabilityManager.initialize(
        ObservabilityConfig(
            service_name="bpmn2klaim-cli",
            log_level=LogLevel.DEBUG if verbose else LogLevel.WARNING,
        )
    )

    config = GeneratorConfig.from_env()
    config.output_format = OutputFormat(output_format)
    if strict is not None:
        config.unhandled_policy = (
            UnhandledVariantPolicy.ABORT if strict else UnhandledVariantPolicy.SKIP
        )
    if net_name:
        config.net_name = net_name

    try:
        model = load_bpmn(bpmn_file)
        result = Generator(model, config).translate()
    except BpmnParseError as e:
        click.echo(f"Error reading BPMN file: {e}", err=True)
        sys.exit(1)
    except TranslationError as e:
        logger.debug(f"Translation failed: {e.to_dict()}")
        click.echo(f"Translation failed: {e}", err=True)
        sys.exit(1)

    if config.output_format == OutputFormat.JSON:
        _write(json.dumps(result.model_dump(), indent=2), output)
    else:
        _write(result.render(), output)


@cli.command()
@click.argument("bpmn_file", type=click.Path(exists=True, dir_okay=False))
def inspect(bpmn_file: str) -> None:
    """Show the elements of a BPMN file as the generator sees them."""
    try:
        model = load_bpmn(bpmn_file)
    except BpmnParseError as e:
        click.echo(f"Error reading BPMN file: {e}", err=True)
        sys.exit(1)

    summary = {
        "name": model.name,
        "elements": len(model),
        "processes": model.get_process_ids(),
        "by_type": {
            element_type.value: len(model.get_elements_by_type(element_type))
            for element_type in ElementType
            if model.get_elements_by_type(element_type)
        },
    }
    click.echo(json.dumps(summary, indent=2))


@cli.command()
def info() -> None:
    """Show version and supported element types."""
    from bpmn2klaim import __version__
    from bpmn2klaim.generator import KlaimTranslator, TranslationDispatcher

    supported = TranslationDispatcher(KlaimTranslator().handlers()).variants
    info_dict = {
        "name": "bpmn2klaim",
        "version": __version__,
        "description": "Translate BPMN 2.0 diagrams to X-Klaim",
        "supported_elements": [t.value for t in supported],
        "unsupported_elements": [t.value for t in ElementType if t not in supported],
    }

    click.echo(json.dumps(info_dict, indent=2))


# ==================
# Helper Functions
# ==================


def _write(text: str, output_file: Optional[str]) -> None:
    if output_file:
        with open(output_file, "w") as f:
            f.write(text)
        click.echo(f"Output written to: {output_file}", err=True)
    else:
        click.echo(text)


__all__ = ["cli"]


if __name__ == "__main__":
    cli()

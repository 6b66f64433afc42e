"""Command line for composing and exporting BA Survey documents."""
import asyncio
import json
import logging

import click

from shared.document import compose
from shared.schemas import RenderOptions
from shared.utils import CorruptedImageError, encode_signature_image
from shared.validation import ValidationError, validate_survey

from .config_manager import ConfigManager
from .handlers.survey_handler import SurveyHandler, build_candidate
from .logging_config import setup_logging
from .services.export_service import BrowserSharer, ExportService, HtmlFileRenderer

logger = logging.getLogger(__name__)


class CliApp:
    """Minimal app object giving the handlers their config and services."""

    def __init__(self, config, share=False):
        self.config = config
        self.export_service = ExportService(
            HtmlFileRenderer(config.export_dir),
            sharer=BrowserSharer() if share else None,
            config=config,
        )


def _load_form(candidate_file, customer_signature, surveyor_signature):
    try:
        form = json.load(candidate_file)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid survey JSON: {e}")
    if not isinstance(form, dict):
        raise click.ClickException("Survey JSON must be an object")

    try:
        if customer_signature:
            form['customer_signature_image'] = encode_signature_image(image_path=customer_signature)
        if surveyor_signature:
            form['surveyor_signature_image'] = encode_signature_image(image_path=surveyor_signature)
    except CorruptedImageError as e:
        raise click.ClickException(f"Unreadable signature image: {e}")
    return form


@click.group('ba-survey')
@click.option('--log-level', default=None, help='Logging level (default: LOG_LEVEL or INFO).')
@click.pass_context
def cli(ctx, log_level):
    """Compose and export BA Survey (Berita Acara Survey) documents."""
    config = ConfigManager()
    setup_logging(log_level or config.log_level)
    ctx.obj = config


@cli.command('compose')
@click.argument('candidate_file', type=click.File('r', encoding='utf-8'))
@click.option('-o', '--output', type=click.File('w', encoding='utf-8'), default='-',
              help='Where to write the HTML document (default: stdout).')
@click.option('--unit', default=None, help='Issuing organizational unit name.')
@click.option('--customer-signature', type=click.Path(exists=True, dir_okay=False), default=None)
@click.option('--surveyor-signature', type=click.Path(exists=True, dir_okay=False), default=None)
@click.pass_obj
def compose_command(config, candidate_file, output, unit, customer_signature, surveyor_signature):
    """Validate CANDIDATE_FILE (JSON) and write the composed document."""
    form = _load_form(candidate_file, customer_signature, surveyor_signature)
    try:
        record = validate_survey(build_candidate(form))
    except ValidationError as e:
        raise click.ClickException(str(e))

    options = RenderOptions(organizational_unit_name=unit) if unit else config.render_options()
    output.write(compose(record, options))
    logger.info(f"Composed BA document for '{record.customer_name}'")


@cli.command('export')
@click.argument('candidate_file', type=click.File('r', encoding='utf-8'))
@click.option('--export-dir', default=None, help='Directory for the exported file.')
@click.option('--share/--no-share', default=False, help='Open the exported file afterwards.')
@click.option('--customer-signature', type=click.Path(exists=True, dir_okay=False), default=None)
@click.option('--surveyor-signature', type=click.Path(exists=True, dir_okay=False), default=None)
@click.pass_obj
def export_command(config, candidate_file, export_dir, share, customer_signature, surveyor_signature):
    """Validate CANDIDATE_FILE (JSON) and export it through the renderer."""
    form = _load_form(candidate_file, customer_signature, surveyor_signature)
    if export_dir:
        config.set('export_dir', export_dir)

    handler = SurveyHandler(CliApp(config, share=share))
    result = asyncio.run(handler.submit(form))
    if not result.accepted:
        raise click.ClickException(result.message)

    click.echo(result.message)
    if not result.document_path:
        raise click.ClickException("No document was produced")
    click.echo(result.document_path)


def main():
    cli()


if __name__ == '__main__':
    main()

"""Command-line interface for the mobile-money SMS parser."""

import json
import sys
import click
from typing import Iterator, Optional
import logging

from .utils.config_manager import ConfigManager, get_default_config_manager
from .utils.error_handler import DiagnosticsCollector, setup_logging
from .utils.validation import ValidationEngine
from .models.core import RawMessage
from .parsers.sms_parser import SmsParser


logger = logging.getLogger(__name__)


class SmsParserCLI:
    """Wires configuration, parser and diagnostics for the CLI commands"""

    def __init__(self, config_path: Optional[str] = None):
        self.config_manager = ConfigManager(config_path)
        self.config = self.config_manager.load_config()
        self.parser = SmsParser(self.config)
        self.validation_engine = ValidationEngine(self.parser.extractor)
        self.diagnostics = DiagnosticsCollector()

    def read_messages(self, stream, plain: bool = False) -> Iterator[RawMessage]:
        """Yield messages from JSON lines, or one message per line with plain"""
        normalizer = self.parser.extractor.normalizer
        for line_number, line in enumerate(stream, start=1):
            line = line.rstrip('\n')
            if not line.strip():
                continue

            if plain:
                yield RawMessage(body=line)
                continue

            try:
                data = json.loads(line)
            except json.JSONDecodeError as e:
                logger.warning(f"Skipping line {line_number}: invalid JSON ({e})")
                continue

            if isinstance(data, str):
                yield RawMessage(body=data)
            elif isinstance(data, dict) and isinstance(data.get('body'), str):
                yield normalizer.to_raw_message(data['body'], data.get('timestamp', data.get('date')))
            else:
                logger.warning(f"Skipping line {line_number}: expected a string or an object with 'body'")

    def emit(self, transactions) -> int:
        """Write valid transactions to stdout as JSON lines"""
        written = 0
        for transaction in transactions:
            errors = self.validation_engine.validate_transaction(transaction)
            if errors:
                logger.error(f"Skipping invalid transaction: {'; '.join(errors)}")
                continue
            click.echo(json.dumps(transaction.to_dict()))
            written += 1
        return written


@click.group()
@click.option('--config', '-c', help='Path to configuration file')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--json-logs', is_flag=True, help='Emit logs as JSON lines')
@click.pass_context
def cli(ctx, config, verbose, json_logs):
    """Mobile-money SMS parser - turns provider notifications into transactions"""
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    setup_logging(verbose=verbose, json_logs=json_logs)


@cli.command()
@click.argument('text')
@click.option('--timestamp', '-t', help='Send time (ISO date or epoch seconds/milliseconds)')
@click.pass_context
def parse(ctx, text, timestamp):
    """Parse a single message and print the records as JSON"""
    app = SmsParserCLI(ctx.obj['config_path'])
    transactions = app.parser.parse_text(text, timestamp)
    app.emit(transactions)

    if not transactions:
        click.echo("No transaction recognized", err=True)
        sys.exit(1)


@cli.command()
@click.argument('input_file', type=click.File('r', encoding='utf-8'))
@click.option('--plain', is_flag=True, help='Treat each line as a raw message body')
@click.option('--report', '-r', help='Save diagnostics report to specified file')
@click.pass_context
def batch(ctx, input_file, plain, report):
    """Parse a file of messages and print the records as JSON lines"""
    app = SmsParserCLI(ctx.obj['config_path'])
    result = app.parser.parse_batch(app.read_messages(input_file, plain), app.diagnostics)
    written = app.emit(result.transactions)

    click.echo(
        f"Messages: {result.messages_total}, accepted: {result.messages_accepted}, "
        f"rejected: {result.messages_rejected}, transactions: {written}",
        err=True
    )

    if report:
        report_file = app.diagnostics.generate_report(report)
        click.echo(f"Report saved: {report_file}", err=True)


@cli.command()
@click.argument('output_path', default='momo_parser.json')
@click.option('--format', 'fmt', type=click.Choice(['json', 'yaml']), default=None,
              help='Configuration file format (defaults to the file extension)')
@click.pass_context
def init_config(ctx, output_path, fmt):
    """Generate a configuration file template"""
    if fmt == 'yaml' and not output_path.endswith(('.yml', '.yaml')):
        output_path = output_path.rsplit('.', 1)[0] + '.yml'
    elif fmt == 'json' and not output_path.endswith('.json'):
        output_path = output_path.rsplit('.', 1)[0] + '.json'

    try:
        get_default_config_manager().save_config_template(output_path)
    except OSError as e:
        click.echo(f"Error generating config template: {e}", err=True)
        sys.exit(1)

    click.echo(f"Configuration template generated: {output_path}")


def main():
    """Main entry point"""
    cli()


if __name__ == '__main__':
    main()

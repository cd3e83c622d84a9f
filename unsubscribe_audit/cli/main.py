"""
Main CLI group for the unsubscribe audit.
"""

import click

from unsubscribe_audit import __version__
from unsubscribe_audit.config import Config, load_config_from_env_file
from unsubscribe_audit.email_processor.unsubscribe.logging import configure_unsubscribe_logging
from .commands.extract import extract_unsubscribe
from .commands.resolve import resolve


@click.group()
@click.version_option(version=__version__, prog_name='Unsubscribe Audit')
@click.option('--log-level', default=None,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False),
              help='Logging level (default: LOG_LEVEL or WARNING)')
def cli(log_level):
    """
    Unsubscribe Audit - Report the unsubscribe option of every unread message.
    
    Resolves each message's best unsubscribe link from its List-Unsubscribe
    header or, failing that, from the links in its body.
    """
    configure_unsubscribe_logging(
        level=log_level or Config.LOG_LEVEL,
        format=Config.LOG_FORMAT
    )


cli.add_command(extract_unsubscribe, name='extract-unsubscribe')
cli.add_command(resolve, name='resolve')


def main():
    """Console entry point: load .env, then run the CLI."""
    load_config_from_env_file()
    cli()


if __name__ == '__main__':
    main()

"""
Offline resolution of a single saved message.
"""

import json

import click

from ..utils import build_pipeline, read_message_file


@click.command('resolve')
@click.argument('eml_file', type=click.Path(exists=True, dir_okay=False))
@click.option('--json', 'as_json', is_flag=True, help='Print the result as JSON')
def resolve(eml_file, as_json):
    """
    Resolve the unsubscribe link of a saved message (.eml file).
    
    Example:
        python main.py resolve newsletter.eml
    """
    try:
        header_field, raw_body = read_message_file(eml_file)
    except OSError as e:
        click.secho(f"✗ Error reading {eml_file}: {e}", fg='red')
        raise click.Abort()
    
    pipeline = build_pipeline()
    result = pipeline.resolve(header_field, raw_body)
    
    if as_json:
        click.echo(json.dumps(result.to_dict()))
        return
    
    if result.is_found:
        click.secho(f"✓ {result.uri}", fg='green')
        click.echo(f"  Found in: {result.found_in.value}")
    else:
        click.secho("No unsubscribe link found", fg='yellow')

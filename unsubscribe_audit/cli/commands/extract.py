"""
Unsubscribe extraction command.

Audits the unread messages of a mailbox and writes the CSV report.
"""

import click

from unsubscribe_audit.config import Config
from unsubscribe_audit.email_processor.imap_client import IMAPConnection
from unsubscribe_audit.email_processor.unsubscribe.exceptions import MailboxError, ReportError
from unsubscribe_audit.email_processor.unsubscribe_auditor import UnsubscribeAuditor
from ..utils import build_pipeline, get_password_for_account, resolve_connection_settings


@click.command('extract-unsubscribe')
@click.option('--email', default=None, help='Account to log in as (default: IMAP_USERNAME)')
@click.option('--server', default=None, help='IMAP server address')
@click.option('--port', type=int, default=None, help='IMAP port (default: 993)')
@click.option('--provider', default=None, help='Provider preset (gmail, outlook, yahoo, icloud, comcast)')
@click.option('--mailbox', default=None, help='Mailbox to audit (default: INBOX)')
@click.option('--output', default=None, help='CSV output path (default: unsubscribe_links.csv)')
@click.option('--workers', type=int, default=1, show_default=True,
              help='Threads used to resolve messages. Parsing holds the GIL, so '
                   'more than 1 rarely speeds up an audit')
def extract_unsubscribe(email, server, port, provider, mailbox, output, workers):
    """
    Extract unsubscribe links from the unread messages of a mailbox.
    
    Each row of the report holds the subject, date, sender, resolved link
    and where it was found (header, body or none).
    
    Example:
        python main.py extract-unsubscribe --email user@gmail.com --provider gmail
        python main.py extract-unsubscribe --mailbox Promotions --output promo.csv
    """
    email = email or Config.IMAP_USERNAME
    if not email:
        click.secho("✗ Error: No account given (use --email or IMAP_USERNAME)", fg='red')
        raise click.Abort()
    
    try:
        settings = resolve_connection_settings(server, port, provider)
    except ValueError as e:
        click.secho(f"✗ Error: {e}", fg='red')
        raise click.Abort()
    
    pipeline = build_pipeline()
    mailbox = mailbox or Config.DEFAULT_MAILBOX
    output_path = Config.get_report_path(output)
    password = get_password_for_account(email)
    
    click.echo(f"\nSearching for unread emails in {mailbox}...")
    auditor = UnsubscribeAuditor(pipeline, max_workers=workers)
    
    try:
        with IMAPConnection(settings['server'], settings['port'], settings['use_ssl'],
                            timeout=Config.IMAP_TIMEOUT) as imap:
            imap.connect(email, password)
            rows = auditor.run(imap, mailbox, output_path)
    except (MailboxError, ReportError) as e:
        click.secho(f"✗ Error: {e}", fg='red')
        raise click.Abort()
    
    if not rows:
        click.echo("No unread emails found.")
        return
    
    found = sum(1 for row in rows if row.unsubscribe)
    click.secho(f"✓ Wrote {len(rows)} rows to {output_path}", fg='green')
    click.echo(f"  Messages with an unsubscribe link: {found}")

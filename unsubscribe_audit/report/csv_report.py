"""
CSV report of resolved unsubscribe actions, one row per message.

Every field is wrapped in double quotes with embedded quotes doubled; a
missing value is written as an empty quoted field.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..email_processor.unsubscribe.exceptions import ReportError
from ..email_processor.unsubscribe.types import FoundIn

REPORT_HEADER: List[str] = ['Subject', 'Date', 'From', 'UnsubscribeLink', 'FoundIn']


@dataclass(frozen=True)
class AuditRow:
    """One report row."""
    
    subject: str
    date: str
    sender: str
    unsubscribe: Optional[str]
    found_in: FoundIn
    
    def to_fields(self) -> List[str]:
        return [
            self.subject,
            self.date,
            self.sender or '',
            self.unsubscribe or '',
            self.found_in.value
        ]


def escape_csv_field(value: Optional[str]) -> str:
    """Quote a single field: ``a"b`` becomes ``"a""b"``, None becomes ``""``."""
    if value is None:
        return '""'
    return '"' + str(value).replace('"', '""') + '"'


def format_line(fields: Iterable[Optional[str]]) -> str:
    return ','.join(escape_csv_field(field) for field in fields)


def write_report(rows: Iterable[AuditRow], output_path: Union[str, Path]) -> int:
    """Write the report and return the number of data rows written."""
    path = Path(output_path)
    lines = [format_line(REPORT_HEADER)]
    lines.extend(format_line(row.to_fields()) for row in rows)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text('\n'.join(lines), encoding='utf-8')
    except OSError as e:
        raise ReportError(f"Failed to write report: {e}", path=str(path)) from e
    return len(lines) - 1

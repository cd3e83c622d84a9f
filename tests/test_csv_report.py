"""
Tests for the CSV audit report.
"""

from pathlib import Path
from unittest.mock import patch

import pytest

from unsubscribe_audit.email_processor.unsubscribe.exceptions import ReportError
from unsubscribe_audit.email_processor.unsubscribe.types import FoundIn
from unsubscribe_audit.report.csv_report import AuditRow, escape_csv_field, write_report


class TestFieldEscaping:
    """Test the quoting rule for a single field."""
    
    def test_plain_value_quoted(self):
        assert escape_csv_field("Hello") == '"Hello"'
    
    def test_embedded_quotes_doubled(self):
        assert escape_csv_field('Say "hi"') == '"Say ""hi"""'
    
    def test_none_is_empty_field(self):
        assert escape_csv_field(None) == '""'
    
    def test_commas_and_newlines_kept_inside_quotes(self):
        assert escape_csv_field("a,b\nc") == '"a,b\nc"'


class TestWriteReport:
    """Test writing complete reports."""
    
    def test_header_and_rows(self, tmp_path):
        rows = [
            AuditRow('Big "Sale"', 'Mon, 01 Jan 2024 10:00:00 +0000', 'News <news@ex.com>',
                     'https://ex.com/u', FoundIn.HEADER),
            AuditRow('Hello', 'Tue, 02 Jan 2024 10:00:00 +0000', '', None, FoundIn.NONE),
        ]
        output = tmp_path / "report.csv"
        
        count = write_report(rows, output)
        
        assert count == 2
        assert output.read_text(encoding='utf-8').split('\n') == [
            '"Subject","Date","From","UnsubscribeLink","FoundIn"',
            '"Big ""Sale""","Mon, 01 Jan 2024 10:00:00 +0000","News <news@ex.com>","https://ex.com/u","header"',
            '"Hello","Tue, 02 Jan 2024 10:00:00 +0000","","","none"',
        ]
    
    def test_creates_parent_directories(self, tmp_path):
        output = tmp_path / "nested" / "dir" / "report.csv"
        
        write_report([], output)
        
        assert output.read_text(encoding='utf-8') == '"Subject","Date","From","UnsubscribeLink","FoundIn"'
    
    def test_non_ascii_subject(self, tmp_path):
        output = tmp_path / "report.csv"
        
        write_report([AuditRow('Café', 'd', 's', 'mailto:a@ex.com', FoundIn.BODY)], output)
        
        assert '"Café"' in output.read_text(encoding='utf-8')
    
    def test_write_failure_raises_report_error(self, tmp_path):
        with patch.object(Path, 'write_text', side_effect=PermissionError("denied")):
            with pytest.raises(ReportError) as exc_info:
                write_report([], tmp_path / "report.csv")
        
        assert "report.csv" in str(exc_info.value)

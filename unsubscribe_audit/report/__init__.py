"""
Audit report writing.
"""

from .csv_report import AuditRow, REPORT_HEADER, escape_csv_field, write_report

__all__ = ['AuditRow', 'REPORT_HEADER', 'escape_csv_field', 'write_report']

"""Report extraction from uploaded spreadsheets."""

from webx_crm.services.reports.seo import ReportError, SeoReport, parse_seo_csv

__all__ = ["ReportError", "SeoReport", "parse_seo_csv"]

"""HTML report generation."""

from suitest.report.generator import ReportGenerator

__all__ = ["ReportGenerator"]

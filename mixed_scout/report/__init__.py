"""mixed_scout.report: JSON и HTML отчёты по результатам обхода."""

from mixed_scout.report.html_report import render_html
from mixed_scout.report.json_report import render_json

__all__ = ["render_json", "render_html"]

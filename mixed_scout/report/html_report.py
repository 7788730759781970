# File: mixed_scout/report/html_report.py
"""mixed_scout.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from itertools import groupby
from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from mixed_scout.crawler.models import CrawlReport

#: Шаблоны, поставляемые вместе с пакетом.
DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"
TEMPLATE_NAME = "report.html.j2"


def render_html(
    report: CrawlReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона и сохраняет его по указанному пути.

    Args:
        report: объект CrawlReport.
        template_dir: директория с Jinja2-шаблонами (None - встроенные шаблоны).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir is not None else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template(TEMPLATE_NAME)

    findings = sorted(report.findings, key=lambda f: (f.page, f.resource))
    context: dict[str, Any] = {
        "start_url": report.start_url,
        "duration": report.duration,
        "visited": report.visited,
        "findings_by_page": [
            (page, [f.resource for f in group]) for page, group in groupby(findings, key=lambda f: f.page)
        ],
        "findings_total": len(report.findings),
        "failures": report.failures,
    }

    html_content = template.render(**context)
    output_path.write_text(html_content, encoding="utf-8")

    return output_path

#!/usr/bin/env python3
"""
Точка входа для запуска MixedScout через командную строку.

Обходит HTTPS-сайт начиная с START_URL и печатает каждую найденную ссылку на
ресурс, загружаемый по HTTP, в формате ``<страница>: <ресурс>``.  По окончании
выводится список всех посещённых страниц.

Опции:
  --config PATH          YAML/JSON-конфиг с полями CrawlConfig
  --poll-interval SEC    Интервал опроса очереди
  --timeout SEC          Таймаут на один запрос
  --max-concurrency INT  Макс. число одновременных загрузок
  --queue-size INT       Ёмкость очереди ссылок (0 - без ограничения)
  --user-agent STR       Заголовок User-Agent
  --log-level LEVEL      Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH        Файл для логов (stderr, если не указан)
  --log-format FORMAT    Формат логирования
  --json PATH            Сохранить JSON-отчёт в файл
  --html PATH            Сохранить HTML-отчёт в файл
  --template DIR         Папка с Jinja2-шаблонами
  --scan-timeout SEC     Таймаут всего обхода (секунд)
  --version, -v          Показать версию MixedScout

Пример:
  mixed-scout https://example.com --json report.json --max-concurrency 20
"""
import asyncio
import sys
from pathlib import Path
from urllib.parse import urlsplit

import click

from mixed_scout import __version__
from mixed_scout.config import load_config
from mixed_scout.engine import start_scan
from mixed_scout.logger import DEFAULT_FORMAT, init_logging
from mixed_scout.report.html_report import render_html
from mixed_scout.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help"])
USAGE_HINT = "Укажите HTTPS-адрес сайта, например https://example.com"


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def is_https_url(url: str) -> bool:
    """Стартовый адрес должен быть абсолютным https:// URL с хостом."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return parts.scheme.lower() == 'https' and bool(parts.hostname)


@click.command(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='MixedScout, version %(version)s')
@click.argument('start_url', metavar='START_URL')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option('--poll-interval', type=float, default=None, help='Интервал опроса очереди (секунд)')
@click.option('--timeout', type=float, default=None, help='Таймаут на один запрос (секунд)')
@click.option('--max-concurrency', type=int, default=None, help='Макс. число одновременных загрузок')
@click.option('--queue-size', type=int, default=None, help='Ёмкость очереди ссылок (0 - без ограничения)')
@click.option('--user-agent', default=None, help='Заголовок User-Agent')
@click.option(
    '--log-level', 'log_level',
    default='WARNING', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option(
    '--html', 'html_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить HTML-отчёт в файл'
)
@click.option(
    '--template', '-t', 'template_dir',
    default=None,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help='Папка с Jinja2-шаблонами (по умолчанию встроенные)'
)
@click.option(
    '--scan-timeout', 'scan_timeout',
    type=float,
    default=None,
    help='Таймаут всего обхода (секунд)'
)
def cli(start_url, config_path, poll_interval, timeout, max_concurrency, queue_size, user_agent,
        log_level, log_file, log_format, json_output, html_output, template_dir, scan_timeout):
    """Найти mixed content на сайте, начиная с START_URL."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    if not is_https_url(start_url):
        print_error(f'Некорректный адрес {start_url!r}. {USAGE_HINT}')

    try:
        cfg = load_config(
            config_path,
            start_url=start_url,
            poll_interval=poll_interval,
            timeout=timeout,
            max_concurrency=max_concurrency,
            queue_size=queue_size,
            user_agent=user_agent,
        )
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')

    def emit(finding):
        click.echo(str(finding))

    try:
        if scan_timeout:
            report = asyncio.run(
                asyncio.wait_for(start_scan(cfg, on_finding=emit), timeout=scan_timeout)
            )
        else:
            report = asyncio.run(start_scan(cfg, on_finding=emit))
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {scan_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    click.echo('-----')
    click.echo(f'visited ({len(report.visited)}):')
    for url in report.visited:
        click.echo(url)

    if json_output:
        try:
            saved_json = render_json(report, json_output)
            click.echo(f'JSON report: {saved_json}', err=True)
        except Exception as e:
            print_error(f'Ошибка при сохранении JSON: {e}')

    if html_output:
        try:
            saved_html = render_html(report, template_dir, html_output)
            click.echo(f'HTML report: {saved_html}', err=True)
        except Exception as e:
            print_error(f'Ошибка при сохранении HTML: {e}')


if __name__ == "__main__":
    cli()

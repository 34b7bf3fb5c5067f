# === FILE: webcrawler/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера через командную строку.

Команды:
  crawl SEED...  Обойти сайты начиная с SEED и вывести/сохранить отчёт
  config         Показать действующие настройки

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (по умолчанию встроенные настройки)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --max-depth N        Максимальная глубина (0 - без ограничения)
  --concurrency N      Число воркеров
  --crawl-timeout SEC  Таймаут всего обхода
  --fetch-timeout SEC  Таймаут одной страницы
  --delay SEC          Базовая пауза между запросами к одному домену
  --user-agent UA      Заголовок User-Agent
  --same-domain        Не выходить за домены стартовых URL
  --json PATH          Сохранить JSON-отчёт в файл
  --pretty             Преформатировать JSON-вывод (отступ 2)

Дополнительно:
  --version, -v       Показать версию

Пример:
  webcrawler crawl https://example.com --max-depth 2 --json report.json
"""
import sys
from pathlib import Path

import click

from webcrawler import __version__
from webcrawler.config import build_settings, load_config
from webcrawler.engine import start_crawl
from webcrawler.errors import ConfigurationError
from webcrawler.logger import init_logging
from webcrawler.report.json_report import render_json

CONTEXT_SETTINGS = dict(help_option_names=["--help", "-h"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='webcrawler, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML/JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
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
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд webcrawler CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    try:
        settings = load_config(config_path) if config_path else build_settings()
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    ctx.ensure_object(dict)
    ctx.obj['settings'] = settings


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.argument('seeds', nargs=-1, required=True)
@click.option('--max-depth', 'max_depth', type=int, default=None, help='Максимальная глубина (0 - без ограничения)')
@click.option('--concurrency', type=int, default=None, help='Число параллельных воркеров')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None, help='Таймаут всего обхода (секунд)')
@click.option('--fetch-timeout', 'fetch_timeout', type=float, default=None, help='Таймаут одной страницы (секунд)')
@click.option('--delay', 'politeness_base_delay', type=float, default=None,
              help='Базовая пауза между запросами к одному домену (секунд)')
@click.option('--user-agent', 'user_agent', default=None, help='Заголовок User-Agent')
@click.option('--same-domain', 'same_domain_only', is_flag=True, default=False,
              help='Не выходить за домены стартовых URL')
@click.option(
    '--json', '-j', 'json_output',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Сохранить JSON-отчёт в файл'
)
@click.option('--pretty', is_flag=True, help='Преформатировать JSON-вывод (отступ 2)')
@click.pass_context
def crawl_cmd(ctx, seeds, json_output, pretty, **overrides):
    """Обойти сайты начиная с SEEDS и сгенерировать отчёт."""
    if not overrides['same_domain_only']:
        overrides['same_domain_only'] = None  # не перетирать значение из конфига
    try:
        settings = build_settings(ctx.obj['settings'].model_dump(), **overrides)
    except ConfigurationError as e:
        print_error(str(e))

    try:
        report = start_crawl(list(seeds), settings)
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if not json_output:
        click.echo(report.json(pretty=pretty))
        return

    try:
        saved_json = render_json(report, json_output)
    except OSError as e:
        print_error(f'Ошибка при сохранении JSON: {e}')
    click.echo(f'JSON report: {saved_json}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.pass_context
def show_config(ctx):
    """Показать текущие настройки в JSON."""
    settings = ctx.obj['settings']
    click.echo(settings.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()

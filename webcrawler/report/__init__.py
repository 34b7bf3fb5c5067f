# File: webcrawler/report/__init__.py
"""webcrawler.report: Сохранение отчётов обхода, используемое CLI."""

from webcrawler.report.json_report import render_json

__all__ = ["render_json"]

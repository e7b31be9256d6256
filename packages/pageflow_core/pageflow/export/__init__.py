"""Exporters for layout results."""

from .json_exporter import LayoutJSONExporter

__all__ = ["LayoutJSONExporter"]

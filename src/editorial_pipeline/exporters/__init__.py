"""Exporters for publishing approved articles."""

from .exporter import Exporter
from .publication_exporter import PublicationExporter, dump_metadata, load_export

__all__ = ["Exporter", "PublicationExporter", "dump_metadata", "load_export"]

"""Loader for JSON configuration documents."""

from envsync.parsers import JsonParser

from .base import BaseLoader


class JsonLoader(BaseLoader):
    """Load one or more JSON files."""

    parser_class = JsonParser
    default_file = "env.json"

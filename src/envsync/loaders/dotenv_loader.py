"""Loader for KEY=VALUE dotenv files."""

from envsync.parsers import DotenvParser

from .base import BaseLoader


class DotenvLoader(BaseLoader):
    """Load one or more ``.env`` style files."""

    parser_class = DotenvParser

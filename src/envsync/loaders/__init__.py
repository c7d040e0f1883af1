"""Loaders: per-format file loading and registry-driven format guessing.

Usage:
    from envsync.loaders import DotenvLoader, EnvLoader, JsonLoader, LoaderRegistry

    DotenvLoader(".env").load()
    EnvLoader(files=[".env", "env.json"]).load()
"""

from envsync.loaders.base import BaseLoader, Loader
from envsync.loaders.dotenv_loader import DotenvLoader
from envsync.loaders.env_loader import EnvLoader
from envsync.loaders.json_loader import JsonLoader
from envsync.loaders.registry import DOTENV, LoaderFactory, LoaderRegistry

__all__ = [
    "Loader",
    "BaseLoader",
    "DotenvLoader",
    "JsonLoader",
    "EnvLoader",
    "LoaderRegistry",
    "LoaderFactory",
    "DOTENV",
]

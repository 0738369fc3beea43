"""
config_merger package

Provides the CLI entrypoint (`python -m config_merger`) and the merge model
used to layer KEY=VALUE configuration files into a single target file.
"""

from .cli import main
from .document import ConfigDocument, ConfigMerger, Entry, Passthrough

__all__ = ["ConfigDocument", "ConfigMerger", "Entry", "Passthrough", "main"]

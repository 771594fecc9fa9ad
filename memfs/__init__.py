"""
memfs - An in-memory filesystem for tests

Directory and file operations run against a tree held entirely in
process memory, with no disk I/O.

Example:
    >>> from memfs import Dir, get_filesystem
    >>> fs = get_filesystem()
    >>> Dir.mkdir('/test')
    0
    >>> fs.touch('/test/file1')
    >>> Dir.entries('/test')
    ['.', '..', 'file1']
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .filesystem import (
    Dir,
    DirEntries,
    FileSystem,
    FileType,
    Node,
    NodeTree,
    PathResolver,
    entries,
    foreach,
    get_filesystem,
    reset_filesystem,
)
from .core import ConfigLoader, Config, get_config
from .logger import Logger, LogLevel, configure_logging, get_logger

__all__ = [
    'Dir',
    'DirEntries',
    'FileSystem',
    'FileType',
    'Node',
    'NodeTree',
    'PathResolver',
    'entries',
    'foreach',
    'get_filesystem',
    'reset_filesystem',
    'ConfigLoader',
    'Config',
    'get_config',
    'Logger',
    'LogLevel',
    'configure_logging',
    'get_logger',
]

"""
memfs Virtual File System Module

Provides the in-memory filesystem:
- Arena-based node tree
- Path resolution with symlink following
- Filesystem state with a current working directory
- Directory cursors (Dir)
"""

from .node import Node, NodeTree, FileType
from .path_resolver import PathResolver, ParsedPath
from .vfs import FileSystem, get_filesystem, reset_filesystem
from .dir import Dir, DirEntries, entries, foreach

__all__ = [
    # Node tree
    'Node',
    'NodeTree',
    'FileType',
    # Path Resolver
    'PathResolver',
    'ParsedPath',
    # VFS
    'FileSystem',
    'get_filesystem',
    'reset_filesystem',
    # Directory cursor
    'Dir',
    'DirEntries',
    'entries',
    'foreach',
]

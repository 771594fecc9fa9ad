"""
Path Resolver Module

Handles path resolution and manipulation in the virtual file system.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List, Tuple

from .node import Node, NodeTree, SEPARATOR
from memfs.exceptions import (
    FileNotFoundError,
    NotADirectoryError,
    SymlinkLoopError,
)
from memfs.logger import get_logger


DEFAULT_MAX_SYMLINK_DEPTH = 40


@dataclass
class ParsedPath:
    """A parsed path with its components."""
    is_absolute: bool
    components: List[str]

    def __str__(self) -> str:
        if self.is_absolute:
            return SEPARATOR + SEPARATOR.join(self.components)
        return SEPARATOR.join(self.components) if self.components else '.'

    @property
    def parent(self) -> 'ParsedPath':
        return ParsedPath(self.is_absolute, self.components[:-1])

    @property
    def name(self) -> str:
        return self.components[-1] if self.components else ''


class PathResolver:
    """
    Resolves filesystem paths to nodes.

    Handles:
    - Absolute and relative paths
    - . and .. components
    - Symlinks, followed up to a bounded number of hops

    The static helpers work on strings only and never touch a tree.

    Example:
        >>> resolver = PathResolver(tree)
        >>> resolver.resolve('/tmp/../tmp', cwd=tree.root).name
        'tmp'
    """

    def __init__(self, tree: NodeTree, max_symlink_depth: int = DEFAULT_MAX_SYMLINK_DEPTH):
        self._tree = tree
        self._max_symlink_depth = max_symlink_depth
        self._logger = get_logger('resolver')

    @property
    def max_symlink_depth(self) -> int:
        return self._max_symlink_depth

    def resolve(self, path: str, cwd: Node, follow_final: bool = True) -> Node:
        """
        Resolve a path to a node.

        Args:
            path: Absolute or relative path
            cwd: Directory node relative paths start from
            follow_final: Follow a symlink in the last position

        Returns:
            The resolved node, of any type

        Raises:
            FileNotFoundError: If a component does not exist
            NotADirectoryError: If a non-final component is not a directory
            SymlinkLoopError: If too many symlinks are followed
        """
        node, _ = self._walk(path, cwd, follow_final, 0)
        return node

    def resolve_parent(self, path: str, cwd: Node) -> Tuple[Node, str]:
        """
        Resolve everything but the last component of a path.

        Returns:
            Tuple of (parent directory node, last component). The last
            component is '' for the root and may be '.' or '..'.

        Raises:
            FileNotFoundError: If the parent chain does not exist
            NotADirectoryError: If the parent is not a directory
        """
        parsed = self.parse(path)
        if not parsed.components:
            if not path:
                raise FileNotFoundError(path)
            return self.resolve(path, cwd), ''

        parent = self.resolve(str(parsed.parent), cwd)
        if not parent.is_directory:
            raise NotADirectoryError(path)
        return parent, parsed.name

    def _walk(
        self,
        path: str,
        start: Node,
        follow_final: bool,
        hops: int
    ) -> Tuple[Node, int]:
        if not path:
            raise FileNotFoundError(path)

        parsed = self.parse(path)
        current = self._tree.root if parsed.is_absolute else start
        last = len(parsed.components) - 1

        for index, component in enumerate(parsed.components):
            if not current.is_directory:
                raise NotADirectoryError(path, context={'component': component})

            if component == '.':
                continue
            if component == '..':
                current = self._tree.parent_of(current)
                continue

            try:
                child = self._tree.lookup_child(current, component)
            except FileNotFoundError:
                raise FileNotFoundError(path, context={'component': component}) from None

            if child.is_symlink and (index < last or follow_final):
                hops += 1
                if hops > self._max_symlink_depth:
                    self._logger.debug(
                        "Symlink depth exceeded",
                        context={'path': path, 'depth': self._max_symlink_depth}
                    )
                    raise SymlinkLoopError(path, depth=self._max_symlink_depth)
                child, hops = self._walk(
                    child.target or '',
                    self._tree.parent_of(child),
                    True,
                    hops
                )

            current = child

        return current, hops

    # String helpers

    @staticmethod
    def parse(path: str) -> ParsedPath:
        """
        Parse a path into components.

        Repeated separators collapse; '.' and '..' are kept.

        Args:
            path: Path string to parse

        Returns:
            ParsedPath with components
        """
        is_absolute = path.startswith(SEPARATOR)
        components = [c for c in path.split(SEPARATOR) if c]
        return ParsedPath(is_absolute=is_absolute, components=components)

    @staticmethod
    def normalize(path: str) -> str:
        """
        Normalize a path lexically by resolving . and ..

        Args:
            path: Path to normalize

        Returns:
            Normalized path string
        """
        parsed = PathResolver.parse(path)

        result: List[str] = []

        for component in parsed.components:
            if component == '.':
                continue
            if component == '..':
                if result and result[-1] != '..':
                    result.pop()
                elif not parsed.is_absolute:
                    result.append(component)
            else:
                result.append(component)

        return str(ParsedPath(parsed.is_absolute, result))

    @staticmethod
    def join(*paths: str) -> str:
        """
        Join multiple path components.

        An absolute component discards everything before it.

        Args:
            *paths: Path components to join

        Returns:
            Joined, normalized path string
        """
        if not paths:
            return '.'

        result = paths[0]

        for path in paths[1:]:
            if path.startswith(SEPARATOR):
                result = path
            else:
                result = result.rstrip(SEPARATOR) + SEPARATOR + path

        return PathResolver.normalize(result)

    @staticmethod
    def dirname(path: str) -> str:
        """
        Get the directory name of a path.

        Args:
            path: Path string

        Returns:
            Directory name portion; '/' for the root, '.' for a bare name
        """
        parsed = PathResolver.parse(PathResolver.normalize(path))
        return str(parsed.parent)

    @staticmethod
    def basename(path: str) -> str:
        """
        Get the base name of a path.

        Args:
            path: Path string

        Returns:
            Base name portion; '/' for the root
        """
        parsed = PathResolver.parse(PathResolver.normalize(path))
        return parsed.name or str(parsed)

    @staticmethod
    def split(path: str) -> Tuple[str, str]:
        """
        Split a path into directory and base name.

        Returns:
            Tuple of (dirname, basename)
        """
        return (PathResolver.dirname(path), PathResolver.basename(path))

    @staticmethod
    def is_absolute(path: str) -> bool:
        """Check if a path is absolute."""
        return path.startswith(SEPARATOR)

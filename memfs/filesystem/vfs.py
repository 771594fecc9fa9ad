"""
Virtual File System (VFS) Module

Implements the in-memory filesystem state:
- One node tree per FileSystem instance
- A current working directory that always names an existing directory
- Directory operations (mkdir, rmdir, chdir)
- File and symlink creation, rename and removal
- A process-wide default instance for convenience

Author: YSNRFD
Version: 1.0.0
"""

import os
from contextlib import contextmanager
from dataclasses import replace
from typing import Optional, Any, Callable, Iterator, List, Tuple, TypeVar

from .node import Node, NodeTree, FileType
from .path_resolver import PathResolver
from memfs.core.config_loader import FilesystemConfig, get_config
from memfs.exceptions import (
    FileSystemException,
    FileExistsError,
    PermissionDeniedError,
    DirectoryBusyError,
    NotAFileError,
    NotADirectoryError,
    SymlinkLoopError,
)
from memfs.logger import get_logger


T = TypeVar('T')


class FileSystem:
    """
    In-memory filesystem.

    Holds the node tree and the current working directory. Relative
    paths given to any operation are resolved against the current
    working directory of this instance only, so independent instances
    never affect each other.

    Example:
        >>> fs = FileSystem()
        >>> node = fs.mkdir('/test')
        >>> fs.chdir('/test')
        0
        >>> fs.getwd()
        '/test'
    """

    def __init__(self, config: Optional[FilesystemConfig] = None):
        self._logger = get_logger('filesystem')
        config = config or get_config().filesystem
        self._config = replace(config, standard_directories=list(config.standard_directories))
        self.reset()

    @property
    def config(self) -> FilesystemConfig:
        """Settings this filesystem was created with."""
        return self._config

    def reset(self) -> None:
        """Discard every node and start over with the standard directories."""
        self._tree = NodeTree()
        self._resolver = PathResolver(self._tree, self._config.max_symlink_depth)
        self._cwd_ino = self._tree.root.ino
        # Working directories recorded by open chdir scopes, outermost first
        self._scoped_inos: List[int] = []

        for path in self._config.standard_directories:
            self._makedirs(path)

        self._logger.debug(
            "Filesystem reset",
            context={'standard_directories': list(self._config.standard_directories)}
        )

    def _makedirs(self, path: str) -> None:
        current = self._tree.root
        for component in PathResolver.parse(path).components:
            if component in current.children:
                current = self._tree.lookup_child(current, component)
            else:
                current = self._tree.insert_child(current, component, self._tree.new_directory())

    @property
    def tree(self) -> NodeTree:
        return self._tree

    @property
    def resolver(self) -> PathResolver:
        return self._resolver

    @property
    def root(self) -> Node:
        return self._tree.root

    @property
    def cwd(self) -> Node:
        """The current working directory node."""
        return self._tree.get(self._cwd_ino)

    # Resolution

    def resolve(self, path: str, follow_symlinks: bool = True) -> Node:
        """
        Resolve a path against the current working directory.

        Raises:
            FileNotFoundError, NotADirectoryError, SymlinkLoopError
        """
        return self._resolver.resolve(path, self.cwd, follow_final=follow_symlinks)

    def resolve_directory(self, path: str) -> Node:
        """
        Resolve a path that must name a directory.

        Raises:
            FileNotFoundError: If the path does not exist
            NotADirectoryError: If it is not a directory
            SymlinkLoopError: If symlinks loop
        """
        node = self.resolve(path)
        if not node.is_directory:
            raise NotADirectoryError(path)
        return node

    def find(self, path: str, follow_symlinks: bool = True) -> Optional[Node]:
        """Resolve a path, returning None instead of raising."""
        try:
            return self.resolve(path, follow_symlinks)
        except FileSystemException:
            return None

    def _resolve_new_entry(self, path: str) -> Tuple[Node, str]:
        """Resolve the parent of an entry that is about to be created."""
        parent, name = self._resolver.resolve_parent(path, self.cwd)
        if name in ('', '.', '..'):
            raise FileExistsError(path)
        return parent, name

    # Working directory

    def getwd(self) -> str:
        """Get the path of the current working directory."""
        return self._tree.full_path(self.cwd)

    pwd = getwd

    def chdir(self, path: str, body: Optional[Callable[[str], T]] = None) -> Any:
        """
        Change the current working directory.

        Args:
            path: Directory to change to
            body: Optional callable run with the new directory in effect;
                it receives the new working directory path and the
                previous directory is restored afterwards

        Returns:
            0, or the return value of ``body`` when one is given

        Raises:
            FileNotFoundError: If the path does not exist
            NotADirectoryError: If it is not a directory
        """
        if body is not None:
            with self.chdir_scope(path) as new_cwd:
                return body(new_cwd)

        node = self.resolve_directory(path)
        self._cwd_ino = node.ino

        self._logger.debug("Changed directory", context={'path': self.getwd()})
        return 0

    @contextmanager
    def chdir_scope(self, path: str) -> Iterator[str]:
        """
        Change directory for the duration of a ``with`` block.

        The previous working directory is restored on every exit path;
        exceptions raised inside the block propagate unchanged. While the
        scope is open the previous directory counts as busy and cannot be
        removed. If the filesystem is reset inside the block, the working
        directory stays at the new root.

        Example:
            >>> with fs.chdir_scope('/test') as cwd:
            ...     fs.mkdir('sub')
        """
        previous_ino = self._cwd_ino
        tree = self._tree
        self.chdir(path)
        self._scoped_inos.append(previous_ino)
        try:
            yield self.getwd()
        finally:
            if self._tree is tree:
                self._scoped_inos.pop()
                self._cwd_ino = previous_ino
            self._logger.debug("Restored directory", context={'path': self.getwd()})

    # Directories

    def mkdir(self, path: str) -> Node:
        """
        Create a new, empty directory.

        Returns:
            The new directory node

        Raises:
            FileNotFoundError: If the parent directory does not exist
            FileExistsError: If the path already exists
        """
        parent, name = self._resolve_new_entry(path)
        node = self._tree.insert_child(parent, name, self._tree.new_directory())

        self._logger.debug(
            "Created directory",
            context={'path': self._tree.full_path(node), 'ino': node.ino}
        )
        return node

    def rmdir(self, path: str) -> None:
        """
        Remove an empty directory.

        A symlink is not followed: removing a link to a directory fails
        with NotADirectoryError.

        Raises:
            FileNotFoundError: If the path does not exist
            NotADirectoryError: If it is not a directory
            DirectoryNotEmptyError: If it still has children
            DirectoryBusyError: If it is the current working directory, or
                the one an open chdir scope will return to
            PermissionDeniedError: If it is the root directory
        """
        node = self.resolve(path, follow_symlinks=False)

        if not node.is_directory:
            raise NotADirectoryError(path)

        if node.is_root:
            raise PermissionDeniedError(path, operation="rmdir")

        if node.ino == self._cwd_ino or node.ino in self._scoped_inos:
            self._logger.debug("Refusing to remove working directory", context={'path': path})
            raise DirectoryBusyError(path)

        full_path = self._tree.full_path(node)
        self._tree.remove_child(self._tree.parent_of(node), node.name)

        self._logger.debug("Removed directory", context={'path': full_path})

    def is_directory(self, path: str) -> bool:
        """Check if a path resolves to a directory. Never raises."""
        node = self.find(path)
        return node is not None and node.is_directory

    def listdir(self, path: str = '.') -> List[str]:
        """
        List the child names of a directory in ascending order.

        Raises:
            FileNotFoundError: If the path does not exist
            NotADirectoryError: If it is not a directory
        """
        return self._tree.list_children(self.resolve_directory(path))

    # Files and links

    def touch(self, *paths: str) -> None:
        """
        Create empty files, or refresh the timestamps of existing entries.

        A dangling symlink gets its missing target created as an empty file.

        Raises:
            FileNotFoundError: If a parent directory does not exist
            SymlinkLoopError: If symlinks loop
        """
        for path in paths:
            node = self.find(path)
            if node is not None:
                node.touch()
                continue

            parent, name = self._resolve_touch_target(path)
            node = self._tree.insert_child(parent, name, self._tree.new_file())

            self._logger.debug(
                "Created file",
                context={'path': self._tree.full_path(node), 'ino': node.ino}
            )

    def _resolve_touch_target(self, path: str) -> Tuple[Node, str]:
        """Follow dangling symlinks to the entry touch should create."""
        parent, name = self._resolve_new_entry(path)

        for _ in range(self._resolver.max_symlink_depth + 1):
            ino = parent.children.get(name)
            if ino is None:
                return parent, name

            link = self._tree.get(ino)
            if not link.is_symlink:
                raise FileExistsError(path)

            parent, name = self._resolver.resolve_parent(
                link.target or '', self._tree.parent_of(link)
            )
            if name in ('', '.', '..'):
                raise FileExistsError(path)

        raise SymlinkLoopError(path, depth=self._resolver.max_symlink_depth)

    def symlink(self, target: str, link_path: str) -> Node:
        """
        Create a symlink at ``link_path`` pointing to ``target``.

        The target is stored verbatim and need not exist. Relative targets
        are resolved from the directory containing the link.

        Raises:
            FileNotFoundError: If the parent directory does not exist
            FileExistsError: If ``link_path`` already exists
        """
        parent, name = self._resolve_new_entry(link_path)
        node = self._tree.insert_child(parent, name, self._tree.new_symlink(target))

        self._logger.debug(
            "Created symlink",
            context={'path': self._tree.full_path(node), 'target': target}
        )
        return node

    def readlink(self, path: str) -> str:
        """
        Get the target stored in a symlink.

        Raises:
            FileNotFoundError: If the path does not exist
            FileSystemException: If the path is not a symlink
        """
        node = self.resolve(path, follow_symlinks=False)
        if not node.is_symlink:
            raise FileSystemException(f"Not a symbolic link: {path}", path=path)
        return node.target or ''

    def unlink(self, path: str) -> None:
        """
        Remove a file or symlink.

        Raises:
            FileNotFoundError: If the path does not exist
            NotAFileError: If it is a directory
        """
        node = self.resolve(path, follow_symlinks=False)
        if node.is_directory:
            raise NotAFileError(path, actual_type="directory")

        self._tree.remove_child(self._tree.parent_of(node), node.name)
        self._logger.debug("Removed entry", context={'path': path, 'ino': node.ino})

    def rename(self, src: str, dst: str) -> Node:
        """
        Move an entry to a new path.

        Symlinks are moved, not followed. The working directory follows
        a moved directory.

        Raises:
            FileNotFoundError: If ``src`` or the parent of ``dst`` does not exist
            FileExistsError: If ``dst`` already exists
            InvalidMoveError: If a directory would be moved beneath itself
            PermissionDeniedError: If ``src`` is the root directory
        """
        node = self.resolve(src, follow_symlinks=False)
        if node.is_root:
            raise PermissionDeniedError(src, operation="rename")

        new_parent, new_name = self._resolve_new_entry(dst)
        old_path = self._tree.full_path(node)
        self._tree.move_child(self._tree.parent_of(node), node.name, new_parent, new_name)

        self._logger.debug(
            "Renamed entry",
            context={'from': old_path, 'to': self._tree.full_path(node)}
        )
        return node

    # Queries

    def exists(self, path: str) -> bool:
        """Check if a path exists (following symlinks). Never raises."""
        return self.find(path) is not None

    def is_file(self, path: str) -> bool:
        """Check if a path resolves to a regular file. Never raises."""
        node = self.find(path)
        return node is not None and node.is_regular_file

    def is_symlink(self, path: str) -> bool:
        """Check if a path is a symlink itself. Never raises."""
        node = self.find(path, follow_symlinks=False)
        return node is not None and node.is_symlink

    def home(self, user: Optional[str] = None) -> Optional[str]:
        """
        Get a home directory from the host environment.

        The result is not looked up in, or created in, the tree.

        Args:
            user: User name; defaults to the current user

        Raises:
            FileSystemException: If ``user`` is not known to the host
        """
        if user is None:
            return os.environ.get(self._config.home_env_var)

        home = os.path.expanduser(f"~{user}")
        if home.startswith('~'):
            raise FileSystemException(
                f"User does not exist: {user}",
                context={'user': user}
            )
        return home

    def get_stats(self) -> dict[str, Any]:
        """Get filesystem statistics."""
        return {
            'total_nodes': self._tree.count(),
            'directories': self._tree.count(FileType.DIRECTORY),
            'files': self._tree.count(FileType.REGULAR),
            'symlinks': self._tree.count(FileType.SYMLINK),
            'cwd': self.getwd(),
        }


_default_fs: Optional[FileSystem] = None


def get_filesystem() -> FileSystem:
    """
    Get the process-wide default filesystem.

    Returns:
        The shared FileSystem, created on first use
    """
    global _default_fs
    if _default_fs is None:
        _default_fs = FileSystem()
    return _default_fs


def reset_filesystem(config: Optional[FilesystemConfig] = None) -> FileSystem:
    """
    Replace the default filesystem with a fresh one.

    Intended for test isolation (call from ``setUp``).
    """
    global _default_fs
    _default_fs = FileSystem(config)
    return _default_fs

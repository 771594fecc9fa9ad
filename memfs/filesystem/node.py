"""
Node Module

Implements the node tree of the in-memory filesystem.

Nodes live in an arena (NodeTree) and refer to each other by inode
number: a directory maps child names to inode numbers and every node
records the inode number of its parent. The root is the only node
without a parent.

Author: YSNRFD
Version: 1.0.0
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any, Iterator, List

from memfs.exceptions import (
    FileNotFoundError,
    FileExistsError,
    DirectoryNotEmptyError,
    InvalidMoveError,
    NotADirectoryError,
)
from memfs.logger import get_logger


ROOT_INO = 1
SEPARATOR = '/'


class FileType(Enum):
    """Types of nodes."""
    REGULAR = 1
    DIRECTORY = 2
    SYMLINK = 3


@dataclass
class Node:
    """
    A single entry in the filesystem tree.

    Directories own a mapping of child name to inode number, files own
    opaque content, symlinks own a target path that is resolved lazily.
    """

    ino: int
    file_type: FileType
    name: str = ''
    parent: Optional[int] = None

    # Timestamps
    atime: float = field(default_factory=time.time)
    mtime: float = field(default_factory=time.time)
    ctime: float = field(default_factory=time.time)

    # For directories: mapping of name -> inode number
    children: dict[str, int] = field(default_factory=dict, repr=False)

    # For symlinks: the stored target path
    target: Optional[str] = None

    # For files: content, never interpreted here
    data: bytes = field(default=b'', repr=False)

    @property
    def is_directory(self) -> bool:
        return self.file_type == FileType.DIRECTORY

    @property
    def is_regular_file(self) -> bool:
        return self.file_type == FileType.REGULAR

    @property
    def is_symlink(self) -> bool:
        return self.file_type == FileType.SYMLINK

    @property
    def is_root(self) -> bool:
        return self.parent is None

    @property
    def size(self) -> int:
        if self.is_symlink:
            return len(self.target or '')
        if self.is_directory:
            return len(self.children)
        return len(self.data)

    def touch(self) -> None:
        """Update access and modification times."""
        now = time.time()
        self.atime = now
        self.mtime = now

    def to_dict(self) -> dict[str, Any]:
        """Convert node to dictionary for display."""
        info = {
            'ino': self.ino,
            'name': self.name,
            'type': self.file_type.name,
            'parent': self.parent,
            'size': self.size,
            'mtime': time.strftime('%Y-%m-%d %H:%M', time.localtime(self.mtime)),
        }
        if self.is_symlink:
            info['target'] = self.target
        return info


class NodeTree:
    """
    Arena owning every node of one filesystem.

    All mutations go through insert_child, remove_child and move_child,
    which keep the parent links and the directory mappings consistent
    and never overwrite an existing entry.

    Example:
        >>> tree = NodeTree()
        >>> docs = tree.insert_child(tree.root, 'docs', tree.new_directory())
        >>> tree.full_path(docs)
        '/docs'
    """

    def __init__(self):
        self._logger = get_logger('tree')
        self._nodes: dict[int, Node] = {}
        self._next_ino = ROOT_INO + 1
        self._nodes[ROOT_INO] = Node(ino=ROOT_INO, file_type=FileType.DIRECTORY)

    @property
    def root(self) -> Node:
        return self._nodes[ROOT_INO]

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[Node]:
        return iter(self._nodes.values())

    def count(self, file_type: Optional[FileType] = None) -> int:
        """Count live nodes, optionally only those of one type."""
        if file_type is None:
            return len(self._nodes)
        return sum(1 for node in self._nodes.values() if node.file_type is file_type)

    def get(self, ino: int) -> Node:
        """Get a node by inode number."""
        return self._nodes[ino]

    def parent_of(self, node: Node) -> Node:
        """Get the parent directory of a node; the root is its own parent."""
        if node.parent is None:
            return node
        return self._nodes[node.parent]

    # Allocation

    def _allocate(self, file_type: FileType, **kwargs: Any) -> Node:
        ino = self._next_ino
        self._next_ino += 1
        return Node(ino=ino, file_type=file_type, **kwargs)

    def new_directory(self) -> Node:
        """Allocate a detached, empty directory node."""
        return self._allocate(FileType.DIRECTORY)

    def new_file(self, data: bytes = b'') -> Node:
        """Allocate a detached file node."""
        return self._allocate(FileType.REGULAR, data=data)

    def new_symlink(self, target: str) -> Node:
        """Allocate a detached symlink node pointing at ``target``."""
        return self._allocate(FileType.SYMLINK, target=target)

    # Child operations

    def _require_directory(self, parent: Node) -> None:
        if not parent.is_directory:
            raise NotADirectoryError(self.full_path(parent))

    def lookup_child(self, parent: Node, name: str) -> Node:
        """
        Look up a child by name.

        Raises:
            NotADirectoryError: If parent is not a directory
            FileNotFoundError: If there is no such child
        """
        self._require_directory(parent)
        ino = parent.children.get(name)
        if ino is None:
            raise FileNotFoundError(self.child_path(parent, name))
        return self._nodes[ino]

    def insert_child(self, parent: Node, name: str, node: Node) -> Node:
        """
        Attach a detached node under ``parent`` as ``name``.

        Returns:
            The inserted node

        Raises:
            NotADirectoryError: If parent is not a directory
            FileExistsError: If the name is already taken
        """
        self._require_directory(parent)
        if name in parent.children:
            raise FileExistsError(self.child_path(parent, name))

        node.name = name
        node.parent = parent.ino
        self._nodes[node.ino] = node
        parent.children[name] = node.ino
        parent.touch()

        self._logger.debug(
            "Inserted node",
            context={'parent': parent.ino, 'name': name, 'ino': node.ino,
                     'type': node.file_type.name}
        )
        return node

    def remove_child(self, parent: Node, name: str) -> Node:
        """
        Detach and discard the child ``name`` of ``parent``.

        Returns:
            The removed node

        Raises:
            NotADirectoryError: If parent is not a directory
            FileNotFoundError: If there is no such child
            DirectoryNotEmptyError: If the child is a non-empty directory
        """
        node = self.lookup_child(parent, name)
        if node.is_directory and node.children:
            raise DirectoryNotEmptyError(self.full_path(node))

        del parent.children[name]
        del self._nodes[node.ino]
        node.parent = None
        parent.touch()

        self._logger.debug(
            "Removed node",
            context={'parent': parent.ino, 'name': name, 'ino': node.ino}
        )
        return node

    def move_child(
        self,
        parent: Node,
        name: str,
        new_parent: Node,
        new_name: str
    ) -> Node:
        """
        Move a child to a new parent and/or name.

        Raises:
            FileNotFoundError: If there is no such child
            FileExistsError: If ``new_name`` is taken in ``new_parent``
            InvalidMoveError: If a directory would be moved beneath itself
        """
        node = self.lookup_child(parent, name)
        self._require_directory(new_parent)

        if node.is_directory and self.is_ancestor(node, new_parent):
            raise InvalidMoveError(
                self.full_path(node),
                destination=self.child_path(new_parent, new_name)
            )

        if new_parent.ino == parent.ino and new_name == name:
            return node

        if new_name in new_parent.children:
            raise FileExistsError(self.child_path(new_parent, new_name))

        del parent.children[name]
        new_parent.children[new_name] = node.ino
        node.name = new_name
        node.parent = new_parent.ino
        node.ctime = time.time()
        parent.touch()
        new_parent.touch()

        self._logger.debug(
            "Moved node",
            context={'ino': node.ino, 'from': parent.ino, 'to': new_parent.ino,
                     'name': new_name}
        )
        return node

    def list_children(self, parent: Node) -> List[str]:
        """Child names of a directory in ascending order."""
        self._require_directory(parent)
        return sorted(parent.children)

    # Paths

    def is_ancestor(self, ancestor: Node, node: Node) -> bool:
        """True if ``ancestor`` is ``node`` or lies on its parent chain."""
        current: Optional[Node] = node
        while current is not None:
            if current.ino == ancestor.ino:
                return True
            current = self._nodes[current.parent] if current.parent is not None else None
        return False

    def full_path(self, node: Node) -> str:
        """Absolute path of a node, rebuilt from its parent links."""
        names: List[str] = []
        current = node
        while current.parent is not None:
            names.append(current.name)
            current = self._nodes[current.parent]
        return SEPARATOR + SEPARATOR.join(reversed(names))

    def child_path(self, parent: Node, name: str) -> str:
        return self.full_path(parent).rstrip(SEPARATOR) + SEPARATOR + name

"""
Directory Cursor Module

Implements Dir, a handle for reading the entries of one directory.

A Dir takes a snapshot of its directory when it is opened: '.', '..'
and then the child names in ascending order. Reads walk that snapshot,
so later changes to the directory never show up in an open handle.
Once closed, a Dir cannot be used again.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any, Callable, Iterator, List, Tuple

from .vfs import FileSystem, get_filesystem
from memfs.exceptions import ClosedHandleError
from memfs.logger import get_logger


_logger = get_logger('dir')


def _filesystem(fs: Optional[FileSystem]) -> FileSystem:
    return fs if fs is not None else get_filesystem()


class Dir:
    """
    Directory handle.

    Example:
        >>> with Dir.open('/test') as d:
        ...     d.read()
        '.'
        >>> Dir.entries('/test')
        ['.', '..', 'dir1', 'dir2', 'file1', 'file2']
    """

    def __init__(self, path: str, fs: Optional[FileSystem] = None):
        """
        Open a directory.

        Args:
            path: Directory to open, absolute or relative to the cwd
            fs: Filesystem to use; defaults to the process-wide one

        Raises:
            FileNotFoundError: If the path does not exist
            NotADirectoryError: If it is not a directory
        """
        self._fs = _filesystem(fs)
        node = self._fs.resolve_directory(path)

        self._path = path
        self._snapshot: Tuple[str, ...] = ('.', '..', *self._fs.tree.list_children(node))
        self._pos = 0
        self._closed = False

        _logger.debug(
            "Opened directory",
            context={'path': path, 'entries': len(self._snapshot)}
        )

    def __repr__(self) -> str:
        return f"<Dir:{self._path}>"

    def __fspath__(self) -> str:
        return self._path

    def __enter__(self) -> 'Dir':
        return self

    def __exit__(self, *exc_info: Any) -> None:
        if not self._closed:
            self.close()

    def __iter__(self) -> Iterator[str]:
        return self._each()

    @property
    def path(self) -> str:
        """The path this handle was opened with, verbatim."""
        return self._path

    def to_path(self) -> str:
        return self._path

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def snapshot(self) -> Tuple[str, ...]:
        """Entry names captured when the handle was opened."""
        self._check_open()
        return self._snapshot

    def _check_open(self) -> None:
        if self._closed:
            raise ClosedHandleError(self._path)

    # Reading

    def read(self) -> Optional[str]:
        """
        Read the next entry name.

        Returns:
            The next name, or None once every entry has been read

        Raises:
            ClosedHandleError: If the handle is closed
        """
        self._check_open()
        if self._pos >= len(self._snapshot):
            return None
        name = self._snapshot[self._pos]
        self._pos += 1
        return name

    def _each(self) -> Iterator[str]:
        while True:
            name = self.read()
            if name is None:
                return
            yield name

    def each(self, callback: Optional[Callable[[str], Any]] = None) -> Any:
        """
        Iterate over the remaining entries.

        Without a callback, returns a lazy iterator driven by read().
        With one, calls it for every remaining entry and returns self.
        Neither form closes the handle; rewind() starts over.
        """
        if callback is None:
            return self._each()
        for name in self._each():
            callback(name)
        return self

    # Position

    def tell(self) -> int:
        """Current position in the snapshot."""
        self._check_open()
        return self._pos

    def seek(self, position: int) -> 'Dir':
        """
        Move to a position in the snapshot.

        Positions past the end are allowed; read() then returns None.

        Raises:
            ClosedHandleError: If the handle is closed
            ValueError: If the position is negative
        """
        self._check_open()
        if position < 0:
            raise ValueError(f"Invalid directory position: {position}")
        self._pos = position
        return self

    @property
    def pos(self) -> int:
        return self.tell()

    @pos.setter
    def pos(self, position: int) -> None:
        self.seek(position)

    def rewind(self) -> 'Dir':
        """Go back to the first entry without refreshing the snapshot."""
        self._check_open()
        self._pos = 0
        return self

    def close(self) -> None:
        """
        Close the handle.

        Raises:
            ClosedHandleError: If the handle is already closed
        """
        self._check_open()
        self._closed = True
        _logger.debug("Closed directory", context={'path': self._path})

    # Class-level API

    @classmethod
    def open(
        cls,
        path: str,
        body: Optional[Callable[['Dir'], Any]] = None,
        fs: Optional[FileSystem] = None
    ) -> Optional['Dir']:
        """
        Open a directory.

        Without ``body``, returns the open handle (also usable as a
        context manager). With ``body``, calls it with the handle,
        closes the handle however ``body`` exits and returns None.
        """
        handle = cls(path, fs)
        if body is None:
            return handle
        with handle:
            body(handle)
        return None

    @classmethod
    def entries(cls, path: str, fs: Optional[FileSystem] = None) -> List[str]:
        """All entry names of a directory, '.' and '..' first."""
        with cls(path, fs) as handle:
            return list(handle)

    @classmethod
    def foreach(
        cls,
        path: str,
        callback: Optional[Callable[[str], Any]] = None,
        fs: Optional[FileSystem] = None
    ) -> Optional['DirEntries']:
        """
        Visit every entry name of a directory.

        With a callback, calls it once per entry and returns None.
        Without one, returns a DirEntries view; the directory is only
        opened, and errors only raised, when the view is iterated.
        """
        if callback is None:
            return DirEntries(path, fs)
        with cls(path, fs) as handle:
            handle.each(callback)
        return None

    @classmethod
    def chdir(
        cls,
        path: str,
        body: Optional[Callable[[str], Any]] = None,
        fs: Optional[FileSystem] = None
    ) -> Any:
        return _filesystem(fs).chdir(path, body)

    @classmethod
    def getwd(cls, fs: Optional[FileSystem] = None) -> str:
        return _filesystem(fs).getwd()

    pwd = getwd

    @classmethod
    def mkdir(cls, path: str, fs: Optional[FileSystem] = None) -> int:
        _filesystem(fs).mkdir(path)
        return 0

    @classmethod
    def rmdir(cls, path: str, fs: Optional[FileSystem] = None) -> int:
        _filesystem(fs).rmdir(path)
        return 0

    delete = rmdir
    unlink = rmdir

    @classmethod
    def exists(cls, path: str, fs: Optional[FileSystem] = None) -> bool:
        return _filesystem(fs).is_directory(path)

    exist = exists

    @classmethod
    def home(cls, user: Optional[str] = None, fs: Optional[FileSystem] = None) -> Optional[str]:
        return _filesystem(fs).home(user)


class DirEntries:
    """
    Lazy, restartable view of a directory's entries.

    Each iteration opens the directory afresh and closes it when the
    iteration finishes or is abandoned.
    """

    def __init__(self, path: str, fs: Optional[FileSystem] = None):
        self._path = path
        self._fs = fs

    def __repr__(self) -> str:
        return f"<DirEntries:{self._path}>"

    def __iter__(self) -> Iterator[str]:
        with Dir(self._path, self._fs) as handle:
            yield from handle


entries = Dir.entries
foreach = Dir.foreach

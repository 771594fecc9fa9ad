"""
Filesystem Exceptions

Exceptions raised by the in-memory filesystem: path resolution, tree
mutation and directory cursors.

Every exception derives from FileSystemException and from the matching
Python built-in, so code written against the real filesystem (catching
FileNotFoundError, NotADirectoryError, OSError, ...) behaves the same when
it runs against memfs.

Author: YSNRFD
Version: 1.0.0
"""

import builtins
import errno as _errno
from typing import Optional, Any


class FileSystemException(Exception):
    """
    Base exception for all filesystem-related errors.

    Attributes:
        message: Human-readable error description
        path: File path associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
        context: Additional structured details
    """

    errno: Optional[int] = None

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.error_code = error_code or 4000
        self.context = context or {}
        if path:
            self.context["path"] = path
        self.filename = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path:
            base = f"{base} (path={self.path})"
        return base


class FileNotFoundError(FileSystemException, builtins.FileNotFoundError):
    """
    A path component, or the final target, does not exist.

    Example:
        >>> raise FileNotFoundError("/path/to/file")
    """

    errno = _errno.ENOENT

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"No such file or directory: {path}",
            path=path,
            error_code=4001,
            context=context
        )


class FileExistsError(FileSystemException, builtins.FileExistsError):
    """
    An entry with the requested name already exists in its parent.

    Example:
        >>> raise FileExistsError("/path/to/file")
    """

    errno = _errno.EEXIST

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"File exists: {path}",
            path=path,
            error_code=4002,
            context=context
        )


class PermissionDeniedError(FileSystemException, builtins.PermissionError):
    """
    The operation is never allowed on the given path.

    memfs has no permission bits; this is raised for structural
    refusals such as removing the root directory.

    Example:
        >>> raise PermissionDeniedError("/", operation="rmdir")
    """

    errno = _errno.EPERM

    def __init__(
        self,
        path: str,
        operation: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        super().__init__(
            message=f"Operation not permitted: {path}",
            path=path,
            error_code=4003,
            context=ctx
        )
        self.operation = operation


class DirectoryNotEmptyError(FileSystemException, builtins.OSError):
    """
    Directory is not empty.

    Raised when attempting to remove a directory that still contains
    files, symlinks or subdirectories.

    Example:
        >>> raise DirectoryNotEmptyError("/path/to/dir")
    """

    errno = _errno.ENOTEMPTY

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Directory not empty: {path}",
            path=path,
            error_code=4004,
            context=context
        )


class DirectoryBusyError(FileSystemException, builtins.OSError):
    """
    Directory is in use as the current working directory.

    Example:
        >>> raise DirectoryBusyError("/home/user")
    """

    errno = _errno.EBUSY

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Device or resource busy: {path}",
            path=path,
            error_code=4005,
            context=context
        )


class SymlinkLoopError(FileSystemException, builtins.OSError):
    """
    Too many levels of symbolic links.

    Raised when path resolution follows more symlinks than the
    configured limit, which usually means the links form a cycle.

    Example:
        >>> raise SymlinkLoopError("/a/b", depth=40)
    """

    errno = _errno.ELOOP

    def __init__(
        self,
        path: str,
        depth: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if depth is not None:
            ctx["depth"] = depth
        super().__init__(
            message=f"Too many levels of symbolic links: {path}",
            path=path,
            error_code=4006,
            context=ctx
        )
        self.depth = depth


class InvalidMoveError(FileSystemException, builtins.OSError):
    """
    A directory cannot be moved beneath itself.

    Example:
        >>> raise InvalidMoveError("/a", destination="/a/b")
    """

    errno = _errno.EINVAL

    def __init__(
        self,
        path: str,
        destination: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if destination:
            ctx["destination"] = destination
        super().__init__(
            message=f"Invalid argument: cannot move {path} into itself",
            path=path,
            error_code=4007,
            context=ctx
        )
        self.destination = destination


class NotAFileError(FileSystemException, builtins.IsADirectoryError):
    """
    Path is a directory where a file or symlink was expected.

    Example:
        >>> raise NotAFileError("/path/to/directory")
    """

    errno = _errno.EISDIR

    def __init__(
        self,
        path: str,
        actual_type: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if actual_type:
            ctx["actual_type"] = actual_type
        super().__init__(
            message=f"Is a directory: {path}",
            path=path,
            error_code=4008,
            context=ctx
        )
        self.actual_type = actual_type


class NotADirectoryError(FileSystemException, builtins.NotADirectoryError):
    """
    Path is not a directory.

    Raised when a directory operation resolves to a file or to a
    symlink that is not followed, and when a path component used as a
    directory is not one.

    Example:
        >>> raise NotADirectoryError("/path/to/file")
    """

    errno = _errno.ENOTDIR

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Not a directory: {path}",
            path=path,
            error_code=4009,
            context=context
        )


class ClosedHandleError(FileSystemException, builtins.OSError):
    """
    Operation attempted on a closed directory handle.

    Example:
        >>> raise ClosedHandleError("/tmp")
    """

    errno = _errno.EBADF

    def __init__(
        self,
        path: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message="closed directory",
            path=path,
            error_code=4010,
            context=context
        )

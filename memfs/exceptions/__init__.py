"""
memfs Exception Hierarchy

Architecture:
    ConfigException
    ├── ConfigLoadError
    └── ConfigValidationError
    FileSystemException
    ├── FileNotFoundError        (builtins.FileNotFoundError, ENOENT)
    ├── FileExistsError          (builtins.FileExistsError, EEXIST)
    ├── PermissionDeniedError    (builtins.PermissionError, EPERM)
    ├── DirectoryNotEmptyError   (OSError, ENOTEMPTY)
    ├── DirectoryBusyError       (OSError, EBUSY)
    ├── SymlinkLoopError         (OSError, ELOOP)
    ├── InvalidMoveError         (OSError, EINVAL)
    ├── NotAFileError            (builtins.IsADirectoryError, EISDIR)
    ├── NotADirectoryError       (builtins.NotADirectoryError, ENOTDIR)
    └── ClosedHandleError        (OSError, EBADF)
"""

from .config_exceptions import (
    ConfigException,
    ConfigLoadError,
    ConfigValidationError,
)

from .fs_exceptions import (
    FileSystemException,
    FileNotFoundError,
    FileExistsError,
    PermissionDeniedError,
    DirectoryNotEmptyError,
    DirectoryBusyError,
    SymlinkLoopError,
    InvalidMoveError,
    NotAFileError,
    NotADirectoryError,
    ClosedHandleError,
)

__all__ = [
    # Configuration exceptions
    "ConfigException",
    "ConfigLoadError",
    "ConfigValidationError",
    # Filesystem exceptions
    "FileSystemException",
    "FileNotFoundError",
    "FileExistsError",
    "PermissionDeniedError",
    "DirectoryNotEmptyError",
    "DirectoryBusyError",
    "SymlinkLoopError",
    "InvalidMoveError",
    "NotAFileError",
    "NotADirectoryError",
    "ClosedHandleError",
]

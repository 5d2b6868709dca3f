"""File-system operations: libc calls, Foundation file APIs, Swift wrappers and
path strings.

Path strings are sorted into one bucket each; the first bucket that accepts a
string keeps it, so `/tmp/x` is an absolute path and never also a temp path.
"""

from __future__ import annotations

from ..engine.source import ANY_STRING_SECTIONS
from ..engine.strings import ExtractPolicy
from .base import PassConfig, Phase, strings, symbols

GROUP = "fileops"

# Shared with the network pass.
SWIFT_FILTER = dict(
    exclude=("objc_", "cfstring", "_ptr", "_data"),
    exclude_prefixes=("-[", "+["),
    require=("Swift",),
    require_prefixes=("_$s",),
)

PATH_POLICY = ExtractPolicy(min_length=4, max_length=256, accept_partial=True)

C_SYMBOLS = Phase(
    title="C File APIs",
    recommendation="Trace file descriptors opened by these calls",
    symbols=(
        symbols(
            "file_basic",
            "basic I/O",
            (
                "open", "openat", "creat", "close", "read", "write", "pread", "pwrite", "readv", "writev",
                "unlink", "unlinkat", "rename", "renameat", "remove", "link", "linkat", "fopen", "fclose",
                "fread", "fwrite", "fseek", "ftell", "rewind", "truncate", "ftruncate", "dup", "dup2", "fcntl",
                "lseek", "fsync", "fdatasync", "sync",
            ),
        ),
        symbols(
            "file_symlink",
            "symlinks",
            ("symlink", "symlinkat", "readlink", "readlinkat", "lstat", "lstat64", "fstatat"),
        ),
        symbols(
            "file_stat",
            "stat/access",
            ("stat", "stat64", "fstat", "fstat64", "lstat", "lstat64", "fstatat", "access", "faccessat", "eaccess"),
        ),
        symbols(
            "file_perm",
            "permissions",
            ("chmod", "fchmod", "fchmodat", "chown", "fchown", "lchown", "fchownat", "umask", "chflags", "fchflags"),
        ),
        symbols(
            "file_dir",
            "directories",
            (
                "mkdir", "mkdirat", "rmdir", "opendir", "readdir", "readdir_r", "closedir", "rewinddir",
                "chdir", "fchdir", "getcwd", "getwd",
            ),
        ),
        symbols(
            "file_temp",
            "temporary files",
            ("mktemp", "mkstemp", "mkostemp", "mkstemps", "mkdtemp", "tmpnam", "tempnam", "tmpfile"),
        ),
    ),
)

OBJC_SYMBOLS = Phase(
    title="Foundation File APIs",
    recommendation="Check Foundation file calls for unsafe paths",
    symbols=(
        symbols(
            "objc_filemanager",
            "NSFileManager",
            (
                "createFileAtPath:", "createDirectoryAtPath:", "removeItemAtPath:", "removeItemAtURL:",
                "copyItemAtPath:", "copyItemAtURL:", "moveItemAtPath:", "moveItemAtURL:", "fileExistsAtPath:",
                "isReadableFileAtPath:", "isWritableFileAtPath:", "attributesOfItemAtPath:",
                "setAttributes:ofItemAtPath:", "contentsOfDirectoryAtPath:", "subpathsOfDirectoryAtPath:",
                "createSymbolicLinkAtPath:", "linkItemAtPath:", "destinationOfSymbolicLinkAtPath:",
                "NSFileManager",
            ),
        ),
        symbols(
            "objc_filehandle",
            "NSFileHandle",
            (
                "fileHandleForReadingAtPath:", "fileHandleForWritingAtPath:", "fileHandleForUpdatingAtPath:",
                "readDataToEndOfFile", "readDataOfLength:", "writeData:", "seekToFileOffset:", "closeFile",
                "synchronizeFile", "NSFileHandle",
            ),
        ),
        symbols(
            "objc_nsdata",
            "NSData file I/O",
            ("dataWithContentsOfFile:", "dataWithContentsOfURL:", "writeToFile:", "writeToURL:"),
            require=("File",),
        ),
        symbols(
            "objc_nsstring",
            "NSString file I/O",
            ("stringWithContentsOfFile:", "stringWithContentsOfURL:", "writeToFile:", "writeToURL:"),
            require=("NSString",),
        ),
        symbols(
            "objc_nsbundle",
            "NSBundle",
            ("pathForResource:", "URLForResource:", "bundlePath", "resourcePath", "NSBundle"),
        ),
    ),
)

SWIFT_SYMBOLS = Phase(
    title="Swift File APIs",
    symbols=(
        symbols(
            "swift_fileops",
            "Swift file APIs",
            ("FileManager", "FileHandle", "URL.contentsOf", "Data.write", "String.write", "Bundle.url"),
            **SWIFT_FILTER,
        ),
    ),
)

PATHS = Phase(
    title="Path Strings",
    recommendation="Check hardcoded paths for TOCTOU and permission issues",
    strings=(
        strings(
            "path_absolute",
            "absolute",
            ("/",),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="prefix",
            exclusive_group="paths",
            policy=PATH_POLICY,
        ),
        strings(
            "path_relative",
            "relative",
            ("../", "./"),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="prefix",
            exclusive_group="paths",
            policy=PATH_POLICY,
        ),
        strings(
            "path_home",
            "home",
            ("~/",),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="prefix",
            exclusive_group="paths",
            policy=PATH_POLICY,
        ),
        strings(
            "path_tmp",
            "temporary",
            ("/tmp", "/var/tmp", "NSTemporaryDirectory"),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            exclusive_group="paths",
            policy=PATH_POLICY,
        ),
        strings(
            "path_extension",
            "file extensions",
            (r"\.[^./]{1,9}$",),
            cap=None,
            sections=ANY_STRING_SECTIONS,
            match="regex",
            exclusive_group="paths",
            policy=PATH_POLICY,
        ),
    ),
)

PASS = PassConfig(
    name=GROUP,
    title="File Operation Analysis",
    description="libc and Foundation file APIs, Swift file wrappers and hardcoded paths.",
    phases=(C_SYMBOLS, OBJC_SYMBOLS, SWIFT_SYMBOLS, PATHS),
)

"""Reading and atomically rewriting Razor documents on disk."""

from __future__ import annotations

import os
import stat
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from .constants import SUPPORTED_EXTENSIONS
from .decoding import DecodedText, decode_bytes


@dataclass(frozen=True)
class FileSnapshot:
    """Stat fields of a document taken before it was read.

    Attributes:
        inode: Inode number, or None where the platform does not report one.
        device: Device number, or None where the platform does not report one.
        size: Size in bytes.
        mtime_ns: Modification time in nanoseconds.
        atime_ns: Access time in nanoseconds, restored after a rewrite.
        mode: Permission bits copied onto the rewritten file.
        uid: Owner copied onto the rewritten file when privileges allow.
        gid: Group copied onto the rewritten file when privileges allow.
    """

    inode: int | None
    device: int | None
    size: int
    mtime_ns: int
    atime_ns: int
    mode: int
    uid: int | None = None
    gid: int | None = None

    @classmethod
    def capture(cls, path: Path) -> FileSnapshot:
        """Stat `path` without following symlinks.

        Raises:
            IOError: If the path is inaccessible, a symlink, or not a regular file.
        """
        try:
            stat_result = os.stat(path, follow_symlinks=False)
        except OSError as error:
            raise IOError(f"Error accessing {path}: {error}") from error

        if stat.S_ISLNK(stat_result.st_mode):
            raise IOError(f"Symlinks are not supported: {path}.")
        if not stat.S_ISREG(stat_result.st_mode):
            raise IOError(f"{path} is not a regular file.")

        return cls(
            inode=getattr(stat_result, "st_ino", None),
            device=getattr(stat_result, "st_dev", None),
            size=stat_result.st_size,
            mtime_ns=stat_result.st_mtime_ns,
            atime_ns=stat_result.st_atime_ns,
            mode=stat.S_IMODE(stat_result.st_mode),
            uid=getattr(stat_result, "st_uid", None),
            gid=getattr(stat_result, "st_gid", None),
        )

    @property
    def fingerprint(self) -> tuple[int | None, int | None, int, int]:
        return (self.inode, self.device, self.size, self.mtime_ns)


@dataclass(frozen=True)
class LoadedDocument:
    """A document read from disk, ready to be formatted and written back.

    Attributes:
        path: Absolute path of the document.
        decoded: Decoded text and the encoding it was read with.
        snapshot: Stat fields captured before reading.
    """

    path: Path
    decoded: DecodedText
    snapshot: FileSnapshot

    @property
    def text(self) -> str:
        return self.decoded.text


def _traverses_symlink(path: Path) -> bool:
    for candidate in (path, *path.parents):
        try:
            if candidate.is_symlink():
                return True
        except OSError:
            continue
    return False


def resolve_document_path(raw_path: str, base_dir: Path) -> Path:
    """Resolve a user-supplied document path and check that it may be formatted.

    The path must exist, must not pass through a symlink, must stay under
    `base_dir`, and must carry a Razor or HTML extension.

    Args:
        raw_path: Absolute or relative path as typed by the user.
        base_dir: Resolved working directory the document must live under.

    Returns:
        Path: Absolute path to the document.

    Raises:
        ValueError: If any of the checks above fails.

    Examples:
        resolve_document_path("Views/Home/Index.cshtml", Path.cwd().resolve())
    """
    path = Path(raw_path).expanduser()
    if _traverses_symlink(path):
        raise ValueError(f"Symlinks are not supported for security reasons: {path}")

    try:
        resolved = path.resolve(strict=True)
    except FileNotFoundError as error:
        raise ValueError(f"{path} does not exist.") from error
    except OSError as error:
        raise ValueError(f"Error resolving {path}: {error}") from error

    if not resolved.is_file():
        raise ValueError(f"{resolved} is not a regular file.")
    if not resolved.is_relative_to(base_dir):
        raise ValueError(f"{resolved} is outside of the working directory {base_dir}.")
    if resolved.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise ValueError(
            f"{resolved} is not a Razor or HTML file.\n"
            f"Supported extensions are: {', '.join(SUPPORTED_EXTENSIONS)}"
        )

    return resolved


def _ensure_unchanged(snapshot: FileSnapshot, path: Path, action: str) -> None:
    current = FileSnapshot.capture(path)
    if current.fingerprint != snapshot.fingerprint:
        raise IOError(f"{path} changed during processing; refusing to {action}.")


def read_document(path: Path, max_size: int) -> LoadedDocument:
    """Snapshot, size-check, read and decode a document.

    Args:
        path: Path returned by `resolve_document_path`.
        max_size: Largest accepted file size in bytes.

    Returns:
        LoadedDocument: Decoded text together with the pre-read snapshot.

    Raises:
        IOError: If the file is not a regular file, is larger than `max_size`,
            cannot be read, or changes while it is being read.

    Examples:
        document = read_document(Path("Index.cshtml"), 1024 * 1024)
        document.text
    """
    snapshot = FileSnapshot.capture(path)
    if snapshot.size > max_size:
        raise IOError(f"{path} exceeds the maximum allowed size of {max_size} bytes.")

    try:
        data = path.read_bytes()
    except OSError as error:
        raise IOError(f"Error accessing {path}: {error}") from error

    _ensure_unchanged(snapshot, path, "continue")
    return LoadedDocument(path=path, decoded=decode_bytes(data), snapshot=snapshot)


def write_document(
    document: LoadedDocument,
    text: str,
    warn: Callable[[str], None] | None = None,
) -> None:
    """Atomically replace a document with reformatted text.

    The text is written with the document's original encoding and verbatim
    line endings to a temporary file beside it, which then replaces the
    document. Permission bits, ownership (when privileges allow) and the
    original access time are carried over.

    Args:
        document: Document previously returned by `read_document`.
        text: Reformatted document text.
        warn: Optional callback for non-fatal warnings.

    Raises:
        IOError: If the file changed since it was read or cannot be replaced.

    Examples:
        write_document(document, result.output, warn=print)
    """
    path = document.path
    snapshot = document.snapshot
    _ensure_unchanged(snapshot, path, "overwrite")

    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding=document.decoded.encoding, newline="") as stream:
            stream.write(text)
            stream.flush()
            os.fsync(stream.fileno())

        os.chmod(temp_path, snapshot.mode)
        if snapshot.uid is not None and snapshot.gid is not None and hasattr(os, "chown"):
            try:
                os.chown(temp_path, snapshot.uid, snapshot.gid)
            except PermissionError:
                if warn is not None:
                    warn(
                        f"Warning: Could not preserve file ownership for {path.name} "
                        "(requires elevated privileges)"
                    )

        os.replace(temp_path, path)
        os.utime(path, ns=(snapshot.atime_ns, path.stat().st_mtime_ns))
    finally:
        temp_path.unlink(missing_ok=True)

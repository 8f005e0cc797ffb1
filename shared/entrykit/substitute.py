"""
Environment-variable substitution in template files.

Every ``${NAME}`` token is replaced by the value of the environment variable
NAME, or by an empty string when it is unset. There is no escaping, no
default-value syntax and no nesting.
"""

import fnmatch
import os
import re
import shutil
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import TextIO

from entrykit_logging import get_logger

from .colors import Color, colored_output
from .errors import SubstitutionError


TOKEN_RE = re.compile(r"\$\{([^}]+)\}")

logger = get_logger("entrykit", component="substitute")


def substitute_text(text: str, env: Mapping[str, str]) -> str:
    """Replace ${NAME} tokens in text with values from env."""
    return TOKEN_RE.sub(lambda match: env.get(match.group(1), ""), text)


def substitute_in_file(path: str | Path, env: Mapping[str, str] | None = None) -> None:
    """Substitute ${NAME} tokens in a file, in place.

    The file is first duplicated beside itself; the duplicate is then
    streamed line by line back into the original, which is truncated rather
    than replaced so that its inode, owner and permission bits survive.
    If the rewrite fails the original content is copied back; if even that
    fails the duplicate is left in place and named in the error.

    Args:
        path: File to rewrite
        env: Variables to substitute (defaults to the process environment)

    Raises:
        SubstitutionError: If the file cannot be read or written
    """
    path = Path(path)
    env = os.environ if env is None else env

    colored_output(Color.CYAN, f"Substituting environment variables in {path}")

    if not path.exists():
        raise SubstitutionError(f"Cannot substitute in {path}: no such file")
    if not path.is_file():
        raise SubstitutionError(f"Cannot substitute in {path}: not a regular file")

    backup = _duplicate(path)
    try:
        dst = open(path, "w", encoding="utf-8", errors="surrogateescape", newline="")
    except OSError as e:
        backup.unlink(missing_ok=True)
        raise SubstitutionError(f"Cannot substitute in {path}: {e.strerror or e}") from e

    try:
        with dst:
            replaced = _rewrite(backup, dst, env)
    except OSError as e:
        reason = e.strerror or str(e)
        try:
            shutil.copyfile(backup, path)
        except OSError:
            logger.error("Could not restore file after failed rewrite", path=str(path), backup=str(backup))
            raise SubstitutionError(
                f"Cannot substitute in {path}: {reason}; original content kept in {backup}"
            ) from e
        backup.unlink(missing_ok=True)
        raise SubstitutionError(f"Cannot substitute in {path}: {reason}; file left unchanged") from e

    backup.unlink(missing_ok=True)
    logger.debug("Substituted tokens", path=str(path), count=replaced)


def _duplicate(path: Path) -> Path:
    """Copy path to a new hidden file in the same directory."""
    tmp_path = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        os.close(fd)
        tmp_path = Path(tmp_name)
        shutil.copyfile(path, tmp_path)
    except OSError as e:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)
        raise SubstitutionError(f"Cannot substitute in {path}: {e.strerror or e}") from e
    return tmp_path


def _rewrite(src_path: Path, dst: TextIO, env: Mapping[str, str]) -> int:
    """Write src_path to dst with tokens substituted; return the token count."""
    replaced = 0
    with open(src_path, encoding="utf-8", errors="surrogateescape", newline="") as src:
        for line in src:
            replaced += len(TOKEN_RE.findall(line))
            dst.write(substitute_text(line, env))
    return replaced


def find_matching_files(root: str | Path, pattern: str = "*") -> list[Path]:
    """List regular files under root whose name matches a glob, ignoring case.

    Symbolic links are neither followed nor returned.
    """
    root = Path(root)
    if not root.is_dir():
        raise SubstitutionError(f"Cannot substitute in {root}: not a directory")

    lowered = pattern.lower()
    matches = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            candidate = Path(dirpath) / filename
            if candidate.is_symlink() or not candidate.is_file():
                continue
            if fnmatch.fnmatchcase(filename.lower(), lowered):
                matches.append(candidate)
    return matches


def substitute_in_tree(
    root: str | Path,
    pattern: str = "*",
    env: Mapping[str, str] | None = None,
) -> list[Path]:
    """Apply substitute_in_file to every matching regular file under root.

    Processing order is unspecified.

    Args:
        root: Directory to search recursively
        pattern: Case-insensitive glob matched against file names
        env: Variables to substitute (defaults to the process environment)

    Returns:
        The files that were rewritten
    """
    files = find_matching_files(root, pattern)
    logger.info("Substituting in tree", path=str(root), pattern=pattern, count=len(files))
    for file_path in files:
        substitute_in_file(file_path, env)
    return files

#!/usr/bin/env python3

"""dockvault utility functions."""

import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Dict

from yaml import SafeLoader, load


def load_yaml_file(path: Path) -> Dict:
    """Loads a YAML file and returns it as a dictionary.

    Args:
        path (Path): Absolute path.

    Raises:
        FileNotFoundError: If the file does not exist.

    Returns:
        Dict: File content. Empty files yield an empty dictionary.
    """
    if not path.exists():
        raise FileNotFoundError(f"Unable to load YAML file '{path}': File does not exist.")

    with open(path.absolute(), "r") as file:
        content = load(file, Loader=SafeLoader)

    return content or {}


def current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def write_text_atomic(path: Path, content: str) -> None:
    """Writes the content to a temporary file next to 'path' and renames it to 'path' afterwards.

    Readers either see the previous file or the complete new one, never a partially written file. The file gets the
    permissions of a regular file created under the current umask.

    Args:
        path (Path): Target file.
        content (str): Text to write.

    Raises:
        OSError: If the file cannot be written or renamed.
    """
    with NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f".{path.name}.", suffix=".tmp", delete=False
    ) as file:
        tmp_path = Path(file.name)
        try:
            os.chmod(file.fileno(), 0o666 & ~current_umask())
            file.write(content)
            file.flush()
            os.fsync(file.fileno())
        except OSError:
            file.close()
            tmp_path.unlink()
            raise

    try:
        os.replace(tmp_path, path)
    except OSError:
        tmp_path.unlink()
        raise

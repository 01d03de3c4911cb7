"""Test utilities for code that resolves ``.env`` files."""

from __future__ import annotations

import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping

from ._parser import dumps


@contextmanager
def env_files(**contents: str | Mapping[str, str]) -> Iterator[dict[str, Path]]:
    """Write temporary ``.env`` files and yield their paths by name.

    Values may be raw file text or a mapping, which is serialized with
    ``dumps``. The files are removed on exit.

    Usage::

        with env_files(base="HOST=db\\n", local={"PORT": "5433"}) as paths:
            env = resolve([paths["base"], paths["local"]])
            assert env["PORT"] == "5433"
    """
    with tempfile.TemporaryDirectory(prefix="envlayers-") as tmp:
        paths: dict[str, Path] = {}
        for name, content in contents.items():
            text = content if isinstance(content, str) else dumps(content)
            path = Path(tmp) / f"{name}.env"
            path.write_text(text, encoding="utf-8")
            paths[name] = path
        yield paths

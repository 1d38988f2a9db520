"""
Copyright 2024, Zep Software, Inc.

Licensed under the Apache License, Version 2.0 (the "License");
you may not use this file except in compliance with the License.
You may obtain a copy of the License at

    http://www.apache.org/licenses/LICENSE-2.0

Unless required by applicable law or agreed to in writing, software
distributed under the License is distributed on an "AS IS" BASIS,
WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
See the License for the specific language governing permissions and
limitations under the License.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_watch_folder(watch_root: str | Path, files: Iterable[str]) -> list[Path]:
    """Create the watch folder and any missing watched file.

    Args:
        watch_root: Directory to create if needed
        files: Watched file names relative to watch_root

    Returns:
        Paths that did not exist and were created
    """
    root = Path(watch_root)
    created: list[Path] = []

    if not root.is_dir():
        root.mkdir(parents=True, exist_ok=True)
        created.append(root)
        logger.info(f'Created watch folder {root}')

    for name in files:
        path = root / name
        if path.exists():
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch()
        created.append(path)
        logger.info(f'Created watched file {path}')

    return created

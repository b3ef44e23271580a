from pathlib import Path

import pytest


@pytest.fixture
def make_files(tmp_path: Path):
    """Create empty (or given) files under tmp_path from relative paths."""
    def _make(*names: str, content: str = "") -> list[Path]:
        paths = []
        for name in names:
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            paths.append(path)
        return paths
    return _make

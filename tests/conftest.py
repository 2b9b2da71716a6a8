from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest
from PIL import Image


def write_text(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def square_obj(tmp_path: Path) -> Path:
    """Two triangles sharing an edge, no normals or texcoords."""
    return write_text(
        tmp_path / "square.obj",
        "# unit square\n"
        "v 0 0 0\n"
        "v 1 0 0\n"
        "v 1 1 0\n"
        "v 0 1 0\n"
        "f 1 2 3\n"
        "f 1 3 4\n",
    )


@pytest.fixture
def textured_obj(tmp_path: Path) -> Path:
    """Square with texcoords and a material pointing at a 2x2 PNG."""
    pixels = np.array(
        [
            [[255, 0, 0], [0, 255, 0]],
            [[0, 0, 255], [255, 255, 255]],
        ],
        dtype=np.uint8,
    )
    Image.fromarray(pixels).save(tmp_path / "tex.png")
    write_text(
        tmp_path / "square.mtl",
        "newmtl skin\n"
        "Kd 1.0 1.0 1.0\n"
        "map_Kd tex.png\n",
    )
    return write_text(
        tmp_path / "textured.obj",
        "mtllib square.mtl\n"
        "v 0 0 0\n"
        "v 1 0 0\n"
        "v 1 1 0\n"
        "v 0 1 0\n"
        "vt 0.0 0.0\n"
        "vt 0.75 0.0\n"
        "vt 0.75 0.75\n"
        "vt 0.0 0.5\n"
        "f 1/1 2/2 3/3\n"
        "f 1/1 3/3 4/4\n",
    )


def ptx_text(cols: int, rows: int, points: list[str]) -> str:
    header = [
        str(cols),
        str(rows),
        "0 0 0",
        "1 0 0",
        "0 1 0",
        "0 0 1",
        "1 0 0 0",
        "0 1 0 0",
        "0 0 1 0",
        "0 0 0 1",
    ]
    return "\n".join(header + points) + "\n"


@pytest.fixture
def make_ptx(tmp_path: Path):
    def _make(cols: int, rows: int, points: list[str], name: str = "scan.ptx") -> Path:
        return write_text(tmp_path / name, ptx_text(cols, rows, points))
    return _make

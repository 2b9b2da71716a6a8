from pathlib import Path

import pytest

from geometry_io import (
    FileAccessError,
    FormatError,
    IOConfig,
    Mesh,
    OutOfRangeReferenceError,
    ValidationError,
    Vertex,
    Face,
)
from geometry_io.core.types import CLEARED_COLOR
from geometry_io.formats.obj import FaceGrammar, parse_corner, read_obj, write_obj


def _write(tmp_path: Path, text: str, name: str = "mesh.obj") -> Path:
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_grammar_selection():
    assert FaceGrammar.select(False, False) is FaceGrammar.PLAIN
    assert FaceGrammar.select(True, False) is FaceGrammar.NORMAL
    assert FaceGrammar.select(False, True) is FaceGrammar.TEXCOORD
    assert FaceGrammar.select(True, True) is FaceGrammar.FULL


def test_parse_corner_variants():
    assert parse_corner("3", FaceGrammar.PLAIN, 1) == (2, -1, -1)
    assert parse_corner("3/1", FaceGrammar.TEXCOORD, 1) == (2, 0, -1)
    assert parse_corner("3//2", FaceGrammar.NORMAL, 1) == (2, -1, 1)
    assert parse_corner("3/1/2", FaceGrammar.FULL, 1) == (2, 0, 1)


def test_parse_corner_full_grammar_partial_fields():
    assert parse_corner("3/1", FaceGrammar.FULL, 1) == (2, 0, -1)
    assert parse_corner("3//2", FaceGrammar.FULL, 1) == (2, -1, 1)
    assert parse_corner("3", FaceGrammar.FULL, 1) == (2, -1, -1)


def test_parse_corner_mismatch_leaves_fields_absent():
    # a/t/n token read with the a//n grammar
    assert parse_corner("3/1/2", FaceGrammar.NORMAL, 1) == (2, -1, -1)


def test_read_plain_faces(square_obj):
    mesh = read_obj(square_obj)

    assert len(mesh.vertices) == 4
    assert mesh.faces == [Face(0, 1, 2), Face(0, 2, 3)]
    assert mesh.normals == []
    assert all(v.color == CLEARED_COLOR for v in mesh.vertices)
    assert not any(v.has_color for v in mesh.vertices)


def test_normal_grammar_kept_for_later_faces(tmp_path):
    path = _write(
        tmp_path,
        "v 0 0 0\nv 1 0 0\nv 0 1 0\n"
        "vn 0 0 1\n"
        "f 1//1 2//1 3//1\n"
        "f 1 2 3\n",
    )
    mesh = read_obj(path)

    assert mesh.faces[0] == Face(0, 1, 2, n1=0, n2=1, n3=2)
    # Still parsed with the a//n grammar: normal references stay absent
    assert mesh.faces[1] == Face(0, 1, 2)


def test_last_face_wins_for_shared_vertex_normals(tmp_path):
    path = _write(
        tmp_path,
        "v 0 0 0\nv 1 0 0\nv 0 1 0\n"
        "vn 1 0 0\nvn 0 1 0\nvn 0 0 1\n"
        "vn -1 0 0\nvn 0 -1 0\nvn 0 0 -1\n"
        "f 1//1 2//2 3//3\n"
        "f 1//4 2//5 3//6\n",
    )
    mesh = read_obj(path)

    assert len(mesh.normals) == len(mesh.vertices) == 3
    assert mesh.normals == [(-1.0, 0.0, 0.0), (0.0, -1.0, 0.0), (0.0, 0.0, -1.0)]
    assert [v.normal for v in mesh.vertices] == mesh.normals


def test_normals_assigned_by_position_without_faces(tmp_path):
    path = _write(tmp_path, "v 0 0 0\nv 1 0 0\nvn 0 0 1\nvn 0 1 0\n")
    mesh = read_obj(path)

    assert mesh.vertices[0].normal == (0.0, 0.0, 1.0)
    assert mesh.vertices[1].normal == (0.0, 1.0, 0.0)


def test_full_grammar(tmp_path):
    path = _write(
        tmp_path,
        "v 0 0 0\nv 1 0 0\nv 0 1 0\n"
        "vt 0 0\nvt 1 0\nvt 0 1\n"
        "vn 0 0 1\n"
        "f 1/1/1 2/2/1 3/3/1\n",
    )
    mesh = read_obj(path)
    # Normal indices now address the per-vertex normals
    assert mesh.faces == [Face(0, 1, 2, n1=0, n2=1, n3=2, t1=0, t2=1, t3=2)]
    assert mesh.tex_coords == [(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)]


def test_mtllib_resolved_against_obj_directory(tmp_path):
    path = _write(tmp_path, "mtllib my mat.mtl\nv 0 0 0\n")
    mesh = read_obj(path, config=IOConfig(load_textures=False))
    assert mesh.materials == [str(tmp_path / "my mat.mtl")]


def test_unknown_records_ignored(tmp_path):
    path = _write(tmp_path, "o thing\ng group\ns off\nusemtl skin\nv 0 0 0\n")
    mesh = read_obj(path)
    assert len(mesh.vertices) == 1


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileAccessError):
        read_obj(tmp_path / "missing.obj")


def test_no_vertices_is_an_error(tmp_path):
    path = _write(tmp_path, "# nothing here\n")
    with pytest.raises(FormatError):
        read_obj(path)


def test_face_vertex_out_of_range(tmp_path):
    path = _write(tmp_path, "v 0 0 0\nv 1 0 0\nf 1 2 3\n")
    with pytest.raises(OutOfRangeReferenceError) as exc:
        read_obj(path)
    assert exc.value.sequence == "vertex"
    assert exc.value.line == 3


def test_face_normal_out_of_range(tmp_path):
    path = _write(tmp_path, "v 0 0 0\nv 1 0 0\nv 0 1 0\nvn 0 0 1\nf 1//1 2//1 3//2\n")
    with pytest.raises(OutOfRangeReferenceError) as exc:
        read_obj(path)
    assert exc.value.sequence == "normal"


def test_bad_number_reports_line(tmp_path):
    path = _write(tmp_path, "v 0 0 0\nv 1 zero 0\n")
    with pytest.raises(FormatError) as exc:
        read_obj(path)
    assert exc.value.line == 2


def test_read_fills_given_mesh(square_obj):
    mesh = Mesh()
    mesh.materials.append("stale.mtl")
    result = read_obj(square_obj, mesh=mesh)
    assert result is mesh
    assert mesh.materials == []
    assert len(mesh.vertices) == 4


def test_write_plain(tmp_path):
    mesh = Mesh(
        vertices=[Vertex((0.0, 0.0, 0.0)), Vertex((1.5, 0.0, 0.0)), Vertex((0.0, 2.0, 0.0))],
        faces=[Face(0, 1, 2)],
    )
    # Default color is NO_COLOR (-1): red is non-zero, so it is written
    mesh.vertices[0].color = (0.0, 0.0, 0.0)
    mesh.vertices[2].color = (10.0, 20.0, 30.0)
    path = write_obj(tmp_path / "out.obj", mesh)

    assert path.read_text().splitlines() == [
        "v 0 0 0",
        "v 1.5 0 0 -1 -1 -1",
        "v 0 2 0 10 20 30",
        "f 1 2 3",
    ]


def test_write_zero_red_drops_color(tmp_path):
    mesh = Mesh(vertices=[Vertex((1.0, 1.0, 1.0), color=(0.0, 128.0, 64.0))])
    mesh.faces.append(Face(0, 0, 0))
    lines = write_obj(tmp_path / "out.obj", mesh).read_text().splitlines()
    assert lines[0] == "v 1 1 1"


def test_write_materials_texcoords(tmp_path):
    mesh = Mesh(
        vertices=[Vertex((0.0, 0.0, 0.0), color=(0.0, 0.0, 0.0))] * 3,
        tex_coords=[(0.0, 0.0), (1.0, 0.0), (0.0, 1.0)],
        faces=[Face(0, 1, 2, t1=0, t2=1, t3=2)],
        materials=["mat.mtl"],
    )
    lines = write_obj(tmp_path / "out.obj", mesh).read_text().splitlines()
    assert lines[0] == "mtllib mat.mtl"
    assert "vt 1 0" in lines
    assert lines[-1] == "f 1/1 2/2 3/3"


def test_round_trip_keeps_per_vertex_normals(tmp_path):
    src = _write(
        tmp_path,
        "v 0 0 0\nv 1 0 0\nv 0 1 0\nv 1 1 0\n"
        "vn 0 0 1\nvn 0 0 -1\n"
        "f 1//1 2//1 3//1\n"
        "f 2//2 4//2 3//2\n",
    )
    mesh = read_obj(src)
    out = write_obj(tmp_path / "copy.obj", mesh)

    lines = out.read_text().splitlines()
    assert sum(1 for line in lines if line.startswith("vn ")) == 4
    assert "f 1//1 2//2 3//3" in lines
    assert "f 2//2 4//4 3//3" in lines

    again = read_obj(out)
    assert [v.normal for v in again.vertices] == [v.normal for v in mesh.vertices]
    assert again.faces == mesh.faces


def test_write_keeps_face_normal_indices(tmp_path):
    # Equal normal and vertex counts, but every corner points at normal 3
    mesh = Mesh(
        vertices=[Vertex((0.0, 0.0, 0.0)), Vertex((1.0, 0.0, 0.0)), Vertex((0.0, 1.0, 0.0))],
        normals=[(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)],
        faces=[Face(0, 1, 2, n1=2, n2=2, n3=2)],
    )
    out = write_obj(tmp_path / "out.obj", mesh)

    assert out.read_text().splitlines()[-1] == "f 1//3 2//3 3//3"
    again = read_obj(out)
    assert again.vertices[0].normal == (0.0, 0.0, 1.0)
    assert all(v.normal == (0.0, 0.0, 1.0) for v in again.vertices)


def test_write_without_expansion(tmp_path):
    mesh = Mesh(
        vertices=[Vertex((0.0, 0.0, 0.0), color=(0.0, 0.0, 0.0)) for _ in range(3)],
        normals=[(0.0, 0.0, 1.0)] * 3,
        faces=[Face(0, 1, 2, n1=0, n2=1, n3=2)],
    )
    out = write_obj(tmp_path / "out.obj", mesh, IOConfig(expand_normals=False))
    lines = out.read_text().splitlines()
    assert sum(1 for line in lines if line.startswith("vn ")) == 3
    assert lines[-1] == "f 1//1 2//2 3//3"


def test_write_with_expansion(tmp_path):
    mesh = Mesh(
        vertices=[Vertex((float(i), 0.0, 0.0), color=(0.0, 0.0, 0.0)) for i in range(4)],
        normals=[(0.0, 0.0, 1.0), (0.0, 1.0, 0.0), (1.0, 0.0, 0.0), (0.0, 0.0, -1.0)],
        faces=[Face(0, 1, 2, n1=0, n2=1, n3=2), Face(1, 3, 2, n1=1, n2=3, n3=2)],
    )
    out = write_obj(tmp_path / "out.obj", mesh, IOConfig(expand_normals=True))

    lines = out.read_text().splitlines()
    assert [line for line in lines if line.startswith("vn ")] == [
        "vn 0 0 1", "vn 0 1 0", "vn 1 0 0",
        "vn 0 1 0", "vn 0 0 -1", "vn 1 0 0",
    ]
    assert lines[-2:] == ["f 1//1 2//2 3//3", "f 2//4 4//5 3//6"]


def test_expansion_needs_one_normal_per_vertex(tmp_path):
    mesh = Mesh(
        vertices=[Vertex((0.0, 0.0, 0.0)) for _ in range(3)],
        normals=[(0.0, 0.0, 1.0)],
        faces=[Face(0, 1, 2, n1=0, n2=0, n3=0)],
    )
    with pytest.raises(ValidationError):
        write_obj(tmp_path / "out.obj", mesh, IOConfig(expand_normals=True))


def test_write_leaves_absent_corner_fields_empty(tmp_path):
    mesh = Mesh(
        vertices=[Vertex((0.0, 0.0, 0.0), color=(0.0, 0.0, 0.0)) for _ in range(3)],
        normals=[(0.0, 0.0, 1.0)],
        tex_coords=[(0.0, 0.0), (1.0, 0.0)],
        faces=[
            Face(0, 1, 2, n1=0, n2=0, n3=0, t1=0, t2=1, t3=1),
            Face(0, 1, 2, t1=0, t2=1),
            Face(0, 1, 2, n1=0),
        ],
    )
    out = write_obj(tmp_path / "out.obj", mesh)
    lines = out.read_text().splitlines()

    assert lines[-3:] == [
        "f 1/1/1 2/2/1 3/2/1",
        "f 1/1 2/2 3",
        "f 1//1 2 3",
    ]
    assert not any(" 0/" in line or "/0" in line for line in lines)

    again = read_obj(out)
    assert again.faces[1] == Face(0, 1, 2, t1=0, t2=1)
    assert again.faces[2] == Face(0, 1, 2, n1=0)


def test_write_float_format(tmp_path):
    mesh = Mesh(vertices=[Vertex((0.123456789, 0.0, 0.0), color=(0.0, 0.0, 0.0))])
    mesh.faces.append(Face(0, 0, 0))
    out = write_obj(tmp_path / "out.obj", mesh, IOConfig(float_format=".3f"))
    assert out.read_text().splitlines()[0] == "v 0.123 0.000 0.000"


def test_write_into_missing_directory(tmp_path):
    mesh = Mesh(vertices=[Vertex((0.0, 0.0, 0.0))], faces=[Face(0, 0, 0)])
    with pytest.raises(FileAccessError):
        write_obj(tmp_path / "nope" / "out.obj", mesh)

"""
Export functionality for flute_bore meshes.

Provides OBJ (text, for any 3D tool), STL (3D printing) and DXF (a flat
drilling template for the tone holes) export formats.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING

import numpy as np

from flute_bore.acoustics.holes import clamp_hole_radius

if TYPE_CHECKING:
    from flute_bore.geometry.bore import Hole, HoleSet, TubeParameters
    from flute_bore.manufacturing.mesh import TubeMesh

OBJ_HEADER = "# flute_bore OBJ export"


def to_obj(mesh: TubeMesh, name: str = "FluteProject") -> str:
    """
    Serialise a mesh as Wavefront OBJ text.

    The output holds one object with a ``g`` line per non-empty face group,
    vertex coordinates in cm with six decimals and 1-based triangle indices.
    Identical meshes always produce byte-identical text.

    Args:
        mesh: The TubeMesh to serialise
        name: Object name written on the ``o`` line

    Returns:
        OBJ document ending with a newline
    """
    lines = [OBJ_HEADER, f"o {name}"]
    lines.extend(f"v {x:.6f} {y:.6f} {z:.6f}" for x, y, z in mesh.vertices.tolist())

    for group, start, stop in mesh.groups:
        if stop == start:
            continue
        lines.append(f"g {group}")
        lines.extend(f"f {a} {b} {c}" for a, b, c in (mesh.faces[start:stop] + 1).tolist())

    return "\n".join(lines) + "\n"


def export_obj(mesh: TubeMesh, path: Path, name: str = "FluteProject") -> Path:
    """
    Write a mesh to an OBJ file.

    Args:
        mesh: The TubeMesh to export
        path: Path to output OBJ file
        name: Object name

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="\n") as f:
        f.write(to_obj(mesh, name=name))
    return path


def export_stl(mesh: TubeMesh, path: Path) -> Path:
    """
    Export a mesh as binary STL for 3D printing.

    Args:
        mesh: The TubeMesh to export (units: cm)
        path: Path to output STL file

    Returns:
        The written path
    """
    try:
        from stl import mesh as stl_mesh
    except ImportError as err:
        raise ImportError(
            "numpy-stl is required for STL export. "
            "Install with: pip install flute-bore[cad]"
        ) from err

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    mesh_data = stl_mesh.Mesh(np.zeros(mesh.num_faces, dtype=stl_mesh.Mesh.dtype))
    mesh_data.vectors[:] = mesh.vertices[mesh.faces]
    mesh_data.update_normals()
    mesh_data.save(str(path))
    return path


def export_dxf_template(
    tube: TubeParameters,
    holes: HoleSet | Iterable[Hole],
    path: Path,
) -> Path:
    """
    Export a top-view drilling template as DXF.

    Contains the tube silhouette on layer "outline", the bore centre line on
    layer "centerline" and one circle per tone hole on layer "drill".

    Args:
        tube: Tube dimensions
        holes: Hole collection (any order)
        path: Path to output DXF file

    Returns:
        The written path
    """
    try:
        import ezdxf
    except ImportError as err:
        raise ImportError(
            "ezdxf is required for DXF export. "
            "Install with: pip install flute-bore[cad]"
        ) from err

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    doc = ezdxf.new("R2010")  # AutoCAD 2010 format for compatibility
    msp = doc.modelspace()
    doc.layers.add("outline", color=7)
    doc.layers.add("centerline", color=3)
    doc.layers.add("drill", color=1)

    r_out = tube.outer_radius
    outline = [(0.0, -r_out), (tube.length, -r_out), (tube.length, r_out), (0.0, r_out)]
    msp.add_lwpolyline(outline, dxfattribs={"layer": "outline"}, close=True)
    msp.add_line((0.0, 0.0), (tube.length, 0.0), dxfattribs={"layer": "centerline"})

    for hole in holes:
        radius = clamp_hole_radius(hole.radius, tube.bore_radius)
        msp.add_circle((float(hole.position), 0.0), radius, dxfattribs={"layer": "drill"})

    doc.saveas(path)
    return path

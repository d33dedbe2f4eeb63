"""Manufacturing tools: wall mesh generation and CAD export."""

# Mesh generation
from flute_bore.manufacturing.mesh import (
    TubeMesh,
    generate_tube_mesh,
)

# CAD export (OBJ, STL, DXF)
from flute_bore.manufacturing.export import (
    export_dxf_template,
    export_obj,
    export_stl,
    to_obj,
)

__all__ = [
    # Mesh
    "TubeMesh",
    "generate_tube_mesh",
    # Export
    "to_obj",
    "export_obj",
    "export_stl",
    "export_dxf_template",
]

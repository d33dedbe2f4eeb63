"""Script execution sandbox for bore design scripts.

This module provides execution of user-provided design scripts with
restricted imports and a controlled namespace.
"""

import builtins
import sys
from pathlib import Path
from typing import Any

# Allowed module prefixes (first component of import path)
ALLOWED_MODULES = frozenset({
    "flute_bore",
    "numpy",
    "scipy",
    "math",
})


class RestrictedImportError(ImportError):
    """Raised when a disallowed module import is attempted."""

    pass


def execute_design_script(
    script_path: Path, script_content: str, verbose: bool = False
) -> dict[str, Any]:
    """Execute a design script in a controlled namespace.

    Only flute_bore and a few numeric modules may be imported. Everything the
    script defines is returned so the caller can pick up the ``engine``
    variable and optional settings such as ``guess``.

    Args:
        script_path: Path to the script file (for __file__ and relative imports)
        script_content: Content of the script to execute
        verbose: If True, print debug information

    Returns:
        Namespace dict containing all variables defined by the script

    Raises:
        RestrictedImportError: If script attempts to import disallowed module
        SyntaxError: If script has syntax errors
        Exception: Any exception raised by the script during execution
    """
    original_import = builtins.__import__

    def restricted_import(name, *args, **kwargs):
        """Restricted import that only allows specific modules."""
        top_level = name.split(".")[0]

        if top_level not in ALLOWED_MODULES:
            raise RestrictedImportError(
                f"Import of '{name}' is not allowed in design scripts. "
                f"Allowed modules: {', '.join(sorted(ALLOWED_MODULES))}"
            )

        return original_import(name, *args, **kwargs)

    # The script gets its own builtins so the patched __import__ never leaks
    script_builtins = dict(vars(builtins))
    script_builtins["__import__"] = restricted_import

    namespace: dict[str, Any] = {
        "__name__": "__main__",
        "__file__": str(script_path),
        "__builtins__": script_builtins,
    }

    script_dir = str(script_path.parent)
    sys.path.insert(0, script_dir)
    try:
        if verbose:
            print(f"Executing script: {script_path}")
            print(f"Script directory added to path: {script_dir}")

        code = compile(script_content, str(script_path), "exec")
        exec(code, namespace)

        if verbose:
            defined_vars = [k for k in namespace.keys() if not k.startswith("__")]
            print(f"Script defined variables: {', '.join(defined_vars)}")

    finally:
        if script_dir in sys.path:
            sys.path.remove(script_dir)

    return namespace


def validate_engine_object(namespace: dict[str, Any]) -> Any:
    """Validate that namespace contains a usable engine object.

    Args:
        namespace: Namespace dict from script execution

    Returns:
        The engine object

    Raises:
        ValueError: If no engine found or engine is invalid
    """
    engine = namespace.get("engine")

    if engine is None:
        raise ValueError(
            "Script must define an 'engine' variable. "
            "Example: engine = FluteEngine(length=60.0, bore_radius=0.95, wall_thickness=0.4)"
        )

    required_methods = [
        "calculate_pitch",
        "resonance",
        "impedance_spectrum",
        "export_obj",
        "export_stl",
        "export_dxf_template",
    ]
    missing_methods = [m for m in required_methods if not hasattr(engine, m)]

    if missing_methods:
        raise ValueError(
            f"'engine' object is missing required methods: {', '.join(missing_methods)}. "
            f"Make sure it's a FluteEngine instance."
        )

    return engine

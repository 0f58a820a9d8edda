"""OpenSCAD source emission for contribution matrices."""

from collections.abc import Sequence
from pathlib import Path


def _scad_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def generate_data_source(
    user_handle: str,
    span: str,
    matrix: Sequence[Sequence[int]],
    static_code: str | None = None,
) -> str:
    """Render the matrix and labels as an OpenSCAD data file.

    The output defines `rawActivity`, `ghHandleTxt` and `spanTxt` so a model
    can `include <activity-data.scad>`. If `static_code` is given it is
    appended after the data, producing a self-contained model.
    """

    lines = [
        "// To be used in other OpenScad source file with",
        "// include <activity-data.scad>",
        "rawActivity = [",
    ]
    for row in matrix:
        lines.append("    [" + ", ".join(str(value) for value in row) + "],")
    lines.append("];")
    lines.append("")
    lines.append("")
    lines.append(f"ghHandleTxt = {_scad_string(user_handle)};")
    lines.append(f"spanTxt = {_scad_string(span)};")

    source = "\n".join(lines) + "\n"
    if static_code:
        source += "\n" + static_code
        if not static_code.endswith("\n"):
            source += "\n"
    return source


def load_static_code(path: Path) -> str:
    """Read an OpenSCAD model that consumes the generated data."""

    return Path(path).read_text(encoding="utf-8")

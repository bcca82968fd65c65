"""Export the OpenAPI document and request/response JSON schemas."""

import json
from pathlib import Path

from backend.app.main import create_app
from backend.app.models import AuditLogPage, CondominiumRead, UserCreate, UserRead


def main(output_dir: Path = Path("docs/schemas")) -> list[Path]:
    """Export schemas to ``output_dir``; returns the written paths."""
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []

    openapi_path = output_dir / "openapi.json"
    with open(openapi_path, "w") as f:
        json.dump(create_app().openapi(), f, indent=2)
    written.append(openapi_path)

    for model in (UserCreate, UserRead, CondominiumRead, AuditLogPage):
        path = output_dir / f"{model.__name__}.schema.json"
        with open(path, "w") as f:
            json.dump(model.model_json_schema(), f, indent=2)
        written.append(path)

    for path in written:
        print(f"Exported {path}")
    return written


if __name__ == "__main__":
    main()

"""
Load a JSON build manifest describing modules and their declared dependencies.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List

from .errors import ManifestError
from .models import DeclaredDependency, DependencyCategory, DependencyCoordinate, ModuleDescriptor


def _parse_dependency(entry: Dict, where: str) -> DeclaredDependency:
    if not isinstance(entry, dict):
        raise ManifestError(f"{where}: expected an object, got {type(entry).__name__}")
    try:
        if "coordinate" in entry:
            coordinate = DependencyCoordinate.parse(entry["coordinate"])
        else:
            coordinate = DependencyCoordinate(entry["namespace"], entry["name"])
        version = str(entry["version"])
    except (KeyError, ValueError) as e:
        raise ManifestError(f"{where}: {e}") from e

    latest = entry.get("latest")
    return DeclaredDependency(
        coordinate=coordinate,
        version=version,
        latest=str(latest) if latest is not None else None,
        available=tuple(str(v) for v in entry.get("available", [])),
        type=entry.get("type", "jar"),
    )


def parse_build_manifest(data: Dict) -> List[ModuleDescriptor]:
    modules_data = data.get("modules") if isinstance(data, dict) else None
    if not isinstance(modules_data, list):
        raise ManifestError("Manifest must contain a 'modules' list")

    modules = []
    for index, module_data in enumerate(modules_data):
        if not isinstance(module_data, dict) or "name" not in module_data:
            raise ManifestError(f"modules[{index}]: a module needs a 'name'")
        name = str(module_data["name"])
        dependencies = {}
        for category in DependencyCategory:
            entries = module_data.get(category.key, [])
            dependencies[category] = [
                _parse_dependency(entry, f"{name}.{category.key}[{i}]")
                for i, entry in enumerate(entries)
            ]
        modules.append(
            ModuleDescriptor(
                name=name,
                version=str(module_data.get("version", "")),
                dependencies=dependencies,
            )
        )
    return modules


def load_build_manifest(path: Path) -> List[ModuleDescriptor]:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ManifestError(f"Cannot read manifest {path}: {e}") from e
    return parse_build_manifest(data)

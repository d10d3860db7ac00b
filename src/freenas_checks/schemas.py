from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from jsonschema import Draft202012Validator

VOLUME_LIST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Volume list",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["vol_name", "status", "used_pct"],
        "properties": {
            "vol_name": {"type": "string"},
            "status": {"type": "string"},
            "used_pct": {"type": "string", "pattern": r"^\s*[0-9]+(\.[0-9]+)?\s*%?\s*$"},
        },
    },
}

SERVICE_LIST_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "Service list",
    "type": "array",
    "items": {
        "type": "object",
        "required": ["srv_service", "srv_enable"],
        "properties": {
            "srv_service": {"type": "string"},
            "srv_enable": {"type": "boolean"},
        },
    },
}


def _json_path(err: object) -> str:
    path = getattr(err, "absolute_path", None)
    if not path:
        return "$"
    out = "$"
    for part in path:
        if isinstance(part, int):
            out += f"[{part}]"
        else:
            out += f".{part}"
    return out


@dataclass(frozen=True)
class SchemaRegistry:
    store: dict[str, dict[str, Any]]

    @classmethod
    def default(cls) -> "SchemaRegistry":
        return cls(store={"volumes": VOLUME_LIST_SCHEMA, "services": SERVICE_LIST_SCHEMA})

    def load_schema(self, name: str) -> dict[str, Any]:
        schema = self.store.get(name)
        if schema is None:
            raise KeyError(f"Schema not found: {name}")
        return schema

    def validate(self, instance: Any, *, schema_name: str) -> list[str]:
        validator = Draft202012Validator(self.load_schema(schema_name))
        errors = sorted(validator.iter_errors(instance), key=lambda e: list(getattr(e, "absolute_path", [])))
        return [f"{_json_path(e)}: {e.message}" for e in errors]


registry = SchemaRegistry.default()

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from jsonschema import Draft202012Validator

from runcards.engine.rules import RulePool
from runcards.engine.types import RULE_KEYS, RuleDefinition, RuleKey


class ContentError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise ContentError(f"Missing content file: {path}") from e
    except json.JSONDecodeError as e:
        raise ContentError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise ContentError("\n".join(lines))


def _require_str(obj: Mapping[str, object], key: str) -> str:
    v = obj.get(key)
    if not isinstance(v, str):
        raise ContentError(f"Expected string for {key}")
    return v


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ContentError(f"Expected int for {key}")
    return v


def _require_bool(obj: Mapping[str, object], key: str) -> bool:
    v = obj.get(key)
    if not isinstance(v, bool):
        raise ContentError(f"Expected bool for {key}")
    return v


def _parse_rule(raw: Mapping[str, object]) -> RuleDefinition:
    key = _require_str(raw, "key")
    if key not in RULE_KEYS:
        raise ContentError(f"Unknown rule key: {key}")
    tick_on_end = _require_bool(raw, "tick_on_end")
    tick_on_play = _require_bool(raw, "tick_on_play")
    if tick_on_end == tick_on_play:
        raise ContentError(f"Rule {key} must tick on exactly one of end/play")
    return RuleDefinition(
        key=key,  # type: ignore[arg-type]
        text=_require_str(raw, "text"),
        value=_require_int(raw, "value"),
        tick_on_end=tick_on_end,
        tick_on_play=tick_on_play,
    )


@dataclass(frozen=True)
class TutorialScript:
    pages: tuple[str, ...]


class ContentService:
    def __init__(self, data_dir: Path, schema_dir: Path) -> None:
        self._data_dir = data_dir
        self._schema_dir = schema_dir

    def _load_validated(self, name: str) -> dict[str, object]:
        path = self._data_dir / f"{name}.json"
        schema = _load_json(self._schema_dir / f"{name}.schema.json")
        raw = _load_json(path)
        validate_json(raw, schema, context=str(path))
        if not isinstance(raw, dict):
            raise ContentError(f"{name}.json must be an object")
        return raw

    def load_rules(self) -> RulePool:
        raw = self._load_validated("rules")
        raw_rules = raw.get("rules")
        if not isinstance(raw_rules, list):
            raise ContentError("rules.json.rules must be a list")

        rules: dict[RuleKey, RuleDefinition] = {}
        for item in raw_rules:
            if not isinstance(item, dict):
                continue
            rule = _parse_rule(item)
            if rule.key in rules:
                raise ContentError(f"Duplicate rule key: {rule.key}")
            rules[rule.key] = rule

        missing = [k for k in RULE_KEYS if k not in rules]
        if missing:
            raise ContentError(f"Rule pool is missing: {', '.join(missing)}")
        return RulePool(rules=rules)

    def load_tutorial(self) -> TutorialScript:
        raw = self._load_validated("tutorial")
        pages = raw.get("pages")
        if not isinstance(pages, list):
            raise ContentError("tutorial.json.pages must be a list")
        return TutorialScript(pages=tuple(p for p in pages if isinstance(p, str)))

    def validate_all(self) -> None:
        # Load is validation (schema + parse)
        _ = self.load_rules()
        _ = self.load_tutorial()

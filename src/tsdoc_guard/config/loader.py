from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from ..core.schema import schema_errors
from ..errors import ScriptError
from ..exit_codes import ERR_CONFIG
from ..model import DeclarationKind, Rule

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULTS_PATH = CONFIG_DIR / "defaults.yaml"
SCHEMA_PATH = CONFIG_DIR / "guard-config.schema.json"
REPO_CONFIG_NAME = ".tsdoc-guard.yaml"


@dataclass(frozen=True)
class GuardConfig:
    rules: dict[DeclarationKind, Rule]
    enforce_english: bool
    stop_words: tuple[str, ...]
    language_threshold: int
    check_params: bool
    check_returns: bool
    context_margin: int
    nesting_refinement: bool
    fallback_kind: DeclarationKind | None
    extensions: tuple[str, ...]
    exclude: tuple[str, ...]
    remote: str
    base_branches: tuple[str, ...]
    git_timeout: int

    def rule_for(self, kind: DeclarationKind) -> Rule:
        return self.rules.get(kind, Rule(required_tags=()))

    def with_overrides(self, **fields: Any) -> "GuardConfig":
        data = {name: getattr(self, name) for name in self.__dataclass_fields__}
        data.update({k: v for k, v in fields.items() if v is not None})
        return GuardConfig(**data)

    def to_dict(self) -> dict[str, object]:
        return {
            "rules": {
                kind.value: {"required_tags": list(rule.required_tags), "optional_tags": list(rule.optional_tags)}
                for kind, rule in sorted(self.rules.items(), key=lambda kv: kv[0].value)
            },
            "enforce_english": self.enforce_english,
            "stop_words": list(self.stop_words),
            "language_threshold": self.language_threshold,
            "check_params": self.check_params,
            "check_returns": self.check_returns,
            "context_margin": self.context_margin,
            "nesting_refinement": self.nesting_refinement,
            "fallback_kind": self.fallback_kind.value if self.fallback_kind else None,
            "extensions": list(self.extensions),
            "exclude": list(self.exclude),
            "remote": self.remote,
            "base_branches": list(self.base_branches),
            "git_timeout": self.git_timeout,
        }


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except OSError as exc:
        raise ScriptError(f"unable to read config {path}: {exc}", ERR_CONFIG, "config_error") from exc
    except yaml.YAMLError as exc:
        raise ScriptError(f"invalid YAML in {path}: {exc}", ERR_CONFIG, "config_error") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ScriptError(f"{path}: root must be mapping", ERR_CONFIG, "config_error")
    return data


def _check_schema(data: dict[str, Any], source: Path) -> None:
    errors = schema_errors(data, SCHEMA_PATH)
    if errors:
        joined = "; ".join(errors)
        raise ScriptError(f"{source}: config does not match schema: {joined}", ERR_CONFIG, "config_error")


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if key == "rules" and isinstance(value, dict):
            rules = {k: dict(v) for k, v in base.get("rules", {}).items()}
            for kind, rule in value.items():
                rules[kind] = {**rules.get(kind, {}), **rule}
            merged["rules"] = rules
        else:
            merged[key] = value
    return merged


def _build(data: dict[str, Any]) -> GuardConfig:
    rules = {
        DeclarationKind(kind): Rule(
            required_tags=tuple(rule.get("required_tags", ())),
            optional_tags=tuple(rule.get("optional_tags", ())),
        )
        for kind, rule in data["rules"].items()
    }
    fallback = data.get("fallback_kind")
    return GuardConfig(
        rules=rules,
        enforce_english=bool(data["enforce_english"]),
        stop_words=tuple(unicodedata.normalize("NFC", str(w)).lower() for w in data["stop_words"]),
        language_threshold=int(data["language_threshold"]),
        check_params=bool(data["check_params"]),
        check_returns=bool(data["check_returns"]),
        context_margin=int(data["context_margin"]),
        nesting_refinement=bool(data["nesting_refinement"]),
        fallback_kind=DeclarationKind(fallback) if fallback else None,
        extensions=tuple(data["extensions"]),
        exclude=tuple(data["exclude"]),
        remote=str(data["remote"]),
        base_branches=tuple(str(b) for b in data["base_branches"]),
        git_timeout=int(data["git_timeout"]),
    )


def default_config() -> GuardConfig:
    return _build(_read_yaml(DEFAULTS_PATH))


def load_config(repo_root: Path, config_path: str | None = None) -> tuple[GuardConfig, Path | None]:
    """Load defaults and apply the repository override, if any.

    An explicit ``config_path`` must exist; the implicit ``.tsdoc-guard.yaml``
    is optional. Returns the config and the override file actually used.
    """
    defaults = _read_yaml(DEFAULTS_PATH)
    if config_path:
        source = Path(config_path)
        if not source.is_absolute():
            source = repo_root / source
        if not source.is_file():
            raise ScriptError(f"config file not found: {source}", ERR_CONFIG, "config_error")
    else:
        source = repo_root / REPO_CONFIG_NAME
        if not source.is_file():
            return _build(defaults), None
    override = _read_yaml(source)
    _check_schema(override, source)
    return _build(_merge(defaults, override)), source

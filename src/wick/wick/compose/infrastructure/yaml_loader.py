"""YAML compose loader — parses, interpolates env vars, and builds the Compose model."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from wick.compose.domain.observer import ComposeObserver
from wick.compose.domain.task import Compose
from wick.compose.infrastructure.env_vars import expand_env_vars, unset_env_vars
from wick.compose.infrastructure.errors import ComposeLoadError, MissingEnvVarsError


class YamlComposeLoader:
    """Loads a compose file into a Compose whose tasks are still in flat form.

    Per-task field rules are checked by the runner, just before each task.
    """

    def __init__(self, observer: ComposeObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> Compose:
        """
        Load, interpolate and return the Compose described by a YAML file.

        Raises:
            ComposeLoadError: if the file is missing, is not valid YAML, or does
                not match the compose schema.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all
                collected first).
        """
        raw = _parse_yaml(path=path)
        missing = unset_env_vars(raw)
        if missing:
            raise MissingEnvVarsError(path=path, missing_vars=missing)
        compose = _build_compose(path=path, raw=expand_env_vars(raw))
        self._observer.compose_loaded(
            path=str(path), version=compose.version, task_count=len(compose.tasks)
        )
        return compose


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ComposeLoadError(path=path, reason="file not found") from exc
    except yaml.YAMLError as exc:
        raise ComposeLoadError(path=path, reason=f"invalid YAML: {exc}") from exc


def _build_compose(path: Path, raw: Any) -> Compose:
    if raw is None:
        raw = {}
    try:
        return Compose.model_validate(raw)
    except ValidationError as exc:
        raise ComposeLoadError(path=path, reason=str(exc)) from exc

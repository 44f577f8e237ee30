import json
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Tuple, Union


log = logging.getLogger(__name__)

DEFAULT_PATHS = ("config/app.json", "config/app.local.json")


class ConfigError(Exception):
    pass


_FIELD_TYPES: Dict[str, Tuple[type, ...]] = {
    "name": (str,),
    "host": (str,),
    "port": (int,),
    "query_path": (str,),
    "ide_path": (str,),
    "max_body_size": (int,),
    "batching": (bool,),
    "introspection": (bool,),
    "execution_timeout": (int, float),
    "debug": (bool,),
}


@dataclass(frozen=True)
class Config:
    name: str = "Kotoba Server"
    host: str = "0.0.0.0"
    port: int = 8080
    query_path: str = "/api/query"
    ide_path: str = "/api/ide"
    max_body_size: int = 2**20  # 1MB
    batching: bool = False
    introspection: bool = True
    """Seconds; execution is cancelled when exceeded"""
    execution_timeout: Optional[float] = None
    debug: bool = False

    def __post_init__(self) -> None:
        for name, types in _FIELD_TYPES.items():
            value = getattr(self, name)
            if name == "execution_timeout" and value is None:
                continue
            # bool is a subclass of int
            if not isinstance(value, types) or (
                isinstance(value, bool) and bool not in types
            ):
                raise ConfigError(
                    "{} has invalid type: {}".format(
                        name, type(value).__name__
                    )
                )
        for attr in ("query_path", "ide_path"):
            if not getattr(self, attr).startswith("/"):
                raise ConfigError("{} must start with '/'".format(attr))
        if self.max_body_size <= 0:
            raise ConfigError("max_body_size must be positive")
        if self.execution_timeout is not None and self.execution_timeout <= 0:
            raise ConfigError("execution_timeout must be positive")


def _read_file(path: Path) -> Dict[str, Any]:
    try:
        with path.open(encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as e:
        raise ConfigError("Invalid JSON in {}: {}".format(path, e))
    if not isinstance(data, dict):
        raise ConfigError("{} must contain a JSON object".format(path))
    return data


def load_config(
    paths: Iterable[Union[str, Path]] = DEFAULT_PATHS,
    **overrides: Any,
) -> Config:
    """Loads configuration from layered JSON files

    Files are applied in order, so keys from the later files win. Missing
    files are skipped. Keyword ``overrides`` are applied last, ``None``
    values are ignored.

    :param paths: JSON files to read
    :return: :py:class:`Config`
    """
    known = {f.name for f in fields(Config)}
    values: Dict[str, Any] = {}
    for path in map(Path, paths):
        if not path.is_file():
            log.debug("Config file %s not found, skipping", path)
            continue
        data = _read_file(path)
        unknown = set(data) - known
        if unknown:
            raise ConfigError(
                "Unknown config keys in {}: {}".format(
                    path, ", ".join(sorted(unknown))
                )
            )
        log.debug("Loaded config from %s", path)
        values.update(data)

    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return replace(Config(), **values)
    except TypeError as e:
        raise ConfigError(str(e))

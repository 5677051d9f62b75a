"""
YAML configuration for shapeguard.

A config file holds default validation options for an application:

    # .shapeguard.yaml
    coerce: true
    strict: false
    max_concurrent: 8
    log_level: INFO

The validator never looks for configuration itself. Load a ``Config`` and
pass ``config.validation_options()`` to ``validate`` (or use
``BatchValidator.from_config``).
"""

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

import yaml

from shapeguard.utils.logging_config import configure_logging, get_logger

logger = get_logger("config")

DEFAULT_CONFIG_PATHS = [
    Path(".shapeguard.yaml"),
    Path(".shapeguard.yml"),
    Path.home() / ".shapeguard" / "config.yaml",
    Path.home() / ".shapeguard" / "config.yml",
]


@dataclass
class Config:
    """
    Default options for validation.

    Attributes:
        coerce: Coerce values before type checks.
        strict: Force strict mode on or off; ``None`` keeps each schema's own.
        debug: Print rich reports of validation outcomes.
        max_concurrent: Worker limit for batch validation.
        log_level: Level for the ``shapeguard`` logger.

    Example:
        >>> config = Config.from_file(".shapeguard.yaml")
        >>> validate(schema, data, **config.validation_options())
    """

    coerce: bool = False
    strict: Optional[bool] = None
    debug: bool = False

    max_concurrent: int = 5

    log_level: str = "WARNING"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Config":
        """Build a Config from a mapping; keys that are not options are ignored."""
        names = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in names})

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Config":
        """
        Read a Config from a YAML file.

        Raises:
            OSError: If the file cannot be read.
            yaml.YAMLError: If the file is not valid YAML.
            ValueError: If the document is not a mapping.
        """
        path = Path(path)
        document = yaml.safe_load(path.read_text())
        if document is None:
            return cls()
        if not isinstance(document, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return cls.from_dict(document)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def validation_options(self) -> Dict[str, Any]:
        """Keyword options for ``validate``; ``strict`` only when it is set."""
        options: Dict[str, Any] = {"coerce": self.coerce, "debug": self.debug}
        if self.strict is not None:
            options["strict"] = self.strict
        return options

    def apply_logging(self) -> None:
        """Set the ``shapeguard`` logger to this config's level."""
        configure_logging(level=self.log_level)


def load_config(
    path: Optional[Union[str, Path]] = None,
    search_paths: Optional[Iterable[Path]] = None,
) -> Config:
    """
    Load a Config, discovering the file when no path is given.

    An explicit ``path`` must load. Otherwise the first readable file among
    ``search_paths`` (``DEFAULT_CONFIG_PATHS`` by default) wins; unreadable
    candidates are logged and skipped, and defaults are returned when
    nothing loads.
    """
    if path:
        return Config.from_file(path)

    for candidate in DEFAULT_CONFIG_PATHS if search_paths is None else search_paths:
        if not candidate.exists():
            continue
        try:
            config = Config.from_file(candidate)
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.warning("Failed to load config from %s: %s", candidate, e)
            continue
        logger.debug("Loaded config from %s", candidate)
        return config

    return Config()

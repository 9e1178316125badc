"""
Configuration for cflow callers.

A CflowConfig gathers the defaults a program wants to apply consistently:
missing-resource policy, text encoding, which values short-circuit a
binding list, and the log level of the "cflow" logger.

Configuration is never global. Callers load it and pass what it produces
(OpenOptions, an empty test) to the combinators explicitly.

Provides lossless JSON/YAML round-trip via an intermediate dict, e.g.

    missing_policy: ignore
    encoding: utf-8
    empty_test: falsy
    log_level: DEBUG
"""
from __future__ import annotations

import codecs
import json
import logging
import warnings
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from cflow.binding import EmptyTest, is_falsy, is_none
from cflow.errors import UsageError
from cflow.model import MissingPolicy, OpenOptions

EMPTY_TESTS: Dict[str, EmptyTest] = {
    "none": is_none,
    "falsy": is_falsy,
}

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET"}


@dataclass(frozen=True)
class CflowConfig:
    missing_policy: MissingPolicy = MissingPolicy.ERROR
    encoding: str = "utf-8"
    empty_test: str = "none"
    log_level: str = "WARNING"

    def __post_init__(self):
        if not isinstance(self.missing_policy, MissingPolicy):
            raise UsageError(
                f"missing_policy must be a MissingPolicy, got {self.missing_policy!r}"
            )
        if not isinstance(self.encoding, str):
            raise UsageError(f"encoding must be a string, got {self.encoding!r}")
        try:
            codecs.lookup(self.encoding)
        except LookupError:
            raise UsageError(f"Unknown encoding '{self.encoding}'") from None
        if not isinstance(self.empty_test, str) or self.empty_test not in EMPTY_TESTS:
            raise UsageError(
                f"Unknown empty_test {self.empty_test!r}, expected one of {sorted(EMPTY_TESTS)}"
            )
        if not isinstance(self.log_level, str) or self.log_level not in _LOG_LEVELS:
            raise UsageError(f"Unknown log_level {self.log_level!r}")


def config_to_dict(c: CflowConfig) -> Dict[str, Any]:
    return {
        "missing_policy": c.missing_policy.value,
        "encoding": c.encoding,
        "empty_test": c.empty_test,
        "log_level": c.log_level,
    }


def config_from_dict(d: Dict[str, Any] | None) -> CflowConfig:
    if d is None:
        return CflowConfig()
    if not isinstance(d, dict):
        raise UsageError(f"Configuration must be a mapping, got {type(d).__name__}")

    unknown = set(d) - {"missing_policy", "encoding", "empty_test", "log_level"}
    if unknown:
        warnings.warn(f"Ignoring unknown configuration keys: {sorted(unknown)}", UserWarning)

    defaults = CflowConfig()
    try:
        policy = MissingPolicy(d.get("missing_policy", defaults.missing_policy.value))
    except (ValueError, TypeError):
        raise UsageError(f"Unknown missing_policy: {d.get('missing_policy')!r}") from None

    return CflowConfig(
        missing_policy=policy,
        encoding=d.get("encoding", defaults.encoding),
        empty_test=d.get("empty_test", defaults.empty_test),
        log_level=str(d.get("log_level", defaults.log_level)).upper(),
    )


def config_to_json(c: CflowConfig) -> str:
    return json.dumps(config_to_dict(c), sort_keys=True)


def config_from_json(s: str) -> CflowConfig:
    try:
        data = json.loads(s)
    except json.JSONDecodeError as exc:
        raise UsageError(f"Invalid JSON configuration: {exc}") from exc
    return config_from_dict(data)


def config_to_yaml(c: CflowConfig) -> str:
    return yaml.safe_dump(config_to_dict(c))


def config_from_yaml(s: str) -> CflowConfig:
    try:
        data = yaml.safe_load(s)
    except yaml.YAMLError as exc:
        raise UsageError(f"Invalid YAML configuration: {exc}") from exc
    return config_from_dict(data)


def load_config(path: Union[str, Path]) -> CflowConfig:
    """
    Load configuration from a .json, .yaml or .yml file.

    Raises:
        FileNotFoundError: If file doesn't exist
        UsageError: If the content is not a valid configuration
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return config_from_json(text)
    return config_from_yaml(text)


def open_options(c: CflowConfig) -> OpenOptions:
    """OpenOptions carrying the configured policy and encoding."""
    return OpenOptions(if_missing=c.missing_policy, encoding=c.encoding)


def empty_predicate(c: CflowConfig) -> EmptyTest:
    """The empty test to pass as is_empty= to the binding combinators."""
    return EMPTY_TESTS[c.empty_test]


def configure_logging(c: CflowConfig) -> logging.Logger:
    """Set the level of the "cflow" logger. No handlers are installed."""
    logger = logging.getLogger("cflow")
    logger.setLevel(c.log_level)
    return logger

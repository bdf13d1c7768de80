"""Configuration loading and management for Code Owner Finder.

Configuration sources are merged in priority order:
    1. Defaults (defined in KnowledgeConfig)
    2. Global config (~/.code-owner-finder.toml)
    3. Project config (./code-owner-finder.toml)
    4. Explicit config file
    5. Environment variables (CODE_OWNER_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(half_life_days=250)
    >>> config.half_life_days
    250
    >>> config.finder
    'knowledge'
"""

from __future__ import annotations

import math
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Literal, Optional, get_type_hints

from .algo.adder import LineKnowledgeAdder
from .algo.calculator import KnowledgeStateCalculator
from .algo.finders import (
    CodeOwnerFinder,
    KnowledgeStateCodeOwnerFinder,
    SummarizedCodeOwnerFinder,
)
from .algo.oblivion import (
    ConstantOblivionFunction,
    ExponentialOblivionFunction,
    OblivionFunction,
)
from .algo.weights import (
    LengthLineWeightCalculator,
    LineWeightCalculator,
    WordLineWeightCalculator,
)
from .exceptions import ConfigurationError, InvalidConfigError

# Type aliases for clarity
Verbosity = Literal["quiet", "normal", "verbose"]
OblivionKind = Literal["exponential", "constant"]
LineWeightKind = Literal["words", "length"]
FinderKind = Literal["knowledge", "summarized"]

ENV_PREFIX = "CODE_OWNER_"
CONFIG_FILE_NAME = "code-owner-finder.toml"


@dataclass(frozen=True)
class KnowledgeConfig:
    """Tuning of the knowledge model and of the command-line front end.

    Attributes:
        Knowledge model:
            half_life_days: Days after which half of the knowledge is forgotten
            oblivion: "exponential" (half-life decay) or "constant" (never forget)
            line_weight: "words" (word count) or "length" (character count)
            spread_coefficient: Reading knowledge budget per unit of line weight
            same_author_writing_knowledge: Knowledge gained on lines one writes
            other_author_writing_knowledge: Knowledge gained on lines another
                developer writes

        Scoring:
            finder: "knowledge" (knowledge model) or "summarized" (share of
                changed lines)
            workers: Threads scoring developers concurrently (None = sequential)

        History loading:
            max_revisions: Revisions to load from git (0 = unlimited)

        Output control:
            top: Number of developers to display
            verbosity: Logging verbosity level
    """

    # Knowledge model
    half_life_days: float = 500.0
    oblivion: OblivionKind = "exponential"
    line_weight: LineWeightKind = "words"
    spread_coefficient: float = 6.0
    same_author_writing_knowledge: float = 1.0
    other_author_writing_knowledge: float = 0.0

    # Scoring
    finder: FinderKind = "knowledge"
    workers: Optional[int] = None

    # History loading
    max_revisions: int = 0

    # Output control
    top: int = 5
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.half_life_days > 0 or math.isinf(self.half_life_days):
            raise ValueError("half_life_days must be a positive finite number")
        if self.oblivion not in ("exponential", "constant"):
            raise ValueError("oblivion must be 'exponential' or 'constant'")
        if self.line_weight not in ("words", "length"):
            raise ValueError("line_weight must be 'words' or 'length'")
        if self.spread_coefficient < 0:
            raise ValueError("spread_coefficient must be non-negative")

        # Writing knowledge is a knowledge level
        for field_name in ("same_author_writing_knowledge", "other_author_writing_knowledge"):
            if not 0.0 <= getattr(self, field_name) <= 1.0:
                raise ValueError(f"{field_name} must be between 0.0 and 1.0")

        if self.finder not in ("knowledge", "summarized"):
            raise ValueError("finder must be 'knowledge' or 'summarized'")
        if self.workers is not None and self.workers < 1:
            raise ValueError("workers must be at least 1")
        if self.max_revisions < 0:
            raise ValueError("max_revisions must be non-negative")
        if self.top < 1:
            raise ValueError("top must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be 'quiet', 'normal' or 'verbose'")


# Default configuration (singleton)
DEFAULT_CONFIG = KnowledgeConfig()


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> KnowledgeConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags); ``None``
            values are ignored so unset CLI options keep lower-priority values

    Returns:
        Validated KnowledgeConfig instance

    Raises:
        ConfigurationError: If a config file is missing or invalid, or the
            merged values do not validate
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILE_NAME}"
    if global_config.exists():
        merged.update(_load_config_file(global_config, "global config"))

    project_config = Path.cwd() / CONFIG_FILE_NAME
    if project_config.exists():
        merged.update(_load_config_file(project_config, "project config"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_load_config_file(config_file, "config file"))

    merged.update(_load_env_vars())

    # Convert verbosity boolean flags to string
    if overrides.pop("verbose", False):
        overrides["verbosity"] = "verbose"
    if overrides.pop("quiet", False):
        overrides["verbosity"] = "quiet"

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return KnowledgeConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def _load_config_file(path: Path, label: str) -> dict[str, Any]:
    try:
        data = _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {label} '{path}': {e}")

    # Settings may live at the top level or under a [code-owner-finder] table
    section = data.get("code-owner-finder", data)
    if not isinstance(section, dict):
        raise ConfigurationError(f"Invalid {label} '{path}': [code-owner-finder] must be a table")
    return dict(section)


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from CODE_OWNER_* environment variables.

    Every KnowledgeConfig field can be set, e.g. CODE_OWNER_HALF_LIFE_DAYS=365
    or CODE_OWNER_OBLIVION=constant.

    Returns:
        Dict of field_name -> parsed_value for any CODE_OWNER_* vars found.

    Raises:
        InvalidConfigError: If a variable cannot be parsed to its field type
    """
    type_hints = get_type_hints(KnowledgeConfig)

    result: dict[str, Any] = {}

    for field_name in KnowledgeConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Handle Optional[X] which is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        if value.lower() in ("", "none"):
            return None
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If tomllib/tomli not available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            # Fallback to tomli for Python 3.9-3.10
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)


# ── Strategy factories ─────────────────────────────────────────────────────


def build_oblivion_function(config: KnowledgeConfig = DEFAULT_CONFIG) -> OblivionFunction:
    if config.oblivion == "constant":
        return ConstantOblivionFunction()
    return ExponentialOblivionFunction(half_life_days=config.half_life_days)


def build_line_weight_calculator(config: KnowledgeConfig = DEFAULT_CONFIG) -> LineWeightCalculator:
    if config.line_weight == "length":
        return LengthLineWeightCalculator()
    return WordLineWeightCalculator()


def build_knowledge_state_calculator(
    config: KnowledgeConfig = DEFAULT_CONFIG,
    clock: Callable[[], float] = time.time,
) -> KnowledgeStateCalculator:
    adder = LineKnowledgeAdder(
        spread_coefficient=config.spread_coefficient,
        same_author_writing_knowledge=config.same_author_writing_knowledge,
        other_author_writing_knowledge=config.other_author_writing_knowledge,
    )
    return KnowledgeStateCalculator(
        oblivion_function=build_oblivion_function(config),
        adder=adder,
        clock=clock,
    )


def build_finder(
    config: KnowledgeConfig = DEFAULT_CONFIG,
    clock: Callable[[], float] = time.time,
) -> CodeOwnerFinder:
    """Finder described by ``config``, with ``clock`` as the source of "now"."""
    if config.finder == "summarized":
        return SummarizedCodeOwnerFinder(workers=config.workers)
    return KnowledgeStateCodeOwnerFinder(
        calculator=build_knowledge_state_calculator(config, clock),
        workers=config.workers,
    )

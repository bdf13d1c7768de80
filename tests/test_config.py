"""Tests for configuration loading and strategy factories."""

import os

import pytest

from code_owner_finder.algo.finders import KnowledgeStateCodeOwnerFinder, SummarizedCodeOwnerFinder
from code_owner_finder.algo.oblivion import ConstantOblivionFunction, ExponentialOblivionFunction
from code_owner_finder.algo.weights import LengthLineWeightCalculator, WordLineWeightCalculator
from code_owner_finder.config import (
    DEFAULT_CONFIG,
    KnowledgeConfig,
    build_finder,
    build_knowledge_state_calculator,
    build_line_weight_calculator,
    build_oblivion_function,
    load_config,
)
from code_owner_finder.exceptions import ConfigurationError, InvalidConfigError


@pytest.fixture(autouse=True)
def clean_environment(tmp_path, monkeypatch):
    """No global or project config files, no CODE_OWNER_* variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    for key in list(os.environ):
        if key.startswith("CODE_OWNER_"):
            monkeypatch.delenv(key)
    return home


class TestKnowledgeConfig:
    """Defaults and validation."""

    def test_defaults(self):
        config = KnowledgeConfig()
        assert config.half_life_days == 500.0
        assert config.oblivion == "exponential"
        assert config.line_weight == "words"
        assert config.spread_coefficient == 6.0
        assert config.same_author_writing_knowledge == 1.0
        assert config.other_author_writing_knowledge == 0.0
        assert config.finder == "knowledge"
        assert config.workers is None
        assert config.top == 5

    @pytest.mark.parametrize(
        "field, value",
        [
            ("half_life_days", 0),
            ("half_life_days", float("inf")),
            ("oblivion", "linear"),
            ("line_weight", "tokens"),
            ("spread_coefficient", -1.0),
            ("other_author_writing_knowledge", 2.0),
            ("finder", "oracle"),
            ("workers", 0),
            ("max_revisions", -1),
            ("top", 0),
            ("verbosity", "loud"),
        ],
    )
    def test_invalid_values(self, field, value):
        with pytest.raises(ValueError):
            KnowledgeConfig(**{field: value})

    def test_frozen(self):
        with pytest.raises(AttributeError):
            DEFAULT_CONFIG.top = 10


class TestLoadConfig:
    """Merging of config sources."""

    def test_no_sources_gives_defaults(self):
        assert load_config() == KnowledgeConfig()

    def test_overrides_win_and_none_is_ignored(self):
        config = load_config(half_life_days=250, top=None)
        assert config.half_life_days == 250
        assert config.top == 5

    def test_verbosity_flags(self):
        assert load_config(verbose=True).verbosity == "verbose"
        assert load_config(quiet=True).verbosity == "quiet"
        assert load_config(verbose=False, quiet=False).verbosity == "normal"

    def test_project_config_file(self, tmp_path):
        (tmp_path / "code-owner-finder.toml").write_text("half_life_days = 90\ntop = 3\n")
        config = load_config()
        assert config.half_life_days == 90
        assert config.top == 3

    def test_global_config_loses_to_project_config(self, tmp_path, clean_environment):
        (clean_environment / ".code-owner-finder.toml").write_text("top = 7\nfinder = 'summarized'\n")
        (tmp_path / "code-owner-finder.toml").write_text("top = 3\n")
        config = load_config()
        assert config.top == 3
        assert config.finder == "summarized"

    def test_explicit_file_with_table(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[code-owner-finder]\noblivion = "constant"\nline_weight = "length"\n')
        config = load_config(config_file=path)
        assert config.oblivion == "constant"
        assert config.line_weight == "length"

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_config(config_file=tmp_path / "missing.toml")

    def test_malformed_file(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("top = = 3\n")
        with pytest.raises(ConfigurationError, match="Invalid config file"):
            load_config(config_file=path)

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "unknown.toml"
        path.write_text("colour = 'blue'\n")
        with pytest.raises(ConfigurationError, match="Invalid configuration"):
            load_config(config_file=path)

    def test_invalid_value(self):
        with pytest.raises(ConfigurationError, match="half_life_days"):
            load_config(half_life_days=-3)


class TestEnvironmentVariables:
    """CODE_OWNER_* variables."""

    def test_typed_values(self, monkeypatch):
        monkeypatch.setenv("CODE_OWNER_HALF_LIFE_DAYS", "365")
        monkeypatch.setenv("CODE_OWNER_OBLIVION", "constant")
        monkeypatch.setenv("CODE_OWNER_WORKERS", "4")
        monkeypatch.setenv("CODE_OWNER_MAX_REVISIONS", "20")

        config = load_config()

        assert config.half_life_days == 365.0
        assert config.oblivion == "constant"
        assert config.workers == 4
        assert config.max_revisions == 20

    def test_optional_none(self, monkeypatch):
        monkeypatch.setenv("CODE_OWNER_WORKERS", "none")
        assert load_config().workers is None

    def test_env_beats_files_but_not_overrides(self, tmp_path, monkeypatch):
        (tmp_path / "code-owner-finder.toml").write_text("top = 3\n")
        monkeypatch.setenv("CODE_OWNER_TOP", "4")
        assert load_config().top == 4
        assert load_config(top=9).top == 9

    def test_unparseable_value(self, monkeypatch):
        monkeypatch.setenv("CODE_OWNER_TOP", "many")
        with pytest.raises(InvalidConfigError) as exc_info:
            load_config()
        assert exc_info.value.key == "CODE_OWNER_TOP"


class TestFactories:
    """Strategies built from a config."""

    def test_oblivion_function(self):
        fn = build_oblivion_function(KnowledgeConfig(half_life_days=30))
        assert isinstance(fn, ExponentialOblivionFunction)
        assert fn.half_life_days == 30
        assert isinstance(build_oblivion_function(KnowledgeConfig(oblivion="constant")), ConstantOblivionFunction)

    def test_line_weight_calculator(self):
        assert isinstance(build_line_weight_calculator(), WordLineWeightCalculator)
        assert isinstance(
            build_line_weight_calculator(KnowledgeConfig(line_weight="length")), LengthLineWeightCalculator
        )

    def test_calculator_carries_adder_settings_and_clock(self):
        config = KnowledgeConfig(spread_coefficient=2.0, other_author_writing_knowledge=0.25)
        calc = build_knowledge_state_calculator(config, clock=lambda: 123.0)
        assert calc.adder.spread_coefficient == 2.0
        assert calc.adder.other_author_writing_knowledge == 0.25
        assert calc.clock() == 123.0

    def test_finders(self):
        knowledge = build_finder(KnowledgeConfig(workers=2))
        assert isinstance(knowledge, KnowledgeStateCodeOwnerFinder)
        assert knowledge.workers == 2
        assert isinstance(build_finder(KnowledgeConfig(finder="summarized")), SummarizedCodeOwnerFinder)

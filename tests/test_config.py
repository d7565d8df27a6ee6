import pytest
from PySide6.QtCore import QSettings

from focus_guard.config import EngineConfig, IntensityLevel
from focus_guard.settings import EngineSettingsManager


def test_defaults():
    config = EngineConfig()

    assert config.enabled
    assert config.first_break_threshold_minutes == 30
    assert config.escalation_interval_minutes == 15
    assert config.max_intensity is IntensityLevel.STRONG
    assert config.user_name == "friend"


@pytest.mark.parametrize("value", [0, -5, "abc", None, 2.5e-1, True])
def test_invalid_thresholds_fall_back_to_defaults(value):
    config = EngineConfig.normalized(first_break_threshold_minutes=value, escalation_interval_minutes=value)

    assert config.first_break_threshold_minutes == 30
    assert config.escalation_interval_minutes == 15


def test_valid_values_are_kept():
    config = EngineConfig.normalized(
        enabled="false",
        first_break_threshold_minutes="25",
        escalation_interval_minutes=10,
        max_intensity="Moderate",
        user_name="  Ada ",
    )

    assert config == EngineConfig(
        enabled=False,
        first_break_threshold_minutes=25,
        escalation_interval_minutes=10,
        max_intensity=IntensityLevel.MODERATE,
        user_name="Ada",
    )


def test_unknown_intensity_defaults_to_strong():
    assert EngineConfig.normalized(max_intensity="extreme").max_intensity is IntensityLevel.STRONG


def test_blank_user_name_defaults():
    assert EngineConfig.normalized(user_name="   ").user_name == "friend"


def test_config_is_immutable():
    config = EngineConfig()
    with pytest.raises(AttributeError):
        config.enabled = False  # type: ignore[misc]


def test_intensity_ordering_and_capping():
    gentle, moderate, strong = IntensityLevel.GENTLE, IntensityLevel.MODERATE, IntensityLevel.STRONG

    assert gentle.rank < moderate.rank < strong.rank
    assert strong.capped_to(moderate) is moderate
    assert gentle.capped_to(strong) is gentle
    assert moderate.capped_to(moderate) is moderate


@pytest.fixture
def ini_settings(tmp_path):
    return QSettings(str(tmp_path / "engine.ini"), QSettings.Format.IniFormat)


def test_settings_manager_defaults_when_empty(ini_settings):
    assert EngineSettingsManager(settings=ini_settings).read_config() == EngineConfig()


def test_settings_manager_round_trips(ini_settings):
    manager = EngineSettingsManager(settings=ini_settings)
    stored = EngineConfig(
        enabled=False,
        first_break_threshold_minutes=25,
        escalation_interval_minutes=5,
        max_intensity=IntensityLevel.GENTLE,
        user_name="Sam",
    )

    manager.write_config(stored)

    assert manager.read_config() == stored


def test_settings_manager_clamps_bad_values(ini_settings):
    ini_settings.setValue("FirstBreakThresholdMinutes", -10)
    ini_settings.setValue("MaxIntensity", "volcanic")
    ini_settings.sync()

    config = EngineSettingsManager(settings=ini_settings).read_config()

    assert config.first_break_threshold_minutes == 30
    assert config.max_intensity is IntensityLevel.STRONG

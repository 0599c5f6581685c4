"""
Tests for the Configuration Manager.

Covers configuration loading, merging of config directories, environment
variable substitution and the OpenWeatherMap/dashboard getters.
"""

import os
import tempfile
from pathlib import Path

import pytest

from internal.config.manager import ConfigManager, substituteEnvVars
from lib.openweathermap import MissingCredentialError

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def tempDir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sampleConfigToml():
    """Provide sample valid TOML configuration."""
    return """
[openweathermap]
api-key = "test_api_key_123"
request-timeout = 10
default-language = "en"

[dashboard]
aqi-refresh-interval = 60

[logging]
level = "INFO"
"""


@pytest.fixture
def overrideToml():
    """Provide override configuration TOML."""
    return """
[openweathermap]
request-timeout = 30

[dashboard]
aqi-refresh-interval = 120

[logging]
level = "DEBUG"
format = "%(levelname)s %(message)s"
"""


@pytest.fixture
def envKeyToml():
    """Provide configuration taking API key from environment."""
    return """
[openweathermap]
api-key = "${OPENWEATHERMAP_API_KEY}"
"""


# ============================================================================
# Helper Functions
# ============================================================================


def createConfigFile(directory: Path, filename: str, content: str) -> Path:
    """Create a TOML config file in the specified directory."""
    filePath = directory / filename
    filePath.write_text(content)
    return filePath


def createConfigDir(baseDir: Path, dirName: str, files: dict) -> Path:
    """Create a config directory with multiple TOML files."""
    configDir = baseDir / dirName
    configDir.mkdir(parents=True, exist_ok=True)

    for filename, content in files.items():
        createConfigFile(configDir, filename, content)

    return configDir


def makeManager(tempDir: Path, configPath, **kwargs) -> ConfigManager:
    """Create ConfigManager which never reads .env from the working directory."""
    kwargs.setdefault("dotEnvFile", str(tempDir / ".env"))
    return ConfigManager(str(configPath), **kwargs)


# ============================================================================
# Loading Tests
# ============================================================================


class TestConfigurationLoading:
    """Test configuration loading from TOML files."""

    def testLoadSingleConfigFile(self, tempDir, sampleConfigToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)

        manager = makeManager(tempDir, configPath)

        assert manager.config_path == str(configPath)
        assert manager.config["openweathermap"]["api-key"] == "test_api_key_123"
        assert manager.get("dashboard") == {"aqi-refresh-interval": 60}
        assert manager.get("nonexistent", "fallback") == "fallback"

    def testMissingConfigWithoutDirs(self, tempDir):
        with pytest.raises(SystemExit):
            makeManager(tempDir, tempDir / "nonexistent.toml")

    def testMissingConfigWithDirs(self, tempDir, sampleConfigToml):
        configDir = createConfigDir(tempDir, "conf.d", {"base.toml": sampleConfigToml})

        manager = makeManager(tempDir, tempDir / "nonexistent.toml", configDirs=[str(configDir)])

        assert manager.getOpenWeatherMapApiKey() == "test_api_key_123"

    def testInvalidMainConfig(self, tempDir):
        configPath = createConfigFile(tempDir, "config.toml", "[openweathermap\napi-key = 1\n")

        with pytest.raises(SystemExit):
            makeManager(tempDir, configPath)

    def testEmptyConfig(self, tempDir):
        configPath = createConfigFile(tempDir, "config.toml", "")

        manager = makeManager(tempDir, configPath)

        assert manager.config == {}
        assert manager.getLoggingConfig() == {}
        assert manager.getDashboardConfig() == {}


class TestConfigMerging:
    """Test merging of config directories on top of the main file."""

    def testDirectoryOverridesMainFile(self, tempDir, sampleConfigToml, overrideToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(tempDir, "conf.d", {"override.toml": overrideToml})

        manager = makeManager(tempDir, configPath, configDirs=[str(configDir)])

        owmConfig = manager.getOpenWeatherMapConfig()
        assert owmConfig["request-timeout"] == 30
        # Keys absent in override survive
        assert owmConfig["api-key"] == "test_api_key_123"
        assert owmConfig["default-language"] == "en"
        assert manager.getDashboardConfig()["aqi-refresh-interval"] == 120
        assert manager.getLoggingConfig()["level"] == "DEBUG"

    def testFilesMergedInSortedOrder(self, tempDir, sampleConfigToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(
            tempDir,
            "conf.d",
            {
                "20-late.toml": "[dashboard]\naqi-refresh-interval = 20\n",
                "10-early.toml": "[dashboard]\naqi-refresh-interval = 10\n",
            },
        )

        manager = makeManager(tempDir, configPath, configDirs=[str(configDir)])

        assert manager.getDashboardConfig()["aqi-refresh-interval"] == 20

    def testNestedDirectoriesScanned(self, tempDir, sampleConfigToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(tempDir, "conf.d", {})
        createConfigDir(configDir, "nested", {"logging.toml": '[logging]\nlevel = "WARNING"\n'})

        manager = makeManager(tempDir, configPath, configDirs=[str(configDir)])

        assert manager.getLoggingConfig()["level"] == "WARNING"

    def testInvalidFileInDirectoryIsSkipped(self, tempDir, sampleConfigToml, overrideToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)
        configDir = createConfigDir(
            tempDir,
            "conf.d",
            {"broken.toml": "[dashboard\n", "override.toml": overrideToml},
        )

        manager = makeManager(tempDir, configPath, configDirs=[str(configDir)])

        assert manager.getDashboardConfig()["aqi-refresh-interval"] == 120

    def testNonExistentDirectoryIsSkipped(self, tempDir, sampleConfigToml):
        configPath = createConfigFile(tempDir, "config.toml", sampleConfigToml)

        manager = makeManager(tempDir, configPath, configDirs=[str(tempDir / "missing")])

        assert manager.getOpenWeatherMapApiKey() == "test_api_key_123"


# ============================================================================
# Environment Tests
# ============================================================================


class TestEnvironmentSubstitution:
    """Test ${VAR} substitution and .env loading."""

    def testSubstituteNestedValues(self, monkeypatch):
        monkeypatch.setenv("OWM_TEST_VALUE", "resolved")

        result = substituteEnvVars({"a": "${OWM_TEST_VALUE}", "b": ["x-${OWM_TEST_VALUE}", 5], "c": True})

        assert result == {"a": "resolved", "b": ["x-resolved", 5], "c": True}

    def testUnknownVariableKept(self, monkeypatch):
        monkeypatch.delenv("OWM_TEST_UNKNOWN", raising=False)

        assert substituteEnvVars("${OWM_TEST_UNKNOWN}") == "${OWM_TEST_UNKNOWN}"

    def testApiKeyFromEnvironment(self, tempDir, envKeyToml, monkeypatch):
        monkeypatch.setenv("OPENWEATHERMAP_API_KEY", "env_key_456")
        configPath = createConfigFile(tempDir, "config.toml", envKeyToml)

        manager = makeManager(tempDir, configPath)

        assert manager.getOpenWeatherMapApiKey() == "env_key_456"

    def testApiKeyFromDotEnv(self, tempDir, envKeyToml, monkeypatch):
        monkeypatch.delenv("OPENWEATHERMAP_API_KEY", raising=False)
        configPath = createConfigFile(tempDir, "config.toml", envKeyToml)
        dotEnvPath = tempDir / "test.env"
        dotEnvPath.write_text("# local secrets\nOPENWEATHERMAP_API_KEY=dotenv_key_789\n")

        try:
            manager = makeManager(tempDir, configPath, dotEnvFile=str(dotEnvPath))
            assert manager.getOpenWeatherMapApiKey() == "dotenv_key_789"
        finally:
            os.environ.pop("OPENWEATHERMAP_API_KEY", None)


# ============================================================================
# API Key Tests
# ============================================================================


class TestApiKey:
    """Test OpenWeatherMap API key validation."""

    def testMissingKey(self, tempDir):
        configPath = createConfigFile(tempDir, "config.toml", "[dashboard]\naqi-refresh-interval = 60\n")

        manager = makeManager(tempDir, configPath)

        with pytest.raises(MissingCredentialError):
            manager.getOpenWeatherMapApiKey()

    def testEmptyKey(self, tempDir):
        configPath = createConfigFile(tempDir, "config.toml", '[openweathermap]\napi-key = "  "\n')

        manager = makeManager(tempDir, configPath)

        with pytest.raises(MissingCredentialError):
            manager.getOpenWeatherMapApiKey()

    def testUnresolvedPlaceholder(self, tempDir, envKeyToml, monkeypatch):
        monkeypatch.delenv("OPENWEATHERMAP_API_KEY", raising=False)
        configPath = createConfigFile(tempDir, "config.toml", envKeyToml)

        manager = makeManager(tempDir, configPath)

        with pytest.raises(MissingCredentialError) as excInfo:
            manager.getOpenWeatherMapApiKey()
        assert "OPENWEATHERMAP_API_KEY" in str(excInfo.value)

"""Tests for device-iam configuration."""

import os
import shutil
import tempfile
import unittest
from unittest.mock import MagicMock, patch

from deviceiam.config import (
    ConfigError,
    Profile,
    get_config_path,
    get_profile_name,
    list_profiles,
    load_connector,
    load_profile,
    open_connection,
    profile_section,
    read_config,
)

SAMPLE_CONFIG = """\
[default]
connector = os.path:join
device_id = de-abcdefgh

[profile kitchen]
connector = os.path:join
deviceId = de-ijklmnop
assume_yes = true
report_unknown_status = yes

[profile broken]
device_id = de-00000000

[profile noisy]
connector = os.path:join
assume_yes = sometimes

[unrelated]
key = value
"""


class TestConfigPaths(unittest.TestCase):
    """Test config file and profile name precedence."""

    @patch.dict(os.environ, {}, clear=True)
    def test_default_config_path(self):
        """Test the default location."""
        path = get_config_path()
        self.assertTrue(path.endswith(os.path.join(".config", "device-iam", "config")))
        self.assertTrue(path.startswith(os.path.expanduser("~")))

    @patch.dict(os.environ, {"DEVICE_IAM_CONFIG": "/etc/device-iam.ini"}, clear=True)
    def test_config_path_env_and_override(self):
        """Test that the argument beats the environment."""
        self.assertEqual(get_config_path(), "/etc/device-iam.ini")
        self.assertEqual(get_config_path("/tmp/other.ini"), "/tmp/other.ini")

    @patch.dict(os.environ, {}, clear=True)
    def test_default_profile_name(self):
        """Test the default profile."""
        self.assertEqual(get_profile_name(), "default")

    @patch.dict(os.environ, {"DEVICE_IAM_PROFILE": "kitchen"}, clear=True)
    def test_profile_name_env_and_override(self):
        """Test profile name precedence."""
        self.assertEqual(get_profile_name(), "kitchen")
        self.assertEqual(get_profile_name("garage"), "garage")

    def test_profile_section(self):
        """Test section naming."""
        self.assertEqual(profile_section("default"), "default")
        self.assertEqual(profile_section("kitchen"), "profile kitchen")


class TestReadConfig(unittest.TestCase):
    """Test reading profiles from the config file."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.config_file = os.path.join(self.temp_dir, "config")
        with open(self.config_file, "w") as f:
            f.write(SAMPLE_CONFIG)
        self.config = read_config(self.config_file)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_read_config_nonexistent_file(self):
        """Test that a missing file gives an empty config."""
        config = read_config(os.path.join(self.temp_dir, "missing"))
        self.assertEqual(config.sections(), [])

    def test_read_config_invalid_file(self):
        """Test that a malformed file raises ConfigError."""
        bad_file = os.path.join(self.temp_dir, "bad")
        with open(bad_file, "w") as f:
            f.write("no section header\n")
        with self.assertRaises(ConfigError):
            read_config(bad_file)

    def test_list_profiles(self):
        """Test that only profile sections are listed."""
        self.assertEqual(
            list_profiles(self.config), ["default", "kitchen", "broken", "noisy"]
        )

    def test_load_default_profile(self):
        """Test loading the default profile."""
        profile = load_profile(self.config, "default")
        self.assertEqual(
            profile,
            Profile(
                name="default",
                connector="os.path:join",
                assume_yes=False,
                report_unknown_status=False,
                options={"device_id": "de-abcdefgh"},
            ),
        )

    def test_load_named_profile(self):
        """Test booleans and case-preserved connector options."""
        profile = load_profile(self.config, "kitchen")
        self.assertTrue(profile.assume_yes)
        self.assertTrue(profile.report_unknown_status)
        self.assertEqual(profile.options, {"deviceId": "de-ijklmnop"})

    def test_load_missing_profile(self):
        """Test that an unknown profile raises ConfigError."""
        with self.assertRaises(ConfigError):
            load_profile(self.config, "garage")

    def test_load_profile_without_connector(self):
        """Test that a profile must name a connector."""
        with self.assertRaises(ConfigError):
            load_profile(self.config, "broken")

    def test_load_profile_bad_boolean(self):
        """Test that invalid booleans raise ConfigError."""
        with self.assertRaises(ConfigError):
            load_profile(self.config, "noisy")


class TestConnector(unittest.TestCase):
    """Test connector loading."""

    def test_load_connector(self):
        """Test importing a dotted module callable."""
        self.assertIs(load_connector("os.path:join"), os.path.join)

    def test_load_connector_nested_attribute(self):
        """Test attribute paths after the colon."""
        self.assertIs(load_connector("os:path.join"), os.path.join)

    def test_load_connector_malformed(self):
        """Test connector paths without a module or callable."""
        for path in ("os.path.join", ":join", "os.path:"):
            with self.assertRaises(ConfigError, msg=path):
                load_connector(path)

    def test_load_connector_missing_module(self):
        """Test an unimportable module."""
        with self.assertRaises(ConfigError):
            load_connector("no_such_module_for_device_iam:connect")

    def test_load_connector_missing_attribute(self):
        """Test a missing callable."""
        with self.assertRaises(ConfigError):
            load_connector("os.path:no_such_function")

    def test_load_connector_not_callable(self):
        """Test a non-callable attribute."""
        with self.assertRaises(ConfigError):
            load_connector("os:sep")

    @patch("deviceiam.config.load_connector")
    def test_open_connection_passes_options(self, mock_load):
        """Test that profile options become keyword arguments."""
        connector = MagicMock()
        mock_load.return_value = connector
        profile = Profile(name="kitchen", connector="x:y", options={"device_id": "de-1"})

        connection = open_connection(profile)

        mock_load.assert_called_once_with("x:y")
        connector.assert_called_once_with(device_id="de-1")
        self.assertIs(connection, connector.return_value)

    @patch("deviceiam.config.load_connector")
    def test_open_connection_failure(self, mock_load):
        """Test that connector errors become ConfigError."""
        mock_load.return_value = MagicMock(side_effect=ConnectionRefusedError("no route"))
        profile = Profile(name="kitchen", connector="x:y")

        with self.assertRaises(ConfigError) as ctx:
            open_connection(profile)
        self.assertIn("kitchen", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()

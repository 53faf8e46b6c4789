import json
import logging
import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from utilities.session_configuration import SessionConfiguration
import utilities.common_constants as common_constants


class TestConfigurationMethods(unittest.TestCase):
    logger = logging.getLogger(__name__)

    def setUp(self):
        with open(common_constants.CONFIG_FILE_NAME, "w") as cf:
            json.dump({"elevator": "ELV-002"}, cf)

    def tearDown(self):
        if os.path.exists(common_constants.CONFIG_FILE_NAME):
            os.remove(common_constants.CONFIG_FILE_NAME)

    def test_updating_with_new_key_does_not_overwrite_old(self):
        SessionConfiguration.update_config_file({"technician": "Aino"})
        with open(common_constants.CONFIG_FILE_NAME, "r") as cf:
            loaded = json.load(cf)
            self.assertEqual(loaded["elevator"], "ELV-002")
            self.assertEqual(loaded["technician"], "Aino")

    def test_update_replaces_existing_key(self):
        SessionConfiguration.update_config_file({"elevator": "ELV-003"})
        self.assertEqual(SessionConfiguration.get_elevator_code(), "ELV-003")

    def test_empty_update_is_ignored(self):
        SessionConfiguration.update_config_file({})
        SessionConfiguration.update_config_file(None)
        self.assertEqual(SessionConfiguration.get_config_data(), {"elevator": "ELV-002"})

    def test_update_creates_the_config_folder(self):
        folder = tempfile.mkdtemp()
        config_file = os.path.join(folder, "heatmap", "config.json")
        try:
            with patch.object(common_constants, "CONFIG_FILE_NAME", config_file):
                SessionConfiguration.update_config_file({"technician": "Aino"})
                self.assertEqual(SessionConfiguration.get_technician(), "Aino")
                self.assertEqual(
                    SessionConfiguration.get_elevator_code(),
                    common_constants.DEFAULT_ELEVATOR_CODE,
                )
            # Only the config file is left behind
            self.assertEqual(os.listdir(os.path.dirname(config_file)), ["config.json"])
        finally:
            shutil.rmtree(folder)

    def test_missing_keys_fall_back_to_defaults(self):
        self.assertEqual(SessionConfiguration.get_elevator_code(), "ELV-002")
        self.assertEqual(
            SessionConfiguration.get_technician(), common_constants.DEFAULT_TECHNICIAN
        )
        self.assertEqual(SessionConfiguration.get_timezone(), common_constants.LOCAL_TIMEZONE)

    def test_missing_file_gives_default_config(self):
        os.remove(common_constants.CONFIG_FILE_NAME)
        self.assertEqual(
            SessionConfiguration.get_config_data(), SessionConfiguration.get_default_config()
        )
        self.assertEqual(
            SessionConfiguration.get_elevator_code(), common_constants.DEFAULT_ELEVATOR_CODE
        )

    @patch("utilities.session_configuration.SessionConfiguration.get_config_data")
    def test_broken_config_is_logged_and_defaults_used(self, get_config_data):
        get_config_data.side_effect = ValueError("bad json")
        # The test runners silence logging
        disabled_level = logging.root.manager.disable
        logging.disable(logging.NOTSET)
        try:
            with self.assertLogs(self.logger, level="ERROR"):
                self.assertEqual(
                    SessionConfiguration.get_timezone(self.logger),
                    common_constants.LOCAL_TIMEZONE,
                )
        finally:
            logging.disable(disabled_level)


if __name__ == "__main__":
    unittest.main()

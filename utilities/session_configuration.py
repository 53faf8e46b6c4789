import json
import os
from pathlib import Path

from tempfile import NamedTemporaryFile

import utilities.common_constants as common_constants


class SessionConfiguration:
    @staticmethod
    def update_config_file(updated_config):
        """
        Merge updated_config into the configuration file.  The new content is written
        to a temporary file in the same folder and renamed over the old file, so a
        reader never sees half a file.
        """
        if not updated_config:
            # Updated config has nothing in it. Skipping.
            return
        new_config = dict(SessionConfiguration.get_config_data())
        new_config.update(updated_config)

        config_folder = os.path.dirname(os.path.abspath(common_constants.CONFIG_FILE_NAME))
        os.makedirs(config_folder, exist_ok=True)
        with NamedTemporaryFile(
            mode="w", dir=config_folder, prefix="config-atomic", delete=False
        ) as fp:
            json.dump(new_config, fp)
            fp.flush()
            os.fsync(fp.fileno())

        os.replace(fp.name, common_constants.CONFIG_FILE_NAME)
        os.chmod(common_constants.CONFIG_FILE_NAME, 0o644)

    @staticmethod
    def get_config_data():
        config_file_path = Path(common_constants.CONFIG_FILE_NAME)
        if config_file_path.is_file():
            with open(common_constants.CONFIG_FILE_NAME) as config_file:
                return json.load(config_file)
        return SessionConfiguration.get_default_config()

    @staticmethod
    def _get_value(key, logger=None):
        try:
            config = SessionConfiguration.get_config_data()
            return config.get(key, SessionConfiguration.get_default_config()[key])
        except Exception as e:
            if logger is not None:
                logger.exception(
                    "Problems getting configuration when reading {0}, {1}".format(
                        key, str(e)
                    )
                )
            # Keep going since this exception is only for configuration
        return SessionConfiguration.get_default_config()[key]

    @staticmethod
    def get_elevator_code(logger=None):
        return SessionConfiguration._get_value(common_constants.CONFIG_ELEVATOR, logger)

    @staticmethod
    def get_technician(logger=None):
        return SessionConfiguration._get_value(common_constants.CONFIG_TECHNICIAN, logger)

    @staticmethod
    def get_timezone(logger=None):
        return SessionConfiguration._get_value(common_constants.CONFIG_TIMEZONE, logger)

    @staticmethod
    def get_default_config():
        return {
            common_constants.CONFIG_ELEVATOR: common_constants.DEFAULT_ELEVATOR_CODE,
            common_constants.CONFIG_TECHNICIAN: common_constants.DEFAULT_TECHNICIAN,
            common_constants.CONFIG_TIMEZONE: common_constants.LOCAL_TIMEZONE,
        }

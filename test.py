#!/usr/bin/env python3

import logging
import os
import unittest

# Universal test customization setup here
# by changing environment variables used by utilities.common_constants
os.environ["HEATMAP_DB_CONNECTION"] = "sqlite:////tmp/heatmap_test.db"
os.environ["HEATMAP_CONFIG_FILE_NAME"] = "/tmp/heatmap_test_config.json"
os.environ["HEATMAP_LOG_FOLDER"] = "/tmp"
os.environ["HEATMAP_TIMEZONE"] = "UTC"

from heatmap.tests.test_floor_detection import *
from heatmap.tests.test_heatmap_views import *
from recorder.tests.test_session_recorder import *
from recorder.tests.test_replay import *
from utilities.tests.test_configuration_methods import *
from utilities.tests.test_session_models import *
from utilities.tests.test_rotating_log import *


logging.disable(logging.CRITICAL)

if __name__ == "__main__":
    unittest.main()

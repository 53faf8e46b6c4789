import argparse
import logging
import sys

import recorder.constants as constants
from recorder.replay import read_samples_csv, record_samples, render_report
from utilities import common_constants
from utilities.db_utilities import create_tables, session_scope
from utilities.logging import create_rotating_log
from utilities.session_configuration import SessionConfiguration


parser = argparse.ArgumentParser(
    description="Record an accelerometer CSV as a maintenance session heat map"
)
parser.add_argument("samples", help="CSV file with timestamp,x,y,z columns")
parser.add_argument("-e", "--elevator", help="elevator code, e.g. ELV-001")
parser.add_argument("-t", "--technician", help="name of the technician")
parser.add_argument(
    "--save-defaults",
    action="store_true",
    help="store the given elevator and technician in the configuration file for later runs",
)
parser.add_argument(
    "--create-tables", action="store_true", help="create the database tables first"
)


def save_defaults(args, logger):
    defaults = {}
    if args.elevator:
        defaults[common_constants.CONFIG_ELEVATOR] = args.elevator
    if args.technician:
        defaults[common_constants.CONFIG_TECHNICIAN] = args.technician
    SessionConfiguration.update_config_file(defaults)
    logger.info("Saved defaults {0}".format(defaults))


def main(argv=None):
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG)
    logger = create_rotating_log(constants.APP_NAME)
    logger.debug("--- Starting heat map recorder app")

    try:
        if args.save_defaults:
            save_defaults(args, logger)

        elevator_code = args.elevator or SessionConfiguration.get_elevator_code(logger)
        technician = args.technician or SessionConfiguration.get_technician(logger)
        timezone = SessionConfiguration.get_timezone(logger)

        if args.create_tables:
            create_tables()
        with session_scope() as session:
            maintenance_session, report = record_samples(
                session,
                read_samples_csv(args.samples),
                elevator_code,
                technician,
                timezone=timezone,
            )
            logger.info(
                "Recorded {0} as session {1}".format(args.samples, maintenance_session.id)
            )
        for line in render_report(report):
            print(line)
    except Exception as e:
        logger.exception("Exception in heatmap recorder main(), {0}".format(str(e)))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

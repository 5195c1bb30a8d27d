"""
This module contains the highest level user-interaction, i.e.
logging setup, and the entry point used by run.py.
"""
import logging

from typing import List

from .constants import USAGE, MIN_MAX_DEGREE
from .dataexchange import Response, RunMode, StressConfig
from .stress import run_add_del_stress_suite


def config_logging(level: int = logging.DEBUG):
    # config logger
    FORMAT = "[%(filename)s:%(lineno)s - %(funcName)s ] %(message)s"
    # log to stdout
    logging.basicConfig(format=FORMAT, level=level)


def run_stress(config: StressConfig = None) -> Response:
    """
    Run stress suite
    """
    num_runs = run_add_del_stress_suite(config)
    return Response(True, status=RunMode.Stress, body=num_runs)


def parse_degrees(args: List[str]) -> Response:
    """
    parse degree arguments of the stress run mode
    """
    degrees = []
    for arg in args:
        if not arg.isdecimal() or int(arg) < MIN_MAX_DEGREE:
            return Response(
                False,
                error_message=f"Invalid degree [{arg}]; expected an integer >= {MIN_MAX_DEGREE}",
            )
        degrees.append(int(arg))
    return Response(True, body=tuple(degrees))


def parse_args_and_start(args: List[str]) -> Response:
    """
    parse args and starts
    :return:
    """
    if len(args) < 1:
        print("Error: run-mode not specified")
        print(USAGE)
        return Response(False, error_message="run-mode not specified")

    runmode = args[0].lower()
    if runmode == "stress":
        config_logging(logging.INFO)
        resp = parse_degrees(args[1:])
        if not resp.success:
            print(f"Error: {resp.error_message}")
            return resp
        config = StressConfig(max_degrees=resp.body) if resp.body else StressConfig()
        resp = run_stress(config)
        print(f"Stress suite succeeded with {resp.body} runs")
        return resp
    elif runmode == "help":
        print(USAGE)
        return Response(True, status=RunMode.Help)
    else:
        print(f"Error: Invalid run mode [{runmode}]")
        print(USAGE)
        return Response(False, error_message=f"Invalid run mode [{runmode}]")

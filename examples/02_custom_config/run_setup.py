"""
Programmatic Setup Example

Runs the same phases as the snowkit command, with a YAML configuration and
a named connection, and prints the summary.

    SNOWFLAKE_CONNECTION_NAME=dev python run_setup.py
"""

import logging
from pathlib import Path

from snowkit.cli import run_setup
from snowkit.client import SnowparkResourceClient
from snowkit.config import load_config
from snowkit.connection import get_session
from snowkit.orchestrator import Orchestrator
from snowkit.report import format_phase, get_summary

logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

config = load_config(Path(__file__).parent / "monai_small.yml")
session = get_session()
try:
    orchestrator = Orchestrator(SnowparkResourceClient(session), config.orchestrator)
    phases = run_setup(orchestrator, config, session)
finally:
    session.close()

for title, outcomes in phases.items():
    print(format_phase(title, outcomes))
print(get_summary(phases))

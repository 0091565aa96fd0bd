"""Run formulas inside an isolated container runtime."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

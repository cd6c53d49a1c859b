"""[PARALLEL:RUNNER] for [PARALLEL:CUSTOM:team]"""
import sys

from behave.__main__ import main

sys.exit(main([[PARALLEL:FEATURE]]))

# HbA1c Report Tracker Application
"""
HbA1c Report Tracker Application

This package provides functionality for uploading medical reports, detecting
HbA1c readings in them, summarizing them with an LLM and describing how the
readings trend over time.
"""

# Import key modules for easy access
from glycotrack.config.constants import APP_DIR, ROOT_DIR
from glycotrack.utils.logger import logger

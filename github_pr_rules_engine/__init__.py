"""
GitHub PR Rules Engine

Evaluates a small rule language against the live state of a GitHub pull
request, runs the actions its workflows trigger and publishes a single
report comment summarising the run.
"""

__version__ = "1.0.0"
__author__ = "Development Team"
__email__ = "dev@example.com"

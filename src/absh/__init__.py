"""
absh - A/B testing for shell scripts.

Run competing script variants in rounds, measure them, compare the results.
"""

from absh.experiment import Experiment, ExperimentName
from absh.report import Report, render_report

__version__ = "0.3.0"
__all__ = ["Experiment", "ExperimentName", "Report", "render_report", "__version__"]

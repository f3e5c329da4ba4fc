"""Body composition forecasting.

Linear trend, energy-balance projection, Holt smoothing forecast and
milestone detection over dated weight/body-fat measurements.
"""

from __future__ import annotations

import logging

__version__ = "0.1.0"

logging.getLogger(__name__).addHandler(logging.NullHandler())

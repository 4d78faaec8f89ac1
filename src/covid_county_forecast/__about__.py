__all__ = [
    "__title__",
    "__summary__",
    "__uri__",
    "__version__",
    "__author__",
    "__email__",
    "__license__",
    "__copyright__",
]

__title__ = "covid-county-forecast"
__summary__ = "Two week ahead county level COVID-19 case forecasts from public data."
__uri__ = ""

__version__ = "0.1.0"

__author__ = "The County Forecast Team"
__email__ = ""

__license__ = "GNU GPLv3"
__copyright__ = f"Copyright 2020 {__author__}"

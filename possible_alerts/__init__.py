"""
Possible Alerts

Lists every alert that could fire against each Orion node, interface
and volume as one flat table.
"""

__version__ = "0.1.0"

"""
Service simulator.

Test double that answers REST, SOAP and broker messages by playing
scripted scenarios.
"""

__version__ = "0.1.0"

"""
Sample scenarios.

Importing this package registers the samples on the default registry; add
"simulator.samples" to SIMULATOR_SCENARIO_MODULES to serve them.
"""

from simulator.samples import fax, hello  # noqa: F401

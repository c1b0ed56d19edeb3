"""
E-bike drivetrain simulator.

Component sizing, time-stepped ride simulation and wiring analysis,
served over a FastAPI backend.
"""

__version__ = "0.1.0"

"""Mini README: HTTP interface for droneplanner.

Exports the FastAPI application factory served by ``main_planner.py serve``.
The command line front end lives in the root-level ``main_planner.py``.
"""

from .web_app import create_application

__all__ = ["create_application"]

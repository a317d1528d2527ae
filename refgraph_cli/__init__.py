"""RefGraph CLI: dependency trees for solution, project and assembly references."""

__version__ = "1.0.0"

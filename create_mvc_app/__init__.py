"""create-mvc-app: scaffold Express MVC starter projects from the command line."""

__version__ = "1.0.0"

"""Project metadata for mailkit."""

__app_name__ = "mailkit"
__version__ = "0.1.0"
__author__ = "mailkit developers"
__description__ = "Validated, build-once e-mail message construction with cached transport sessions."

__all__ = ["__app_name__", "__author__", "__description__", "__version__"]

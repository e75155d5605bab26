"""Find-and-highlight for rendered, tag-annotated text."""

__version__ = "0.1.0"

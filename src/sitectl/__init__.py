"""sitectl — frontmatter content core for static-site projects."""

__version__ = "0.1.0"

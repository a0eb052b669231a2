"""
joplin-export: export displayed emails into a Joplin notebook.

The package turns one email into a note, links tags to it and uploads its
attachments as resources, all through the Joplin Data API.
"""

__version__ = "0.3.0"

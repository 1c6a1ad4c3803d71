"""Client side ("modern") page canvas model for SharePoint.

Parses the canvas markup stored on a modern page into a tree of
sections, columns and controls, and renders the tree back into markup
the host platform accepts.
"""

__version__ = "0.3.0"

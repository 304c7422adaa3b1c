"""
ReFormat - adaptive learning material restructuring.

Classifies a learner into a cognitive-accessibility profile, asks a
generator to restructure an uploaded artifact into a multi-modal
document, and renders it through interchangeable terminal views.
"""

__version__ = "1.0.0"

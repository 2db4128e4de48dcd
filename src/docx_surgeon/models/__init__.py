"""
Node classes of the segmentation model.
"""

from docx_surgeon.models.change import Change
from docx_surgeon.models.run import Run
from docx_surgeon.models.text import Text

__all__ = ["Change", "Run", "Text"]

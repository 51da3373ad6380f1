"""
Utility modules for the claimfill document assistant.
"""

from . import doc_filler
from . import template_utils

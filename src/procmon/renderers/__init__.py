"""
Presentation of statistics and history: text tables and HTML charts.
"""

from .charts import FIGURE_BUILDERS, ChartWriter
from .text import RENDERERS, get_renderer

__all__ = ["FIGURE_BUILDERS", "ChartWriter", "RENDERERS", "get_renderer"]

from dataviz_plot._common import DEFAULT_MARGIN, NO_MARGIN, Margin, Series
from dataviz_plot.bar import bar_chart, histogram, lollipop_chart, stacked_bar_chart
from dataviz_plot.financial import CandleStyle, candlestick_chart, ohlc_chart
from dataviz_plot.heatmap import (
    HeatmapDay,
    linear_heatmap,
    linear_heatmap_terminal,
    weeks_heatmap,
    weeks_heatmap_terminal,
)
from dataviz_plot.hierarchical import (
    circle_packing_chart,
    dendrogram_chart,
    icicle_chart,
    sunburst_chart,
    treemap_chart,
)
from dataviz_plot.line import (
    ConfidenceBand,
    area_chart,
    confidence_band_chart,
    connected_scatter,
    line_chart,
    stacked_area_chart,
    stream_chart,
)
from dataviz_plot.parallel import parallel_coordinates
from dataviz_plot.radial import chord_diagram, circular_bar_chart, pie_chart, radar_chart
from dataviz_plot.sankey import sankey_chart
from dataviz_plot.scatter import MarkerShape, marker, scatter_plot
from dataviz_plot.statistical import (
    CapStyle,
    ErrorBar,
    box_plot,
    correlogram,
    density_plot,
    error_bar_chart,
    ridgeline_plot,
    violin_plot,
)
from dataviz_plot.wordcloud import Word, WordLayout, layout_words, word_cloud

__all__ = [
    "CandleStyle",
    "CapStyle",
    "ConfidenceBand",
    "DEFAULT_MARGIN",
    "ErrorBar",
    "HeatmapDay",
    "Margin",
    "MarkerShape",
    "NO_MARGIN",
    "Series",
    "Word",
    "WordLayout",
    "area_chart",
    "bar_chart",
    "box_plot",
    "candlestick_chart",
    "chord_diagram",
    "circle_packing_chart",
    "circular_bar_chart",
    "confidence_band_chart",
    "connected_scatter",
    "correlogram",
    "dendrogram_chart",
    "density_plot",
    "error_bar_chart",
    "histogram",
    "icicle_chart",
    "layout_words",
    "line_chart",
    "linear_heatmap",
    "linear_heatmap_terminal",
    "lollipop_chart",
    "marker",
    "ohlc_chart",
    "parallel_coordinates",
    "pie_chart",
    "radar_chart",
    "ridgeline_plot",
    "sankey_chart",
    "scatter_plot",
    "stacked_area_chart",
    "stacked_bar_chart",
    "stream_chart",
    "sunburst_chart",
    "treemap_chart",
    "violin_plot",
    "weeks_heatmap",
    "weeks_heatmap_terminal",
    "word_cloud",
]

"""
Line chart rendering for numeric table columns.
Maps a numeric series onto a fixed pixel canvas and draws grid, axes, title,
data line, point markers, tick labels, a statistics box and a legend.
"""

import io
import os
import glob
import logging
import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import pandas as pd
import seaborn as sns
import matplotlib.pyplot as plt
import matplotlib.font_manager as fm
from matplotlib.patches import Circle, Rectangle

import config
from error_handler import EmptyDataError
from image_sink import prepare_output_directory, cleanup_created_directories, write_atomically

logger = logging.getLogger('table_grapher.chart_renderer')

# Set matplotlib to use non-interactive backend
plt.switch_backend('Agg')

# Suppress matplotlib categorical units warning
warnings.filterwarnings('ignore', category=UserWarning, module='matplotlib.category')

# Register local fonts from the fonts directory
def _register_local_fonts(fonts_dir=None):
    """Register fonts from the configured fonts directory."""
    fonts_dir = fonts_dir or config.fonts_dir

    if not os.path.exists(fonts_dir):
        logger.debug("Local fonts directory not found at %s", fonts_dir)
        return 0

    # Find all font files in the fonts directory
    font_files = glob.glob(os.path.join(fonts_dir, '*.otf')) + glob.glob(os.path.join(fonts_dir, '*.ttf'))

    if not font_files:
        logger.warning("No font files found in %s", fonts_dir)
        return 0

    registered = 0
    for font_file in font_files:
        try:
            fm.fontManager.addfont(font_file)
            registered += 1
            logger.info("Registered local font: %s", os.path.basename(font_file))
        except (OSError, RuntimeError, ValueError) as e:
            logger.warning("Failed to register font %s: %s", font_file, e)

    logger.info("Registered %d local font(s) from %s", registered, fonts_dir)
    return registered

# Register fonts on module load
_register_local_fonts()

# Drawing layers, bottom to top
LAYERS = (
    'background', 'grid', 'axes', 'title', 'line', 'points', 'y_labels',
    'x_labels', 'axis_labels', 'statistics', 'legend', 'annotations',
)
ZORDER = {name: index + 1 for index, name in enumerate(LAYERS)}

GRID_DIVISIONS = 10
Y_TICK_COUNT = 6
MAX_X_LABELS = 10
POINT_RADIUS = 5


@dataclass
class ChartSpec:
    """Canvas geometry, palette and labels for one chart."""
    width: int = 800
    height: int = 600
    padding: int = 60
    background_color: str = '#ffffff'
    grid_color: str = '#e0e0e0'
    axis_color: str = '#333333'
    line_color: str = '#2563eb'
    point_color: str = '#dc2626'
    title: str = 'Numeric Data Visualization'
    x_axis_label: str = 'Record Number'
    y_axis_label: str = 'Value'
    series_name: Optional[str] = None
    dpi: int = 100

    @property
    def plot_width(self) -> int:
        return self.width - 2 * self.padding

    @property
    def plot_height(self) -> int:
        return self.height - 2 * self.padding

    @property
    def legend_label(self) -> str:
        return self.series_name or self.y_axis_label


@dataclass
class SeriesStatistics:
    count: int
    minimum: float
    maximum: float
    mean: float

    def as_lines(self) -> List[str]:
        return [
            f"Count: {self.count}",
            f"Min: {format_number(self.minimum)}",
            f"Max: {format_number(self.maximum)}",
            f"Avg: {format_number(self.mean)}",
        ]


@dataclass
class RenderedImage:
    """A rendered PNG. path is set once the image has been persisted."""
    data: bytes = field(repr=False)
    width: int
    height: int
    point_count: int
    statistics: SeriesStatistics
    path: Optional[str] = None


def format_number(value: float) -> str:
    """Fixed two-decimal formatting used for every number on the chart."""
    return f"{value:,.2f}"


def compute_statistics(series: Sequence[float]) -> SeriesStatistics:
    """Count, min, max and mean of a non-empty series."""
    values = pd.Series(list(series), dtype=float)
    if values.empty:
        raise EmptyDataError(config.ERROR_MESSAGES['empty_series'])
    return SeriesStatistics(
        count=int(values.count()),
        minimum=float(values.min()),
        maximum=float(values.max()),
        mean=float(values.mean()),
    )


def compute_points(series: Sequence[float], spec: ChartSpec) -> List[Tuple[float, float]]:
    """
    Map series values to canvas pixel coordinates (origin top-left).

    Points are spread evenly across the plot width in series order. A constant
    series uses a substituted range of 1, which puts every point on the bottom
    edge of the plot rectangle instead of dividing by zero.
    """
    count = len(series)
    if count == 0:
        return []

    minimum = min(series)
    value_range = max(series) - minimum
    if value_range == 0:
        value_range = 1

    step = spec.plot_width / max(1, count - 1)
    points = []
    for i, value in enumerate(series):
        x = spec.padding + step * i
        normalized = (value - minimum) / value_range
        y = spec.padding + spec.plot_height - normalized * spec.plot_height
        points.append((x, y))
    return points


def x_label_stride(count: int) -> int:
    """Index stride that keeps roughly MAX_X_LABELS ordinal labels on the X axis."""
    if count <= 0:
        return 1
    return max(1, count // min(MAX_X_LABELS, count))


def y_tick_values(minimum: float, maximum: float, ticks: int = Y_TICK_COUNT) -> List[float]:
    """Evenly spaced tick values from maximum (top) down to minimum (bottom)."""
    intervals = ticks - 1
    return [minimum + ((maximum - minimum) / intervals) * (intervals - i) for i in range(ticks)]


def _px(pixels: float, dpi: int) -> float:
    """Convert a pixel size to matplotlib points for the given dpi."""
    return pixels * 72.0 / dpi


class ChartRenderer:
    """Renders a single numeric series as a line chart image."""

    def __init__(self):
        """Initialize the chart renderer."""
        sns.set_theme(style="white")
        plt.rcParams.update({
            'font.family': 'sans-serif',
            'font.sans-serif': ['DejaVu Sans', 'Arial', 'Liberation Sans', 'sans-serif'],
            'axes.unicode_minus': False,
        })

    def render(
        self,
        series: Sequence[float],
        spec: Optional[ChartSpec] = None,
        output_path: Optional[str] = None,
    ) -> RenderedImage:
        """
        Render a series and optionally persist it.

        Args:
            series: Values in X-axis order
            spec: Canvas and label configuration, defaults to ChartSpec()
            output_path: Destination file; its parent directory is created
                if needed. When omitted the image is only returned in memory.

        Returns:
            RenderedImage holding the PNG bytes (and path when persisted)

        Raises:
            EmptyDataError: series is empty
            OutputError: the destination cannot be prepared or written
        """
        spec = spec or ChartSpec()
        values = [float(value) for value in series]
        if not values:
            raise EmptyDataError(config.ERROR_MESSAGES['empty_series'])

        created_dirs = []
        if output_path:
            created_dirs = prepare_output_directory(os.path.dirname(os.path.abspath(output_path)))

        try:
            statistics = compute_statistics(values)
            data = self._draw_chart(values, spec, statistics)
            if output_path:
                write_atomically(output_path, data)
        except Exception:
            cleanup_created_directories(created_dirs)
            raise

        if output_path:
            logger.info("Rendered %d point(s) to %s", len(values), output_path)
        else:
            logger.info("Rendered %d point(s) in memory", len(values))

        return RenderedImage(
            data=data,
            width=spec.width,
            height=spec.height,
            point_count=len(values),
            statistics=statistics,
            path=output_path,
        )

    def _draw_chart(self, values: List[float], spec: ChartSpec, statistics: SeriesStatistics) -> bytes:
        """Compose every layer on a pixel-space canvas and encode it as PNG."""
        fig = plt.figure(figsize=(spec.width / spec.dpi, spec.height / spec.dpi), dpi=spec.dpi)
        try:
            ax = fig.add_axes([0, 0, 1, 1])
            ax.set_xlim(0, spec.width)
            ax.set_ylim(spec.height, 0)
            ax.set_axis_off()

            points = compute_points(values, spec)

            self._draw_background(ax, spec)
            self._draw_grid(ax, spec)
            self._draw_axes(ax, spec)
            self._draw_title(ax, spec)
            self._draw_data(ax, spec, points)
            self._draw_y_labels(ax, spec, statistics)
            self._draw_x_labels(ax, spec, points)
            self._draw_axis_labels(ax, spec)
            self._draw_statistics_box(ax, spec, statistics)
            self._draw_legend(ax, spec)
            self._draw_value_annotations(ax, spec, values, points)

            buf = io.BytesIO()
            fig.savefig(buf, format='png', dpi=spec.dpi, facecolor=spec.background_color)
            return buf.getvalue()
        finally:
            plt.close(fig)

    def _text(self, ax, x, y, text, spec, size, layer, **kwargs):
        kwargs.setdefault('color', spec.axis_color)
        return ax.text(x, y, text, fontsize=_px(size, spec.dpi), zorder=ZORDER[layer], **kwargs)

    def _draw_background(self, ax, spec: ChartSpec):
        ax.add_patch(Rectangle(
            (0, 0), spec.width, spec.height,
            facecolor=spec.background_color, edgecolor='none', zorder=ZORDER['background']
        ))

    def _draw_grid(self, ax, spec: ChartSpec):
        """Draw a 10x10 grid over the plot rectangle."""
        left, top = spec.padding, spec.padding
        right, bottom = spec.padding + spec.plot_width, spec.padding + spec.plot_height
        width = _px(1, spec.dpi)

        for i in range(GRID_DIVISIONS + 1):
            x = left + (spec.plot_width / GRID_DIVISIONS) * i
            ax.plot([x, x], [top, bottom], color=spec.grid_color, linewidth=width,
                    zorder=ZORDER['grid'])

        for i in range(GRID_DIVISIONS + 1):
            y = top + (spec.plot_height / GRID_DIVISIONS) * i
            ax.plot([left, right], [y, y], color=spec.grid_color, linewidth=width,
                    zorder=ZORDER['grid'])

    def _draw_axes(self, ax, spec: ChartSpec):
        left, top = spec.padding, spec.padding
        right, bottom = spec.padding + spec.plot_width, spec.padding + spec.plot_height
        width = _px(2, spec.dpi)

        # Y-axis
        ax.plot([left, left], [top, bottom], color=spec.axis_color, linewidth=width,
                zorder=ZORDER['axes'], solid_capstyle='butt')
        # X-axis
        ax.plot([left, right], [bottom, bottom], color=spec.axis_color, linewidth=width,
                zorder=ZORDER['axes'], solid_capstyle='butt')

    def _draw_title(self, ax, spec: ChartSpec):
        self._text(ax, spec.width / 2, 30, spec.title, spec, 20, 'title',
                   ha='center', va='top', fontweight='bold')

    def _draw_data(self, ax, spec: ChartSpec, points: List[Tuple[float, float]]):
        """Connect consecutive points, then mark every point."""
        if len(points) > 1:
            xs = [x for x, _ in points]
            ys = [y for _, y in points]
            ax.plot(xs, ys, color=spec.line_color, linewidth=_px(3, spec.dpi),
                    zorder=ZORDER['line'], solid_joinstyle='round')

        for x, y in points:
            ax.add_patch(Circle(
                (x, y), radius=POINT_RADIUS,
                facecolor=spec.point_color,
                edgecolor=spec.background_color,
                linewidth=_px(2, spec.dpi),
                zorder=ZORDER['points'],
            ))

    def _draw_y_labels(self, ax, spec: ChartSpec, statistics: SeriesStatistics):
        intervals = Y_TICK_COUNT - 1
        for i, value in enumerate(y_tick_values(statistics.minimum, statistics.maximum)):
            y = spec.padding + (spec.plot_height / intervals) * i
            self._text(ax, spec.padding - 10, y, format_number(value), spec, 12, 'y_labels',
                       ha='right', va='center')

    def _draw_x_labels(self, ax, spec: ChartSpec, points: List[Tuple[float, float]]):
        stride = x_label_stride(len(points))
        label_y = spec.height - spec.padding + 20
        for i in range(0, len(points), stride):
            self._text(ax, points[i][0], label_y, str(i + 1), spec, 12, 'x_labels',
                       ha='center', va='top')

    def _draw_axis_labels(self, ax, spec: ChartSpec):
        """Draw the X description at the bottom and the rotated Y description on the left."""
        self._text(ax, spec.width / 2, spec.height - 15, spec.x_axis_label, spec, 14, 'axis_labels',
                   ha='center', va='bottom')
        self._text(ax, 15, spec.height / 2, spec.y_axis_label, spec, 14, 'axis_labels',
                   ha='center', va='center', rotation=90)

    def _draw_statistics_box(self, ax, spec: ChartSpec, statistics: SeriesStatistics):
        """Draw Count/Min/Max/Avg in a box anchored to the top-right of the plot."""
        lines = statistics.as_lines()
        line_height = 18
        inner = 8
        box_width = 150
        box_height = line_height * len(lines) + inner * 2
        left = spec.padding + spec.plot_width - box_width - 10
        top = spec.padding + 10

        ax.add_patch(Rectangle(
            (left, top), box_width, box_height,
            facecolor=spec.background_color, edgecolor=spec.axis_color,
            linewidth=_px(1, spec.dpi), alpha=0.9, zorder=ZORDER['statistics'],
        ))
        for i, line in enumerate(lines):
            self._text(ax, left + inner, top + inner + line_height * i, line, spec, 12, 'statistics',
                       ha='left', va='top')

    def _draw_legend(self, ax, spec: ChartSpec):
        """Draw a legend box at the top-left of the plot with the line and point glyphs."""
        left = spec.padding + 10
        top = spec.padding + 10
        box_width = 160
        box_height = 52

        ax.add_patch(Rectangle(
            (left, top), box_width, box_height,
            facecolor=spec.background_color, edgecolor=spec.axis_color,
            linewidth=_px(1, spec.dpi), alpha=0.9, zorder=ZORDER['legend'],
        ))

        line_y = top + 16
        ax.plot([left + 10, left + 34], [line_y, line_y], color=spec.line_color,
                linewidth=_px(3, spec.dpi), zorder=ZORDER['legend'])
        self._text(ax, left + 44, line_y, spec.legend_label, spec, 12, 'legend',
                   ha='left', va='center')

        point_y = top + 36
        ax.add_patch(Circle(
            (left + 22, point_y), radius=POINT_RADIUS,
            facecolor=spec.point_color, edgecolor=spec.background_color,
            linewidth=_px(2, spec.dpi), zorder=ZORDER['legend'],
        ))
        self._text(ax, left + 44, point_y, 'Data Points', spec, 12, 'legend',
                   ha='left', va='center')

    def _draw_value_annotations(self, ax, spec: ChartSpec, values: List[float],
                                points: List[Tuple[float, float]]):
        """Label a subset of points with their value, using the X label stride."""
        stride = x_label_stride(len(points))
        for i in range(0, len(points), stride):
            x, y = points[i]
            self._text(ax, x, y - POINT_RADIUS - 4, format_number(values[i]), spec, 10,
                       'annotations', ha='center', va='bottom')


_chart_renderer = None


def render_series(series: Sequence[float], spec: Optional[ChartSpec] = None,
                  output_path: Optional[str] = None) -> RenderedImage:
    """
    Convenience function to render a series with a shared renderer.

    Args:
        series: Values in X-axis order
        spec: Optional chart configuration
        output_path: Optional destination file

    Returns:
        RenderedImage
    """
    global _chart_renderer
    if _chart_renderer is None:
        _chart_renderer = ChartRenderer()
    return _chart_renderer.render(series, spec, output_path)

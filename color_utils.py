"""
Unified Color System for CSV Insight charts
Light theme only - palettes for bar, pie, histogram, scatter and treemap figures
"""

# Bar chart palette (10 slots, one per bar at the default limit)
BAR_COLORS = [
    '#4361EE', '#3A0CA3', '#7209B7', '#F72585', '#4CC9F0',
    '#560BAD', '#480CA8', '#3A0CA3', '#3F37C9', '#4361EE'
]

# Pie chart palette (8 slices at the default limit)
PIE_COLORS = [
    '#4361EE', '#3A0CA3', '#7209B7', '#F72585', '#4CC9F0',
    '#560BAD', '#480CA8', '#3A0CA3'
]

PRIMARY_COLOR = '#4361EE'
PRIMARY_BORDER = '#3A0CA3'
OTHERS_COLOR = '#ADB5BD'


def get_unified_color_schemes():
    """
    Unified color scheme for light theme

    Returns:
        dict: Plot styling and difference colors
    """
    return {
        'background': 'white',
        'paper': 'white',
        'text': 'black',
        'grid': '#e6e6e6',
        'point_color': PRIMARY_COLOR,
        'point_border': PRIMARY_BORDER,
        'positive_diff': '#16a34a',   # green
        'negative_diff': '#dc2626',   # red
        'theme': 'light'
    }


def palette_slice(palette, n):
    """
    First n colors of a palette, cycling when n exceeds its length

    Args:
        palette (list): Base colors
        n (int): Number of colors needed

    Returns:
        list: n color strings
    """
    if n <= 0 or not palette:
        return []
    return [palette[i % len(palette)] for i in range(n)]


def get_correlation_color(value, highlight_threshold=0.7):
    """
    Cell color for a correlation coefficient

    Strong positive -> blue, strong negative -> orange,
    moderate -> purple with opacity scaled on |r|, weak or NaN -> light gray.
    """
    if value is None or value != value:
        return '#f1f1f1'

    abs_value = abs(value)

    if value > highlight_threshold:
        return '#0EA5E9'
    if value < -highlight_threshold:
        return '#F97316'

    if abs_value > 0.3:
        opacity = min(1.0, (abs_value - 0.3) / 0.4)
        return f'rgba(139, 92, 246, {opacity:.2f})'

    return '#f1f1f1'


def get_difference_color(value):
    """Green for positive, red for negative, gray for zero or non-numeric"""
    scheme = get_unified_color_schemes()
    if value is None or value != value or value == 0:
        return 'gray'
    return scheme['positive_diff'] if value > 0 else scheme['negative_diff']

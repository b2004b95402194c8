# tests/test_color_utils.py
from color_utils import (
    BAR_COLORS,
    get_correlation_color,
    get_difference_color,
    get_unified_color_schemes,
    palette_slice,
)


class TestPaletteSlice:

    def test_cycles_past_palette_length(self):
        colors = palette_slice(BAR_COLORS, 12)
        assert len(colors) == 12
        assert colors[10] == BAR_COLORS[0]

    def test_empty(self):
        assert palette_slice(BAR_COLORS, 0) == []
        assert palette_slice([], 3) == []


class TestColorRules:

    def test_difference_colors(self):
        scheme = get_unified_color_schemes()
        assert get_difference_color(2.0) == scheme['positive_diff']
        assert get_difference_color(-2.0) == scheme['negative_diff']
        assert get_difference_color(0.0) == 'gray'
        assert get_difference_color(None) == 'gray'

    def test_correlation_colors(self):
        assert get_correlation_color(0.9) == '#0EA5E9'
        assert get_correlation_color(-0.9) == '#F97316'
        assert get_correlation_color(0.1) == '#f1f1f1'
        assert get_correlation_color(float('nan')) == '#f1f1f1'
        assert get_correlation_color(0.5).startswith('rgba(139, 92, 246')

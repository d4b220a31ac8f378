"""Tests for RenderSettings and the shared validators."""

import pytest


class TestRenderSettings:
    """Tests for RenderSettings."""

    def test_defaults(self):
        """Test default settings use the default depth budget and gamma."""
        from whitted.config import DEFAULT_DEPTH_BUDGET, DISPLAY_GAMMA, RenderSettings

        settings = RenderSettings()
        assert settings.depth_budget == DEFAULT_DEPTH_BUDGET == 10
        assert settings.gamma == DISPLAY_GAMMA

    def test_aspect_ratio(self):
        """Test aspect_ratio is width / height."""
        from whitted.config import RenderSettings

        assert RenderSettings(width=400, height=200).aspect_ratio == 2.0

    @pytest.mark.parametrize(
        "kwargs, match",
        [
            ({"width": 0}, "dimensions"),
            ({"height": -10}, "dimensions"),
            ({"width": 10000}, "exceed"),
            ({"depth_budget": -1}, "non-negative"),
            ({"gamma": 0.0}, "Gamma"),
        ],
    )
    def test_invalid_settings(self, kwargs, match):
        """Test invalid values raise ValueError."""
        from whitted.config import RenderSettings

        with pytest.raises(ValueError, match=match):
            RenderSettings(**kwargs)

    def test_zero_depth_budget_allowed(self):
        """Test a budget of 0 (no reflections) is valid."""
        from whitted.config import RenderSettings

        assert RenderSettings(depth_budget=0).depth_budget == 0

"""Chart series type definitions.

Dashboard XML describes each chart series with a free-form `SeriesType` token.
`series_type_from_token` maps those tokens onto a closed enumeration so the
rendering layer never deals with unknown strings.
"""

from __future__ import annotations

from enum import StrEnum


class SeriesType(StrEnum):
    """Supported chart series types.

    Values are stable identifiers used by the renderer and JSON payloads.
    """

    bar = "bar"
    stacked_bar = "stacked_bar"
    full_stacked_bar = "full_stacked_bar"
    point = "point"
    line = "line"
    stacked_line = "stacked_line"
    full_stacked_line = "full_stacked_line"
    step_line = "step_line"
    spline = "spline"
    area = "area"
    stacked_area = "stacked_area"
    full_stacked_area = "full_stacked_area"
    step_area = "step_area"
    spline_area = "spline_area"


DEFAULT_SERIES_TYPE = SeriesType.bar

_TOKENS: dict[str, SeriesType] = {
    "bar": SeriesType.bar,
    "column": SeriesType.bar,
    "stackedbar": SeriesType.stacked_bar,
    "fullstackedbar": SeriesType.full_stacked_bar,
    "point": SeriesType.point,
    "scatter": SeriesType.point,
    "line": SeriesType.line,
    "stackedline": SeriesType.stacked_line,
    "fullstackedline": SeriesType.full_stacked_line,
    "stepline": SeriesType.step_line,
    "spline": SeriesType.spline,
    "area": SeriesType.area,
    "stackedarea": SeriesType.stacked_area,
    "fullstackedarea": SeriesType.full_stacked_area,
    "steparea": SeriesType.step_area,
    "splinearea": SeriesType.spline_area,
}

LINE_LIKE = frozenset(
    {
        SeriesType.line,
        SeriesType.stacked_line,
        SeriesType.full_stacked_line,
        SeriesType.step_line,
        SeriesType.spline,
    }
)
AREA_LIKE = frozenset(
    {
        SeriesType.area,
        SeriesType.stacked_area,
        SeriesType.full_stacked_area,
        SeriesType.step_area,
        SeriesType.spline_area,
    }
)
STACKED = frozenset(
    {
        SeriesType.stacked_bar,
        SeriesType.full_stacked_bar,
        SeriesType.stacked_line,
        SeriesType.full_stacked_line,
        SeriesType.stacked_area,
        SeriesType.full_stacked_area,
    }
)


def series_type_from_token(token: str | None) -> SeriesType:
    """Map an external series type token to a SeriesType.

    Lookup ignores case, spaces, dashes and underscores, so "StackedBar",
    "stacked_bar" and "Stacked Bar" are equivalent.

    Args:
        token: Raw token from the dashboard configuration.

    Returns:
        The matching SeriesType, or `SeriesType.bar` for missing or unmapped
        tokens.
    """

    if not token:
        return DEFAULT_SERIES_TYPE
    normalized = "".join(ch for ch in token.lower() if ch not in " -_")
    return _TOKENS.get(normalized, DEFAULT_SERIES_TYPE)

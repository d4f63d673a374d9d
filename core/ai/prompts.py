"""Prompt construction for chart-image generation.

Everything here is pure string/dict building so the instruction sent to the
image model can be tested without any network access.
"""

from __future__ import annotations

from typing import Any

from core.chart_settings import ChartConfig

GENERIC_CHART_TITLE = "Annual Target Report"
_NOT_PROVIDED = "Not provided"


def chart_image_title(config: ChartConfig) -> str:
    """Return the chart title derived from program service and period.

    Args:
        config: Chart configuration.

    Returns:
        `"Annual Target Report: <program> (Period: <period>)"`, dropping the
        parts whose fields are missing, or the generic title when both are.
    """

    title = GENERIC_CHART_TITLE
    if config.program_service:
        title = f"{title}: {config.program_service}"
    if config.period:
        title = f"{title} (Period: {config.period})"
    return title


def build_chart_image_prompt(config: ChartConfig) -> str:
    """Build the natural-language instruction for the image model."""

    design_rules = [
        "Chart type: draw a horizontal bar chart.",
        "Background: use a clean white or very light off-white background.",
        "Color palette: use a modern, professional blue and green palette for the bars, applied consistently.",
        (
            "Labels: every bar must have a clear label on the Y axis (left) showing the program name, "
            "and its value must be printed clearly at the right end of the bar."
        ),
        f'Title: use the title "{chart_image_title(config)}".',
        "Font: use a modern, readable sans-serif font such as Inter, Helvetica or Arial.",
        "Composition: leave enough padding around the chart and do not crowd the elements.",
        "Output: a high-quality PNG image.",
    ]
    numbered = "\n".join(f"{index}. {rule}" for index, rule in enumerate(design_rules, start=1))
    return (
        "You are an AI graphic designer specialised in data visualisation. Create a clean, "
        "professional and easy-to-read horizontal bar chart image from the data below.\n"
        "\n"
        "Design instructions:\n"
        f"{numbered}\n"
        "\n"
        "Chart data:\n"
        f"- Program/service: {config.program_service or _NOT_PROVIDED}\n"
        f"- Period: {config.period or _NOT_PROVIDED}\n"
        f"- Person in charge: {config.person_in_charge or _NOT_PROVIDED}\n"
        "- Target data (one NAME=VALUE per line):\n"
        f"{config.target_data}\n"
        "\n"
        "Create the chart image according to the data and instructions above."
    )


def build_generation_request(config: ChartConfig) -> dict[str, Any]:
    """Return the JSON body for a Gemini `generateContent` image request."""

    return {
        "contents": [
            {
                "role": "user",
                "parts": [{"text": build_chart_image_prompt(config)}],
            }
        ],
        "generationConfig": {"responseModalities": ["TEXT", "IMAGE"]},
    }

#!/usr/bin/env python

"""
Flute Visualization
===================
Draws a bansuri hole diagram: the blow hole, six finger holes labelled with
the notes they produce, and any input notes the flute cannot play.
"""

import os
import uuid
import logging
from typing import Dict, Iterable, Optional, Sequence

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from bansuri.constants import HOLE_STATE_AVOID, HOLE_STATE_DEFAULT, HOLE_STATE_EXTRA
from bansuri.exceptions import BansuriError
from bansuri.holes import annotate_holes

logger = logging.getLogger(__name__)

ORIENTATIONS = ("horizontal", "vertical")

THEME_COLORS: Dict[str, Dict[str, str]] = {
    "light": {
        "background": "#faf7f2",
        "body": "#d9b77e",
        "text": "#222222",
        HOLE_STATE_DEFAULT: "#2e7d32",
        HOLE_STATE_AVOID: "#c62828",
        HOLE_STATE_EXTRA: "#ef6c00",
    },
    "dark": {
        "background": "#1e1e1e",
        "body": "#8d6e45",
        "text": "#eeeeee",
        HOLE_STATE_DEFAULT: "#66bb6a",
        HOLE_STATE_AVOID: "#ef5350",
        HOLE_STATE_EXTRA: "#ffa726",
    },
}


def safe_file_name(flute_name: str) -> str:
    """Make a flute name usable in a file name ('A#' -> 'Asharp')."""
    return flute_name.replace("#", "sharp")


def render_flute(
    scale: Sequence[str],
    input_notes: Iterable[str] = (),
    flute_name: str = "flute",
    theme: str = "light",
    orientation: str = "horizontal",
    output_dir: str = "output",
) -> Optional[str]:
    """
    Render a hole diagram of a flute to a PNG file.

    Args:
        scale: Seven scale notes, root first
        input_notes: Canonical notes to highlight
        flute_name: Flute name, used in the title and file name
        theme: 'light' or 'dark'
        orientation: 'horizontal' (blow hole on the left) or 'vertical'
            (blow hole on top)
        output_dir: Directory for the image

    Returns:
        Path to the generated image file or None if rendering fails
    """
    fig = None
    try:
        view = annotate_holes(scale, input_notes)
        colors = THEME_COLORS.get(theme, THEME_COLORS["light"])
        vertical = orientation == "vertical"

        hole_count = len(view.holes)
        extra_count = len(view.extra_notes)
        length = hole_count + (extra_count + 1 if extra_count else 0)

        figsize = (3, length * 0.9 + 1) if vertical else (length * 1.2 + 1, 3)
        fig, ax = plt.subplots(figsize=figsize)
        fig.patch.set_facecolor(colors["background"])
        ax.set_facecolor(colors["background"])

        positions = np.arange(hole_count, dtype=float)

        def place(along: float, across: float = 0.0):
            # Blow hole at the start of the instrument axis
            return (across, -along) if vertical else (along, across)

        # Flute body
        if vertical:
            body = plt.Rectangle((-0.5, -(hole_count - 0.5)), 1.0, hole_count, color=colors["body"], zorder=1)
        else:
            body = plt.Rectangle((-0.5, -0.5), hole_count, 1.0, color=colors["body"], zorder=1)
        ax.add_patch(body)

        for along, item in zip(positions, view.holes):
            radius = 0.38 if item.hole.is_blow else 0.32
            x, y = place(along)
            ax.add_patch(plt.Circle((x, y), radius, color=colors[item.state], zorder=2))
            ax.text(x, y, item.hole.note, ha="center", va="center",
                    fontsize=10, fontweight="bold", color="white", zorder=3)
            lx, ly = place(along, -0.8) if not vertical else place(along, 0.9)
            ax.text(lx, ly, item.hole.display_label, ha="center", va="center",
                    fontsize=8, color=colors["text"],
                    fontweight="bold" if item.hole.is_blow else "normal")

        # Notes outside the scale, set apart after the far end
        for offset, note in enumerate(view.extra_notes):
            x, y = place(hole_count + 1 + offset)
            ax.add_patch(plt.Circle((x, y), 0.32, color=colors[HOLE_STATE_EXTRA], zorder=2))
            ax.text(x, y, note, ha="center", va="center",
                    fontsize=10, fontweight="bold", color="white", zorder=3)

        span = (-1.5, 1.5)
        extent = (-1, length)
        if vertical:
            ax.set_xlim(*span)
            ax.set_ylim(-extent[1], -extent[0])
        else:
            ax.set_xlim(*extent)
            ax.set_ylim(*span)
        ax.set_aspect("equal")
        ax.axis("off")
        ax.set_title(f"{flute_name} flute", color=colors["text"])

        os.makedirs(output_dir, exist_ok=True)
        image_path = os.path.join(
            output_dir, f"flute_{safe_file_name(flute_name)}_{uuid.uuid4().hex}.png"
        )
        plt.savefig(image_path, facecolor=fig.get_facecolor(), bbox_inches="tight")
        return image_path

    except (BansuriError, OSError, ValueError, RuntimeError) as e:
        logger.error(f"Error creating flute visualization: {e}")
        return None

    finally:
        if fig is not None:
            plt.close(fig)

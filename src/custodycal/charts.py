# src/custodycal/charts.py

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

COLOR_MOTHER = '#FFADAD'
COLOR_FATHER = '#A0C4FF'


def create_share_chart(summary: dict, filename: str, colors: list[str] = None, subtitle: str = None):
    """
    Pie chart of Mother's and Father's days, saved as PNG.
    :param summary: result of statistics.summarize_custody().
    :param filename: output path, e.g. "share.png".
    :param colors: (optional) two colours, Mother first.
    :param subtitle: (optional) text below the chart.
    """
    values = [summary.get('mother', 0), summary.get('father', 0)]
    labels = ['Mother', 'Father']
    fig, ax = plt.subplots()
    if sum(values) == 0:
        # empty range: small placeholder image
        ax.text(0.5, 0.5, "No data", ha="center", va="center", fontsize=14)
        ax.axis("off")
    else:
        ax.pie(values, labels=labels, autopct="%1.1f%%", colors=colors or [COLOR_MOTHER, COLOR_FATHER])
        ax.axis("equal")
    if subtitle:
        fig.text(0.5, 0.02, subtitle, ha="center", va="bottom", fontsize=16, fontweight='bold')
    fig.savefig(filename, bbox_inches="tight")
    plt.close(fig)
    return filename

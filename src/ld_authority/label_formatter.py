"""
Display label composition for search results.

The width and shape of the label are relied on by autocomplete clients,
which truncate on the same boundaries.
"""

from typing import Optional, Sequence

from ld_authority.terms import to_text

MAX_LABEL_LENGTH = 98
TRUNCATED_LENGTH = 96
ELLIPSIS = "..."


def wrap_labels(labels: Optional[Sequence]) -> str:
    """'' for no labels, the label itself for one, '[a, b]' for several."""
    if not labels:
        return ""
    text = ", ".join(to_text(label) for label in labels)
    if len(labels) > 1:
        text = f"[{text}]"
    return text


def full_label(labels: Optional[Sequence] = None, altlabels: Optional[Sequence] = None) -> str:
    """
    Compose the single display label from label and altlabel lists.

    Args:
        labels: Language-resolved label values
        altlabels: Language-resolved altlabel values

    Returns:
        e.g. "[buttermilk, Babeurre] (yummy, délicieux)", truncated to 96
        characters plus '...' when longer than 98, and stripped
    """
    label = wrap_labels(labels)
    if altlabels:
        label += f" ({', '.join(to_text(alt) for alt in altlabels)})"
    if len(label) > MAX_LABEL_LENGTH:
        label = label[:TRUNCATED_LENGTH] + ELLIPSIS
    return label.strip()

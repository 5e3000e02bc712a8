# SPDX-License-Identifier: MIT

COMPLETED_TODO_COLOR = "bright_black"
PENDING_TODO_COLOR = "yellow"
OVERDUE_COLOR = "red"
WORKSPACE_COLOR = "plum1"
ERROR_COLOR = "red"


def urgency_color(urgency: float) -> str:
    """Map urgency 1-5 onto a cool-to-hot color."""
    if urgency >= 4.5:
        return "bright_red"
    if urgency >= 3.5:
        return "dark_orange"
    if urgency >= 2.5:
        return "gold"
    if urgency >= 1.5:
        return "spring_green"
    return "cyan"

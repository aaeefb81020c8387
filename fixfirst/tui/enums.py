from enum import Enum

from fixfirst.rules.models import Severity


class UIStyle(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    YELLOW = "yellow"
    RED = "red"
    CYAN = "cyan"
    MAGENTA = "magenta"
    DIM = "dim"
    WHITE = "white"


SEVERITY_STYLE = {
    Severity.INFO: UIStyle.CYAN.value,
    Severity.WARNING: UIStyle.YELLOW.value,
    Severity.ERROR: UIStyle.RED.value,
    Severity.CRITICAL: UIStyle.MAGENTA.value,
}

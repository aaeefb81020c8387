from fixfirst.tui.renderers import RulesConsoleUI

__all__ = ["RulesConsoleUI"]

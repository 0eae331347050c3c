"""
UI module - PySide6 window and widgets.
"""

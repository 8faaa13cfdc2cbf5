"""Shortcut tables: component and module types offered as presets."""

"""CLI module - tpl command."""

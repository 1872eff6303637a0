"""Small pure helpers shared by the pipeline."""

from .templates import is_blank, resolve_template, template_variables

__all__ = ["is_blank", "resolve_template", "template_variables"]

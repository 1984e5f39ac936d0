"""Declarative dashboard configuration and rendering helpers.

Dashboard items in the UI are driven by a parsed configuration document rather
than bespoke view logic. This package contains the schema, validation,
rendering and assembly utilities used by the dashboard views.
"""

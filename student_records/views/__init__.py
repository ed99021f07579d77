"""View rendering module for HTML templates.

This module handles all HTML/template rendering logic, separate from routers.
Views take a snapshot of the data to show and render Jinja2 templates to strings.
"""

"""Kyros Discovery.

Backend logic for the Kyros website: the 5 Whys discovery tool, static case
study and offering content, environment validation and the contact form
integration.
"""

__version__ = "0.1.0"

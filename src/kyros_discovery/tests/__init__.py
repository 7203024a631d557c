"""
Kyros Discovery Test Package.

Test categories:
- test_config.py: Configuration and environment variable loading
- test_models.py: Pydantic model validation
- test_classifier.py: Keyword matching and result synthesis
- test_controller.py: Wizard step transitions and analysis lifecycle
- test_presenter.py: Card flags, prompts and result formatting
- test_content.py: Case study and offering lookups
- test_formspree.py: Endpoint resolution and form submission
- test_env_validator.py: Environment rule checks and CLI
- test_main.py: Discovery CLI
- test_logging_utils.py: Formatters and log context
"""

__all__ = []

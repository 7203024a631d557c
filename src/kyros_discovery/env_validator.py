#!/usr/bin/env python3
"""Environment configuration validator.

Checks that a site's .env file is complete before build or deployment:
required and production-only variables, provider-specific credentials and a
few security recommendations.

Usage:
    kyros-validate-env
    kyros-validate-env --env-file .env.staging
    python -m kyros_discovery.env_validator --project-root /srv/site
"""

import argparse
import os
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Optional, Pattern, Sequence, Tuple

from dotenv import dotenv_values

from .logging_utils import get_logger, setup_logging
from .models import EMAIL_REGEX

logger = get_logger(__name__)

EnvVars = Mapping[str, str]


@dataclass(frozen=True)
class ValidationRule:
    """Constraints for one environment variable."""

    description: str = ""
    required: bool = False
    recommended: bool = False
    valid_values: Optional[Tuple[str, ...]] = None
    pattern: Optional[Pattern[str]] = None
    min_length: Optional[int] = None


@dataclass(frozen=True)
class ConditionalGroup:
    """Rules that only apply when ``condition`` holds for the loaded variables."""

    name: str
    condition: Callable[[EnvVars], bool]
    variables: Dict[str, ValidationRule]


@dataclass
class ValidationReport:
    """Errors and warnings collected for one environment."""

    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def extend(self, errors: Sequence[str], warnings: Sequence[str]) -> None:
        self.errors.extend(errors)
        self.warnings.extend(warnings)


BASE_RULES: Dict[str, ValidationRule] = {
    "APP_ENV": ValidationRule(
        required=True,
        valid_values=("development", "staging", "production"),
        description="Application environment",
    ),
    "APP_URL": ValidationRule(
        required=True,
        pattern=re.compile(r"^https?://.+"),
        description="Application base URL",
    ),
}

PRODUCTION_RULES: Dict[str, ValidationRule] = {
    "EMAIL_PROVIDER": ValidationRule(
        required=True,
        valid_values=("sendgrid", "mailgun", "resend"),
        description="Email service provider",
    ),
    "EMAIL_NOTIFICATION_TO": ValidationRule(
        required=True,
        pattern=EMAIL_REGEX,
        description="Email notification recipient",
    ),
    "FORMSPREE_FORM_ID": ValidationRule(
        required=True,
        description="Formspree form identifier",
    ),
    "SESSION_SECRET": ValidationRule(
        required=True,
        min_length=32,
        description="Session encryption secret (required in production)",
    ),
}

CONDITIONAL_GROUPS: Tuple[ConditionalGroup, ...] = (
    ConditionalGroup(
        name="sendgrid",
        condition=lambda env: env.get("EMAIL_PROVIDER") == "sendgrid",
        variables={
            "SENDGRID_API_KEY": ValidationRule(
                required=True,
                pattern=re.compile(r"^SG\."),
                description="SendGrid API key",
            ),
            "SENDGRID_FROM_EMAIL": ValidationRule(
                required=True,
                pattern=EMAIL_REGEX,
                description="SendGrid from email",
            ),
        },
    ),
    ConditionalGroup(
        name="mailgun",
        condition=lambda env: env.get("EMAIL_PROVIDER") == "mailgun",
        variables={
            "MAILGUN_API_KEY": ValidationRule(
                required=True,
                pattern=re.compile(r"^key-"),
                description="Mailgun API key",
            ),
            "MAILGUN_DOMAIN": ValidationRule(
                required=True,
                description="Mailgun domain",
            ),
        },
    ),
    ConditionalGroup(
        name="resend",
        condition=lambda env: env.get("EMAIL_PROVIDER") == "resend",
        variables={
            "RESEND_API_KEY": ValidationRule(
                required=True,
                pattern=re.compile(r"^re_"),
                description="Resend API key",
            ),
        },
    ),
    ConditionalGroup(
        name="agents",
        condition=lambda env: any(
            env.get(key) for key in ("GITHUB_TOKEN", "OPENAI_API_KEY", "ANTHROPIC_API_KEY")
        ),
        variables={
            "AGENT_SECRET_KEY": ValidationRule(
                required=True,
                min_length=32,
                description="Agent authentication secret",
            ),
        },
    ),
)

SECURITY_RULES: Dict[str, ValidationRule] = {
    "SESSION_SECRET": ValidationRule(
        recommended=True,
        min_length=32,
        description="Session encryption secret",
    ),
    "CORS_ALLOWED_ORIGINS": ValidationRule(
        recommended=True,
        description="CORS allowed origins",
    ),
}


def load_env_file(env_path) -> Dict[str, str]:
    """Load key/value pairs from a dotenv file.

    Returns:
        The parsed variables, or an empty dict if the file does not exist.
        Keys declared without a value are skipped.
    """
    path = Path(env_path)
    if not path.exists():
        return {}
    return {
        key: value for key, value in dotenv_values(path).items() if value is not None
    }


def validate_variable(
    key: str,
    value: Optional[str],
    rule: ValidationRule,
) -> Tuple[List[str], List[str]]:
    """Check one variable against its rule.

    Returns:
        Tuple of (errors, warnings).
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not value or not value.strip():
        if rule.required:
            errors.append(f"{key} is required but not set")
        elif rule.recommended:
            warnings.append(f"{key} is recommended but not set")
        return errors, warnings

    if rule.valid_values and value not in rule.valid_values:
        errors.append(f"{key} must be one of: {', '.join(rule.valid_values)}")

    if rule.pattern is not None and not rule.pattern.search(value):
        errors.append(f"{key} does not match required pattern")

    if rule.min_length and len(value) < rule.min_length:
        errors.append(f"{key} must be at least {rule.min_length} characters long")

    return errors, warnings


def _apply_rules(
    report: ValidationReport,
    env_vars: EnvVars,
    rules: Mapping[str, ValidationRule],
) -> None:
    for key, rule in rules.items():
        report.extend(*validate_variable(key, env_vars.get(key), rule))


def validate_environment(env_vars: EnvVars) -> ValidationReport:
    """Validate a set of environment variables against every rule group.

    Production rules apply only when APP_ENV is "production"; each
    conditional group applies only when its condition holds.
    """
    report = ValidationReport()

    _apply_rules(report, env_vars, BASE_RULES)

    if env_vars.get("APP_ENV") == "production":
        _apply_rules(report, env_vars, PRODUCTION_RULES)

    for group in CONDITIONAL_GROUPS:
        if group.condition(env_vars):
            logger.debug("Conditional rules active", extra={"group": group.name})
            _apply_rules(report, env_vars, group.variables)

    _apply_rules(report, env_vars, SECURITY_RULES)

    logger.debug(
        "Environment validated",
        extra={"errors": len(report.errors), "warnings": len(report.warnings)},
    )
    return report


def default_env_file(app_env: Optional[str] = None) -> str:
    """Name of the env file to check for the given (or current) environment."""
    if app_env is None:
        app_env = os.environ.get("APP_ENV", "")
    return ".env.production" if app_env == "production" else ".env"


def print_report(report: ValidationReport) -> None:
    """Print validation errors and warnings."""
    if report.errors:
        print("\n✗ Validation errors:")
        for error in report.errors:
            print(f"  • {error}")

    if report.warnings:
        print("\n! Warnings:")
        for warning in report.warnings:
            print(f"  • {warning}")

    if report.valid:
        print("\n✓ Environment configuration is valid!")
        if report.warnings:
            print("Consider addressing the warnings above for better security")
    else:
        print("\n✗ Environment configuration has errors")
        print("See docs/ENVIRONMENT.md for configuration help")


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kyros-validate-env",
        description="Validate the site's environment configuration.",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        default=None,
        help="Env file to check (default: .env, or .env.production when APP_ENV=production)",
    )
    parser.add_argument(
        "--project-root",
        type=str,
        default=".",
        help="Directory the env file is resolved against (default: current directory)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Validate an env file and report the outcome.

    Returns:
        Exit code (0 when valid, 1 otherwise).
    """
    args = create_parser().parse_args(argv)
    setup_logging(level="DEBUG" if args.debug else "WARNING", structured=False)

    print("Validating environment configuration...\n")

    env_file = args.env_file or default_env_file()
    env_path = Path(args.project_root) / env_file
    print(f"Checking: {env_file}")

    if not env_path.exists():
        print(f"✗ Environment file {env_file} not found")
        print(f"Copy .env.template to {env_file} and configure it")
        return 1

    report = validate_environment(load_env_file(env_path))
    print_report(report)
    return 0 if report.valid else 1


if __name__ == "__main__":
    sys.exit(main())

"""
awslogin - AWS profile credential broker

Decides how a named AWS profile authenticates (IAM Identity Center SSO,
long-term keys + MFA, or plain keys), drives that flow, and writes the
resulting short-lived credentials back to the shared AWS config so every
other tool picks them up.
"""

__all__ = ["__version__"]

__version__ = "1.4.0"

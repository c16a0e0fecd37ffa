"""AdGuard GitOps Controller: reconcile declared AdGuard Home configuration."""

__version__ = "0.1.0"

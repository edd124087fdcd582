"""Allow ``python -m referral_registry``."""

from referral_registry.cli import app

if __name__ == "__main__":
    app()

"""Email channel registry.

``get_mailer()`` hands out a process-wide adapter chosen by ``EMAIL_BACKEND``:
``console`` (log only, the development default), ``smtp`` or ``fake``.
Tests swap in their own adapter with ``set_mailer()``.
"""

from storefront import config
from storefront.notification.email_port import EmailPort

_current_mailer: EmailPort | None = None


def _build_mailer(backend: str) -> EmailPort:
    if backend == "smtp":
        from storefront.notification.smtp_email import SmtpEmailAdapter

        return SmtpEmailAdapter(
            host=config.SMTP_HOST,
            port=config.SMTP_PORT,
            username=config.SMTP_USER,
            password=config.SMTP_PASSWORD,
            sender=config.SMTP_FROM,
        )
    if backend == "fake":
        from storefront.notification.fake_email import FakeEmailAdapter

        return FakeEmailAdapter()
    if backend == "console":
        from storefront.notification.console_email import ConsoleEmailAdapter

        return ConsoleEmailAdapter()
    raise ValueError(f"Unknown email backend: {backend}")


def get_mailer() -> EmailPort:
    """Return the active email adapter, building it on first use."""
    global _current_mailer
    if _current_mailer is None:
        _current_mailer = _build_mailer(config.EMAIL_BACKEND)
    return _current_mailer


def set_mailer(mailer: EmailPort) -> None:
    """Override the active email adapter (useful for tests)."""
    global _current_mailer
    _current_mailer = mailer


def reset_mailer() -> None:
    """Forget the active adapter so the next call rebuilds the default."""
    global _current_mailer
    _current_mailer = None

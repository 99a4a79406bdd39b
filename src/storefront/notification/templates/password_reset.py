"""Password reset template: carries the single-use reset token."""


class PasswordResetTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        token = context["token"]
        ttl_minutes = context.get("ttl_minutes", 60)
        return {
            "subject": "Reset your password",
            "body": (
                "We received a request to reset your password.\n\n"
                f"Your reset token is: {token}\n\n"
                f"It expires in {ttl_minutes} minutes. If you did not ask for this, ignore this email."
            ),
        }

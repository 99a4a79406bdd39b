"""Order confirmation template: sent once an order has been paid for."""


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_id = context.get("order_id", "N/A")
        customer_name = context.get("customer_name") or "there"
        currency = context.get("currency", "USD")
        total = context.get("total", 0.0)
        lines = context.get("items", [])

        item_lines = "\n".join(
            f"  - {line['product_name']} x{line['quantity']} @ {currency} {line['unit_price']:.2f}" for line in lines
        )
        return {
            "subject": f"Order #{order_id} Confirmed",
            "body": (
                f"Hi {customer_name},\n\n"
                f"Thank you for your order #{order_id}.\n\n"
                f"{item_lines}\n\n"
                f"Order Total: {currency} {total:.2f}\n\n"
                "We'll let you know when it ships."
            ),
        }

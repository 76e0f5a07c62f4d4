"""Order mail templates."""


class OrderConfirmationTemplate:
    @staticmethod
    def render(context: dict) -> dict:
        order_number = context["order_number"]
        currency = context.get("currency", "INR")
        lines = "\n".join(
            f"  - {item['name']} x{item['quantity']} @ {currency} {item['unit_price']:.2f}"
            for item in context.get("items", [])
        )
        estimate = context.get("estimated_delivery")
        eta = f"Estimated delivery: {estimate}\n\n" if estimate else ""
        return {
            "subject": f"Order {order_number} confirmed",
            "body": (
                f"Hi {context.get('customer_name') or 'there'},\n\n"
                f"Thanks for your order {order_number}.\n\n"
                f"{lines}\n\n"
                f"Subtotal: {currency} {context['subtotal']:.2f}\n"
                f"Shipping: {currency} {context['shipping']:.2f}\n"
                f"Discount: {currency} {context['discount']:.2f}\n"
                f"Total: {currency} {context['total']:.2f}\n\n"
                f"{eta}"
                "We'll let you know when it ships."
            ),
        }

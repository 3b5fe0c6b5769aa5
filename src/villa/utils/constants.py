import os

AWS_REGION = os.environ.get("AWS_REGION", "ap-south-1")

INVOICE_TAX_PERCENT = int(os.environ.get("INVOICE_TAX_PERCENT", "12"))

# "standard" or "published"; REFUND_TIERS ("14:100,7:50") overrides both
REFUND_POLICY = os.environ.get("REFUND_POLICY", "standard")
REFUND_TIERS = os.environ.get("REFUND_TIERS")

MAIL_SENDER = os.environ.get("MAIL_SENDER", "stay@villagulposh.com")
CURRENCY_SYMBOL = "₹"
